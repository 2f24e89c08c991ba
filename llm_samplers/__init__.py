"""
llm_samplers - pluggable logits filtering for language model sampling.

This package provides a sorted candidate buffer with a lazily computed
softmax, a uniform sampler interface, and filtering samplers (top-p,
tail-free, top-k, temperature) that can be configured generically and
combined into chains.
"""

from .chain import SamplerChain
from .config_schema import (
    ConfigSchema,
    generate_config_template,
    load_chain_config,
    validate_config,
    validate_config_file,
)
from .configure import (
    ConfigurableSampler,
    SamplerMetadata,
    SamplerOptionMetadata,
    SamplerOptions,
    SamplerOptionType,
)
from .constants import (
    DEFAULT_MIN_KEEP,
    DEFAULT_TAIL_FREE_Z,
    DEFAULT_TEMPERATURE,
    DEFAULT_TOP_K,
    DEFAULT_TOP_P,
)
from .errors import (
    ConfigurationError,
    InternalError,
    SamplerError,
    ValidationError,
    setup_logging,
)
from .factory import SamplerFactory
from .samplers import (
    Sampler,
    TailFreeSampler,
    TemperatureSampler,
    TopKSampler,
    TopPSampler,
)
from .types import Logit, Logits

__version__ = "0.1.0"

__all__ = [
    # Candidate buffer
    "Logit",
    "Logits",
    # Sampler classes
    "Sampler",
    "SamplerChain",
    "TailFreeSampler",
    "TemperatureSampler",
    "TopKSampler",
    "TopPSampler",
    # Factory
    "SamplerFactory",
    # Option metadata
    "ConfigurableSampler",
    "SamplerMetadata",
    "SamplerOptionMetadata",
    "SamplerOptions",
    "SamplerOptionType",
    # Configuration
    "ConfigSchema",
    "generate_config_template",
    "load_chain_config",
    "validate_config",
    "validate_config_file",
    # Errors
    "SamplerError",
    "InternalError",
    "ConfigurationError",
    "ValidationError",
    "setup_logging",
    # Constants
    "DEFAULT_MIN_KEEP",
    "DEFAULT_TAIL_FREE_Z",
    "DEFAULT_TEMPERATURE",
    "DEFAULT_TOP_K",
    "DEFAULT_TOP_P",
]
