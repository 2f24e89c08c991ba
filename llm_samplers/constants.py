"""
Constants for the sampler implementations.

Default parameter values and configuration names used across the package.
"""

# Sampler Defaults
DEFAULT_TOP_P = 0.9  # Target cumulative probability for top-p
DEFAULT_TAIL_FREE_Z = 1.0  # Tail-free is disabled at z >= 1
DEFAULT_TOP_K = 40
DEFAULT_TEMPERATURE = 0.8
DEFAULT_MIN_KEEP = 1  # Minimum number of candidates a sampler keeps

# Option String Parsing
OPTION_SEPARATORS = (":", ",")
OPTION_ASSIGNMENT = "="
SAMPLER_NAME_SEPARATOR = ":"  # "top-p:p=0.9" splits into name and options

# Environment Variable Names
ENV_LOG_LEVEL = "LLM_SAMPLERS_LOG_LEVEL"
ENV_LOG_FILE = "LLM_SAMPLERS_LOG_FILE"

# Logging
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
