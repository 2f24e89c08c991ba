"""
Factory for creating sampler instances by name.

This module maps sampler names (as reported by their metadata) to sampler
classes and builds configured samplers and sampler chains from option
strings or configuration dictionaries.
"""

from typing import Any, Dict, Iterable, List, Type, Union

from .chain import SamplerChain
from .configure import ConfigurableSampler, SamplerMetadata
from .constants import SAMPLER_NAME_SEPARATOR
from .errors import ConfigurationError
from .samplers import Sampler, TailFreeSampler, TemperatureSampler, TopKSampler, TopPSampler

SAMPLER_CLASSES = (TopPSampler, TailFreeSampler, TopKSampler, TemperatureSampler)

SamplerDefinition = Union[str, Dict[str, Any], Sampler]


def _normalize_name(name: str) -> str:
    return name.strip().lower().replace("_", "-")


class SamplerFactory:
    """Factory for creating and managing sampler instances."""

    @staticmethod
    def registry() -> Dict[str, Type[ConfigurableSampler]]:
        """Return sampler classes keyed by their metadata name."""
        return {cls().sampler_metadata().name: cls for cls in SAMPLER_CLASSES}

    @staticmethod
    def available_samplers() -> List[SamplerMetadata]:
        return [cls().sampler_metadata() for cls in SAMPLER_CLASSES]

    @staticmethod
    def create(name: str, **options: Any) -> ConfigurableSampler:
        """
        Create a sampler by name and apply option values.

        Args:
            name: Sampler name such as "top-p" ("top_p" is accepted too)
            **options: Option values keyed by option name or unambiguous prefix

        Returns:
            Configured sampler instance

        Raises:
            ConfigurationError: If the sampler or an option is unknown
            ValidationError: If an option value is invalid
        """
        registry = SamplerFactory.registry()
        sampler_cls = registry.get(_normalize_name(name))
        if sampler_cls is None:
            raise ConfigurationError(
                f"Unknown sampler: {name}. Available: {list(registry.keys())}",
                details={"sampler": name, "available": list(registry.keys())},
            )

        sampler = sampler_cls()
        sampler_options = sampler.sampler_options()
        for key, value in options.items():
            sampler_options.set_option(key, value)
        return sampler

    @staticmethod
    def from_string(definition: str) -> ConfigurableSampler:
        """Create a sampler from a string such as "top-p:p=0.9:min_keep=2"."""
        name, _, option_string = definition.partition(SAMPLER_NAME_SEPARATOR)
        sampler = SamplerFactory.create(name)
        if option_string:
            sampler.configure(option_string)
        return sampler

    @staticmethod
    def create_chain(definitions: Iterable[SamplerDefinition]) -> SamplerChain:
        """
        Build a sampler chain.

        Args:
            definitions: Sampler strings, dictionaries with a "type" key plus
                option values, or ready-made sampler instances

        Returns:
            Chain running the samplers in the given order
        """
        chain = SamplerChain()
        for definition in definitions:
            if isinstance(definition, Sampler):
                chain.push(definition)
            elif isinstance(definition, str):
                chain.push(SamplerFactory.from_string(definition))
            elif isinstance(definition, dict):
                options = dict(definition)
                sampler_type = options.pop("type", None)
                if sampler_type is None:
                    raise ConfigurationError(
                        "Sampler definition is missing 'type'",
                        details={"definition": definition},
                    )
                chain.push(SamplerFactory.create(sampler_type, **options))
            else:
                raise ConfigurationError(
                    f"Unsupported sampler definition: {definition!r}",
                    details={"definition": repr(definition)},
                )
        return chain
