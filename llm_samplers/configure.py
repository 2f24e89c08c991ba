"""
Sampler option metadata and generic option access.

Configurable samplers describe their tunable parameters with a fixed,
ordered list of typed option slots. External tooling (command line flags,
configuration files) uses this description to discover, read and update
parameters without knowing anything about the concrete sampler class.
"""

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union

from .constants import OPTION_ASSIGNMENT, OPTION_SEPARATORS
from .errors import ConfigurationError, InternalError, ValidationError

OptionValue = Union[int, float]


class SamplerOptionType(Enum):
    """Type tag for a sampler option."""

    FLOAT = "float"
    UINT = "uint"


@dataclass(frozen=True)
class SamplerOptionMetadata:
    """Key, description and type of one sampler option."""

    key: str
    description: Optional[str]
    option_type: SamplerOptionType


@dataclass(frozen=True)
class SamplerMetadata:
    """Name, description and ordered options of a sampler type."""

    name: str
    description: Optional[str] = None
    options: List[SamplerOptionMetadata] = field(default_factory=list)


def coerce_option_value(option: SamplerOptionMetadata, value: Any) -> OptionValue:
    """
    Convert a raw value to the type an option expects.

    Strings are parsed, so values coming from the command line or from
    environment variables can be passed straight through.

    Raises:
        ValidationError: If the value does not fit the option type
    """
    details = {"key": option.key, "value": value, "expected_type": option.option_type.value}

    if isinstance(value, bool):
        raise ValidationError(f"Option '{option.key}' does not accept booleans", details=details)

    if option.option_type is SamplerOptionType.UINT:
        if isinstance(value, str):
            try:
                value = int(value.strip())
            except ValueError:
                raise ValidationError(
                    f"Option '{option.key}' must be an unsigned integer", details=details
                ) from None
        elif isinstance(value, float) and value.is_integer():
            value = int(value)
        if not isinstance(value, int) or value < 0:
            raise ValidationError(f"Option '{option.key}' must be an unsigned integer", details=details)
        return value

    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            raise ValidationError(f"Option '{option.key}' must be a number", details=details) from None
    if not isinstance(value, (int, float)) or math.isnan(value):
        raise ValidationError(f"Option '{option.key}' must be a number", details=details)
    return float(value)


class SamplerOptions:
    """
    Ordered, typed accessors for the options of one sampler instance.

    Slot ``i`` pairs ``metadata[i]`` with the sampler attribute that holds its
    value. The object borrows the sampler and should not be kept around
    longer than the sampler itself.
    """

    def __init__(self, sampler: "ConfigurableSampler", slots: Sequence[Tuple[SamplerOptionMetadata, str]]):
        self._sampler = sampler
        self._slots = list(slots)

    @classmethod
    def build_options(
        cls,
        sampler: "ConfigurableSampler",
        options: Sequence[SamplerOptionMetadata],
        attributes: Sequence[str],
    ) -> "SamplerOptions":
        """Pair option metadata with attribute names, position by position."""
        if len(options) != len(attributes):
            raise InternalError(
                "Option metadata and option attributes differ in length",
                details={"options": len(options), "attributes": len(attributes)},
            )
        return cls(sampler, zip(options, attributes))

    @property
    def metadata(self) -> List[SamplerOptionMetadata]:
        return [option for option, _ in self._slots]

    def keys(self) -> List[str]:
        return [option.key for option, _ in self._slots]

    def get(self, index: int) -> OptionValue:
        _, attribute = self._slots[index]
        return getattr(self._sampler, attribute)

    def set(self, index: int, value: Any) -> None:
        """
        Set option ``index`` to ``value``.

        The value is coerced to the option type and the sampler gets a chance
        to reject it; a rejected value leaves the previous one in place.
        """
        option, attribute = self._slots[index]
        new_value = coerce_option_value(option, value)
        old_value = getattr(self._sampler, attribute)
        setattr(self._sampler, attribute, new_value)
        try:
            self._sampler.validate_options()
        except ValidationError:
            setattr(self._sampler, attribute, old_value)
            raise

    def restore(self, values: Sequence[OptionValue]) -> None:
        """Write back values taken from ``get``, bypassing coercion and validation."""
        for (_, attribute), value in zip(self._slots, values):
            setattr(self._sampler, attribute, value)

    def find(self, key: str) -> int:
        """
        Resolve a key, or an unambiguous prefix of one, to a slot index.

        Raises:
            ConfigurationError: If no key or more than one key matches
        """
        keys = self.keys()
        if key in keys:
            return keys.index(key)

        matches = [i for i, candidate in enumerate(keys) if candidate.startswith(key)]
        if len(matches) == 1:
            return matches[0]
        if not matches:
            raise ConfigurationError(
                f"Unknown option '{key}'", details={"key": key, "available": keys}
            )
        raise ConfigurationError(
            f"Ambiguous option '{key}'",
            details={"key": key, "matches": [keys[i] for i in matches]},
        )

    def get_option(self, key: str) -> OptionValue:
        return self.get(self.find(key))

    def set_option(self, key: str, value: Any) -> None:
        self.set(self.find(key), value)

    def items(self) -> List[Tuple[str, OptionValue]]:
        return [(option.key, getattr(self._sampler, attribute)) for option, attribute in self._slots]

    def as_dict(self) -> Dict[str, OptionValue]:
        return dict(self.items())

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self) -> Iterator[Tuple[SamplerOptionMetadata, OptionValue]]:
        for option, attribute in self._slots:
            yield option, getattr(self._sampler, attribute)


class ConfigurableSampler:
    """
    Mixin for samplers that expose their options generically.

    Subclasses list the attribute names backing their options in
    ``OPTION_ATTRIBUTES``, in the same order as the options in their
    metadata.
    """

    OPTION_ATTRIBUTES: Tuple[str, ...] = ()

    def sampler_metadata(self) -> SamplerMetadata:
        raise NotImplementedError

    def validate_options(self) -> None:
        """Raise ValidationError if the current option values are out of range."""

    def sampler_options(self) -> SamplerOptions:
        return SamplerOptions.build_options(
            self, self.sampler_metadata().options, self.OPTION_ATTRIBUTES
        )

    def configure(self, option_string: str) -> "ConfigurableSampler":
        """
        Update options from a string such as ``"p=0.9:min_keep=2"``.

        Options are separated by ``:`` or ``,``. Each item is either
        ``key=value`` or a bare value; bare values go to the option following
        the previously assigned one, starting with the first option. Keys may
        be abbreviated to any unambiguous prefix.

        Returns:
            The sampler itself, to allow chaining
        """
        options = self.sampler_options()
        assignments = []
        position = 0

        separators = "[" + re.escape("".join(OPTION_SEPARATORS)) + "]"
        for item in re.split(separators, option_string):
            item = item.strip()
            if not item:
                continue

            if OPTION_ASSIGNMENT in item:
                key, value = item.split(OPTION_ASSIGNMENT, 1)
                index = options.find(key.strip())
            else:
                if position >= len(options):
                    raise ConfigurationError(
                        f"Too many option values for sampler '{self.sampler_metadata().name}'",
                        details={"options": option_string, "available": options.keys()},
                    )
                index, value = position, item
            assignments.append((index, value.strip()))
            position = index + 1

        saved = [options.get(index) for index in range(len(options))]
        try:
            for index, value in assignments:
                options.set(index, value)
        except ValidationError:
            options.restore(saved)
            raise
        return self
