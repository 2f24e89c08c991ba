"""
Temperature sampling implementation.
"""

from ..configure import ConfigurableSampler, SamplerMetadata, SamplerOptionMetadata, SamplerOptionType
from ..constants import DEFAULT_TEMPERATURE
from ..errors import ValidationError
from ..types import Logits
from .base import Sampler


class TemperatureSampler(Sampler, ConfigurableSampler):
    """
    Temperature sampling strategy.

    Divides logits by a given temperature value. Higher temperatures flatten
    the distribution, lower temperatures make it sharper, approaching greedy.
    Dividing by a positive number keeps the score order, so the buffer stays
    sorted. A temperature of 0 or 1 leaves the logits untouched.
    """

    OPTION_ATTRIBUTES = ("temperature",)

    def __init__(self, temperature: float = DEFAULT_TEMPERATURE):
        """
        Initialize the TemperatureSampler.

        Args:
            temperature: The temperature value to apply to logits (default: 0.8).
                         Must be a non-negative float.
        """
        self.temperature = temperature
        self.validate_options()

    def validate_options(self) -> None:
        if self.temperature < 0:
            raise ValidationError(
                "Temperature must be a non-negative float.",
                details={"temperature": self.temperature},
            )

    def sample(self, logits: Logits) -> Logits:
        if self.temperature in (0.0, 1.0):
            return logits
        logits.scale(self.temperature)
        return logits

    def sampler_metadata(self) -> SamplerMetadata:
        return SamplerMetadata(
            name="temperature",
            description=(
                "Temperature value to use. Higher values make the output more random, "
                "lower values make it more deterministic."
            ),
            options=[
                SamplerOptionMetadata(
                    key="temperature",
                    description="Divisor applied to every logit. 0 or 1 disables the sampler.",
                    option_type=SamplerOptionType.FLOAT,
                ),
            ],
        )

    def __repr__(self) -> str:
        return f"TemperatureSampler(temperature={self.temperature})"
