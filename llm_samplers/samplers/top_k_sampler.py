"""
Top-K sampling implementation.
"""

from ..configure import ConfigurableSampler, SamplerMetadata, SamplerOptionMetadata, SamplerOptionType
from ..constants import DEFAULT_MIN_KEEP, DEFAULT_TOP_K
from ..errors import ValidationError
from ..types import Logits
from .base import Sampler


class TopKSampler(Sampler, ConfigurableSampler):
    """
    Top-K sampling strategy.

    Keeps the k highest scoring tokens (or ``min_keep`` if that is larger).
    """

    OPTION_ATTRIBUTES = ("k", "min_keep")

    def __init__(self, k: int = DEFAULT_TOP_K, min_keep: int = DEFAULT_MIN_KEEP):
        """
        Initialize the TopKSampler.

        Args:
            k: The number of top tokens to keep. 0 disables the sampler.
            min_keep: Minimum number of tokens to keep (default: 1).
        """
        self.k = k
        self.min_keep = min_keep
        self.validate_options()

    def validate_options(self) -> None:
        if self.k < 0:
            raise ValidationError("Top-K (k) must be a non-negative integer.", details={"k": self.k})
        if self.min_keep < 0:
            raise ValidationError(
                "min_keep must be a non-negative integer.", details={"min_keep": self.min_keep}
            )

    def sample(self, logits: Logits) -> Logits:
        if self.k == 0:
            return logits

        keep = max(self.k, self.min_keep)
        if keep < len(logits):
            logits.truncate(keep)
            logits.set_softmax(False)
        return logits

    def sampler_metadata(self) -> SamplerMetadata:
        return SamplerMetadata(
            name="top-k",
            description="Keeps the k highest scoring tokens and eliminates the rest.",
            options=[
                SamplerOptionMetadata(
                    key="k",
                    description="Number of tokens to keep. 0 disables the sampler.",
                    option_type=SamplerOptionType.UINT,
                ),
                SamplerOptionMetadata(
                    key="min_keep",
                    description="Minimum number of tokens to keep after sampling.",
                    option_type=SamplerOptionType.UINT,
                ),
            ],
        )

    def __repr__(self) -> str:
        return f"TopKSampler(k={self.k}, min_keep={self.min_keep})"
