"""
Top-p (nucleus) sampling implementation.

This module provides top-p filtering, which keeps the smallest prefix of
candidates whose cumulative probability mass is greater than or equal to p.
"""

from ..configure import ConfigurableSampler, SamplerMetadata, SamplerOptionMetadata, SamplerOptionType
from ..constants import DEFAULT_MIN_KEEP, DEFAULT_TOP_P
from ..errors import ValidationError
from ..types import Logits
from .base import Sampler


class TopPSampler(Sampler, ConfigurableSampler):
    """
    Top-p (nucleus) sampling.

    Adds up the token probabilities until the sum is greater or equal to
    ``p`` and at least ``min_keep`` tokens have been encountered. The
    remaining tokens are eliminated. Probabilities are not renormalized;
    the buffer is marked stale instead when anything was removed.
    """

    OPTION_ATTRIBUTES = ("p", "min_keep")

    def __init__(self, p: float = DEFAULT_TOP_P, min_keep: int = DEFAULT_MIN_KEEP):
        """
        Initialize the Top-p sampler.

        Args:
            p: Cumulative probability threshold in (0, 1] (default: 0.9)
            min_keep: Minimum number of tokens to keep (default: 1). Setting
                this to 0 is not recommended.
        """
        self.p = p
        self.min_keep = min_keep
        self.validate_options()

    def validate_options(self) -> None:
        if not 0.0 < self.p <= 1.0:
            raise ValidationError("Top-p (p) must be in (0, 1].", details={"p": self.p})
        if self.min_keep < 0:
            raise ValidationError(
                "min_keep must be a non-negative integer.", details={"min_keep": self.min_keep}
            )

    def sample(self, logits: Logits) -> Logits:
        """
        Truncate the candidates to the top-p nucleus.

        Args:
            logits: Candidate buffer sorted by descending logit

        Returns:
            The same buffer, truncated in place
        """
        if not logits:
            return logits
        logits.ensure_softmax()

        keep = len(logits)
        cum_sum = 0.0
        for idx, logit in enumerate(logits):
            cum_sum += logit.prob
            if cum_sum >= self.p and idx + 1 >= self.min_keep:
                keep = idx + 1
                break

        if keep != len(logits):
            logits.truncate(keep)
            logits.set_softmax(False)
        return logits

    def sampler_metadata(self) -> SamplerMetadata:
        return SamplerMetadata(
            name="top-p",
            description=(
                "This sampler adds up the token probabilities until the value is "
                "greater or equal to p and at least min_keep tokens have been encountered. "
                "The remaining tokens are eliminated."
            ),
            options=[
                SamplerOptionMetadata(
                    key="p",
                    description="Target value for cumulative probabilities.",
                    option_type=SamplerOptionType.FLOAT,
                ),
                SamplerOptionMetadata(
                    key="min_keep",
                    description=(
                        "Minimum number of tokens to keep after sampling. "
                        "Setting this to 0 is not recommended."
                    ),
                    option_type=SamplerOptionType.UINT,
                ),
            ],
        )

    def __repr__(self) -> str:
        return f"TopPSampler(p={self.p}, min_keep={self.min_keep})"
