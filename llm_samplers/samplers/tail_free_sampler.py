"""
Tail-free sampling implementation.

Tail-free sampling looks at the curvature of the sorted probability curve
and cuts the candidate list where the curve flattens out, i.e. at the
"elbow" where the long tail of unlikely tokens begins.
"""

import numpy as np

from ..configure import ConfigurableSampler, SamplerMetadata, SamplerOptionMetadata, SamplerOptionType
from ..constants import DEFAULT_MIN_KEEP, DEFAULT_TAIL_FREE_Z
from ..errors import InternalError, ValidationError
from ..types import Logits
from .base import Sampler

# Fewer candidates than this leave no second derivative to work with
MIN_TOKENS_FOR_TAIL_FREE = 3


class TailFreeSampler(Sampler, ConfigurableSampler):
    """
    Tail-free sampling.

    Computes the absolute second discrete derivative of the probabilities,
    normalizes it to sum to one and keeps candidates until its cumulative
    sum exceeds ``z``. Note that the comparison is strict and the kept count
    is the index at which it is reached, unlike top-p.
    """

    OPTION_ATTRIBUTES = ("z", "min_keep")

    def __init__(self, z: float = DEFAULT_TAIL_FREE_Z, min_keep: int = DEFAULT_MIN_KEEP):
        """
        Initialize the tail-free sampler.

        Args:
            z: Curvature mass threshold; 1.0 or higher disables the sampler
            min_keep: Minimum number of tokens to keep (default: 1)
        """
        self.z = z
        self.min_keep = min_keep
        self.validate_options()

    def validate_options(self) -> None:
        if self.z < 0.0:
            raise ValidationError("Tail-free (z) must be non-negative.", details={"z": self.z})
        if self.min_keep < 0:
            raise ValidationError(
                "min_keep must be a non-negative integer.", details={"min_keep": self.min_keep}
            )

    def sample(self, logits: Logits) -> Logits:
        """
        Cut the candidates where the probability curve flattens out.

        Args:
            logits: Candidate buffer sorted by descending logit

        Returns:
            The same buffer, truncated in place

        Raises:
            InternalError: If the second derivatives sum to zero, as they do
                for uniform or linearly decreasing probabilities
        """
        if self.z >= 1.0 or len(logits) < MIN_TOKENS_FOR_TAIL_FREE:
            return logits

        logits.ensure_softmax()
        probs = np.asarray(logits.probabilities(), dtype=np.float64)

        first_derivs = probs[:-1] - probs[1:]
        second_derivs = np.abs(first_derivs[:-1] - first_derivs[1:])
        total = second_derivs.sum()
        # Rounding leaves residue of a few ulps on a linear ramp
        if total <= np.finfo(np.float64).eps * len(probs):
            raise InternalError(
                "Second derivatives of the probabilities sum to zero",
                details={"candidates": len(logits), "z": self.z},
            )

        cum_sums = np.cumsum(second_derivs / total)
        stops = np.flatnonzero(
            (cum_sums > self.z) & (np.arange(len(cum_sums)) >= self.min_keep)
        )
        keep = int(stops[0]) if stops.size else len(logits)

        if keep < len(logits):
            logits.truncate(keep)
            logits.set_softmax(False)
        return logits

    def sampler_metadata(self) -> SamplerMetadata:
        return SamplerMetadata(
            name="tail-free",
            description=(
                "An approach to sampling that attempts to maximize natural-sounding "
                "output by removing the tail of the distribution once the second "
                "derivative of the probabilities stops changing."
            ),
            options=[
                SamplerOptionMetadata(
                    key="z",
                    description="Cumulative curvature threshold. 1.0 or higher disables the sampler.",
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
        return f"TailFreeSampler(z={self.z}, min_keep={self.min_keep})"
