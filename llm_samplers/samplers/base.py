"""
Base sampler interface.

This module defines the abstract Sampler interface that all filtering
implementations must follow.
"""

from abc import ABC, abstractmethod

from ..types import Logits


class Sampler(ABC):
    """Abstract base class for logits filtering strategies."""

    @abstractmethod
    def sample(self, logits: Logits) -> Logits:
        """
        Filter the candidate tokens in place.

        Args:
            logits: Candidates sorted by score in descending order. The
                probabilities may be stale; a sampler that needs them calls
                ``logits.ensure_softmax()`` itself.

        Returns:
            The same buffer, possibly truncated

        Raises:
            SamplerError: If the buffer violates an invariant the sampler
                relies on
        """
        pass
