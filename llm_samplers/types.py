"""
Candidate token containers shared by all samplers.

A Logits buffer holds the candidate tokens for one sampling step, sorted
by raw score in descending order, together with lazily computed softmax
probabilities.
"""

import math
from dataclasses import dataclass
from typing import Hashable, Iterable, Iterator, List, Optional, Sequence, Union

import numpy as np
import torch

from .errors import InternalError, ValidationError


@dataclass
class Logit:
    """A single candidate: token id, raw score and derived probability."""

    token_id: Hashable
    logit: float
    prob: float = 0.0


class Logits:
    """
    Ordered collection of candidate tokens for one sampling step.

    Entries are kept sorted by ``logit`` in descending order. The ``prob``
    fields are only meaningful while ``softmax_valid`` is set; any mutation
    that changes the probability denominator must clear the flag so the next
    consumer recomputes it through ``ensure_softmax``.
    """

    def __init__(self, entries: Optional[Iterable[Logit]] = None, softmax_valid: bool = False):
        self._entries: List[Logit] = list(entries) if entries is not None else []
        self._softmax_valid = softmax_valid

    @classmethod
    def from_scores(
        cls,
        scores: Iterable[float],
        token_ids: Optional[Sequence[Hashable]] = None,
    ) -> "Logits":
        """
        Build a buffer from raw scores in any order.

        Args:
            scores: Raw model scores
            token_ids: Token ids matching ``scores`` (defaults to positions)

        Returns:
            Buffer sorted descending by score, ties kept in input order
        """
        values = np.asarray(list(scores), dtype=np.float64)
        if token_ids is None:
            token_ids = range(len(values))
        elif len(token_ids) != len(values):
            raise ValidationError(
                "Number of token ids does not match number of scores",
                details={"token_ids": len(token_ids), "scores": len(values)},
            )

        order = np.argsort(-values, kind="stable")
        return cls(Logit(token_ids[i], float(values[i])) for i in order.tolist())

    @classmethod
    def from_tensor(cls, logits: Union[torch.Tensor, np.ndarray]) -> "Logits":
        """
        Build a buffer from a vocabulary-sized vector of scores.

        Args:
            logits: 1-D tensor or array of token logits from the model

        Returns:
            Buffer whose token ids are vocabulary indices
        """
        tensor = torch.as_tensor(logits).detach().to(device="cpu", dtype=torch.float64)
        if tensor.dim() != 1:
            raise ValidationError(
                "Expected a 1-D logits vector",
                details={"shape": tuple(tensor.shape)},
            )

        sorted_logits, sorted_indices = torch.sort(tensor, descending=True, stable=True)
        return cls(
            Logit(token_id, score)
            for token_id, score in zip(sorted_indices.tolist(), sorted_logits.tolist())
        )

    @classmethod
    def from_probabilities(
        cls,
        probs: Sequence[float],
        token_ids: Optional[Sequence[Hashable]] = None,
    ) -> "Logits":
        """
        Build a buffer from an already sorted probability distribution.

        The probabilities are stored as given and marked valid; logits are set
        to their natural log so that a later softmax reproduces them.
        """
        if token_ids is None:
            token_ids = range(len(probs))
        elif len(token_ids) != len(probs):
            raise ValidationError(
                "Number of token ids does not match number of probabilities",
                details={"token_ids": len(token_ids), "probs": len(probs)},
            )

        entries = []
        previous = math.inf
        for token_id, prob in zip(token_ids, probs):
            prob = float(prob)
            if not 0.0 <= prob <= 1.0:
                raise ValidationError(
                    f"Probability {prob} is outside [0, 1]",
                    details={"token_id": token_id, "prob": prob},
                )
            if prob > previous:
                raise ValidationError(
                    "Probabilities must be sorted in descending order",
                    details={"token_id": token_id, "prob": prob, "previous": previous},
                )
            previous = prob
            logit = math.log(prob) if prob > 0.0 else -math.inf
            entries.append(Logit(token_id, logit, prob))

        return cls(entries, softmax_valid=True)

    @property
    def softmax_valid(self) -> bool:
        return self._softmax_valid

    def set_softmax(self, valid: bool) -> None:
        """Mark the stored probabilities as current or stale."""
        self._softmax_valid = valid

    def ensure_softmax(self) -> "Logits":
        """
        Compute probabilities over the current entries if they are stale.

        Raises:
            InternalError: If the buffer is empty
        """
        if self._softmax_valid:
            return self
        if not self._entries:
            raise InternalError("Cannot compute softmax over an empty logits buffer")

        scores = np.fromiter(
            (entry.logit for entry in self._entries),
            dtype=np.float64,
            count=len(self._entries),
        )
        # Subtract the max for numerical stability
        exp_scores = np.exp(scores - scores.max())
        probs = exp_scores / exp_scores.sum()

        for entry, prob in zip(self._entries, probs.tolist()):
            entry.prob = prob
        self._softmax_valid = True
        return self

    def truncate(self, n: int) -> None:
        """Keep only the first ``n`` entries. Leaves the softmax flag alone."""
        if n < len(self._entries):
            del self._entries[n:]

    def scale(self, divisor: float) -> None:
        """Divide every score by ``divisor`` and mark probabilities stale."""
        for entry in self._entries:
            entry.logit = entry.logit / divisor
        self._softmax_valid = False

    def token_ids(self) -> List[Hashable]:
        return [entry.token_id for entry in self._entries]

    def scores(self) -> List[float]:
        return [entry.logit for entry in self._entries]

    def probabilities(self) -> List[float]:
        return [entry.prob for entry in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index):
        return self._entries[index]

    def __iter__(self) -> Iterator[Logit]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"Logits(len={len(self._entries)}, softmax_valid={self._softmax_valid})"
