"""
Sampler chain: runs a buffer through an ordered list of samplers.
"""

from typing import Iterable, Iterator, List, Optional

from .errors import chain_logger as logger
from .samplers.base import Sampler
from .types import Logits


class SamplerChain(Sampler):
    """
    Ordered pipeline of samplers.

    Each stage receives the buffer returned by the previous one. The first
    error aborts the remaining stages and is re-raised unchanged.
    """

    def __init__(self, samplers: Optional[Iterable[Sampler]] = None):
        self.samplers: List[Sampler] = list(samplers) if samplers is not None else []

    def push(self, sampler: Sampler) -> "SamplerChain":
        self.samplers.append(sampler)
        return self

    def __iadd__(self, sampler: Sampler) -> "SamplerChain":
        return self.push(sampler)

    def sample(self, logits: Logits) -> Logits:
        for stage, sampler in enumerate(self.samplers):
            before = len(logits)
            logits = sampler.sample(logits)
            logger.debug(f"Stage {stage} ({sampler!r}): {before} -> {len(logits)} candidates")
        return logits

    def __len__(self) -> int:
        return len(self.samplers)

    def __iter__(self) -> Iterator[Sampler]:
        return iter(self.samplers)

    def __repr__(self) -> str:
        return f"SamplerChain({self.samplers!r})"
