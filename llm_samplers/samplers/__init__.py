"""
Sampler implementations for different logits filtering strategies.

This package provides a unified interface for filtering methods including
top-p, tail-free, top-k and temperature.
"""

from .base import Sampler
from .tail_free_sampler import TailFreeSampler
from .temperature_sampler import TemperatureSampler
from .top_k_sampler import TopKSampler
from .top_p_sampler import TopPSampler

__all__ = [
    "Sampler",
    "TailFreeSampler",
    "TemperatureSampler",
    "TopKSampler",
    "TopPSampler",
]
