"""Helpers shared by benchmark targets: inputs, memory usage, base class."""

from support.generators import get_random_values, get_random_values_from, aggregate
from support.memory_usage import MemorySample, MemoryUsageTracker
from support.base import Benchmark, benchmark_methods

__all__ = [
    "get_random_values",
    "get_random_values_from",
    "aggregate",
    "MemorySample",
    "MemoryUsageTracker",
    "Benchmark",
    "benchmark_methods",
]
