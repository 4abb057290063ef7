"""Deterministic pseudo-random inputs for benchmarks."""

import random

from bench.errors import InvalidArgument


def _check_size(size) -> None:
    if isinstance(size, bool) or not isinstance(size, int):
        raise InvalidArgument(f"size must be an int, got {type(size).__name__}")
    if size <= 0:
        raise InvalidArgument(f"size must be positive, got {size}")


def get_random_values(size: int, seed: int, non_negative: bool = False) -> list[int]:
    """Same (size, seed, non_negative) always gives the same values.

    Values are drawn from [0, size) and, unless non_negative, shifted down by
    size // 2 so they center around zero.
    """
    if isinstance(seed, bool) or not isinstance(seed, int):
        raise InvalidArgument(f"seed must be an int, got {type(seed).__name__}")
    _check_size(size)
    return get_random_values_from(size, non_negative, random.Random(seed))


def get_random_values_from(size: int, non_negative: bool, rng: random.Random) -> list[int]:
    _check_size(size)
    shift = 0 if non_negative else size // 2
    return [rng.randrange(size) - shift for _ in range(size)]


def aggregate(x: int, y: int) -> int:
    """Fold two results so the work producing them cannot be skipped."""
    return x ^ y
