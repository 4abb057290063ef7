"""Tests for deterministic random inputs and aggregate."""

import random
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from bench.errors import InvalidArgument
from support.generators import aggregate, get_random_values, get_random_values_from


def test_same_seed_same_values():
    a = get_random_values(10, 42, non_negative=True)
    b = get_random_values(10, 42, non_negative=True)
    assert a == b
    assert len(a) == 10
    assert all(0 <= v < 10 for v in a)


def test_different_seed_differs():
    assert get_random_values(100, 1) != get_random_values(100, 2)


@pytest.mark.parametrize("size", [1, 2, 7, 10, 101])
def test_centered_range(size):
    values = get_random_values(size, 3)
    assert len(values) == size
    assert all(-(size // 2) <= v < size - size // 2 for v in values)


def test_centered_values_go_negative():
    values = get_random_values(1000, 5)
    assert min(values) < 0
    assert max(values) >= 0


@pytest.mark.parametrize("size", [0, -1, -100])
def test_invalid_size(size):
    with pytest.raises(InvalidArgument):
        get_random_values(size, 42)


def test_invalid_size_type():
    with pytest.raises(InvalidArgument):
        get_random_values(2.5, 42)
    with pytest.raises(InvalidArgument):
        get_random_values(True, 42)


def test_invalid_seed():
    with pytest.raises(InvalidArgument):
        get_random_values(10, "42")


def test_invalid_argument_is_value_error():
    with pytest.raises(ValueError):
        get_random_values(0, 1)


def test_from_rng_matches_seeded():
    assert get_random_values_from(20, True, random.Random(9)) == get_random_values(20, 9, non_negative=True)


def test_aggregate():
    assert aggregate(0, 5) == 5
    assert aggregate(5, 5) == 0
    assert aggregate(aggregate(3, 9), 9) == 3
