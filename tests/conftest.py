"""Shared fixtures."""

import random

import pytest

from querykit.examples import build_example_animals


@pytest.fixture
def rng():
    """Seeded random source owned by the test."""
    return random.Random(20240601)


@pytest.fixture
def random_numbers(rng):
    """Factory for lists of random ints in [low, high)."""

    def make(size, low=0, high=100):
        return [rng.randrange(low, high) for _ in range(size)]

    return make


@pytest.fixture
def animals():
    return build_example_animals()
