"""Uniform random vectors and matrices of floats."""

from __future__ import annotations

import random

__all__ = ["REAL_RANDOM", "generate", "generate_matrix"]

REAL_RANDOM = 0
"""Seed value that asks for non-reproducible randomness."""


def _engine(seed: int) -> random.Random:
    return random.Random() if seed == REAL_RANDOM else random.Random(seed)


def _check(min_value: float, max_value: float, *sizes: int) -> None:
    if any(size < 0 for size in sizes):
        raise ValueError("size must not be negative")
    if min_value > max_value:
        raise ValueError("min_value must not exceed max_value")


def _draw(rng: random.Random, min_value: float, max_value: float) -> float:
    return min_value + (max_value - min_value) * rng.random()


def generate(
    dim: int, min_value: float, max_value: float, seed: int = REAL_RANDOM
) -> list[float]:
    """Return ``dim`` values drawn uniformly from ``[min_value, max_value)``.

    A ``seed`` of :data:`REAL_RANDOM` gives fresh randomness; any other value
    gives a reproducible sequence.
    """
    _check(min_value, max_value, dim)
    rng = _engine(seed)
    return [_draw(rng, min_value, max_value) for _ in range(dim)]


def generate_matrix(
    height: int,
    column: int,
    min_value: float,
    max_value: float,
    seed: int = REAL_RANDOM,
) -> list[list[float]]:
    """Return a ``height`` x ``column`` matrix of uniform values in ``[min_value, max_value)``."""
    _check(min_value, max_value, height, column)
    rng = _engine(seed)
    return [[_draw(rng, min_value, max_value) for _ in range(column)] for _ in range(height)]