"""Vector distance measures and a calculator that applies them."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Sequence

from cgraph.utils import CGraphError

__all__ = [
    "Distance",
    "EuclideanDistance",
    "CosineDistance",
    "InnerProductDistance",
    "DistanceCalculator",
]


def _dot(v1: Sequence[float], v2: Sequence[float]) -> float:
    return sum(a * b for a, b in zip(v1, v2))


class Distance(ABC):
    """Base class for a distance between two vectors."""

    @abstractmethod
    def calc(self, v1: Sequence[float], v2: Sequence[float]) -> float:
        """Return the distance between ``v1`` and ``v2``."""

    def check(self, v1: Sequence[float] | None, v2: Sequence[float] | None) -> None:
        """Raise :class:`CGraphError` if the inputs cannot be measured."""
        if v1 is None or v2 is None:
            raise CGraphError("input is nullptr")
        if len(v1) * len(v2) == 0:
            raise CGraphError("input dim error")

    def normalize(self, v: Sequence[float]) -> list[float]:
        """Return ``v`` scaled to unit length."""
        total = sum(x * x for x in v)
        if total == 0:
            raise CGraphError("cannot normalize a zero vector")
        factor = 1 / math.sqrt(total)
        return [x * factor for x in v]


class EuclideanDistance(Distance):
    """Euclidean distance; squared when ``need_sqrt`` is False."""

    def __init__(self, need_sqrt: bool = True) -> None:
        self.need_sqrt = need_sqrt

    def calc(self, v1: Sequence[float], v2: Sequence[float]) -> float:
        result = sum((a - b) ** 2 for a, b in zip(v1, v2))
        return math.sqrt(result) if self.need_sqrt else result

    def check(self, v1: Sequence[float] | None, v2: Sequence[float] | None) -> None:
        if v1 is None or v2 is None:
            raise CGraphError("input is nullptr")
        if len(v1) != len(v2) or len(v1) * len(v2) == 0:
            raise CGraphError("euclidean distance dim error")


class CosineDistance(Distance):
    """Cosine of the angle between two vectors."""

    def calc(self, v1: Sequence[float], v2: Sequence[float]) -> float:
        dot = _dot(v1, v2)
        norm1 = sum(a * a for a, _ in zip(v1, v2))
        norm2 = sum(b * b for _, b in zip(v1, v2))
        denominator = math.sqrt(norm1) * math.sqrt(norm2)
        if denominator == 0:
            return math.nan
        return dot / denominator


class InnerProductDistance(Distance):
    """Inner-product distance for normalised data: 0 is identical, 0.5 orthogonal."""

    def calc(self, v1: Sequence[float], v2: Sequence[float]) -> float:
        return (1 - _dot(v1, v2)) * 0.5


class DistanceCalculator:
    """Applies a :class:`Distance`, optionally validating inputs first."""

    def __init__(self, distance: Distance | None = None, need_check: bool = False) -> None:
        self.distance = distance if distance is not None else EuclideanDistance()
        self.need_check = need_check

    def calculate(self, v1: Sequence[float], v2: Sequence[float]) -> float:
        """Return the distance between ``v1`` and ``v2``."""
        if self.need_check:
            self.distance.check(v1, v2)
        return self.distance.calc(v1, v2)

    def calculate_batch(
        self, query: Sequence[float], nodes: Sequence[Sequence[float]]
    ) -> list[float]:
        """Return the distance from ``query`` to each of ``nodes``, in order."""
        return [self.calculate(query, node) for node in nodes]

    def normalize(self, v: Sequence[float]) -> list[float]:
        """Return ``v`` normalised by the configured distance."""
        if self.need_check:
            self.distance.check(v, v)
        return self.distance.normalize(v)