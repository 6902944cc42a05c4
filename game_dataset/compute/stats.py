# game_dataset/compute/stats.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

import numpy as np


@dataclass
class StatCounter:
    """
    Mergeable summary statistics (count / mean / variance / min / max).

    Each partition is summarized with numpy (``of``); partition summaries
    are combined with ``merge`` (parallel variance update), so the result
    does not depend on partition evaluation order beyond float rounding.
    """

    count: int = 0
    mean: float = 0.0
    m2: float = 0.0
    max: float = -math.inf
    min: float = math.inf

    @classmethod
    def of(cls, values: Iterable[float]) -> "StatCounter":
        arr = np.fromiter(values, dtype=np.float64)
        if arr.size == 0:
            return cls()

        mean = float(arr.mean())
        return cls(
            count=int(arr.size),
            mean=mean,
            m2=float(np.square(arr - mean).sum()),
            max=float(arr.max()),
            min=float(arr.min()),
        )

    def merge(self, other: "StatCounter") -> "StatCounter":
        if other.count == 0:
            return self
        if self.count == 0:
            self.count, self.mean, self.m2 = other.count, other.mean, other.m2
            self.max, self.min = other.max, other.min
            return self

        total = self.count + other.count
        delta = other.mean - self.mean
        self.mean += delta * other.count / total
        self.m2 += other.m2 + delta * delta * self.count * other.count / total
        self.count = total
        self.max = max(self.max, other.max)
        self.min = min(self.min, other.min)
        return self

    # --------------------------------------------------
    @property
    def sum(self) -> float:
        return self.mean * self.count

    @property
    def variance(self) -> float:
        """Population variance."""
        return self.m2 / self.count if self.count else math.nan

    @property
    def stdev(self) -> float:
        return math.sqrt(self.variance) if self.count else math.nan

    def __str__(self) -> str:
        return (
            f"(count: {self.count}, mean: {self.mean:f}, stdev: {self.stdev:f}, "
            f"max: {self.max:f}, min: {self.min:f})"
        )
