"""Rolling sample windows for per-pass simulation timings."""

from __future__ import annotations

import numpy as np


class SampleWindow:
    """Keep the most recent ``capacity`` samples in a numpy ring buffer.

    Order is not preserved once the buffer wraps; percentiles and means do
    not need it.
    """

    def __init__(self, capacity: int = 300) -> None:
        if capacity <= 0:
            msg = f"capacity must be positive, got {capacity}"
            raise ValueError(msg)
        self.capacity = capacity
        self._buffer = np.zeros(capacity, dtype=np.float64)
        self._total = 0

    @property
    def count(self) -> int:
        return min(self._total, self.capacity)

    def record(self, value: float) -> None:
        self._buffer[self._total % self.capacity] = value
        self._total += 1

    def values(self) -> np.ndarray:
        return self._buffer[: self.count]

    def percentile(self, q: float) -> float:
        if self.count == 0:
            return 0.0
        return float(np.percentile(self.values(), q))

    @property
    def mean(self) -> float:
        if self.count == 0:
            return 0.0
        return float(self.values().mean())

    @property
    def peak(self) -> float:
        if self.count == 0:
            return 0.0
        return float(self.values().max())

    def summary(self) -> str:
        if self.count == 0:
            return "No samples"
        return (
            f"p50={self.percentile(50):.2f} p95={self.percentile(95):.2f} "
            f"max={self.peak:.2f}"
        )
