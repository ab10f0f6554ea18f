"""Bounded per-metric time series."""

from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from dockeagle.constants.limits import MAX_HISTORY_SAMPLES


@dataclass(frozen=True)
class Sample:
    """One point-in-time reading of a metric."""

    timestamp: float
    value: float


class History:
    """Insertion-ordered, capacity-bounded list of samples.

    When an add pushes the length past ``capacity`` the oldest samples are
    dropped; survivors keep their relative order. Timestamps are not
    required to be strictly increasing.
    """

    def __init__(self, capacity: int = MAX_HISTORY_SAMPLES) -> None:
        if capacity < 1:
            raise ValueError("History capacity must be at least 1")
        self._capacity = capacity
        self._samples: list[Sample] = []

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def samples(self) -> tuple[Sample, ...]:
        return tuple(self._samples)

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[Sample]:
        return iter(tuple(self._samples))

    def __repr__(self) -> str:
        return f"History(len={len(self._samples)}, capacity={self._capacity})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, History):
            return NotImplemented
        return self._capacity == other._capacity and self._samples == other._samples

    def __deepcopy__(self, memo: dict[int, Any]) -> History:
        # Samples are immutable, sharing them is safe.
        return self.copy()

    def copy(self) -> History:
        clone = History(self._capacity)
        clone._samples = list(self._samples)
        return clone

    def add(self, sample: Sample) -> bool:
        """Append a sample, trimming the oldest entries past capacity.

        Samples whose timestamp truncates to the unix epoch carry no real
        reading yet and are rejected.

        Returns:
            True if the sample was stored, False if it was rejected.
        """
        if int(sample.timestamp) == 0:
            return False
        self._samples.append(sample)
        if len(self._samples) > self._capacity:
            del self._samples[: len(self._samples) - self._capacity]
        return True

    def series_xy(self) -> tuple[list[float], list[float]]:
        """Return parallel lists of timestamps and values in insertion order."""
        xs = [sample.timestamp for sample in self._samples]
        ys = [sample.value for sample in self._samples]
        return xs, ys

    def _window(self, start: float, until: float) -> Iterator[Sample]:
        return (s for s in self._samples if start <= s.timestamp <= until)

    def range_min_max(self, start: float, until: float) -> tuple[float, float]:
        """Return ``(min, max)`` of the values with timestamp in ``[start, until]``.

        An empty window yields ``(+inf, -inf)``; callers must treat it as
        "no data".
        """
        low = math.inf
        high = -math.inf
        for sample in self._window(start, until):
            low = min(low, sample.value)
            high = max(high, sample.value)
        return low, high

    def range_average(self, start: float, until: float) -> float:
        """Return the mean of the values with timestamp in ``[start, until]``.

        An empty window yields NaN; callers must guard with ``math.isnan``.
        """
        total = 0.0
        count = 0
        for sample in self._window(start, until):
            total += sample.value
            count += 1
        if count == 0:
            return math.nan
        return total / count
