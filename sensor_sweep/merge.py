"""
Interval merging for row coverage.

Intervals are inclusive integer ranges. Two ranges merge when they overlap
or touch (``next.low <= current.high + 1``), so that a merged coverage only
ever has gaps of at least one uncovered integer between its intervals.
"""

from bisect import bisect_right
from dataclasses import dataclass
from typing import Iterable, List
import numpy as np
from numpy.typing import NDArray

from sensor_sweep.detectors import ValidationError


@dataclass(frozen=True, order=True)
class Interval:
    """
    Contiguous covered range of x-coordinates on a fixed row.

    Attributes:
        low: First covered x (inclusive)
        high: Last covered x (inclusive)

    Ordering: Intervals sort by (low, high).
    """
    low: int
    high: int

    def __post_init__(self):
        if self.low > self.high:
            raise ValidationError(
                f"Interval low must not exceed high, got [{self.low}, {self.high}]"
            )

    @property
    def length(self) -> int:
        """Number of integer positions in the interval."""
        return self.high - self.low + 1

    def contains(self, x: int) -> bool:
        """Check if x lies within the interval."""
        return self.low <= x <= self.high


MergedCoverage = List[Interval]


def merge_intervals(intervals: Iterable[Interval]) -> MergedCoverage:
    """
    Merge intervals into the minimal ordered set of disjoint, non-touching ranges.

    Algorithm:
        1. Sort by (low, high)
        2. Sweep left to right with a current accumulator
        3. If the next range starts at or before current.high + 1, extend
           current.high; otherwise emit current and start a new one
        4. Emit the final accumulator

    Parameters:
        intervals: Intervals in any order; not mutated

    Returns:
        MergedCoverage sorted by low, with next.low > current.high + 1 for
        every consecutive pair. Empty input yields an empty list.

    Complexity: O(n log n) for the sort, O(n) for the sweep.
    """
    ordered = sorted(intervals)
    if not ordered:
        return []

    merged: MergedCoverage = []
    current_low, current_high = ordered[0].low, ordered[0].high

    for interval in ordered[1:]:
        if interval.low <= current_high + 1:
            current_high = max(current_high, interval.high)
        else:
            merged.append(Interval(current_low, current_high))
            current_low, current_high = interval.low, interval.high

    merged.append(Interval(current_low, current_high))
    return merged


def merge_bounds(
    lows: NDArray[np.int64],
    highs: NDArray[np.int64]
) -> MergedCoverage:
    """
    Merge intervals given as parallel arrays of bounds.

    Same result as ``merge_intervals`` on the corresponding Interval objects;
    sorting is done by numpy instead of building Interval objects first.

    Parameters:
        lows: Interval starts, shape (N,)
        highs: Interval ends, shape (N,), with highs[i] >= lows[i]

    Returns:
        MergedCoverage
    """
    if len(lows) != len(highs):
        raise ValidationError(
            f"lows and highs must have the same length, got {len(lows)} and {len(highs)}"
        )
    if len(lows) == 0:
        return []

    # lexsort uses the last key as primary
    order = np.lexsort((highs, lows))
    sorted_lows = lows[order].tolist()
    sorted_highs = highs[order].tolist()

    merged: MergedCoverage = []
    current_low, current_high = sorted_lows[0], sorted_highs[0]

    for low, high in zip(sorted_lows[1:], sorted_highs[1:]):
        if low <= current_high + 1:
            if high > current_high:
                current_high = high
        else:
            merged.append(Interval(current_low, current_high))
            current_low, current_high = low, high

    merged.append(Interval(current_low, current_high))
    return merged


def coverage_length(merged: Iterable[Interval]) -> int:
    """Total number of integer positions covered by disjoint intervals."""
    return sum(interval.length for interval in merged)


def interval_contains(merged: MergedCoverage, x: int) -> bool:
    """
    Check if x is covered by a merged coverage.

    Parameters:
        merged: Sorted, disjoint intervals (output of a merge)
        x: Position to test

    Returns:
        True if some interval contains x
    """
    index = bisect_right(merged, x, key=lambda interval: interval.low) - 1
    return index >= 0 and merged[index].high >= x
