"""
Public API for row coverage queries.

Every query follows the same pipeline: project each detector onto the row,
merge the projections, then read the answer off the merged coverage. Each
stage returns new values and no state is kept between rows.
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import numpy as np

from sensor_sweep.debug import log_row_coverage
from sensor_sweep.detectors import DetectorInput, ValidationError, build_field
from sensor_sweep.geometry import Point, manhattan_many
from sensor_sweep.merge import Interval, coverage_length, interval_contains, merge_bounds
from sensor_sweep.projection import project_row


@dataclass(frozen=True)
class RowCoverage:
    """
    Merged coverage of a single row.

    Attributes:
        row: Row index the coverage belongs to
        intervals: Disjoint, non-touching intervals sorted by low
        bound: Inclusive upper coordinate the projections were clamped to
               ([0, bound]), or None for an unbounded query
    """
    row: int
    intervals: Tuple[Interval, ...]
    bound: Optional[int] = None

    @property
    def covered_count(self) -> int:
        """Number of covered integer positions on the row."""
        return coverage_length(self.intervals)

    @property
    def is_complete(self) -> bool:
        """True if a bounded row is covered on all of [0, bound]."""
        if self.bound is None:
            return False
        return self.covered_count == self.bound + 1

    def contains(self, x: int) -> bool:
        """Check if position x on this row is covered."""
        return interval_contains(list(self.intervals), x)

    def first_gap(self) -> Optional[Point]:
        """
        First uncovered position of a bounded row.

        Returns:
            Point of the leftmost uncovered x in [0, bound], or None if the
            row is fully covered

        Raises:
            ValidationError: If the coverage is unbounded
        """
        if self.bound is None:
            raise ValidationError("first_gap requires a bounded row coverage")

        if not self.intervals or self.intervals[0].low > 0:
            return Point(0, self.row)
        if self.is_complete:
            return None
        return Point(self.intervals[0].high + 1, self.row)


def row_coverage(
    detectors: DetectorInput,
    row: int,
    bound: Optional[int] = None
) -> RowCoverage:
    """
    Compute the merged coverage of one row.

    Parameters:
        detectors: Detectors in any format accepted by build_field
        row: Row index (may be negative)
        bound: Optional inclusive upper coordinate; projections are clamped
               to [0, bound]

    Returns:
        RowCoverage for the row

    Raises:
        ValidationError: If detectors are malformed or bound is negative
    """
    field = build_field(detectors)
    lows, highs = project_row(field, row, bound)
    merged = merge_bounds(lows, highs)
    log_row_coverage(row, merged, bound)
    return RowCoverage(row=row, intervals=tuple(merged), bound=bound)


def count_excluded(detectors: DetectorInput, row: int) -> int:
    """
    Count positions on a row that cannot hold a hidden target.

    A position is excluded when some detector's diamond covers it and it is
    not itself a known reference point.

    Parameters:
        detectors: Detectors in any format accepted by build_field
        row: Row index (may be negative)

    Returns:
        Number of excluded x positions across the whole integer line.
        An empty detector set excludes nothing and returns 0.

    Example:
        >>> detectors = [((8, 7), (2, 10))]
        >>> count_excluded(detectors, 10)
        12
    """
    field = build_field(detectors)
    coverage = row_coverage(field, row)
    merged = list(coverage.intervals)

    known = [
        point for point in field.references_on_row(row)
        if interval_contains(merged, point.x)
    ]
    return coverage.covered_count - len(known)


def find_gap(
    detectors: DetectorInput,
    row: int,
    max_coordinate: int
) -> Optional[Point]:
    """
    Find the uncovered position of a row within [0, max_coordinate].

    Parameters:
        detectors: Detectors in any format accepted by build_field
        row: Row index
        max_coordinate: Inclusive upper coordinate of the search square

    Returns:
        Point of the first uncovered x on the row, or None if the whole of
        [0, max_coordinate] is covered. If no detector reaches the row the
        gap is at x = 0.

    Raises:
        ValidationError: If max_coordinate is negative
    """
    if max_coordinate < 0:
        raise ValidationError(
            f"max_coordinate must be non-negative, got {max_coordinate}"
        )
    return row_coverage(detectors, row, max_coordinate).first_gap()


def is_covered(detectors: DetectorInput, point: Point) -> bool:
    """
    Check whether any detector's diamond covers a point.

    Parameters:
        detectors: Detectors in any format accepted by build_field
        point: Point to test

    Returns:
        True if the point is within reach of at least one detector
    """
    field = build_field(detectors)
    if field.is_empty:
        return False
    positions = np.column_stack((field.xs, field.ys))
    distances = manhattan_many(positions, point.as_array())
    return bool(np.any(distances <= field.reaches))
