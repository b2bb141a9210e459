"""
Bounded Gap Search
==================

Search driver for the single uncovered position inside the square
[0, max_coordinate] x [0, max_coordinate]:
- search_gap: Scan rows in order and report the outcome as a GapSearchResult
- locate_unique_gap: Same scan, raising NoGapFoundError when nothing is found
- tuning_frequency: Encode a point as x * multiplier + y

Each row query is independent of every other row, so the scan can be split
into row chunks and run across worker processes (SearchConfig.workers > 1).
Chunks are consumed in row order and the first chunk that reports a gap
wins, so the parallel scan returns the same point as the sequential one.
"""

from __future__ import annotations

import logging
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass

from sensor_sweep.api import find_gap, is_covered
from sensor_sweep.debug import format_point, log_search_progress
from sensor_sweep.detectors import (
    DetectorField,
    DetectorInput,
    ValidationError,
    build_field,
)
from sensor_sweep.geometry import Point

logger = logging.getLogger(__name__)


SAMPLE_ROW = 10
SAMPLE_MAX_COORDINATE = 20
DEFAULT_ROW = 2_000_000
DEFAULT_MAX_COORDINATE = 4_000_000
TUNING_MULTIPLIER = 4_000_000


class NoGapFoundError(Exception):
    """Raised when a bounded search finishes without an uncovered position.

    Attributes:
        max_coordinate: Inclusive bound of the searched square
        rows_scanned: Number of rows examined before giving up
    """

    def __init__(self, max_coordinate: int, rows_scanned: int, reason: str | None = None):
        self.max_coordinate = max_coordinate
        self.rows_scanned = rows_scanned
        message = (
            f"No uncovered position found in [0, {max_coordinate}]² "
            f"after scanning {rows_scanned} rows"
        )
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


@dataclass(frozen=True)
class SearchConfig:
    """Immutable configuration for a bounded gap search.

    Attributes:
        max_coordinate: Default inclusive bound of the search square, used
            when a search call does not pass one explicitly
        multiplier: Factor applied to x when computing the tuning frequency
        workers: Number of worker processes; 1 scans in the calling process
        chunk_size: Rows per task handed to a worker
        progress_interval: Rows between DEBUG progress records; 0 disables them

    Raises:
        ValidationError: If any field is not an integer in its valid range
    """

    max_coordinate: int = DEFAULT_MAX_COORDINATE
    multiplier: int = TUNING_MULTIPLIER
    workers: int = 1
    chunk_size: int = 10_000
    progress_interval: int = 10_000

    def __post_init__(self) -> None:
        _validate_search_config(self)

    @property
    def is_parallel(self) -> bool:
        """True if the search is split across worker processes."""
        return self.workers > 1


def _require_int(name: str, value: object, minimum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(
            f"{name} must be an integer, got {type(value).__name__}"
        )
    if value < minimum:
        raise ValidationError(
            f"{name} must be at least {minimum}, got {value}"
        )


def _validate_search_config(config: SearchConfig) -> None:
    """Validate a SearchConfig instance.

    Raises:
        ValidationError: If any field is invalid
    """
    _require_int("max_coordinate", config.max_coordinate, 0)
    _require_int("multiplier", config.multiplier, 1)
    _require_int("workers", config.workers, 1)
    _require_int("chunk_size", config.chunk_size, 1)
    _require_int("progress_interval", config.progress_interval, 0)


@dataclass(frozen=True)
class GapSearchResult:
    """Outcome of a bounded gap search.

    Attributes:
        point: The uncovered position, or None if every row was covered
        rows_scanned: Rows examined, including the row holding the gap
        max_coordinate: Inclusive bound of the searched square
        multiplier: Factor used for the tuning frequency
    """

    point: Point | None
    rows_scanned: int
    max_coordinate: int
    multiplier: int = TUNING_MULTIPLIER

    def __bool__(self) -> bool:
        """Returns True if a gap was found."""
        return self.point is not None

    @property
    def tuning_frequency(self) -> int | None:
        """Tuning frequency of the found point, or None if not found."""
        if self.point is None:
            return None
        return tuning_frequency(self.point, self.multiplier)


def tuning_frequency(point: Point, multiplier: int = TUNING_MULTIPLIER) -> int:
    """Encode a point as ``point.x * multiplier + point.y``.

    Example:
        >>> tuning_frequency(Point(14, 11))
        56000011
    """
    return point.x * multiplier + point.y


def _scan_rows(
    field: DetectorField,
    start: int,
    stop: int,
    max_coordinate: int,
    progress_interval: int,
) -> tuple[Point | None, int]:
    """Scan rows [start, stop) for a gap.

    Returns:
        Tuple of (gap point or None, rows scanned)
    """
    for row in range(start, stop):
        if progress_interval and row % progress_interval == 0:
            log_search_progress(row, max_coordinate)

        gap = find_gap(field, row, max_coordinate)
        if gap is not None:
            return gap, row - start + 1

    return None, stop - start


def _scan_parallel(
    field: DetectorField,
    max_coordinate: int,
    config: SearchConfig,
) -> tuple[Point | None, int]:
    """Scan all rows in chunks across a process pool.

    Results are read in chunk order; once a chunk reports a gap the chunks
    that have not started yet are cancelled.
    """
    total_rows = max_coordinate + 1
    bounds = [
        (start, min(start + config.chunk_size, total_rows))
        for start in range(0, total_rows, config.chunk_size)
    ]
    logger.debug(
        f"Scanning {total_rows} rows in {len(bounds)} chunks "
        f"with {config.workers} workers"
    )

    rows_scanned = 0
    with ProcessPoolExecutor(max_workers=config.workers) as executor:
        futures = [
            executor.submit(
                _scan_rows, field, start, stop, max_coordinate, config.progress_interval
            )
            for start, stop in bounds
        ]
        try:
            for future in futures:
                point, rows = future.result()
                rows_scanned += rows
                if point is not None:
                    return point, rows_scanned
        finally:
            for future in futures:
                future.cancel()

    return None, rows_scanned


def search_gap(
    detectors: DetectorInput,
    max_coordinate: int | None = None,
    config: SearchConfig | None = None,
) -> GapSearchResult:
    """Scan rows 0..max_coordinate for the first uncovered position.

    Parameters:
        detectors: Detectors in any format accepted by build_field
        max_coordinate: Inclusive bound of the search square; defaults to
            config.max_coordinate
        config: Search configuration; defaults to SearchConfig()

    Returns:
        GapSearchResult; falsy when no row has an uncovered position or the
        detector set is empty

    Raises:
        ValidationError: If detectors are malformed or max_coordinate is negative
    """
    if config is None:
        config = SearchConfig()
    if max_coordinate is None:
        max_coordinate = config.max_coordinate
    if max_coordinate < 0:
        raise ValidationError(
            f"max_coordinate must be non-negative, got {max_coordinate}"
        )

    field = build_field(detectors)
    if field.is_empty:
        logger.warning("Gap search called with no detectors; nothing to scan")
        return GapSearchResult(
            point=None,
            rows_scanned=0,
            max_coordinate=max_coordinate,
            multiplier=config.multiplier,
        )

    if config.is_parallel:
        point, rows_scanned = _scan_parallel(field, max_coordinate, config)
    else:
        point, rows_scanned = _scan_rows(
            field, 0, max_coordinate + 1, max_coordinate, config.progress_interval
        )

    if point is not None:
        if is_covered(field, point):
            logger.warning(f"Reported gap {format_point(point)} is inside a detector diamond")
        logger.info(f"Found gap at {format_point(point)} after {rows_scanned} rows")
    else:
        logger.info(f"No gap found in [0, {max_coordinate}] after {rows_scanned} rows")

    return GapSearchResult(
        point=point,
        rows_scanned=rows_scanned,
        max_coordinate=max_coordinate,
        multiplier=config.multiplier,
    )


def locate_unique_gap(
    detectors: DetectorInput,
    max_coordinate: int,
    config: SearchConfig | None = None,
) -> Point:
    """Locate the unique uncovered position inside [0, max_coordinate]².

    Parameters:
        detectors: Detectors in any format accepted by build_field
        max_coordinate: Inclusive bound of the search square
        config: Optional search configuration (workers, chunking, logging)

    Returns:
        The first uncovered Point in row-major order

    Raises:
        NoGapFoundError: If the detector set is empty or every row is covered
        ValidationError: If detectors are malformed or max_coordinate is negative

    Example:
        >>> point = locate_unique_gap(detectors, 20)
        >>> tuning_frequency(point)
        56000011
    """
    if max_coordinate < 0:
        raise ValidationError(
            f"max_coordinate must be non-negative, got {max_coordinate}"
        )

    field = build_field(detectors)
    if field.is_empty:
        raise NoGapFoundError(max_coordinate, 0, "no detectors supplied")

    result = search_gap(field, max_coordinate, config)
    if result.point is None:
        raise NoGapFoundError(max_coordinate, result.rows_scanned)
    return result.point
