"""
Detector Data Structures
========================

Core data structures for detector coverage:
- Detector: A detector position paired with its reference point
- DetectorField: Immutable, array-backed snapshot of a detector set
- ValidationError: Raised when detector input is malformed

Detectors are created once from already-parsed input and never mutated.
The reach of a detector (Manhattan distance from its position to its
reference point) is derived on construction.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Union

import numpy as np
from numpy.typing import NDArray

from sensor_sweep.geometry import Point, manhattan


class ValidationError(Exception):
    """Raised when input validation fails."""

    pass


# Largest magnitude the array-backed field can hold
INT64_MAX = int(np.iinfo(np.int64).max)


def _coerce_coordinate(value: Any, name: str) -> int:
    """Convert an integral scalar to a plain int.

    Args:
        value: Candidate coordinate (int or numpy integer)
        name: Label used in the error message

    Raises:
        ValidationError: If value is not an integer
    """
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise ValidationError(
            f"{name} must be an integer, got {type(value).__name__}"
        )
    return int(value)


def _coerce_point(value: Any, name: str) -> Point:
    """Normalize a Point or an (x, y) pair to a Point.

    Args:
        value: A Point, or a 2-element tuple/list/array of integers
        name: Label used in error messages

    Raises:
        ValidationError: If value cannot be interpreted as a point
    """
    if isinstance(value, Point):
        return Point(
            _coerce_coordinate(value.x, f"{name}.x"),
            _coerce_coordinate(value.y, f"{name}.y"),
        )

    if not isinstance(value, (tuple, list, np.ndarray)):
        raise ValidationError(
            f"{name} must be a Point or an (x, y) pair, got {type(value).__name__}"
        )
    if len(value) != 2:
        raise ValidationError(
            f"{name} must have exactly 2 components (x, y), got {len(value)} components"
        )
    return Point(
        _coerce_coordinate(value[0], f"{name}.x"),
        _coerce_coordinate(value[1], f"{name}.y"),
    )


@dataclass(frozen=True)
class Detector:
    """A detector and the reference point that fixes its reach.

    Every integer point within ``reach`` Manhattan distance of ``position``
    is covered by the detector (its diamond).

    Attributes:
        position: The detector's location
        reference: The paired reference point (closest known target)
        reach: Derived Manhattan distance from position to reference

    Raises:
        ValidationError: If either point is malformed
    """

    position: Point
    reference: Point
    reach: int = field(init=False, compare=False)

    def __post_init__(self) -> None:
        """Normalize both points and derive the reach."""
        position = _coerce_point(self.position, "position")
        reference = _coerce_point(self.reference, "reference")
        # Use object.__setattr__ because the dataclass is frozen
        object.__setattr__(self, "position", position)
        object.__setattr__(self, "reference", reference)
        object.__setattr__(self, "reach", manhattan(position, reference))

    def covers(self, point: Point) -> bool:
        """Check whether a point lies inside this detector's diamond."""
        return manhattan(self.position, point) <= self.reach

    @property
    def min_row(self) -> int:
        """Topmost row reached by the diamond."""
        return self.position.y - self.reach

    @property
    def max_row(self) -> int:
        """Bottommost row reached by the diamond."""
        return self.position.y + self.reach


@dataclass(frozen=True, eq=False)
class DetectorField:
    """Read-only snapshot of a detector set backed by numpy arrays.

    A field is built once and then shared by every row query (and by every
    worker process in a parallel search). Nothing in the library mutates it.

    Attributes:
        detectors: The detectors, in input order
        xs: Detector x coordinates, shape (N,)
        ys: Detector y coordinates, shape (N,)
        reaches: Detector reaches, shape (N,)
        references: Distinct reference points
    """

    detectors: tuple[Detector, ...]
    xs: NDArray[np.int64]
    ys: NDArray[np.int64]
    reaches: NDArray[np.int64]
    references: frozenset[Point]

    def __post_init__(self) -> None:
        for arr in (self.xs, self.ys, self.reaches):
            arr.setflags(write=False)

    def __len__(self) -> int:
        return len(self.detectors)

    @property
    def is_empty(self) -> bool:
        """True when the field holds no detectors."""
        return len(self.detectors) == 0

    def references_on_row(self, row: int) -> list[Point]:
        """Distinct reference points lying on the given row, sorted by x."""
        return sorted(
            (p for p in self.references if p.y == row), key=lambda p: p.x
        )


# Type alias for flexible detector input
DetectorInput = Union[
    Sequence[Detector],
    Sequence[tuple[Any, Any]],
    NDArray[np.integer[Any]],
    DetectorField,
]


def normalize_detector_input(detectors: DetectorInput) -> list[Detector]:
    """Normalize supported input formats to a list of Detector objects.

    Supports multiple input formats for ergonomic API:
    - List or tuple of Detector objects (returned as a list)
    - List or tuple of (position, reference) pairs, each point a Point or (x, y)
    - NumPy integer array of shape (N, 4) for [px, py, rx, ry] per row
    - An existing DetectorField (its detectors are returned)

    Args:
        detectors: Detector input in one of the formats above

    Returns:
        List of Detector objects

    Raises:
        ValidationError: If the format is unrecognized
        ValidationError: If a numpy array is not integral or not (N, 4)
        ValidationError: If a pair is malformed
    """
    if isinstance(detectors, DetectorField):
        return list(detectors.detectors)

    if isinstance(detectors, np.ndarray):
        if detectors.ndim != 2:
            raise ValidationError(
                f"NumPy detectors must be 2D array, got shape {detectors.shape}"
            )
        if detectors.shape[1] != 4:
            raise ValidationError(
                f"NumPy detectors must have shape (N, 4), got shape {detectors.shape}"
            )
        if detectors.shape[0] == 0:
            return []
        if not np.issubdtype(detectors.dtype, np.integer):
            raise ValidationError(
                f"NumPy detectors must have an integer dtype, got {detectors.dtype}"
            )
        return [
            Detector(
                position=Point(int(row[0]), int(row[1])),
                reference=Point(int(row[2]), int(row[3])),
            )
            for row in detectors
        ]

    if isinstance(detectors, (list, tuple)):
        result: list[Detector] = []
        for i, item in enumerate(detectors):
            if isinstance(item, Detector):
                result.append(item)
                continue
            if not isinstance(item, (tuple, list)) or len(item) != 2:
                raise ValidationError(
                    f"Detector at index {i} must be a Detector or a "
                    f"(position, reference) pair, got {type(item).__name__}"
                )
            result.append(Detector(position=item[0], reference=item[1]))
        return result

    raise ValidationError(
        f"detectors must be a list, tuple, numpy array or DetectorField, "
        f"got {type(detectors).__name__}"
    )


def validate_detectors(detectors: list[Detector]) -> None:
    """Validate a list of Detector objects.

    Empty lists are allowed (graceful handling).

    Raises:
        ValidationError: If detectors is not a list
        ValidationError: If any element is not a Detector instance
    """
    if not isinstance(detectors, list):
        raise ValidationError(
            f"detectors must be a list, got {type(detectors).__name__}"
        )

    for i, detector in enumerate(detectors):
        if not isinstance(detector, Detector):
            raise ValidationError(
                f"Detector at index {i} must be a Detector instance, "
                f"got {type(detector).__name__}"
            )


def validate_int64_extent(detectors: list[Detector]) -> None:
    """Check that every diamond fits inside the int64 range.

    Row projections are computed on int64 arrays, so a diamond whose
    extreme coordinates (position plus or minus reach) leave that range would
    wrap around silently.

    Raises:
        ValidationError: If any detector extends beyond the int64 range
    """
    for i, detector in enumerate(detectors):
        extent = max(abs(detector.position.x), abs(detector.position.y)) + detector.reach
        if extent > INT64_MAX:
            raise ValidationError(
                f"Detector at index {i} extends beyond the int64 range: "
                f"position {detector.position.as_tuple()}, reach {detector.reach}"
            )


def build_field(detectors: DetectorInput) -> DetectorField:
    """Build an immutable DetectorField from any supported detector input.

    An existing DetectorField is returned unchanged.

    Args:
        detectors: Detector input accepted by normalize_detector_input

    Returns:
        DetectorField snapshot of the detectors

    Raises:
        ValidationError: If the input is malformed
        ValidationError: If a detector does not fit the int64 range
    """
    if isinstance(detectors, DetectorField):
        return detectors

    normalized = normalize_detector_input(detectors)
    validate_detectors(normalized)
    validate_int64_extent(normalized)

    return DetectorField(
        detectors=tuple(normalized),
        xs=np.array([d.position.x for d in normalized], dtype=np.int64),
        ys=np.array([d.position.y for d in normalized], dtype=np.int64),
        reaches=np.array([d.reach for d in normalized], dtype=np.int64),
        references=frozenset(d.reference for d in normalized),
    )
