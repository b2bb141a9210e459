"""
Row projection of detector diamonds onto horizontal intervals.
"""

from typing import Optional, Tuple
import numpy as np
from numpy.typing import NDArray

from sensor_sweep.detectors import Detector, DetectorField, ValidationError
from sensor_sweep.merge import Interval


def _check_bound(bound: Optional[int]) -> None:
    if bound is not None and bound < 0:
        raise ValidationError(f"bound must be non-negative, got {bound}")


def project(
    detector: Detector,
    row: int,
    bound: Optional[int] = None
) -> Optional[Interval]:
    """
    Project a detector's diamond onto a single row.

    The diamond meets row ``row`` in the x-range
    ``[x - h, x + h]`` where ``h = reach - |y - row|``.

    Parameters:
        detector: Detector to project
        row: Row index (may be negative)
        bound: Optional inclusive upper coordinate; when given the interval
               is clamped to [0, bound]

    Returns:
        Covered Interval, or None if the diamond does not reach the row or
        the clamped interval is empty

    Raises:
        ValidationError: If bound is negative
    """
    _check_bound(bound)

    vertical = abs(detector.position.y - row)
    if vertical > detector.reach:
        return None

    horizontal = detector.reach - vertical
    low = detector.position.x - horizontal
    high = detector.position.x + horizontal

    if bound is not None:
        return clamp_interval(low, high, bound)

    return Interval(low, high)


def clamp_interval(low: int, high: int, bound: int) -> Optional[Interval]:
    """
    Clamp an inclusive range to [0, bound].

    Parameters:
        low: Range start
        high: Range end
        bound: Inclusive upper coordinate

    Returns:
        Clamped Interval, or None if nothing of the range lies in [0, bound]
    """
    low = max(low, 0)
    high = min(high, bound)
    if low > high:
        return None
    return Interval(low, high)


def project_row(
    field: DetectorField,
    row: int,
    bound: Optional[int] = None
) -> Tuple[NDArray[np.int64], NDArray[np.int64]]:
    """
    Project every detector of a field onto a row in one vectorized pass.

    Equivalent to calling ``project`` for each detector and dropping the
    ``None`` results, but without per-detector Python overhead. The search
    driver calls this once per row.

    Parameters:
        field: Detector snapshot
        row: Row index (may be negative)
        bound: Optional inclusive upper coordinate for clamping to [0, bound]

    Returns:
        Tuple of (lows, highs), each shape (M,) with M <= len(field), in
        detector order. Only reached, non-empty projections are included.

    Raises:
        ValidationError: If bound is negative
    """
    _check_bound(bound)

    horizontal = field.reaches - np.abs(field.ys - row)
    reached = horizontal >= 0

    lows = field.xs[reached] - horizontal[reached]
    highs = field.xs[reached] + horizontal[reached]

    if bound is not None:
        lows = np.maximum(lows, 0)
        highs = np.minimum(highs, bound)
        non_empty = lows <= highs
        lows = lows[non_empty]
        highs = highs[non_empty]

    return lows, highs
