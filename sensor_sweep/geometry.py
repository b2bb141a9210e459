"""
Geometry utilities for integer points and Manhattan distance.
"""

from dataclasses import dataclass
from typing import Tuple
import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class Point:
    """
    Integer point on the plane.

    Attributes:
        x: Column coordinate (grows to the right)
        y: Row coordinate (grows downward, rows are indexed by y)
    """
    x: int
    y: int

    def as_tuple(self) -> Tuple[int, int]:
        """Return the point as an (x, y) tuple."""
        return (self.x, self.y)

    def as_array(self) -> NDArray[np.int64]:
        """Return the point as an int64 array of shape (2,)."""
        return np.array([self.x, self.y], dtype=np.int64)


def manhattan(a: Point, b: Point) -> int:
    """
    Manhattan (taxicab) distance between two points.

    Parameters:
        a: First point
        b: Second point

    Returns:
        |a.x - b.x| + |a.y - b.y|
    """
    return abs(a.x - b.x) + abs(a.y - b.y)


def manhattan_many(
    points: NDArray[np.int64],
    origin: NDArray[np.int64]
) -> NDArray[np.int64]:
    """
    Manhattan distance from every point to a single origin.

    Parameters:
        points: Array of shape (N, 2) containing (x, y) coordinates
        origin: Array of shape (2,)

    Returns:
        Distances of shape (N,)
    """
    return np.abs(points - origin).sum(axis=-1)
