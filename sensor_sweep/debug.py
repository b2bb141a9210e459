"""
Debug logging helpers.

The library logs through standard ``logging`` loggers under the
``sensor_sweep`` namespace and never configures handlers on import.
``setup_debug_logging`` attaches a stream handler for interactive use.
"""

import logging
from typing import Iterable, Optional

from sensor_sweep.geometry import Point
from sensor_sweep.merge import Interval

LOGGER_NAME = "sensor_sweep"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(LOGGER_NAME)

_debug_handler: Optional[logging.Handler] = None


def setup_debug_logging(level: int = logging.DEBUG) -> logging.Logger:
    """
    Route sensor_sweep log records to stderr.

    Calling this more than once replaces the previous handler rather than
    adding another one.

    Parameters:
        level: Logging level for the package logger

    Returns:
        The package logger
    """
    global _debug_handler

    if _debug_handler is not None:
        logger.removeHandler(_debug_handler)

    _debug_handler = logging.StreamHandler()
    _debug_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(_debug_handler)
    logger.setLevel(level)
    return logger


def disable_debug_logging() -> None:
    """Remove the handler installed by setup_debug_logging."""
    global _debug_handler

    if _debug_handler is not None:
        logger.removeHandler(_debug_handler)
        _debug_handler = None
    logger.setLevel(logging.NOTSET)


def format_point(point: Optional[Point]) -> str:
    """Format a point as '(x, y)', or 'none'."""
    if point is None:
        return "none"
    return f"({point.x}, {point.y})"


def format_interval(interval: Interval) -> str:
    """Format an interval as '[low, high]'."""
    return f"[{interval.low}, {interval.high}]"


def format_coverage(intervals: Iterable[Interval]) -> str:
    """Format a merged coverage as a space-separated list of intervals."""
    parts = [format_interval(interval) for interval in intervals]
    return " ".join(parts) if parts else "(empty)"


def log_row_coverage(
    row: int,
    intervals: Iterable[Interval],
    bound: Optional[int] = None
) -> None:
    """Log the merged coverage of a row at DEBUG level."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    suffix = f" within [0, {bound}]" if bound is not None else ""
    logger.debug(f"Row {row}{suffix}: {format_coverage(intervals)}")


def log_search_progress(row: int, max_coordinate: int) -> None:
    """Log search progress at DEBUG level."""
    logger.debug(f"Row {row} out of {max_coordinate}")
