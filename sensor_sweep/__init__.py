"""
Sensor Sweep
============

Coverage of Manhattan-distance detector diamonds on the integer plane.

Public API for counting positions on a row that cannot hold a hidden target,
and for locating the single uncovered position inside a bounded square.
"""

from sensor_sweep.geometry import Point, manhattan
from sensor_sweep.detectors import (
    Detector,
    DetectorField,
    ValidationError,
    build_field,
    normalize_detector_input,
)
from sensor_sweep.merge import Interval, MergedCoverage, merge_intervals, coverage_length
from sensor_sweep.projection import project, project_row
from sensor_sweep.api import RowCoverage, row_coverage, count_excluded, find_gap, is_covered
from sensor_sweep.search import (
    SearchConfig,
    GapSearchResult,
    NoGapFoundError,
    search_gap,
    locate_unique_gap,
    tuning_frequency,
    SAMPLE_ROW,
    SAMPLE_MAX_COORDINATE,
    DEFAULT_ROW,
    DEFAULT_MAX_COORDINATE,
    TUNING_MULTIPLIER,
)
from sensor_sweep.debug import (
    format_point,
    format_interval,
    format_coverage,
    setup_debug_logging,
    disable_debug_logging,
)

__all__ = [
    # Geometry and model
    'Point',
    'manhattan',
    'Detector',
    'DetectorField',
    'ValidationError',
    'build_field',
    'normalize_detector_input',
    # Intervals
    'Interval',
    'MergedCoverage',
    'merge_intervals',
    'coverage_length',
    'project',
    'project_row',
    # Row queries
    'RowCoverage',
    'row_coverage',
    'count_excluded',
    'find_gap',
    'is_covered',
    # Search
    'SearchConfig',
    'GapSearchResult',
    'NoGapFoundError',
    'search_gap',
    'locate_unique_gap',
    'tuning_frequency',
    'SAMPLE_ROW',
    'SAMPLE_MAX_COORDINATE',
    'DEFAULT_ROW',
    'DEFAULT_MAX_COORDINATE',
    'TUNING_MULTIPLIER',
    # Debug utilities
    'format_point',
    'format_interval',
    'format_coverage',
    'setup_debug_logging',
    'disable_debug_logging',
]
__version__ = '0.1.0'
