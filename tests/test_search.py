"""
Tests for the bounded gap search: search_gap, locate_unique_gap,
tuning_frequency and SearchConfig.
"""

import logging

import pytest

from sensor_sweep.debug import disable_debug_logging, setup_debug_logging
from sensor_sweep.detectors import Detector, ValidationError, build_field
from sensor_sweep.geometry import Point
from sensor_sweep.search import (
    SAMPLE_MAX_COORDINATE,
    TUNING_MULTIPLIER,
    GapSearchResult,
    NoGapFoundError,
    SearchConfig,
    locate_unique_gap,
    search_gap,
    tuning_frequency,
)


def make_covering_detectors() -> list[Detector]:
    """A single diamond that covers all of [0, 20]²."""
    return [Detector((10, 10), (10, 30))]


# =============================================================================
# tuning_frequency
# =============================================================================

class TestTuningFrequency:
    """Tests for tuning_frequency()."""

    def test_sample(self):
        assert tuning_frequency(Point(14, 11)) == 56000011

    def test_custom_multiplier(self):
        assert tuning_frequency(Point(3, 4), multiplier=10) == 34

    def test_origin(self):
        assert tuning_frequency(Point(0, 0)) == 0

    def test_large_coordinates(self):
        """Python ints do not overflow at the full puzzle scale."""
        point = Point(4_000_000, 4_000_000)
        assert tuning_frequency(point) == 4_000_000 * TUNING_MULTIPLIER + 4_000_000


# =============================================================================
# SearchConfig
# =============================================================================

class TestSearchConfig:
    """Tests for SearchConfig validation."""

    def test_defaults(self):
        config = SearchConfig()
        assert config.max_coordinate == 4_000_000
        assert config.multiplier == TUNING_MULTIPLIER
        assert config.workers == 1
        assert not config.is_parallel

    @pytest.mark.parametrize("kwargs", [
        {"max_coordinate": -1},
        {"multiplier": 0},
        {"workers": 0},
        {"chunk_size": 0},
        {"chunk_size": 1.5},
        {"progress_interval": -1},
        {"workers": True},
        {"max_coordinate": "20"},
    ])
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValidationError):
            SearchConfig(**kwargs)

    def test_is_frozen(self):
        config = SearchConfig()
        with pytest.raises(AttributeError):
            config.workers = 4


# =============================================================================
# search_gap
# =============================================================================

class TestSearchGap:
    """Tests for search_gap()."""

    def test_sample(self, sample_detectors):
        """The sample's gap is found on the twelfth row scanned."""
        result = search_gap(sample_detectors, SAMPLE_MAX_COORDINATE)
        assert result
        assert result.point == Point(14, 11)
        assert result.rows_scanned == 12
        assert result.max_coordinate == 20
        assert result.tuning_frequency == 56000011

    def test_max_coordinate_from_config(self, sample_detectors):
        """Without an explicit bound the config's bound is used."""
        config = SearchConfig(max_coordinate=20)
        result = search_gap(sample_detectors, config=config)
        assert result.point == Point(14, 11)

    def test_multiplier_from_config(self, sample_detectors):
        config = SearchConfig(multiplier=100)
        result = search_gap(sample_detectors, 20, config)
        assert result.tuning_frequency == 14 * 100 + 11

    def test_fully_covered_square(self):
        """A covered square gives a falsy result after scanning every row."""
        result = search_gap(make_covering_detectors(), 20)
        assert not result
        assert result.point is None
        assert result.rows_scanned == 21
        assert result.tuning_frequency is None

    def test_empty_detectors(self):
        """No detectors means nothing is scanned."""
        result = search_gap([], 20)
        assert result == GapSearchResult(point=None, rows_scanned=0, max_coordinate=20)

    def test_accepts_field(self, sample_detectors):
        field = build_field(sample_detectors)
        assert search_gap(field, 20).point == Point(14, 11)

    def test_negative_max_coordinate_rejected(self, sample_detectors):
        with pytest.raises(ValidationError):
            search_gap(sample_detectors, -1)

    def test_parallel_matches_sequential(self, sample_detectors):
        """Chunked multi-process scanning finds the same point."""
        config = SearchConfig(workers=2, chunk_size=5)
        result = search_gap(sample_detectors, 20, config)
        assert result.point == Point(14, 11)
        assert result.rows_scanned == 12

    def test_parallel_no_gap(self):
        config = SearchConfig(workers=2, chunk_size=4)
        result = search_gap(make_covering_detectors(), 20, config)
        assert not result
        assert result.rows_scanned == 21


# =============================================================================
# locate_unique_gap
# =============================================================================

class TestLocateUniqueGap:
    """Tests for locate_unique_gap()."""

    def test_sample(self, sample_detectors):
        point = locate_unique_gap(sample_detectors, 20)
        assert point == Point(14, 11)
        assert tuning_frequency(point) == 56000011

    def test_no_gap_raises(self):
        """An exhausted search is an error, not a default point."""
        with pytest.raises(NoGapFoundError) as exc_info:
            locate_unique_gap(make_covering_detectors(), 20)
        assert exc_info.value.max_coordinate == 20
        assert exc_info.value.rows_scanned == 21

    def test_empty_detectors_raise_immediately(self):
        with pytest.raises(NoGapFoundError, match="no detectors") as exc_info:
            locate_unique_gap([], 20)
        assert exc_info.value.rows_scanned == 0

    def test_negative_max_coordinate_checked_first(self):
        """A negative bound is a ValidationError even with no detectors."""
        with pytest.raises(ValidationError):
            locate_unique_gap([], -5)
        with pytest.raises(ValidationError):
            locate_unique_gap(make_covering_detectors(), -1)

    def test_parallel(self, sample_detectors):
        config = SearchConfig(workers=2, chunk_size=3)
        assert locate_unique_gap(sample_detectors, 20, config) == Point(14, 11)


# =============================================================================
# Logging
# =============================================================================

class TestSearchLogging:
    """Tests for progress and result logging."""

    def test_progress_and_result_logged(self, caplog, sample_detectors):
        config = SearchConfig(progress_interval=5)
        with caplog.at_level(logging.DEBUG, logger="sensor_sweep"):
            search_gap(sample_detectors, 20, config)

        messages = [record.getMessage() for record in caplog.records]
        assert "Row 0 out of 20" in messages
        assert "Row 5 out of 20" in messages
        assert "Row 10 out of 20" in messages
        assert "Row 15 out of 20" not in messages
        assert "Found gap at (14, 11) after 12 rows" in messages

    def test_progress_disabled(self, caplog, sample_detectors):
        config = SearchConfig(progress_interval=0)
        with caplog.at_level(logging.DEBUG, logger="sensor_sweep"):
            search_gap(sample_detectors, 20, config)

        assert not any("out of" in record.getMessage() for record in caplog.records)

    def test_empty_search_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="sensor_sweep"):
            search_gap([], 20)
        assert any(record.levelno == logging.WARNING for record in caplog.records)

    def test_found_gap_confirmed_uncovered(self, caplog, sample_detectors):
        """A genuine gap passes the per-point check without a warning."""
        with caplog.at_level(logging.WARNING, logger="sensor_sweep"):
            result = search_gap(sample_detectors, 20)
        assert result.point == Point(14, 11)
        assert not caplog.records

    def test_covered_gap_warns(self, caplog, monkeypatch):
        """A reported point inside a diamond is flagged."""
        monkeypatch.setattr(
            "sensor_sweep.search.find_gap", lambda field, row, bound: Point(10, 10)
        )
        with caplog.at_level(logging.WARNING, logger="sensor_sweep"):
            result = search_gap(make_covering_detectors(), 20)
        assert result.point == Point(10, 10)
        assert any(
            "inside a detector diamond" in record.getMessage() for record in caplog.records
        )

    def test_setup_and_disable_debug_logging(self):
        package_logger = logging.getLogger("sensor_sweep")
        before = list(package_logger.handlers)

        returned = setup_debug_logging()
        setup_debug_logging()
        try:
            assert returned is package_logger
            assert package_logger.level == logging.DEBUG
            assert len(package_logger.handlers) == len(before) + 1
        finally:
            disable_debug_logging()

        assert package_logger.handlers == before
        assert package_logger.level == logging.NOTSET
