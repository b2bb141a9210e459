"""
Shared fixtures for the sensor_sweep test suite.
"""

import pytest

from sensor_sweep.detectors import Detector


# The classic 14-detector sample; inside [0, 20]² its only gap is (14, 11)
SAMPLE_DETECTORS = [
    ((2, 18), (-2, 15)),
    ((9, 16), (10, 16)),
    ((13, 2), (15, 3)),
    ((12, 14), (10, 16)),
    ((10, 20), (10, 16)),
    ((14, 17), (10, 16)),
    ((8, 7), (2, 10)),
    ((2, 0), (2, 10)),
    ((0, 11), (2, 10)),
    ((20, 14), (25, 17)),
    ((17, 20), (21, 22)),
    ((16, 7), (15, 3)),
    ((14, 3), (15, 3)),
    ((20, 1), (15, 3)),
]


@pytest.fixture
def sample_detectors() -> list[Detector]:
    """The sample detectors as Detector objects."""
    return [Detector(position, reference) for position, reference in SAMPLE_DETECTORS]
