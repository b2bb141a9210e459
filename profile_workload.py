#!/usr/bin/env python3
"""
Profile script for sensor_sweep to identify performance bottlenecks in the row scan.
"""

import cProfile
import pstats
import io
import numpy as np
import time
from typing import List
from sensor_sweep.detectors import Detector, build_field
from sensor_sweep.api import count_excluded
from sensor_sweep.search import DEFAULT_MAX_COORDINATE, DEFAULT_ROW, SearchConfig, search_gap


def generate_random_detectors(
    n_detectors: int,
    max_coordinate: int,
    max_reach: int
) -> List[Detector]:
    """Generate detectors scattered over the square with references nearby."""
    detectors = []
    for _ in range(n_detectors):
        px, py = np.random.randint(0, max_coordinate + 1, size=2)
        dx, dy = np.random.randint(-max_reach // 2, max_reach // 2 + 1, size=2)
        detectors.append(Detector((int(px), int(py)), (int(px + dx), int(py + dy))))
    return detectors


def run_row_count_workload(n_iterations: int = 200) -> None:
    """Count excluded positions on rows around the default query row."""
    np.random.seed(42)  # For reproducibility
    field = build_field(generate_random_detectors(30, DEFAULT_MAX_COORDINATE, 1_000_000))

    for offset in np.random.randint(-1000, 1001, size=n_iterations):
        count_excluded(field, DEFAULT_ROW + int(offset))


def run_gap_scan_workload(n_rows: int = 50_000) -> None:
    """Scan the first rows of a bounded search with a typical detector count."""
    np.random.seed(42)
    detectors = generate_random_detectors(30, n_rows - 1, n_rows)
    search_gap(detectors, n_rows - 1, SearchConfig(progress_interval=0))


def profile_function(func, description: str) -> None:
    """Profile a function and print statistics."""
    print(f"\n{'=' * 60}")
    print(f"Profiling: {description}")
    print('=' * 60)

    # Time the execution
    start = time.perf_counter()

    profiler = cProfile.Profile()
    profiler.enable()
    func()
    profiler.disable()

    elapsed = time.perf_counter() - start

    # Get stats
    s = io.StringIO()
    ps = pstats.Stats(profiler, stream=s).sort_stats('cumulative')
    ps.print_stats(30)
    print(s.getvalue())

    print(f"\nTotal time: {elapsed:.3f}s")


if __name__ == "__main__":
    print("Sensor Sweep Performance Profiling")
    print("=" * 60)

    profile_function(
        lambda: run_row_count_workload(200),
        "Excluded-position count (30 detectors, 200 rows)"
    )

    profile_function(
        lambda: run_gap_scan_workload(50_000),
        "Bounded gap scan (30 detectors, 50000 rows)"
    )
