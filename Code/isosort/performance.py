"""
Performance Module for isosort

Simple monitoring for sort passes: how long they take and how large the
graph was.

Usage:
    from isosort.performance import SortMonitor
"""

import time
from typing import Any, Dict, List, Optional

from .constants import SORT_STATS_BLOCK, SORT_STATS_WINDOW


class SortMonitor:
    """
    Tracks sort pass times and graph statistics.

    Besides the sliding window average, passes are grouped in blocks of
    SORT_STATS_BLOCK; avg_time_per_10_calls holds the average of the last
    completed block.
    """

    def __init__(self, window_size: int = SORT_STATS_WINDOW, block_size: int = SORT_STATS_BLOCK):
        """
        Initialize monitor.

        Args:
            window_size: Number of passes to average over
            block_size: Number of passes per block average
        """
        self.window_size = window_size
        self.block_size = block_size
        self.pass_times: List[float] = []
        self.pass_count = 0
        self.avg_time_per_10_calls = 0.0
        self.sorted_object_count = 0
        self.edge_count = 0
        self.root_count = 0
        self.destroyed_swept = 0
        self._pass_start: Optional[float] = None
        self._block_calls = 0
        self._block_elapsed = 0.0

    def pass_start(self) -> None:
        """Call at the start of each sort pass."""
        self._pass_start = time.perf_counter()

    def pass_end(self, sorted_object_count: int, edge_count: int, root_count: int) -> float:
        """
        Call at the end of each sort pass.

        Returns:
            Elapsed time of the pass in ms
        """
        if self._pass_start is None:
            return 0.0
        elapsed = (time.perf_counter() - self._pass_start) * 1000
        self._pass_start = None

        self.pass_count += 1
        self.sorted_object_count = sorted_object_count
        self.edge_count = edge_count
        self.root_count = root_count

        self.pass_times.append(elapsed)
        if len(self.pass_times) > self.window_size:
            self.pass_times.pop(0)

        self._block_calls += 1
        self._block_elapsed += elapsed
        if self._block_calls >= self.block_size:
            self.avg_time_per_10_calls = self._block_elapsed / self._block_calls
            self._block_calls = 0
            self._block_elapsed = 0.0

        return elapsed

    def get_average_ms(self) -> float:
        """Get average pass time in ms over the window."""
        if not self.pass_times:
            return 0
        return sum(self.pass_times) / len(self.pass_times)

    def get_last_ms(self) -> float:
        if not self.pass_times:
            return 0
        return self.pass_times[-1]

    def reset(self) -> None:
        self.pass_times.clear()
        self.pass_count = 0
        self.avg_time_per_10_calls = 0.0
        self.destroyed_swept = 0
        self._block_calls = 0
        self._block_elapsed = 0.0

    def get_report(self) -> Dict[str, Any]:
        """Get a full performance report."""
        return {
            "passes": self.pass_count,
            "average_ms": self.get_average_ms(),
            "last_ms": self.get_last_ms(),
            "avg_time_per_10_calls": self.avg_time_per_10_calls,
            "sorted_object_count": self.sorted_object_count,
            "edge_count": self.edge_count,
            "root_count": self.root_count,
            "destroyed_swept": self.destroyed_swept,
        }
