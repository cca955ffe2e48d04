"""
Relation Graph Builders for isosort

A builder takes the objects participating in a pass, clears their previous
relations and recomputes every occlusion edge between them.

Two strategies are provided and produce identical edge sets:
- SequentialGraphBuilder: double loop over the live objects
- ParallelGraphBuilder: snapshots the corners into numpy buffers and fans
  one task per object out to a thread pool

Usage:
    from isosort.builders import create_graph_builder
    builder = create_graph_builder(SorterType.PARALLEL, config)
    participants = builder.build(objects)
"""

import logging
import threading
from abc import ABC, abstractmethod
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from .constants import (
    APPROX_TOLERANCE,
    FLOOR_CORNER_COUNT,
    OUTLINE_CORNER_COUNT,
    SortConfig,
    SorterType,
)
from .errors import UnknownSorterTypeError
from .geometry import is_in_front_of, polygons_overlap
from .isoobject import IsometricObject

logger = logging.getLogger(__name__)


class RelationGraphBuilder(ABC):
    """Abstract base class for relation graph strategies"""

    sorter_type: SorterType

    def __init__(self, tolerance: float = APPROX_TOLERANCE):
        self.tolerance = tolerance
        self.skipped_destroyed = 0

    def occludes(self, outline_a, floor_a, outline_b, floor_b) -> bool:
        """True if A overlaps B and is in front of it (edge A -> B)."""
        return (polygons_overlap(outline_a, outline_b, self.tolerance)
                and is_in_front_of(floor_a, floor_b, self.tolerance))

    def _prepare(self, objects: Sequence[IsometricObject]) -> List[IsometricObject]:
        """Drop destroyed objects and clear the relations of the rest."""
        participants = []
        self.skipped_destroyed = 0
        for obj in objects:
            if obj is None or obj.destroyed:
                self.skipped_destroyed += 1
                continue
            obj.clear_relations()
            participants.append(obj)
        if self.skipped_destroyed:
            logger.debug("Skipped %d destroyed objects", self.skipped_destroyed)
        return participants

    @abstractmethod
    def build(self, objects: Sequence[IsometricObject]) -> List[IsometricObject]:
        """
        Rebuild the relation graph over objects.

        Args:
            objects: Objects taking part in this pass; their corners must
                already be up to date

        Returns:
            The objects that actually participated (destroyed ones removed)
        """
        pass


class SequentialGraphBuilder(RelationGraphBuilder):
    """Builds the graph with a plain double loop on the calling thread."""

    sorter_type = SorterType.SEQUENTIAL

    def build(self, objects: Sequence[IsometricObject]) -> List[IsometricObject]:
        participants = self._prepare(objects)

        for obj in participants:
            if obj.destroyed:
                continue
            outline = obj.corners
            floor = obj.floor_corners

            for other in participants:
                if other is obj:
                    continue
                if other.destroyed:
                    self.skipped_destroyed += 1
                    continue

                if self.occludes(outline, floor, other.corners, other.floor_corners):
                    obj.set_back(other)
                    other.set_front(obj)
                else:
                    obj.remove_back(other)
                    other.remove_front(obj)

        return participants


class EdgeAccumulator:
    """
    Thread-safe multi-valued map of int -> [int].

    Worker tasks add pairs concurrently; the merge step reads it once all
    tasks have finished.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._values: Dict[int, List[int]] = defaultdict(list)

    def add(self, key: int, value: int) -> None:
        with self._lock:
            self._values[key].append(value)

    def add_many(self, pairs: Sequence[Tuple[int, int]]) -> None:
        with self._lock:
            for key, value in pairs:
                self._values[key].append(value)

    def get_values(self, key: int) -> List[int]:
        with self._lock:
            return list(self._values.get(key, ()))

    def items(self) -> List[Tuple[int, List[int]]]:
        with self._lock:
            return [(key, list(values)) for key, values in sorted(self._values.items())]

    def __len__(self):
        with self._lock:
            return sum(len(values) for values in self._values.values())


class ParallelGraphBuilder(RelationGraphBuilder):
    """
    Builds the graph with one task per object on a thread pool.

    Corner data is copied once per pass into read-only numpy buffers; tasks
    never touch the objects themselves, only the buffers and the two
    accumulators. Relations are written back on the calling thread after
    every task has completed.
    """

    sorter_type = SorterType.PARALLEL

    def __init__(self, tolerance: float = APPROX_TOLERANCE, max_workers: Optional[int] = None):
        super().__init__(tolerance)
        self.max_workers = max_workers

    @staticmethod
    def snapshot(objects: Sequence[IsometricObject]) -> Tuple[np.ndarray, np.ndarray]:
        """
        Copy floor quads and outlines into flat float64 buffers.

        Returns:
            Tuple of (floors with shape (N, 4, 2), outlines with shape (N, 6, 2)),
            both marked read-only
        """
        count = len(objects)
        floors = np.empty((count, FLOOR_CORNER_COUNT, 2), dtype=np.float64)
        outlines = np.empty((count, OUTLINE_CORNER_COUNT, 2), dtype=np.float64)

        for i, obj in enumerate(objects):
            floors[i] = [(c.x, c.y) for c in obj.floor_corners]
            outlines[i] = [(c.x, c.y) for c in obj.corners]

        floors.flags.writeable = False
        outlines.flags.writeable = False
        return floors, outlines

    def _relate(self, index: int, floors: np.ndarray, outlines: np.ndarray,
                fronts: EdgeAccumulator, backs: EdgeAccumulator) -> int:
        """Test object index against every other snapshot entry. Returns edges found."""
        floor = floors[index].tolist()
        outline = outlines[index].tolist()
        found = []

        for j in range(len(floors)):
            if j == index:
                continue
            if self.occludes(outline, floor, outlines[j].tolist(), floors[j].tolist()):
                found.append(j)

        if found:
            fronts.add_many([(j, index) for j in found])
            backs.add_many([(index, j) for j in found])
        return len(found)

    def build(self, objects: Sequence[IsometricObject]) -> List[IsometricObject]:
        participants = self._prepare(objects)
        count = len(participants)
        if count < 2:
            return participants

        floors, outlines = self.snapshot(participants)
        fronts = EdgeAccumulator()
        backs = EdgeAccumulator()

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [
                executor.submit(self._relate, i, floors, outlines, fronts, backs)
                for i in range(count)
            ]
            # result() re-raises anything a task raised
            edge_total = sum(future.result() for future in futures)

        for key, values in fronts.items():
            for value in values:
                participants[key].set_front(participants[value])

        for key, values in backs.items():
            for value in values:
                participants[key].set_back(participants[value])

        logger.debug("Parallel build found %d edges over %d objects", edge_total, count)
        return participants


GRAPH_BUILDERS = {
    SorterType.SEQUENTIAL: SequentialGraphBuilder,
    SorterType.PARALLEL: ParallelGraphBuilder,
}


def create_graph_builder(sorter_type: SorterType,
                         config: Optional[SortConfig] = None) -> RelationGraphBuilder:
    """
    Create the builder registered for sorter_type.

    Args:
        sorter_type: Strategy to instantiate
        config: Supplies tolerance and worker count (defaults if None)

    Returns:
        A fresh RelationGraphBuilder
    """
    config = config or SortConfig()
    try:
        builder_class = GRAPH_BUILDERS[SorterType(sorter_type)]
    except (KeyError, ValueError):
        raise UnknownSorterTypeError(f"No graph builder for sorter type {sorter_type!r}") from None

    if builder_class is ParallelGraphBuilder:
        return ParallelGraphBuilder(tolerance=config.tolerance, max_workers=config.max_workers)
    return builder_class(tolerance=config.tolerance)
