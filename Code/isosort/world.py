"""
World Module for isosort

This module contains the IsometricWorld class which owns the registry of
sortable objects and drives one full sort pass per call.

Features:
- Insertion-ordered, duplicate-rejecting registry
- Sequential or parallel relation graph strategy, switchable at runtime
- Optional culling (world predicate and per-object hooks)
- Sweeping of destroyed objects
- Pass statistics via SortMonitor
"""

import logging
from typing import Callable, List, Optional, Sequence

from .builders import RelationGraphBuilder, create_graph_builder
from .constants import SortConfig, SorterType
from .errors import ReentrantSortError, RegistryLockedError
from .isoobject import IsometricObject
from .performance import SortMonitor
from .projection import IsometricProjector
from .sorter import TopologySorter

logger = logging.getLogger(__name__)

CullingPredicate = Callable[[IsometricObject], bool]


class IsometricWorld:
    """
    Owns the live objects and assigns their draw order.

    A world is not reentrant: sort() must not be called again (or the
    registry mutated) while a pass is running.
    """

    def __init__(self, config: Optional[SortConfig] = None,
                 culling_predicate: Optional[CullingPredicate] = None):
        """
        Initialize the world.

        Args:
            config: Tile dimensions, strategy and culling settings
            culling_predicate: Optional callable; objects for which it
                returns True are left out of every pass
        """
        self.config = config or SortConfig()
        self.projector = IsometricProjector(self.config.tile_width, self.config.tile_height)
        self.sorter = TopologySorter()
        self.monitor = SortMonitor()
        self.culling_predicate = culling_predicate
        self._objects: List[IsometricObject] = []
        self._builder: RelationGraphBuilder = create_graph_builder(self.config.sorter_type, self.config)
        self._sorting = False

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    @property
    def objects(self) -> List[IsometricObject]:
        """Registered objects in registration order (a copy)."""
        return list(self._objects)

    def __len__(self):
        return len(self._objects)

    def __contains__(self, obj):
        return obj in self._objects

    def _check_unlocked(self, action: str) -> None:
        if self._sorting:
            raise RegistryLockedError(f"Cannot {action} while a sort pass is running")

    def register(self, obj: IsometricObject) -> bool:
        """
        Add an object to the registry.

        Returns:
            True if added, False if it was already registered
        """
        self._check_unlocked("register")
        if obj in self._objects:
            return False
        self._objects.append(obj)
        obj.mark_dirty()
        return True

    def unregister(self, obj: IsometricObject) -> bool:
        """
        Remove an object and retract its edges from every neighbour.

        Returns:
            True if removed, False if it was not registered
        """
        self._check_unlocked("unregister")
        if obj not in self._objects:
            return False
        obj.detach()
        self._objects.remove(obj)
        return True

    def clear(self) -> None:
        self._check_unlocked("clear")
        for obj in self._objects:
            obj.clear_relations()
        self._objects.clear()

    def _sweep_destroyed(self) -> int:
        destroyed = [obj for obj in self._objects if obj is None or obj.destroyed]
        for obj in destroyed:
            if obj is not None:
                obj.detach()
            self._objects.remove(obj)
        if destroyed:
            logger.debug("Swept %d destroyed objects from the registry", len(destroyed))
        return len(destroyed)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def sorter_type(self) -> SorterType:
        return self._builder.sorter_type

    @property
    def builder(self) -> RelationGraphBuilder:
        return self._builder

    def set_sorter_type(self, sorter_type: SorterType) -> None:
        """Switch the relation graph strategy used by later passes."""
        sorter_type = SorterType(sorter_type)
        if sorter_type == self._builder.sorter_type:
            return
        self._builder = create_graph_builder(sorter_type, self.config)
        self.config.sorter_type = sorter_type
        logger.debug("Sorter type switched to %s", sorter_type.value)

    def set_tile_dimensions(self, tile_width: float, tile_height: float) -> None:
        """Reconfigure the projector; every footprint is recomputed on the next pass."""
        if tile_width <= 0 or tile_height <= 0:
            raise ValueError(f"Tile dimensions must be positive, got {tile_width}x{tile_height}")
        if self.projector.set_tile_dimensions(tile_width, tile_height):
            self.config.tile_width = tile_width
            self.config.tile_height = tile_height

    def set_culling_predicate(self, predicate: Optional[CullingPredicate]) -> None:
        self.culling_predicate = predicate

    def is_culled(self, obj: IsometricObject) -> bool:
        """Check whether obj is left out of the current pass."""
        if not obj.active:
            return True
        if self.culling_predicate is not None and self.culling_predicate(obj):
            return True
        if self.config.culling and obj.ignore_sort is not None and obj.ignore_sort():
            return True
        return False

    # ------------------------------------------------------------------
    # Sorting
    # ------------------------------------------------------------------

    def refresh_corners(self, objects: Optional[Sequence[IsometricObject]] = None) -> int:
        """
        Recompute the corners of every dirty object.

        Returns:
            Number of objects recomputed
        """
        objects = self._objects if objects is None else objects
        return sum(1 for obj in objects if obj.update_corners(self.projector))

    def sort(self) -> List[IsometricObject]:
        """
        Run one full pass: rebuild the relation graph and reassign orders.

        Objects that are inactive or culled keep their previous order and
        take part in no edges.

        Returns:
            The participating objects in draw order (order 0 first)
        """
        if self._sorting:
            raise ReentrantSortError("A sort pass is already running on this world")

        self._sorting = True
        try:
            self.monitor.pass_start()
            self.monitor.destroyed_swept += self._sweep_destroyed()

            participants = []
            for obj in self._objects:
                if self.is_culled(obj):
                    obj.detach()
                else:
                    participants.append(obj)

            self.refresh_corners(participants)
            participants = self._builder.build(participants)
            draw_order = self.sorter.sort(participants)

            edges = self.edge_count(participants)
            elapsed = self.monitor.pass_end(len(participants), edges, len(self.sorter.roots))
            logger.debug("Sorted %d objects (%d edges, %d roots) in %.2f ms",
                         len(participants), edges, len(self.sorter.roots), elapsed)
            return draw_order
        finally:
            self._sorting = False

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    @property
    def roots(self) -> List[IsometricObject]:
        """Root objects of the last pass."""
        return list(self.sorter.roots)

    def edge_count(self, objects: Optional[Sequence[IsometricObject]] = None) -> int:
        objects = self._objects if objects is None else objects
        return sum(len(obj.backs) for obj in objects)

    def draw_order(self) -> List[IsometricObject]:
        """Registered, participating objects sorted by their current order."""
        return sorted((obj for obj in self._objects if not self.is_culled(obj)),
                      key=lambda obj: obj.order)

    @property
    def stats(self):
        return self.monitor.get_report()
