"""
Isometric Object Module for isosort

This module contains the IsometricObject class: one sortable footprint in
an isometric scene together with the relation sets and draw order the
sorter assigns to it.

Features:
- Dirty tracking of position, extents, height and scale
- Floor quad and outline recomputed only after an actual change
- Fronts/Backs relation sets written by the graph builders
- Order with change listeners and a polled change flag
"""

from typing import Callable, List, Optional, Sequence, Set, Tuple

from pygame.math import Vector2

from .constants import FLOOR_TOP, FLOOR_RIGHT, FLOOR_BOTTOM, FLOOR_LEFT
from .projection import FloorQuad, IsometricProjector, Outline

OrderListener = Callable[[int], None]
CornersListener = Callable[["IsometricObject"], None]


def _as_pair(value: Sequence[float]) -> Tuple[float, float]:
    return (float(value[0]), float(value[1]))


class IsometricObject:
    """
    A footprint registered with an IsometricWorld.

    An edge "A occludes B" (A draws after B) is stored as B in A.backs and
    A in B.fronts. The sets are owned by the object but only written by the
    graph builders and by IsometricWorld.unregister.
    """

    def __init__(self, position: Sequence[float] = (0.0, 0.0),
                 extents: Sequence[float] = (1.0, 1.0),
                 height: float = 0.0,
                 scale: Optional[Sequence[float]] = None,
                 name: Optional[str] = None,
                 active: bool = True):
        """
        Initialize the object.

        Args:
            position: (x, y) world anchor
            extents: (width, depth) in tiles
            height: Vertical extrusion in world units
            scale: Optional (sx, sy) non-uniform scale
            name: Label used in logs and reprs
            active: Inactive objects are skipped by the sorter
        """
        self.name = name
        self.active = active
        self._position = _as_pair(position)
        self._extents = _as_pair(extents)
        self._height = float(height)
        self._scale = _as_pair(scale) if scale is not None else None

        self._dirty = True
        self._projector_revision: Optional[int] = None
        self._floor_corners: Optional[FloorQuad] = None
        self._corners: Optional[Outline] = None

        self._order = 0
        self._order_changed = False
        self._order_listeners: List[OrderListener] = []
        self._corners_listeners: List[CornersListener] = []
        self._destroyed = False

        self.fronts: Set["IsometricObject"] = set()
        self.backs: Set["IsometricObject"] = set()

        # Optional culling hook, consulted when SortConfig.culling is on.
        # Returns True when the object should be left out of the pass.
        self.ignore_sort: Optional[Callable[[], bool]] = None

    def __repr__(self):
        label = self.name if self.name is not None else hex(id(self))
        return f"IsometricObject({label}, order={self._order})"

    # ------------------------------------------------------------------
    # Footprint inputs
    # ------------------------------------------------------------------

    @property
    def position(self) -> Tuple[float, float]:
        return self._position

    @position.setter
    def position(self, value: Sequence[float]):
        value = _as_pair(value)
        if value != self._position:
            self._position = value
            self._dirty = True

    @property
    def extents(self) -> Tuple[float, float]:
        return self._extents

    @extents.setter
    def extents(self, value: Sequence[float]):
        value = _as_pair(value)
        if value != self._extents:
            self._extents = value
            self._dirty = True

    @property
    def height(self) -> float:
        return self._height

    @height.setter
    def height(self, value: float):
        value = float(value)
        if value != self._height:
            self._height = value
            self._dirty = True

    @property
    def scale(self) -> Optional[Tuple[float, float]]:
        return self._scale

    @scale.setter
    def scale(self, value: Optional[Sequence[float]]):
        value = _as_pair(value) if value is not None else None
        if value != self._scale:
            self._scale = value
            self._dirty = True

    def move_to(self, x: float, y: float) -> None:
        """Convenience wrapper around the position setter."""
        self.position = (x, y)

    # ------------------------------------------------------------------
    # Derived geometry
    # ------------------------------------------------------------------

    @property
    def is_dirty(self) -> bool:
        return self._dirty

    def mark_dirty(self) -> None:
        """Force the next update_corners call to recompute."""
        self._dirty = True

    def needs_update(self, projector: IsometricProjector) -> bool:
        return self._dirty or self._projector_revision != projector.revision

    def update_corners(self, projector: IsometricProjector, force: bool = False) -> bool:
        """
        Recompute the floor quad and outline if anything changed.

        Args:
            projector: Projector holding the tile dimensions
            force: Recompute even if nothing changed

        Returns:
            True if the corners were recomputed
        """
        if not force and not self.needs_update(projector):
            return False

        self._floor_corners, self._corners = projector.project(
            self._position, self._extents, self._height, self._scale
        )
        self._projector_revision = projector.revision
        self._dirty = False

        for listener in list(self._corners_listeners):
            listener(self)
        return True

    @property
    def has_corners(self) -> bool:
        return self._corners is not None

    @property
    def floor_corners(self) -> FloorQuad:
        """Top, right, bottom, left floor corners."""
        if self._floor_corners is None:
            raise RuntimeError(f"{self!r} has not been projected yet")
        return self._floor_corners

    @property
    def corners(self) -> Outline:
        """Top, right-top, right-bottom, bottom, left-bottom, left-top outline."""
        if self._corners is None:
            raise RuntimeError(f"{self!r} has not been projected yet")
        return self._corners

    def floor_corner(self, index: int) -> Vector2:
        """Floor corner by index; raises IndexError outside 0..3."""
        if not 0 <= index < len(self.floor_corners):
            raise IndexError(f"Floor corner index must be between 0 and 3, got {index}")
        return self.floor_corners[index]

    def corner(self, index: int) -> Vector2:
        """Outline corner by index; raises IndexError outside 0..5."""
        if not 0 <= index < len(self.corners):
            raise IndexError(f"Outline corner index must be between 0 and 5, got {index}")
        return self.corners[index]

    @property
    def floor_top(self) -> Vector2:
        return self.floor_corners[FLOOR_TOP]

    @property
    def floor_right(self) -> Vector2:
        return self.floor_corners[FLOOR_RIGHT]

    @property
    def floor_bottom(self) -> Vector2:
        return self.floor_corners[FLOOR_BOTTOM]

    @property
    def floor_left(self) -> Vector2:
        return self.floor_corners[FLOOR_LEFT]

    @property
    def floor_center(self) -> Vector2:
        return (self.floor_bottom + self.floor_top) * 0.5

    def add_corners_listener(self, listener: CornersListener) -> None:
        """Call listener(obj) after every recompute of the corners."""
        self._corners_listeners.append(listener)

    def remove_corners_listener(self, listener: CornersListener) -> None:
        if listener in self._corners_listeners:
            self._corners_listeners.remove(listener)

    # ------------------------------------------------------------------
    # Relations
    # ------------------------------------------------------------------

    def set_back(self, other: "IsometricObject") -> None:
        self.backs.add(other)

    def remove_back(self, other: "IsometricObject") -> None:
        self.backs.discard(other)

    def set_front(self, other: "IsometricObject") -> None:
        self.fronts.add(other)

    def remove_front(self, other: "IsometricObject") -> None:
        self.fronts.discard(other)

    def clear_relations(self) -> None:
        self.fronts.clear()
        self.backs.clear()

    def detach(self) -> None:
        """Retract this object's edges from every neighbour, then clear its own sets."""
        for back in self.backs:
            back.remove_front(self)
        for front in self.fronts:
            front.remove_back(self)
        self.clear_relations()

    # ------------------------------------------------------------------
    # Order
    # ------------------------------------------------------------------

    @property
    def order(self) -> int:
        return self._order

    @order.setter
    def order(self, value: int):
        if value == self._order:
            return
        self._order = value
        self._order_changed = True
        for listener in list(self._order_listeners):
            listener(value)

    @property
    def order_changed(self) -> bool:
        return self._order_changed

    def consume_order_change(self) -> bool:
        """Return the polled change flag and reset it."""
        changed = self._order_changed
        self._order_changed = False
        return changed

    def add_order_listener(self, listener: OrderListener) -> None:
        """Call listener(order) whenever the assigned order changes."""
        self._order_listeners.append(listener)

    def remove_order_listener(self, listener: OrderListener) -> None:
        if listener in self._order_listeners:
            self._order_listeners.remove(listener)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def destroy(self) -> None:
        """
        Mark the object as destroyed.

        The owning world drops destroyed objects from its registry at the
        start of the next pass and retracts their edges.
        """
        self._destroyed = True
        self.active = False
