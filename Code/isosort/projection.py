"""
Isometric Projection Module for isosort

This module converts an object's world anchor, tile extents and height into
the 2D shapes the sorter compares: a floor quad and an extruded outline.

Features:
- Cached identity tile diamond, invalidated when tile dimensions change
- Multi-tile footprints extended along both diagonal axes
- Non-uniform scale with winding preserved
- Revision counter so footprints can detect a reconfigured projector
"""

import logging
from typing import Optional, Sequence, Tuple

from pygame.math import Vector2

from .constants import TILE_WIDTH, TILE_HEIGHT

logger = logging.getLogger(__name__)

FloorQuad = Tuple[Vector2, Vector2, Vector2, Vector2]
Outline = Tuple[Vector2, Vector2, Vector2, Vector2, Vector2, Vector2]


class IsometricProjector:
    """
    Projects footprints onto the isometric plane.

    World space has y pointing up, so the "top" corner of a tile diamond has
    the largest y. The identity diamond is centred on the object's anchor:

        top    = (0,  tileHeight / 2)
        right  = ( tileWidth / 2, 0)
        bottom = (0, -tileHeight / 2)
        left   = (-tileWidth / 2, 0)
    """

    def __init__(self, tile_width: float = TILE_WIDTH, tile_height: float = TILE_HEIGHT):
        """
        Initialize the projector.

        Args:
            tile_width: Width of one tile in world units
            tile_height: Height of one tile in world units
        """
        self.tile_width = tile_width
        self.tile_height = tile_height
        self.revision = 0
        # Derived from the tile dimensions, rebuilt on demand
        self._identity: Optional[FloorQuad] = None
        self._to_right_top: Optional[Vector2] = None
        self._to_left_top: Optional[Vector2] = None

    def set_tile_dimensions(self, tile_width: float, tile_height: float) -> bool:
        """
        Set the tile dimensions used for projection.

        Returns:
            True if the dimensions changed and cached geometry was invalidated
        """
        if tile_width == self.tile_width and tile_height == self.tile_height:
            return False

        self.tile_width = tile_width
        self.tile_height = tile_height
        self.invalidate()
        logger.debug("Tile dimensions set to %sx%s (revision %d)",
                     tile_width, tile_height, self.revision)
        return True

    def invalidate(self) -> None:
        """Drop the cached identity diamond and bump the revision."""
        self._identity = None
        self._to_right_top = None
        self._to_left_top = None
        self.revision += 1

    @property
    def identity_corners(self) -> FloorQuad:
        """Top, right, bottom, left corners of a single tile at the origin."""
        if self._identity is None:
            half_w = self.tile_width / 2.0
            half_h = self.tile_height / 2.0
            self._identity = (
                Vector2(0.0, half_h),    # Top
                Vector2(half_w, 0.0),    # Right
                Vector2(0.0, -half_h),   # Bottom
                Vector2(-half_w, 0.0),   # Left
            )
        return self._identity

    @property
    def direction_to_right_top(self) -> Vector2:
        if self._to_right_top is None:
            top, _, _, left = self.identity_corners
            self._to_right_top = top - left
        return self._to_right_top

    @property
    def direction_to_left_top(self) -> Vector2:
        if self._to_left_top is None:
            top, right, _, _ = self.identity_corners
            self._to_left_top = top - right
        return self._to_left_top

    @property
    def direction_to_left_bottom(self) -> Vector2:
        _, right, bottom, _ = self.identity_corners
        return bottom - right

    @property
    def direction_to_right_bottom(self) -> Vector2:
        top, right, _, _ = self.identity_corners
        return right - top

    def project(self, world_position: Sequence[float], extents: Sequence[float],
                height: float, scale: Optional[Sequence[float]] = None) -> Tuple[FloorQuad, Outline]:
        """
        Project a footprint into its floor quad and outline.

        Args:
            world_position: (x, y) anchor of the object
            extents: (width, depth) in tiles along the right-top and left-top axes
            height: Vertical extrusion of the outline
            scale: Optional (sx, sy) non-uniform scale

        Returns:
            Tuple of (floor quad, outline). The floor quad is ordered
            top, right, bottom, left. The outline is ordered top, right-top,
            right-bottom, bottom, left-bottom, left-top.
        """
        position = Vector2(world_position[0], world_position[1])
        extend_right_top = self.direction_to_right_top * (extents[0] - 1.0)
        extend_left_top = self.direction_to_left_top * (extents[1] - 1.0)
        top, right, bottom, left = self.identity_corners

        floor_top = top + extend_right_top + extend_left_top
        floor_right = right + extend_right_top
        floor_bottom = Vector2(bottom)
        floor_left = left + extend_left_top

        if scale is not None:
            scale_v = Vector2(scale[0], scale[1])
            height = abs(scale_v.y) * height
            floor_top = floor_top.elementwise() * scale_v
            floor_right = floor_right.elementwise() * scale_v
            floor_bottom = floor_bottom.elementwise() * scale_v
            floor_left = floor_left.elementwise() * scale_v

            # A negative x scale mirrors the diamond; keep right on the right
            if floor_right.x < floor_left.x:
                floor_left, floor_right = floor_right, floor_left

        lift = Vector2(0.0, height)

        floor_quad = (
            position + floor_top,
            position + floor_right,
            position + floor_bottom,
            position + floor_left,
        )
        outline = (
            position + floor_top + lift,
            position + floor_right + lift,
            position + floor_right,
            position + floor_bottom,
            position + floor_left,
            position + floor_left + lift,
        )
        return floor_quad, outline
