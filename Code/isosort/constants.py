"""
Constants Module for isosort

This module centralizes the default values, enums and the configuration
object used throughout the package. Import from here for consistent access.

Usage:
    from isosort.constants import (
        TILE_WIDTH, TILE_HEIGHT, APPROX_TOLERANCE,
        SorterType, SortConfig
    )
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

# ============================================================================
# ISOMETRIC PROJECTION
# ============================================================================

TILE_WIDTH = 1.0
TILE_HEIGHT = 0.57735  # tan(30°) for a true isometric diamond

# Number of corners in a floor quad and in an extruded outline
FLOOR_CORNER_COUNT = 4
OUTLINE_CORNER_COUNT = 6

# Floor quad corner indices
FLOOR_TOP = 0
FLOOR_RIGHT = 1
FLOOR_BOTTOM = 2
FLOOR_LEFT = 3

# ============================================================================
# GEOMETRY
# ============================================================================

# Values whose magnitude is below this are treated as zero when testing
# for parallel or colinear segments
APPROX_TOLERANCE = 1e-9

# ============================================================================
# SORTING
# ============================================================================

# Number of passes averaged together for the "avg time per 10 calls" stat
SORT_STATS_BLOCK = 10
SORT_STATS_WINDOW = 60


class SorterType(Enum):
    """Strategy used to build the relation graph."""
    SEQUENTIAL = "sequential"
    PARALLEL = "parallel"


@dataclass
class SortConfig:
    """
    Static configuration for an IsometricWorld.

    Attributes:
        tile_width: Width of one isometric tile in world units
        tile_height: Height of one isometric tile in world units
        sorter_type: Relation graph strategy (sequential or parallel)
        culling: Consult each object's ignore_sort hook before a pass
        max_workers: Worker count for the parallel strategy (None = executor default)
        tolerance: Near-zero threshold for the segment tests
    """
    tile_width: float = TILE_WIDTH
    tile_height: float = TILE_HEIGHT
    sorter_type: SorterType = SorterType.PARALLEL
    culling: bool = False
    max_workers: Optional[int] = None
    tolerance: float = APPROX_TOLERANCE

    def __post_init__(self):
        if self.tile_width <= 0 or self.tile_height <= 0:
            raise ValueError(
                f"Tile dimensions must be positive, got {self.tile_width}x{self.tile_height}"
            )
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")
        if self.tolerance < 0:
            raise ValueError(f"tolerance must not be negative, got {self.tolerance}")
        # Accept the enum's value as a convenience ("sequential" / "parallel")
        self.sorter_type = SorterType(self.sorter_type)
