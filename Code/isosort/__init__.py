"""
isosort: draw-order resolution for 2D isometric scenes.

Contains core systems:
- Isometric projection of object footprints
- Overlap and in-front-of predicates
- Relation graph builders (sequential and parallel)
- Cycle-safe topological sorter
- World orchestrator and pass statistics
"""

from .constants import SortConfig, SorterType, TILE_WIDTH, TILE_HEIGHT, APPROX_TOLERANCE
from .errors import (
    IsometricSortError,
    ReentrantSortError,
    RegistryLockedError,
    UnknownSorterTypeError,
)
from .projection import IsometricProjector
from .geometry import polygons_overlap, is_in_front_of, segments_intersect, point_in_polygon
from .isoobject import IsometricObject
from .builders import (
    RelationGraphBuilder,
    SequentialGraphBuilder,
    ParallelGraphBuilder,
    EdgeAccumulator,
    GRAPH_BUILDERS,
    create_graph_builder,
)
from .sorter import TopologySorter
from .performance import SortMonitor
from .world import IsometricWorld

__version__ = "0.1.0"

__all__ = [
    # Configuration
    'SortConfig',
    'SorterType',
    'TILE_WIDTH',
    'TILE_HEIGHT',
    'APPROX_TOLERANCE',
    # Errors
    'IsometricSortError',
    'ReentrantSortError',
    'RegistryLockedError',
    'UnknownSorterTypeError',
    # Projection and geometry
    'IsometricProjector',
    'polygons_overlap',
    'is_in_front_of',
    'segments_intersect',
    'point_in_polygon',
    # Objects
    'IsometricObject',
    # Graph builders
    'RelationGraphBuilder',
    'SequentialGraphBuilder',
    'ParallelGraphBuilder',
    'EdgeAccumulator',
    'GRAPH_BUILDERS',
    'create_graph_builder',
    # Sorting
    'TopologySorter',
    'SortMonitor',
    'IsometricWorld',
]
