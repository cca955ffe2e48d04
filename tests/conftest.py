# tests/conftest.py

import random

import pytest

from isosort import IsometricObject, IsometricProjector, IsometricWorld, SortConfig, SorterType

# A 2:1 tile keeps every corner on an exact binary fraction
TEST_TILE_WIDTH = 1.0
TEST_TILE_HEIGHT = 0.5


@pytest.fixture
def projector():
    return IsometricProjector(TEST_TILE_WIDTH, TEST_TILE_HEIGHT)


@pytest.fixture
def make_object(projector):
    """Create an object with its corners already projected."""
    def _make(position, extents=(1, 1), height=0.0, name=None, scale=None):
        obj = IsometricObject(position, extents, height, scale=scale, name=name)
        obj.update_corners(projector)
        return obj
    return _make


def make_world(sorter_type=SorterType.SEQUENTIAL, **kwargs):
    config = SortConfig(tile_width=TEST_TILE_WIDTH, tile_height=TEST_TILE_HEIGHT,
                        sorter_type=sorter_type, **kwargs)
    return IsometricWorld(config)


@pytest.fixture(params=[SorterType.SEQUENTIAL, SorterType.PARALLEL], ids=["sequential", "parallel"])
def world(request):
    return make_world(request.param)


def column_scene():
    """
    Four unit boxes stacked along the screen's vertical axis.

    A is nearest to the camera, D farthest. Each box overlaps the next
    ones in projection but their floors only touch at a corner.
    """
    return [
        IsometricObject((0.0, 0.0), (1, 1), 1.0, name="A"),
        IsometricObject((0.0, 0.5), (1, 1), 1.0, name="B"),
        IsometricObject((0.0, 1.0), (1, 1), 1.0, name="C"),
        IsometricObject((0.0, 1.5), (1, 1), 1.0, name="D"),
    ]


def random_scene(count, seed=7):
    rng = random.Random(seed)
    objects = []
    for i in range(count):
        objects.append(IsometricObject(
            (rng.uniform(-2.0, 2.0), rng.uniform(-2.0, 2.0)),
            (rng.randint(1, 3), rng.randint(1, 3)),
            rng.uniform(0.0, 1.5),
            name=f"obj{i}",
        ))
    return objects


def edge_names(objects):
    """Set of (occluder, occluded) name pairs read from Backs and Fronts."""
    backs = {(obj.name, back.name) for obj in objects for back in obj.backs}
    fronts = {(front.name, obj.name) for obj in objects for front in obj.fronts}
    return backs, fronts
