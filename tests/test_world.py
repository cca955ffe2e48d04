"""Tests for the IsometricWorld orchestrator."""

import pytest

from conftest import column_scene, make_world, random_scene
from isosort import (
    IsometricObject,
    ParallelGraphBuilder,
    ReentrantSortError,
    RegistryLockedError,
    SequentialGraphBuilder,
    SortConfig,
    SorterType,
)


def register_all(world, objects):
    for obj in objects:
        assert world.register(obj)
    return objects


class TestRegistry:

    def test_register_rejects_duplicates(self, world):
        obj = IsometricObject(name="a")
        assert world.register(obj)
        assert not world.register(obj)
        assert world.objects == [obj]
        assert obj in world
        assert len(world) == 1

    def test_registration_order_is_kept(self, world):
        objs = register_all(world, [IsometricObject(name=str(i)) for i in range(5)])
        assert world.objects == objs

    def test_unregister_unknown(self, world):
        assert not world.unregister(IsometricObject())

    def test_unregister_retracts_edges(self, world):
        a, b, c, d = register_all(world, column_scene())
        world.sort()
        assert b in a.backs and b in d.fronts

        assert world.unregister(b)
        assert b not in world
        assert b not in a.backs
        assert b not in c.fronts
        assert b not in d.fronts
        assert b.fronts == set() and b.backs == set()

    def test_clear(self, world):
        register_all(world, column_scene())
        world.sort()
        world.clear()
        assert len(world) == 0


class TestSorting:

    def test_ground_truth_column(self, world):
        a, b, c, d = register_all(world, column_scene())
        draw_order = world.sort()

        assert d.order < c.order < b.order < a.order
        assert draw_order == [d, c, b, a]
        assert world.roots == [d]

    @pytest.mark.parametrize("permutation", [(3, 1, 0, 2), (1, 3, 2, 0), (2, 0, 3, 1)])
    def test_ground_truth_independent_of_registration_order(self, world, permutation):
        objects = column_scene()
        register_all(world, [objects[i] for i in permutation])
        world.sort()

        a, b, c, d = objects
        assert d.order < c.order < b.order < a.order

    @pytest.mark.parametrize("count", [0, 1, 2, 7, 25])
    def test_totality(self, world, count):
        objects = register_all(world, random_scene(count, seed=count))
        world.sort()
        assert sorted(obj.order for obj in objects) == list(range(count))

    def test_orders_respect_every_edge_when_acyclic(self, world):
        register_all(world, column_scene())
        world.sort()
        for obj in world.objects:
            for back in obj.backs:
                assert back.order < obj.order

    def test_idempotent(self, world):
        objects = register_all(world, random_scene(25, seed=11))
        world.sort()
        first = [obj.order for obj in objects]
        for _ in range(3):
            world.sort()
            assert [obj.order for obj in objects] == first

    def test_strategies_agree_on_orders(self):
        sequential = make_world(SorterType.SEQUENTIAL)
        parallel = make_world(SorterType.PARALLEL, max_workers=4)
        seq_objects = register_all(sequential, random_scene(30, seed=5))
        par_objects = register_all(parallel, random_scene(30, seed=5))

        sequential.sort()
        parallel.sort()

        assert [o.order for o in seq_objects] == [o.order for o in par_objects]

    def test_disjoint_objects_produce_no_edges(self, world):
        register_all(world, [
            IsometricObject((0, 0), height=1.0),
            IsometricObject((10, 0), height=1.0),
            IsometricObject((0, 10), height=1.0),
        ])
        world.sort()
        assert world.edge_count() == 0
        assert len(world.roots) == 3

    def test_removal_propagation(self, world):
        a = IsometricObject((0.0, 0.0), height=1.0, name="A")
        b = IsometricObject((0.0, 0.5), height=1.0, name="B")
        register_all(world, [a, b])

        world.sort()
        assert a.backs == {b}
        assert a not in world.roots

        world.unregister(b)
        assert a.backs == set()

        world.sort()
        assert world.roots == [a]
        assert a.order == 0

    def test_moving_an_object_changes_its_order(self, world):
        a, b = register_all(world, column_scene()[:2])
        world.sort()
        assert a.order > b.order

        # Move A behind B
        a.move_to(0.0, 1.0)
        world.sort()
        assert a.order < b.order

    def test_tile_dimension_change_recomputes_corners(self, world):
        a = IsometricObject((0.0, 0.0), name="A")
        world.register(a)
        world.sort()
        assert tuple(a.floor_right) == (0.5, 0.0)

        world.set_tile_dimensions(2.0, 1.0)
        world.sort()
        assert tuple(a.floor_right) == (1.0, 0.0)
        assert world.config.tile_width == 2.0

    def test_invalid_tile_dimensions(self, world):
        with pytest.raises(ValueError):
            world.set_tile_dimensions(0.0, 1.0)


class TestCulling:

    def test_culled_object_keeps_order_and_has_no_edges(self, world):
        a, b, c, d = register_all(world, column_scene())
        world.sort()
        previous = b.order

        world.set_culling_predicate(lambda obj: obj is b)
        draw_order = world.sort()

        assert b not in draw_order
        assert b.order == previous
        assert b.fronts == set() and b.backs == set()
        for obj in (a, c, d):
            assert b not in obj.fronts and b not in obj.backs
        assert sorted(obj.order for obj in (a, c, d)) == [0, 1, 2]

    def test_inactive_objects_are_skipped(self, world):
        a, b, c, d = register_all(world, column_scene())
        c.active = False
        draw_order = world.sort()
        assert c not in draw_order
        assert len(draw_order) == 3

    def test_ignore_sort_hook_needs_culling_enabled(self):
        for culling, expected in ((False, 4), (True, 3)):
            world = make_world(culling=culling)
            a, b, c, d = register_all(world, column_scene())
            d.ignore_sort = lambda: True
            assert len(world.sort()) == expected

    def test_draw_order_lists_participants(self, world):
        a, b, c, d = register_all(world, column_scene())
        world.set_culling_predicate(lambda obj: obj is a)
        world.sort()
        assert world.draw_order() == [d, c, b]


class TestLifecycle:

    def test_destroyed_objects_are_swept(self, world):
        a, b, c, d = register_all(world, column_scene())
        world.sort()
        assert b in a.backs

        b.destroy()
        world.sort()

        assert b not in world
        assert b not in a.backs
        assert b not in d.fronts
        assert world.stats["destroyed_swept"] == 1

    def test_reentrant_sort_raises(self, world):
        a, b = register_all(world, column_scene()[:2])
        def resort(order):
            world.sort()

        a.add_order_listener(resort)
        with pytest.raises(ReentrantSortError):
            world.sort()

        # The guard is released afterwards
        a.remove_order_listener(resort)
        a.order = 0
        world.sort()
        assert a.order == 1

    def test_registry_is_locked_during_a_pass(self, world):
        a, b = register_all(world, column_scene()[:2])
        a.add_order_listener(lambda order: world.register(IsometricObject()))
        with pytest.raises(RegistryLockedError):
            world.sort()


class TestConfiguration:

    def test_default_config(self):
        config = SortConfig()
        assert config.sorter_type is SorterType.PARALLEL
        assert config.tile_width == 1.0
        assert not config.culling

    @pytest.mark.parametrize("kwargs", [
        {"tile_width": 0},
        {"tile_height": -1},
        {"max_workers": 0},
        {"tolerance": -1e-3},
        {"sorter_type": "bogus"},
    ])
    def test_invalid_config(self, kwargs):
        with pytest.raises(ValueError):
            SortConfig(**kwargs)

    def test_switch_strategy(self):
        world = make_world(SorterType.SEQUENTIAL)
        assert isinstance(world.builder, SequentialGraphBuilder)

        world.set_sorter_type(SorterType.PARALLEL)
        assert isinstance(world.builder, ParallelGraphBuilder)
        assert world.sorter_type is SorterType.PARALLEL
        assert world.config.sorter_type is SorterType.PARALLEL

        world.set_sorter_type("sequential")
        assert isinstance(world.builder, SequentialGraphBuilder)

    def test_stats(self, world):
        register_all(world, column_scene())
        for _ in range(10):
            world.sort()

        stats = world.stats
        assert stats["passes"] == 10
        assert stats["sorted_object_count"] == 4
        assert stats["edge_count"] == 5
        assert stats["root_count"] == 1
        assert stats["avg_time_per_10_calls"] >= 0.0
        assert stats["average_ms"] >= 0.0
