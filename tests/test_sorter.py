"""Tests for the topological sorter."""

import sys

from isosort import IsometricObject, TopologySorter


def occludes(near, far):
    """Wire the edge "near draws after far" by hand."""
    near.set_back(far)
    far.set_front(near)


def named(*names):
    return [IsometricObject(name=name) for name in names]


def orders(objects):
    return [obj.order for obj in objects]


def test_chain_orders_farthest_first():
    a, b, c, d = named("A", "B", "C", "D")
    occludes(a, b)
    occludes(b, c)
    occludes(c, d)

    sorter = TopologySorter()
    draw_order = sorter.sort([a, b, c, d])

    assert sorter.roots == [d]
    assert draw_order == [d, c, b, a]
    assert orders([d, c, b, a]) == [0, 1, 2, 3]


def test_result_is_topological_for_a_dag():
    objs = named("a", "b", "c", "d", "e", "f")
    a, b, c, d, e, f = objs
    occludes(a, b)
    occludes(a, c)
    occludes(b, d)
    occludes(c, d)
    occludes(e, d)
    occludes(f, a)

    TopologySorter().sort(objs)

    for obj in objs:
        for back in obj.backs:
            assert back.order < obj.order


def test_empty_input():
    sorter = TopologySorter()
    assert sorter.sort([]) == []
    assert sorter.roots == []


def test_unrelated_objects_get_dense_orders():
    objs = named("a", "b", "c")
    TopologySorter().sort(objs)
    assert sorted(orders(objs)) == [0, 1, 2]


def test_three_cycle_terminates():
    a, b, c = named("A", "B", "C")
    occludes(a, b)
    occludes(b, c)
    occludes(c, a)

    sorter = TopologySorter()
    draw_order = sorter.sort([a, b, c])

    assert sorter.roots == []
    assert len(draw_order) == 3
    assert sorted(orders([a, b, c])) == [0, 1, 2]


def test_cycle_reached_from_root():
    root, a, b, c = named("root", "A", "B", "C")
    occludes(a, root)
    occludes(a, b)
    occludes(b, c)
    occludes(c, a)

    sorter = TopologySorter()
    sorter.sort([root, a, b, c])

    assert sorter.roots == [root]
    assert root.order == 0
    assert sorted(orders([root, a, b, c])) == [0, 1, 2, 3]


def test_two_cycle_tie_break_is_deterministic():
    results = set()
    for _ in range(5):
        a, b = named("A", "B")
        occludes(a, b)
        occludes(b, a)
        TopologySorter().sort([a, b])
        results.add((a.order, b.order))
    assert len(results) == 1


def test_roots_follow_list_order():
    objs = named("a", "b", "c")
    sorter = TopologySorter()
    sorter.sort(objs)
    assert sorter.roots == objs

    sorter.sort(list(reversed(objs)))
    assert sorter.roots == list(reversed(objs))


def test_edges_to_objects_outside_the_pass_are_ignored():
    a, b, outside = named("A", "B", "outside")
    occludes(a, b)
    occludes(b, outside)

    sorter = TopologySorter()
    sorter.sort([a, b])

    assert sorter.roots == [b]
    assert (b.order, a.order) == (0, 1)
    assert outside.order == 0


def test_long_chain_does_not_recurse():
    count = sys.getrecursionlimit() + 500
    objs = [IsometricObject(name=str(i)) for i in range(count)]
    for near, far in zip(objs, objs[1:]):
        occludes(near, far)

    TopologySorter().sort(objs)

    assert objs[-1].order == 0
    assert objs[0].order == count - 1


def test_order_listener_fires_on_change_only():
    a, b = named("A", "B")
    occludes(a, b)
    seen = []
    a.add_order_listener(seen.append)

    TopologySorter().sort([a, b])
    TopologySorter().sort([a, b])

    assert seen == [1]
    assert a.consume_order_change()
    assert not a.consume_order_change()
    assert not b.order_changed

    a.remove_order_listener(seen.append)
    a.order = 7
    assert seen == [1]
