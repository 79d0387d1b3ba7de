# tests/domain/test_vptree.py
import math

import numpy as np
import pytest

from pathkit.domain.entities.geography import Point, distance
from pathkit.domain.index.pivots import FirstPivotSelector, RandomPivotSelector, SequencePivotSelector
from pathkit.domain.index.vptree import VPTree, build_vp_tree, partition, search
from pathkit.errors import EmptyPointSetError, PivotSequenceExhausted

SCENARIO = [
    Point(-2.5, -3.0),
    Point(-2.0, -2.5),
    Point(0.0, -4.0),
    Point(0.0, 0.0),
    Point(0.5, -1.5),
    Point(1.0, 0.0),
]


def _random_points(rng, n, scale=100.0):
    return [Point(float(x), float(y)) for x, y in rng.uniform(-scale, scale, size=(n, 2))]


def _nodes(tree: VPTree):
    stack = [tree]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(c for c in (node.left, node.right) if c is not None)


# ---------- Construction


def test_scenario_tree_shape_with_replayed_pivots():
    sel = SequencePivotSelector([3, 1, 0, 0, 0, 0])
    tree = build_vp_tree(SCENARIO, sel)
    assert sel.remaining == 0

    assert tree.center == Point(0.0, 0.0)
    assert tree.radius == pytest.approx(math.hypot(2.0, 2.5))
    assert tree.left.center == Point(0.5, -1.5)
    assert tree.left.left.center == Point(1.0, 0.0)
    assert tree.left.right.center == Point(-2.0, -2.5)
    assert tree.right.center == Point(-2.5, -3.0)
    assert tree.right.left.center == Point(0.0, -4.0)
    assert tree.right.right is None


def test_scenario_search_returns_expected_point():
    tree = build_vp_tree(SCENARIO, SequencePivotSelector([3, 1, 0, 0, 0, 0]))
    assert tree.search(Point(-2.0, -2.6)) == Point(-2.0, -2.5)


def test_single_point_is_a_leaf():
    tree = build_vp_tree([Point(1.0, 2.0)])
    assert tree.is_leaf
    assert tree.radius == 0.0
    assert tree.search(Point(50.0, 50.0)) == Point(1.0, 2.0)


def test_empty_input_fails_fast():
    with pytest.raises(EmptyPointSetError):
        build_vp_tree([])
    with pytest.raises(ValueError):
        build_vp_tree([])


def test_tuples_are_accepted_as_points():
    tree = build_vp_tree([(0.0, 0.0), (3.0, 4.0)], FirstPivotSelector())
    assert tree.center == Point(0.0, 0.0)
    assert search(tree, (2.9, 4.1)) == Point(3.0, 4.0)


def test_exhausted_pivot_sequence_raises():
    with pytest.raises(PivotSequenceExhausted):
        build_vp_tree(SCENARIO, SequencePivotSelector([3, 1]))


@pytest.mark.parametrize("seed", [0, 1, 7, 2024])
def test_every_point_appears_exactly_once(seed):
    rng = np.random.default_rng(seed)
    pts = _random_points(rng, 200)
    tree = build_vp_tree(pts, RandomPivotSelector(rng))
    assert len(tree) == len(pts)
    assert sorted((p.lon, p.lat) for p in tree) == sorted((p.lon, p.lat) for p in pts)


def test_duplicate_points_are_all_retained():
    pts = [Point(1.0, 1.0)] * 5 + [Point(2.0, 2.0)] * 3
    tree = build_vp_tree(pts, FirstPivotSelector())
    assert len(tree) == 8
    assert tree.search(Point(1.9, 1.9)) == Point(2.0, 2.0)


@pytest.mark.parametrize("seed", [3, 11])
def test_partition_boundary_holds_at_every_node(seed):
    rng = np.random.default_rng(seed)
    # integer grid => plenty of distance ties at the boundary
    pts = [Point(float(x), float(y)) for x, y in rng.integers(0, 6, size=(120, 2))]
    tree = build_vp_tree(pts, RandomPivotSelector(rng))
    for node in _nodes(tree):
        if node.left is not None:
            assert all(distance(node.center, p) <= node.radius for p in node.left)
        if node.right is not None:
            assert all(distance(node.center, p) > node.radius for p in node.right)


def test_partition_keeps_ties_on_the_left():
    c = Point(0.0, 0.0)
    pts = [Point(1.0, 0.0), Point(0.0, 1.0), Point(-1.0, 0.0), Point(5.0, 0.0)]
    left, right, radius = partition(c, pts)
    assert radius == 1.0
    assert left == [Point(1.0, 0.0), Point(0.0, 1.0), Point(-1.0, 0.0)]
    assert right == [Point(5.0, 0.0)]


def test_partition_of_nothing():
    assert partition(Point(0.0, 0.0), []) == ([], [], 0.0)


# ---------- Search


@pytest.mark.parametrize("seed", [5, 42, 99])
def test_search_matches_brute_force(seed):
    rng = np.random.default_rng(seed)
    pts = _random_points(rng, 150)
    tree = build_vp_tree(pts, RandomPivotSelector(rng))
    for q in _random_points(rng, 100, scale=120.0):
        got = tree.search(q)
        best = min(distance(q, p) for p in pts)
        assert distance(q, got) == pytest.approx(best)


def test_search_of_stored_point_returns_itself():
    rng = np.random.default_rng(8)
    pts = _random_points(rng, 60)
    tree = build_vp_tree(pts, RandomPivotSelector(rng))
    for p in pts:
        assert tree.search(p) == p


def test_repeated_search_is_stable():
    tree = build_vp_tree(SCENARIO, SequencePivotSelector([3, 1, 0, 0, 0, 0]))
    q = Point(0.2, -3.0)
    first = tree.search(q)
    assert all(tree.search(q) == first for _ in range(10))
    assert tree == build_vp_tree(SCENARIO, SequencePivotSelector([3, 1, 0, 0, 0, 0]))


# ---------- Degenerate inputs


class _RecordingHooks:
    def __init__(self):
        self.built = []

    def build_start(self, *, points):
        pass

    def build_end(self, *, points, depth, ms):
        self.built.append((points, depth))


def test_duplicate_heavy_input_does_not_exhaust_the_stack():
    pts = [Point(1.0, 1.0)] * 2500 + [Point(2.0, 2.0)]
    hooks = _RecordingHooks()
    tree = build_vp_tree(pts, FirstPivotSelector(), hooks=hooks)

    assert len(tree) == 2501
    assert tree.depth() > 2000
    assert hooks.built == [(2501, tree.depth())]
    assert tree.search(Point(1.9, 1.9)) == Point(2.0, 2.0)
    assert tree.search(Point(0.0, 0.0)) == Point(1.0, 1.0)
    assert tree == build_vp_tree(pts, FirstPivotSelector())
    assert "points=2501" in repr(tree)


def test_duplicate_heavy_random_build_matches_brute_force():
    rng = np.random.default_rng(21)
    pts = [Point(0.0, 0.0)] * 1500 + _random_points(rng, 50, scale=5.0)
    tree = build_vp_tree(pts, RandomPivotSelector(rng))
    assert len(tree) == len(pts)
    for q in _random_points(rng, 40, scale=6.0):
        best = min(distance(q, p) for p in pts)
        assert distance(q, tree.search(q)) == pytest.approx(best)


def test_partition_never_compares_points():
    # many exact duplicates at one distance; Points are not orderable
    pts = [Point(1.0, 0.0)] * 50 + [Point(0.0, 1.0)] * 50
    left, right, radius = partition(Point(0.0, 0.0), pts)
    assert radius == 1.0
    assert len(left) == 100 and right == []


def test_depth_is_not_recomputed_after_build(monkeypatch):
    def boom(self):
        raise AssertionError("depth walked after build")

    monkeypatch.setattr(VPTree, "depth", boom)
    hooks = _RecordingHooks()
    tree = build_vp_tree(SCENARIO, SequencePivotSelector([3, 1, 0, 0, 0, 0]), hooks=hooks)
    assert hooks.built == [(6, 3)]
    assert len(tree) == 6
