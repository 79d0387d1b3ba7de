# pathkit/domain/index/vptree.py
import heapq
import math
import time
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from pathkit.app.protocols import PivotSelector, PointIndex
from pathkit.domain.entities.geography import Point, Pt, as_point, distance
from pathkit.domain.index.pivots import RandomPivotSelector
from pathkit.errors import EmptyPointSetError
from pathkit.runtime.hooks import IndexHooks, NoopHooks


@dataclass(frozen=True, eq=False, repr=False)
class VPTree(PointIndex):
    """
    One node of a vantage-point tree.

    ``left`` holds the points within ``radius`` of ``center``; ``right`` holds
    the rest. The center itself belongs to neither child. A node without
    children is a leaf with ``radius == 0``.

    Duplicate-heavy inputs degrade into a chain as deep as the point count,
    so every walk over the tree uses an explicit stack.
    """

    center: Point
    radius: float = 0.0
    left: "VPTree | None" = None
    right: "VPTree | None" = None

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def __iter__(self) -> Iterator[Point]:
        # pre-order
        stack: list[VPTree] = [self]
        while stack:
            node = stack.pop()
            yield node.center
            if node.right is not None:
                stack.append(node.right)
            if node.left is not None:
                stack.append(node.left)

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __eq__(self, other):
        if not isinstance(other, VPTree):
            return NotImplemented
        stack = [(self, other)]
        while stack:
            a, b = stack.pop()
            if a is b:
                continue
            if a is None or b is None or a.center != b.center or a.radius != b.radius:
                return False
            stack.append((a.left, b.left))
            stack.append((a.right, b.right))
        return True

    def __hash__(self):
        return hash((self.center, self.radius))

    def __repr__(self) -> str:
        return f"VPTree(center={self.center!r}, radius={self.radius!r}, points={len(self)})"

    def depth(self) -> int:
        best, stack = 0, [(self, 1)]
        while stack:
            node, d = stack.pop()
            best = max(best, d)
            for child in (node.left, node.right):
                if child is not None:
                    stack.append((child, d + 1))
        return best

    def search(self, query: Pt) -> Point:
        """Nearest stored point to ``query`` (Euclidean)."""
        q = as_point(query)
        stack = [_SearchFrame.at(self, q)]
        found: Point | None = None  # result handed up by the frame just popped
        while True:
            f = stack[-1]
            node = f.node
            if f.stage == 0:
                f.stage = 1
                if node.left is not None:
                    stack.append(_SearchFrame.at(node.left, q))
                    continue
            if f.stage == 1:
                if found is not None:
                    left_dist = distance(q, found)
                    if left_dist < f.closest_dist:
                        f.closest, f.closest_dist = found, left_dist
                    found = None
                f.stage = 2
                # right points lie beyond radius, so they are at least (radius - d) from q
                to_circumference = node.radius - f.center_to_query
                if to_circumference <= f.center_to_query and node.right is not None:
                    stack.append(_SearchFrame.at(node.right, q))
                    continue
            if found is not None:
                # closest_dist is not refreshed here; nothing after this reads it
                if distance(q, found) < f.closest_dist:
                    f.closest = found
            found = f.closest
            stack.pop()
            if not stack:
                return found


@dataclass
class _SearchFrame:
    node: VPTree
    center_to_query: float
    closest: Point
    closest_dist: float
    stage: int = 0  # 0: left pending, 1: left done, 2: right done

    @classmethod
    def at(cls, node: VPTree, q: Point) -> "_SearchFrame":
        d = distance(q, node.center)
        return cls(node=node, center_to_query=d, closest=node.center, closest_dist=d)


# ----------------------- Construction ---------------------------------


def partition(center: Point, points: Sequence[Point]) -> tuple[list[Point], list[Point], float]:
    """
    Median split of ``points`` by distance to ``center``.

    The nearest ceil(n/2) points go left and fix the radius; any later point
    tied with the radius also goes left.
    """
    if not points:
        return [], [], 0.0

    # seq only keeps heapq from ever comparing two Points on a distance tie
    heap = [(distance(center, p), seq, p) for seq, p in enumerate(points)]
    heapq.heapify(heap)

    left: list[Point] = []
    right: list[Point] = []
    radius = 0.0
    for _ in range(math.ceil(len(heap) / 2)):
        radius, _, p = heapq.heappop(heap)
        left.append(p)
    while heap:
        d, _, p = heapq.heappop(heap)
        (left if d <= radius else right).append(p)
    return left, right, radius


def _build(points: Sequence[Point], selector: PivotSelector) -> tuple[VPTree, int]:
    """Returns the root and the tree depth.

    Pivots are selected in pre-order (node, whole left subtree, right subtree);
    nodes are frozen afterwards, children before parents.
    """
    # [center, radius, left slot, right slot]; children always get higher slots
    specs: list[list] = []
    todo: list[tuple[Sequence[Point], int, int, int]] = [(points, -1, 0, 1)]
    depth = 0
    while todo:
        pts, parent, side, level = todo.pop()
        depth = max(depth, level)
        c = selector.select(pts)
        center = pts[c]
        left, right, radius = partition(center, [p for i, p in enumerate(pts) if i != c])
        slot = len(specs)
        specs.append([center, radius, None, None])
        if parent >= 0:
            specs[parent][2 + side] = slot
        if right:
            todo.append((right, slot, 1, level + 1))
        if left:
            todo.append((left, slot, 0, level + 1))

    nodes: list[VPTree | None] = [None] * len(specs)
    for slot in reversed(range(len(specs))):
        center, radius, li, ri = specs[slot]
        nodes[slot] = VPTree(
            center=center,
            radius=radius,
            left=nodes[li] if li is not None else None,
            right=nodes[ri] if ri is not None else None,
        )
    return nodes[0], depth


def build_vp_tree(
    points: Sequence[Pt],
    selector: PivotSelector | None = None,
    *,
    hooks: IndexHooks | None = None,
) -> VPTree:
    pts = [as_point(p) for p in points]
    if not pts:
        raise EmptyPointSetError("cannot build a VP-tree from an empty point set")
    selector = selector or RandomPivotSelector()
    hooks = hooks or NoopHooks()

    t0 = time.perf_counter()
    hooks.build_start(points=len(pts))
    tree, depth = _build(pts, selector)
    hooks.build_end(points=len(pts), depth=depth, ms=(time.perf_counter() - t0) * 1000)
    return tree


def search(tree: VPTree, query: Pt, *, hooks: IndexHooks | None = None) -> Point:
    q = as_point(query)
    found = tree.search(q)
    if hooks is not None:
        hooks.search(q, found=found, dist=distance(q, found))
    return found
