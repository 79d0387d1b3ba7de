# pathkit/domain/routing/dijkstra.py
"""
Array-based Dijkstra over a ``Graph``.

The frontier is found with a linear scan (O(V) per step, O(V^2) overall);
there is no priority queue. Unreached nodes carry ``None`` rather than a
large sentinel, so relaxation arithmetic only ever adds finite weights.
Edge weights must be non-negative; ``Edge`` refuses negative weights.
"""

import time
from collections.abc import Sequence

from pathkit.domain.entities.graph import Graph
from pathkit.errors import InvalidIndexError, UnreachableTargetError
from pathkit.runtime.hooks import NoopHooks, RouteHooks


def _relax_all(graph: Graph, source: int) -> tuple[list[int | None], list[int | None]]:
    n = len(graph)
    weights: list[int | None] = [None] * n
    previous: list[int | None] = [None] * n
    visited = [False] * n
    weights[source] = 0

    def frontier() -> int | None:
        best, best_w = None, None
        for i in range(n):
            w = weights[i]
            if not visited[i] and w is not None and (best_w is None or w < best_w):
                best, best_w = i, w
        return best

    f = frontier()
    while f is not None:
        fw = weights[f]
        for edge in graph.nodes[f].edges:
            v = graph.check_index(edge.target, what=f"edge {f}->")
            cand = fw + edge.weight
            if weights[v] is None or cand < weights[v]:
                weights[v] = cand
                previous[v] = f
        visited[f] = True
        f = frontier()

    return weights, previous


def shortest_distances(graph: Graph, source: int) -> list[int | None]:
    """Minimum weight from ``source`` to every node; ``None`` where unreachable."""
    graph.check_index(source, what="source")
    weights, _ = _relax_all(graph, source)
    return weights


def shortest_path(
    graph: Graph,
    source: int,
    target: int,
    *,
    hooks: RouteHooks | None = None,
) -> tuple[int, list[int]]:
    """
    Returns ``(total_weight, path)`` with ``path`` ordered target -> source.
    Reverse it for travel order.
    """
    hooks = hooks or NoopHooks()
    try:
        graph.check_index(source, what="source")
        graph.check_index(target, what="target")
    except InvalidIndexError as exc:
        hooks.error(reason="invalid_index", source=source, target=target, error=str(exc))
        raise

    t0 = time.perf_counter()
    hooks.route_start(source=source, target=target, nodes=len(graph))
    try:
        weights, previous = _relax_all(graph, source)
    except InvalidIndexError as exc:
        hooks.error(reason="invalid_index", source=source, target=target, error=str(exc))
        raise

    path = [target]
    n = target
    while n != source:
        prev = previous[n]
        if prev is None:
            hooks.error(reason="unreachable", source=source, target=target)
            raise UnreachableTargetError(source, target)
        path.append(prev)
        n = prev

    total = weights[target]
    hooks.route_end(
        source=source,
        target=target,
        weight=total,
        hops=len(path) - 1,
        ms=(time.perf_counter() - t0) * 1000,
    )
    return total, path


def path_weight(graph: Graph, path: Sequence[int]) -> int:
    """Sum of edge weights along ``path`` (source -> target order).

    Where parallel edges exist the lightest one is used.
    """
    total = 0
    for u, v in zip(path, path[1:]):
        ws = [e.weight for e in graph.neighbors(u) if e.target == v]
        if not ws:
            raise InvalidIndexError(f"no edge {u}->{v} in graph")
        total += min(ws)
    return total
