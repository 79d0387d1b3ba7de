# pathkit/domain/entities/graph.py
from collections.abc import Iterable
from dataclasses import dataclass, field

from pathkit.errors import InvalidIndexError, NegativeWeightError


@dataclass(frozen=True)
class Edge:
    weight: int
    target: int  # index of the node in the owning graph

    def __post_init__(self):
        if isinstance(self.weight, bool) or not isinstance(self.weight, int):
            raise TypeError(f"edge weight must be an int, got {self.weight!r}")
        if self.weight < 0:
            raise NegativeWeightError(f"edge weight must be >= 0, got {self.weight}")


@dataclass(frozen=True)
class Node:
    edges: tuple[Edge, ...] = ()

    def __post_init__(self):
        # accept any iterable (lists in literals) but store immutably
        object.__setattr__(self, "edges", tuple(self.edges))


@dataclass(frozen=True)
class Graph:
    """Directed adjacency list; nodes are addressed by their dense 0-based index."""

    nodes: tuple[Node, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "nodes", tuple(self.nodes))

    def __len__(self) -> int:
        return len(self.nodes)

    @classmethod
    def from_edges(cls, n: int, edges: Iterable[tuple[int, int, int]]) -> "Graph":
        """Build from ``(source, target, weight)`` triples over ``n`` nodes."""
        adj: list[list[Edge]] = [[] for _ in range(n)]
        for u, v, w in edges:
            if not 0 <= u < n:
                raise InvalidIndexError(f"edge source {u} out of range for {n} nodes")
            adj[u].append(Edge(weight=w, target=v))
        g = cls(tuple(Node(tuple(es)) for es in adj))
        g.validate()
        return g

    def check_index(self, i: int, what: str = "node") -> int:
        if isinstance(i, bool) or not isinstance(i, int) or not 0 <= i < len(self.nodes):
            raise InvalidIndexError(f"{what} index {i!r} out of range for {len(self.nodes)} nodes")
        return i

    def validate(self) -> None:
        for u, node in enumerate(self.nodes):
            for e in node.edges:
                self.check_index(e.target, what=f"edge {u}->")

    def neighbors(self, u: int) -> tuple[Edge, ...]:
        return self.nodes[self.check_index(u)].edges
