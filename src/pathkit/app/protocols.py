from collections.abc import Iterator, Sequence
from typing import Protocol, runtime_checkable

from pathkit.domain.entities.geography import Point


# ------------- Point index --------------------
@runtime_checkable
class PivotSelector(Protocol):
    """
    Responsibilities:
      • Pick the vantage point for one subtree during a VP-tree build.
    Returns an index into ``points`` (never empty when called).
    Implementations shared across threads must synchronise their own state.
    """

    def select(self, points: Sequence[Point]) -> int: ...


@runtime_checkable
class PointIndex(Protocol):
    """Immutable nearest-neighbour index over 2-D points."""

    def search(self, query: Point) -> Point: ...
    def __iter__(self) -> Iterator[Point]: ...
    def __len__(self) -> int: ...
