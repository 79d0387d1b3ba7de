# pathkit/domain/index/pivots.py
import threading
from collections.abc import Iterable, Sequence

import numpy as np

from pathkit.app.protocols import PivotSelector
from pathkit.domain.entities.geography import Point
from pathkit.errors import InvalidIndexError, PivotSequenceExhausted


class RandomPivotSelector(PivotSelector):
    """Uniform choice among the candidate points."""

    def __init__(self, rng: np.random.Generator | None = None):
        self.rng = rng if rng is not None else np.random.default_rng()
        # numpy Generators are not safe to share between threads
        self._lock = threading.Lock()

    def select(self, points: Sequence[Point]) -> int:
        with self._lock:
            return int(self.rng.integers(0, len(points)))


class SequencePivotSelector(PivotSelector):
    """Replays a fixed list of indices, one per subtree, in build order."""

    def __init__(self, indices: Iterable[int]):
        self._pending = list(indices)
        self._lock = threading.Lock()

    @property
    def remaining(self) -> int:
        return len(self._pending)

    def select(self, points: Sequence[Point]) -> int:
        with self._lock:
            if not self._pending:
                raise PivotSequenceExhausted("no pivot indices left to replay")
            i = self._pending.pop(0)
        if not 0 <= i < len(points):
            raise InvalidIndexError(f"pivot index {i} out of range for {len(points)} points")
        return i


class FirstPivotSelector(PivotSelector):
    def select(self, points: Sequence[Point]) -> int:
        return 0
