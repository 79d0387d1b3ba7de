# runtime/hooks.py
from typing import Protocol

from pathkit.domain.entities.geography import Point


class IndexHooks(Protocol):
    def build_start(self, *, points: int): ...
    def build_end(self, *, points: int, depth: int, ms: float): ...
    def search(self, query: Point, *, found: Point, dist: float): ...


class RouteHooks(Protocol):
    def route_start(self, *, source: int, target: int, nodes: int): ...
    def route_end(self, *, source: int, target: int, weight: int, hops: int, ms: float): ...
    def error(self, *, reason: str, **kw): ...


class NoopHooks:
    def build_start(self, **_):
        pass

    def build_end(self, **_):
        pass

    def search(self, *_, **__):
        pass

    def route_start(self, **_):
        pass

    def route_end(self, **_):
        pass

    def error(self, **_):
        pass
