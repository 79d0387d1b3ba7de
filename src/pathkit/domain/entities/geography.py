import math
from dataclasses import dataclass


# Planar coordinates; no projection or great-circle math is applied
@dataclass(frozen=True)
class Point:
    lon: float
    lat: float


Pt = Point | tuple[float, float]


def as_point(p: Pt) -> Point:
    return p if isinstance(p, Point) else Point(float(p[0]), float(p[1]))


def distance(a: Point, b: Point) -> float:
    return math.hypot(a.lon - b.lon, a.lat - b.lat)
