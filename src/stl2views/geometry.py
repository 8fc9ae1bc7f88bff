"""Small geometric value types shared by the decoder and the projection engine."""

import math
from dataclasses import dataclass
from typing import Iterable, List, Tuple

@dataclass(frozen=True)
class Vector3:
    x: float
    y: float
    z: float

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def dot(self, other: 'Vector3') -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

@dataclass(frozen=True)
class Point2D:
    x: float
    y: float

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def distance_to(self, other: 'Point2D') -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

@dataclass(frozen=True)
class Line2D:
    p0: Point2D
    p1: Point2D

    def length(self) -> float:
        return self.p0.distance_to(self.p1)

    def as_list(self) -> List[List[float]]:
        return [[self.p0.x, self.p0.y], [self.p1.x, self.p1.y]]

@dataclass(frozen=True)
class BoundingBox:
    min: Vector3
    max: Vector3

    @classmethod
    def from_points(cls, points: Iterable[Vector3]) -> 'BoundingBox':
        """Axis-aligned box around the given points (zero box when empty)."""
        points = list(points)
        if not points:
            origin = Vector3(0.0, 0.0, 0.0)
            return cls(origin, origin)

        xs = [p.x for p in points]
        ys = [p.y for p in points]
        zs = [p.z for p in points]
        return cls(Vector3(min(xs), min(ys), min(zs)),
                   Vector3(max(xs), max(ys), max(zs)))

    def size(self) -> Tuple[float, float, float]:
        return (self.max.x - self.min.x,
                self.max.y - self.min.y,
                self.max.z - self.min.z)

    def center(self) -> Vector3:
        return Vector3((self.min.x + self.max.x) / 2,
                       (self.min.y + self.max.y) / 2,
                       (self.min.z + self.max.z) / 2)


def point_to_segment_distance(p: Point2D, start: Point2D, end: Point2D) -> float:
    """Distance from ``p`` to the closest point of the segment ``start``-``end``."""
    dx = end.x - start.x
    dy = end.y - start.y
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return p.distance_to(start)

    t = ((p.x - start.x) * dx + (p.y - start.y) * dy) / length_sq
    t = max(0.0, min(1.0, t))
    return math.hypot(p.x - (start.x + t * dx), p.y - (start.y + t * dy))


def round_half_up(value: float, factor: float) -> int:
    """Round ``value * factor`` to the nearest integer, ties towards +inf."""
    return math.floor(value * factor + 0.5)
