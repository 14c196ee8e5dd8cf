"""
Spatial index for the arena.

Each tick the sensor and the contact detector rebuild one tree over the
current body positions and ask it for everything within a radius.

USAGE:
    tree: QuadTree[int] = QuadTree(Rect(-51, -51, 102, 102))
    tree.insert(Point(x, y, body_id))
    near = [p.data for p in tree.query_radius(x, y, 2.5)]
"""

from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar

T = TypeVar('T')


@dataclass
class Rect:
    """Axis-aligned box, half-open on its far edges."""
    x: float
    y: float
    w: float
    h: float

    def contains(self, point: 'Point') -> bool:
        return self.x <= point.x < self.x + self.w and self.y <= point.y < self.y + self.h

    def intersects(self, other: 'Rect') -> bool:
        return (other.x < self.x + self.w and self.x < other.x + other.w and
                other.y < self.y + self.h and self.y < other.y + other.h)

    def quadrants(self) -> List['Rect']:
        hw, hh = self.w / 2, self.h / 2
        return [
            Rect(self.x, self.y, hw, hh),
            Rect(self.x + hw, self.y, hw, hh),
            Rect(self.x, self.y + hh, hw, hh),
            Rect(self.x + hw, self.y + hh, hw, hh),
        ]


@dataclass
class Point(Generic[T]):
    x: float
    y: float
    data: T


class QuadTree(Generic[T]):
    """Point quadtree with a bucket `capacity` per node."""

    # Coincident points (e.g. a corpse's resources) would otherwise subdivide forever
    MAX_DEPTH = 12

    def __init__(self, boundary: Rect, capacity: int = 4, depth: int = 0):
        self.boundary = boundary
        self.capacity = capacity
        self.depth = depth
        self.points: List[Point[T]] = []
        self.children: Optional[List['QuadTree[T]']] = None

    def insert(self, point: Point[T]) -> bool:
        """Add a point. Returns False if it lies outside this tree's boundary."""
        if not self.boundary.contains(point):
            return False

        if self.children is None:
            if len(self.points) < self.capacity or self.depth >= self.MAX_DEPTH:
                self.points.append(point)
                return True
            self.children = [QuadTree(r, self.capacity, self.depth + 1)
                             for r in self.boundary.quadrants()]

        return any(child.insert(point) for child in self.children)

    def query_points(self, area: Rect, found: Optional[List[Point[T]]] = None) -> List[Point[T]]:
        """All points inside `area`."""
        if found is None:
            found = []
        if not self.boundary.intersects(area):
            return found

        found.extend(p for p in self.points if area.contains(p))
        for child in self.children or ():
            child.query_points(area, found)
        return found

    def query_radius(self, x: float, y: float, radius: float) -> List[Point[T]]:
        """Points within `radius` of (x, y), edge included."""
        # The far edges of Rect are open, so pad the box slightly
        side = 2 * radius + 1e-9
        r_sq = radius * radius
        return [p for p in self.query_points(Rect(x - radius, y - radius, side, side))
                if (p.x - x) ** 2 + (p.y - y) ** 2 <= r_sq]

    def clear(self):
        self.points = []
        self.children = None
