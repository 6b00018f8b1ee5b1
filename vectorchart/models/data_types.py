"""
Geometric value types for vector chart extraction.

Provides:
- Point: 2D point in page space
- Rectangle: axis-aligned box with computed properties and set operations
"""

from dataclasses import dataclass
from typing import Iterable, Tuple


@dataclass
class Point:
    """2D point in page pixels."""

    x: float
    y: float

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass
class Rectangle:
    """Rectangle defined by position and dimensions (page pixels, y down)."""

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def x2(self) -> float:
        """Right edge x coordinate."""
        return self.x + self.width

    @property
    def y2(self) -> float:
        """Bottom edge y coordinate."""
        return self.y + self.height

    @property
    def center(self) -> Tuple[float, float]:
        """Center point (cx, cy)."""
        return (self.x + self.width / 2, self.y + self.height / 2)

    @property
    def area(self) -> float:
        """Area in square pixels."""
        return self.width * self.height

    def as_tuple(self) -> Tuple[float, float, float, float]:
        """Convert to (x, y, width, height) tuple."""
        return (self.x, self.y, self.width, self.height)

    @classmethod
    def from_tuple(cls, t: Tuple[float, float, float, float]) -> "Rectangle":
        """Create from (x, y, width, height) tuple."""
        return cls(x=t[0], y=t[1], width=t[2], height=t[3])

    @classmethod
    def from_points(cls, points: Iterable[Tuple[float, float]]) -> "Rectangle":
        """Axis-aligned hull of a set of points."""
        points = list(points)
        if not points:
            return cls()
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        return cls(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))

    def corners(self) -> list:
        """The four corners, clockwise from the top-left."""
        return [
            (self.x, self.y),
            (self.x2, self.y),
            (self.x2, self.y2),
            (self.x, self.y2),
        ]

    def clone(self) -> "Rectangle":
        return Rectangle(self.x, self.y, self.width, self.height)

    def union(self, other: "Rectangle") -> "Rectangle":
        """Smallest rectangle covering both."""
        x = min(self.x, other.x)
        y = min(self.y, other.y)
        return Rectangle(x, y, max(self.x2, other.x2) - x, max(self.y2, other.y2) - y)

    def intersect(self, other: "Rectangle") -> "Rectangle":
        """Overlap of both rectangles.

        Disjoint rectangles collapse to a zero-size box at the clamped origin
        rather than producing a negative width or height.
        """
        x = max(self.x, other.x)
        y = max(self.y, other.y)
        width = max(0.0, min(self.x2, other.x2) - x)
        height = max(0.0, min(self.y2, other.y2) - y)
        return Rectangle(x, y, width, height)

    def contains_point(self, px: float, py: float) -> bool:
        return self.x <= px <= self.x2 and self.y <= py <= self.y2

    def strictly_contains(self, other: "Rectangle") -> bool:
        """True if ``other`` lies strictly inside on all four edges."""
        return (
            other.x > self.x
            and other.y > self.y
            and other.x2 < self.x2
            and other.y2 < self.y2
        )
