"""Geometry data structures for canvas coordinates."""
from dataclasses import dataclass


@dataclass
class Vec2:
    """2D vector for coordinate pairs.

    Used for any x/y coordinate pair across different spaces:
    - Screen pixels (pointer positions reported by the host UI)
    - Canvas pixels (layer geometry for one ad size)
    """
    x: float
    y: float

    def __iter__(self):
        """Allow tuple unpacking: x, y = vec2"""
        return iter((self.x, self.y))

    def __add__(self, other: 'Vec2') -> 'Vec2':
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'Vec2') -> 'Vec2':
        return Vec2(self.x - other.x, self.y - other.y)

    def scaled(self, factor: float) -> 'Vec2':
        return Vec2(self.x * factor, self.y * factor)


@dataclass
class Rect:
    """Axis-aligned rectangle in canvas pixels (top-left origin).

    Layers never rotate, so every layer's footprint for a given ad size
    is one of these.
    """
    x: float
    y: float
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2.0

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2.0

    def translated(self, dx: float, dy: float) -> 'Rect':
        return Rect(self.x + dx, self.y + dy, self.width, self.height)

    @classmethod
    def union(cls, rects) -> 'Rect':
        """Smallest rectangle enclosing every rect (the selection bounding box)

        Raises:
            ValueError: If rects is empty
        """
        rects = list(rects)
        if not rects:
            raise ValueError("Need at least one rectangle")
        min_x = min(r.left for r in rects)
        min_y = min(r.top for r in rects)
        max_x = max(r.right for r in rects)
        max_y = max(r.bottom for r in rects)
        return cls(min_x, min_y, max_x - min_x, max_y - min_y)
