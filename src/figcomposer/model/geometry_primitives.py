"""
Geometric Primitives for viewport coordinates.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Union
import math


@dataclass(frozen=True)
class Vector:
    """
    A 2D displacement, in mils or user units.
    """
    x: float
    y: float

    @property
    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)


@dataclass(frozen=True)
class Point:
    """A location in 2D, either in "user" units or in mils WRT a viewport's bottom-left corner."""
    x: float
    y: float

    def __add__(self, other: Vector) -> Point:
        # Point + Vector = Point (Translation)
        if isinstance(other, Vector):
            return Point(self.x + other.x, self.y + other.y)
        raise TypeError("Can only add a Vector to a Point.")

    def __sub__(self, other: Union[Vector, Point]) -> Union[Vector, Point]:
        # Point - Point = Vector (Offset)
        if isinstance(other, Point):
            return Vector(self.x - other.x, self.y - other.y)
        # Point - Vector = Point (Inverse translation)
        if isinstance(other, Vector):
            return Point(self.x - other.x, self.y - other.y)
        raise TypeError("Can only subtract a Vector or Point from a Point.")

    def distance_to(self, other: Point) -> float:
        return (self - other).magnitude


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle anchored at its bottom-left corner, in mils."""
    x: float
    y: float
    width: float
    height: float

    def contains(self, point: Point) -> bool:
        """True if `point` lies inside the rectangle or on its border."""
        return self.x <= point.x <= self.x + self.width and self.y <= point.y <= self.y + self.height
