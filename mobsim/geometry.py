"""Basic geometric types: 3D and 2D vectors and an axis-aligned box."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Vector:
    """A point or direction in 3D space, in metres."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def distance_to(self, other: Vector) -> float:
        """Euclidean distance between two points."""
        return math.sqrt(
            (self.x - other.x) ** 2 + (self.y - other.y) ** 2 + (self.z - other.z) ** 2
        )

    def __add__(self, other: Vector) -> Vector:
        return Vector(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector) -> Vector:
        return Vector(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, factor: float) -> Vector:
        return Vector(self.x * factor, self.y * factor, self.z * factor)

    __rmul__ = __mul__

    def __str__(self) -> str:
        return f"{self.x:g}:{self.y:g}:{self.z:g}"


@dataclass(frozen=True)
class Vector2D:
    """A point or direction in the plane."""

    x: float = 0.0
    y: float = 0.0

    def __str__(self) -> str:
        return f"{self.x:g}:{self.y:g}"


class Side(Enum):
    """Faces of a box."""

    RIGHT = "right"
    LEFT = "left"
    TOP = "top"
    BOTTOM = "bottom"
    UP = "up"
    DOWN = "down"


def _ratio(numerator: float, denominator: float) -> float:
    """Floating-point division following IEEE rules for a zero denominator."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


@dataclass
class Box:
    """An axis-aligned 3D box; the default is a zero-sized box at the origin."""

    x_min: float = 0.0
    x_max: float = 0.0
    y_min: float = 0.0
    y_max: float = 0.0
    z_min: float = 0.0
    z_max: float = 0.0

    def is_inside(self, position: Vector) -> bool:
        """True if the position lies within the box, bounds included."""
        return (
            self.x_min <= position.x <= self.x_max
            and self.y_min <= position.y <= self.y_max
            and self.z_min <= position.z <= self.z_max
        )

    def closest_side(self, position: Vector) -> Side:
        """The face of the box nearest to the position."""
        x_min_dist = abs(position.x - self.x_min)
        x_max_dist = abs(self.x_max - position.x)
        y_min_dist = abs(position.y - self.y_min)
        y_max_dist = abs(self.y_max - position.y)
        z_min_dist = abs(position.z - self.z_min)
        z_max_dist = abs(self.z_max - position.z)
        min_x = min(x_min_dist, x_max_dist)
        min_y = min(y_min_dist, y_max_dist)
        min_z = min(z_min_dist, z_max_dist)
        if min_x < min_y and min_x < min_z:
            return Side.LEFT if x_min_dist < x_max_dist else Side.RIGHT
        if min_y < min_z:
            return Side.BOTTOM if y_min_dist < y_max_dist else Side.TOP
        return Side.DOWN if z_min_dist < z_max_dist else Side.UP

    def calculate_intersection(self, current: Vector, speed: Vector) -> Vector:
        """Point where a ray from ``current`` along ``speed`` leaves the box (x/y only)."""
        if not self.is_inside(current):
            raise ValueError(f"position {current} is not inside the box {self}")
        x_max_y = current.y + _ratio(self.x_max - current.x, speed.x) * speed.y
        x_min_y = current.y + _ratio(self.x_min - current.x, speed.x) * speed.y
        y_max_x = current.x + _ratio(self.y_max - current.y, speed.y) * speed.x
        y_min_x = current.x + _ratio(self.y_min - current.y, speed.y) * speed.x
        x_max_y_ok = self.y_min <= x_max_y <= self.y_max
        x_min_y_ok = self.y_min <= x_min_y <= self.y_max
        y_max_x_ok = self.x_min <= y_max_x <= self.x_max
        y_min_x_ok = self.x_min <= y_min_x <= self.x_max
        if x_max_y_ok and speed.x >= 0:
            return Vector(self.x_max, x_max_y, 0.0)
        if x_min_y_ok and speed.x <= 0:
            return Vector(self.x_min, x_min_y, 0.0)
        if y_max_x_ok and speed.y >= 0:
            return Vector(y_max_x, self.y_max, 0.0)
        if y_min_x_ok and speed.y <= 0:
            return Vector(y_min_x, self.y_min, 0.0)
        raise ValueError(f"no intersection from {current} along {speed}")

    def is_intersect(self, l1: Vector, l2: Vector) -> bool:
        """True if the segment from l1 to l2 touches the box (separating axis test)."""
        if self.is_inside(l1) or self.is_inside(l2):
            return True

        size = Vector(
            0.5 * (self.x_max - self.x_min),
            0.5 * (self.y_max - self.y_min),
            0.5 * (self.z_max - self.z_min),
        )
        center = Vector(self.x_min + size.x, self.y_min + size.y, self.z_min + size.z)

        b1 = l1 - center
        b2 = l2 - center
        mid = (b1 + b2) * 0.5
        half = b1 - mid
        ext = Vector(abs(half.x), abs(half.y), abs(half.z))

        if abs(mid.x) > size.x + ext.x:
            return False
        if abs(mid.y) > size.y + ext.y:
            return False
        if abs(mid.z) > size.z + ext.z:
            return False
        if abs(mid.y * half.z - mid.z * half.y) > size.y * ext.z + size.z * ext.y:
            return False
        if abs(mid.x * half.z - mid.z * half.x) > size.x * ext.z + size.z * ext.x:
            return False
        if abs(mid.x * half.y - mid.y * half.x) > size.x * ext.y + size.y * ext.x:
            return False
        return True

    @classmethod
    def parse(cls, text: str) -> Box:
        """Read a box written as ``xMin|xMax|yMin|yMax|zMin|zMax``."""
        parts = text.strip().split("|")
        if len(parts) != 6:
            raise ValueError(f"invalid box specification: {text!r}")
        try:
            values = [float(part) for part in parts]
        except ValueError as exc:
            raise ValueError(f"invalid box specification: {text!r}") from exc
        return cls(*values)

    def __str__(self) -> str:
        return "|".join(
            f"{v:g}"
            for v in (self.x_min, self.x_max, self.y_min, self.y_max, self.z_min, self.z_max)
        )