"""Core 2D point/vector type.

This module defines the value type used by every geometric operation:
- EPS: Tolerance below which coordinates and lengths are considered equal/zero
- Point: A 2D point, also used as a 2D vector
- norm_angle: Wrap an angle into [-pi, pi]

Point operations come in two flavours. Lower-case operations (add, sub,
scale, normalize, rotate) return a new Point and never touch the receiver.
The ``*_inplace`` variants modify the receiver and return it, for call sites
that accumulate into a single instance.
"""

import math
from dataclasses import dataclass
from typing import Any

EPS = 1e-6


def norm_angle(angle: float) -> float:
    """Wrap an angle into the interval [-pi, pi] by adding multiples of 2*pi.

    Args:
        angle: Angle in radians

    Returns:
        Equivalent angle in [-pi, pi]
    """
    a = math.fmod(angle, 2 * math.pi)
    if a < -math.pi:
        a += 2 * math.pi
    elif a > math.pi:
        a -= 2 * math.pi
    return a


@dataclass(slots=True)
class Point:
    """A point or vector in 2D space.

    Attributes:
        x: X coordinate
        y: Y coordinate
    """

    x: float = 0.0
    y: float = 0.0

    def copy(self) -> "Point":
        """Return an independent copy of this point."""
        return Point(self.x, self.y)

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple.

        Returns:
            Tuple of (x, y) coordinates
        """
        return (self.x, self.y)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC.

        Returns:
            Dictionary with x and y fields
        """
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Point":
        """Deserialize from dictionary.

        Args:
            data: Dictionary with x and y fields

        Returns:
            Point instance
        """
        return cls(x=data["x"], y=data["y"])

    # Copy-returning vector algebra

    def add(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def sub(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def scale(self, s: float) -> "Point":
        return Point(self.x * s, self.y * s)

    def dot(self, other: "Point") -> float:
        """Scalar product of this and the other vector."""
        return self.x * other.x + self.y * other.y

    def cross(self, other: "Point") -> float:
        """Z component of the 3D cross product of this and the other vector."""
        return self.x * other.y - self.y * other.x

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y)

    def length2(self) -> float:
        return self.x * self.x + self.y * self.y

    def dist(self, other: "Point") -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        return math.sqrt(dx * dx + dy * dy)

    def dist2(self, other: "Point") -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy

    def normalize(self) -> "Point":
        """Return a unit vector with the same direction.

        The zero vector has no direction; the result is (nan, nan) and
        callers must check the length first where that matters.
        """
        length = self.length()
        if length == 0.0:
            return Point(math.nan, math.nan)
        inv = 1.0 / length
        return Point(self.x * inv, self.y * inv)

    def get_perpendicular(self) -> "Point":
        """Return this vector rotated by 90 degrees counter-clockwise."""
        return Point(-self.y, self.x)

    def rotate(self, angle: float) -> "Point":
        """Return this point rotated about the origin by angle (radians)."""
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        return Point(self.x * cos_a - self.y * sin_a, self.y * cos_a + self.x * sin_a)

    def equals(self, other: "Point", eps: float = EPS) -> bool:
        """Check whether both coordinates differ by at most eps."""
        return abs(self.x - other.x) <= eps and abs(self.y - other.y) <= eps

    # In-place variants, each returns self

    def set(self, x: float, y: float) -> "Point":
        self.x = x
        self.y = y
        return self

    def add_inplace(self, other: "Point") -> "Point":
        self.x += other.x
        self.y += other.y
        return self

    def sub_inplace(self, other: "Point") -> "Point":
        self.x -= other.x
        self.y -= other.y
        return self

    def scale_inplace(self, s: float) -> "Point":
        self.x *= s
        self.y *= s
        return self

    def normalize_inplace(self) -> "Point":
        length = self.length()
        if length == 0.0:
            return self.set(math.nan, math.nan)
        inv = 1.0 / length
        return self.scale_inplace(inv)

    def rotate_inplace(self, angle: float) -> "Point":
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        return self.set(self.x * cos_a - self.y * sin_a, self.y * cos_a + self.x * sin_a)

    # Operators mirror the copy-returning methods

    def __add__(self, other: "Point") -> "Point":
        return self.add(other)

    def __sub__(self, other: "Point") -> "Point":
        return self.sub(other)

    def __mul__(self, s: float) -> "Point":
        return self.scale(s)

    def __rmul__(self, s: float) -> "Point":
        return self.scale(s)

    def __neg__(self) -> "Point":
        return Point(-self.x, -self.y)

    def __str__(self) -> str:
        return f"({self.x},{self.y})"
