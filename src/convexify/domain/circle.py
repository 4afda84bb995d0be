"""Circle shape with ray intersection."""

import logging
import math
from dataclasses import dataclass

from convexify.domain.bounds import BoundingBox
from convexify.domain.point import EPS, Point

logger = logging.getLogger(__name__)

# Arc import tolerances
FULL_CIRCLE_TOLERANCE = 0.01
ELLIPSE_RATIO_TOLERANCE = 0.05


@dataclass
class Circle:
    """A circle given by center and radius.

    Attributes:
        x: X coordinate of the center
        y: Y coordinate of the center
        r: Radius
    """

    x: float
    y: float
    r: float

    def copy(self) -> "Circle":
        return Circle(self.x, self.y, self.r)

    def centroid(self) -> Point:
        return Point(self.x, self.y)

    def area(self) -> float:
        return math.pi * self.r * self.r

    def move_to_origin(self) -> None:
        """Translate the circle so its center is at (0, 0)."""
        self.x = 0.0
        self.y = 0.0

    def bounding_box(self) -> BoundingBox:
        return BoundingBox(self.x - self.r, self.y - self.r, 2 * self.r, 2 * self.r)

    def intersect_with_ray(self, origin: Point, direction: Point) -> list[Point]:
        """Intersect a ray with this circle.

        Solves |p + k*v|^2 = r^2 in the circle's local frame, where p is the
        ray origin relative to the center and v the direction.

        Args:
            origin: Start of the ray
            direction: Direction vector of the ray

        Returns:
            Zero, one (tangent) or two points, ordered by distance along the
            ray. Points behind the ray origin are dropped.
        """
        p = origin.sub(self.centroid())
        a = direction.length2()
        if a < EPS * EPS:
            return []
        b = 2 * (p.x * direction.x + p.y * direction.y)
        c = p.length2() - self.r * self.r
        d = b * b - 4 * a * c

        if d < 0:
            return []
        if d < EPS:
            k = -b / (2 * a)
            if k < 0:
                return []
            return [origin.add(direction.scale(k))]

        root = math.sqrt(d)
        k1 = (-b - root) / (2 * a)
        k2 = (-b + root) / (2 * a)
        if k1 > k2:
            k1, k2 = k2, k1
        return [origin.add(direction.scale(k)) for k in (k1, k2) if k >= 0]

    @classmethod
    def from_arc(
        cls,
        cx: float,
        cy: float,
        rx: float,
        ry: float,
        start: float | None = None,
        end: float | None = None,
    ) -> "Circle | None":
        """Build a circle from elliptical arc parameters.

        Drawing tools often export circles as arcs with separate radii and
        start/end angles. Only full arcs with nearly equal radii are accepted.

        Args:
            cx: Center x
            cy: Center y
            rx: Radius along x
            ry: Radius along y
            start: Start angle in radians (optional)
            end: End angle in radians (optional)

        Returns:
            Circle with the mean radius, or None if the arc is partial or
            elliptical
        """
        if start is not None and end is not None:
            diff = end - start
            if (
                abs(abs(diff) - 2 * math.pi) > FULL_CIRCLE_TOLERANCE
                and not (-FULL_CIRCLE_TOLERANCE < diff < 0)
            ):
                logger.warning("Arc is a circle segment, start=%s end=%s", start, end)
                return None

        if ry == 0 or abs(rx / ry - 1) > ELLIPSE_RATIO_TOLERANCE:
            logger.warning("Arc is an ellipse, rx=%s ry=%s", rx, ry)
            return None

        return cls(cx, cy, (rx + ry) / 2)
