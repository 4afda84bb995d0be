"""Axis-aligned bounding box."""

from dataclasses import dataclass

from convexify.domain.point import Point


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Axis-aligned rectangle given by its minimum corner and extent.

    Attributes:
        x: Minimum x coordinate
        y: Minimum y coordinate
        width: Extent along x
        height: Extent along y
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    def contains(self, p: Point) -> bool:
        """Check whether p lies inside or on the border of the box."""
        return (
            self.x <= p.x <= self.x + self.width
            and self.y <= p.y <= self.y + self.height
        )
