"""Geometric operations for the decomposition kernel.

This module provides core mathematical utilities for:
- Closest point on a segment
- Ray/segment and ray/rounded-rectangle intersection
- Segment/segment and segment/rectangle overlap tests

All functions are pure, stateless, and designed for use in parallel processing.
"""

from dataclasses import dataclass

from convexify.domain import BoundingBox, Circle, Point
from convexify.domain.point import EPS
from convexify.domain.polygon import intersect_ray_with_segment

__all__ = [
    "RayHit",
    "get_closest_point_on_segment",
    "intersect_inner_ray_with_rect",
    "intersect_ray_with_segment",
    "intersect_seg_with_rect",
    "intersect_segments",
    "is_inside_rect",
]


@dataclass(frozen=True)
class RayHit:
    """Exit point of a ray and the boundary tangent at that point.

    Attributes:
        point: Intersection point
        tangent: Unit tangent of the boundary at the intersection
    """

    point: Point
    tangent: Point


def get_closest_point_on_segment(a: Point, b: Point, p: Point) -> Point:
    """Find the closest point on a line segment to a given point.

    Projects the point onto the line through a and b, then clamps to the
    segment endpoints.

    Args:
        a: Start point of the segment
        b: End point of the segment
        p: The point to project

    Returns:
        The closest point on the segment. For a degenerate segment shorter
        than EPS this is a.

    Examples:
        >>> get_closest_point_on_segment(Point(0, 0), Point(1, 0), Point(0.2, 3)).to_tuple()
        (0.2, 0.0)
    """
    ab = b.sub(a)
    length = ab.length()
    if length < EPS:
        return a
    k = ab.dot(p.sub(a)) / length
    if k < 0:
        return a
    if k > length:
        return b
    return a.add(ab.scale(k / length))


def intersect_inner_ray_with_rect(
    origin: Point,
    direction: Point,
    rect: BoundingBox,
    radius: float = 0.0,
) -> RayHit | None:
    """Intersect a ray starting inside a rectangle with its boundary.

    The rectangle may have rounded corners of the given radius. Sides are
    tested in the order left, right, top (minimum y), bottom; a hit inside a
    corner region is then moved onto the corner arc.

    Args:
        origin: Start of the ray, inside the rectangle
        direction: Direction vector of the ray
        rect: The rectangle
        radius: Radius of the rounded corners (0 for sharp corners)

    Returns:
        RayHit with the exit point and boundary tangent, or None if the ray
        does not leave through any side
    """
    ul = Point(rect.x, rect.y)
    ur = Point(rect.x + rect.width, rect.y)
    ll = Point(rect.x, rect.y + rect.height)
    lr = Point(rect.x + rect.width, rect.y + rect.height)

    sides = [
        (ul, ll, Point(0.0, 1.0)),
        (ur, lr, Point(0.0, -1.0)),
        (ul, ur, Point(-1.0, 0.0)),
        (ll, lr, Point(1.0, 0.0)),
    ]
    for a, b, tangent in sides:
        point = intersect_ray_with_segment(origin, direction, a, b)
        if point is not None:
            break
    else:
        return None

    if radius == 0:
        return RayHit(point, tangent)

    r = radius
    if point.x < ul.x + r and point.y < ul.y + r:
        center = Point(ul.x + r, ul.y + r)
    elif point.x > ur.x - r and point.y < ur.y + r:
        center = Point(ur.x - r, ur.y + r)
    elif point.x < ll.x + r and point.y > ll.y - r:
        center = Point(ll.x + r, ll.y - r)
    elif point.x > lr.x - r and point.y > lr.y - r:
        center = Point(lr.x - r, lr.y - r)
    else:
        return RayHit(point, tangent)

    # The ray starts inside, so it leaves the arc at the farther root
    hits = Circle(center.x, center.y, r).intersect_with_ray(origin, direction)
    if hits:
        point = hits[-1]
    tangent = point.sub(center).get_perpendicular().scale(-1).normalize()
    return RayHit(point, tangent)


def is_inside_rect(p: Point, ul: Point, lr: Point) -> bool:
    """Check whether a point lies in a rectangle, borders included.

    The corners are given with the y axis pointing up, so ul has the larger
    y coordinate.

    Args:
        p: The point to test
        ul: Upper left corner
        lr: Lower right corner

    Returns:
        True if p is inside or on the border of the rectangle
    """
    return ul.x <= p.x <= lr.x and ul.y >= p.y >= lr.y


def intersect_segments(a: Point, b: Point, c: Point, d: Point) -> bool:
    """Check whether segment ab touches segment cd.

    Identical segments, in either direction, always intersect. Otherwise both
    segment parameters of the crossing point must lie in [0, 1]; endpoints
    count as hits. Parallel segments that are not identical never intersect.

    Args:
        a: Start of the first segment
        b: End of the first segment
        c: Start of the second segment
        d: End of the second segment

    Returns:
        True if the segments intersect
    """
    if (a == c and b == d) or (a == d and b == c):
        return True

    divisor = (d.x - c.x) * (a.y - b.y) - (a.x - b.x) * (d.y - c.y)
    if divisor == 0:
        return False
    t = ((c.y - d.y) * (a.x - c.x) + (d.x - c.x) * (a.y - c.y)) / divisor
    u = ((a.y - b.y) * (a.x - c.x) + (b.x - a.x) * (a.y - c.y)) / divisor
    return 0 <= t <= 1 and 0 <= u <= 1


def intersect_seg_with_rect(a: Point, b: Point, ul: Point, lr: Point) -> bool:
    """Check whether segment ab lies in or crosses a rectangle.

    A segment with both endpoints inside counts as intersecting even though
    it touches no side.

    Args:
        a: Start of the segment
        b: End of the segment
        ul: Upper left corner (larger y, see is_inside_rect)
        lr: Lower right corner

    Returns:
        True if the segment is inside the rectangle or crosses one of its sides
    """
    if is_inside_rect(a, ul, lr) and is_inside_rect(b, ul, lr):
        return True

    corners = [Point(ul.x, ul.y), Point(lr.x, ul.y), Point(lr.x, lr.y), Point(ul.x, lr.y)]
    return any(
        intersect_segments(a, b, corners[i], corners[(i + 1) % 4]) for i in range(4)
    )
