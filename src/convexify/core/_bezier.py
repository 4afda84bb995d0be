"""Internal Bezier curve flattening algorithms.

This is an internal module containing helper functions for the flattening
entry points in convexify.core.flatten. Not intended for public use.

The cubic flattener works in a frame with its origin at the start point A
and an axis along the chord AD. Projecting B and C onto the perpendicular of
AD turns the curve into a scalar polynomial whose extremum gives the largest
distance between curve and chord. Curves deviating more than the tolerance
are split at that extremum.
"""

import math

from convexify.domain.point import EPS, Point
from convexify.exceptions import InvalidSettingsError


def _deviation(b: float, c: float, t: float) -> float:
    """Signed distance of the curve point at t from the chord."""
    return 3.0 * (b * (1 - t) * (1 - t) * t + c * (1 - t) * t * t)


def _find_extreme(b: float, c: float) -> tuple[float, float]:
    """Find how far the curve strays from the chord and where to split it.

    Solves 0 = 3(b-c)t^2 + 2(c-2b)t + b, the derivative of the projected
    curve, and evaluates the roots inside (0, 1). The error is the width of
    the band between the extremes and the chord, so an S-curve counts the
    deviations on both sides. The split point is the larger extremum.

    Args:
        b: Projection of the first control point
        c: Projection of the second control point

    Returns:
        Tuple of (error, t). The error is 0.0 if no extremum lies in (0, 1).
    """
    k1 = 3.0 * (b - c)
    k2 = 2.0 * (c - 2.0 * b)
    k3 = b

    if abs(k1) < EPS:
        # b and c almost identical: 0 = -2bt + b
        return 0.375 * abs(b + c), 0.5

    discriminant = k2 * k2 - 4.0 * k1 * k3
    if abs(discriminant) < EPS:
        t = -0.5 * k2 / k1
        if 0.0 < t < 1.0:
            return abs(_deviation(b, c, t)), t
        return 0.0, 0.0

    if discriminant > 0:
        root = math.sqrt(discriminant)
        t1 = 0.5 * (-k2 - root) / k1
        t2 = 0.5 * (-k2 + root) / k1
        val1 = _deviation(b, c, t1) if 0.0 < t1 < 1.0 else 0.0
        val2 = _deviation(b, c, t2) if 0.0 < t2 < 1.0 else 0.0
        # Width of the band around the chord, S-curves deviate on both sides
        error = max(0.0, val1, val2) - min(0.0, val1, val2)
        return error, t1 if abs(val1) > abs(val2) else t2

    # No real root, the curve has no extremum
    return 0.0, 0.0


def _split_cubic(a: Point, b: Point, c: Point, d: Point, t: float) -> tuple[list[Point], list[Point]]:
    """Split a cubic Bezier curve at t (de Casteljau)."""
    s = 1.0 - t
    b1 = a.scale(s).add(b.scale(t))
    c1 = a.scale(s * s).add(b.scale(2 * s * t)).add(c.scale(t * t))
    d1 = a.scale(s * s * s).add(b.scale(3 * s * s * t)).add(c.scale(3 * s * t * t)).add(d.scale(t * t * t))
    b2 = b.scale(s * s).add(c.scale(2 * s * t)).add(d.scale(t * t))
    c2 = c.scale(s).add(d.scale(t))
    return [a, b1, c1, d1], [d1, b2, c2, d]


def flatten_cubic(points: list[Point], max_error: float) -> list[Point]:
    """Flatten a cubic Bezier curve using adaptive subdivision.

    Args:
        points: List of 4 control points [a, b, c, d]
        max_error: Maximum distance between curve and polyline

    Returns:
        Points to append after the start point: interior points followed by
        the end point. Empty if all control points coincide.

    Raises:
        InvalidSettingsError: If max_error is not larger than EPS
    """
    if max_error <= EPS:
        raise InvalidSettingsError("max_error", max_error, f"must be larger than {EPS}")
    result: list[Point] = []
    _flatten_cubic_into(points, max_error, result)
    return result


def _flatten_cubic_into(points: list[Point], max_error: float, out: list[Point]) -> None:
    a, b, c, d = points
    if a.equals(b) and a.equals(c) and a.equals(d):
        return

    ad = d.sub(a)
    if ad.length() < EPS:
        # Closed curve, project onto AB or CB instead
        ad = b.sub(a) if b.dist(a) > b.dist(c) else b.sub(c)

    axis = ad.get_perpendicular().normalize()
    error, t = _find_extreme(b.sub(a).dot(axis), c.sub(a).dot(axis))

    if error > max_error:
        first, second = _split_cubic(a, b, c, d, t)
        _flatten_cubic_into(first, max_error, out)
        _flatten_cubic_into(second, max_error, out)
    else:
        out.append(d.copy())


def elevate_quadratic(points: list[Point]) -> list[Point]:
    """Convert quadratic control points [a, b, c] to the equivalent cubic."""
    a, b, c = points
    return [
        a,
        Point((a.x + 2 * b.x) / 3, (a.y + 2 * b.y) / 3),
        Point((2 * b.x + c.x) / 3, (2 * b.y + c.y) / 3),
        c,
    ]


def flatten_quadratic(points: list[Point], max_error: float) -> list[Point]:
    """Flatten a quadratic Bezier curve via degree elevation.

    Args:
        points: List of 3 control points [a, b, c]
        max_error: Maximum distance between curve and polyline

    Returns:
        Points to append after the start point
    """
    return flatten_cubic(elevate_quadratic(points), max_error)
