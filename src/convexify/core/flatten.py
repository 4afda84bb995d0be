"""Curve flattening entry points.

Bezier segments are approximated by straight line segments that stay within
a maximum distance of the curve. The sample_* functions extend a polygon
under construction, bezier_flatten returns a stand-alone polyline.
"""

from convexify.core._bezier import flatten_cubic as _flatten_cubic
from convexify.core._bezier import flatten_quadratic as _flatten_quadratic
from convexify.domain import Point, Polygon


def sample_cubic_bezier(polygon: Polygon, a: Point, b: Point, c: Point, d: Point) -> Point:
    """Append a flattened cubic Bezier curve to a polygon.

    The start point a is expected to be the polygon's last vertex and is not
    added again. The curve follows polygon.max_error.

    Args:
        polygon: Polygon under construction
        a: Start point
        b: First control point
        c: Second control point
        d: End point

    Returns:
        The end point d, to be used as the next segment's start point

    Raises:
        InvalidSettingsError: If polygon.max_error is not larger than EPS
    """
    polygon.pts.extend(_flatten_cubic([a, b, c, d], polygon.max_error))
    return d


def sample_quadratic_bezier(polygon: Polygon, a: Point, b: Point, c: Point) -> Point:
    """Append a flattened quadratic Bezier curve to a polygon.

    Returns:
        The end point c
    """
    polygon.pts.extend(_flatten_quadratic([a, b, c], polygon.max_error))
    return c


def bezier_flatten(points: list[Point], max_error: float = 0.2) -> list[Point]:
    """Convert Bezier curve to line segments using adaptive subdivision.

    Handles both quadratic (3 points) and cubic (4 points) Bezier curves.

    Args:
        points: Control points of the Bezier curve (2 for a line, 3 for
            quadratic, 4 for cubic)
        max_error: Maximum distance from true curve

    Returns:
        List of points forming line segments that approximate the curve,
        starting with the first control point

    Raises:
        ValueError: If points list is not of length 2, 3 or 4
    """
    if len(points) == 2:
        # Already a line segment
        return list(points)
    elif len(points) == 3:
        return [points[0], *_flatten_quadratic(points, max_error)]
    elif len(points) == 4:
        return [points[0], *_flatten_cubic(points, max_error)]
    else:
        raise ValueError(f"Expected 2-4 points for Bezier curve, got {len(points)}")
