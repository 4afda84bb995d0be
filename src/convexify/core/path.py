"""Assemble polygons from path segments.

PathBuilder consumes already-parsed path segments (the commands of an SVG
path's ``d`` attribute, without the arc command) and samples curved segments
into straight lines. Only the first subpath is used: everything after the
first close command is ignored.
"""

import logging
from collections.abc import Iterable, Sequence

from convexify.core.flatten import sample_cubic_bezier, sample_quadratic_bezier
from convexify.domain import Point, Polygon
from convexify.exceptions import InvalidSegmentError, UnsupportedSegmentError

logger = logging.getLogger(__name__)

# Vertices closer than this count as duplicates when building
DUPLICATE_TOLERANCE = 1e-3

# Number of values each segment command takes
_VALUE_COUNTS = {
    "M": 2,
    "L": 2,
    "H": 1,
    "V": 1,
    "C": 6,
    "S": 4,
    "Q": 4,
    "T": 2,
    "Z": 0,
}


class PathBuilder:
    """Build an open polygon from a sequence of path segments.

    The builder tracks the current end point and the last control point, so
    that smooth curve segments can mirror it. Both start at (0, 0).

    Example:
        >>> builder = PathBuilder(max_error=0.5)
        >>> builder.move_to(0, 0)
        >>> builder.line_to(10, 0)
        >>> builder.quadratic_to(10, 10, 0, 10)
        >>> builder.close()
        >>> polygon = builder.build()
    """

    def __init__(self, max_error: float = 0.2) -> None:
        self.polygon = Polygon(closed=False, max_error=max_error)
        self.current = Point(0.0, 0.0)
        self.control = Point(0.0, 0.0)
        self.finished = False

    def _resolve(self, x: float, y: float, relative: bool) -> Point:
        if relative:
            return Point(self.current.x + x, self.current.y + y)
        return Point(float(x), float(y))

    def _push(self, pt: Point) -> None:
        self.current = pt
        self.control = pt
        self.polygon.push(pt.copy())

    def move_to(self, x: float, y: float, relative: bool = False) -> None:
        self._push(self._resolve(x, y, relative))

    def line_to(self, x: float, y: float, relative: bool = False) -> None:
        self._push(self._resolve(x, y, relative))

    def horizontal_to(self, x: float, relative: bool = False) -> None:
        x = self.current.x + x if relative else x
        self._push(Point(float(x), self.current.y))

    def vertical_to(self, y: float, relative: bool = False) -> None:
        y = self.current.y + y if relative else y
        self._push(Point(self.current.x, float(y)))

    def cubic_to(
        self,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        x: float,
        y: float,
        relative: bool = False,
    ) -> None:
        """Add a cubic Bezier segment with two explicit control points."""
        start = self.current
        first = self._resolve(x1, y1, relative)
        self.control = self._resolve(x2, y2, relative)
        end = self._resolve(x, y, relative)
        self.current = sample_cubic_bezier(self.polygon, start, first, self.control, end)

    def smooth_cubic_to(self, x2: float, y2: float, x: float, y: float, relative: bool = False) -> None:
        """Add a cubic Bezier segment whose first control point mirrors the previous one."""
        start = self.current
        mirrored = self._mirrored_control()
        self.control = self._resolve(x2, y2, relative)
        end = self._resolve(x, y, relative)
        self.current = sample_cubic_bezier(self.polygon, start, mirrored, self.control, end)

    def quadratic_to(self, x1: float, y1: float, x: float, y: float, relative: bool = False) -> None:
        start = self.current
        self.control = self._resolve(x1, y1, relative)
        end = self._resolve(x, y, relative)
        self.current = sample_quadratic_bezier(self.polygon, start, self.control, end)

    def smooth_quadratic_to(self, x: float, y: float, relative: bool = False) -> None:
        start = self.current
        self.control = self._mirrored_control()
        end = self._resolve(x, y, relative)
        self.current = sample_quadratic_bezier(self.polygon, start, self.control, end)

    def _mirrored_control(self) -> Point:
        """Reflect the last control point about the current point."""
        return self.current.scale(2.0).sub(self.control)

    def close(self) -> None:
        self.polygon.closed = True
        self.finished = True

    def add_segment(self, command: str, values: Sequence[float] = ()) -> None:
        """Add a segment given as an SVG path command letter and its values.

        Lower-case letters are relative to the current point.

        Args:
            command: One of M L H V C S Q T Z, in either case
            values: Coordinates of the segment, in SVG order

        Raises:
            UnsupportedSegmentError: For arcs and unknown commands
            InvalidSegmentError: If the number of values does not match the command
        """
        if self.finished:
            logger.debug("Ignoring segment '%s' after end of first subpath", command)
            return

        letter = command.upper()
        if letter not in _VALUE_COUNTS:
            raise UnsupportedSegmentError(command)

        expected = _VALUE_COUNTS[letter]
        if len(values) != expected:
            raise InvalidSegmentError(command, f"expected {expected} values, got {len(values)}")

        relative = command.islower()
        v = [float(value) for value in values]
        if letter == "M":
            self.move_to(v[0], v[1], relative)
        elif letter == "L":
            self.line_to(v[0], v[1], relative)
        elif letter == "H":
            self.horizontal_to(v[0], relative)
        elif letter == "V":
            self.vertical_to(v[0], relative)
        elif letter == "C":
            self.cubic_to(v[0], v[1], v[2], v[3], v[4], v[5], relative)
        elif letter == "S":
            self.smooth_cubic_to(v[0], v[1], v[2], v[3], relative)
        elif letter == "Q":
            self.quadratic_to(v[0], v[1], v[2], v[3], relative)
        elif letter == "T":
            self.smooth_quadratic_to(v[0], v[1], relative)
        else:
            self.close()

    def build(self, remove_duplicates: bool = False) -> Polygon:
        """Finish the polygon.

        The polygon counts as closed if a close segment was added or if its
        first and last vertex coincide within DUPLICATE_TOLERANCE. Vertices
        are put into counter-clockwise order.

        Args:
            remove_duplicates: Drop vertices deviating less than
                DUPLICATE_TOLERANCE from the line through their neighbours

        Returns:
            The sampled polygon
        """
        polygon = self.polygon.copy()
        if len(polygon.pts) > 1 and polygon.pts[0].equals(polygon.pts[-1], DUPLICATE_TOLERANCE):
            polygon.closed = True
        if remove_duplicates:
            polygon.remove_superficial_vertices(max_error=DUPLICATE_TOLERANCE)
        polygon.order_vertices()
        return polygon


def polygon_from_segments(
    segments: Iterable[tuple[str, Sequence[float]]],
    max_error: float = 0.2,
    remove_duplicates: bool = False,
) -> Polygon:
    """Sample a sequence of (command, values) path segments into a polygon.

    Args:
        segments: Path segments, e.g. [("M", [0, 0]), ("L", [1, 0]), ("Z", [])]
        max_error: Maximum distance between curves and their sampled lines
        remove_duplicates: See PathBuilder.build

    Returns:
        The sampled polygon in counter-clockwise order
    """
    builder = PathBuilder(max_error=max_error)
    for command, values in segments:
        builder.add_segment(command, values)
    return builder.build(remove_duplicates=remove_duplicates)


def polygon_from_rect(x: float, y: float, width: float, height: float) -> Polygon:
    """Create a closed, counter-clockwise polygon with the rectangle's 4 corners."""
    polygon = Polygon()
    polygon.add_points([(x, y), (x + width, y), (x + width, y + height), (x, y + height)])
    polygon.order_vertices()
    return polygon
