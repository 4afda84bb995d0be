"""Polygon structure and queries.

This module defines the Polygon type: an ordered list of vertices with the
queries needed for convex decomposition (area, centroid, convexity, ray
intersection, visibility), splitting, and vertex simplification.

Operations documented as "ordered" expect the vertices in counter-clockwise
order. Call ``order_vertices()`` first when the winding is unknown.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from convexify.domain.bounds import BoundingBox
from convexify.domain.point import EPS, Point
from convexify.exceptions import InvalidSettingsError


def angle_between(u: Point, v: Point) -> float:
    """Unsigned angle between two vectors, nan if either has zero length."""
    cos_angle = u.normalize().dot(v.normalize())
    if math.isnan(cos_angle):
        return math.nan
    return math.acos(max(-1.0, min(1.0, cos_angle)))


def intersect_ray_with_segment(
    origin: Point,
    direction: Point,
    a: Point,
    b: Point,
    margin: float = EPS,
) -> Point | None:
    """Intersect a ray with a line segment.

    If there is more than one intersection point (ray and segment parallel and
    colinear), the earliest point in the direction of travel on both the ray's
    line and the segment is returned. Rays that miss an endpoint of the
    segment by at most ``margin`` (relative to the segment length) count as
    hits.

    The colinear case clamps to ``a`` before ``b``, so swapping the endpoints
    can change which point is returned.

    Args:
        origin: Start of the ray
        direction: Direction vector of the ray
        a: Start point of the segment
        b: End point of the segment
        margin: Hit tolerance beyond the segment endpoints

    Returns:
        The intersection point, or None if the ray misses the segment

    Examples:
        >>> hit = intersect_ray_with_segment(
        ...     Point(0, 10), Point(0, -1), Point(-5, 0), Point(3, 0)
        ... )
        >>> hit.to_tuple()
        (0.0, 0.0)
    """
    ab = b.sub(a)
    divisor = direction.cross(ab)

    if abs(divisor) > EPS:
        # Intersection at a + l*(b - a)
        lam = a.sub(origin).cross(direction) / divisor
        if lam < -margin or lam - 1.0 > margin:
            return None
        hit = a.add(ab.scale(lam))
    else:
        if direction.length2() < EPS or ab.length2() < EPS:
            return None
        # Parallel: position of the ray origin projected onto the segment line
        k = origin.sub(a).dot(ab) / ab.dot(ab)
        if a.add(ab.scale(k)).dist(origin) > EPS:
            return None
        if k < -margin:
            hit = a.copy()
        elif k - 1.0 > margin:
            hit = b.copy()
        else:
            hit = origin.copy()

    if hit.sub(origin).dot(direction) >= 0.0:
        return hit
    return None


@dataclass
class Polygon:
    """An ordered vertex list forming a polygon.

    Attributes:
        pts: Vertices of the polygon
        closed: True if the last vertex connects back to the first
        max_error: Maximum deviation allowed when curves are sampled into
            this polygon
    """

    pts: list[Point] = field(default_factory=list)
    closed: bool = True
    max_error: float = 0.2

    @classmethod
    def from_coords(
        cls,
        coords: Iterable[tuple[float, float]],
        closed: bool = True,
        max_error: float = 0.2,
    ) -> "Polygon":
        """Create a polygon from (x, y) pairs."""
        return cls(pts=[Point(float(x), float(y)) for x, y in coords], closed=closed, max_error=max_error)

    def __len__(self) -> int:
        return len(self.pts)

    def __str__(self) -> str:
        return "(" + " ".join(f"{p.x},{p.y}" for p in self.pts) + ")"

    def copy(self) -> "Polygon":
        """Return a deep copy of the polygon."""
        return Polygon(pts=[p.copy() for p in self.pts], closed=self.closed, max_error=self.max_error)

    def push(self, pt: Point) -> list[Point]:
        self.pts.append(pt)
        return self.pts

    def add_points(self, coords: Iterable[tuple[float, float]]) -> None:
        for x, y in coords:
            self.pts.append(Point(float(x), float(y)))

    def back(self) -> Point | None:
        """Return the last vertex, or None for an empty polygon."""
        return self.pts[-1] if self.pts else None

    def to_coords(self) -> list[tuple[float, float]]:
        return [p.to_tuple() for p in self.pts]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC.

        Returns:
            Dictionary representation of the polygon
        """
        return {
            "points": [p.to_dict() for p in self.pts],
            "closed": self.closed,
            "max_error": self.max_error,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Polygon":
        """Deserialize from dictionary.

        Args:
            data: Dictionary representation of a polygon

        Returns:
            Polygon instance
        """
        return cls(
            pts=[Point.from_dict(p) for p in data["points"]],
            closed=data.get("closed", True),
            max_error=data.get("max_error", 0.2),
        )

    # Measures

    def area(self) -> float:
        """Calculate signed area using the surveyor's formula.

        The area is positive for counter-clockwise and negative for clockwise
        vertex order. Only meaningful for non self-intersecting polygons.

        Returns:
            Signed area of the polygon
        """
        if not self.pts:
            return 0.0
        res = 0.0
        prev = self.pts[-1]
        for p in self.pts:
            res += prev.cross(p)
            prev = p
        return res * 0.5

    def bounding_box(self) -> BoundingBox:
        if not self.pts:
            return BoundingBox(0.0, 0.0, 0.0, 0.0)
        xs = [p.x for p in self.pts]
        ys = [p.y for p in self.pts]
        return BoundingBox(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))

    def centroid(self) -> Point:
        """Calculate the center of gravity.

        Exact for closed simple polygons with non-zero area. For open polygons
        or polygons with (near) zero area the center of the bounding box is
        returned instead.

        Returns:
            The centroid
        """
        if not self.pts:
            return Point(0.0, 0.0)
        area = self.area()
        if not self.closed or abs(area) < EPS:
            return self.bounding_box().center

        c = Point(0.0, 0.0)
        prev = self.pts[-1]
        for p in self.pts:
            c.add_inplace(prev.add(p).scale(prev.cross(p)))
            prev = p
        return c.scale_inplace(1.0 / (6.0 * area))

    def move_to_origin(self) -> None:
        """Translate the polygon so its centroid is at (0, 0)."""
        c = self.centroid()
        for p in self.pts:
            p.sub_inplace(c)

    def get_edge_lengths(self, sort: bool = False) -> list[float]:
        """Return the edge lengths in vertex order, or ascending if sort is set.

        The closing edge from the last to the first vertex is only included
        for closed polygons.
        """
        n = len(self.pts)
        lengths = [self.pts[i].dist(self.pts[i + 1]) for i in range(n - 1)]
        if self.closed and n > 1:
            lengths.append(self.pts[0].dist(self.pts[n - 1]))
        if sort:
            lengths.sort()
        return lengths

    def order_vertices(self) -> None:
        """Reverse the vertices if they are in clockwise order."""
        if self.area() < 0:
            self.pts.reverse()

    # Ordered queries

    def is_convex(self, idx: int) -> bool:
        """Check whether the vertex at idx is convex. (Ordered!)

        Collinear vertices count as convex.
        """
        n = len(self.pts)
        prev_pt = self.pts[(idx + n - 1) % n]
        pt = self.pts[idx]
        next_pt = self.pts[(idx + 1) % n]
        return pt.sub(prev_pt).cross(next_pt.sub(pt)) >= 0

    def find_notch(self) -> int | None:
        """Return the index of the first concave vertex, None if convex. (Ordered!)"""
        for i in range(len(self.pts)):
            if not self.is_convex(i):
                return i
        return None

    def angle(self, idx: int) -> float:
        """Return the inner angle at a vertex in [0, 2*pi]. (Ordered!)

        Concave vertices have angles larger than pi.
        """
        n = len(self.pts)
        a = self.pts[(n + idx - 1) % n]
        b = self.pts[idx]
        c = self.pts[(idx + 1) % n]
        ang = angle_between(a.sub(b), c.sub(b))
        if not self.is_convex(idx):
            return 2 * math.pi - ang
        return ang

    def find_biggest_angle(self) -> int | None:
        """Return the index of the vertex with the biggest angle. (Ordered!)"""
        max_idx: int | None = None
        max_angle = 0.0
        for i in range(len(self.pts)):
            ang = self.angle(i)
            if max_idx is None or max_angle < ang:
                max_idx = i
                max_angle = ang
        return max_idx

    def find_intersection(
        self,
        origin: Point,
        direction: Point,
        omit1: int | None = None,
        omit2: int | None = None,
    ) -> tuple[int, Point] | None:
        """Find the closest intersection of a ray with the polygon's edges.

        Edges touching the vertices omit1 or omit2 are skipped.

        Args:
            origin: Start of the ray
            direction: Direction vector of the ray
            omit1: Vertex index whose two edges are ignored (optional)
            omit2: Vertex index whose two edges are ignored (optional)

        Returns:
            Tuple of (index of the vertex before the hit, hit point), or None
            if the ray hits no edge
        """
        n = len(self.pts)
        omitted: set[int] = set()
        for omit in (omit1, omit2):
            if omit is not None and 0 <= omit < n:
                omitted.add(omit)
                omitted.add((omit + n - 1) % n)

        closest: tuple[int, Point] | None = None
        closest_dist2 = 0.0
        for i in range(n):
            if i in omitted:
                continue
            hit = intersect_ray_with_segment(origin, direction, self.pts[(i + 1) % n], self.pts[i])
            if hit is None:
                continue
            d2 = hit.dist2(origin)
            if closest is None or d2 < closest_dist2:
                closest = (i, hit)
                closest_dist2 = d2
        return closest

    def is_visible(self, v1: int, v2: int) -> bool:
        """Check whether the chord between two vertices lies inside. (Ordered!)

        Adjacent vertices always see each other, and a vertex sees itself.

        Args:
            v1: Index of the first vertex
            v2: Index of the second vertex

        Returns:
            True if the straight line from v1 to v2 does not leave the polygon
        """
        n = len(self.pts)
        if v1 == v2 or v1 == (v2 + 1) % n or v2 == (v1 + 1) % n:
            return True

        a = self.pts[(n + v1 - 1) % n]
        c = self.pts[(v1 + 1) % n]
        p1 = self.pts[v1]
        p2 = self.pts[v2]

        # The chord must leave v1 into the interior: for a convex v1 both
        # turns a-v1-v2 and v1-c-v2 are convex, for a notch at least one is.
        convex_a_v1_v2 = p1.sub(a).cross(p2.sub(p1)) >= 0
        convex_v1_c_v2 = c.sub(p1).cross(p2.sub(c)) >= 0
        if self.is_convex(v1):
            if not (convex_a_v1_v2 and convex_v1_c_v2):
                return False
        elif not (convex_a_v1_v2 or convex_v1_c_v2):
            return False

        found = self.find_intersection(p1, p2.sub(p1), v1, v2)
        if found is None:
            return True
        # A hit behind v2 does not block the chord
        _, hit = found
        return hit.dist2(p1) > p2.dist2(p1)

    # Splitting

    def split_at(self, v1: int, v2: int) -> tuple["Polygon", "Polygon"]:
        """Split the polygon along the chord between vertices v1 and v2.

        The first part runs from v1 to v2, the second from v2 to v1, both in
        the original vertex order, so splitting a counter-clockwise polygon
        yields two counter-clockwise parts. v1 and v2 appear in both parts.

        Args:
            v1: Index of the first chord vertex
            v2: Index of the second chord vertex

        Returns:
            Tuple of the two parts
        """
        return self.copy_run(v1, v2), self.copy_run(v2, v1)

    def copy_run(self, start: int, stop: int) -> "Polygon":
        """Copy the vertices from start to stop inclusive, wrapping around."""
        n = len(self.pts)
        part = Polygon()
        i = start
        while True:
            part.pts.append(self.pts[i].copy())
            if i == stop:
                break
            i = (i + 1) % n
        return part

    def split(self, max_vertices: int) -> list["Polygon"]:
        """Split the polygon until no part has more than max_vertices vertices.

        Each split runs from the vertex with the biggest angle to the vertex
        halfway around the polygon, which keeps the parts balanced and avoids
        acute angles. Parts of a convex ordered polygon are convex and ordered.

        Args:
            max_vertices: Maximum number of vertices per part (at least 3)

        Returns:
            List of parts

        Raises:
            InvalidSettingsError: If max_vertices is smaller than 3
        """
        if max_vertices < 3:
            raise InvalidSettingsError("max_vertices", max_vertices, "must be at least 3")
        n = len(self.pts)
        if n <= max_vertices:
            return [self]

        biggest_idx = self.find_biggest_angle()
        if biggest_idx is None:
            return [self]
        opposing_idx = (biggest_idx + (n + 1) // 2) % n
        first, second = self.split_at(biggest_idx, opposing_idx)
        return first.split(max_vertices) + second.split(max_vertices)

    # Simplification

    def merge_vertices(self, min_dist: float = EPS, min_vertex_count: int = 3) -> None:
        """Merge adjacent vertices closer than min_dist into their midpoint.

        Runs of several close vertices collapse into one point. Merging stops
        once the polygon has min_vertex_count vertices or fewer.

        Args:
            min_dist: Vertices closer than this are merged
            min_vertex_count: Lower bound on the vertex count (at least 1)
        """
        min_vertex_count = max(min_vertex_count, 1)
        while True:
            n = len(self.pts)
            if n <= min_vertex_count:
                return
            changed = False
            merged: list[Point] = []
            if self.pts[0].dist(self.pts[-1]) < min_dist:
                # Wrap-around pair, the last point is consumed here
                merged.append(self.pts[-1].add(self.pts[0]).scale(0.5))
                n -= 1
                changed = True
            else:
                merged.append(self.pts[0])
            for i in range(1, n):
                if merged[-1].dist(self.pts[i]) < min_dist:
                    merged[-1] = merged[-1].add(self.pts[i]).scale(0.5)
                    changed = True
                else:
                    merged.append(self.pts[i])
            if not changed:
                return
            self.pts = merged

    def remove_superficial_vertices(self, max_error: float = EPS, min_vertex_count: int = 3) -> None:
        """Remove vertices that barely deviate from the line of their neighbours.

        A vertex is removed if its distance to the segment connecting its two
        neighbours is at most max_error, so all vertices with a 180 degree
        angle disappear. Removal stops once the polygon has min_vertex_count
        vertices.

        Args:
            max_error: Maximum deviation of a removed vertex
            min_vertex_count: Lower bound on the vertex count (at least 3)
        """
        min_vertex_count = max(min_vertex_count, 3)
        while True:
            changed = False
            i = len(self.pts) - 1
            while i >= 0:
                n = len(self.pts)
                if n <= min_vertex_count:
                    return
                if self._vertex_error(i) <= max_error:
                    del self.pts[i]
                    changed = True
                i -= 1
            if not changed:
                return

    def _vertex_error(self, i: int) -> float:
        """Distance of vertex i from the segment connecting its neighbours."""
        n = len(self.pts)
        a = self.pts[(n + i - 1) % n]
        c = self.pts[(i + 1) % n]
        p = self.pts[i]
        ac = c.sub(a)
        prod = ac.dot(p.sub(a))
        if 0 <= prod < ac.dot(ac):
            ac_unit = ac.normalize()
            projection = a.add(ac_unit.scale(p.sub(a).dot(ac_unit)))
            return p.dist(projection)
        if prod < 0:
            return p.dist(a)
        return p.dist(c)
