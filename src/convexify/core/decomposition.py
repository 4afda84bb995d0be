"""Convex decomposition engine.

This module splits a simple polygon recursively until every piece is convex
and has no more than a configured number of vertices:

1. Preprocess the input once (order, merge close vertices, drop superficial
   vertices), each step controlled by DecompositionSettings.
2. Find the first notch (concave vertex) B with neighbours A and C.
3. Strategy 1: split along the diagonal from B to the closest visible vertex
   that lies inside the angle opposite of ABC, keeping a minimum angle to
   both notch edges.
4. Strategy 2: extend the notch edges AB and CB until they hit the polygon
   and split at the closer hit.
5. Decompose both parts the same way. Convex parts with too many vertices
   are balanced with Polygon.split.

Holes and self-intersecting polygons are not detected; the result for such
input is undefined.
"""

import logging

from convexify.config import DecompositionSettings
from convexify.domain import Polygon
from convexify.domain.polygon import angle_between

logger = logging.getLogger(__name__)


class ConvexDecomposer:
    """Decomposes simple polygons into convex pieces.

    The decomposer holds no state besides its settings and is safe for use
    in parallel processing.
    """

    def __init__(self, settings: DecompositionSettings | None = None) -> None:
        self.settings = settings or DecompositionSettings()

    def decompose(self, polygon: Polygon) -> list[Polygon]:
        """Decompose a polygon into convex pieces.

        With preprocessing enabled, the passed polygon is modified in place
        before it is decomposed.

        Args:
            polygon: Simple polygon without holes

        Returns:
            Convex pieces in counter-clockwise order, each with at most
            settings.max_vertices vertices. Empty if the polygon has fewer
            than 3 vertices.
        """
        if self.settings.preprocess:
            self._preprocess(polygon)
        return self._decompose(polygon, 0)

    def _preprocess(self, polygon: Polygon) -> None:
        settings = self.settings
        if settings.pre_order_vertices:
            polygon.order_vertices()
        if settings.pre_merge_vertices_min_dist > 0:
            polygon.merge_vertices(min_dist=settings.pre_merge_vertices_min_dist)
        if settings.pre_remove_vertices_max_error > 0:
            polygon.remove_superficial_vertices(max_error=settings.pre_remove_vertices_max_error)
        logger.debug("After preprocessing: %s", polygon)

    def _decompose(self, polygon: Polygon, depth: int) -> list[Polygon]:
        n = len(polygon.pts)
        if n < 3:
            return []

        notch = polygon.find_notch()
        if notch is None:
            if n > self.settings.max_vertices:
                logger.debug("Convex piece with %d vertices at depth %d, splitting", n, depth)
                return polygon.split(self.settings.max_vertices)
            return [polygon]

        logger.debug("Notch at vertex %d on depth %d of %s", notch, depth, polygon)
        parts = self._strategy_1(polygon, notch)
        if parts is None:
            parts = self._strategy_2(polygon, notch)
        if parts is None:
            return []

        pieces: list[Polygon] = []
        for part in parts:
            pieces.extend(self._decompose(part, depth + 1))
        return pieces

    def _strategy_1(self, polygon: Polygon, notch: int) -> tuple[Polygon, Polygon] | None:
        """Split along a diagonal from the notch to a visible vertex.

        Candidates lie strictly inside the angle spanned by BA and BC, keep at
        least s1_min_angle to both edges and are visible from the notch. The
        candidate closest to the notch wins.

        Returns:
            The two parts, or None if there is no candidate
        """
        pts = polygon.pts
        n = len(pts)
        prev_idx = (n + notch - 1) % n
        next_idx = (notch + 1) % n
        b = pts[notch]
        ba = pts[prev_idx].sub(b)
        bc = pts[next_idx].sub(b)
        min_angle = self.settings.s1_min_angle

        best: int | None = None
        best_dist2 = 0.0
        for i in range(n):
            if i in (notch, prev_idx, next_idx):
                continue
            bi = pts[i].sub(b)
            if ba.cross(bi) * bc.cross(bi) >= 0:
                continue
            if angle_between(ba, bi) < min_angle or angle_between(bc, bi) < min_angle:
                continue
            if not polygon.is_visible(notch, i):
                continue
            d2 = pts[i].dist2(b)
            if best is None or d2 < best_dist2:
                best = i
                best_dist2 = d2

        if best is None:
            return None
        logger.debug("Strategy 1: splitting at diagonal %d-%d", notch, best)
        return polygon.split_at(notch, best)

    def _strategy_2(self, polygon: Polygon, notch: int) -> tuple[Polygon, Polygon] | None:
        """Split along an extended notch edge.

        Rays from the notch B continue the edges AB and CB. The split runs
        from the notch to the closer of the two hits; the AB ray wins ties.

        Returns:
            The two parts, or None if neither ray hits the polygon
        """
        pts = polygon.pts
        n = len(pts)
        prev_idx = (n + notch - 1) % n
        next_idx = (notch + 1) % n
        a = pts[prev_idx]
        b = pts[notch]
        c = pts[next_idx]

        hit_ab = polygon.find_intersection(b, b.sub(a), prev_idx, notch)
        hit_cb = polygon.find_intersection(b, b.sub(c), next_idx, notch)

        use_ab = hit_ab is not None and (hit_cb is None or b.dist2(hit_ab[1]) <= b.dist2(hit_cb[1]))
        if use_ab:
            edge, hit = hit_ab
            logger.debug("Strategy 2: extended edge %d-%d hits edge %d at %s", prev_idx, notch, edge, hit)
            # The notch lies on the segment from A to the hit
            first = polygon.copy_run(notch, edge)
            second = polygon.copy_run((edge + 1) % n, prev_idx)
        elif hit_cb is not None:
            edge, hit = hit_cb
            logger.debug("Strategy 2: extended edge %d-%d hits edge %d at %s", next_idx, notch, edge, hit)
            # The notch lies on the segment from the hit to C
            first = polygon.copy_run(next_idx, edge)
            second = polygon.copy_run((edge + 1) % n, notch)
        else:
            logger.warning("Cannot split notch at vertex %d of %s, dropping polygon", notch, polygon)
            return None

        first.push(hit.copy())
        second.push(hit.copy())
        return first, second


def convex_decomposition(polygon: Polygon, settings: DecompositionSettings | None = None) -> list[Polygon]:
    """Decompose a polygon into convex pieces.

    Convenience wrapper around ConvexDecomposer.

    Args:
        polygon: Simple polygon without holes (modified in place when
            preprocessing is enabled)
        settings: Decomposition settings (defaults if None)

    Returns:
        List of convex polygons
    """
    return ConvexDecomposer(settings).decompose(polygon)
