"""Core processing algorithms for convexify.

This module contains the core algorithms for:

- Geometry operations (ray and segment intersections, closest points)
- Bezier curve flattening
- Path assembly (path segments to polygons)
- Convex decomposition (notch removal, vertex budget)
- Batch processing over worker processes

All services are designed to be:
- Stateless (safe for use in worker processes)
- Free of shared mutable state

Key functions:
- get_closest_point_on_segment: Find closest point on line segment
- intersect_ray_with_segment: Find where a ray hits a segment
- intersect_inner_ray_with_rect: Find where a ray leaves a rounded rectangle
- intersect_segments: Test whether two segments touch
- bezier_flatten: Convert Bezier curves to line segments
- convex_decomposition: Decompose a polygon into convex pieces

Key classes:
- PathBuilder: Samples path segments into a polygon
- ConvexDecomposer: Decomposes polygons into convex pieces
- ShapeProcessor: Decomposes all shapes of a document in parallel
"""

from convexify.core.decomposition import ConvexDecomposer, convex_decomposition
from convexify.core.flatten import bezier_flatten, sample_cubic_bezier, sample_quadratic_bezier
from convexify.core.geometry import (
    RayHit,
    get_closest_point_on_segment,
    intersect_inner_ray_with_rect,
    intersect_ray_with_segment,
    intersect_seg_with_rect,
    intersect_segments,
    is_inside_rect,
)
from convexify.core.path import PathBuilder, polygon_from_rect, polygon_from_segments
from convexify.core.processor import ShapeProcessor, process_shape

__all__ = [
    # Decomposition
    "ConvexDecomposer",
    # Path assembly
    "PathBuilder",
    # Geometry
    "RayHit",
    # Processor
    "ShapeProcessor",
    "bezier_flatten",
    "convex_decomposition",
    "get_closest_point_on_segment",
    "intersect_inner_ray_with_rect",
    "intersect_ray_with_segment",
    "intersect_seg_with_rect",
    "intersect_segments",
    "is_inside_rect",
    "polygon_from_rect",
    "polygon_from_segments",
    "process_shape",
    "sample_cubic_bezier",
    "sample_quadratic_bezier",
]
