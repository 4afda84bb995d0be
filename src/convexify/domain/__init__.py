"""Domain models for convexify.

This module contains the geometric value types the decomposition works on.
All models are designed to be:

- Plain dataclasses without global state
- Serializable for inter-process communication (parallel processing)
- Explicit about copying: operations that mutate are named as such

Key classes:
- Point: A 2D point, also used as a vector
- BoundingBox: Axis-aligned rectangle
- Circle: Circle with ray intersection
- Polygon: Ordered vertex list with convexity queries and splitting
- Shape: A named polygon for batch processing
"""

from convexify.domain.bounds import BoundingBox
from convexify.domain.circle import Circle
from convexify.domain.point import EPS, Point, norm_angle
from convexify.domain.polygon import Polygon, intersect_ray_with_segment
from convexify.domain.shape import Shape

__all__: list[str] = [
    # Constants
    "EPS",
    # Core types
    "Point",
    "BoundingBox",
    "Circle",
    "Polygon",
    "Shape",
    # Functions
    "intersect_ray_with_segment",
    "norm_angle",
]
