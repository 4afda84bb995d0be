"""Convexify - Decompose simple polygons into convex pieces.

Convexify turns arbitrary simple polygons (possibly concave, possibly sampled
from Bezier outlines) into ordered lists of convex polygons that respect a
vertex budget, as required by physics engines for collision shapes.

Example:
    $ convexify shapes.json --max-vertices 8

This will create shapes-convex.json with the convex pieces of every shape.
"""

__version__ = "0.1.0"
__author__ = "Dimosthenis Kaponis"

__all__ = ["__author__", "__version__"]
