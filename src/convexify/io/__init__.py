"""Shape document I/O layer for convexify.

This module handles reading shape documents and writing decomposition
results as JSON, validated with pydantic. It provides a clean abstraction
layer between the file format and the domain models.

Key classes:
- ShapeReader: Load documents and extract shapes
- ShapeWriter: Save convex pieces
"""

from convexify.io.reader import ShapeReader
from convexify.io.writer import ShapeWriter

__all__ = [
    "ShapeReader",
    "ShapeWriter",
]
