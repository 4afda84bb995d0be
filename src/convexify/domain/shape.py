"""Named shape representation.

A shape is the unit of batch processing: one named polygon read from an
input document, decomposed independently of all other shapes.
"""

from dataclasses import dataclass
from typing import Any

from convexify.domain.polygon import Polygon


@dataclass
class Shape:
    """A named polygon.

    Designed for efficient serialization for parallel processing.

    Attributes:
        name: Shape name, unique within a document
        polygon: Outline of the shape
    """

    name: str
    polygon: Polygon

    def vertex_count(self) -> int:
        return len(self.polygon)

    def is_degenerate(self) -> bool:
        """Check if the shape has too few vertices to enclose an area.

        Returns:
            True if the outline has fewer than 3 vertices
        """
        return len(self.polygon) < 3

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC.

        Returns:
            Dictionary representation of the shape
        """
        return {
            "name": self.name,
            "polygon": self.polygon.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Shape":
        """Deserialize from dictionary.

        Args:
            data: Dictionary representation of a shape

        Returns:
            Shape instance
        """
        return cls(name=data["name"], polygon=Polygon.from_dict(data["polygon"]))
