"""Converters between shape documents and domain models.

This module defines the JSON document schema as pydantic models and handles
the conversion between those models and our domain models (Shape, Polygon).

Input document::

    {"shapes": [
        {"name": "tri", "points": [[0, 0], [1, 0], [0, 1]]},
        {"name": "blob", "path": [["M", [0, 0]], ["Q", [5, 5, 10, 0]], ["Z", []]],
         "max_error": 0.1},
        {"name": "box", "rect": {"x": 0, "y": 0, "width": 4, "height": 2}}
    ]}

Output document::

    {"shapes": [{"name": "tri", "pieces": [[[0, 0], [1, 0], [0, 1]]]}]}
"""

from pydantic import BaseModel, Field, model_validator

from convexify.domain import Polygon, Shape
from convexify.domain.point import EPS


class RectModel(BaseModel):
    """Axis-aligned rectangle source."""

    x: float = 0.0
    y: float = 0.0
    width: float = Field(ge=0.0)
    height: float = Field(ge=0.0)


class ShapeModel(BaseModel):
    """A named shape with exactly one geometry source."""

    name: str
    points: list[tuple[float, float]] | None = Field(
        default=None,
        description="Vertex list",
    )
    path: list[tuple[str, list[float]]] | None = Field(
        default=None,
        description="Path segments as (command, values) pairs",
    )
    rect: RectModel | None = Field(
        default=None,
        description="Rectangle",
    )
    max_error: float | None = Field(
        default=None,
        gt=EPS,
        description="Curve sampling tolerance for path shapes (None = document default)",
    )

    @model_validator(mode="after")
    def _check_single_source(self) -> "ShapeModel":
        sources = [s for s in (self.points, self.path, self.rect) if s is not None]
        if len(sources) != 1:
            raise ValueError(f"shape '{self.name}' needs exactly one of points, path or rect")
        return self


class ShapeDocument(BaseModel):
    """Input document."""

    shapes: list[ShapeModel] = Field(default_factory=list)


class ShapeResultModel(BaseModel):
    """Convex pieces of one shape."""

    name: str
    pieces: list[list[tuple[float, float]]] = Field(default_factory=list)


class ResultDocument(BaseModel):
    """Output document."""

    shapes: list[ShapeResultModel] = Field(default_factory=list)


def shape_model_to_domain(
    model: ShapeModel,
    max_error: float = 0.2,
    remove_duplicates: bool = False,
) -> Shape:
    """Convert a document shape to a domain Shape.

    Args:
        model: Validated shape from the input document
        max_error: Curve sampling tolerance if the shape does not set one
        remove_duplicates: Drop near-duplicate vertices of sampled paths

    Returns:
        Shape with its polygon

    Raises:
        PathError: If a path segment is unsupported or malformed
    """
    from convexify.core.path import polygon_from_rect, polygon_from_segments

    if model.points is not None:
        polygon = Polygon.from_coords(model.points)
    elif model.path is not None:
        polygon = polygon_from_segments(
            model.path,
            max_error=model.max_error or max_error,
            remove_duplicates=remove_duplicates,
        )
    elif model.rect is not None:
        rect = model.rect
        polygon = polygon_from_rect(rect.x, rect.y, rect.width, rect.height)
    else:
        # Only reachable for models built without validation
        polygon = Polygon()
    return Shape(name=model.name, polygon=polygon)


def pieces_to_model(name: str, pieces: list[Polygon]) -> ShapeResultModel:
    """Convert decomposition results to their document form."""
    return ShapeResultModel(name=name, pieces=[piece.to_coords() for piece in pieces])
