"""Shape writer for saving decomposition results.

This module provides the ShapeWriter class for writing convex pieces
as a JSON result document.
"""

from pathlib import Path

from convexify.domain import Polygon
from convexify.exceptions import ShapeSaveError
from convexify.io.converter import ResultDocument, pieces_to_model


class ShapeWriter:
    """Writes convex pieces to a result document.

    Results are written in the order they were added.

    Example:
        writer = ShapeWriter(Path("shapes-convex.json"))
        writer.add_result("tri", pieces)
        writer.save()
    """

    def __init__(self, output_path: Path) -> None:
        """Initialize the shape writer.

        Args:
            output_path: Path where the document will be saved
        """
        self._output_path = output_path
        self._document = ResultDocument()

    @property
    def result_count(self) -> int:
        return len(self._document.shapes)

    def add_result(self, name: str, pieces: list[Polygon]) -> None:
        """Add the convex pieces of one shape.

        Args:
            name: Shape name
            pieces: Convex pieces of the shape
        """
        self._document.shapes.append(pieces_to_model(name, pieces))

    def save(self) -> None:
        """Save the document to the output path.

        Raises:
            ShapeSaveError: If the file cannot be written
        """
        try:
            self._output_path.write_text(self._document.model_dump_json(indent=2), encoding="utf-8")
        except OSError as e:
            raise ShapeSaveError(str(self._output_path), str(e)) from e

    @staticmethod
    def get_output_path(input_path: Path) -> Path:
        """Generate output path with the convex naming convention.

        Converts: shapes.json -> shapes-convex.json

        Args:
            input_path: Original document path

        Returns:
            Path with -convex suffix before the extension
        """
        return input_path.parent / f"{input_path.stem}-convex.json"
