"""Shape reader for loading JSON shape documents.

This module provides the ShapeReader class for loading shape documents
and converting them into domain models.
"""

from collections.abc import Iterator
from pathlib import Path

from pydantic import ValidationError

from convexify.domain import Shape
from convexify.exceptions import PathError, ShapeFormatError, ShapeLoadError
from convexify.io.converter import ShapeDocument, shape_model_to_domain


class ShapeReader:
    """Loads shape documents and extracts shapes.

    Example:
        reader = ShapeReader(Path("shapes.json"))
        reader.load()
        for shape in reader.iter_shapes():
            print(shape.name)
    """

    def __init__(self, path: Path, max_error: float = 0.2, remove_duplicates: bool = False) -> None:
        """Initialize the shape reader.

        Args:
            path: Path to the JSON shape document
            max_error: Default curve sampling tolerance for path shapes
            remove_duplicates: Drop near-duplicate vertices of sampled paths
        """
        self._path = path
        self._max_error = max_error
        self._remove_duplicates = remove_duplicates
        self._shapes: list[Shape] | None = None

    def load(self) -> None:
        """Load and validate the document.

        Raises:
            FileNotFoundError: If the document does not exist
            ShapeLoadError: If the document cannot be read
            ShapeFormatError: If the document is not valid JSON, violates the
                schema, or contains unsupported path segments
        """
        if not self._path.exists():
            raise FileNotFoundError(f"Shape file not found: {self._path}")

        try:
            text = self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ShapeLoadError(str(self._path), str(e)) from e

        try:
            document = ShapeDocument.model_validate_json(text)
        except ValidationError as e:
            raise ShapeFormatError(str(self._path), str(e)) from e

        shapes: list[Shape] = []
        for model in document.shapes:
            try:
                shapes.append(shape_model_to_domain(model, self._max_error, self._remove_duplicates))
            except PathError as e:
                raise ShapeFormatError(str(self._path), f"shape '{model.name}': {e}") from e
        self._shapes = shapes

    @property
    def shape_count(self) -> int:
        """Return the number of shapes in the document.

        Raises:
            RuntimeError: If the document has not been loaded yet
        """
        if self._shapes is None:
            raise RuntimeError("Shapes not loaded. Call load() first.")
        return len(self._shapes)

    def iter_shapes(self) -> Iterator[Shape]:
        """Iterate over the shapes in document order.

        Raises:
            RuntimeError: If the document has not been loaded yet
        """
        if self._shapes is None:
            raise RuntimeError("Shapes not loaded. Call load() first.")
        yield from self._shapes

    def __enter__(self) -> "ShapeReader":
        """Context manager entry."""
        self.load()
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        """Context manager exit."""
        self._shapes = None
