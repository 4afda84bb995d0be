"""Unit tests for the shape document I/O layer.

Tests for ShapeReader, ShapeWriter, and converter functions.
"""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from convexify.domain import Polygon
from convexify.exceptions import ShapeFormatError, ShapeLoadError, ShapeSaveError
from convexify.io.converter import ShapeModel, pieces_to_model, shape_model_to_domain
from convexify.io.reader import ShapeReader
from convexify.io.writer import ShapeWriter


def write_document(path: Path, shapes: list[dict]) -> Path:
    path.write_text(json.dumps({"shapes": shapes}), encoding="utf-8")
    return path


@pytest.fixture
def document(tmp_path: Path) -> Path:
    """Create a document with one shape per geometry source."""
    return write_document(
        tmp_path / "shapes.json",
        [
            {"name": "tri", "points": [[0, 0], [1, 0], [0, 1]]},
            {"name": "blob", "path": [["M", [0, 0]], ["L", [10, 0]], ["Q", [10, 10, 0, 10]], ["Z", []]]},
            {"name": "box", "rect": {"x": 1, "y": 1, "width": 4, "height": 2}},
        ],
    )


class TestShapeModel:
    """Tests for the document schema."""

    def test_single_source(self) -> None:
        model = ShapeModel(name="tri", points=[(0, 0), (1, 0), (0, 1)])
        assert model.path is None
        assert model.rect is None

    def test_no_source(self) -> None:
        with pytest.raises(ValidationError, match="exactly one of"):
            ShapeModel(name="empty")

    def test_two_sources(self) -> None:
        with pytest.raises(ValidationError, match="exactly one of"):
            ShapeModel(name="both", points=[(0, 0)], rect={"width": 1, "height": 1})

    def test_negative_rect(self) -> None:
        with pytest.raises(ValidationError):
            ShapeModel(name="box", rect={"width": -1, "height": 1})

    def test_invalid_max_error(self) -> None:
        with pytest.raises(ValidationError):
            ShapeModel(name="blob", path=[("M", [0, 0])], max_error=0.0)


class TestConverter:
    """Tests for converter functions."""

    def test_points_to_domain(self) -> None:
        """Test vertex lists are taken as given."""
        model = ShapeModel(name="cw", points=[(0, 0), (0, 1), (1, 0)])
        shape = shape_model_to_domain(model)
        assert shape.name == "cw"
        assert shape.polygon.to_coords() == [(0, 0), (0, 1), (1, 0)]

    def test_rect_to_domain(self) -> None:
        model = ShapeModel(name="box", rect={"x": 1, "y": 2, "width": 3, "height": 4})
        shape = shape_model_to_domain(model)
        assert shape.polygon.to_coords() == [(1, 2), (4, 2), (4, 6), (1, 6)]

    def test_path_uses_shape_max_error(self) -> None:
        """Test a shape's own tolerance overrides the document default."""
        path = [("M", [0, 0]), ("C", [0, 10, 10, 10, 10, 0]), ("Z", [])]
        coarse = shape_model_to_domain(ShapeModel(name="a", path=path, max_error=2.0), max_error=0.01)
        fine = shape_model_to_domain(ShapeModel(name="b", path=path), max_error=0.01)
        assert len(coarse.polygon) < len(fine.polygon)

    def test_unvalidated_model_without_source(self) -> None:
        """Test a model built without validation gives a degenerate shape."""
        shape = shape_model_to_domain(ShapeModel.model_construct(name="empty"))
        assert shape.name == "empty"
        assert shape.is_degenerate()

    def test_pieces_to_model(self) -> None:
        piece = Polygon.from_coords([(0, 0), (1, 0), (0, 1)])
        model = pieces_to_model("tri", [piece])
        assert model.name == "tri"
        assert model.pieces == [[(0.0, 0.0), (1.0, 0.0), (0.0, 1.0)]]


class TestShapeReader:
    """Tests for ShapeReader class."""

    def test_load_nonexistent_file(self, tmp_path: Path) -> None:
        """Test loading a nonexistent file raises FileNotFoundError."""
        reader = ShapeReader(tmp_path / "missing.json")
        with pytest.raises(FileNotFoundError):
            reader.load()

    def test_shape_count_before_load(self, document: Path) -> None:
        """Test accessing shape_count before loading raises RuntimeError."""
        reader = ShapeReader(document)
        with pytest.raises(RuntimeError, match="Shapes not loaded"):
            _ = reader.shape_count

    def test_iter_shapes_before_load(self, document: Path) -> None:
        reader = ShapeReader(document)
        with pytest.raises(RuntimeError, match="Shapes not loaded"):
            list(reader.iter_shapes())

    def test_load(self, document: Path) -> None:
        """Test loading all geometry sources."""
        reader = ShapeReader(document, max_error=0.1)
        reader.load()
        assert reader.shape_count == 3
        shapes = list(reader.iter_shapes())
        assert [shape.name for shape in shapes] == ["tri", "blob", "box"]
        assert len(shapes[0].polygon) == 3
        assert len(shapes[1].polygon) > 4
        assert shapes[1].polygon.area() > 0
        assert shapes[2].polygon.area() == pytest.approx(8.0)

    def test_context_manager(self, document: Path) -> None:
        with ShapeReader(document) as reader:
            assert reader.shape_count == 3

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ShapeFormatError):
            ShapeReader(path).load()

    def test_schema_violation(self, tmp_path: Path) -> None:
        path = write_document(tmp_path / "bad.json", [{"name": "none"}])
        with pytest.raises(ShapeFormatError) as exc_info:
            ShapeReader(path).load()
        assert exc_info.value.path == str(path)

    def test_unsupported_segment(self, tmp_path: Path) -> None:
        """Test arcs are reported with the shape name."""
        path = write_document(
            tmp_path / "arc.json",
            [{"name": "round", "path": [["M", [0, 0]], ["A", [5, 5, 0, 0, 1, 10, 0]]]}],
        )
        with pytest.raises(ShapeFormatError, match="shape 'round'"):
            ShapeReader(path).load()

    def test_undecodable_file(self, tmp_path: Path) -> None:
        path = tmp_path / "binary.json"
        path.write_bytes(b"\xff\xfe\x00\x81")
        with pytest.raises(ShapeLoadError):
            ShapeReader(path).load()


class TestShapeWriter:
    """Tests for ShapeWriter class."""

    def test_get_output_path(self) -> None:
        """Test output path generation."""
        assert ShapeWriter.get_output_path(Path("/tmp/shapes.json")) == Path("/tmp/shapes-convex.json")
        assert ShapeWriter.get_output_path(Path("level")) == Path("level-convex.json")

    def test_save(self, tmp_path: Path) -> None:
        """Test results are written in the order they were added."""
        output = tmp_path / "out.json"
        writer = ShapeWriter(output)
        writer.add_result("b", [Polygon.from_coords([(0, 0), (1, 0), (0, 1)])])
        writer.add_result("a", [])
        assert writer.result_count == 2
        writer.save()

        data = json.loads(output.read_text(encoding="utf-8"))
        assert data == {
            "shapes": [
                {"name": "b", "pieces": [[[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]]]},
                {"name": "a", "pieces": []},
            ]
        }

    def test_save_to_missing_directory(self, tmp_path: Path) -> None:
        writer = ShapeWriter(tmp_path / "missing" / "out.json")
        with pytest.raises(ShapeSaveError):
            writer.save()
