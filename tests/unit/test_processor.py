"""Tests for parallel processing orchestration."""

import json
from pathlib import Path
from unittest.mock import Mock

import pytest

from convexify.config import ConvexifySettings, DecompositionSettings, LoggingConfig
from convexify.core.processor import ShapeProcessor, process_shape
from convexify.domain import Polygon, Shape
from convexify.exceptions import ShapeFormatError


@pytest.fixture
def l_shape() -> Shape:
    """Create an L-shaped shape with one notch."""
    polygon = Polygon.from_coords([(0, 0), (4, 0), (4, 2), (2, 2), (2, 4), (0, 4)])
    return Shape(name="L", polygon=polygon)


@pytest.fixture
def settings(tmp_path: Path) -> ConvexifySettings:
    """Create settings logging into the test directory."""
    return ConvexifySettings(logging=LoggingConfig(log_file=tmp_path / "convexify.log"))


@pytest.fixture
def document(tmp_path: Path) -> Path:
    """Create a document with a concave, a convex and a degenerate shape."""
    path = tmp_path / "shapes.json"
    path.write_text(
        json.dumps(
            {
                "shapes": [
                    {"name": "L", "points": [[0, 0], [4, 0], [4, 2], [2, 2], [2, 4], [0, 4]]},
                    {"name": "line", "points": [[0, 0], [1, 1]]},
                    {"name": "box", "rect": {"width": 2, "height": 1}},
                ]
            }
        ),
        encoding="utf-8",
    )
    return path


class TestProcessShape:
    """Tests for the worker function."""

    def test_success(self, l_shape: Shape) -> None:
        """Test a shape is decomposed into serialized pieces."""
        result = process_shape(l_shape.to_dict(), DecompositionSettings().model_dump())
        assert "error" not in result
        assert result["name"] == "L"
        assert len(result["pieces"]) == 2
        assert result["duration_ms"] >= 0

        pieces = [Polygon.from_dict(p) for p in result["pieces"]]
        assert sum(piece.area() for piece in pieces) == pytest.approx(12.0)

    def test_settings_are_applied(self, l_shape: Shape) -> None:
        """Test the decomposition settings reach the worker."""
        settings = DecompositionSettings(max_vertices=3)
        result = process_shape(l_shape.to_dict(), settings.model_dump())
        assert len(result["pieces"]) == 4
        assert all(len(p["points"]) == 3 for p in result["pieces"])

    def test_invalid_settings(self, l_shape: Shape) -> None:
        """Test errors are returned instead of raised."""
        result = process_shape(l_shape.to_dict(), {"max_vertices": 2})
        assert result["shape_name"] == "L"
        assert "max_vertices" in result["error"]
        assert "Traceback" in result["traceback"]

    def test_malformed_shape(self) -> None:
        """Test a shape without polygon is reported under its name."""
        result = process_shape({"name": "broken"}, {})
        assert result["shape_name"] == "broken"
        assert "error" in result


class TestShapeProcessor:
    """Tests for ShapeProcessor class."""

    def test_process(self, settings: ConvexifySettings, document: Path, tmp_path: Path) -> None:
        """Test processing a document end to end."""
        output = tmp_path / "out.json"
        stats = ShapeProcessor(settings).process(document, output_path=output, max_workers=1)

        assert stats.processed_count == 2
        assert stats.skipped_count == 1
        assert stats.error_count == 0
        assert stats.pieces_created == 3
        assert len(stats.shape_timings_ms) == 2
        assert stats.duration_seconds >= 0

        data = json.loads(output.read_text(encoding="utf-8"))
        assert [shape["name"] for shape in data["shapes"]] == ["L", "line", "box"]
        assert len(data["shapes"][0]["pieces"]) == 2
        assert data["shapes"][1]["pieces"] == []
        assert data["shapes"][2]["pieces"] == [[[0.0, 0.0], [2.0, 0.0], [2.0, 1.0], [0.0, 1.0]]]

    def test_default_output_path(self, settings: ConvexifySettings, document: Path) -> None:
        """Test the result is written next to the input by default."""
        ShapeProcessor(settings).process(document, max_workers=1)
        assert (document.parent / "shapes-convex.json").exists()

    def test_progress_callback(self, settings: ConvexifySettings, document: Path, tmp_path: Path) -> None:
        """Test progress is reported once per decomposed shape."""
        callback = Mock()
        ShapeProcessor(settings).process(
            document,
            output_path=tmp_path / "out.json",
            max_workers=1,
            progress_callback=callback,
        )
        assert callback.call_count == 2
        completed, total, _, success = callback.call_args.args
        assert completed == 2
        assert total == 2
        assert success is True

    def test_only_degenerate_shapes(self, settings: ConvexifySettings, tmp_path: Path) -> None:
        """Test a document without decomposable shapes."""
        path = tmp_path / "flat.json"
        path.write_text(json.dumps({"shapes": [{"name": "dot", "points": [[0, 0]]}]}), encoding="utf-8")
        output = tmp_path / "out.json"
        stats = ShapeProcessor(settings).process(path, output_path=output)
        assert stats.processed_count == 0
        assert stats.skipped_count == 1
        assert json.loads(output.read_text(encoding="utf-8")) == {"shapes": [{"name": "dot", "pieces": []}]}

    def test_missing_input(self, settings: ConvexifySettings, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            ShapeProcessor(settings).process(tmp_path / "missing.json")

    def test_invalid_document(self, settings: ConvexifySettings, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text('{"shapes": [{"name": "x"}]}', encoding="utf-8")
        with pytest.raises(ShapeFormatError):
            ShapeProcessor(settings).process(path)

    def test_log_file_written(self, settings: ConvexifySettings, document: Path, tmp_path: Path) -> None:
        """Test structured events reach the log file."""
        ShapeProcessor(settings).process(document, output_path=tmp_path / "out.json", max_workers=1)
        log_text = (tmp_path / "convexify.log").read_text(encoding="utf-8")
        assert "Processing complete" in log_text

    def test_cancelled_run_keeps_stats(
        self,
        settings: ConvexifySettings,
        document: Path,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test the statistics of an interrupted run stay on the processor."""

        def interrupt(futures: object) -> None:
            raise KeyboardInterrupt

        monkeypatch.setattr("convexify.core.processor.as_completed", interrupt)
        processor = ShapeProcessor(settings)
        output = tmp_path / "out.json"

        with pytest.raises(KeyboardInterrupt):
            processor.process(document, output, max_workers=1)

        assert processor.stats is not None
        assert processor.stats.was_cancelled
        assert processor.stats.cancelled_count == 2
        assert processor.stats.skipped_count == 1
        assert not output.exists()
