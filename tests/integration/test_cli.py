"""End-to-end tests of the command line interface."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from convexify import __version__
from convexify.cli.app import app

runner = CliRunner()


@pytest.fixture
def document(tmp_path: Path) -> Path:
    """Create a small shape document."""
    path = tmp_path / "shapes.json"
    path.write_text(
        json.dumps(
            {
                "shapes": [
                    {"name": "L", "points": [[0, 0], [4, 0], [4, 2], [2, 2], [2, 4], [0, 4]]},
                    {"name": "box", "rect": {"width": 2, "height": 1}},
                    {
                        "name": "cup",
                        "path": [["M", [0, 0]], ["L", [20, 0]], ["L", [20, 20]], ["Q", [10, 0, 0, 20]], ["Z", []]],
                    },
                ]
            }
        ),
        encoding="utf-8",
    )
    return path


def invoke(*args: str):
    return runner.invoke(app, list(args))


class TestConvexifyCommand:
    """Test the convexify command."""

    def test_version(self) -> None:
        result = invoke("--version")
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_decompose(self, document: Path, tmp_path: Path) -> None:
        """Test a full run writes the result document."""
        output = tmp_path / "result.json"
        result = invoke(
            str(document), "-o", str(output), "-j", "1", "--log-file", str(tmp_path / "run.log")
        )
        assert result.exit_code == 0, result.output
        assert "Complete" in result.output

        data = json.loads(output.read_text(encoding="utf-8"))
        assert [shape["name"] for shape in data["shapes"]] == ["L", "box", "cup"]
        assert len(data["shapes"][0]["pieces"]) == 2
        assert len(data["shapes"][1]["pieces"]) == 1
        assert len(data["shapes"][2]["pieces"]) > 1

    def test_default_output_path(self, document: Path, tmp_path: Path) -> None:
        result = invoke(str(document), "-q", "-j", "1", "--log-file", str(tmp_path / "run.log"))
        assert result.exit_code == 0, result.output
        assert (tmp_path / "shapes-convex.json").exists()

    def test_max_vertices(self, document: Path, tmp_path: Path) -> None:
        """Test the vertex budget reaches the decomposition."""
        output = tmp_path / "result.json"
        result = invoke(
            str(document),
            "-o", str(output),
            "-m", "3",
            "-j", "1",
            "--log-file", str(tmp_path / "run.log"),
        )  # fmt: skip
        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text(encoding="utf-8"))
        for shape in data["shapes"]:
            assert all(len(piece) == 3 for piece in shape["pieces"])

    def test_dry_run(self, document: Path, tmp_path: Path) -> None:
        """Test a dry run analyzes without writing output."""
        result = invoke(str(document), "--dry-run")
        assert result.exit_code == 0, result.output
        assert "Concave shapes" in result.output
        assert "Dry run complete" in result.output
        assert not (tmp_path / "shapes-convex.json").exists()

    def test_missing_input(self, tmp_path: Path) -> None:
        result = invoke(str(tmp_path / "missing.json"))
        assert result.exit_code == 1
        assert "Input file not found" in result.output

    def test_directory_input(self, tmp_path: Path) -> None:
        result = invoke(str(tmp_path))
        assert result.exit_code == 1
        assert "not a file" in result.output

    def test_verbose_and_quiet(self, document: Path) -> None:
        result = invoke(str(document), "-v", "-q")
        assert result.exit_code == 1
        assert "--verbose and --quiet" in result.output

    def test_invalid_max_error(self, document: Path) -> None:
        result = invoke(str(document), "--max-error", "0")
        assert result.exit_code == 1
        assert "Invalid settings" in result.output

    def test_max_vertices_below_minimum(self, document: Path) -> None:
        """Test option ranges are enforced by the parser."""
        result = invoke(str(document), "-m", "2")
        assert result.exit_code == 2

    def test_invalid_document(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text('{"shapes": [{"name": "round", "path": [["A", [1, 1, 0, 0, 1, 2, 0]]]}]}', encoding="utf-8")
        result = invoke(str(path), "--log-file", str(tmp_path / "run.log"))
        assert result.exit_code == 1
        assert "Could not process shape document" in result.output

    def test_cancelled_run(self, document: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test Ctrl+C reports the pending shapes and writes nothing."""

        def interrupt(futures: object) -> None:
            raise KeyboardInterrupt

        monkeypatch.setattr("convexify.core.processor.as_completed", interrupt)
        output = tmp_path / "result.json"
        result = invoke(
            str(document), "-o", str(output), "-j", "1", "--log-file", str(tmp_path / "run.log")
        )
        assert result.exit_code == 130
        assert "0 shapes completed" in result.output
        assert "3 tasks cancelled" in result.output
        assert not output.exists()
