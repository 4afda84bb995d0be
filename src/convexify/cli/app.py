"""CLI application entry point for convexify.

This module provides the main CLI interface using Typer.
"""

import math
import os
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from convexify import __version__
from convexify.cli.output import (
    SYM_OK,
    console,
    create_progress,
    print_cancellation_notice,
    print_cancellation_summary,
    print_document_info,
    print_error,
    print_header,
    print_processing_info,
    print_shape_errors,
    print_shape_table,
    print_step,
    print_success,
)
from convexify.config import (
    ConvexifySettings,
    DecompositionSettings,
    FlattenConfig,
    LoggingConfig,
    ProcessingConfig,
)
from convexify.core import ShapeProcessor
from convexify.exceptions import ConvexifyError, ShapeFileError
from convexify.io import ShapeReader, ShapeWriter

# Create the Typer app
app = typer.Typer(
    name="convexify",
    help="Decompose polygons into convex pieces for physics collision shapes.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Convexify[/bold blue] v{__version__}")
        raise typer.Exit()


@app.command()
def convexify(
    input_file: Annotated[
        Path,
        typer.Argument(
            help="Path to input JSON shape document",
            show_default=False,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output path (default: {name}-convex.json)",
        ),
    ] = None,
    max_vertices: Annotated[
        int,
        typer.Option(
            "--max-vertices",
            "-m",
            help="Maximum vertices per convex piece",
            min=3,
        ),
    ] = 8,
    min_angle: Annotated[
        float,
        typer.Option(
            "--min-angle",
            help="Minimum angle in degrees between a split diagonal and the notch edges",
            min=0.0,
            max=180.0,
        ),
    ] = 15.0,
    merge_distance: Annotated[
        float,
        typer.Option(
            "--merge-distance",
            help="Merge adjacent vertices closer than this (0 = off)",
            min=0.0,
        ),
    ] = 0.1,
    simplify_error: Annotated[
        float,
        typer.Option(
            "--simplify-error",
            help="Drop vertices deviating less than this from their neighbours' line (0 = off)",
            min=0.0,
        ),
    ] = 0.1,
    no_preprocess: Annotated[
        bool,
        typer.Option(
            "--no-preprocess",
            help="Decompose shapes as given, without ordering or simplifying them",
        ),
    ] = False,
    max_error: Annotated[
        float,
        typer.Option(
            "--max-error",
            help="Maximum distance between curves and their sampled lines",
        ),
    ] = 0.2,
    workers: Annotated[
        int | None,
        typer.Option(
            "--workers",
            "-j",
            help="Number of parallel workers (default: auto)",
            min=1,
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Analyze shapes and show what would be done without writing output",
        ),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbose console output",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Decompose every shape of a JSON document into convex pieces.

    Shapes are given as vertex lists, path segments or rectangles. Each shape
    is split until all pieces are convex and have at most --max-vertices
    vertices.

    Example:
        convexify shapes.json --max-vertices 6

    This will create shapes-convex.json with the convex pieces of every shape.
    """
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    if not input_file.exists():
        print_error(
            f"Input file not found: {input_file}",
            details=f"The file '{input_file}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)

    if not input_file.is_file():
        print_error(
            f"Input path is not a file: {input_file}",
            details="Please provide a path to a JSON shape document.",
        )
        raise typer.Exit(code=1)

    try:
        settings = ConvexifySettings(
            decomposition=DecompositionSettings(
                preprocess=not no_preprocess,
                pre_merge_vertices_min_dist=merge_distance,
                pre_remove_vertices_max_error=simplify_error,
                max_vertices=max_vertices,
                s1_min_angle=math.radians(min_angle),
            ),
            flatten=FlattenConfig(max_error=max_error),
            processing=ProcessingConfig(max_workers=workers),
            logging=LoggingConfig(
                log_file=log_file,
                log_level=log_level if not quiet else "ERROR",
            ),
        )
    except ValidationError as e:
        print_error("Invalid settings", details=str(e))
        raise typer.Exit(code=1)

    if not quiet:
        print_header(__version__)

    try:
        if dry_run:
            _handle_dry_run(input_file, settings, quiet, verbose)
            raise typer.Exit(code=0)

        if not quiet:
            print_step("Loading shapes")

        reader = ShapeReader(input_file, max_error=settings.flatten.max_error)
        reader.load()
        shapes = list(reader.iter_shapes())
        degenerate = sum(1 for shape in shapes if shape.is_degenerate())
        to_process = len(shapes) - degenerate

        if not quiet:
            print_document_info(str(input_file), len(shapes), degenerate)

        if not quiet:
            actual_workers = workers if workers else os.cpu_count() or 1
            print_step("Processing")
            print_processing_info(actual_workers, is_auto=(workers is None))

        # Determine output path early for cancellation handling
        actual_output_path = output if output is not None else ShapeWriter.get_output_path(input_file)

        processor = ShapeProcessor(settings)

        try:
            if not quiet:
                with create_progress() as progress:
                    task_id = progress.add_task(
                        f"Processing {to_process} shapes",
                        total=to_process,
                    )

                    def update_progress(completed: int, *_: object) -> None:
                        progress.update(task_id, completed=completed)

                    stats = processor.process(
                        input_path=input_file,
                        output_path=actual_output_path,
                        max_workers=workers,
                        progress_callback=update_progress,
                    )
            else:
                stats = processor.process(
                    input_path=input_file,
                    output_path=actual_output_path,
                    max_workers=workers,
                )
        except KeyboardInterrupt:
            if not quiet:
                partial = processor.stats
                print_cancellation_notice()
                print_cancellation_summary(
                    processed=partial.processed_count if partial else 0,
                    cancelled=partial.cancelled_count if partial else 0,
                )
            raise typer.Exit(code=130) from None  # Standard Unix SIGINT exit code

        if not quiet:
            print_success(
                output_path=str(actual_output_path),
                total_time_s=stats.duration_seconds,
                processed=stats.processed_count,
                pieces=stats.pieces_created,
                errors=stats.error_count,
                avg_time_ms=stats.avg_shape_ms if stats.shape_timings_ms else None,
                min_time_ms=stats.min_shape_ms if stats.shape_timings_ms else None,
                max_time_ms=stats.max_shape_ms if stats.shape_timings_ms else None,
            )
            if verbose and stats.errors:
                print_shape_errors(stats.errors)

        if stats.error_count > 0:
            raise typer.Exit(code=1)

    except ShapeFileError as e:
        print_error(f"Could not process shape document: {e}")
        raise typer.Exit(code=1)
    except ConvexifyError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except typer.Exit:
        # Re-raise typer.Exit to allow clean exits
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1)


def _handle_dry_run(
    input_file: Path, settings: ConvexifySettings, quiet: bool, verbose: bool
) -> None:
    """Handle --dry-run mode.

    Args:
        input_file: Path to shape document
        settings: Convexify settings
        quiet: Suppress output
        verbose: Show per-shape table
    """
    if not quiet:
        print_step("Loading shapes")

    reader = ShapeReader(input_file, max_error=settings.flatten.max_error)
    reader.load()

    rows: list[tuple[str, int, int, float]] = []
    for shape in reader.iter_shapes():
        polygon = shape.polygon.copy()
        polygon.order_vertices()
        notches = 0
        if len(polygon) >= 3:
            notches = sum(1 for i in range(len(polygon)) if not polygon.is_convex(i))
        rows.append((shape.name, len(polygon), notches, polygon.area()))

    if quiet:
        return

    degenerate = sum(1 for row in rows if row[1] < 3)
    print_document_info(str(input_file), len(rows), degenerate)
    print_step("Analyzing (dry run)")

    console.print("\n[bold]Analysis[/bold]\n")
    console.print(f"  Concave shapes        {sum(1 for row in rows if row[2] > 0)}")
    console.print(f"  Total notches         {sum(row[2] for row in rows)}")
    console.print(f"  Max vertices/piece    {settings.decomposition.max_vertices}")

    if verbose or len(rows) <= 20:
        console.print()
        print_shape_table(rows)

    console.print(f"\n[bold green]{SYM_OK} Dry run complete[/bold green] - no output written")


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
