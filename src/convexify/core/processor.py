"""Parallel processing orchestration for batch decomposition.

This module coordinates decomposing every shape of a document, with parallel
processing of individual shapes using ProcessPoolExecutor.

Key components:
- process_shape: Top-level picklable function for parallel execution
- ShapeProcessor: Main orchestrator class for document processing
"""

import time
import traceback
from collections.abc import Callable
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path
from typing import Any

from convexify.config import ConvexifySettings, DecompositionSettings
from convexify.core.decomposition import ConvexDecomposer
from convexify.domain import Polygon, Shape
from convexify.io import ShapeReader, ShapeWriter
from convexify.utils import ProcessingLogger, ProcessingStats, configure_logging


def process_shape(shape_dict: dict[str, Any], settings_dict: dict[str, Any]) -> dict[str, Any]:
    """Decompose a single shape into convex pieces.

    Top-level function designed to be picklable for use with ProcessPoolExecutor.
    Deserializes the shape, decomposes it, and returns the result.

    Args:
        shape_dict: Serialized shape (from Shape.to_dict())
        settings_dict: Serialized decomposition settings

    Returns:
        Dictionary containing either:
        - Success: {"name": str, "pieces": [polygon_dict, ...], "duration_ms": float}
        - Error: {"error": str, "shape_name": str, "traceback": str, "duration_ms": float}
    """
    start_time = time.time()

    try:
        shape = Shape.from_dict(shape_dict)
        settings = DecompositionSettings(**settings_dict)

        pieces = ConvexDecomposer(settings).decompose(shape.polygon)

        duration_ms = (time.time() - start_time) * 1000
        return {
            "name": shape.name,
            "pieces": [piece.to_dict() for piece in pieces],
            "duration_ms": duration_ms,
        }

    except Exception as e:
        duration_ms = (time.time() - start_time) * 1000
        tb = traceback.format_exc()
        return {
            "error": str(e),
            "shape_name": shape_dict.get("name", "unknown"),
            "traceback": tb,
            "duration_ms": duration_ms,
        }


class ShapeProcessor:
    """Orchestrates parallel decomposition of shape documents.

    Manages the complete workflow:
    1. Load shape document
    2. Skip degenerate shapes (fewer than 3 vertices)
    3. Decompose shapes in parallel using worker processes
    4. Collect results and update statistics
    5. Save result document in input order

    Example:
        settings = ConvexifySettings()
        processor = ShapeProcessor(settings)
        stats = processor.process(
            input_path=Path("shapes.json"),
            output_path=Path("shapes-convex.json"),
            max_workers=4
        )
    """

    def __init__(self, config: ConvexifySettings) -> None:
        """Initialize shape processor with configuration.

        Args:
            config: Convexify settings containing decomposition and processing config
        """
        self.config = config
        self.logger = configure_logging(
            log_file=config.logging.log_file,
            console_level=config.logging.log_level,
            file_level=config.logging.file_log_level,
            quiet=False,
        )
        self.processing_logger = ProcessingLogger(self.logger)
        # Statistics of the current or most recent run, kept when it is cancelled
        self.stats: ProcessingStats | None = None

    def process(
        self,
        input_path: Path,
        output_path: Path | None = None,
        max_workers: int | None = None,
        progress_callback: Callable[[int, int, str, bool], None] | None = None,
    ) -> ProcessingStats:
        """Process a shape document with parallel shape decomposition.

        Args:
            input_path: Path to input JSON document
            output_path: Path for the result document (auto-generated if None)
            max_workers: Maximum worker processes (None = config default)
            progress_callback: Optional callback(completed, total, shape_name, success)
                for progress updates

        Returns:
            ProcessingStats with counts, timing, and error details

        Raises:
            FileNotFoundError: If the input document does not exist
            ShapeFileError: If the document cannot be read, parsed or saved
            KeyboardInterrupt: If processing is cancelled by user. The partial
                statistics stay available as the stats attribute.
        """
        stats = ProcessingStats()
        stats.start_time = time.time()
        self.stats = stats

        if max_workers is None:
            max_workers = self.config.processing.max_workers

        if output_path is None:
            output_path = ShapeWriter.get_output_path(input_path)

        self.logger.info(
            "Starting shape processing",
            input=str(input_path),
            output=str(output_path),
            max_workers=max_workers,
        )

        reader = ShapeReader(
            input_path,
            max_error=self.config.flatten.max_error,
            remove_duplicates=self.config.flatten.remove_duplicates,
        )
        reader.load()
        self.logger.info("Shapes loaded", shape_count=reader.shape_count)

        all_shapes: list[Shape] = []
        indices: list[int] = []
        for index, shape in enumerate(reader.iter_shapes()):
            all_shapes.append(shape)
            if shape.is_degenerate():
                stats.skipped_count += 1
                self.processing_logger.log_shape_skipped(shape.name, "fewer than 3 vertices")
                continue
            indices.append(index)

        results: dict[int, list[Polygon]] = {}
        if indices:
            results = self._process_shapes_parallel(
                shapes=all_shapes,
                indices=indices,
                max_workers=max_workers,
                stats=stats,
                progress_callback=progress_callback,
            )
        else:
            self.logger.info("No shapes to process")

        self._save_results(all_shapes, results, output_path)

        stats.end_time = time.time()

        self.logger.info(
            "Processing complete",
            processed=stats.processed_count,
            skipped=stats.skipped_count,
            errors=stats.error_count,
            pieces_created=stats.pieces_created,
            duration_seconds=round(stats.duration_seconds, 2),
        )

        return stats

    def _process_shapes_parallel(
        self,
        shapes: list[Shape],
        indices: list[int],
        max_workers: int | None,
        stats: ProcessingStats,
        progress_callback: Callable[[int, int, str, bool], None] | None = None,
    ) -> dict[int, list[Polygon]]:
        """Decompose shapes in parallel using ProcessPoolExecutor.

        Args:
            shapes: All shapes of the document
            indices: Positions of the shapes to decompose
            max_workers: Maximum worker processes
            stats: Statistics object to update
            progress_callback: Optional callback(completed, total, shape_name, success)
                for progress updates

        Returns:
            Dictionary mapping document positions to convex pieces
        """
        results: dict[int, list[Polygon]] = {}

        settings_dict = self.config.decomposition.model_dump()

        self.logger.info(
            "Starting parallel processing",
            shape_count=len(indices),
            max_workers=max_workers,
        )

        total = len(indices)
        completed = 0
        pending_futures: dict = {}

        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            for index in indices:
                shape = shapes[index]
                self.processing_logger.log_shape_start(shape.name, shape.vertex_count())
                future = executor.submit(process_shape, shape.to_dict(), settings_dict)
                pending_futures[future] = index

            try:
                for future in as_completed(pending_futures):
                    index = pending_futures.pop(future)
                    shape_name = shapes[index].name
                    success = False

                    try:
                        result = future.result()

                        if "error" in result:
                            self.processing_logger.log_shape_error(
                                shape_name=result["shape_name"],
                                error=Exception(result["error"]),
                                traceback=result.get("traceback"),
                            )
                            stats.error_count += 1
                            stats.errors.append((shape_name, result["error"]))
                        else:
                            success = True
                            pieces = [Polygon.from_dict(p) for p in result["pieces"]]
                            results[index] = pieces

                            stats.processed_count += 1
                            stats.pieces_created += len(pieces)

                            duration_ms = result.get("duration_ms", 0.0)
                            self.processing_logger.log_shape_complete(
                                shape_name=shape_name,
                                pieces=len(pieces),
                                duration_ms=duration_ms,
                            )
                            stats.shape_timings_ms.append(duration_ms)

                    except Exception as e:
                        # Executor-level error
                        tb = traceback.format_exc()
                        self.processing_logger.log_shape_error(
                            shape_name=shape_name,
                            error=e,
                            traceback=tb,
                        )
                        stats.error_count += 1
                        stats.errors.append((shape_name, str(e)))

                    completed += 1
                    if progress_callback is not None:
                        progress_callback(completed, total, shape_name, success)

            except KeyboardInterrupt:
                self.logger.info("Cancellation requested by user")
                for f in pending_futures:
                    f.cancel()

                stats.was_cancelled = True
                stats.cancelled_count = len(pending_futures)

                executor.shutdown(wait=True, cancel_futures=True)
                raise

        return results

    def _save_results(
        self,
        shapes: list[Shape],
        results: dict[int, list[Polygon]],
        output_path: Path,
    ) -> None:
        """Save the result document.

        Shapes are written in input order. Degenerate shapes are written
        without pieces, shapes that failed are left out.

        Args:
            shapes: All shapes of the document
            results: Convex pieces by document position
            output_path: Path to save the result document
        """
        writer = ShapeWriter(output_path)
        for index, shape in enumerate(shapes):
            if shape.is_degenerate():
                writer.add_result(shape.name, [])
            elif index in results:
                writer.add_result(shape.name, results[index])
        writer.save()

        self.logger.info(
            "Results saved",
            output=str(output_path),
            shape_count=writer.result_count,
        )
