"""Logging utilities for Convexify."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import structlog

# Marks handlers installed by configure_logging so a reconfiguration can replace them
_HANDLER_TAG = "_convexify_handler"


@dataclass
class ProcessingStats:
    """Statistics from processing run."""

    processed_count: int = 0
    skipped_count: int = 0
    error_count: int = 0
    pieces_created: int = 0
    errors: list[tuple[str, str]] = field(default_factory=list)
    shape_timings_ms: list[float] = field(default_factory=list)
    was_cancelled: bool = False
    cancelled_count: int = 0
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate processing duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0

    @property
    def avg_shape_ms(self) -> float:
        if not self.shape_timings_ms:
            return 0.0
        return sum(self.shape_timings_ms) / len(self.shape_timings_ms)

    @property
    def min_shape_ms(self) -> float:
        return min(self.shape_timings_ms, default=0.0)

    @property
    def max_shape_ms(self) -> float:
        return max(self.shape_timings_ms, default=0.0)


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (auto-generated if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output

    Returns:
        Configured structlog logger
    """
    if log_file is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = Path(f"convexify_{timestamp}.log")

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            root_logger.removeHandler(handler)
            handler.close()

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(getattr(logging, file_level.upper()))
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
    )
    setattr(file_handler, _HANDLER_TAG, True)

    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(file_handler)

    if not quiet:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, console_level.upper()))
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        setattr(console_handler, _HANDLER_TAG, True)
        root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("convexify")
    logger.info("Logging initialized", log_file=str(log_file), level=file_level)

    return logger


class ProcessingLogger:
    """Logger for tracking processing progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = ProcessingStats()

    def log_shape_start(self, shape_name: str, vertex_count: int) -> None:
        """Log start of shape processing."""
        self._logger.debug("Processing shape", shape=shape_name, vertices=vertex_count)

    def log_shape_complete(
        self,
        shape_name: str,
        pieces: int,
        duration_ms: float,
    ) -> None:
        """Log successful shape decomposition."""
        self._logger.info(
            "Shape decomposed",
            shape=shape_name,
            pieces=pieces,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.processed_count += 1
        self._stats.pieces_created += pieces
        self._stats.shape_timings_ms.append(duration_ms)

    def log_shape_skipped(self, shape_name: str, reason: str) -> None:
        """Log skipped shape."""
        self._logger.debug("Shape skipped", shape=shape_name, reason=reason)
        self._stats.skipped_count += 1

    def log_shape_error(
        self,
        shape_name: str,
        error: Exception,
        traceback: str | None = None,
    ) -> None:
        """Log shape processing error."""
        self._logger.error(
            "Shape processing failed",
            shape=shape_name,
            error=str(error),
            error_type=type(error).__name__,
            traceback=traceback,
        )
        self._stats.error_count += 1
        self._stats.errors.append((shape_name, str(error)))

    @property
    def stats(self) -> ProcessingStats:
        """Get current processing statistics."""
        return self._stats
