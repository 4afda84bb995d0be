"""Configuration settings for Convexify."""

import math
from pathlib import Path

from pydantic import BaseModel, Field

from convexify.domain.point import EPS


class DecompositionSettings(BaseModel):
    """Configuration for convex decomposition.

    Preprocessing runs once on the input polygon before the recursion starts.
    The merge and simplification steps are skipped when their parameter is 0.
    """

    preprocess: bool = Field(
        default=True,
        description="Clean up the input polygon before decomposing it",
    )
    pre_order_vertices: bool = Field(
        default=True,
        description="Reverse clockwise input so vertices run counter-clockwise",
    )
    pre_merge_vertices_min_dist: float = Field(
        default=0.1,
        ge=0.0,
        description="Merge adjacent vertices closer than this (0 = off)",
    )
    pre_remove_vertices_max_error: float = Field(
        default=0.1,
        ge=0.0,
        description="Drop vertices deviating less than this from their neighbours' line (0 = off)",
    )
    max_vertices: int = Field(
        default=8,
        ge=3,
        description="Convex pieces with more vertices are split further",
    )
    s1_min_angle: float = Field(
        default=math.radians(15.0),
        ge=0.0,
        le=math.pi,
        description="Minimum angle (radians) between a diagonal and the notch edges",
    )


class FlattenConfig(BaseModel):
    """Configuration for Bezier curve flattening."""

    max_error: float = Field(
        default=0.2,
        gt=EPS,
        description="Maximum distance between curve and polyline",
    )
    remove_duplicates: bool = Field(
        default=False,
        description="Drop near-duplicate and collinear vertices after flattening",
    )


class ProcessingConfig(BaseModel):
    """Configuration for batch processing."""

    max_workers: int | None = Field(
        default=None,
        description="Max worker processes (None = auto)",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class ConvexifySettings(BaseModel):
    """Main application settings."""

    decomposition: DecompositionSettings = Field(default_factory=DecompositionSettings)
    flatten: FlattenConfig = Field(default_factory=FlattenConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> ConvexifySettings:
    """Get default application settings."""
    return ConvexifySettings()
