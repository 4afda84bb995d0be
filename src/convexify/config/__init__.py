"""Configuration management for convexify.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- DecompositionSettings: Convex decomposition settings
- FlattenConfig: Bezier flattening settings
- ProcessingConfig: Batch processing settings
- LoggingConfig: Logging settings
- ConvexifySettings: Main application settings
"""

from convexify.config.settings import (
    ConvexifySettings,
    DecompositionSettings,
    FlattenConfig,
    LoggingConfig,
    ProcessingConfig,
    get_default_settings,
)

__all__ = [
    "ConvexifySettings",
    "DecompositionSettings",
    "FlattenConfig",
    "LoggingConfig",
    "ProcessingConfig",
    "get_default_settings",
]
