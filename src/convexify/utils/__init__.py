"""Utility functions for convexify.

This module provides utility functions including:

- Logging setup and configuration
- Processing statistics
"""

from convexify.utils.logging import (
    ProcessingLogger,
    ProcessingStats,
    configure_logging,
)

__all__ = [
    "ProcessingLogger",
    "ProcessingStats",
    "configure_logging",
]
