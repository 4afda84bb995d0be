"""Command-line interface for convexify.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- Progress bars for shape processing
- Verbose/quiet output modes
- Dry-run analysis of shape documents
- Detailed error reporting
"""

from convexify.cli.app import cli, main

__all__ = ["cli", "main"]
