"""Exception hierarchy for Convexify."""

from typing import Any


class ConvexifyError(Exception):
    """Base exception for all Convexify errors."""

    pass


class ConfigurationError(ConvexifyError):
    """Errors caused by invalid parameters or settings."""

    pass


class InvalidSettingsError(ConfigurationError):
    """A parameter violates a precondition of the algorithm."""

    def __init__(self, name: str, value: Any, reason: str) -> None:
        self.name = name
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid value for '{name}' ({value!r}): {reason}")


class GeometryError(ConvexifyError):
    """Errors in geometric input."""

    pass


class PathError(GeometryError):
    """Error with path segment data."""

    pass


class UnsupportedSegmentError(PathError):
    """Path segment type that cannot be flattened."""

    def __init__(self, command: str) -> None:
        self.command = command
        super().__init__(f"Unsupported path segment '{command}'")


class InvalidSegmentError(PathError):
    """Path segment with malformed values."""

    def __init__(self, command: str, reason: str) -> None:
        self.command = command
        self.reason = reason
        super().__init__(f"Invalid path segment '{command}': {reason}")


class ShapeFileError(ConvexifyError):
    """Errors related to shape document loading or saving."""

    pass


class ShapeLoadError(ShapeFileError):
    """Error loading a shape document."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load shapes '{path}': {reason}")


class ShapeSaveError(ShapeFileError):
    """Error saving a decomposition result."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save shapes '{path}': {reason}")


class ShapeFormatError(ShapeFileError):
    """Invalid shape document structure."""

    def __init__(self, path: str, details: str) -> None:
        self.path = path
        self.details = details
        super().__init__(f"Invalid shape document '{path}': {details}")
