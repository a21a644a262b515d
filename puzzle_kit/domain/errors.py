"""
Errors raised by the stitch and split engines.
"""
from typing import Any, Optional


class PuzzleKitError(Exception):
    """Base class for every error raised by puzzle_kit."""
    pass


class MissingRasterError(PuzzleKitError):
    """Raised when a visible image has no decoded pixel data."""

    def __init__(self, image_id: Any):
        self.image_id = image_id
        super().__init__(f"Image data not loaded: {image_id}")


class SurfaceUnavailableError(PuzzleKitError):
    """Raised when a drawing surface could not be allocated."""
    pass


class EncodeError(PuzzleKitError):
    """Raised when a surface could not be encoded to the requested format."""

    def __init__(self, message: str, region_index: Optional[int] = None):
        self.region_index = region_index
        if region_index is not None:
            message = f"Region {region_index}: {message}"
        super().__init__(message)


class DecodeError(PuzzleKitError):
    """Raised when image bytes could not be decoded into a raster."""
    pass


class UnsupportedLayoutError(PuzzleKitError):
    """Raised for a layout value outside the closed set of layouts."""

    def __init__(self, layout: Any):
        self.layout = layout
        super().__init__(f"Unsupported layout: {layout!r}")
