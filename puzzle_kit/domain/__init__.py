"""
Domain models and errors for the puzzle_kit package.
"""
from puzzle_kit.domain.models import (
    LayoutKind,
    OutputFormat,
    Dimension,
    ImageDescriptor,
    BackgroundSettings,
    RecommendationThresholds,
    StitchConfig,
    SplitConfig,
    Placement,
    Scene,
    CropRect,
    SplitRegion,
    CompositeResult
)
from puzzle_kit.domain.errors import (
    PuzzleKitError,
    MissingRasterError,
    SurfaceUnavailableError,
    EncodeError,
    DecodeError,
    UnsupportedLayoutError
)
