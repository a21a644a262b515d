"""
puzzle_kit: pixel-exact image stitching and splitting.

This package lays several images out into one composite under a fixed set of
layouts, or cuts one image into regions, without fractional-pixel seams.
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
from puzzle_kit.services.layout_recommender import recommend_layout
from puzzle_kit.services.stitch_engine import stitch_images
from puzzle_kit.services.split_manager import split_image
from puzzle_kit.services.image_codec import encode_image
from puzzle_kit.services.stitching_service import StitchingService
