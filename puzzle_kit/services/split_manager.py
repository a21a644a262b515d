"""
Service for cutting one image into regions.

Partitioning works on the effective (auto-cropped) area. Regions are copied
at their exact size, so no region is ever stretched.
"""
from typing import List, Optional
import numpy as np

from puzzle_kit.config import (
    OPTIMIZED_CROP_RATIO_GRID,
    OPTIMIZED_CROP_RATIO_T_SHAPE,
    OPTIMIZED_CROP_RATIO_TWO_COLUMNS
)
from puzzle_kit.domain.errors import SurfaceUnavailableError
from puzzle_kit.domain.models import CropRect, LayoutKind, SplitConfig, SplitRegion
from puzzle_kit.image_utils import copy_region
from puzzle_kit.services.canvas_processor import surface_size
from puzzle_kit.services.image_codec import encode_image
from puzzle_kit.services.layout_manager import round_px

# Ratios closer than this are treated as equal
RATIO_TOLERANCE = 1e-9


def suggest_auto_crop_ratio(layout, cols: int = 2) -> Optional[float]:
    """Crop ratio that makes split parts line up in a timeline preview, if any."""
    layout = LayoutKind.parse(layout)
    if layout is LayoutKind.GRID_2x2:
        return OPTIMIZED_CROP_RATIO_GRID
    if layout is LayoutKind.T_SHAPE_3:
        return OPTIMIZED_CROP_RATIO_T_SHAPE
    if layout is LayoutKind.HORIZONTAL_Nx1 and cols == 2:
        return OPTIMIZED_CROP_RATIO_TWO_COLUMNS
    return None


def compute_auto_crop(width: int, height: int, target_ratio: Optional[float]) -> CropRect:
    """
    Compute the centered crop rectangle matching a width / height ratio.

    Args:
        width: Source width in pixels
        height: Source height in pixels
        target_ratio: Desired width / height, or None for no crop

    Returns:
        The crop rectangle; the full source when no crop is needed
    """
    full_area = CropRect(x=0, y=0, width=width, height=height)
    if not target_ratio or width <= 0 or height <= 0:
        return full_area

    source_ratio = width / height
    if abs(source_ratio - target_ratio) <= RATIO_TOLERANCE:
        return full_area

    if source_ratio > target_ratio:
        # Wider than the target: trim left and right
        crop_width = min(width, round_px(height * target_ratio))
        return CropRect(x=(width - crop_width) // 2, y=0, width=crop_width, height=height)

    # Taller than the target: trim top and bottom
    crop_height = min(height, round_px(width / target_ratio))
    return CropRect(x=0, y=(height - crop_height) // 2, width=width, height=crop_height)


def partition_regions(width: int, height: int, config: SplitConfig) -> List[SplitRegion]:
    """
    Partition the effective area into regions for the configured layout.

    Args:
        width: Effective width in pixels
        height: Effective height in pixels
        config: Split configuration

    Returns:
        Regions in output order, relative to the effective area
    """
    layout = LayoutKind.parse(config.layout)
    gap = config.gap

    if layout.is_horizontal:
        count = 2 if layout is LayoutKind.HORIZONTAL_2x1 else config.cols
        segment_width = (width - (count - 1) * gap) // count
        return [
            SplitRegion(index, index * (segment_width + gap), 0, segment_width, height)
            for index in range(count)
        ]

    if layout.is_vertical:
        count = 2 if layout is LayoutKind.VERTICAL_1x2 else config.rows
        segment_height = (height - (count - 1) * gap) // count
        return [
            SplitRegion(index, 0, index * (segment_height + gap), width, segment_height)
            for index in range(count)
        ]

    if layout is LayoutKind.GRID_2x2:
        segment_width = (width - gap) // 2
        segment_height = (height - gap) // 2
        origins = [
            (0, 0),
            (segment_width + gap, 0),
            (0, segment_height + gap),
            (segment_width + gap, segment_height + gap),
        ]
        return [
            SplitRegion(index, x, y, segment_width, segment_height)
            for index, (x, y) in enumerate(origins)
        ]

    # T_SHAPE_3
    half_width = (width - gap) // 2
    half_height = (height - gap) // 2
    right_x = half_width + gap
    return [
        SplitRegion(0, 0, 0, half_width, height),
        SplitRegion(1, right_x, 0, half_width, half_height),
        SplitRegion(2, right_x, half_height + gap, half_width, half_height),
    ]


def extract_region(source: np.ndarray, crop: CropRect, region: SplitRegion) -> np.ndarray:
    """
    Copy one region into a new surface of exactly the region's size.

    Raises:
        SurfaceUnavailableError: If the region is empty or leaves the source
    """
    if region.width <= 0 or region.height <= 0:
        raise SurfaceUnavailableError(
            f"Region {region.index} has no area ({region.width}x{region.height}); the gap is too large."
        )

    src_x = crop.x + region.x
    src_y = crop.y + region.y
    source_width, source_height = surface_size(source)
    if src_x < 0 or src_y < 0 or src_x + region.width > source_width or src_y + region.height > source_height:
        raise SurfaceUnavailableError(f"Region {region.index} lies outside the source image.")

    try:
        return copy_region(source, src_x, src_y, region.width, region.height)
    except MemoryError as e:
        raise SurfaceUnavailableError(f"Cannot allocate region {region.index}: {e}") from e


def cut_regions(source: np.ndarray, config: SplitConfig) -> List[np.ndarray]:
    """
    Cut a source image into unencoded region rasters, in region order.

    Raises:
        SurfaceUnavailableError: If the source is empty or a region cannot be allocated
    """
    if not isinstance(source, np.ndarray) or source.size == 0:
        raise SurfaceUnavailableError("Source image is empty.")

    source_width, source_height = surface_size(source)
    crop = compute_auto_crop(source_width, source_height, config.auto_crop_ratio)
    regions = partition_regions(crop.width, crop.height, config)
    return [extract_region(source, crop, region) for region in regions]


def split_image(source: np.ndarray, config: SplitConfig) -> List[bytes]:
    """
    Cut a source image into regions and encode each one.

    Args:
        source: Decoded source raster; it is only read
        config: Split configuration

    Returns:
        Encoded buffers in region order

    Raises:
        SurfaceUnavailableError: If a region surface cannot be allocated
        EncodeError: On the first region that fails to encode; nothing is returned
    """
    return [
        encode_image(region_image, config.format, region_index=index)
        for index, region_image in enumerate(cut_regions(source, config))
    ]
