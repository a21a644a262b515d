"""
Service for allocating drawing surfaces and rendering scenes onto them.
"""
from typing import Optional, Sequence, Tuple
import numpy as np

from puzzle_kit.domain.errors import MissingRasterError, SurfaceUnavailableError
from puzzle_kit.domain.models import BackgroundSettings, Scene
from puzzle_kit.image_utils import (
    convert_to_bgra,
    paste_image_onto_canvas,
    resize_exact_nearest
)


def allocate_surface(width: int, height: int, channels: int = 4) -> np.ndarray:
    """
    Allocate a new, fully transparent drawing surface.

    Args:
        width: Surface width in pixels
        height: Surface height in pixels
        channels: Number of channels (4 for BGRA)

    Returns:
        A zero-filled uint8 array of shape (height, width, channels)

    Raises:
        SurfaceUnavailableError: If the size is negative or memory is exhausted
    """
    if width < 0 or height < 0:
        raise SurfaceUnavailableError(f"Cannot allocate a {width}x{height} surface.")
    try:
        return np.zeros((height, width, channels), dtype=np.uint8)
    except (MemoryError, ValueError) as e:
        raise SurfaceUnavailableError(f"Cannot allocate a {width}x{height} surface: {e}") from e


def fill_background(surface: np.ndarray, background: BackgroundSettings) -> None:
    """Fill the whole surface with an opaque color unless the background is transparent."""
    if background.is_transparent:
        return
    blue, green, red = background.color
    surface[:, :] = (blue, green, red, 255)


def draw_scene(
    scene: Scene,
    rasters: Sequence[np.ndarray],
    background: Optional[BackgroundSettings] = None
) -> np.ndarray:
    """
    Render a scene onto a newly allocated BGRA surface.

    Every placement samples its full source raster, scaled with nearest-neighbour
    sampling to exactly the placement size, so repeated runs are deterministic.

    Args:
        scene: Canvas size and placements
        rasters: Source rasters in placement order; they are only read
        background: Background settings, transparent when None

    Returns:
        The rendered BGRA surface

    Raises:
        SurfaceUnavailableError: If a placement has no area
        MissingRasterError: If a placement has no raster to draw
    """
    background = background or BackgroundSettings.transparent()
    surface = allocate_surface(scene.width, scene.height)

    # Background goes down before any image so drawn regions sit on top of it
    fill_background(surface, background)

    if len(rasters) < len(scene.placements):
        raise MissingRasterError(scene.placements[len(rasters)].image_id)

    for placement, raster in zip(scene.placements, rasters):
        if placement.width <= 0 or placement.height <= 0:
            raise SurfaceUnavailableError(
                f"Image {placement.image_id} has no area in the layout ({placement.width}x{placement.height})."
            )
        source = convert_to_bgra(raster)
        if source is None:
            raise MissingRasterError(placement.image_id)
        scaled = resize_exact_nearest(source, placement.width, placement.height)
        paste_image_onto_canvas(surface, scaled, placement.x, placement.y)

    return surface


def surface_size(surface: np.ndarray) -> Tuple[int, int]:
    """Return (width, height) of a surface."""
    height, width = surface.shape[:2]
    return int(width), int(height)
