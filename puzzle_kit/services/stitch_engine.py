"""
Service for compositing several images into one raster.
"""
from typing import Any, Sequence

from puzzle_kit.domain.errors import MissingRasterError
from puzzle_kit.domain.models import (
    BackgroundSettings,
    CompositeResult,
    ImageDescriptor,
    LayoutKind
)
from puzzle_kit.services.canvas_processor import draw_scene
from puzzle_kit.services.layout_manager import calculate_scene


def stitch_images(
    images: Sequence[ImageDescriptor],
    layout: Any,
    global_gap: float = 0,
    background: Any = None
) -> CompositeResult:
    """
    Stitch the visible images into one composite raster.

    Args:
        images: Image descriptors in composite order; hidden ones are skipped
        layout: LayoutKind or its string tag
        global_gap: Gap in pixels between neighbouring images
        background: BackgroundSettings, a color name or a BGR tuple; None is transparent

    Returns:
        A CompositeResult with a newly allocated BGRA raster

    Raises:
        MissingRasterError: If a visible image has no raster
        UnsupportedLayoutError: If the layout is not one of the known kinds
        SurfaceUnavailableError: If the destination surface cannot be allocated
            or an image is left with no area by the layout
    """
    layout = LayoutKind.parse(layout)
    background = BackgroundSettings.coerce(background)

    visible_images = [image for image in images if image.visible is not False]
    if not visible_images:
        return CompositeResult.create_empty()

    for image in visible_images:
        if image.raster is None or image.raster.size == 0:
            raise MissingRasterError(image.id)

    scene = calculate_scene(visible_images, layout, global_gap)
    rasters = [image.raster for image in visible_images]
    surface = draw_scene(scene, rasters, background)

    return CompositeResult(
        width=scene.width,
        height=scene.height,
        raster=surface,
        placements=list(scene.placements)
    )
