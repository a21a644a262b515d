"""
Service for calculating the placement of images on a stitching canvas.

All coordinates are integers. The last segment along a filled axis is always
derived by subtraction from a fixed total so that segments plus gaps add up
exactly.
"""
import math
from typing import List, Sequence

from puzzle_kit.domain.errors import UnsupportedLayoutError
from puzzle_kit.domain.models import ImageDescriptor, LayoutKind, Placement, Scene


def round_px(value: float) -> int:
    """Round half up to a whole pixel."""
    return int(math.floor(value + 0.5))


def gap_after(image: ImageDescriptor, global_gap: float) -> int:
    """Gap that follows an image: the global gap plus the image's local gap."""
    return round_px(global_gap + (image.local_gap or 0))


def calculate_scene(
    images: Sequence[ImageDescriptor],
    layout,
    global_gap: float = 0
) -> Scene:
    """
    Calculate the canvas size and placements for the given visible images.

    Args:
        images: Visible images in composite order
        layout: LayoutKind or its string tag
        global_gap: Gap in pixels added between every pair of images

    Returns:
        A Scene with integer canvas size and placements

    Raises:
        UnsupportedLayoutError: If the layout is not one of the known kinds
    """
    layout = LayoutKind.parse(layout)
    if not images:
        return Scene.create_empty()

    if layout.is_horizontal:
        return layout_horizontal(images, global_gap)
    if layout.is_vertical:
        return layout_vertical(images, global_gap)
    if layout is LayoutKind.GRID_2x2:
        if len(images) < 4:
            return layout_horizontal(images, global_gap)
        return layout_grid_2x2(images, global_gap)
    if layout is LayoutKind.T_SHAPE_3:
        if len(images) < 3:
            return layout_horizontal(images, global_gap)
        return layout_t_shape_3(images, global_gap)

    raise UnsupportedLayoutError(layout)


def layout_horizontal(images: Sequence[ImageDescriptor], global_gap: float) -> Scene:
    """Place images left to right, all scaled to the first image's height."""
    target_height = round_px(images[0].height)
    current_x = 0
    placements: List[Placement] = []

    for index, image in enumerate(images):
        scale = target_height / image.height
        width = round_px(image.width * scale)
        placements.append(Placement(image.id, current_x, 0, width, target_height))

        gap = 0 if index == len(images) - 1 else gap_after(image, global_gap)
        current_x += width + gap

    return Scene(width=current_x, height=target_height, placements=placements)


def layout_vertical(images: Sequence[ImageDescriptor], global_gap: float) -> Scene:
    """Place images top to bottom, all scaled to the first image's width."""
    target_width = round_px(images[0].width)
    current_y = 0
    placements: List[Placement] = []

    for index, image in enumerate(images):
        scale = target_width / image.width
        height = round_px(image.height * scale)
        placements.append(Placement(image.id, 0, current_y, target_width, height))

        gap = 0 if index == len(images) - 1 else gap_after(image, global_gap)
        current_y += height + gap

    return Scene(width=target_width, height=current_y, placements=placements)


def layout_grid_2x2(images: Sequence[ImageDescriptor], global_gap: float) -> Scene:
    """
    Place the first four images in two rows aligned to the top row's width.

    The bottom row height is chosen so both of its images fill the top row
    width; the last image's width is the remainder, never rounded on its own.
    """
    top_left, top_right, bottom_left, bottom_right = images[:4]

    # Row 1: top-right image scaled to the top-left image's height
    row1_height = round_px(top_left.height)
    row1_gap = gap_after(top_left, global_gap)
    top_left_width = round_px(top_left.width)
    top_right_width = round_px(top_right.width * (row1_height / top_right.height))
    row_width = top_left_width + row1_gap + top_right_width

    # Row 2: height derived from the row width and both aspect ratios
    row2_gap = gap_after(bottom_left, global_gap)
    ratio_sum = bottom_left.aspect_ratio + bottom_right.aspect_ratio
    row2_height = round_px((row_width - row2_gap) / ratio_sum)
    bottom_left_width = round_px(bottom_left.aspect_ratio * row2_height)
    bottom_right_width = row_width - row2_gap - bottom_left_width

    vertical_gap = gap_after(top_right, global_gap)
    row2_y = row1_height + vertical_gap

    placements = [
        Placement(top_left.id, 0, 0, top_left_width, row1_height),
        Placement(top_right.id, top_left_width + row1_gap, 0, top_right_width, row1_height),
        Placement(bottom_left.id, 0, row2_y, bottom_left_width, row2_height),
        Placement(bottom_right.id, bottom_left_width + row2_gap, row2_y, bottom_right_width, row2_height),
    ]
    return Scene(width=row_width, height=row2_y + row2_height, placements=placements)


def layout_t_shape_3(images: Sequence[ImageDescriptor], global_gap: float) -> Scene:
    """
    Place a full-height image on the left and two stacked images on the right.

    The right column width is chosen so both stacked images fill the left
    image's height; the lower image's height is the remainder.
    """
    left, right_top, right_bottom = images[:3]

    target_height = round_px(left.height)
    vertical_gap = gap_after(right_top, global_gap)
    horizontal_gap = gap_after(left, global_gap)

    inverse_ratio_sum = right_top.height / right_top.width + right_bottom.height / right_bottom.width
    right_width = round_px((target_height - vertical_gap) / inverse_ratio_sum)
    right_top_height = round_px((right_top.height / right_top.width) * right_width)
    right_bottom_height = target_height - vertical_gap - right_top_height

    left_width = round_px(left.width)
    right_x = left_width + horizontal_gap

    placements = [
        Placement(left.id, 0, 0, left_width, target_height),
        Placement(right_top.id, right_x, 0, right_width, right_top_height),
        Placement(right_bottom.id, right_x, right_top_height + vertical_gap, right_width, right_bottom_height),
    ]
    return Scene(width=right_x + right_width, height=target_height, placements=placements)
