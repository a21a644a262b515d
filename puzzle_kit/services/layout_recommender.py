"""
Service for recommending a stitch layout from image count and aspect ratios.
"""
from typing import Optional, Sequence

from puzzle_kit.domain.models import LayoutKind, RecommendationThresholds


def recommend_layout(
    images: Sequence,
    thresholds: Optional[RecommendationThresholds] = None
) -> LayoutKind:
    """
    Recommend a layout for the given images.

    Args:
        images: Ordered sequence of objects with width and height attributes
        thresholds: Aspect ratio thresholds, defaults from config

    Returns:
        The recommended LayoutKind
    """
    thresholds = thresholds or RecommendationThresholds.default()
    count = len(images)

    if count == 4:
        return LayoutKind.GRID_2x2

    if count == 3:
        # A tall first image anchors the left column
        if _aspect_ratio(images[0]) < thresholds.tall_first_image_ratio:
            return LayoutKind.T_SHAPE_3
        return LayoutKind.HORIZONTAL_Nx1

    if count == 2:
        average_ratio = (_aspect_ratio(images[0]) + _aspect_ratio(images[1])) / 2
        if average_ratio < thresholds.narrow_pair_ratio:
            return LayoutKind.HORIZONTAL_2x1
        if average_ratio > thresholds.wide_pair_ratio:
            return LayoutKind.VERTICAL_1x2
        return LayoutKind.HORIZONTAL_2x1

    return LayoutKind.HORIZONTAL_Nx1


def _aspect_ratio(image) -> float:
    return image.width / image.height
