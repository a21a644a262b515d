"""
Tests for the layout recommendation rules.
"""
from puzzle_kit.domain.models import Dimension, ImageDescriptor, LayoutKind, RecommendationThresholds
from puzzle_kit.services.layout_recommender import recommend_layout


def test_four_images_use_grid():
    """Four images always get the 2x2 grid."""
    images = [Dimension(300, 900), Dimension(1600, 900), Dimension(500, 500), Dimension(10, 20)]
    assert recommend_layout(images) is LayoutKind.GRID_2x2


def test_three_images_with_tall_first_image_use_t_shape():
    images = [Dimension(500, 1000), Dimension(800, 600), Dimension(800, 600)]
    assert recommend_layout(images) is LayoutKind.T_SHAPE_3


def test_three_images_with_wide_first_image_go_horizontal():
    images = [Dimension(1000, 1000), Dimension(500, 1000), Dimension(500, 1000)]
    assert recommend_layout(images) is LayoutKind.HORIZONTAL_Nx1


def test_three_images_threshold_is_strict():
    """A first image at exactly the threshold ratio is not tall."""
    images = [Dimension(900, 1000), Dimension(800, 600), Dimension(800, 600)]
    assert recommend_layout(images) is LayoutKind.HORIZONTAL_Nx1


def test_two_narrow_images_go_side_by_side():
    """Two images of ratio 0.5 average below 0.8."""
    images = [Dimension(500, 1000), Dimension(300, 600)]
    assert recommend_layout(images) is LayoutKind.HORIZONTAL_2x1


def test_two_wide_images_stack_vertically():
    images = [Dimension(2000, 1000), Dimension(1600, 900)]
    assert recommend_layout(images) is LayoutKind.VERTICAL_1x2


def test_two_square_images_default_to_horizontal():
    images = [Dimension(1000, 1000), Dimension(1100, 1000)]
    assert recommend_layout(images) is LayoutKind.HORIZONTAL_2x1


def test_other_counts_fall_back_to_horizontal():
    assert recommend_layout([]) is LayoutKind.HORIZONTAL_Nx1
    assert recommend_layout([Dimension(100, 400)]) is LayoutKind.HORIZONTAL_Nx1
    assert recommend_layout([Dimension(100, 100)] * 5) is LayoutKind.HORIZONTAL_Nx1


def test_thresholds_can_be_overridden():
    images = [Dimension(1000, 1000), Dimension(1000, 1000)]
    thresholds = RecommendationThresholds(wide_pair_ratio=0.95)
    assert recommend_layout(images) is LayoutKind.HORIZONTAL_2x1
    assert recommend_layout(images, thresholds) is LayoutKind.VERTICAL_1x2


def test_recommendation_is_deterministic():
    images = [ImageDescriptor("a", 640, 480), ImageDescriptor("b", 480, 640), ImageDescriptor("c", 1, 3)]
    results = {recommend_layout(images) for _ in range(10)}
    assert results == {LayoutKind.HORIZONTAL_Nx1}
