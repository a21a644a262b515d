"""
Tests for compositing images with the stitch engine and the facade service.
"""
import cv2
import numpy as np
import pytest

from puzzle_kit.domain.errors import MissingRasterError, SurfaceUnavailableError, UnsupportedLayoutError
from puzzle_kit.domain.models import BackgroundSettings, ImageDescriptor, LayoutKind, StitchConfig
from puzzle_kit.services.canvas_processor import allocate_surface
from puzzle_kit.services.stitch_engine import stitch_images
from puzzle_kit.services.stitching_service import StitchingService


def solid(width, height, bgr):
    return np.full((height, width, 3), bgr, dtype=np.uint8)


def descriptor(image_id, raster, **kwargs):
    return ImageDescriptor.from_raster(image_id, raster, **kwargs)


def test_horizontal_pair_canvas_and_pixels():
    """800x600 + 400x600 gives a 1200x600 canvas with both images copied in place."""
    images = [
        descriptor("a", solid(800, 600, (0, 0, 255))),
        descriptor("b", solid(400, 600, (255, 0, 0))),
    ]
    result = stitch_images(images, LayoutKind.HORIZONTAL_2x1, 0)

    assert (result.width, result.height) == (1200, 600)
    assert result.raster.shape == (600, 1200, 4)
    assert tuple(result.raster[0, 0]) == (0, 0, 255, 255)
    assert tuple(result.raster[599, 799]) == (0, 0, 255, 255)
    assert tuple(result.raster[0, 800]) == (255, 0, 0, 255)
    assert tuple(result.raster[599, 1199]) == (255, 0, 0, 255)


def test_grid_gap_shows_background_color():
    """Four 500x500 images with a 10 px gap on white give 1010x1010 with white seams."""
    images = [descriptor(str(i), solid(500, 500, (10 * i, 20, 30))) for i in range(4)]
    result = stitch_images(images, "GRID_2x2", 10, "white")

    assert (result.width, result.height) == (1010, 1010)
    assert tuple(result.raster[0, 505]) == (255, 255, 255, 255)
    assert tuple(result.raster[505, 0]) == (255, 255, 255, 255)
    assert tuple(result.raster[1009, 1009]) == (30, 20, 30, 255)


def test_transparent_background_leaves_gaps_clear():
    images = [descriptor(str(i), solid(100, 100, (1, 2, 3))) for i in range(2)]
    result = stitch_images(images, LayoutKind.HORIZONTAL_Nx1, 6, BackgroundSettings.transparent())

    assert result.width == 206
    assert tuple(result.raster[50, 102]) == (0, 0, 0, 0)


def test_missing_raster_names_the_image():
    images = [
        descriptor("a", solid(100, 100, (0, 0, 0))),
        ImageDescriptor(id="b", width=100, height=100),
    ]
    with pytest.raises(MissingRasterError) as excinfo:
        stitch_images(images, LayoutKind.HORIZONTAL_2x1)
    assert excinfo.value.image_id == "b"
    assert "b" in str(excinfo.value)


def test_hidden_image_without_raster_is_ignored():
    images = [
        descriptor("a", solid(100, 100, (0, 0, 0))),
        ImageDescriptor(id="hidden", width=100, height=100, visible=False),
    ]
    result = stitch_images(images, LayoutKind.HORIZONTAL_Nx1)
    assert (result.width, result.height) == (100, 100)


@pytest.mark.parametrize("layout", list(LayoutKind))
def test_hidden_image_takes_no_space(layout):
    rasters = [solid(300, 200, (0, 0, 0)), solid(200, 300, (9, 9, 9)), solid(250, 250, (5, 5, 5)),
               solid(400, 300, (7, 7, 7)), solid(120, 360, (3, 3, 3))]
    with_hidden = [descriptor(str(i), raster) for i, raster in enumerate(rasters)]
    with_hidden[1].visible = False
    without_hidden = [d for d in with_hidden if d.visible]

    marked = stitch_images(with_hidden, layout, 8)
    removed = stitch_images(without_hidden, layout, 8)
    assert (marked.width, marked.height) == (removed.width, removed.height)
    assert np.array_equal(marked.raster, removed.raster)


def test_no_visible_images_gives_empty_result():
    images = [ImageDescriptor(id="a", width=10, height=10, visible=False)]
    result = stitch_images(images, LayoutKind.GRID_2x2)
    assert (result.width, result.height) == (0, 0)
    assert result.raster.size == 0
    assert result.placements == []


def test_upscaling_keeps_hard_pixel_edges():
    """A black|white 2x1 image doubled in size stays pure black and white."""
    two_pixels = np.array([[[0, 0, 0], [255, 255, 255]]], dtype=np.uint8)
    images = [
        descriptor("base", solid(4, 2, (128, 128, 128))),
        descriptor("edge", two_pixels),
    ]
    result = stitch_images(images, LayoutKind.HORIZONTAL_Nx1)

    scaled = result.raster[:, 4:8, :3]
    assert scaled.shape == (2, 4, 3)
    assert set(np.unique(scaled)) <= {0, 255}
    assert np.all(scaled[:, :2] == 0)
    assert np.all(scaled[:, 2:] == 255)


def test_semi_transparent_image_blends_over_background():
    half_black = np.zeros((10, 10, 4), dtype=np.uint8)
    half_black[:, :, 3] = 128
    result = stitch_images([descriptor("a", half_black)], LayoutKind.HORIZONTAL_Nx1, background="white")
    assert tuple(result.raster[5, 5]) == (127, 127, 127, 255)


def test_negative_local_gap_overlaps_with_later_image_on_top():
    images = [
        descriptor("a", solid(100, 100, (0, 0, 255)), local_gap=-20),
        descriptor("b", solid(100, 100, (0, 255, 0))),
    ]
    result = stitch_images(images, LayoutKind.HORIZONTAL_2x1)
    assert result.width == 180
    assert tuple(result.raster[50, 79]) == (0, 0, 255, 255)
    assert tuple(result.raster[50, 90]) == (0, 255, 0, 255)


def test_grayscale_sources_are_supported():
    gray = np.full((50, 50), 200, dtype=np.uint8)
    result = stitch_images([descriptor("g", gray)], LayoutKind.VERTICAL_1xN)
    assert tuple(result.raster[0, 0]) == (200, 200, 200, 255)


def test_sources_are_not_modified():
    rasters = [solid(64, 48, (1, 2, 3)), solid(32, 48, (4, 5, 6))]
    originals = [raster.copy() for raster in rasters]
    stitch_images([descriptor(str(i), r) for i, r in enumerate(rasters)], LayoutKind.HORIZONTAL_2x1, 4, "black")
    for raster, original in zip(rasters, originals):
        assert np.array_equal(raster, original)


def test_repeated_stitches_are_identical():
    rasters = [solid(333, 217, (10, 20, 30)), solid(123, 457, (40, 50, 60)),
               solid(640, 479, (70, 80, 90)), solid(999, 1001, (1, 1, 1))]
    images = [descriptor(str(i), r) for i, r in enumerate(rasters)]
    first = stitch_images(images, LayoutKind.GRID_2x2, 3, "white")
    second = stitch_images(images, LayoutKind.GRID_2x2, 3, "white")
    assert np.array_equal(first.raster, second.raster)


def test_declared_size_drives_layout_not_raster_size():
    """A raster decoded at half size is scaled to the declared natural size."""
    small = solid(50, 50, (9, 8, 7))
    images = [ImageDescriptor(id="a", width=100, height=100, raster=small)]
    result = stitch_images(images, LayoutKind.HORIZONTAL_Nx1)
    assert (result.width, result.height) == (100, 100)
    assert tuple(result.raster[99, 99]) == (9, 8, 7, 255)


def test_unknown_layout_is_rejected():
    with pytest.raises(UnsupportedLayoutError):
        stitch_images([descriptor("a", solid(10, 10, (0, 0, 0)))], "MOSAIC")


def test_negative_surface_size_is_unavailable():
    with pytest.raises(SurfaceUnavailableError):
        allocate_surface(-1, 10)


def test_service_uses_recommendation_when_no_layout_given():
    images = [descriptor(str(i), solid(500, 500, (0, 0, 0))) for i in range(4)]
    service = StitchingService(StitchConfig(global_gap=10))
    result = service.stitch(images)
    assert (result.width, result.height) == (1010, 1010)


def test_service_encodes_with_configured_format():
    images = [descriptor("a", solid(80, 60, (0, 0, 255))), descriptor("b", solid(40, 60, (255, 0, 0)))]
    service = StitchingService(StitchConfig(background="black", format="jpg"))
    data = service.stitch_to_bytes(images, LayoutKind.HORIZONTAL_2x1)

    assert data[:2] == b"\xff\xd8"
    decoded = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_UNCHANGED)
    assert decoded.shape == (60, 120, 3)


def test_image_squeezed_out_of_t_shape_is_reported():
    """A right column too narrow for its stacked images fails instead of dropping one."""
    images = [
        descriptor("L", solid(50, 100, (0, 0, 0))),
        descriptor("R1", solid(10, 600, (0, 0, 255))),
        descriptor("R2", solid(150, 100, (255, 0, 0))),
    ]
    with pytest.raises(SurfaceUnavailableError) as excinfo:
        stitch_images(images, LayoutKind.T_SHAPE_3)
    assert "R2" in str(excinfo.value)


@pytest.mark.parametrize("width, height", [(10, 0), (0, 10), (-5, 10)])
def test_descriptor_rejects_non_positive_size(width, height):
    with pytest.raises(ValueError):
        ImageDescriptor(id="a", width=width, height=height, raster=solid(10, 10, (0, 0, 0)))


def test_images_sharing_an_id_keep_their_own_pixels():
    images = [
        descriptor("x", solid(10, 10, (0, 0, 0))),
        descriptor("x", solid(10, 10, (255, 255, 255))),
    ]
    result = stitch_images(images, LayoutKind.HORIZONTAL_2x1)
    assert tuple(result.raster[0, 0]) == (0, 0, 0, 255)
    assert tuple(result.raster[0, 10]) == (255, 255, 255, 255)
