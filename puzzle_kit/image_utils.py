import cv2
import numpy as np


def convert_to_bgra(image_array):
    """Return the raster as 8-bit BGRA; already-BGRA input is returned as is."""
    if image_array is None or image_array.size == 0:
        return None

    if image_array.dtype == np.uint16: # 16-bit PNG / TIFF
        image_array = (image_array >> 8).astype(np.uint8)
    elif image_array.dtype != np.uint8:
        raise ValueError(f"Image has unsupported dtype {image_array.dtype}. Expected uint8.")

    if len(image_array.shape) == 2: # Grayscale
        return cv2.cvtColor(image_array, cv2.COLOR_GRAY2BGRA)
    elif len(image_array.shape) == 3 and image_array.shape[2] == 1:
        return cv2.cvtColor(image_array[:, :, 0], cv2.COLOR_GRAY2BGRA)
    elif len(image_array.shape) == 3 and image_array.shape[2] == 3: # BGR
        return cv2.cvtColor(image_array, cv2.COLOR_BGR2BGRA)
    elif len(image_array.shape) == 3 and image_array.shape[2] == 4: # BGRA
        return image_array

    raise ValueError(f"Image has unsupported shape {image_array.shape}. Cannot convert to BGRA.")


def resize_exact_nearest(image_to_resize, target_width_px, target_height_px):
    """Scale to an exact size with nearest-neighbour sampling, so no pixels are smoothed."""
    height, width = image_to_resize.shape[:2]
    if width == target_width_px and height == target_height_px:
        return image_to_resize
    return cv2.resize(image_to_resize, (target_width_px, target_height_px), interpolation=cv2.INTER_NEAREST)


def flatten_bgra_onto_black(image_array):
    """Drop the alpha channel the way a browser canvas does when exporting JPEG."""
    if len(image_array.shape) != 3 or image_array.shape[2] != 4:
        return image_array
    alpha = image_array[:, :, 3:4].astype(np.float32) / 255.0
    bgr = image_array[:, :, :3].astype(np.float32) * alpha
    return np.rint(bgr).astype(np.uint8)


def paste_image_onto_canvas(canvas_array, image_to_paste, top_left_x, top_left_y):
    """
    Composite a BGRA image onto a BGRA canvas (source-over) at integer coordinates.

    Parts that fall outside the canvas are clipped; the pasted image is never resized.
    """
    if image_to_paste is None or image_to_paste.size == 0 or canvas_array is None: return

    img_h, img_w = image_to_paste.shape[:2]
    canvas_h, canvas_w = canvas_array.shape[:2]

    y1_canvas, y2_canvas = top_left_y, top_left_y + img_h
    x1_canvas, x2_canvas = top_left_x, top_left_x + img_w

    if x1_canvas >= canvas_w or y1_canvas >= canvas_h or x2_canvas <= 0 or y2_canvas <= 0: return

    roi_y1_c = max(0, y1_canvas); roi_y2_c = min(canvas_h, y2_canvas)
    roi_x1_c = max(0, x1_canvas); roi_x2_c = min(canvas_w, x2_canvas)
    src_y1 = max(0, -y1_canvas); src_y2 = img_h - max(0, y2_canvas - canvas_h)
    src_x1 = max(0, -x1_canvas); src_x2 = img_w - max(0, x2_canvas - canvas_w)

    if roi_y1_c >= roi_y2_c or roi_x1_c >= roi_x2_c or src_y1 >= src_y2 or src_x1 >= src_x2: return

    img_cropped = image_to_paste[src_y1:src_y2, src_x1:src_x2]
    target_roi = canvas_array[roi_y1_c:roi_y2_c, roi_x1_c:roi_x2_c]

    src_alpha = img_cropped[:, :, 3:4]
    if np.all(src_alpha == 255):
        target_roi[:] = img_cropped # Opaque: verbatim copy
        return

    a_src = src_alpha.astype(np.float32) / 255.0
    a_dst = target_roi[:, :, 3:4].astype(np.float32) / 255.0
    a_out = a_src + a_dst * (1.0 - a_src)

    color_out = img_cropped[:, :, :3] * a_src + target_roi[:, :, :3] * a_dst * (1.0 - a_src)
    color_out = np.divide(color_out, a_out, out=np.zeros_like(color_out), where=a_out > 0)

    target_roi[:, :, :3] = np.clip(np.rint(color_out), 0, 255).astype(np.uint8)
    target_roi[:, :, 3:4] = np.clip(np.rint(a_out * 255.0), 0, 255).astype(np.uint8)


def copy_region(source_array, src_x, src_y, width, height):
    """Copy a rectangle of the source into a newly allocated array of exactly that size."""
    region = np.zeros((height, width) + source_array.shape[2:], dtype=source_array.dtype)
    region[:, :] = source_array[src_y:src_y + height, src_x:src_x + width]
    return region
