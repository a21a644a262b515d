"""
Service for encoding rasters to compressed buffers and decoding them back.
"""
import os
from typing import Any, Optional
import cv2
import imageio
import numpy as np

from puzzle_kit.config import ENCODE_QUALITY_SCALE, PNG_COMPRESSION_LEVEL, STITCH_OUTPUT_QUALITY
from puzzle_kit.domain.errors import DecodeError, EncodeError
from puzzle_kit.domain.models import OutputFormat
from puzzle_kit.image_utils import flatten_bgra_onto_black


def encode_image(
    image: np.ndarray,
    output_format: Any,
    quality: float = STITCH_OUTPUT_QUALITY,
    region_index: Optional[int] = None
) -> bytes:
    """
    Encode a raster to PNG, JPEG or WebP bytes with fixed encoder parameters.

    Args:
        image: Raster in OpenCV channel order (gray, BGR or BGRA)
        output_format: OutputFormat or its name
        quality: Quality between 0 and 1 for JPEG and WebP
        region_index: Index reported in the error when encoding a split region

    Returns:
        The encoded bytes

    Raises:
        EncodeError: If the image is empty or the encoder fails
    """
    output_format = OutputFormat.parse(output_format)
    if not isinstance(image, np.ndarray) or image.size == 0:
        raise EncodeError("Cannot encode an empty image", region_index)

    quality_value = int(round(quality * ENCODE_QUALITY_SCALE))
    if output_format is OutputFormat.PNG:
        params = [int(cv2.IMWRITE_PNG_COMPRESSION), PNG_COMPRESSION_LEVEL]
    elif output_format is OutputFormat.JPG:
        # JPEG has no alpha channel
        image = flatten_bgra_onto_black(image)
        params = [int(cv2.IMWRITE_JPEG_QUALITY), quality_value]
    else:
        params = [int(cv2.IMWRITE_WEBP_QUALITY), quality_value]

    try:
        success, buffer = cv2.imencode(f".{output_format.extension}", image, params)
    except cv2.error as e:
        raise EncodeError(f"Failed to encode {output_format.extension}: {e}", region_index) from e
    if not success:
        raise EncodeError(f"cv2.imencode for {output_format.extension} returned False.", region_index)
    return buffer.tobytes()


def decode_image_bytes(data: bytes) -> np.ndarray:
    """
    Decode compressed image bytes into a raster in OpenCV channel order.

    OpenCV is tried first; imageio handles formats OpenCV cannot read, such as GIF.

    Raises:
        DecodeError: If neither decoder can read the data
    """
    if not data:
        raise DecodeError("No image data to decode.")

    image = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_UNCHANGED)
    if image is not None and image.size > 0:
        return image

    try:
        image_rgb = np.asarray(imageio.v2.imread(data))
    except Exception as e_imageio:
        raise DecodeError(f"Failed to decode image data: {e_imageio}") from e_imageio

    if image_rgb.ndim == 3 and image_rgb.shape[2] == 4:
        return cv2.cvtColor(image_rgb, cv2.COLOR_RGBA2BGRA)
    if image_rgb.ndim == 3 and image_rgb.shape[2] == 3:
        return cv2.cvtColor(image_rgb, cv2.COLOR_RGB2BGR)
    return image_rgb


def load_image(image_path: str) -> np.ndarray:
    """Read and decode an image file."""
    if not os.path.isfile(image_path):
        raise DecodeError(f"Image file not found: {image_path}")
    with open(image_path, "rb") as image_file:
        data = image_file.read()
    try:
        return decode_image_bytes(data)
    except DecodeError as e:
        raise DecodeError(f"{os.path.basename(image_path)}: {e}") from e
