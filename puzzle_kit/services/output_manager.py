# Output management for stitched and split images
import io
import os
import re
import time
import zipfile
from typing import List, Optional, Sequence

from puzzle_kit.config import (
    DEFAULT_PAGE_TITLE,
    DOWNLOAD_FILENAME_FORBIDDEN_CHARS,
    SPLIT_ARCHIVE_FILENAME_PREFIX,
    SPLIT_PART_FILENAME_PREFIX
)
from puzzle_kit.domain.models import OutputFormat


def current_timestamp_ms() -> int:
    return int(time.time() * 1000)


def build_download_filename(page_title, output_format, timestamp_ms: Optional[int] = None) -> str:
    """File name for a stitched image: sanitized page title, timestamp and extension."""
    output_format = OutputFormat.parse(output_format)
    title = re.sub(DOWNLOAD_FILENAME_FORBIDDEN_CHARS, "_", page_title or DEFAULT_PAGE_TITLE)
    if timestamp_ms is None:
        timestamp_ms = current_timestamp_ms()
    return f"{title}_{timestamp_ms}.{output_format.extension}"


def split_part_filename(index: int, output_format) -> str:
    """File name for split part `index` (0-based); parts are numbered from 1."""
    return f"{SPLIT_PART_FILENAME_PREFIX}{index + 1}.{OutputFormat.parse(output_format).extension}"


def split_archive_filename(timestamp_ms: Optional[int] = None) -> str:
    if timestamp_ms is None:
        timestamp_ms = current_timestamp_ms()
    return f"{SPLIT_ARCHIVE_FILENAME_PREFIX}{timestamp_ms}.zip"


def bundle_split_archive(buffers: Sequence[bytes], output_format) -> bytes:
    """Pack split parts into an in-memory zip archive, in part order."""
    archive_stream = io.BytesIO()
    with zipfile.ZipFile(archive_stream, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for index, buffer in enumerate(buffers):
            archive.writestr(split_part_filename(index, output_format), buffer)
    return archive_stream.getvalue()


def write_buffer(buffer: bytes, output_path: str) -> str:
    """Write encoded bytes to disk, creating the folder when needed."""
    output_dir = os.path.dirname(output_path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
    with open(output_path, "wb") as output_file:
        output_file.write(buffer)
    print(f"      Successfully saved: {os.path.basename(output_path)} ({len(buffer)} bytes)")
    return output_path


def save_stitched_output(
    buffer: bytes,
    output_dir: str,
    page_title: str,
    output_format,
    timestamp_ms: Optional[int] = None
) -> str:
    """Save an encoded stitched image under its download file name."""
    filename = build_download_filename(page_title, output_format, timestamp_ms)
    output_path = os.path.join(output_dir, filename)
    print(f"    Attempting to save stitched image to: {output_path}")
    return write_buffer(buffer, output_path)


def save_split_outputs(
    buffers: Sequence[bytes],
    output_dir: str,
    output_format,
    as_archive: bool = False,
    timestamp_ms: Optional[int] = None
) -> List[str]:
    """
    Save split parts individually or bundled into one zip archive.

    Returns:
        Paths of the written files
    """
    if as_archive:
        archive_path = os.path.join(output_dir, split_archive_filename(timestamp_ms))
        print(f"    Bundling {len(buffers)} parts into: {archive_path}")
        return [write_buffer(bundle_split_archive(buffers, output_format), archive_path)]

    print(f"    Saving {len(buffers)} parts to: {output_dir}")
    return [
        write_buffer(buffer, os.path.join(output_dir, split_part_filename(index, output_format)))
        for index, buffer in enumerate(buffers)
    ]
