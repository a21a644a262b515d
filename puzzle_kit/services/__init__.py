"""
Services for the puzzle_kit package.
"""
from puzzle_kit.services.layout_recommender import recommend_layout
from puzzle_kit.services.layout_manager import (
    calculate_scene,
    round_px
)
from puzzle_kit.services.canvas_processor import (
    allocate_surface,
    draw_scene
)
from puzzle_kit.services.stitch_engine import stitch_images
from puzzle_kit.services.split_manager import (
    compute_auto_crop,
    partition_regions,
    cut_regions,
    split_image,
    suggest_auto_crop_ratio
)
from puzzle_kit.services.image_codec import (
    encode_image,
    decode_image_bytes,
    load_image
)
from puzzle_kit.services.output_manager import (
    build_download_filename,
    split_part_filename,
    split_archive_filename,
    bundle_split_archive,
    save_stitched_output,
    save_split_outputs
)
from puzzle_kit.services.stitching_service import StitchingService
