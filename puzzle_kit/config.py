# Configuration for the stitch and split engines

# Layout recommendation thresholds (width / height)
RECOMMEND_TALL_FIRST_IMAGE_RATIO = 0.9
RECOMMEND_NARROW_PAIR_RATIO = 0.8
RECOMMEND_WIDE_PAIR_RATIO = 1.2

# Stitch defaults
STITCH_GLOBAL_GAP_PX = 0
STITCH_BACKGROUND_NAME = "transparent"
STITCH_OUTPUT_FORMAT = "png"
STITCH_OUTPUT_QUALITY = 0.9

# Named background colors (BGR), None means transparent
BACKGROUND_COLORS = {
    "transparent": None,
    "white": (255, 255, 255),
    "black": (0, 0, 0),
}

# Split defaults
SPLIT_DEFAULT_ROWS = 2
SPLIT_DEFAULT_COLS = 2
SPLIT_DEFAULT_GAP_PX = 0
SPLIT_OUTPUT_FORMAT = "png"

# Timeline-optimized crop ratios (width / height) for split layouts
OPTIMIZED_CROP_RATIO_GRID = 16 / 9
OPTIMIZED_CROP_RATIO_T_SHAPE = 1.75
OPTIMIZED_CROP_RATIO_TWO_COLUMNS = 1.75

# Encoder settings, fixed so repeated runs produce identical bytes
PNG_COMPRESSION_LEVEL = 3
ENCODE_QUALITY_SCALE = 100

# File naming conventions
DOWNLOAD_FILENAME_FORBIDDEN_CHARS = r'[\\/:*?"<>|]'
SPLIT_PART_FILENAME_PREFIX = "split_"
SPLIT_ARCHIVE_FILENAME_PREFIX = "split_"
DEFAULT_PAGE_TITLE = "stitched"
