import argparse
import os
import sys

from puzzle_kit.config import (
    SPLIT_DEFAULT_COLS,
    SPLIT_DEFAULT_GAP_PX,
    SPLIT_DEFAULT_ROWS,
    SPLIT_OUTPUT_FORMAT,
    STITCH_BACKGROUND_NAME,
    STITCH_GLOBAL_GAP_PX,
    STITCH_OUTPUT_FORMAT,
    STITCH_OUTPUT_QUALITY,
    BACKGROUND_COLORS,
    DEFAULT_PAGE_TITLE
)
from puzzle_kit.domain.errors import PuzzleKitError
from puzzle_kit.domain.models import ImageDescriptor, LayoutKind, OutputFormat, SplitConfig, StitchConfig
from puzzle_kit.services.image_codec import load_image
from puzzle_kit.services.output_manager import save_split_outputs, save_stitched_output
from puzzle_kit.services.split_manager import suggest_auto_crop_ratio
from puzzle_kit.services.stitching_service import StitchingService

LAYOUT_CHOICES = [kind.value for kind in LayoutKind]
FORMAT_CHOICES = [fmt.value for fmt in OutputFormat]


def build_parser():
    parser = argparse.ArgumentParser(
        prog="puzzle-kit",
        description="Stitch several images into one, or split one image into parts, without pixel seams."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    stitch_parser = subparsers.add_parser("stitch", help="Combine images into one composite")
    stitch_parser.add_argument("images", nargs="+", help="Input images, in composite order")
    stitch_parser.add_argument("-o", "--output-dir", default=".", help="Folder for the stitched image")
    stitch_parser.add_argument("--layout", default="auto", choices=["auto"] + LAYOUT_CHOICES,
                               help="Layout; auto picks one from the image shapes")
    stitch_parser.add_argument("--gap", type=int, default=STITCH_GLOBAL_GAP_PX, help="Gap between images in pixels")
    stitch_parser.add_argument("--local-gap", type=int, nargs="*", default=[],
                               help="Extra gap after each image, in input order")
    stitch_parser.add_argument("--hide", type=int, nargs="*", default=[],
                               help="1-based positions of images to leave out")
    stitch_parser.add_argument("--background", default=STITCH_BACKGROUND_NAME, choices=list(BACKGROUND_COLORS))
    stitch_parser.add_argument("--format", default=STITCH_OUTPUT_FORMAT, choices=FORMAT_CHOICES)
    stitch_parser.add_argument("--quality", type=float, default=STITCH_OUTPUT_QUALITY,
                               help="JPEG / WebP quality between 0 and 1")
    stitch_parser.add_argument("--title", default=DEFAULT_PAGE_TITLE, help="Title used in the output file name")

    split_parser = subparsers.add_parser("split", help="Cut one image into parts")
    split_parser.add_argument("image", help="Input image")
    split_parser.add_argument("-o", "--output-dir", default=".", help="Folder for the parts")
    split_parser.add_argument("--layout", default=LayoutKind.GRID_2x2.value, choices=LAYOUT_CHOICES)
    split_parser.add_argument("--rows", type=int, default=SPLIT_DEFAULT_ROWS)
    split_parser.add_argument("--cols", type=int, default=SPLIT_DEFAULT_COLS)
    split_parser.add_argument("--gap", type=int, default=SPLIT_DEFAULT_GAP_PX, help="Seam width to remove in pixels")
    split_parser.add_argument("--format", default=SPLIT_OUTPUT_FORMAT, choices=FORMAT_CHOICES)
    crop_group = split_parser.add_mutually_exclusive_group()
    crop_group.add_argument("--auto-crop-ratio", type=float, default=None,
                            help="Center-crop to this width / height ratio before cutting")
    crop_group.add_argument("--optimize", action="store_true",
                            help="Crop to the ratio that previews cleanly on a timeline")
    split_parser.add_argument("--zip", action="store_true", help="Bundle the parts into one zip archive")

    return parser


def load_descriptors(image_paths, local_gaps, hidden_positions):
    descriptors = []
    for index, image_path in enumerate(image_paths):
        raster = load_image(image_path)
        local_gap = local_gaps[index] if index < len(local_gaps) else 0
        descriptors.append(ImageDescriptor.from_raster(
            image_id=str(index),
            raster=raster,
            visible=(index + 1) not in hidden_positions,
            local_gap=local_gap,
            name=os.path.basename(image_path)
        ))
        print(f"      Loaded {os.path.basename(image_path)}: {descriptors[-1].width}x{descriptors[-1].height}")
    return descriptors


def run_stitch(args):
    config = StitchConfig(
        global_gap=args.gap,
        background=args.background,
        format=args.format,
        quality=args.quality
    )
    service = StitchingService(config)
    descriptors = load_descriptors(args.images, args.local_gap, set(args.hide))

    layout = service.recommend(descriptors) if args.layout == "auto" else LayoutKind.parse(args.layout)
    print(f"Stitching {len(descriptors)} images with layout {layout.value}")

    result = service.stitch(descriptors, layout)
    if result.width == 0 or result.height == 0:
        print("Nothing to stitch: no visible images.")
        return 1
    print(f"    Canvas size: {result.width}x{result.height}")

    save_stitched_output(service.encode(result.raster), args.output_dir, args.title, config.format)
    return 0


def run_split(args):
    auto_crop_ratio = args.auto_crop_ratio
    if args.optimize:
        auto_crop_ratio = suggest_auto_crop_ratio(args.layout, args.cols)

    config = SplitConfig(
        layout=args.layout,
        rows=args.rows,
        cols=args.cols,
        gap=args.gap,
        format=args.format,
        auto_crop_ratio=auto_crop_ratio
    )
    source = load_image(args.image)
    print(f"Splitting {os.path.basename(args.image)} with layout {config.layout.value}")

    buffers = StitchingService().split(source, config)
    save_split_outputs(buffers, args.output_dir, config.format, as_archive=args.zip)
    return 0


def main(argv=None):
    args = build_parser().parse_args(argv)
    try:
        if args.command == "stitch":
            return run_stitch(args)
        return run_split(args)
    except (PuzzleKitError, ValueError, OSError) as e:
        print(f"ERROR: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
