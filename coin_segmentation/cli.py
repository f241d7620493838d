"""
Command-line interface for the coin segmentation demo.

Usage:
    python -m coin_segmentation [image_path] [--output json|visual]
    python -m coin_segmentation coins.jpg --no-display --save-dir stages/
    python -m coin_segmentation --help
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import cv2
import yaml

DEFAULT_IMAGE_PATH = "coins.jpg"


def setup_argparse() -> argparse.ArgumentParser:
    """Set up argument parser."""
    parser = argparse.ArgumentParser(
        prog="coin-segmentation",
        description="Contour detection and watershed segmentation of a coin image",
    )
    parser.add_argument(
        "image_path",
        type=str,
        nargs="?",
        default=DEFAULT_IMAGE_PATH,
        help=f"Path to the input image (default: {DEFAULT_IMAGE_PATH})",
    )
    parser.add_argument(
        "--output",
        "-o",
        choices=["json", "visual"],
        default="visual",
        help="Output format (default: visual)",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="YAML configuration file overriding the default constants",
    )
    parser.add_argument(
        "--save-dir",
        type=str,
        help="Directory to write every stage image into",
    )
    parser.add_argument(
        "--no-display",
        action="store_true",
        help="Do not open any windows",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def cmd_segment(args) -> int:
    """Load the image, run both pipelines and present the results."""
    from coin_segmentation.config.segmentation_config import SegmentationConfig
    from coin_segmentation.pipeline import run_all
    from coin_segmentation.display import save_comparison, show_comparison

    # Load configuration
    try:
        if args.config:
            config = SegmentationConfig.from_yaml(args.config)
        else:
            config = SegmentationConfig.default()
    except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
        print(f"Error: Invalid configuration: {e}", file=sys.stderr)
        return 1

    # Validate input path
    image_path = Path(args.image_path)
    if not image_path.exists():
        print(f"Error: Image not found: {image_path}", file=sys.stderr)
        return 1

    # Load image
    image = cv2.imread(str(image_path))
    if image is None:
        print(f"Error: Could not load image: {image_path}", file=sys.stderr)
        return 1

    result = run_all(image, config)

    if args.save_dir:
        paths = save_comparison(result, args.save_dir)
        if args.output != "json":
            print(f"Saved {len(paths)} stage images to: {args.save_dir}")

    if args.output == "json":
        print(json.dumps(result.to_dict(), indent=2))
    elif not args.no_display:
        show_comparison(result, config.display)

    return 0


def main(args: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Args:
        args: Command line arguments (uses sys.argv if not provided)

    Returns:
        Exit code (0 for success, 1 if the image could not be loaded)
    """
    parser = setup_argparse()
    parsed = parser.parse_args(args)

    # Configure logging
    log_level = logging.DEBUG if parsed.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    return cmd_segment(parsed)


if __name__ == "__main__":
    sys.exit(main())
