"""
Main entry point for the segmentation package.

Allows running: python -m coin_segmentation [image_path]
"""

import sys
from coin_segmentation.cli import main

if __name__ == "__main__":
    sys.exit(main())
