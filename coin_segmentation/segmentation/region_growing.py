"""
Watershed region growing from a marker map.

cv2.watershed floods the color gradient of the image from every positive
marker. Pixels are processed lowest gradient first; pixels of equal
gradient are processed in the order they were queued, and the initial
seeds are queued in raster order (top-to-bottom, left-to-right). A pixel
whose already-labelled neighbours carry two different region ids becomes
a boundary (-1). The result is therefore deterministic for a given image
and marker map.
"""

import logging

import cv2
import numpy as np

from .models import BOUNDARY_LABEL, UNKNOWN_LABEL

logger = logging.getLogger(__name__)


def _as_bgr(image: np.ndarray) -> np.ndarray:
    """cv2.watershed requires an 8-bit 3-channel image."""
    if len(image.shape) == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    return image


def grow_regions(image: np.ndarray, label_map: np.ndarray) -> np.ndarray:
    """
    Resolve every unknown marker pixel to a region id or a boundary.

    cv2.watershed always overwrites the outermost pixel ring with -1, so
    the image and markers are padded by one pixel and cropped afterwards;
    a map with no unknown pixels comes back unchanged.

    Args:
        image: Original BGR (or grayscale) uint8 image, not modified
        label_map: int32 markers (0 unknown, 1 background, >= 2 regions),
            updated in place

    Returns:
        The same label_map array, with 0 replaced by region ids or -1

    Example:
        >>> markers = build_markers(cleaned).label_map
        >>> grow_regions(image, markers)
    """
    if label_map.shape != image.shape[:2]:
        raise ValueError(
            f"label_map shape {label_map.shape} does not match image shape {image.shape[:2]}"
        )

    padded_image = cv2.copyMakeBorder(
        _as_bgr(image), 1, 1, 1, 1, cv2.BORDER_REPLICATE
    )
    padded_markers = np.pad(
        label_map.astype(np.int32),
        1,
        mode="constant",
        constant_values=BOUNDARY_LABEL,
    )

    cv2.watershed(padded_image, padded_markers)

    label_map[...] = padded_markers[1:-1, 1:-1]

    # Unknown pixels with no path to a seed are never flooded
    unreached = label_map == UNKNOWN_LABEL
    if np.any(unreached):
        logger.debug(f"Marking {np.count_nonzero(unreached)} unreached pixels as boundary")
        label_map[unreached] = BOUNDARY_LABEL

    return label_map
