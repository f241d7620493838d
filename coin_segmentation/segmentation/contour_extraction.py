"""
Contour extraction from binary masks and label maps, and contour drawing.
"""

import cv2
import numpy as np
from typing import Optional, Tuple

from .models import ContourSet, FIRST_REGION_LABEL


def _parents_from_hierarchy(hierarchy: Optional[np.ndarray], count: int) -> list:
    """Convert OpenCV's [next, prev, child, parent] rows to parent indices."""
    if hierarchy is None:
        return [None] * count
    return [None if row[3] < 0 else int(row[3]) for row in hierarchy[0]]


def extract_contours(mask: np.ndarray) -> ContourSet:
    """
    Extract boundary contours and their two-level hierarchy from a binary mask.

    Outer boundaries of blobs are roots; holes inside a blob are children of
    the blob's outer contour.

    Args:
        mask: Binary mask (uint8) with foreground > 0

    Returns:
        ContourSet, empty for an empty or all-zero mask

    Example:
        >>> contour_set = extract_contours(mask)
        >>> outer = contour_set.external()
    """
    # Handle empty mask
    if mask.size == 0 or np.count_nonzero(mask) == 0:
        return ContourSet.empty()

    contours, hierarchy = cv2.findContours(
        mask,
        cv2.RETR_CCOMP,  # Outer boundaries and holes
        cv2.CHAIN_APPROX_SIMPLE  # Compress horizontal/vertical segments
    )

    return ContourSet(
        contours=list(contours),
        parents=_parents_from_hierarchy(hierarchy, len(contours)),
    )


def region_mask(label_map: np.ndarray, label: Optional[int] = None) -> np.ndarray:
    """
    Binary mask of region pixels in a label map.

    Args:
        label_map: int32 label map
        label: A single region id, or None for every id >= 2

    Returns:
        uint8 mask with region pixels set to 255
    """
    if label is None:
        selected = label_map >= FIRST_REGION_LABEL
    else:
        selected = label_map == label
    return selected.astype(np.uint8) * 255


def extract_region_contours(
    label_map: np.ndarray,
    min_label: int = FIRST_REGION_LABEL,
) -> ContourSet:
    """
    Extract contours of every region in a label map.

    Each region id is traced on its own mask so regions separated only by a
    boundary line never merge. Background, boundary and unknown pixels are
    excluded.

    Args:
        label_map: int32 label map after region growing
        min_label: Smallest label treated as a region

    Returns:
        ContourSet with region contours in ascending label order
    """
    result = ContourSet.empty()
    if label_map.size == 0:
        return result

    for label in np.unique(label_map):
        if label < min_label:
            continue
        result.extend(extract_contours(region_mask(label_map, int(label))))

    return result


def draw_external_contours(
    image: np.ndarray,
    contour_set: ContourSet,
    color: Tuple[int, int, int],
    thickness: int,
) -> np.ndarray:
    """
    Draw only the outermost contours onto a copy of the image.

    Args:
        image: BGR image, not modified
        contour_set: Contours with hierarchy
        color: BGR line color
        thickness: Line thickness in pixels

    Returns:
        Annotated copy of the image
    """
    result = image.copy()
    external = contour_set.external()
    if external:
        cv2.drawContours(result, external, -1, color, thickness)
    return result
