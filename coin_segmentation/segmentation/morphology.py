"""
Morphological cleaning of binary masks.
"""

import cv2
import numpy as np


def build_kernel(kernel_size: int = 3) -> np.ndarray:
    """Square structuring element of the given size."""
    return cv2.getStructuringElement(
        cv2.MORPH_RECT,
        (kernel_size, kernel_size)
    )


def open_mask(
    mask: np.ndarray,
    kernel_size: int = 3,
    iterations: int = 2,
) -> np.ndarray:
    """
    Remove small noise blobs and thin protrusions with a morphological opening.

    Erosion is applied `iterations` times, followed by the same number of
    dilations.

    Args:
        mask: Binary mask (uint8)
        kernel_size: Size of the square structuring element
        iterations: Erosion/dilation repetitions

    Returns:
        Cleaned mask with the same shape and dtype

    Example:
        >>> cleaned = open_mask(mask, kernel_size=3, iterations=2)
    """
    # Handle empty mask
    if mask.size == 0:
        return mask.copy()

    # Handle all-zero mask
    if np.count_nonzero(mask) == 0 or iterations == 0:
        return mask.copy()

    return cv2.morphologyEx(
        mask,
        cv2.MORPH_OPEN,
        build_kernel(kernel_size),
        iterations=iterations
    )


def dilate_mask(
    mask: np.ndarray,
    kernel_size: int = 3,
    iterations: int = 1,
) -> np.ndarray:
    """Grow a binary mask outward with the square structuring element."""
    if mask.size == 0 or iterations == 0:
        return mask.copy()

    return cv2.dilate(mask, build_kernel(kernel_size), iterations=iterations)
