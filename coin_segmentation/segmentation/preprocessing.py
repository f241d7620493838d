"""
Denoising and binarization of the raw image.
"""

import cv2
import numpy as np
from typing import Tuple


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """Luminance-weighted BGR to gray conversion; gray input is copied."""
    if len(image.shape) == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    return image.copy()


def binarize(gray: np.ndarray, threshold: int) -> np.ndarray:
    """
    Global threshold where intensity >= threshold becomes foreground.

    cv2.THRESH_BINARY keeps values strictly above its threshold, so the
    8-bit cutoff is shifted down by one.

    Args:
        gray: Single-channel uint8 image
        threshold: Lowest intensity counted as foreground (0-255)

    Returns:
        Binary mask (uint8) with foreground 255 and background 0
    """
    _, mask = cv2.threshold(gray, threshold - 1, 255, cv2.THRESH_BINARY)
    return mask


def preprocess(
    image: np.ndarray,
    threshold: int,
    blur_kernel_size: int = 13,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Blur, convert to grayscale and binarize an image.

    A median blur is used because it removes speckle while keeping the
    object edges that contour extraction relies on.

    Args:
        image: BGR or grayscale uint8 image
        threshold: Global binarization threshold
        blur_kernel_size: Odd median blur aperture

    Returns:
        (blurred, grayscale, mask)

    Raises:
        ValueError: If the image is empty

    Example:
        >>> blurred, gray, mask = preprocess(image, threshold=75)
    """
    if image is None or image.size == 0:
        raise ValueError("Cannot preprocess an empty image")

    blurred = cv2.medianBlur(image, blur_kernel_size)
    gray = to_grayscale(blurred)
    mask = binarize(gray, threshold)

    return blurred, gray, mask
