"""
Contour and Watershed Segmentation Pipelines

Sequences the segmentation stages and returns the annotated image together
with every intermediate stage as a numbered artifact.
"""

import logging
from typing import Optional, Sequence, Tuple

import cv2
import numpy as np

from .config.segmentation_config import (
    ContourPipelineConfig,
    SegmentationConfig,
    WatershedPipelineConfig,
)
from .segmentation.models import (
    ComparisonResult,
    SegmentationResult,
    StageArtifact,
)
from .segmentation.preprocessing import preprocess
from .segmentation.morphology import open_mask
from .segmentation.markers import build_markers
from .segmentation.region_growing import grow_regions
from .segmentation.contour_extraction import (
    extract_contours,
    extract_region_contours,
    draw_external_contours,
)

logger = logging.getLogger(__name__)


def normalize_for_display(array: np.ndarray) -> np.ndarray:
    """
    Min-max scale an array to 8-bit for viewing.

    Constant arrays (including empty distance maps) become all zeros.
    """
    if array.size == 0 or float(array.min()) == float(array.max()):
        return np.zeros(array.shape, dtype=np.uint8)
    scaled = cv2.normalize(array.astype(np.float32), None, 0, 255, cv2.NORM_MINMAX)
    return scaled.astype(np.uint8)


def run_simple_contour(
    image: np.ndarray,
    config: Optional[ContourPipelineConfig] = None,
    first_index: int = 1,
) -> SegmentationResult:
    """
    Threshold the image and outline the external contours of the mask.

    Touching objects share one mask blob and therefore one external contour.

    Args:
        image: BGR image (from cv2.imread)
        config: Contour pipeline settings
        first_index: Number given to the first stage artifact

    Returns:
        SegmentationResult with the annotated copy and stage artifacts
    """
    if config is None:
        config = ContourPipelineConfig()

    blurred, gray, mask = preprocess(
        image,
        threshold=config.preprocess.threshold,
        blur_kernel_size=config.preprocess.blur_kernel_size,
    )

    contour_set = extract_contours(mask)
    annotated = draw_external_contours(
        image,
        contour_set,
        config.draw.color,
        config.draw.thickness,
    )

    logger.info(
        f"Contour pipeline: {len(contour_set)} contours, "
        f"{len(contour_set.external_indices())} external"
    )

    names = ["Blur", "Grayscale", "Threshold", "Contour Detection Result"]
    images = [blurred, gray, mask, annotated]

    return SegmentationResult(
        annotated=annotated,
        contours=contour_set,
        artifacts=[
            StageArtifact(first_index + i, name, stage_image)
            for i, (name, stage_image) in enumerate(zip(names, images))
        ],
    )


def run_watershed(
    image: np.ndarray,
    config: Optional[WatershedPipelineConfig] = None,
    first_index: int = 5,
) -> SegmentationResult:
    """
    Separate touching objects with marker-based watershed segmentation.

    Stages: preprocess, opening, distance-transform markers, watershed
    flooding and per-region contour recovery.

    Args:
        image: BGR image (from cv2.imread)
        config: Watershed pipeline settings
        first_index: Number given to the first stage artifact

    Returns:
        SegmentationResult including the grown label map
    """
    if config is None:
        config = WatershedPipelineConfig()

    morphology = config.morphology

    # Stage 1: Blur, grayscale, threshold
    blurred, gray, mask = preprocess(
        image,
        threshold=config.preprocess.threshold,
        blur_kernel_size=config.preprocess.blur_kernel_size,
    )

    # Stage 2: Remove noise blobs
    opening = open_mask(mask, morphology.kernel_size, morphology.open_iterations)

    # Stage 3: Markers from the distance transform
    markers = build_markers(
        opening,
        foreground_fraction=config.markers.foreground_fraction,
        kernel_size=morphology.kernel_size,
        dilate_iterations=morphology.dilate_iterations,
        distance_mask_size=config.markers.distance_mask_size,
    )

    # Stage 4: Flood the unknown band from the markers
    label_map = grow_regions(image, markers.label_map)

    # Stage 5: One contour set per grown region
    contour_set = extract_region_contours(label_map)
    annotated = draw_external_contours(
        image,
        contour_set,
        config.draw.color,
        config.draw.thickness,
    )

    logger.info(
        f"Watershed pipeline: {markers.region_count} markers, "
        f"{len(contour_set.external_indices())} external contours"
    )

    names = [
        "Watershed - Blur",
        "Watershed - Grayscale",
        "Watershed - Threshold",
        "Watershed - Opening",
        "Watershed - Distance Transform",
        "Watershed - Sure Foreground",
        "Watershed - Unknown Region",
        "Watershed - Markers",
        "Watershed - Final Result",
    ]
    images = [
        blurred,
        gray,
        mask,
        opening,
        normalize_for_display(markers.distance_map),
        markers.sure_foreground,
        markers.unknown,
        normalize_for_display(label_map),
        annotated,
    ]

    return SegmentationResult(
        annotated=annotated,
        contours=contour_set,
        artifacts=[
            StageArtifact(first_index + i, name, stage_image)
            for i, (name, stage_image) in enumerate(zip(names, images))
        ],
        label_map=label_map,
    )


def compose_comparison(
    images: Sequence[np.ndarray],
    size: Optional[Tuple[int, int]] = None,
) -> np.ndarray:
    """
    Concatenate images horizontally, optionally resizing to (width, height).

    Grayscale inputs are converted to BGR so mixed inputs can be joined.
    """
    if not images:
        raise ValueError("Cannot compose an empty image list")

    height = images[0].shape[0]
    panels = []
    for image in images:
        if len(image.shape) == 2:
            image = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
        if image.shape[0] != height:
            scale = height / image.shape[0]
            image = cv2.resize(image, (max(1, int(round(image.shape[1] * scale))), height))
        panels.append(image)

    combined = cv2.hconcat(panels)
    if size is not None:
        combined = cv2.resize(combined, size)
    return combined


def run_all(
    image: np.ndarray,
    config: Optional[SegmentationConfig] = None,
) -> ComparisonResult:
    """
    Run both pipelines on the same image and build the comparison strip.

    Args:
        image: BGR image (from cv2.imread)
        config: Optional configuration overrides

    Returns:
        ComparisonResult with both results and original | contour | watershed
    """
    if config is None:
        config = SegmentationConfig()

    h, w = image.shape[:2]
    logger.info(f"Segmenting {w}x{h} image")

    contour_result = run_simple_contour(image, config.contour, first_index=1)
    watershed_result = run_watershed(
        image,
        config.watershed,
        first_index=1 + len(contour_result.artifacts),
    )

    comparison = compose_comparison(
        [image, contour_result.annotated, watershed_result.annotated]
    )

    return ComparisonResult(
        original=image,
        contour=contour_result,
        watershed=watershed_result,
        comparison=comparison,
    )
