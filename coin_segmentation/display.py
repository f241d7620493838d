"""
Presentation of stage artifacts: HighGUI windows and PNG export.

The segmentation core never imports this module.
"""

import logging
import re
from pathlib import Path
from typing import Iterable, List, Optional

import cv2
import numpy as np

from .config.segmentation_config import DisplaySettings
from .segmentation.models import ComparisonResult, StageArtifact

logger = logging.getLogger(__name__)

COMPARISON_TITLE = "Final Comparison: Original | Contour | Watershed"


def show_image(
    window_name: str,
    image: np.ndarray,
    width: int = 800,
    height: int = 500,
) -> None:
    """Show a resized copy of the image and block until a key is pressed."""
    resized = cv2.resize(image, (width, height))
    cv2.imshow(window_name, resized)
    cv2.waitKey(0)


def show_artifacts(
    artifacts: Iterable[StageArtifact],
    settings: Optional[DisplaySettings] = None,
) -> None:
    """Show each artifact in its own window, in order."""
    if settings is None:
        settings = DisplaySettings()

    for artifact in artifacts:
        show_image(
            artifact.title,
            artifact.image,
            settings.window_width,
            settings.window_height,
        )


def show_comparison(
    result: ComparisonResult,
    settings: Optional[DisplaySettings] = None,
) -> None:
    """Show every stage, then the side-by-side comparison, then close all windows."""
    if settings is None:
        settings = DisplaySettings()

    show_artifacts(result.artifacts(), settings)
    show_image(
        COMPARISON_TITLE,
        result.comparison,
        settings.comparison_width,
        settings.comparison_height,
    )
    cv2.destroyAllWindows()


def artifact_filename(artifact: StageArtifact) -> str:
    """File name such as '06_watershed_grayscale.png'."""
    slug = re.sub(r"[^a-z0-9]+", "_", artifact.name.lower()).strip("_")
    return f"{artifact.index:02d}_{slug}.png"


def save_artifacts(
    artifacts: Iterable[StageArtifact],
    output_dir: str,
) -> List[str]:
    """
    Write each artifact as a PNG file.

    Args:
        artifacts: Stage artifacts to export
        output_dir: Directory to write into (created if missing)

    Returns:
        Paths of the written files
    """
    directory = Path(output_dir)
    directory.mkdir(parents=True, exist_ok=True)

    paths = []
    for artifact in artifacts:
        path = directory / artifact_filename(artifact)
        if cv2.imwrite(str(path), artifact.image):
            paths.append(str(path))
        else:
            logger.error(f"Failed to save {artifact.title} to: {path}")

    logger.info(f"Saved {len(paths)} artifacts to: {directory}")
    return paths


def save_comparison(result: ComparisonResult, output_dir: str) -> List[str]:
    """Write every stage artifact plus the comparison strip."""
    comparison = StageArtifact(
        len(result.artifacts()),
        "Final Comparison",
        result.comparison,
    )
    return save_artifacts(result.artifacts() + [comparison], output_dir)
