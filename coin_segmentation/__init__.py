"""
Coin Segmentation Package

Binary contour extraction and marker-based watershed segmentation of a
still image, with every intermediate stage exposed for inspection.
"""

from .config.segmentation_config import SegmentationConfig
from .segmentation.models import ContourSet, SegmentationResult, ComparisonResult, StageArtifact
from .pipeline import (
    run_simple_contour,
    run_watershed,
    run_all,
    compose_comparison,
)

__all__ = [
    "SegmentationConfig",
    "ContourSet",
    "SegmentationResult",
    "ComparisonResult",
    "StageArtifact",
    "run_simple_contour",
    "run_watershed",
    "run_all",
    "compose_comparison",
]
