"""
Segmentation stages: preprocessing, morphology, markers, region growing
and contour extraction.
"""

from .models import (
    ContourSet,
    StageArtifact,
    SegmentationResult,
    ComparisonResult,
)

__all__ = [
    "ContourSet",
    "StageArtifact",
    "SegmentationResult",
    "ComparisonResult",
]
