"""
Pipeline configuration.
"""

from .segmentation_config import (
    ContourPipelineConfig,
    DisplaySettings,
    DrawSettings,
    MarkerSettings,
    MorphologySettings,
    PreprocessSettings,
    SegmentationConfig,
    WatershedPipelineConfig,
)

__all__ = [
    "ContourPipelineConfig",
    "DisplaySettings",
    "DrawSettings",
    "MarkerSettings",
    "MorphologySettings",
    "PreprocessSettings",
    "SegmentationConfig",
    "WatershedPipelineConfig",
]
