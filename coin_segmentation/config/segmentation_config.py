"""
Configuration for the contour and watershed segmentation pipelines.

Every default reproduces the constants the coin image was tuned with.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Tuple


VALID_DISTANCE_MASK_SIZES = (0, 3, 5)


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    """Return a nested settings mapping; a missing or empty key gives {}."""
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"'{key}' must be a mapping, got {type(value).__name__}")
    return value


@dataclass
class PreprocessSettings:
    """Median blur and global threshold settings."""
    threshold: int = 75
    blur_kernel_size: int = 13

    def __post_init__(self):
        """Validate preprocessing settings."""
        if self.blur_kernel_size < 3 or self.blur_kernel_size % 2 == 0:
            raise ValueError(
                f"blur_kernel_size must be an odd number >= 3, got {self.blur_kernel_size}"
            )
        if not (0 <= self.threshold <= 255):
            raise ValueError(f"threshold must be between 0 and 255, got {self.threshold}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "threshold": self.threshold,
            "blur_kernel_size": self.blur_kernel_size,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], threshold: int = 75) -> "PreprocessSettings":
        """Create from dictionary, falling back to the given threshold."""
        return cls(
            threshold=data.get("threshold", threshold),
            blur_kernel_size=data.get("blur_kernel_size", 13),
        )


@dataclass
class MorphologySettings:
    """Settings for the opening and sure-background dilation."""
    kernel_size: int = 3
    open_iterations: int = 2
    dilate_iterations: int = 1

    def __post_init__(self):
        """Validate morphology settings."""
        if self.kernel_size < 1:
            raise ValueError(f"kernel_size must be >= 1, got {self.kernel_size}")
        if self.open_iterations < 0:
            raise ValueError(f"open_iterations must be >= 0, got {self.open_iterations}")
        if self.dilate_iterations < 0:
            raise ValueError(f"dilate_iterations must be >= 0, got {self.dilate_iterations}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "kernel_size": self.kernel_size,
            "open_iterations": self.open_iterations,
            "dilate_iterations": self.dilate_iterations,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MorphologySettings":
        """Create from dictionary."""
        return cls(
            kernel_size=data.get("kernel_size", 3),
            open_iterations=data.get("open_iterations", 2),
            dilate_iterations=data.get("dilate_iterations", 1),
        )


@dataclass
class MarkerSettings:
    """
    Settings for distance-transform marker construction.

    Attributes:
        foreground_fraction: Fraction of the maximum distance above which a
            pixel counts as sure foreground. Lower values merge touching
            objects, higher values lose faint ones.
        distance_mask_size: cv2.distanceTransform mask size (3, 5, or 0 for
            the precise algorithm)
    """
    foreground_fraction: float = 0.4
    distance_mask_size: int = 5

    def __post_init__(self):
        """Validate marker settings."""
        if not (0.0 < self.foreground_fraction < 1.0):
            raise ValueError(
                f"foreground_fraction must be between 0.0 and 1.0, got {self.foreground_fraction}"
            )
        if self.distance_mask_size not in VALID_DISTANCE_MASK_SIZES:
            raise ValueError(
                f"distance_mask_size must be one of {VALID_DISTANCE_MASK_SIZES}, "
                f"got {self.distance_mask_size}"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "foreground_fraction": self.foreground_fraction,
            "distance_mask_size": self.distance_mask_size,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MarkerSettings":
        """Create from dictionary."""
        return cls(
            foreground_fraction=data.get("foreground_fraction", 0.4),
            distance_mask_size=data.get("distance_mask_size", 5),
        )


@dataclass
class DrawSettings:
    """Contour color (BGR) and line thickness."""
    color: Tuple[int, int, int] = (0, 255, 0)
    thickness: int = 10

    def __post_init__(self):
        """Validate draw settings."""
        self.color = tuple(int(c) for c in self.color)
        if len(self.color) != 3 or any(not (0 <= c <= 255) for c in self.color):
            raise ValueError(f"color must be three values in 0-255, got {self.color}")
        if self.thickness < 1:
            raise ValueError(f"thickness must be >= 1, got {self.thickness}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "color": list(self.color),
            "thickness": self.thickness,
        }

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        color: Tuple[int, int, int] = (0, 255, 0),
        thickness: int = 10,
    ) -> "DrawSettings":
        """Create from dictionary, falling back to the given defaults."""
        return cls(
            color=tuple(data.get("color", color)),
            thickness=data.get("thickness", thickness),
        )


@dataclass
class ContourPipelineConfig:
    """Configuration for the simple threshold-and-contour pipeline."""
    preprocess: PreprocessSettings = field(
        default_factory=lambda: PreprocessSettings(threshold=75)
    )
    draw: DrawSettings = field(
        default_factory=lambda: DrawSettings(color=(0, 255, 0), thickness=10)
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "preprocess": self.preprocess.to_dict(),
            "draw": self.draw.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContourPipelineConfig":
        """Create from dictionary."""
        return cls(
            preprocess=PreprocessSettings.from_dict(_section(data, "preprocess"), threshold=75),
            draw=DrawSettings.from_dict(_section(data, "draw"), color=(0, 255, 0), thickness=10),
        )


@dataclass
class WatershedPipelineConfig:
    """Configuration for the marker-based watershed pipeline."""
    preprocess: PreprocessSettings = field(
        default_factory=lambda: PreprocessSettings(threshold=65)
    )
    morphology: MorphologySettings = field(default_factory=MorphologySettings)
    markers: MarkerSettings = field(default_factory=MarkerSettings)
    draw: DrawSettings = field(
        default_factory=lambda: DrawSettings(color=(255, 0, 0), thickness=2)
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "preprocess": self.preprocess.to_dict(),
            "morphology": self.morphology.to_dict(),
            "markers": self.markers.to_dict(),
            "draw": self.draw.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WatershedPipelineConfig":
        """Create from dictionary."""
        return cls(
            preprocess=PreprocessSettings.from_dict(_section(data, "preprocess"), threshold=65),
            morphology=MorphologySettings.from_dict(_section(data, "morphology")),
            markers=MarkerSettings.from_dict(_section(data, "markers")),
            draw=DrawSettings.from_dict(_section(data, "draw"), color=(255, 0, 0), thickness=2),
        )


@dataclass
class DisplaySettings:
    """Window sizes used by the presentation layer."""
    window_width: int = 800
    window_height: int = 500
    comparison_width: int = 1400
    comparison_height: int = 700

    def __post_init__(self):
        """Validate window sizes."""
        for name in ("window_width", "window_height", "comparison_width", "comparison_height"):
            value = getattr(self, name)
            if value < 1:
                raise ValueError(f"{name} must be >= 1, got {value}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "window_width": self.window_width,
            "window_height": self.window_height,
            "comparison_width": self.comparison_width,
            "comparison_height": self.comparison_height,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DisplaySettings":
        """Create from dictionary."""
        return cls(
            window_width=data.get("window_width", 800),
            window_height=data.get("window_height", 500),
            comparison_width=data.get("comparison_width", 1400),
            comparison_height=data.get("comparison_height", 700),
        )


@dataclass
class SegmentationConfig:
    """
    Top-level configuration for both pipelines and the display layer.

    Attributes:
        contour: Simple contour pipeline settings
        watershed: Watershed pipeline settings
        display: Window sizes for the presentation layer
    """
    contour: ContourPipelineConfig = field(default_factory=ContourPipelineConfig)
    watershed: WatershedPipelineConfig = field(default_factory=WatershedPipelineConfig)
    display: DisplaySettings = field(default_factory=DisplaySettings)

    def __post_init__(self):
        """Convert nested dictionaries into settings objects."""
        if isinstance(self.contour, dict):
            self.contour = ContourPipelineConfig.from_dict(self.contour)
        if isinstance(self.watershed, dict):
            self.watershed = WatershedPipelineConfig.from_dict(self.watershed)
        if isinstance(self.display, dict):
            self.display = DisplaySettings.from_dict(self.display)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "contour": self.contour.to_dict(),
            "watershed": self.watershed.to_dict(),
            "display": self.display.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SegmentationConfig":
        """Create from dictionary (e.g., from YAML config)."""
        return cls(
            contour=ContourPipelineConfig.from_dict(_section(data, "contour")),
            watershed=WatershedPipelineConfig.from_dict(_section(data, "watershed")),
            display=DisplaySettings.from_dict(_section(data, "display")),
        )

    @classmethod
    def from_yaml(cls, yaml_path: str) -> "SegmentationConfig":
        """Load configuration from YAML file."""
        import yaml

        with open(yaml_path, "r") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Configuration must be a mapping, got {type(data).__name__}")
        if "segmentation" in data:
            data = _section(data, "segmentation")
        return cls.from_dict(data)

    @classmethod
    def default(cls) -> "SegmentationConfig":
        """Create default configuration."""
        return cls()
