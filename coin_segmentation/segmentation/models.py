"""
Data structures shared by the segmentation stages.
"""

from dataclasses import dataclass, field
from typing import List, Tuple, Dict, Any, Optional
import numpy as np


# Label map values
UNKNOWN_LABEL = 0
BOUNDARY_LABEL = -1
BACKGROUND_LABEL = 1
FIRST_REGION_LABEL = 2


@dataclass
class ContourSet:
    """
    Contours with their nesting relationship.

    Attributes:
        contours: OpenCV contours (each Nx1x2 int32)
        parents: Parent index for each contour, None for outermost contours
    """
    contours: List[np.ndarray] = field(default_factory=list)
    parents: List[Optional[int]] = field(default_factory=list)

    def __post_init__(self):
        if len(self.contours) != len(self.parents):
            raise ValueError(
                f"contours and parents must have equal length, "
                f"got {len(self.contours)} and {len(self.parents)}"
            )

    def __len__(self) -> int:
        return len(self.contours)

    def is_external(self, index: int) -> bool:
        """A contour is external when it is a root of the hierarchy."""
        return self.parents[index] is None

    def external_indices(self) -> List[int]:
        return [i for i in range(len(self.contours)) if self.is_external(i)]

    def external(self) -> List[np.ndarray]:
        """Get only the outermost contours."""
        return [self.contours[i] for i in self.external_indices()]

    def children(self, index: int) -> List[int]:
        return [i for i, parent in enumerate(self.parents) if parent == index]

    def depth(self, index: int) -> int:
        """
        Number of ancestors of a contour.

        Raises:
            ValueError: If the parent chain loops back on itself
        """
        depth = 0
        current = self.parents[index]
        while current is not None:
            depth += 1
            if depth > len(self.parents):
                raise ValueError(f"Contour hierarchy has a cycle through {index}")
            current = self.parents[current]
        return depth

    def is_forest(self) -> bool:
        """Check that no contour is its own ancestor."""
        try:
            for i in range(len(self.parents)):
                self.depth(i)
        except ValueError:
            return False
        return True

    def offset(self, shift: int) -> "ContourSet":
        """Copy with parent indices shifted, for concatenating sets."""
        return ContourSet(
            contours=list(self.contours),
            parents=[None if p is None else p + shift for p in self.parents],
        )

    def extend(self, other: "ContourSet") -> None:
        shifted = other.offset(len(self.contours))
        self.contours.extend(shifted.contours)
        self.parents.extend(shifted.parents)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "contour_count": len(self.contours),
            "external_count": len(self.external_indices()),
            "contours": [
                {
                    "points": [{"x": int(pt[0][0]), "y": int(pt[0][1])} for pt in contour],
                    "parent": parent,
                }
                for contour, parent in zip(self.contours, self.parents)
            ],
        }

    @classmethod
    def empty(cls) -> "ContourSet":
        return cls(contours=[], parents=[])


@dataclass
class StageArtifact:
    """A named, numbered intermediate image kept for display and debugging."""
    index: int
    name: str
    image: np.ndarray

    @property
    def title(self) -> str:
        return f"{self.index}. {self.name}"


@dataclass
class SegmentationResult:
    """
    Output of one pipeline run.

    Attributes:
        annotated: Copy of the original image with external contours drawn
        contours: Contours recovered by the pipeline
        artifacts: Intermediate stage images in display order
        label_map: Final watershed label map (None for the contour pipeline)
    """
    annotated: np.ndarray
    contours: ContourSet
    artifacts: List[StageArtifact] = field(default_factory=list)
    label_map: Optional[np.ndarray] = None

    @property
    def external_count(self) -> int:
        return len(self.contours.external_indices())

    def region_ids(self) -> List[int]:
        """Region ids present in the label map, excluding background and boundary."""
        if self.label_map is None:
            return []
        ids = np.unique(self.label_map)
        return [int(i) for i in ids if i >= FIRST_REGION_LABEL]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable summary (without pixel data)."""
        result = {
            "contour_count": len(self.contours),
            "external_contour_count": self.external_count,
            "stages": [artifact.title for artifact in self.artifacts],
        }
        if self.label_map is not None:
            result["region_count"] = len(self.region_ids())
            result["boundary_pixels"] = int(np.count_nonzero(self.label_map == BOUNDARY_LABEL))
        return result


@dataclass
class ComparisonResult:
    """Both pipeline results plus the side-by-side comparison image."""
    original: np.ndarray
    contour: SegmentationResult
    watershed: SegmentationResult
    comparison: np.ndarray

    @property
    def image_shape(self) -> Tuple[int, int]:
        return self.original.shape[:2]

    def artifacts(self) -> List[StageArtifact]:
        """All artifacts in display order, starting with the original."""
        return (
            [StageArtifact(0, "Original Image", self.original)]
            + self.contour.artifacts
            + self.watershed.artifacts
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable summary."""
        height, width = self.image_shape
        return {
            "image_dimensions": {"width": int(width), "height": int(height)},
            "contour_pipeline": self.contour.to_dict(),
            "watershed_pipeline": self.watershed.to_dict(),
        }
