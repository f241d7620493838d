"""
Tests for contour extraction from masks and label maps.
"""

import pytest
import numpy as np
import cv2

from coin_segmentation.segmentation.contour_extraction import (
    extract_contours,
    extract_region_contours,
    region_mask,
    draw_external_contours,
)
from coin_segmentation.segmentation.models import ContourSet
from tests.fixtures.coin_fixtures import create_ring_mask


class TestExtractContours:
    """Tests for extract_contours function."""

    def test_single_rectangle_extracted(self):
        mask = np.zeros((100, 100), dtype=np.uint8)
        mask[20:80, 20:80] = 255

        contour_set = extract_contours(mask)

        assert len(contour_set) == 1
        assert contour_set.is_external(0)
        area = cv2.contourArea(contour_set.contours[0])
        assert 3400 < area < 3700

    def test_empty_mask_returns_empty_set(self):
        contour_set = extract_contours(np.zeros((100, 100), dtype=np.uint8))

        assert len(contour_set) == 0
        assert contour_set.external() == []

    def test_hole_is_child_of_outer_contour(self):
        """Test that a hole is nested under the blob's outer boundary."""
        contour_set = extract_contours(create_ring_mask())

        assert len(contour_set) == 2
        external = contour_set.external_indices()
        assert len(external) == 1
        hole = 1 - external[0]
        assert contour_set.parents[hole] == external[0]
        assert contour_set.children(external[0]) == [hole]
        assert contour_set.children(hole) == []

    def test_hierarchy_is_forest(self):
        mask = create_ring_mask()
        mask[5:20, 5:20] = 255

        contour_set = extract_contours(mask)

        assert contour_set.is_forest()

    def test_external_count_bounded_by_components(self):
        """Test external contours never exceed connected components."""
        mask = create_ring_mask(size=(200, 300))
        mask[10:30, 250:290] = 255
        mask[150:190, 10:40] = 255

        contour_set = extract_contours(mask)
        n_labels, _ = cv2.connectedComponents(mask)

        assert len(contour_set.external()) <= n_labels - 1
        assert len(contour_set.external()) == 3


class TestRegionContours:
    """Tests for label map contour extraction."""

    def test_regions_split_by_boundary_line(self):
        """Test two regions separated only by -1 give two external contours."""
        labels = np.ones((60, 100), dtype=np.int32)
        labels[10:50, 10:49] = 2
        labels[10:50, 49] = -1
        labels[10:50, 50:90] = 3

        contour_set = extract_region_contours(labels)

        assert len(contour_set.external()) == 2

    def test_background_and_boundary_ignored(self):
        labels = np.ones((50, 50), dtype=np.int32)
        labels[0, :] = -1

        assert len(extract_region_contours(labels)) == 0

    def test_parent_indices_offset_per_region(self):
        labels = np.ones((200, 400), dtype=np.int32)
        ring = create_ring_mask()
        labels[:, :200][ring == 255] = 2
        labels[:, 200:][ring == 255] = 3

        contour_set = extract_region_contours(labels)

        assert len(contour_set) == 4
        assert len(contour_set.external()) == 2
        for i, parent in enumerate(contour_set.parents):
            if parent is not None:
                assert contour_set.is_external(parent)
                assert parent != i

    def test_region_mask_selects_ids(self):
        labels = np.array([[1, 2, 3], [-1, 0, 2]], dtype=np.int32)

        assert region_mask(labels).tolist() == [[0, 255, 255], [0, 0, 255]]
        assert region_mask(labels, 3).tolist() == [[0, 0, 255], [0, 0, 0]]


class TestDrawExternalContours:
    """Tests for draw_external_contours."""

    def test_draws_on_copy(self):
        image = np.zeros((200, 200, 3), dtype=np.uint8)
        contour_set = extract_contours(create_ring_mask())

        annotated = draw_external_contours(image, contour_set, (0, 255, 0), 2)

        assert np.count_nonzero(image) == 0
        assert np.any(np.all(annotated == (0, 255, 0), axis=2))

    def test_holes_not_drawn(self):
        """Test that the hole contour at radius 25 is left blank."""
        image = np.zeros((200, 200, 3), dtype=np.uint8)
        contour_set = extract_contours(create_ring_mask())

        annotated = draw_external_contours(image, contour_set, (255, 0, 0), 1)

        assert np.count_nonzero(annotated[75:126, 75:126]) == 0

    def test_empty_set_returns_plain_copy(self):
        image = np.full((50, 50, 3), 7, dtype=np.uint8)

        annotated = draw_external_contours(image, ContourSet.empty(), (0, 0, 255), 3)

        assert np.array_equal(annotated, image)
        assert annotated is not image
