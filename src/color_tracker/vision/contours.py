"""Foreground region extraction from binary masks."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import cv2
import numpy as np

from color_tracker.core.types import BoundingBox

if TYPE_CHECKING:
    from numpy.typing import NDArray


def find_regions(mask: NDArray[np.uint8]) -> Sequence[NDArray[np.int32]]:
    """Extract every contour of a binary mask.

    Uses full hierarchy retrieval and keeps every boundary point.

    Args:
        mask: Single-channel binary mask

    Returns:
        Contours in the order OpenCV discovers them
    """
    contours, _hierarchy = cv2.findContours(mask, cv2.RETR_TREE, cv2.CHAIN_APPROX_NONE)
    return contours


def largest_region(contours: Sequence[NDArray[np.int32]]) -> NDArray[np.int32] | None:
    """Select the contour with the largest enclosed area.

    On equal areas the contour found first is kept.

    Args:
        contours: Contours as returned by :func:`find_regions`

    Returns:
        Largest contour, or None if there are none
    """
    if len(contours) == 0:
        return None

    largest = contours[0]
    largest_area = cv2.contourArea(largest)
    for contour in contours[1:]:
        area = cv2.contourArea(contour)
        if area > largest_area:
            largest = contour
            largest_area = area

    return largest


def bounding_box(contour: NDArray[np.int32]) -> BoundingBox:
    """Axis-aligned bounding box of a contour."""
    x, y, width, height = cv2.boundingRect(contour)
    return BoundingBox(x=int(x), y=int(y), width=int(width), height=int(height))


def locate_largest_region(mask: NDArray[np.uint8]) -> BoundingBox | None:
    """Bounding box of the largest region in a mask, or None if the mask is empty."""
    contour = largest_region(find_regions(mask))
    if contour is None:
        return None
    return bounding_box(contour)
