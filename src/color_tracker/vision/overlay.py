"""Preview overlays for ROI selection and detected regions."""

from __future__ import annotations

from typing import TYPE_CHECKING

import cv2
import numpy as np

from color_tracker.core.config import OverlaySettings
from color_tracker.core.types import BoundingBox, RoiRect

if TYPE_CHECKING:
    from numpy.typing import NDArray


class OverlayRenderer:
    """Draws preview annotations on copies of frames.

    Input images are never modified.
    """

    def __init__(self, settings: OverlaySettings | None = None) -> None:
        """Initialize renderer with settings.

        Args:
            settings: Overlay settings (uses defaults if None)
        """
        self.settings = settings or OverlaySettings()

    def draw_roi(self, image: NDArray[np.uint8], roi: RoiRect | None) -> NDArray[np.uint8]:
        """Outline the ROI rectangle.

        Args:
            image: BGR image
            roi: Rectangle to draw, or None to return an unannotated copy

        Returns:
            Annotated copy of the image
        """
        output = image.copy()
        if roi is None:
            return output

        cv2.rectangle(
            output,
            roi.top_corner,
            roi.bottom_corner,
            self.settings.roi_color,
            self.settings.roi_thickness,
        )
        return output

    def draw_bounding_box(
        self,
        image: NDArray[np.uint8],
        box: BoundingBox | None,
    ) -> NDArray[np.uint8]:
        """Outline the bounding box of a detected region.

        Args:
            image: BGR image
            box: Box to draw, or None to return an unannotated copy

        Returns:
            Annotated copy of the image
        """
        output = image.copy()
        if box is None:
            return output

        cv2.rectangle(
            output,
            (box.x, box.y),
            (box.right, box.bottom),
            self.settings.box_color,
            self.settings.box_thickness,
        )
        return output

    @staticmethod
    def mask_to_bgr(mask: NDArray[np.uint8]) -> NDArray[np.uint8]:
        """Expand a single-channel mask to BGR for side-by-side display."""
        return cv2.cvtColor(mask, cv2.COLOR_GRAY2BGR)
