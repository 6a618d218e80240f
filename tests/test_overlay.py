"""Tests for preview overlays."""

from __future__ import annotations

import numpy as np
from conftest import BLACK, solid_image

from color_tracker.core.config import OverlaySettings
from color_tracker.core.types import BoundingBox, RoiRect
from color_tracker.vision.overlay import OverlayRenderer


class TestOverlayRenderer:
    """Tests for OverlayRenderer."""

    def test_draw_roi_outline(self) -> None:
        """The ROI outline should use the configured color and leave the input alone."""
        image = solid_image(60, 60, BLACK)
        renderer = OverlayRenderer()

        output = renderer.draw_roi(image, RoiRect((10, 10), (50, 50)))

        assert tuple(output[10, 30]) == (255, 0, 0)
        assert tuple(output[30, 30]) == BLACK
        assert np.all(image == 0)

    def test_draw_roi_none(self) -> None:
        """Without an ROI the copy should be unannotated."""
        image = solid_image(10, 10, BLACK)
        output = OverlayRenderer().draw_roi(image, None)

        assert output is not image
        assert np.array_equal(output, image)

    def test_draw_bounding_box(self) -> None:
        """The box should be drawn in the configured color."""
        settings = OverlaySettings(box_color=(0, 0, 200), box_thickness=1)
        image = solid_image(40, 40, BLACK)

        output = OverlayRenderer(settings).draw_bounding_box(image, BoundingBox(5, 8, 20, 10))

        assert tuple(output[8, 5]) == (0, 0, 200)
        assert tuple(output[18, 25]) == (0, 0, 200)
        assert tuple(output[12, 12]) == BLACK

    def test_mask_to_bgr(self) -> None:
        """A mask should expand to three equal channels."""
        mask = np.zeros((5, 7), dtype=np.uint8)
        mask[2, 3] = 255

        bgr = OverlayRenderer.mask_to_bgr(mask)

        assert bgr.shape == (5, 7, 3)
        assert tuple(bgr[2, 3]) == (255, 255, 255)
