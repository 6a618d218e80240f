"""Color threshold image pipeline.

Stages: optional ROI mask -> Gaussian blur -> HSL or RGB threshold -> erode -> dilate.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import cv2
import numpy as np

from color_tracker.core.config import PipelineSettings
from color_tracker.core.exceptions import ConfigurationError
from color_tracker.core.logging import get_logger
from color_tracker.core.types import (
    PipelineConfig,
    Point,
    RoiRect,
    ThresholdMode,
    ThresholdRange,
)

if TYPE_CHECKING:
    from numpy.typing import NDArray

logger = get_logger(__name__)

# Anchor at kernel center
MORPH_ANCHOR = (-1, -1)


class ImagePipeline:
    """Transforms a BGR image into a binary foreground mask.

    The pipeline owns its configuration and its output buffers. Each call to
    :meth:`process` overwrites the buffers in place, so callers that need to
    keep an output across calls must copy it.

    Only the threshold stage selected by ``config.mode`` runs; the other
    stage's buffer keeps whatever it held from its last run.
    """

    def __init__(self, settings: PipelineSettings | None = None) -> None:
        """Initialize pipeline with settings.

        Args:
            settings: Pipeline settings (uses defaults if None)
        """
        self.settings = settings or PipelineSettings()
        self.config = PipelineConfig(
            mode=ThresholdMode[self.settings.start_mode.upper()],
            hue_range=ThresholdRange.from_sequence(self.settings.hue_range),
            sat_range=ThresholdRange.from_sequence(self.settings.sat_range),
            lum_range=ThresholdRange.from_sequence(self.settings.lum_range),
            red_range=ThresholdRange.from_sequence(self.settings.red_range),
            green_range=ThresholdRange.from_sequence(self.settings.green_range),
            blue_range=ThresholdRange.from_sequence(self.settings.blue_range),
        )

        self._blur_ksize = (self.settings.blur_ksize, self.settings.blur_ksize)

        # Output buffers, allocated on first use and reused afterwards
        self._roi_canvas: NDArray[np.uint8] | None = None
        self._roi_canvas_key: tuple[tuple[int, int], RoiRect] | None = None
        self._roi_output: NDArray[np.uint8] | None = None
        self._blur_output: NDArray[np.uint8] | None = None
        self._color_buffer: NDArray[np.uint8] | None = None
        self._hsl_threshold_output: NDArray[np.uint8] | None = None
        self._rgb_threshold_output: NDArray[np.uint8] | None = None
        self._erode_output: NDArray[np.uint8] | None = None
        self._dilate_output: NDArray[np.uint8] | None = None
        self._processed_mode: ThresholdMode | None = None

    # ------------------------------------------------------------------
    # Outputs
    # ------------------------------------------------------------------

    @property
    def mode(self) -> ThresholdMode:
        """Active threshold mode."""
        return self.config.mode

    @property
    def roi_output(self) -> NDArray[np.uint8] | None:
        """Source masked to the ROI rectangle (last run with ROI active)."""
        return self._roi_output

    @property
    def blur_output(self) -> NDArray[np.uint8] | None:
        return self._blur_output

    @property
    def hsl_threshold_output(self) -> NDArray[np.uint8] | None:
        return self._hsl_threshold_output

    @property
    def rgb_threshold_output(self) -> NDArray[np.uint8] | None:
        return self._rgb_threshold_output

    @property
    def threshold_output(self) -> NDArray[np.uint8] | None:
        """Threshold mask from the last :meth:`process` call, before morphology.

        Follows the mode that call ran with, so switching modes afterwards
        does not change what this returns.
        """
        if self._processed_mode is None:
            return None
        if self._processed_mode is ThresholdMode.HSL:
            return self._hsl_threshold_output
        return self._rgb_threshold_output

    @property
    def erode_output(self) -> NDArray[np.uint8] | None:
        return self._erode_output

    @property
    def dilate_output(self) -> NDArray[np.uint8] | None:
        return self._dilate_output

    @property
    def mask(self) -> NDArray[np.uint8] | None:
        """Final binary mask (the dilation result)."""
        return self._dilate_output

    # ------------------------------------------------------------------
    # Processing
    # ------------------------------------------------------------------

    def process(self, source: NDArray[np.uint8]) -> NDArray[np.uint8]:
        """Run the full pipeline on a BGR image.

        Args:
            source: 3-channel BGR image

        Returns:
            The final mask buffer (same object as :attr:`mask`)
        """
        roi = self.config.roi
        blur_input = self._apply_roi(source, roi) if roi is not None else source

        self._blur_output = cv2.GaussianBlur(
            blur_input,
            self._blur_ksize,
            self.settings.blur_sigma,
            dst=self._blur_output,
            sigmaY=self.settings.blur_sigma,
            borderType=cv2.BORDER_DEFAULT,
        )

        if self.config.mode is ThresholdMode.HSL:
            lower, upper = self.config.hls_bounds()
            self._color_buffer = cv2.cvtColor(
                self._blur_output, cv2.COLOR_BGR2HLS, dst=self._color_buffer
            )
            self._hsl_threshold_output = cv2.inRange(
                self._color_buffer, lower, upper, dst=self._hsl_threshold_output
            )
            threshold = self._hsl_threshold_output
        else:
            lower, upper = self.config.rgb_bounds()
            self._color_buffer = cv2.cvtColor(
                self._blur_output, cv2.COLOR_BGR2RGB, dst=self._color_buffer
            )
            self._rgb_threshold_output = cv2.inRange(
                self._color_buffer, lower, upper, dst=self._rgb_threshold_output
            )
            threshold = self._rgb_threshold_output
        self._processed_mode = self.config.mode

        self._erode_output = cv2.erode(
            threshold,
            None,
            dst=self._erode_output,
            anchor=MORPH_ANCHOR,
            iterations=self.settings.morph_iterations,
            borderType=cv2.BORDER_CONSTANT,
            borderValue=self.settings.morph_border_value,
        )
        self._dilate_output = cv2.dilate(
            self._erode_output,
            None,
            dst=self._dilate_output,
            anchor=MORPH_ANCHOR,
            iterations=self.settings.morph_iterations,
            borderType=cv2.BORDER_CONSTANT,
            borderValue=self.settings.morph_border_value,
        )

        return self._dilate_output

    def _apply_roi(self, source: NDArray[np.uint8], roi: RoiRect) -> NDArray[np.uint8]:
        """Copy source into the ROI buffer, zeroing everything outside the rectangle."""
        size = (source.shape[0], source.shape[1])
        if self._roi_canvas is None or self._roi_canvas_key != (size, roi):
            canvas = np.zeros(size, dtype=np.uint8)
            cv2.rectangle(canvas, roi.top_corner, roi.bottom_corner, 255, cv2.FILLED)
            self._roi_canvas = canvas
            self._roi_canvas_key = (size, roi)
            logger.debug("ROI canvas rebuilt for %s at %dx%d", roi, size[1], size[0])

        if self._roi_output is None or self._roi_output.shape != source.shape:
            self._roi_output = np.zeros_like(source)
        else:
            self._roi_output.fill(0)

        self._roi_output = cv2.bitwise_and(
            source, source, dst=self._roi_output, mask=self._roi_canvas
        )
        return self._roi_output

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def set_hue_threshold(self, values: Sequence[float]) -> ThresholdRange:
        """Set hue bounds (HSL mode). Returns the stored range."""
        self.config.hue_range = self._parse_range("hue", values)
        return self.config.hue_range

    def set_sat_threshold(self, values: Sequence[float]) -> ThresholdRange:
        """Set saturation bounds (HSL mode). Returns the stored range."""
        self.config.sat_range = self._parse_range("saturation", values)
        return self.config.sat_range

    def set_lum_threshold(self, values: Sequence[float]) -> ThresholdRange:
        """Set luminance bounds (HSL mode). Returns the stored range."""
        self.config.lum_range = self._parse_range("luminance", values)
        return self.config.lum_range

    def set_red_threshold(self, values: Sequence[float]) -> ThresholdRange:
        """Set red bounds (RGB mode). Returns the stored range."""
        self.config.red_range = self._parse_range("red", values)
        return self.config.red_range

    def set_green_threshold(self, values: Sequence[float]) -> ThresholdRange:
        """Set green bounds (RGB mode). Returns the stored range."""
        self.config.green_range = self._parse_range("green", values)
        return self.config.green_range

    def set_blue_threshold(self, values: Sequence[float]) -> ThresholdRange:
        """Set blue bounds (RGB mode). Returns the stored range."""
        self.config.blue_range = self._parse_range("blue", values)
        return self.config.blue_range

    def _parse_range(self, channel: str, values: Sequence[float]) -> ThresholdRange:
        threshold = ThresholdRange.from_sequence(values)
        if threshold.is_inverted:
            logger.debug(
                "Inverted %s range stored as-is: (%g, %g)", channel, threshold.low, threshold.high
            )
        return threshold

    def switch_threshold_modes(self) -> ThresholdMode:
        """Toggle between HSL and RGB thresholding. Stored ranges are untouched.

        Returns:
            The newly active mode
        """
        self.config.mode = self.config.mode.toggled()
        logger.debug("Threshold mode switched to %s", self.config.mode.name)
        return self.config.mode

    def enable_roi(self, top_corner: Point, bottom_corner: Point) -> RoiRect:
        """Store an ROI rectangle and start masking to it.

        Args:
            top_corner: (x, y) of one corner in source pixels
            bottom_corner: (x, y) of the opposite corner

        Returns:
            The stored rectangle
        """
        try:
            rect = RoiRect(
                top_corner=(int(top_corner[0]), int(top_corner[1])),
                bottom_corner=(int(bottom_corner[0]), int(bottom_corner[1])),
            )
        except (TypeError, ValueError, IndexError) as e:
            raise ConfigurationError(f"Invalid ROI corners: {top_corner!r}, {bottom_corner!r}") from e

        self.config.roi_rect = rect
        self.config.roi_enabled = True
        logger.debug("ROI enabled: %s -> %s", rect.top_corner, rect.bottom_corner)
        return rect

    def disable_roi(self) -> None:
        """Stop ROI masking. The last rectangle is kept for :meth:`reenable_roi`."""
        self.config.roi_enabled = False
        logger.debug("ROI disabled")

    def reenable_roi(self) -> RoiRect:
        """Resume masking with the last rectangle supplied to :meth:`enable_roi`.

        Raises:
            ConfigurationError: If no rectangle was ever set
        """
        if self.config.roi_rect is None:
            raise ConfigurationError("No ROI rectangle has been set")
        self.config.roi_enabled = True
        return self.config.roi_rect

    def sample_color(
        self,
        image: NDArray[np.uint8],
        x: int,
        y: int,
        radius: float | None = None,
    ) -> tuple[ThresholdRange, ThresholdRange, ThresholdRange]:
        """Center the RGB ranges on the color of one pixel (color dropper).

        Each of red, green and blue becomes ``(value - radius, value + radius)``
        without clamping to the channel limits.

        Args:
            image: BGR image to sample from
            x: Pixel column
            y: Pixel row
            radius: Half-width of each range (defaults to settings)

        Returns:
            The stored (red, green, blue) ranges

        Raises:
            ConfigurationError: If the image is not BGR or (x, y) lies outside it
        """
        if image.ndim != 3 or image.shape[2] < 3:
            raise ConfigurationError(
                f"Color dropper needs a 3-channel BGR image, got shape {image.shape}"
            )
        height, width = image.shape[:2]
        if not (0 <= x < width and 0 <= y < height):
            raise ConfigurationError(f"Sample point ({x}, {y}) outside {width}x{height} image")

        radius = self.settings.dropper_radius if radius is None else radius
        blue, green, red = (float(v) for v in image[y, x][:3])

        self.config.red_range = ThresholdRange(red - radius, red + radius)
        self.config.green_range = ThresholdRange(green - radius, green + radius)
        self.config.blue_range = ThresholdRange(blue - radius, blue + radius)
        logger.debug("Sampled color at (%d, %d): R=%g G=%g B=%g", x, y, red, green, blue)

        return self.config.red_range, self.config.green_range, self.config.blue_range
