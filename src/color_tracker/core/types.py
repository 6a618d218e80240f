"""Core data types and structures."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum, auto
from numbers import Real

import numpy as np
from numpy.typing import NDArray

from color_tracker.core.exceptions import ConfigurationError

Point = tuple[int, int]


@dataclass(frozen=True, slots=True)
class ThresholdRange:
    """Inclusive bounds for a single channel.

    ``low <= high`` is not enforced. An inverted pair is kept as given and
    the membership test is applied literally, so it matches no value.
    """

    low: float
    high: float

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> ThresholdRange:
        """Build a range from a 2-element sequence.

        Raises:
            ConfigurationError: If the sequence does not hold exactly two numbers
        """
        try:
            count = len(values)
        except TypeError as e:
            raise ConfigurationError(f"Threshold range must be a sequence, got {values!r}") from e

        if count != 2:
            raise ConfigurationError(f"Threshold range needs 2 values, got {count}")

        low, high = values[0], values[1]
        for bound in (low, high):
            if isinstance(bound, bool) or not isinstance(bound, (Real, np.number)):
                raise ConfigurationError(f"Threshold bound must be numeric, got {bound!r}")

        return cls(low=float(low), high=float(high))

    @property
    def is_inverted(self) -> bool:
        """True if the lower bound exceeds the upper bound."""
        return self.low > self.high

    def contains(self, value: float) -> bool:
        """Inclusive membership test, evaluated as written."""
        return self.low <= value <= self.high


class ThresholdMode(Enum):
    """Color model used by the threshold stage."""

    HSL = auto()
    RGB = auto()

    def toggled(self) -> ThresholdMode:
        """Return the other mode."""
        return ThresholdMode.RGB if self is ThresholdMode.HSL else ThresholdMode.HSL


@dataclass(frozen=True, slots=True)
class RoiRect:
    """Rectangular region of interest in source pixel coordinates.

    Both corners are inclusive. They may be given in any order.
    """

    top_corner: Point
    bottom_corner: Point

    @property
    def x(self) -> int:
        return min(self.top_corner[0], self.bottom_corner[0])

    @property
    def y(self) -> int:
        return min(self.top_corner[1], self.bottom_corner[1])

    @property
    def width(self) -> int:
        return abs(self.bottom_corner[0] - self.top_corner[0])

    @property
    def height(self) -> int:
        return abs(self.bottom_corner[1] - self.top_corner[1])

    def contains(self, x: int, y: int) -> bool:
        """Check whether a pixel lies inside the rectangle (inclusive)."""
        return self.x <= x <= self.x + self.width and self.y <= y <= self.y + self.height


@dataclass(slots=True)
class PipelineConfig:
    """Mutable threshold configuration owned by an ImagePipeline.

    Attributes:
        mode: Which threshold stage runs
        hue_range, sat_range, lum_range: Bounds used in HSL mode
        red_range, green_range, blue_range: Bounds used in RGB mode
        roi_rect: Last rectangle supplied, kept across disable/enable
        roi_enabled: Whether the ROI mask is applied
    """

    mode: ThresholdMode = ThresholdMode.HSL
    hue_range: ThresholdRange = field(default_factory=lambda: ThresholdRange(0.0, 180.0))
    sat_range: ThresholdRange = field(default_factory=lambda: ThresholdRange(0.0, 255.0))
    lum_range: ThresholdRange = field(default_factory=lambda: ThresholdRange(0.0, 255.0))
    red_range: ThresholdRange = field(default_factory=lambda: ThresholdRange(0.0, 255.0))
    green_range: ThresholdRange = field(default_factory=lambda: ThresholdRange(0.0, 255.0))
    blue_range: ThresholdRange = field(default_factory=lambda: ThresholdRange(0.0, 255.0))
    roi_rect: RoiRect | None = None
    roi_enabled: bool = False

    @property
    def roi(self) -> RoiRect | None:
        """The active ROI rectangle, or None when masking is off."""
        if self.roi_enabled:
            return self.roi_rect
        return None

    def hls_bounds(self) -> tuple[tuple[float, float, float], tuple[float, float, float]]:
        """Lower/upper bounds in OpenCV HLS channel order (hue, lum, sat)."""
        lower = (self.hue_range.low, self.lum_range.low, self.sat_range.low)
        upper = (self.hue_range.high, self.lum_range.high, self.sat_range.high)
        return lower, upper

    def rgb_bounds(self) -> tuple[tuple[float, float, float], tuple[float, float, float]]:
        """Lower/upper bounds in RGB channel order."""
        lower = (self.red_range.low, self.green_range.low, self.blue_range.low)
        upper = (self.red_range.high, self.green_range.high, self.blue_range.high)
        return lower, upper


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Axis-aligned bounding box in pixel coordinates."""

    x: int
    y: int
    width: int
    height: int

    @property
    def bottom(self) -> int:
        """Row just past the box (y + height)."""
        return self.y + self.height

    @property
    def right(self) -> int:
        """Column just past the box (x + width)."""
        return self.x + self.width


@dataclass(slots=True)
class Frame:
    """A labelled input image.

    Attributes:
        label: Display label (typically the file name)
        image: BGR image array, or None for a frame that could not be read
    """

    label: str
    image: NDArray[np.uint8] | None

    @property
    def is_readable(self) -> bool:
        return self.image is not None


@dataclass(frozen=True, slots=True)
class MeasurementRecord:
    """Vertical extent of the largest region in one frame.

    Attributes:
        frame_index: Position of the frame in the batch (0-based)
        frame_label: Label of the source frame
        elapsed_seconds: frame_index * frame interval
        top_y: Top row of the bounding box (highest pixel)
        bottom_y: top_y + box height (lowest pixel)
    """

    frame_index: int
    frame_label: str
    elapsed_seconds: float
    top_y: int
    bottom_y: int

    @property
    def height_px(self) -> int:
        """Vertical extent in pixels."""
        return self.bottom_y - self.top_y


class SkipReason(Enum):
    """Why a frame produced no measurement."""

    NO_REGION = auto()
    UNREADABLE = auto()


@dataclass(frozen=True, slots=True)
class SkippedFrame:
    """A frame that kept its index and time slot but yielded no record."""

    frame_index: int
    frame_label: str
    elapsed_seconds: float
    reason: SkipReason


@dataclass(slots=True)
class BatchResult:
    """Outcome of a batch analysis run.

    Attributes:
        records: Measurements in input frame order
        skipped: Frames without a measurement, in input frame order
        total: Number of frames in the batch
        cancelled: True if the run stopped before the last frame
    """

    records: list[MeasurementRecord] = field(default_factory=list)
    skipped: list[SkippedFrame] = field(default_factory=list)
    total: int = 0
    cancelled: bool = False

    @property
    def processed(self) -> int:
        """Frames handled so far (measured or skipped)."""
        return len(self.records) + len(self.skipped)

    def __iter__(self) -> Iterator[MeasurementRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)
