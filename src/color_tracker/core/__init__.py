"""Core infrastructure: config, types, exceptions, and logging."""

from color_tracker.core.config import Settings, get_settings
from color_tracker.core.exceptions import (
    ColorTrackerError,
    ConfigurationError,
    FrameSourceError,
    NoRegionDetectedError,
    UnreadableFrameError,
)
from color_tracker.core.logging import get_logger, setup_logging
from color_tracker.core.types import (
    BatchResult,
    BoundingBox,
    Frame,
    MeasurementRecord,
    PipelineConfig,
    RoiRect,
    SkippedFrame,
    SkipReason,
    ThresholdMode,
    ThresholdRange,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Types
    "ThresholdRange",
    "ThresholdMode",
    "RoiRect",
    "PipelineConfig",
    "BoundingBox",
    "Frame",
    "MeasurementRecord",
    "SkipReason",
    "SkippedFrame",
    "BatchResult",
    # Exceptions
    "ColorTrackerError",
    "ConfigurationError",
    "NoRegionDetectedError",
    "UnreadableFrameError",
    "FrameSourceError",
    # Logging
    "setup_logging",
    "get_logger",
]
