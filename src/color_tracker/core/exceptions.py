"""Custom exceptions for Color Tracker."""

from __future__ import annotations


class ColorTrackerError(Exception):
    """Base exception for all Color Tracker errors."""

    pass


class ConfigurationError(ColorTrackerError):
    """Invalid pipeline configuration input."""

    def __init__(self, message: str = "Invalid configuration") -> None:
        self.message = message
        super().__init__(self.message)


class NoRegionDetectedError(ColorTrackerError):
    """The processed mask of a frame contains no foreground region."""

    def __init__(self, frame_index: int, frame_label: str = "") -> None:
        self.frame_index = frame_index
        self.frame_label = frame_label
        self.message = f"No region detected in frame {frame_index}"
        if frame_label:
            self.message += f" ({frame_label})"
        super().__init__(self.message)


class UnreadableFrameError(ColorTrackerError):
    """An image file could not be decoded."""

    def __init__(self, path: str, message: str | None = None) -> None:
        self.path = path
        self.message = message or f"Unable to read image: {path}"
        super().__init__(self.message)


class FrameSourceError(ColorTrackerError):
    """A frame source (e.g. image folder) is missing or empty."""

    def __init__(self, message: str = "Frame source error") -> None:
        self.message = message
        super().__init__(self.message)
