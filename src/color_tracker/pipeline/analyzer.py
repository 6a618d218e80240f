"""Batch frame analysis orchestration."""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable, Sequence
from typing import TYPE_CHECKING

import numpy as np

from color_tracker.core.config import AnalysisSettings, Settings, get_settings
from color_tracker.core.exceptions import NoRegionDetectedError
from color_tracker.core.logging import get_logger
from color_tracker.core.types import (
    BatchResult,
    BoundingBox,
    Frame,
    MeasurementRecord,
    SkippedFrame,
    SkipReason,
)
from color_tracker.vision.contours import locate_largest_region
from color_tracker.vision.pipeline import ImagePipeline

if TYPE_CHECKING:
    from numpy.typing import NDArray

logger = get_logger(__name__)

FrameInput = Frame | tuple[str, "NDArray[np.uint8] | None"]
ProgressCallback = Callable[[int, int], None]


class FrameAnalyzer:
    """Measures the largest colored region across an ordered batch of frames.

    Each frame is run through the :class:`ImagePipeline`, the largest contour
    of the resulting mask is located, and its vertical extent is recorded.
    Elapsed time is derived from the frame index alone:
    ``elapsed_seconds = index * frame_interval_s``.

    Frames without a measurement still consume their index and time slot.
    What happens when a frame has no region is set by
    ``AnalysisSettings.on_no_region``: ``"skip"`` records a
    :class:`SkippedFrame` and continues, ``"abort"`` raises
    :class:`NoRegionDetectedError` and ends the batch.
    """

    def __init__(
        self,
        pipeline: ImagePipeline | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize analyzer.

        Args:
            pipeline: Configured image pipeline (a new one is created if None)
            settings: Application settings (uses defaults if None)
        """
        self.settings = settings or get_settings()
        self.pipeline = pipeline or ImagePipeline(self.settings.pipeline)

        self._cancel_event = threading.Event()
        self._last_box: BoundingBox | None = None
        self._processed = 0
        self._total = 0

    @property
    def analysis_settings(self) -> AnalysisSettings:
        return self.settings.analysis

    @property
    def last_box(self) -> BoundingBox | None:
        """Bounding box found in the most recently analyzed frame."""
        return self._last_box

    @property
    def progress(self) -> float:
        """Fraction of the current (or last) batch processed, in [0, 1]."""
        if self._total == 0:
            return 0.0
        return self._processed / self._total

    def cancel(self) -> None:
        """Ask a running batch to stop before its next frame.

        Safe to call from another thread. A frame already being processed
        finishes normally. A request made before :meth:`analyze_batch` starts
        stops that batch before its first frame. The request is cleared when
        the batch returns.
        """
        self._cancel_event.set()
        logger.info("Batch cancellation requested")

    def analyze_frame(
        self,
        index: int,
        label: str,
        image: NDArray[np.uint8],
        frame_interval_s: float,
    ) -> MeasurementRecord:
        """Measure the largest region in a single frame.

        Args:
            index: Frame position in the batch (0-based)
            label: Frame label carried into the record
            image: BGR image
            frame_interval_s: Seconds between consecutive frames

        Returns:
            MeasurementRecord for the frame

        Raises:
            NoRegionDetectedError: If the processed mask has no foreground region
        """
        mask = self.pipeline.process(image)
        box = locate_largest_region(mask)
        self._last_box = box

        if box is None:
            raise NoRegionDetectedError(index, label)

        return MeasurementRecord(
            frame_index=index,
            frame_label=label,
            elapsed_seconds=index * frame_interval_s,
            top_y=box.y,
            bottom_y=box.bottom,
        )

    def analyze_batch(
        self,
        frames: Sequence[FrameInput] | Iterable[FrameInput],
        frame_interval_s: float | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> BatchResult:
        """Analyze frames in order and collect their measurements.

        Args:
            frames: Frame objects or (label, image) pairs; an image of None
                marks an unreadable frame
            frame_interval_s: Seconds between frames (defaults to settings)
            on_progress: Called with (processed, total) after every frame

        Returns:
            BatchResult with records and skipped frames in input order

        Raises:
            NoRegionDetectedError: If a frame has no region and the
                no-region policy is "abort"
        """
        interval = (
            self.analysis_settings.frame_interval_s
            if frame_interval_s is None
            else frame_interval_s
        )
        frames = frames if isinstance(frames, Sequence) else list(frames)

        self._processed = 0
        self._total = len(frames)
        result = BatchResult(total=self._total)

        logger.info("Analyzing %d frames (%.3f s apart)", self._total, interval)

        try:
            self._run_batch(frames, interval, result, on_progress)
        finally:
            # A request made before the batch started is honored; none outlives it
            self._cancel_event.clear()

        logger.info(
            "Batch finished: %d measured, %d skipped of %d",
            len(result.records),
            len(result.skipped),
            self._total,
        )
        return result

    def _run_batch(
        self,
        frames: Sequence[FrameInput],
        interval: float,
        result: BatchResult,
        on_progress: ProgressCallback | None,
    ) -> None:
        for index, item in enumerate(frames):
            if self._cancel_event.is_set():
                result.cancelled = True
                logger.info("Batch cancelled after %d of %d frames", index, self._total)
                break

            frame = _as_frame(item)
            elapsed = index * interval

            if not frame.is_readable:
                logger.warning("Frame %d (%s) unreadable, skipping", index, frame.label)
                result.skipped.append(
                    SkippedFrame(index, frame.label, elapsed, SkipReason.UNREADABLE)
                )
            else:
                try:
                    record = self.analyze_frame(index, frame.label, frame.image, interval)
                except NoRegionDetectedError:
                    if self.analysis_settings.on_no_region == "abort":
                        logger.error("No region in frame %d (%s), aborting", index, frame.label)
                        raise
                    logger.warning("No region in frame %d (%s), skipping", index, frame.label)
                    result.skipped.append(
                        SkippedFrame(index, frame.label, elapsed, SkipReason.NO_REGION)
                    )
                else:
                    result.records.append(record)
                    logger.debug(
                        "Frame %d (%s): top=%d bottom=%d t=%.3f",
                        index,
                        frame.label,
                        record.top_y,
                        record.bottom_y,
                        record.elapsed_seconds,
                    )

            self._processed = index + 1
            if on_progress is not None:
                on_progress(self._processed, self._total)


def _as_frame(item: FrameInput) -> Frame:
    if isinstance(item, Frame):
        return item
    label, image = item
    return Frame(label=str(label), image=image)
