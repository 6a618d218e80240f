"""Summary statistics over a measurement series.

This module is pure logic with NO I/O and NO OpenCV imports.
"""

from __future__ import annotations

from dataclasses import dataclass

from color_tracker.core.types import BatchResult, SkipReason


@dataclass
class SeriesSummary:
    """Summary of one batch run.

    Attributes:
        total_frames: Frames in the batch
        measured: Frames with a measurement record
        no_region: Frames skipped because nothing was detected
        unreadable: Frames skipped because they could not be read
        highest_top_y: Smallest top_y seen (highest point reached)
        lowest_bottom_y: Largest bottom_y seen (lowest point reached)
        top_travel_px: Range covered by top_y over the series
        duration_s: Elapsed time between first and last measurement
    """

    total_frames: int
    measured: int
    no_region: int
    unreadable: int
    highest_top_y: int | None
    lowest_bottom_y: int | None
    top_travel_px: int | None
    duration_s: float

    @property
    def detection_rate(self) -> float:
        """Fraction of frames that produced a measurement."""
        if self.total_frames == 0:
            return 0.0
        return self.measured / self.total_frames


def summarize(result: BatchResult) -> SeriesSummary:
    """Compute summary statistics for a batch result.

    Args:
        result: Output of FrameAnalyzer.analyze_batch

    Returns:
        SeriesSummary for the batch
    """
    records = result.records
    reasons = [skip.reason for skip in result.skipped]

    if not records:
        return SeriesSummary(
            total_frames=result.total,
            measured=0,
            no_region=reasons.count(SkipReason.NO_REGION),
            unreadable=reasons.count(SkipReason.UNREADABLE),
            highest_top_y=None,
            lowest_bottom_y=None,
            top_travel_px=None,
            duration_s=0.0,
        )

    tops = [r.top_y for r in records]

    return SeriesSummary(
        total_frames=result.total,
        measured=len(records),
        no_region=reasons.count(SkipReason.NO_REGION),
        unreadable=reasons.count(SkipReason.UNREADABLE),
        highest_top_y=min(tops),
        lowest_bottom_y=max(r.bottom_y for r in records),
        top_travel_px=max(tops) - min(tops),
        duration_s=records[-1].elapsed_seconds - records[0].elapsed_seconds,
    )
