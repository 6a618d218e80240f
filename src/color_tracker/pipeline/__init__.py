"""Batch frame analysis orchestration."""

from color_tracker.pipeline.analyzer import FrameAnalyzer

__all__ = ["FrameAnalyzer"]
