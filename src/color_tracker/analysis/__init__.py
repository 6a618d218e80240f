"""Pure analysis logic over measurement series.

This module contains NO I/O operations and NO OpenCV imports.
"""

from color_tracker.analysis.summary import SeriesSummary, summarize

__all__ = ["SeriesSummary", "summarize"]
