"""Color Tracker: color-threshold region measurement over image sequences."""

__version__ = "0.1.0"
