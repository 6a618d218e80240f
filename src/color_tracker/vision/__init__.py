"""Computer vision operations: threshold pipeline, region extraction, and overlay."""

from color_tracker.vision.contours import (
    bounding_box,
    find_regions,
    largest_region,
    locate_largest_region,
)
from color_tracker.vision.overlay import OverlayRenderer
from color_tracker.vision.pipeline import ImagePipeline

__all__ = [
    "ImagePipeline",
    "OverlayRenderer",
    "find_regions",
    "largest_region",
    "bounding_box",
    "locate_largest_region",
]
