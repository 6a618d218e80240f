"""Frame sources: image folders and single images."""

from color_tracker.source.folder import ImageFolder, load_image

__all__ = ["ImageFolder", "load_image"]
