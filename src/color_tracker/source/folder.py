"""Image folder frame source."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, overload

import cv2
import numpy as np

from color_tracker.core.config import SourceSettings
from color_tracker.core.exceptions import FrameSourceError, UnreadableFrameError
from color_tracker.core.logging import get_logger
from color_tracker.core.types import Frame

if TYPE_CHECKING:
    from numpy.typing import NDArray

logger = get_logger(__name__)


def load_image(path: str | Path) -> NDArray[np.uint8]:
    """Decode an image file into a BGR array.

    Args:
        path: Image file path

    Returns:
        BGR image array

    Raises:
        UnreadableFrameError: If the file is missing or cannot be decoded
    """
    image = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if image is None:
        raise UnreadableFrameError(str(path))
    return image


class ImageFolder(Sequence[Frame]):
    """Images in a directory, ordered by file name and decoded on access.

    Files that fail to decode are returned as ``Frame(label, None)`` so they
    keep their position in the sequence.
    """

    def __init__(self, path: str | Path, settings: SourceSettings | None = None) -> None:
        """Scan a directory for image files.

        Args:
            path: Directory containing the frames
            settings: Source settings (uses defaults if None)

        Raises:
            FrameSourceError: If path is not a directory or holds no images
        """
        self.settings = settings or SourceSettings()
        self.path = Path(path)

        if not self.path.is_dir():
            raise FrameSourceError(f"Not a folder: {self.path}")

        suffixes = {s.lower() for s in self.settings.image_suffixes}
        self._files = sorted(
            (p for p in self.path.iterdir() if p.is_file() and p.suffix.lower() in suffixes),
            key=lambda p: p.name,
        )

        if not self._files:
            raise FrameSourceError(
                f"No images found in {self.path}. Please select a folder with images"
            )

        logger.info("Found %d images in %s", len(self._files), self.path)

    @property
    def files(self) -> list[Path]:
        """Image paths in frame order."""
        return list(self._files)

    def __len__(self) -> int:
        return len(self._files)

    @overload
    def __getitem__(self, index: int) -> Frame: ...

    @overload
    def __getitem__(self, index: slice) -> list[Frame]: ...

    def __getitem__(self, index: int | slice) -> Frame | list[Frame]:
        if isinstance(index, slice):
            return [self._load(p) for p in self._files[index]]
        return self._load(self._files[index])

    def __iter__(self) -> Iterator[Frame]:
        for path in self._files:
            yield self._load(path)

    def _load(self, path: Path) -> Frame:
        try:
            image = load_image(path)
        except UnreadableFrameError as e:
            logger.warning("%s", e.message)
            return Frame(label=path.name, image=None)
        return Frame(label=path.name, image=image)
