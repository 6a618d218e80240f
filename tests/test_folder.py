"""Tests for the image folder frame source."""

from __future__ import annotations

from pathlib import Path

import cv2
import pytest
from conftest import BLUE, RED, image_with_square, solid_image

from color_tracker.core.config import Settings, SourceSettings
from color_tracker.core.exceptions import FrameSourceError, UnreadableFrameError
from color_tracker.core.types import SkipReason
from color_tracker.pipeline.analyzer import FrameAnalyzer
from color_tracker.source.folder import ImageFolder, load_image
from color_tracker.vision.pipeline import ImagePipeline


@pytest.fixture
def image_dir(tmp_path: Path) -> Path:
    """Folder with three PNG frames, a corrupt image and a text file."""
    for name, row in (("img_02.png", 14), ("img_00.png", 0), ("img_01.png", 7)):
        cv2.imwrite(str(tmp_path / name), image_with_square(row))
    (tmp_path / "img_01b.png").write_bytes(b"not an image")
    (tmp_path / "notes.txt").write_text("ignore me")
    return tmp_path


class TestLoadImage:
    """Tests for single image loading."""

    def test_loads_bgr(self, tmp_path: Path) -> None:
        """A written PNG should load back as the same BGR array."""
        path = tmp_path / "red.png"
        cv2.imwrite(str(path), solid_image(6, 8, RED))

        image = load_image(path)

        assert image.shape == (6, 8, 3)
        assert tuple(image[0, 0]) == RED

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file should raise UnreadableFrameError."""
        with pytest.raises(UnreadableFrameError) as exc_info:
            load_image(tmp_path / "missing.png")
        assert "missing.png" in exc_info.value.path

    def test_corrupt_file(self, tmp_path: Path) -> None:
        """A file that is not an image should raise UnreadableFrameError."""
        path = tmp_path / "bad.jpg"
        path.write_bytes(b"\x00\x01garbage")
        with pytest.raises(UnreadableFrameError):
            load_image(path)


class TestImageFolder:
    """Tests for ImageFolder."""

    def test_orders_by_name_and_filters_suffix(self, image_dir: Path) -> None:
        """Only image files should be listed, sorted by name."""
        folder = ImageFolder(image_dir)

        assert len(folder) == 4
        assert [p.name for p in folder.files] == [
            "img_00.png",
            "img_01.png",
            "img_01b.png",
            "img_02.png",
        ]

    def test_unreadable_file_is_placeholder(self, image_dir: Path) -> None:
        """A corrupt file should give a frame with no image."""
        folder = ImageFolder(image_dir)

        frame = folder[2]
        assert frame.label == "img_01b.png"
        assert frame.image is None
        assert folder[0].image is not None

    def test_iteration_and_slicing(self, image_dir: Path) -> None:
        """Iteration and slices should follow file order."""
        folder = ImageFolder(image_dir)

        assert [f.label for f in folder] == [p.name for p in folder.files]
        assert [f.label for f in folder[1:3]] == ["img_01.png", "img_01b.png"]
        assert folder[-1].label == "img_02.png"

    def test_empty_folder(self, tmp_path: Path) -> None:
        """A folder without images should raise a readable error."""
        (tmp_path / "readme.md").write_text("no images here")

        with pytest.raises(FrameSourceError, match="No images found"):
            ImageFolder(tmp_path)

    def test_not_a_folder(self, tmp_path: Path) -> None:
        """A file path should be rejected."""
        path = tmp_path / "file.png"
        cv2.imwrite(str(path), solid_image(2, 2, BLUE))

        with pytest.raises(FrameSourceError, match="Not a folder"):
            ImageFolder(path)

    def test_custom_suffixes(self, image_dir: Path) -> None:
        """Configured suffixes should control which files are listed."""
        folder = ImageFolder(image_dir, SourceSettings(image_suffixes=(".txt", ".png")))
        assert "notes.txt" in [p.name for p in folder.files]

    def test_folder_batch(
        self, image_dir: Path, red_rgb_pipeline: ImagePipeline, settings: Settings
    ) -> None:
        """Analyzing a folder should keep the corrupt file's slot."""
        result = FrameAnalyzer(red_rgb_pipeline, settings).analyze_batch(
            ImageFolder(image_dir), frame_interval_s=2.0
        )

        assert [(r.frame_label, r.top_y, r.elapsed_seconds) for r in result] == [
            ("img_00.png", 0, 0.0),
            ("img_01.png", 7, 2.0),
            ("img_02.png", 14, 6.0),
        ]
        assert result.skipped[0].reason is SkipReason.UNREADABLE
        assert result.skipped[0].frame_index == 2
        assert red_rgb_pipeline.mask.shape == (20, 20)
