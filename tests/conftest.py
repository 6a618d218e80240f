"""Pytest fixtures for Color Tracker tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import numpy as np
import pytest
from numpy.typing import NDArray

from color_tracker.core.config import (
    AnalysisSettings,
    OverlaySettings,
    PipelineSettings,
    Settings,
    SourceSettings,
)
from color_tracker.core.types import Frame
from color_tracker.vision.pipeline import ImagePipeline

# BGR colors
BLUE = (255, 0, 0)
GREEN = (0, 255, 0)
RED = (0, 0, 255)
WHITE = (255, 255, 255)
BLACK = (0, 0, 0)

SQUARE_SIZE = 5
SQUARE_COL = 7


def solid_image(
    height: int,
    width: int,
    color: tuple[int, int, int],
) -> NDArray[np.uint8]:
    """Create a uniformly colored BGR image."""
    image = np.zeros((height, width, 3), dtype=np.uint8)
    image[:, :] = color
    return image


def image_with_square(
    row: int,
    col: int = SQUARE_COL,
    size: int = SQUARE_SIZE,
    shape: tuple[int, int] = (20, 20),
    background: tuple[int, int, int] = BLUE,
    foreground: tuple[int, int, int] = RED,
) -> NDArray[np.uint8]:
    """Create a solid image with one contrasting square."""
    image = solid_image(shape[0], shape[1], background)
    image[row : row + size, col : col + size] = foreground
    return image


@pytest.fixture
def pipeline_settings() -> PipelineSettings:
    """Default pipeline settings."""
    return PipelineSettings()


@pytest.fixture
def settings() -> Settings:
    """Settings with defaults and the skip policy for missing regions."""
    return Settings(
        pipeline=PipelineSettings(),
        analysis=AnalysisSettings(frame_interval_s=1.0, on_no_region="skip"),
        overlay=OverlaySettings(),
        source=SourceSettings(),
    )


@pytest.fixture
def abort_settings(settings: Settings) -> Settings:
    """Settings that abort the batch when a frame has no region."""
    analysis = AnalysisSettings(frame_interval_s=1.0, on_no_region="abort")
    return settings.model_copy(update={"analysis": analysis})


@pytest.fixture
def pipeline(pipeline_settings: PipelineSettings) -> ImagePipeline:
    """Pipeline with wide-open default ranges."""
    return ImagePipeline(pipeline_settings)


@pytest.fixture
def red_rgb_pipeline(pipeline_settings: PipelineSettings) -> ImagePipeline:
    """Pipeline in RGB mode selecting pure red pixels."""
    pipeline = ImagePipeline(pipeline_settings)
    pipeline.switch_threshold_modes()
    pipeline.set_red_threshold([200, 255])
    pipeline.set_green_threshold([0, 50])
    pipeline.set_blue_threshold([0, 50])
    return pipeline


@pytest.fixture
def noisy_image() -> NDArray[np.uint8]:
    """Random BGR image with a fixed seed."""
    rng = np.random.default_rng(42)
    return rng.integers(0, 256, size=(48, 64, 3), dtype=np.uint8)


@pytest.fixture
def square_frames() -> list[Frame]:
    """Three 20x20 frames with a red square at rows 0, 7 and 14."""
    return [
        Frame(label=f"frame_{i}.png", image=image_with_square(row))
        for i, row in enumerate((0, 7, 14))
    ]


@pytest.fixture(autouse=True)
def restore_package_logger() -> Iterator[None]:
    """Drop handlers installed by setup_logging during a test."""
    package_logger = logging.getLogger("color_tracker")
    level = package_logger.level
    yield
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(level)
