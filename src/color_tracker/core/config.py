"""Application configuration via Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PipelineSettings(BaseSettings):
    """Image pipeline defaults and fixed stage parameters."""

    model_config = SettingsConfigDict(env_prefix="PIPELINE_")

    # Wide-open defaults: every pixel passes the threshold stage
    hue_range: tuple[float, float] = (0.0, 180.0)
    sat_range: tuple[float, float] = (0.0, 255.0)
    lum_range: tuple[float, float] = (0.0, 255.0)
    red_range: tuple[float, float] = (0.0, 255.0)
    green_range: tuple[float, float] = (0.0, 255.0)
    blue_range: tuple[float, float] = (0.0, 255.0)
    start_mode: Literal["hsl", "rgb"] = "hsl"

    blur_ksize: int = 1
    blur_sigma: float = 5.0
    morph_iterations: int = 1
    morph_border_value: float = -1.0

    dropper_radius: float = 20.0


class AnalysisSettings(BaseSettings):
    """Batch analysis parameters."""

    model_config = SettingsConfigDict(env_prefix="ANALYSIS_")

    frame_interval_s: float = 1.0
    on_no_region: Literal["skip", "abort"] = "skip"


class OverlaySettings(BaseSettings):
    """Preview drawing settings (BGR colors)."""

    model_config = SettingsConfigDict(env_prefix="OVERLAY_")

    roi_color: tuple[int, int, int] = (255, 0, 0)
    roi_thickness: int = 2
    box_color: tuple[int, int, int] = (0, 255, 0)
    box_thickness: int = 5


class SourceSettings(BaseSettings):
    """Image folder loading settings."""

    model_config = SettingsConfigDict(env_prefix="SOURCE_")

    image_suffixes: tuple[str, ...] = (
        ".jpg",
        ".jpeg",
        ".png",
        ".bmp",
        ".tif",
        ".tiff",
    )


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = "INFO"
    file: str | None = None
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"


class Settings(BaseSettings):
    """Root settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)
    analysis: AnalysisSettings = Field(default_factory=AnalysisSettings)
    overlay: OverlaySettings = Field(default_factory=OverlaySettings)
    source: SourceSettings = Field(default_factory=SourceSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings instance."""
    return Settings()
