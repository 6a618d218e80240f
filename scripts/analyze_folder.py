#!/usr/bin/env python3
"""Measure a colored region across a folder of time-lapse images.

Each image is thresholded by color, the largest matching region is located,
and its highest and lowest pixel rows are reported with the elapsed time.
Images are taken in file-name order and assumed to be evenly spaced.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from color_tracker.analysis.summary import SeriesSummary, summarize
from color_tracker.core.config import get_settings
from color_tracker.core.exceptions import ColorTrackerError, NoRegionDetectedError
from color_tracker.core.logging import get_logger, setup_logging
from color_tracker.core.types import BatchResult, ThresholdMode
from color_tracker.pipeline.analyzer import FrameAnalyzer
from color_tracker.source.folder import ImageFolder, load_image
from color_tracker.vision.pipeline import ImagePipeline

logger = get_logger(__name__)


def configure_pipeline(pipeline: ImagePipeline, args: argparse.Namespace) -> None:
    """Apply command-line threshold, mode and ROI options to a pipeline.

    Without ``--mode`` the configured start mode is kept, except that the
    color dropper switches to RGB since it only sets the RGB ranges.

    Args:
        pipeline: Pipeline to configure
        args: Parsed arguments
    """
    mode = ThresholdMode[args.mode.upper()] if args.mode is not None else None

    setters = {
        "hue": pipeline.set_hue_threshold,
        "sat": pipeline.set_sat_threshold,
        "lum": pipeline.set_lum_threshold,
        "red": pipeline.set_red_threshold,
        "green": pipeline.set_green_threshold,
        "blue": pipeline.set_blue_threshold,
    }
    for name, setter in setters.items():
        values = getattr(args, name)
        if values is not None:
            stored = setter(values)
            logger.info("%s range: %g..%g", name, stored.low, stored.high)

    if args.sample_image is not None:
        sample = load_image(args.sample_image)
        x, y = args.sample_point
        red, green, blue = pipeline.sample_color(sample, x, y)
        logger.info(
            "Sampled RGB ranges: R %g..%g G %g..%g B %g..%g",
            red.low,
            red.high,
            green.low,
            green.high,
            blue.low,
            blue.high,
        )
        if mode is None:
            mode = ThresholdMode.RGB
        elif mode is ThresholdMode.HSL:
            logger.warning("Sampled RGB ranges have no effect in HSL mode")

    if mode is not None and pipeline.mode is not mode:
        pipeline.switch_threshold_modes()
    logger.info("Threshold mode: %s", pipeline.mode.name)

    if args.roi is not None:
        x1, y1, x2, y2 = args.roi
        pipeline.enable_roi((x1, y1), (x2, y2))


def print_results(result: BatchResult, summary: SeriesSummary) -> None:
    """Print measurements and summary to console."""
    print("\n" + "=" * 64)
    print("MEASUREMENTS")
    print("=" * 64)
    print(f"{'Frame':<7} {'File':<24} {'Time (s)':<10} {'Highest':<9} {'Lowest':<9}")
    print("-" * 64)

    for r in result.records:
        print(
            f"{r.frame_index:<7} "
            f"{r.frame_label[:24]:<24} "
            f"{r.elapsed_seconds:<10.3f} "
            f"{r.top_y:<9} "
            f"{r.bottom_y:<9}"
        )

    if result.skipped:
        print("\nSkipped frames:")
        for s in result.skipped:
            print(f"  {s.frame_index:<5} {s.frame_label} ({s.reason.name.lower()})")

    print("\n" + "=" * 64)
    print("SUMMARY")
    print("=" * 64)
    print(f"Frames:            {summary.total_frames}")
    print(f"Measured:          {summary.measured}")
    print(f"No region:         {summary.no_region}")
    print(f"Unreadable:        {summary.unreadable}")

    if summary.highest_top_y is not None:
        print(f"\nHighest pixel:     {summary.highest_top_y}")
        print(f"Lowest pixel:      {summary.lowest_bottom_y}")
        print(f"Top travel:        {summary.top_travel_px} px")
        print(f"Duration:          {summary.duration_s:.3f} s")


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(description="Measure a colored region over an image sequence")
    parser.add_argument("folder", type=Path, help="Folder of images to analyze")
    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between images (default: from settings)",
    )
    parser.add_argument(
        "--mode",
        choices=["hsl", "rgb"],
        default=None,
        help="Threshold color model (default: from settings, or rgb with --sample-image)",
    )
    for name in ("hue", "sat", "lum", "red", "green", "blue"):
        parser.add_argument(
            f"--{name}",
            type=float,
            nargs=2,
            metavar=("LOW", "HIGH"),
            help=f"Inclusive {name} range",
        )
    parser.add_argument(
        "--sample-image",
        type=Path,
        help="Image to pick the RGB ranges from (color dropper)",
    )
    parser.add_argument(
        "--sample-point",
        type=int,
        nargs=2,
        metavar=("X", "Y"),
        help="Pixel to sample in --sample-image",
    )
    parser.add_argument(
        "--roi",
        type=int,
        nargs=4,
        metavar=("X1", "Y1", "X2", "Y2"),
        help="Restrict analysis to this rectangle",
    )
    parser.add_argument(
        "--on-no-region",
        choices=["skip", "abort"],
        default=None,
        help="What to do with frames where nothing is detected",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Override the configured log level",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if (args.sample_image is None) != (args.sample_point is None):
        parser.error("--sample-image and --sample-point must be given together")

    settings = get_settings()
    if args.on_no_region is not None:
        analysis = settings.analysis.model_copy(update={"on_no_region": args.on_no_region})
        settings = settings.model_copy(update={"analysis": analysis})
    setup_logging(settings.logging, level=args.log_level)

    try:
        frames = ImageFolder(args.folder, settings.source)
        pipeline = ImagePipeline(settings.pipeline)
        configure_pipeline(pipeline, args)

        analyzer = FrameAnalyzer(pipeline, settings)
        result = analyzer.analyze_batch(frames, args.interval)

    except NoRegionDetectedError as e:
        logger.error("%s. Adjust the thresholds or use --on-no-region skip", e.message)
        return 1

    except ColorTrackerError as e:
        logger.error("%s", e)
        return 1

    print_results(result, summarize(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
