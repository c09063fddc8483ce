"""
Live Object Detection CLI Entrypoint.

Responsibility:
    Parse command-line arguments, configure the application, wire the
    detection session to a video source and a display window, and run
    until the user quits or the video ends.

Usage:
    python main.py                                  # Default webcam
    python main.py --source 1                       # Second webcam
    python main.py --source clip.mp4 --no-mirror    # Video file
    python main.py --config my_config.yaml

This module is the executable entry point. It should not be imported
by other modules.
"""

import argparse
import asyncio
import dataclasses
import logging
import sys

# Configure logging before importing local modules
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("main")

from object_detection.config import AppConfig, load_config
from object_detection.display import DisplayWindow
from object_detection.errors import SourceUnavailableError
from object_detection.session import DetectionSession
from object_detection.surface import RenderSurface
from object_detection.video_source import VideoSource

# How often the main coroutine checks for end of video
_POLL_INTERVAL = 0.25


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Live Object Detection: real-time COCO detection with per-class NMS",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--source",
        type=str,
        help="Input source: webcam index (e.g. '0') or path to a video file.",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Path to YAML configuration file.",
    )
    parser.add_argument(
        "--min-score",
        type=float,
        help="Minimum raw detection score (0.0 - 1.0). Overrides config.",
    )
    parser.add_argument(
        "--backend",
        type=str,
        choices=["cpu", "cuda"],
        help="Compute backend preference. Overrides config.",
    )
    parser.add_argument(
        "--no-mirror",
        action="store_true",
        help="Do not mirror the video horizontally.",
    )

    return parser.parse_args()


def apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """Return config with CLI arguments applied on top."""
    if args.source is not None:
        config = dataclasses.replace(
            config, input=dataclasses.replace(config.input, source=args.source)
        )
    if args.min_score is not None:
        config = dataclasses.replace(
            config, detection=dataclasses.replace(config.detection, min_score=args.min_score)
        )
    if args.backend is not None:
        config = dataclasses.replace(
            config, model=dataclasses.replace(config.model, backend=args.backend)
        )
    if args.no_mirror:
        config = dataclasses.replace(
            config, render=dataclasses.replace(config.render, mirror=False)
        )
    return config


async def run(config: AppConfig) -> int:
    """Load the model, open the source, and detect until quit."""
    session = DetectionSession(config)

    logger.info("Loading detection model...")
    if not await session.open():
        logger.error(session.status.error)
        return 1

    try:
        source = VideoSource(
            source=config.input.source,
            resize_width=config.input.resize_width,
            capture_size=config.input.capture_size,
        )
    except SourceUnavailableError as e:
        session.report_source_error(e)
        logger.error(session.status.error)
        return 1

    surface = RenderSurface()
    window = DisplayWindow(config.display)
    quit_requested = asyncio.Event()

    def on_frame(drawn: RenderSurface) -> None:
        if not window.show(drawn, session.status):
            quit_requested.set()

    session.add_frame_listener(on_frame)

    logger.info("Starting detection. Press 'q' or ESC to quit.")
    try:
        session.start(source, surface)
        while not quit_requested.is_set() and not source.exhausted:
            try:
                await asyncio.wait_for(quit_requested.wait(), timeout=_POLL_INTERVAL)
            except asyncio.TimeoutError:
                pass
    finally:
        await session.close()
        source.release()
        window.close()
        logger.info("Processing finished. Total frames read: %d.", source.frames_read)

    return 0


def main() -> int:
    """Main execution entry."""
    args = parse_args()

    try:
        config = apply_overrides(load_config(args.config), args)
        logger.info("Configuration active for this run.")
    except Exception as e:
        logger.error("Configuration error: %s", e)
        return 1

    try:
        return asyncio.run(run(config))
    except KeyboardInterrupt:
        logger.info("Interrupted by user.")
        return 0


if __name__ == "__main__":
    sys.exit(main())
