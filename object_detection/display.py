"""
Presentation window for the live detection pipeline.

Responsibility:
    Show the rendered surface in an OpenCV window with a statistics bar
    (objects, types, fps), a LIVE badge and a detected-count badge, and
    report quit key presses. Holds no algorithmic logic.

Non-goals:
    - No detection, suppression or box rendering (see renderer.py).
    - No file output.
"""

import logging

import cv2
import numpy as np

from object_detection.config import DisplayConfig
from object_detection.session import SessionStatus
from object_detection.summary import summarize
from object_detection.surface import RenderSurface

logger = logging.getLogger(__name__)

_FONT = cv2.FONT_HERSHEY_SIMPLEX
_BAR_HEIGHT = 28
_BAR_COLOR = (40, 30, 20)
_LIVE_COLOR = (68, 68, 239)
_BADGE_COLOR = (229, 70, 79)
_WHITE = (255, 255, 255)

_QUIT_KEYS = {ord("q"), 27}  # 'q' or ESC


def annotate_status(image: np.ndarray, status: SessionStatus) -> np.ndarray:
    """Return a copy of image with the stats bar and badges drawn on it."""
    annotated = image.copy()
    h, w = annotated.shape[:2]
    if h == 0 or w == 0:
        return annotated

    types = len(summarize(status.detections))
    stats = f"Objects: {len(status.detections)}   Types: {types}   {status.fps} FPS"

    cv2.rectangle(annotated, (0, h - _BAR_HEIGHT), (w, h), _BAR_COLOR, cv2.FILLED)
    cv2.putText(annotated, stats, (8, h - 9), _FONT, 0.5, _WHITE, 1, cv2.LINE_AA)

    if status.detecting:
        cv2.rectangle(annotated, (8, 8), (64, 30), _LIVE_COLOR, cv2.FILLED)
        cv2.putText(annotated, "LIVE", (16, 25), _FONT, 0.5, _WHITE, 1, cv2.LINE_AA)

    if status.detections:
        badge = f"{len(status.detections)} detected"
        (text_w, _), _ = cv2.getTextSize(badge, _FONT, 0.5, 1)
        cv2.rectangle(annotated, (w - text_w - 24, 8), (w - 8, 30), _BADGE_COLOR, cv2.FILLED)
        cv2.putText(annotated, badge, (w - text_w - 16, 25), _FONT, 0.5, _WHITE, 1, cv2.LINE_AA)

    return annotated


class DisplayWindow:
    """OpenCV window showing the detection overlay.

    Usage:
        window = DisplayWindow(config.display)
        keep_going = window.show(surface, session.status)
        ...
        window.close()
    """

    def __init__(self, config: DisplayConfig) -> None:
        self._config = config
        self._last_error = None

    def show(self, surface: RenderSurface, status: SessionStatus) -> bool:
        """Show the surface. Returns False when the user asks to quit."""
        if status.error and status.error != self._last_error:
            logger.error(status.error)
        self._last_error = status.error

        image = surface.image
        if self._config.show_stats:
            image = annotate_status(image, status)

        cv2.imshow(self._config.window_name, image)
        key = cv2.waitKey(1) & 0xFF

        if key in _QUIT_KEYS:
            logger.info("Quit signal received (key press).")
            return False
        return True

    def close(self) -> None:
        cv2.destroyAllWindows()
