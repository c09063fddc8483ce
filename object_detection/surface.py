"""
Render surface backed by a numpy BGR image.

A thin wrapper over OpenCV drawing calls that gives the renderer the
2D primitives it needs: resize/clear, draw image, stroke and fill
rectangles, measure and draw text. Font sizes are given in pixels and
converted to Hershey font scales.
"""

from typing import Tuple

import cv2
import numpy as np

Color = Tuple[int, int, int]

_FONT = cv2.FONT_HERSHEY_SIMPLEX
# Height in pixels of Hershey Simplex glyphs at fontScale=1.0
_FONT_BASE_PX = 22.0


def _font_params(font_size: float) -> Tuple[float, int]:
    scale = font_size / _FONT_BASE_PX
    thickness = max(1, int(round(scale * 1.5)))
    return scale, thickness


class RenderSurface:
    """A drawable BGR canvas.

    Usage:
        surface = RenderSurface()
        surface.resize(640, 480)
        surface.draw_image(frame, mirror=True)
        surface.stroke_rect(10, 10, 100, 50, (0, 255, 0), 2)
    """

    def __init__(self, width: int = 0, height: int = 0) -> None:
        self.image = np.zeros((height, width, 3), dtype=np.uint8)

    @property
    def width(self) -> int:
        return self.image.shape[1]

    @property
    def height(self) -> int:
        return self.image.shape[0]

    def resize(self, width: int, height: int) -> None:
        """Resize the canvas. Like a canvas element, resizing also clears it."""
        if (width, height) != (self.width, self.height):
            self.image = np.zeros((height, width, 3), dtype=np.uint8)
        else:
            self.image.fill(0)

    def draw_image(self, frame: np.ndarray, mirror: bool = False) -> None:
        """Draw a BGR frame over the whole surface, optionally mirrored."""
        if frame.shape[:2] != self.image.shape[:2]:
            frame = cv2.resize(frame, (self.width, self.height), interpolation=cv2.INTER_AREA)
        if mirror:
            self.image = cv2.flip(frame, 1)
        else:
            np.copyto(self.image, frame)

    def stroke_rect(
        self, x: float, y: float, w: float, h: float, color: Color, line_width: float
    ) -> None:
        cv2.rectangle(
            self.image,
            (int(round(x)), int(round(y))),
            (int(round(x + w)), int(round(y + h))),
            color=color,
            thickness=max(1, int(round(line_width))),
            lineType=cv2.LINE_AA,
        )

    def fill_rect(
        self, x: float, y: float, w: float, h: float, color: Color, alpha: float = 1.0
    ) -> None:
        """Fill a rectangle, blending with the existing pixels when alpha < 1."""
        x1 = max(0, int(round(x)))
        y1 = max(0, int(round(y)))
        x2 = min(self.width, int(round(x + w)))
        y2 = min(self.height, int(round(y + h)))
        if x2 <= x1 or y2 <= y1:
            return

        roi = self.image[y1:y2, x1:x2]
        if alpha >= 1.0:
            roi[:] = color
            return

        overlay = np.empty_like(roi)
        overlay[:] = color
        roi[:] = cv2.addWeighted(overlay, alpha, roi, 1.0 - alpha, 0)

    def measure_text(self, text: str, font_size: float) -> Tuple[int, int]:
        """Return (width, height) in pixels of text rendered at font_size."""
        scale, thickness = _font_params(font_size)
        (text_w, text_h), _baseline = cv2.getTextSize(text, _FONT, scale, thickness)
        return text_w, text_h

    def draw_text(self, text: str, x: float, y: float, color: Color, font_size: float) -> None:
        """Draw text with its baseline starting at (x, y)."""
        scale, thickness = _font_params(font_size)
        cv2.putText(
            self.image,
            text,
            (int(round(x)), int(round(y))),
            _FONT,
            scale,
            color,
            thickness,
            cv2.LINE_AA,
        )
