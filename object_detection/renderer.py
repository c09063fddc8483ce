"""
Overlay rendering for the detection pipeline.

Responsibility:
    Draw the mirrored video frame and the suppressed detections onto a
    RenderSurface: palette-colored box strokes, filled label backgrounds,
    and label text, all sized relative to the surface width.

Non-goals:
    - No window management or display logic.
    - No detection or suppression logic.
    - No per-object color identity: colors follow position in the batch.
"""

from typing import List, Tuple

import numpy as np

from object_detection.config import RenderConfig
from object_detection.detection import Detection, DetectionBatch
from object_detection.surface import Color, RenderSurface

_PALETTE_HEX = [
    "#4f46e5", "#10b981", "#f59e0b", "#ef4444", "#8b5cf6",
    "#06b6d4", "#ec4899", "#14b8a6", "#f97316", "#6366f1",
]

_TEXT_COLOR: Color = (255, 255, 255)
_LABEL_PAD_X = 6
_LABEL_PAD_Y = 8


def _hex_to_bgr(value: str) -> Color:
    value = value.lstrip("#")
    r, g, b = (int(value[i:i + 2], 16) for i in (0, 2, 4))
    return (b, g, r)


PALETTE: List[Color] = [_hex_to_bgr(c) for c in _PALETTE_HEX]


def color_for(index: int) -> Color:
    """Return the palette color for the detection at this batch position."""
    return PALETTE[index % len(PALETTE)]


def format_label(detection: Detection) -> str:
    """Return the label text, e.g. 'person 87%'."""
    return f"{detection.label} {round(detection.score * 100)}%"


def scaled_sizes(surface_width: int, config: RenderConfig) -> Tuple[float, float]:
    """Return (line_width, font_size) for a surface of the given width."""
    scale = surface_width / config.reference_width
    line_width = max(config.min_line_width, config.line_width * scale)
    font_size = max(config.min_font_size, config.font_size * scale)
    return line_width, font_size


class Renderer:
    """Draws frames and detection overlays onto a RenderSurface.

    Usage:
        renderer = Renderer(config.render)
        renderer.draw_frame(surface, frame)
        renderer.draw_detections(surface, detections)
    """

    def __init__(self, config: RenderConfig) -> None:
        self._config = config

    def draw_frame(self, surface: RenderSurface, frame: np.ndarray) -> None:
        """Resize the surface to the frame's native size and draw the frame."""
        h, w = frame.shape[:2]
        surface.resize(w, h)
        surface.draw_image(frame, mirror=self._config.mirror)

    def draw_detections(self, surface: RenderSurface, detections: DetectionBatch) -> None:
        """Draw one box and label per detection.

        Boxes are given in source-frame coordinates and mirrored to match
        the mirrored frame. Labels sit above the box when there is room,
        otherwise inside its top edge.
        """
        line_width, font_size = scaled_sizes(surface.width, self._config)
        label_h = font_size + _LABEL_PAD_Y

        for i, det in enumerate(detections):
            ox, y, w, h = det.bbox
            x = surface.width - ox - w if self._config.mirror else ox
            color = color_for(i)

            surface.stroke_rect(x, y, w, h, color, line_width)

            label = format_label(det)
            text_w, _text_h = surface.measure_text(label, font_size)
            label_w = text_w + 2 * _LABEL_PAD_X
            label_y = y - label_h if y > label_h else y

            surface.fill_rect(x, label_y, label_w, label_h, color, alpha=self._config.label_alpha)
            surface.draw_text(label, x + _LABEL_PAD_X, label_y + font_size + 1, _TEXT_COLOR, font_size)
