"""
Tests for the renderer and render surface modules.
"""

import numpy as np
import pytest

from object_detection.config import RenderConfig
from object_detection.detection import Detection
from object_detection.renderer import PALETTE, Renderer, color_for, format_label, scaled_sizes
from object_detection.surface import RenderSurface


class RecordingSurface(RenderSurface):
    """RenderSurface that records drawing calls."""

    def __init__(self, width, height, text_width=40):
        super().__init__(width, height)
        self.text_width = text_width
        self.calls = []

    def stroke_rect(self, x, y, w, h, color, line_width):
        self.calls.append(("stroke", (x, y, w, h), color, line_width))

    def fill_rect(self, x, y, w, h, color, alpha=1.0):
        self.calls.append(("fill", (x, y, w, h), color, alpha))

    def measure_text(self, text, font_size):
        return self.text_width, int(font_size)

    def draw_text(self, text, x, y, color, font_size):
        self.calls.append(("text", text, (x, y), font_size))

    def of_kind(self, kind):
        return [c for c in self.calls if c[0] == kind]


def _det(label="person", score=0.87, bbox=(100.0, 100.0, 50.0, 80.0)):
    return Detection(label=label, score=score, bbox=bbox)


def test_palette_cycles():
    """Colors follow batch position modulo the 10-color palette."""
    assert len(PALETTE) == 10
    assert color_for(0) == PALETTE[0]
    assert color_for(10) == color_for(0)
    assert color_for(13) == PALETTE[3]
    # '#4f46e5' in BGR
    assert PALETTE[0] == (229, 70, 79)


def test_format_label():
    assert format_label(_det(score=0.873)) == "person 87%"
    assert format_label(_det(label="cell phone", score=0.5)) == "cell phone 50%"


def test_sizes_scale_with_width_and_respect_floors():
    config = RenderConfig()

    line_width, font_size = scaled_sizes(1000, config)
    assert line_width == pytest.approx(5.0)
    assert font_size == pytest.approx(28.0)

    line_width, font_size = scaled_sizes(200, config)
    assert line_width == pytest.approx(2.0)
    assert font_size == pytest.approx(12.0)


def test_boxes_are_mirrored():
    """Box x is mirrored to match the mirrored frame."""
    surface = RecordingSurface(640, 480)

    Renderer(RenderConfig(mirror=True)).draw_detections(surface, [_det()])

    stroke = surface.of_kind("stroke")[0]
    assert stroke[1] == (640 - 100 - 50, 100.0, 50.0, 80.0)
    assert stroke[2] == PALETTE[0]


def test_boxes_unmirrored_when_disabled():
    surface = RecordingSurface(640, 480)

    Renderer(RenderConfig(mirror=False)).draw_detections(surface, [_det()])

    assert surface.of_kind("stroke")[0][1] == (100.0, 100.0, 50.0, 80.0)


def test_label_above_box_when_room():
    """The label sits above the box and is sized to the text."""
    surface = RecordingSurface(500, 400, text_width=40)

    Renderer(RenderConfig()).draw_detections(surface, [_det(bbox=(10.0, 100.0, 50.0, 50.0))])

    fill = surface.of_kind("fill")[0]
    # font 14 at reference width: label height 22, width 40 + 12
    x, y, w, h = fill[1]
    assert (w, h) == (52, 22)
    assert y == pytest.approx(100.0 - 22)
    assert fill[3] == pytest.approx(0.85)

    text = surface.of_kind("text")[0]
    assert text[1] == "person 87%"
    assert text[2] == (pytest.approx(x + 6), pytest.approx(y + 15))


def test_label_inside_box_near_top_edge():
    """Without room above, the label goes inside the top of the box."""
    surface = RecordingSurface(500, 400)

    Renderer(RenderConfig()).draw_detections(surface, [_det(bbox=(10.0, 5.0, 50.0, 50.0))])

    assert surface.of_kind("fill")[0][1][1] == pytest.approx(5.0)


def test_each_detection_gets_next_color():
    surface = RecordingSurface(500, 400)
    detections = [_det(bbox=(i * 10.0, 50.0, 5.0, 5.0)) for i in range(12)]

    Renderer(RenderConfig()).draw_detections(surface, detections)

    colors = [c[2] for c in surface.of_kind("stroke")]
    assert colors == [color_for(i) for i in range(12)]


def test_draw_frame_resizes_and_mirrors():
    """The surface takes the frame size and shows it mirrored."""
    frame = np.zeros((4, 6, 3), dtype=np.uint8)
    frame[:, 0] = (255, 255, 255)  # left column white
    surface = RenderSurface()

    Renderer(RenderConfig()).draw_frame(surface, frame)

    assert (surface.width, surface.height) == (6, 4)
    assert surface.image[:, 5].min() == 255
    assert surface.image[:, 0].max() == 0


def test_surface_primitives_draw_pixels():
    """Real OpenCV drawing touches the expected regions."""
    surface = RenderSurface(100, 100)

    surface.fill_rect(10, 10, 20, 20, (0, 0, 255), alpha=1.0)
    assert tuple(surface.image[15, 15]) == (0, 0, 255)
    assert tuple(surface.image[50, 50]) == (0, 0, 0)

    surface.fill_rect(60, 60, 20, 20, (200, 200, 200), alpha=0.5)
    assert 90 <= surface.image[70, 70, 0] <= 110

    surface.stroke_rect(40, 40, 10, 10, (0, 255, 0), 2)
    assert surface.image[40, 45, 1] > 0

    text_w, text_h = surface.measure_text("person 87%", 14)
    assert text_w > 0 and text_h > 0

    # Off-surface rectangles are ignored
    surface.fill_rect(-50, -50, 10, 10, (255, 0, 0))


def test_surface_resize_clears():
    surface = RenderSurface(10, 10)
    surface.image[:] = 7

    surface.resize(10, 10)
    assert surface.image.max() == 0

    surface.resize(20, 5)
    assert surface.image.shape == (5, 20, 3)
