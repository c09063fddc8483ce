"""
Tests for the display module.
"""

import numpy as np

from object_detection.config import DisplayConfig
from object_detection.detection import Detection
from object_detection.display import DisplayWindow, annotate_status
from object_detection.session import SessionStatus
from object_detection.surface import RenderSurface


def _status(detections=(), detecting=True, error=None):
    return SessionStatus(
        model_loading=False,
        detecting=detecting,
        detections=list(detections),
        fps=12,
        error=error,
    )


def test_annotate_status_draws_on_a_copy():
    image = np.zeros((240, 320, 3), dtype=np.uint8)
    det = Detection(label="person", score=0.9, bbox=(0.0, 0.0, 10.0, 10.0))

    annotated = annotate_status(image, _status([det]))

    assert annotated.shape == image.shape
    assert image.max() == 0
    assert annotated.max() > 0


def test_show_reports_quit_key(monkeypatch):
    shown = []
    monkeypatch.setattr("object_detection.display.cv2.imshow", lambda name, img: shown.append(name))
    monkeypatch.setattr("object_detection.display.cv2.waitKey", lambda delay: ord("q"))

    window = DisplayWindow(DisplayConfig(window_name="Test"))
    keep_going = window.show(RenderSurface(32, 24), _status())

    assert keep_going is False
    assert shown == ["Test"]


def test_show_continues_without_key(monkeypatch):
    monkeypatch.setattr("object_detection.display.cv2.imshow", lambda name, img: None)
    monkeypatch.setattr("object_detection.display.cv2.waitKey", lambda delay: -1)

    window = DisplayWindow(DisplayConfig(show_stats=False))

    assert window.show(RenderSurface(32, 24), _status(error="Camera unavailable.")) is True
