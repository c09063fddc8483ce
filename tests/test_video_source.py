"""
Tests for the video source module.
"""

import cv2
import numpy as np
import pytest

from object_detection.errors import SourceUnavailableError
from object_detection.video_source import VideoSource


def _write_video(path, frames=3, size=(64, 48)):
    writer = cv2.VideoWriter(str(path), cv2.VideoWriter_fourcc(*"MJPG"), 10.0, size)
    for i in range(frames):
        frame = np.full((size[1], size[0], 3), i * 40, dtype=np.uint8)
        writer.write(frame)
    writer.release()


def test_missing_source():
    with pytest.raises(SourceUnavailableError, match="not found"):
        VideoSource("no/such/video.mp4")


def test_unsupported_extension(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("not a video", encoding="utf-8")

    with pytest.raises(SourceUnavailableError, match="extension"):
        VideoSource(str(path))


def test_unavailable_webcam():
    with pytest.raises(SourceUnavailableError, match="webcam device 99"):
        VideoSource("99")


def test_reads_video_until_exhausted(tmp_path):
    path = tmp_path / "clip.avi"
    _write_video(path, frames=3)

    with VideoSource(str(path)) as source:
        frames = [source.read() for _ in range(3)]
        assert all(f is not None and f.shape == (48, 64, 3) for f in frames)
        assert source.exhausted is False

        assert source.read() is None
        assert source.exhausted is True
        assert source.frames_read == 3

    assert source.read() is None


def test_resize_width(tmp_path):
    path = tmp_path / "clip.avi"
    _write_video(path, frames=1, size=(64, 48))

    with VideoSource(str(path), resize_width=32) as source:
        frame = source.read()

    assert frame.shape == (24, 32, 3)
