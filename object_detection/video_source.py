"""
Video source for the detection pipeline.

Responsibility:
    Open a webcam or video file with OpenCV and hand out frames one read
    at a time. A read that produces no frame (camera warming up, dropped
    frame, end of file) returns None instead of raising, which the frame
    scheduler treats as "no frame ready".

Non-goals:
    - No detection, drawing, or output writing.
    - No retry on a source that cannot be opened.
    - Still images and image directories are not supported.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Tuple, Union

import cv2
import numpy as np

from object_detection.errors import SourceUnavailableError

logger = logging.getLogger(__name__)

# Video extensions recognized by this source
_VIDEO_EXTENSIONS = {".mp4", ".avi", ".mov", ".mkv", ".wmv", ".flv", ".webm"}


class VideoSource:
    """Frame reader for webcams and video files.

    The source type is detected at initialization:
        - Integer or digit string  → webcam device index
        - File with video extension → video file

    Usage:
        with VideoSource("0") as source:
            frame = source.read()   # BGR array, or None if not ready
    """

    def __init__(
        self,
        source: Union[str, int],
        resize_width: Optional[int] = None,
        capture_size: Optional[Tuple[int, int]] = None,
    ) -> None:
        """Open the source.

        Args:
            source: Webcam index (int or digit string) or video file path.
            resize_width: Optional width to downscale frames. Aspect ratio
                          is preserved. None means no resizing.
            capture_size: Requested (width, height) for webcams. Ignored
                          for files.

        Raises:
            SourceUnavailableError: If the source does not exist, has an
                unsupported extension, or cannot be opened.
        """
        self._resize_width = resize_width
        self._cap: Optional[cv2.VideoCapture] = None
        self._frames_read = 0
        self._exhausted = False

        source_str = str(source).strip()

        if source_str.isdigit():
            self._mode = "webcam"
            self._open(int(source_str))
            if capture_size is not None:
                self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, capture_size[0])
                self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, capture_size[1])
        elif os.path.isfile(source_str):
            ext = Path(source_str).suffix.lower()
            if ext not in _VIDEO_EXTENSIONS:
                raise SourceUnavailableError(
                    f"Unrecognized video extension: '{ext}' for source '{source_str}'. "
                    f"Supported videos: {sorted(_VIDEO_EXTENSIONS)}."
                )
            self._mode = "video"
            self._open(source_str)
        else:
            raise SourceUnavailableError(
                f"Video source not found: '{source_str}'. "
                f"Provide a valid video file path or device index."
            )

        logger.info("VideoSource opened: mode=%s, source=%s", self._mode, source_str)

    def _open(self, source: Union[str, int]) -> None:
        self._cap = cv2.VideoCapture(source)
        if not self._cap.isOpened():
            self._cap.release()
            self._cap = None
            source_desc = (
                f"webcam device {source}" if isinstance(source, int)
                else f"video file '{source}'"
            )
            raise SourceUnavailableError(
                f"Failed to open {source_desc}. "
                f"Ensure the device exists and camera access is permitted."
            )

    @property
    def mode(self) -> str:
        return self._mode

    @property
    def frames_read(self) -> int:
        return self._frames_read

    @property
    def exhausted(self) -> bool:
        """True once a video file has reached its end. Webcams never exhaust."""
        return self._exhausted

    def read(self) -> Optional[np.ndarray]:
        """Return the next BGR frame, or None if no frame is available."""
        cap = self._cap
        if cap is None:
            return None

        ret, frame = cap.read()
        if not ret or frame is None:
            if self._mode == "video":
                if not self._exhausted:
                    logger.info("End of video reached after %d frames.", self._frames_read)
                self._exhausted = True
            else:
                logger.debug("Webcam returned no frame.")
            return None

        self._frames_read += 1
        return self._maybe_resize(frame)

    def _maybe_resize(self, frame: np.ndarray) -> np.ndarray:
        """Resize frame if resize_width is configured, preserving aspect ratio."""
        if self._resize_width is None:
            return frame

        h, w = frame.shape[:2]
        if w <= self._resize_width:
            return frame

        scale = self._resize_width / w
        new_h = int(h * scale)
        return cv2.resize(frame, (self._resize_width, new_h), interpolation=cv2.INTER_AREA)

    def release(self) -> None:
        """Release the capture handle."""
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            logger.debug("VideoCapture released.")

    def __enter__(self) -> "VideoSource":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __del__(self) -> None:
        """Safety net: release resources if not explicitly released."""
        self.release()
