"""
DetectorAdapter: owns the detection model for one session.

Public contract:
    await DetectorAdapter.load()          -> None (raises ModelLoadError)
    await DetectorAdapter.detect(frame)   -> DetectionBatch (raises FrameDetectionError)

Constraints:
    - load() runs once per session and is never retried. A failed load
      leaves the adapter permanently unusable until a new adapter is built.
    - Blocking work (model load, inference) runs in a worker thread so the
      event loop driving the frame scheduler is never blocked.
    - The caller keeps at most one detect() in flight; the adapter itself
      does not queue requests.

Non-goals:
    - No suppression of overlapping boxes (see suppression.py).
    - No camera access or drawing.
    - No tracking or temporal state.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, Optional

import numpy as np

from object_detection.config import AppConfig, ModelConfig, load_config
from object_detection.detection import DetectionBatch
from object_detection.errors import FrameDetectionError, ModelLoadError
from object_detection.labels import load_labels
from object_detection.model_loader import load_model
from object_detection.postprocessor import postprocess
from object_detection.preprocessor import preprocess

logger = logging.getLogger(__name__)

ModelLoader = Callable[[ModelConfig], Any]


class DetectorAdapter:
    """COCO object detector using SSD MobileNet via OpenCV DNN.

    Usage:
        adapter = DetectorAdapter(config)
        await adapter.load()                       # once per session
        detections = await adapter.detect(frame)   # BGR numpy array

    Raw candidates are requested generously (max_detections, min_score);
    deduplication is left to the suppression engine.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        loader: ModelLoader = load_model,
    ) -> None:
        """Create an adapter. The model is not loaded until load() is awaited.

        Args:
            config: Application configuration. If None, safe defaults are used.
            loader: Callable that builds the network from a ModelConfig.
                    Must return an object with setInput() and forward().
        """
        if config is None:
            config = load_config()

        self._config = config
        self._loader = loader
        self._net: Any = None
        self._labels: Dict[int, str] = {}
        self._load_attempted = False
        self._load_error: Optional[ModelLoadError] = None

    @property
    def ready(self) -> bool:
        """True once the model has loaded successfully."""
        return self._net is not None

    @property
    def config(self) -> AppConfig:
        """Return the active configuration (read-only)."""
        return self._config

    async def load(self) -> None:
        """Load the model and label map off the event loop.

        Calling again after success is a no-op. Calling again after a
        failure re-raises the original error without retrying.

        Raises:
            ModelLoadError: If the model or labels cannot be loaded.
        """
        if self._load_attempted:
            if self._load_error is not None:
                raise self._load_error
            return

        self._load_attempted = True
        try:
            labels = await asyncio.to_thread(load_labels, self._config.model.labels_path)
            net = await asyncio.to_thread(self._loader, self._config.model)
        except Exception as e:
            logger.error("Model load failed: %s", e)
            self._load_error = ModelLoadError(str(e))
            raise self._load_error from e

        self._labels = labels
        self._net = net
        logger.info(
            "Detector ready (backend=%s, min_score=%.2f, max_detections=%d)",
            self._config.model.backend,
            self._config.detection.min_score,
            self._config.detection.max_detections,
        )

    async def detect(self, frame: np.ndarray) -> DetectionBatch:
        """Detect objects in a single BGR frame.

        Args:
            frame: A BGR image with shape (H, W, 3) and dtype uint8, as
                   returned by cv2.VideoCapture.read().

        Returns:
            Up to max_detections raw detections with score >= min_score,
            sorted by score (descending). Overlapping boxes are not removed.

        Raises:
            FrameDetectionError: If the model is not loaded, the frame is
                invalid, or inference fails.
        """
        if self._net is None:
            raise FrameDetectionError("Model is not loaded.")

        try:
            self._validate_frame(frame)
            return await asyncio.to_thread(self._infer, frame)
        except (TypeError, ValueError) as e:
            raise FrameDetectionError(str(e)) from e
        except Exception as e:
            raise FrameDetectionError(f"Inference failed: {e}") from e

    def _infer(self, frame: np.ndarray) -> DetectionBatch:
        blob = preprocess(frame, self._config.model)

        self._net.setInput(blob)
        output = self._net.forward()

        h, w = frame.shape[:2]
        return postprocess(
            network_output=output,
            frame_width=w,
            frame_height=h,
            labels=self._labels,
            min_score=self._config.detection.min_score,
            max_detections=self._config.detection.max_detections,
        )

    @staticmethod
    def _validate_frame(frame: np.ndarray) -> None:
        """Validate that the input frame meets the API contract.

        Raises:
            TypeError: If frame is not a numpy ndarray.
            ValueError: If frame is empty or has wrong dimensions.
        """
        if not isinstance(frame, np.ndarray):
            raise TypeError(
                f"Expected frame to be a numpy ndarray, "
                f"got {type(frame).__name__}."
            )

        if frame.size == 0:
            raise ValueError(
                "Frame is empty (zero size). "
                "Ensure the video source is providing valid frames."
            )

        if frame.ndim != 3:
            raise ValueError(
                f"Expected a 3-dimensional frame (H, W, C), "
                f"got {frame.ndim} dimensions with shape {frame.shape}."
            )

        if frame.shape[2] != 3:
            raise ValueError(
                f"Expected 3 channels (BGR), got {frame.shape[2]} channels."
            )
