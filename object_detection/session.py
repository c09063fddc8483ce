"""
DetectionSession: the boundary the presentation layer talks to.

Wires the detector adapter, renderer, suppression threshold and frame
scheduler around a single PipelineState, and exposes:

    await session.open()             load the model (once)
    session.start(source, surface)   begin detecting
    session.stop()                   stop detecting
    await session.close()            stop, drain the last tick
    session.status                   SessionStatus snapshot

Only session-fatal conditions appear in SessionStatus.error: a failed
model load, or a video source reported through report_source_error().
"""

import logging
from dataclasses import dataclass
from typing import Optional

from object_detection.config import AppConfig, load_config
from object_detection.detection import DetectionBatch
from object_detection.detector import DetectorAdapter
from object_detection.errors import ModelLoadError, SourceUnavailableError
from object_detection.renderer import Renderer
from object_detection.scheduler import FrameListener, FrameScheduler, PipelineState, SchedulerState
from object_detection.surface import RenderSurface

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionStatus:
    """What the presentation layer renders."""

    model_loading: bool
    detecting: bool
    detections: DetectionBatch
    fps: int
    error: Optional[str]


class DetectionSession:
    """One detection session from model load to teardown."""

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        detector: Optional[DetectorAdapter] = None,
    ) -> None:
        if config is None:
            config = load_config()

        self._config = config
        self._detector = detector if detector is not None else DetectorAdapter(config)
        self._state = PipelineState()
        self._model_loading = True
        self._scheduler = FrameScheduler(
            detector=self._detector,
            renderer=Renderer(config.render),
            state=self._state,
            config=config.scheduler,
            iou_threshold=config.detection.nms_iou_threshold,
        )

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def scheduler(self) -> FrameScheduler:
        return self._scheduler

    @property
    def status(self) -> SessionStatus:
        return SessionStatus(
            model_loading=self._model_loading,
            detecting=self._state.running,
            detections=list(self._state.latest_detections),
            fps=self._state.fps,
            error=self._state.last_error,
        )

    async def open(self) -> bool:
        """Load the model. Returns False if loading failed.

        A failure is terminal for this session: the error stays in the
        status and the model is never reloaded.
        """
        try:
            await self._detector.load()
        except ModelLoadError:
            self._state.model_ready = False
            self._state.last_error = ModelLoadError.user_message
            return False
        finally:
            self._model_loading = False

        self._state.model_ready = True
        return True

    def start(self, source, surface: RenderSurface) -> bool:
        """Start detecting frames from source onto surface.

        Returns False, without starting, when the model is not ready.
        """
        if not self._state.model_ready:
            logger.warning("Cannot start detection: model is not ready.")
            return False
        if self._scheduler.status is SchedulerState.RUNNING:
            return True

        self._scheduler.start(source, surface)
        return True

    def stop(self) -> None:
        self._scheduler.stop()

    async def close(self) -> None:
        """Tear the session down.

        Cancels the tick and the fps sampler, then waits for a tick still
        reading or detecting to finish. Release the video source after this
        returns.
        """
        self._scheduler.stop()
        await self._scheduler.drain()
        logger.info("Detection session closed.")

    def report_source_error(self, error: SourceUnavailableError) -> None:
        """Surface a camera/video failure, independent of model state."""
        logger.error("Video source unavailable: %s", error)
        self._state.last_error = SourceUnavailableError.user_message

    def add_frame_listener(self, listener: FrameListener) -> None:
        self._scheduler.add_frame_listener(listener)
