"""
Frame scheduler: the per-frame detection loop.

Responsibility:
    Drive a continuous, cooperative loop on the asyncio event loop. Each
    tick pulls a frame from the video source, draws it, runs detection and
    suppression, draws the overlay, and counts the frame. An independent
    sampler task turns the frame count into frames per second.

Concurrency:
    - Everything here runs on one event loop thread. Blocking work (frame
      read, inference) is awaited through worker threads, so at most one
      detect() is in flight per session and slow inference lowers the
      detection rate instead of queueing frames.
    - Each start() opens a new session generation. stop() bumps the
      generation, so any tick still awaiting the detector discards its
      result when it resumes. The next start() holds its first tick until
      that leftover tick has finished, and drain() awaits it.

Failure behavior:
    - A failed detect() skips the frame; the previous detections stay on
      screen. Nothing is surfaced to the presentation layer.
    - Any other exception in a tick (e.g. from the source) is logged and
      the tick is skipped.
    - The next tick is always scheduled while the session is current.
"""

import asyncio
import enum
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

import numpy as np

from object_detection.config import SchedulerConfig
from object_detection.detection import DetectionBatch
from object_detection.errors import FrameDetectionError
from object_detection.renderer import Renderer
from object_detection.suppression import suppress
from object_detection.surface import RenderSurface

logger = logging.getLogger(__name__)

FrameListener = Callable[[RenderSurface], None]


class SchedulerState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass
class PipelineState:
    """Mutable per-session pipeline state.

    Written only by the frame scheduler and its fps sampler, both on the
    event loop thread.
    """

    model_ready: bool = False
    running: bool = False
    latest_detections: DetectionBatch = field(default_factory=list)
    fps: int = 0
    last_error: Optional[str] = None


@dataclass
class FrameCounter:
    """Frames counted since the start of the current sampling window."""

    frames: int = 0
    window_start: float = 0.0

    def reset(self, now: float) -> None:
        self.frames = 0
        self.window_start = now

    def increment(self) -> None:
        self.frames += 1

    def sample(self, now: float) -> int:
        """Return frames per second for the window ending now, then reset."""
        elapsed = now - self.window_start
        fps = round(self.frames / elapsed) if elapsed > 0 else 0
        self.reset(now)
        return fps


class FrameScheduler:
    """Idle → Running → Stopped loop driving detection for one surface.

    Usage:
        scheduler = FrameScheduler(adapter, renderer, state, config.scheduler, 0.5)
        scheduler.start(source, surface)   # inside a running event loop
        ...
        scheduler.stop()

    The source needs a read() method returning a BGR frame, or None when
    no frame is available yet. The detector needs an async
    detect(frame) method returning a DetectionBatch.
    """

    def __init__(
        self,
        detector,
        renderer: Renderer,
        state: PipelineState,
        config: SchedulerConfig,
        iou_threshold: float,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._detector = detector
        self._renderer = renderer
        self._state = state
        self._config = config
        self._iou_threshold = iou_threshold
        self._clock = clock

        self._status = SchedulerState.IDLE
        self._generation = 0
        self._counter = FrameCounter()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._tick_handle: Optional[asyncio.TimerHandle] = None
        self._tick_task: Optional[asyncio.Task] = None
        self._sampler_task: Optional[asyncio.Task] = None
        self._source = None
        self._surface: Optional[RenderSurface] = None
        self._listeners: List[FrameListener] = []

    @property
    def status(self) -> SchedulerState:
        return self._status

    @property
    def counter(self) -> FrameCounter:
        return self._counter

    def add_frame_listener(self, listener: FrameListener) -> None:
        """Register a callable invoked with the surface after each drawn tick."""
        self._listeners.append(listener)

    def start(self, source, surface: RenderSurface) -> None:
        """Begin a new session. Must be called from within a running event loop.

        Raises:
            RuntimeError: If a session is already running or no event loop
                is running.
        """
        if self._status is SchedulerState.RUNNING:
            raise RuntimeError("Frame scheduler is already running.")

        self._loop = asyncio.get_running_loop()
        self._generation += 1
        generation = self._generation

        self._source = source
        self._surface = surface
        self._state.running = True
        self._state.last_error = None
        self._state.latest_detections = []
        self._state.fps = 0
        self._counter.reset(self._clock())
        self._status = SchedulerState.RUNNING

        self._sampler_task = self._loop.create_task(self._sample_fps(generation))

        # A tick left over from the previous session may still be inside
        # detect(); the first tick of this session waits for it.
        previous = self._tick_task
        if previous is not None and not previous.done():
            previous.add_done_callback(lambda _task: self._resume(generation))
        else:
            self._schedule_tick(generation)
        logger.info("Frame scheduler started (session %d).", generation)

    def stop(self) -> None:
        """Stop the current session. Safe to call at any time, including
        while a detection call is in flight."""
        if self._status is not SchedulerState.RUNNING:
            return

        self._generation += 1

        if self._tick_handle is not None:
            self._tick_handle.cancel()
            self._tick_handle = None
        if self._sampler_task is not None:
            self._sampler_task.cancel()
            self._sampler_task = None
        # An in-flight tick finishes on its own and discards its result.
        # Use drain() to wait for it.

        self._source = None
        self._surface = None
        self._state.running = False
        self._state.latest_detections = []
        self._state.fps = 0
        self._counter.reset(self._clock())
        self._status = SchedulerState.STOPPED
        logger.info("Frame scheduler stopped.")

    async def drain(self) -> None:
        """Wait for the tick in progress, if any, to finish.

        Call after stop() before releasing the video source, so no worker
        thread is still reading from it.
        """
        task = self._tick_task
        if task is not None and not task.done():
            await asyncio.wait({task})

    # ------------------------------------------------------------------
    # Tick loop
    # ------------------------------------------------------------------

    def _schedule_tick(self, generation: int) -> None:
        self._tick_handle = self._loop.call_later(
            self._config.tick_interval, self._on_tick, generation
        )

    def _resume(self, generation: int) -> None:
        if generation == self._generation:
            self._schedule_tick(generation)

    def _on_tick(self, generation: int) -> None:
        self._tick_handle = None
        if generation != self._generation:
            return
        self._tick_task = self._loop.create_task(self._run_tick(generation))

    async def _run_tick(self, generation: int) -> None:
        try:
            await self._process_frame(generation)
        except Exception:
            logger.exception("Frame tick failed; skipping frame.")
        finally:
            if generation == self._generation:
                self._schedule_tick(generation)

    async def _process_frame(self, generation: int) -> None:
        source, surface = self._source, self._surface

        frame: Optional[np.ndarray] = await asyncio.to_thread(source.read)
        if generation != self._generation or frame is None:
            return

        self._renderer.draw_frame(surface, frame)

        try:
            raw = await self._detector.detect(frame)
        except Exception as e:
            if generation != self._generation:
                return
            if isinstance(e, FrameDetectionError):
                logger.debug("Skipping frame: %s", e)
            else:
                logger.warning("Detector raised %s; skipping frame.", type(e).__name__)
            self._renderer.draw_detections(surface, self._state.latest_detections)
        else:
            if generation != self._generation:
                logger.debug("Discarding detections from a stopped session.")
                return
            detections = suppress(raw, self._iou_threshold)
            self._state.latest_detections = detections
            self._renderer.draw_detections(surface, detections)

        self._counter.increment()
        for listener in self._listeners:
            listener(surface)

    # ------------------------------------------------------------------
    # FPS sampling
    # ------------------------------------------------------------------

    async def _sample_fps(self, generation: int) -> None:
        while generation == self._generation:
            await asyncio.sleep(self._config.fps_sample_period)
            if generation != self._generation:
                return
            self._state.fps = self._counter.sample(self._clock())
