"""
Frame loops: cooperative asyncio tasks that pull a frame, run the blocking
model step in a worker thread, and hand the result back to the loop thread.

    LiveFrameLoop  : webcam → estimate + classify → tracker → renderer
    VideoFrameLoop : instructional video → estimate → renderer (no triggers)

A tick only re-arms after its model step has resolved, so a slow model
yields fewer ticks instead of a backlog. A failing tick (frame read,
model step or drawing) is logged and skipped; only stop() or an exhausted
source ends a loop.

Each loop must own its model's pose estimator: MediaPipe tracks across
frames, so one estimator fed two streams mixes their state.
"""
from __future__ import annotations
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional, Protocol, Tuple

from core.session import PoseSession
from domain.errors import FrameClassificationError
from domain.models import PoseEstimate, Prediction, TriggerEvent

logger = logging.getLogger(__name__)


class FrameSource(Protocol):
    def next_frame(self) -> Any: ...


class PoseModelLike(Protocol):
    def estimate(self, frame: Any) -> PoseEstimate: ...
    def classify(self, estimate: PoseEstimate) -> List[Prediction]: ...


class FrameLoop(ABC):
    """
    Base class for both loops.

    Parameters
    ----------
    model : PoseModelLike
        Estimator/classifier; its calls run via asyncio.to_thread.
    renderer : object
        Drawing collaborator (see app.ui.OpenCVUI).
    fps_limit : int
        Upper bound on ticks per second (display refresh rate).
    """

    NAME: str = "LOOP"

    def __init__(self, model: PoseModelLike, renderer: Any, fps_limit: int = 30) -> None:
        self._model = model
        self._renderer = renderer
        self._frame_time = 1.0 / fps_limit if fps_limit > 0 else 0.0
        self._running = False
        self.ticks = 0
        self.skipped = 0

    # ------------------------------------------------------------------
    @property
    def running(self) -> bool:
        return self._running

    def stop(self) -> None:
        """Ask the loop to end after the current tick; its result is dropped."""
        if self._running:
            logger.info("[LOOP] %s stop requested", self.NAME)
        self._running = False

    async def run(self) -> None:
        loop = asyncio.get_running_loop()
        self._running = True
        logger.info("[LOOP] %s started", self.NAME)

        try:
            while self._running and self._should_continue():
                started = loop.time()

                try:
                    frame = await asyncio.to_thread(self._next_frame)
                    if frame is None:
                        logger.info("[LOOP] %s source exhausted", self.NAME)
                        break
                    result = await asyncio.to_thread(self._compute, frame)
                    if not self._running:
                        break
                    self._apply(frame, result)
                    self.ticks += 1
                except FrameClassificationError as exc:
                    self.skipped += 1
                    logger.warning("[LOOP] %s frame skipped: %s", self.NAME, exc)
                except Exception:
                    self.skipped += 1
                    logger.exception("[LOOP] %s tick failed", self.NAME)

                delay = self._frame_time - (loop.time() - started)
                await asyncio.sleep(max(0.0, delay))
        finally:
            self._running = False
            logger.info("[LOOP] %s finished after %d ticks (%d skipped)",
                        self.NAME, self.ticks, self.skipped)

    # ------------------------------------------------------------------
    def _should_continue(self) -> bool:
        return True

    @abstractmethod
    def _next_frame(self) -> Any:
        """Blocking read of the next frame, or None when the source is done."""

    @abstractmethod
    def _compute(self, frame: Any) -> Any:
        """Blocking model step; runs in a worker thread."""

    @abstractmethod
    def _apply(self, frame: Any, result: Any) -> None:
        """Non-blocking follow-up on the loop thread (state + drawing)."""


class LiveFrameLoop(FrameLoop):
    """
    Webcam loop: classifies every frame and feeds each prediction to the
    session's tracker at the instructional video's playback time.

    Parameters
    ----------
    source : FrameSource
        Live capture (core.camera.Camera).
    session : PoseSession
    playback_time : callable
        Returns the instructional video's current position in seconds.
    on_trigger : callable, optional
        Called with every TriggerEvent fired.
    """

    NAME = "LIVE"

    def __init__(
        self,
        source: FrameSource,
        model: PoseModelLike,
        session: PoseSession,
        renderer: Any,
        playback_time: Callable[[], float],
        fps_limit: int = 30,
        on_trigger: Optional[Callable[[TriggerEvent], None]] = None,
    ) -> None:
        super().__init__(model, renderer, fps_limit)
        self._source = source
        self._session = session
        self._playback_time = playback_time
        self._on_trigger = on_trigger

    def _next_frame(self) -> Any:
        return self._source.next_frame()

    def _compute(self, frame: Any) -> Tuple[PoseEstimate, List[Prediction]]:
        estimate = self._model.estimate(frame)
        return estimate, self._model.classify(estimate)

    def _apply(self, frame: Any, result: Tuple[PoseEstimate, List[Prediction]]) -> None:
        estimate, predictions = result
        lines = [p.display() for p in predictions]

        time = self._playback_time()
        for prediction in predictions:
            event = self._session.evaluate(prediction, time)
            if event is not None and self._on_trigger is not None:
                self._on_trigger(event)

        self._renderer.render_live(
            frame,
            skeleton=estimate.skeleton,
            explode=self._session.effect.is_active(),
            lines=lines,
            playback_time=time,
        )


class VideoFrameLoop(FrameLoop):
    """
    Instructional-video loop: draws the presenter's skeleton over the video.
    Ends on its own once the video is paused or finished. Never triggers.
    """

    NAME = "VIDEO"

    def __init__(self, video: Any, model: PoseModelLike, renderer: Any, fps_limit: int = 30) -> None:
        super().__init__(model, renderer, fps_limit)
        self._video = video

    def _should_continue(self) -> bool:
        return not self._video.paused and not self._video.ended

    def _next_frame(self) -> Any:
        return self._video.read_frame()

    def _compute(self, frame: Any) -> PoseEstimate:
        return self._model.estimate(frame)

    def _apply(self, frame: Any, result: PoseEstimate) -> None:
        self._renderer.render_video(
            frame,
            skeleton=result.skeleton,
            playback_time=self._video.current_time,
        )
