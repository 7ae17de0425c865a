"""
main.py: Application entry point.

Clean pipeline, no globals, no mixed concerns:

    Camera → PoseModel (estimate + classify) → PoseSession (tracker)
          → EffectController → OpenCVUI / AudioPlayer

    InstructionVideo → PoseModel (estimate) → OpenCVUI

Both pipelines are asyncio tasks on one event loop; the keyboard
(v / s / w / ESC) plays the role of the demo page's buttons.
"""
from __future__ import annotations
import argparse
import asyncio
import logging
from pathlib import Path
from typing import Any, Callable, List, Optional

from app.audio import AudioPlayer
from app.config import AppConfig, default_config
from app.ui import OpenCVUI
from core.camera import Camera
from core.effect_controller import EffectController
from core.frame_loop import LiveFrameLoop, VideoFrameLoop
from core.instruction_video import InstructionVideo
from core.pose_classifier import PoseModel, create_estimator, load_model
from core.pose_tracker import PoseEventTracker
from core.session import PoseSession
from domain.enums import Command
from domain.errors import CaptureError, ModelLoadError
from domain.models import TriggerEvent

logger = logging.getLogger(__name__)


class PoseBlastApp:
    """
    Wires camera, model, session, loops and UI together.

    Collaborators can be injected for tests; defaults build the real ones
    from `config`.
    """

    def __init__(
        self,
        config: AppConfig = default_config,
        ui=None,
        audio=None,
        camera=None,
        video=None,
        model_loader: Callable[[str], PoseModel] = load_model,
        estimator_factory: Callable[[], Any] = create_estimator,
        scheduler=None,
    ) -> None:
        self._config = config
        self._ui = ui or OpenCVUI(config)
        self._audio = audio or AudioPlayer()
        self._camera = camera or Camera(
            config.camera_device, config.width, config.height, config.flip
        )
        self._video = video or InstructionVideo(config.instruction_video)
        self._load_model = model_loader
        self._create_estimator = estimator_factory

        effect = EffectController(
            duration=config.effect_duration,
            audio=self._audio,
            cue=config.explosion_sound,
            volume=config.explosion_volume,
            scheduler=scheduler,
        )
        tracker = PoseEventTracker(effect, threshold=config.probability_threshold)
        self.session = PoseSession(config.model_url, effect, tracker)

        self._model: Optional[PoseModel] = None
        self._live: Optional[LiveFrameLoop] = None
        self._live_task: Optional[asyncio.Task] = None
        self._video_loop: Optional[VideoFrameLoop] = None
        self._video_model: Optional[PoseModel] = None
        self._video_task: Optional[asyncio.Task] = None
        self.triggers: List[TriggerEvent] = []

    # ------------------------------------------------------------------
    # Webcam
    # ------------------------------------------------------------------
    @property
    def webcam_running(self) -> bool:
        return self._live_task is not None and not self._live_task.done()

    async def start_webcam(self) -> bool:
        """
        Load the model and start the live loop.
        Returns False (and stays idle) if the model or camera is unavailable.
        """
        if self.webcam_running:
            return True

        try:
            model = await self._ensure_model()
        except ModelLoadError as exc:
            logger.error("[MODEL] initialisation failed: %s", exc)
            return False

        try:
            self._camera.setup()
            self._camera.start()
        except CaptureError as exc:
            logger.error("[CAMERA] %s", exc)
            return False

        self._live = LiveFrameLoop(
            source=self._camera,
            model=model,
            session=self.session,
            renderer=self._ui,
            playback_time=lambda: self._video.current_time,
            fps_limit=self._config.fps_limit,
            on_trigger=self._on_trigger,
        )
        self._live_task = asyncio.create_task(self._live.run())
        return True

    async def stop_webcam(self) -> None:
        if self._live is not None:
            self._live.stop()
        if self._live_task is not None:
            await self._live_task
            self._live_task = None
        self._camera.stop()
        self._ui.clear_live()

    # ------------------------------------------------------------------
    # Instructional video
    # ------------------------------------------------------------------
    async def play_instruction_video(self) -> None:
        if self._video.ended or (self._video.paused and self._video.current_time == 0.0):
            self.session.restart()

        try:
            self._video.play()
        except FileNotFoundError as exc:
            logger.error("[VIDEO] %s", exc)
            return

        if self._model is None:
            logger.info("[VIDEO] no model loaded yet, start the webcam first (%s)",
                        self.session.model_url)
            return

        if self._video_task is None or self._video_task.done():
            self._close_video_model()
            try:
                estimator = await asyncio.to_thread(self._create_estimator)
            except ModelLoadError as exc:
                logger.error("[VIDEO] %s", exc)
                return
            # The video stream gets its own estimator; only the classifier is shared.
            self._video_model = self._model.with_estimator(estimator)
            self._video_loop = VideoFrameLoop(
                self._video, self._video_model, self._ui, self._config.fps_limit
            )
            self._video_task = asyncio.create_task(self._video_loop.run())

    async def stop_instruction_video(self) -> None:
        """Stop, rewind and start a fresh session (all guards cleared)."""
        if self._video_loop is not None:
            self._video_loop.stop()
        self._video.stop()
        if self._video_task is not None:
            await self._video_task
            self._video_task = None
        self._close_video_model()
        self._ui.clear_video()
        self.session.restart()

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    async def set_model_url(self, url: str) -> None:
        """
        Switch model source. Running loops are stopped and the old model is
        closed; the next start_webcam() loads the new one.
        """
        await self.stop_instruction_video()
        await self.stop_webcam()
        if self._model is not None:
            self._model.close()
            self._model = None
        self.session.set_model_url(url)

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------
    async def run(self) -> None:
        if not await self.start_webcam():
            logger.info("[APP] idle: nothing to run")
            return

        try:
            while self.webcam_running or (self._video_task and not self._video_task.done()):
                command = self._ui.poll_key()
                if command is Command.QUIT:
                    break
                await self.handle(command)
                await asyncio.sleep(1.0 / self._config.fps_limit)
        finally:
            await self.shutdown()

    async def handle(self, command: Optional[Command]) -> None:
        if command is Command.PLAY_VIDEO:
            await self.play_instruction_video()
        elif command is Command.STOP_VIDEO:
            await self.stop_instruction_video()
        elif command is Command.STOP_WEBCAM:
            await self.stop_webcam()

    async def shutdown(self) -> None:
        try:
            await self.stop_instruction_video()
            await self.stop_webcam()
        finally:
            self._camera.stop()
            self._close_video_model()
            self._video.release()
            if self._model is not None:
                self._model.close()
                self._model = None
            self._audio.close()
            self._ui.close()
        logger.info("[APP] closed cleanly (%d triggers)", len(self.triggers))

    # ------------------------------------------------------------------
    async def _ensure_model(self) -> PoseModel:
        if self._model is None:
            self._model = await asyncio.to_thread(self._load_model, self.session.model_url)
        return self._model

    def _close_video_model(self) -> None:
        if self._video_model is not None:
            self._video_model.close()
            self._video_model = None

    def _on_trigger(self, event: TriggerEvent) -> None:
        self.triggers.append(event)
        logger.info("[EVENT] explosion for %s", event.label.value)


# ----------------------------------------------------------------------
def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser("Pose Blast")
    parser.add_argument(
        "--model-url", type=str, default=default_config.model_url,
        help="Directory or http(s) base holding model.pkl and metadata.json",
    )
    parser.add_argument(
        "--video", type=Path, default=default_config.instruction_video,
        help="Instructional video file",
    )
    parser.add_argument(
        "--sound", type=Path, default=default_config.explosion_sound,
        help="Explosion sound cue",
    )
    parser.add_argument("--camera", type=int, default=default_config.camera_device)
    parser.add_argument("--fps", type=int, default=default_config.fps_limit)
    return parser.parse_args(argv)


def setup_logging() -> None:
    """Configure logging for the application with INFO level and timestamp format."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


def main(argv=None) -> None:
    args = parse_args(argv)
    setup_logging()

    config = AppConfig(
        model_url=args.model_url,
        instruction_video=args.video,
        explosion_sound=args.sound,
        camera_device=args.camera,
        fps_limit=args.fps,
    )
    logger.info("[APP] model %s | video %s | fps cap %d",
                config.model_url, config.instruction_video, config.fps_limit)

    try:
        asyncio.run(PoseBlastApp(config).run())
    except KeyboardInterrupt:
        logger.info("[APP] interrupted by user")


if __name__ == "__main__":
    main()
