"""Tests for the application wiring (no camera, window or sound device)."""

import asyncio
import threading
import time

import numpy as np
import pytest

from app.config import AppConfig
from app.main import PoseBlastApp, parse_args
from domain.enums import Command, PoseLabel
from domain.errors import CaptureError, ModelLoadError
from domain.models import PoseEstimate, Prediction


class FakeCamera:
    def __init__(self, frames=3, fail=False):
        self.frames = frames
        self.fail = fail
        self.stopped = False

    def setup(self):
        if self.fail:
            raise CaptureError("Cannot open camera device 0")

    def start(self):
        pass

    def stop(self):
        self.stopped = True

    def next_frame(self):
        if self.stopped or self.frames <= 0:
            return None
        self.frames -= 1
        return np.zeros((8, 8, 3), dtype=np.uint8)


class FakeVideo:
    def __init__(self, time=1.0):
        self.current_time = time
        self.paused = True
        self.ended = False

    def play(self):
        self.paused = False

    def stop(self):
        self.paused = True
        self.current_time = 0.0

    def release(self):
        pass

    def read_frame(self):
        return None


class CountingEstimator:
    """Records how many estimate() calls overlap and how many frames it saw."""

    def __init__(self):
        self.inside = 0
        self.max_inside = 0
        self.frames = 0
        self.closed = False
        self._lock = threading.Lock()

    def estimate(self, frame):
        with self._lock:
            self.inside += 1
            self.max_inside = max(self.max_inside, self.inside)
        time.sleep(0.002)
        with self._lock:
            self.inside -= 1
            self.frames += 1
        return PoseEstimate(skeleton=None, features=[])

    def close(self):
        self.closed = True


class FakeModel:
    def __init__(self, estimator=None):
        self.estimator = estimator or CountingEstimator()
        self.closed = False

    def estimate(self, frame):
        return self.estimator.estimate(frame)

    def classify(self, estimate):
        return [Prediction("Pose1", 0.97), Prediction("idle", 0.03)]

    def with_estimator(self, estimator):
        return FakeModel(estimator)

    def close(self):
        self.closed = True
        self.estimator.close()


class FakeUI:
    def __init__(self):
        self.live = 0
        self.closed = False

    def render_live(self, *args, **kwargs):
        self.live += 1

    def render_video(self, *args, **kwargs):
        pass

    def clear_live(self):
        pass

    def clear_video(self):
        pass

    def poll_key(self):
        return None

    def close(self):
        self.closed = True


def _app(scheduler, audio, camera=None, loader=None, video=None, estimator_factory=CountingEstimator):
    return PoseBlastApp(
        AppConfig(model_url="models/", fps_limit=1000),
        ui=FakeUI(),
        audio=audio,
        camera=camera or FakeCamera(),
        video=video or FakeVideo(),
        model_loader=loader or (lambda url: FakeModel()),
        estimator_factory=estimator_factory,
        scheduler=scheduler,
    )


def test_live_pipeline_fires_once(scheduler, audio):
    app = _app(scheduler, audio)

    async def scenario():
        assert await app.start_webcam()
        await app._live_task

    asyncio.run(scenario())

    assert [e.label for e in app.triggers] == [PoseLabel.POSE1]
    assert len(audio.played) == 1


def test_model_load_failure_stays_idle(scheduler, audio):
    def broken(url):
        raise ModelLoadError("404")

    app = _app(scheduler, audio, loader=broken)
    assert asyncio.run(app.start_webcam()) is False
    assert not app.webcam_running


def test_camera_failure_stays_idle(scheduler, audio):
    app = _app(scheduler, audio, camera=FakeCamera(fail=True))
    assert asyncio.run(app.start_webcam()) is False


def test_stop_video_restarts_session(scheduler, audio):
    app = _app(scheduler, audio)
    app.session.evaluate(Prediction("Pose1", 0.9), 1.0)
    assert app.session.effect.is_active()

    asyncio.run(app.stop_instruction_video())

    assert not app.session.effect.is_active()
    assert app.session.tracker.states == {}


def test_set_model_url_forces_reload(scheduler, audio):
    loaded, models = [], []

    def loader(url):
        loaded.append(url)
        models.append(FakeModel())
        return models[-1]

    app = _app(scheduler, audio, camera=FakeCamera(frames=10_000), loader=loader)

    async def scenario():
        await app.start_webcam()
        await app.set_model_url("models/other/")
        assert not app.webcam_running
        await app.start_webcam()
        await app.stop_webcam()

    asyncio.run(scenario())
    assert loaded == ["models/", "models/other/"]
    assert models[0].closed
    assert not models[1].closed


class PlayingVideo(FakeVideo):
    """Serves `frames` frames after play(), then runs out."""

    def __init__(self, frames):
        super().__init__(time=0.0)
        self.frames = frames

    def read_frame(self):
        if self.frames <= 0:
            return None
        self.frames -= 1
        return np.zeros((8, 8, 3), dtype=np.uint8)


def test_video_loop_has_its_own_estimator(scheduler, audio):
    live_model = FakeModel()
    created = []

    def factory():
        created.append(CountingEstimator())
        return created[-1]

    app = _app(scheduler, audio, camera=FakeCamera(frames=20), loader=lambda url: live_model,
               video=PlayingVideo(frames=20), estimator_factory=factory)

    async def scenario():
        await app.start_webcam()
        await app.play_instruction_video()
        await asyncio.gather(app._live_task, app._video_task)
        await app.stop_instruction_video()

    asyncio.run(scenario())

    video_estimator, = created
    assert video_estimator is not live_model.estimator
    assert live_model.estimator.frames == 20
    assert video_estimator.frames == 20
    assert live_model.estimator.max_inside == 1
    assert video_estimator.max_inside == 1
    assert video_estimator.closed
    assert not live_model.closed


def test_replay_after_video_ended_restarts_session(scheduler, audio):
    video = FakeVideo(time=20.0)
    video.ended = True
    app = _app(scheduler, audio, video=video)
    app.session.evaluate(Prediction("Pose1", 0.9), 1.0)

    asyncio.run(app.play_instruction_video())

    assert not video.paused
    assert app.session.tracker.states == {}


def test_shutdown_releases_resources_when_stopping_fails(scheduler, audio):
    class BrokenVideo(FakeVideo):
        released = False

        def stop(self):
            raise RuntimeError("device lost")

        def release(self):
            self.released = True

    model = FakeModel()
    video = BrokenVideo()
    app = _app(scheduler, audio, loader=lambda url: model, video=video)

    async def scenario():
        await app.start_webcam()
        await app._live_task
        await app.shutdown()

    with pytest.raises(RuntimeError):
        asyncio.run(scenario())

    assert video.released
    assert model.closed
    assert app._camera.stopped
    assert app._ui.closed


def test_handle_commands(scheduler, audio):
    video = FakeVideo(time=0.0)
    app = _app(scheduler, audio, video=video)

    async def scenario():
        await app.handle(Command.PLAY_VIDEO)
        assert not video.paused
        await app.handle(Command.STOP_VIDEO)
        assert video.paused

    asyncio.run(scenario())


def test_parse_args():
    args = parse_args(["--model-url", "https://host/m/", "--fps", "15"])
    assert args.model_url == "https://host/m/"
    assert args.fps == 15
