from __future__ import annotations

from pathlib import Path
import sys
from typing import Any, Callable, List, Tuple

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core.effect_controller import EffectController
from core.pose_tracker import PoseEventTracker


class FakeHandle:
    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Simulated clock with the call_later() shape of an asyncio loop."""

    def __init__(self) -> None:
        self.now = 0.0
        self._timers: List[Tuple[float, Callable[[], Any], FakeHandle]] = []

    def call_later(self, delay: float, callback: Callable[[], Any]) -> FakeHandle:
        handle = FakeHandle()
        self._timers.append((self.now + delay, callback, handle))
        return handle

    def advance(self, seconds: float) -> None:
        self.now += seconds
        due, remaining = [], []
        for timer in self._timers:
            (due if timer[0] <= self.now + 1e-9 else remaining).append(timer)
        self._timers = remaining
        for _, callback, handle in sorted(due, key=lambda t: t[0]):
            if not handle.cancelled:
                callback()

    @property
    def pending(self) -> int:
        return sum(1 for _, _, h in self._timers if not h.cancelled)


class FakeAudio:
    def __init__(self) -> None:
        self.played: List[Tuple[Path, float]] = []

    def play(self, cue: Path, volume: float) -> None:
        self.played.append((cue, volume))

    def close(self) -> None:
        pass


@pytest.fixture()
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture()
def audio() -> FakeAudio:
    return FakeAudio()


@pytest.fixture()
def effect(scheduler: FakeScheduler, audio: FakeAudio) -> EffectController:
    return EffectController(audio=audio, cue=Path("explsn.mp3"), scheduler=scheduler)


@pytest.fixture()
def tracker(effect: EffectController) -> PoseEventTracker:
    return PoseEventTracker(effect)
