"""
EffectController: owns the single "explosion" effect of a session so the
tracker doesn't need to track wall-clock time itself.
"""
from __future__ import annotations
import asyncio
import logging
from pathlib import Path
from typing import Any, Optional, Protocol

from utils.constants import EFFECT_DURATION, EFFECT_VOLUME

logger = logging.getLogger(__name__)


class AudioSink(Protocol):
    def play(self, cue: Path, volume: float) -> None: ...


class EffectController:
    """
    Single-instance effect flag with a timed auto-reset.

    Usage
    -----
    effect = EffectController(audio=AudioPlayer(), cue=Path("explsn.mp3"))
    effect.activate()        # active for `duration` seconds, plays the cue
    if effect.is_active():
        ...  # draw the explosion overlay

    Parameters
    ----------
    duration : float
        Seconds of wall-clock time the effect stays active.
    audio : AudioSink | None
        Collaborator with play(cue, volume); None disables sound.
    cue : Path | None
        Sound resource played on every activation.
    scheduler : object | None
        Anything with call_later(delay, callback) -> handle.cancel().
        Defaults to the running asyncio loop (allows testing without real time).
    """

    def __init__(
        self,
        duration: float = EFFECT_DURATION,
        audio: Optional[AudioSink] = None,
        cue: Optional[Path] = None,
        volume: float = EFFECT_VOLUME,
        scheduler: Any = None,
    ) -> None:
        self._duration = duration
        self._audio = audio
        self._cue = cue
        self._volume = volume
        self._scheduler = scheduler
        self._active = False
        self._handle: Any = None

    # ------------------------------------------------------------------
    def activate(self) -> None:
        """
        Turn the effect on and (re)schedule its deactivation.
        Calling it while already active just restarts the timer.
        """
        self._cancel_pending()
        self._active = True
        scheduler = self._scheduler or asyncio.get_running_loop()
        self._handle = scheduler.call_later(self._duration, self._deactivate)
        logger.debug("[EFFECT] active for %.0f ms", self._duration * 1000)
        self._play_cue()

    def is_active(self) -> bool:
        return self._active

    def reset(self) -> None:
        """Drop the effect and any pending deactivation (session restart)."""
        self._cancel_pending()
        self._active = False

    # ------------------------------------------------------------------
    def _deactivate(self) -> None:
        self._handle = None
        self._active = False

    def _cancel_pending(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _play_cue(self) -> None:
        if self._audio is None or self._cue is None:
            return
        try:
            self._audio.play(self._cue, self._volume)
        except Exception:
            logger.exception("[EFFECT] could not play %s", self._cue)
