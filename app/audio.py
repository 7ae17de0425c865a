"""
AudioPlayer: fire-and-forget sound cues via pygame.mixer.

Every play() builds its own Sound, so overlapping cues land on separate
mixer channels instead of cutting each other off.
"""
from __future__ import annotations
import logging
from pathlib import Path

import pygame

logger = logging.getLogger(__name__)


class AudioPlayer:

    def __init__(self) -> None:
        self._ready = False

    def _ensure_mixer(self) -> None:
        if not self._ready:
            pygame.mixer.init()
            self._ready = True

    def play(self, cue: Path, volume: float = 1.0) -> None:
        """Start `cue` at `volume` and return immediately."""
        self._ensure_mixer()
        sound = pygame.mixer.Sound(str(cue))
        sound.set_volume(volume)
        sound.play()

    def close(self) -> None:
        if self._ready:
            pygame.mixer.quit()
            self._ready = False
