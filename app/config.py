from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path

from utils.constants import (
    EFFECT_DURATION, EFFECT_VOLUME, EXPLOSION_SCALE, KEYPOINT_BASE_RADIUS,
    LIVE_MIN_PART_CONFIDENCE, LIVE_SIZE, PROBABILITY_THRESHOLD,
    VIDEO_MIN_PART_CONFIDENCE,
)


@dataclass
class AppConfig:
    """
    Central configuration injected into all components.
    `model_url` is the one externally settable source identifier.
    """
    # ---- model ---------------------------------------------------------
    model_url: str = "models/"

    # ---- camera --------------------------------------------------------
    camera_device: int = 0
    width: int = LIVE_SIZE[0]
    height: int = LIVE_SIZE[1]
    flip: bool = True
    fps_limit: int = 30

    # ---- triggering ----------------------------------------------------
    probability_threshold: float = PROBABILITY_THRESHOLD

    # ---- effect --------------------------------------------------------
    effect_duration: float = EFFECT_DURATION
    explosion_sound: Path = Path("explsn.mp3")
    explosion_volume: float = EFFECT_VOLUME

    # ---- instructional video ------------------------------------------
    instruction_video: Path = Path("vid.mp4")

    # ---- rendering -----------------------------------------------------
    live_min_part_confidence: float = LIVE_MIN_PART_CONFIDENCE
    video_min_part_confidence: float = VIDEO_MIN_PART_CONFIDENCE
    explosion_radius: int = KEYPOINT_BASE_RADIUS * EXPLOSION_SCALE


# Default singleton: import and use directly, or override in tests.
default_config = AppConfig()
