"""
InstructionVideo: the companion video whose playback position is the time
reference for every pose window.

OpenCV only decodes frames, so playback time is kept by a wall clock that
runs while the video is playing, the way a media element's currentTime does.
"""
from __future__ import annotations
import logging
import time
from pathlib import Path
from typing import Callable, Optional

import cv2
import numpy as np

from utils.constants import VIDEO_SIZE

logger = logging.getLogger(__name__)


class InstructionVideo:
    """
    Parameters
    ----------
    path : Path
        Video file to play.
    clock : callable
        Monotonic seconds source; injectable for tests.
    size : (int, int)
        Frames returned by read_frame() are resized to this.
    """

    def __init__(
        self,
        path: Path,
        clock: Callable[[], float] = time.monotonic,
        size=VIDEO_SIZE,
    ) -> None:
        self._path = Path(path)
        self._clock = clock
        self._size = size
        self._cap: Optional[cv2.VideoCapture] = None
        self._duration: Optional[float] = None
        self._offset = 0.0
        self._started_at: Optional[float] = None

    # ------------------------------------------------------------------
    def play(self) -> None:
        """Start or resume playback; a finished video restarts from 0."""
        if self._cap is None:
            self._open()
        if self.ended:
            self.stop()
        if self._started_at is None:
            self._started_at = self._clock()
            logger.info("[VIDEO] playing %s from %.2fs", self._path.name, self._offset)

    def pause(self) -> None:
        if self._started_at is not None:
            self._offset = self.current_time
            self._started_at = None
            logger.info("[VIDEO] paused at %.2fs", self._offset)

    def stop(self) -> None:
        """Pause and rewind to the start."""
        self._started_at = None
        self._offset = 0.0
        if self._cap is not None:
            self._cap.set(cv2.CAP_PROP_POS_MSEC, 0)
        logger.info("[VIDEO] stopped")

    def release(self) -> None:
        self.stop()
        if self._cap is not None:
            self._cap.release()
            self._cap = None

    # ------------------------------------------------------------------
    @property
    def current_time(self) -> float:
        """Playback position in seconds."""
        elapsed = 0.0 if self._started_at is None else self._clock() - self._started_at
        position = self._offset + elapsed
        if self._duration is not None:
            position = min(position, self._duration)
        return position

    @property
    def paused(self) -> bool:
        return self._started_at is None

    @property
    def ended(self) -> bool:
        return self._duration is not None and self.current_time >= self._duration

    def read_frame(self) -> Optional[np.ndarray]:
        """Decode the frame at the current playback position."""
        if self._cap is None or self.paused or self.ended:
            return None

        target_ms = self.current_time * 1000.0
        frame = None
        # Decode forward until we reach the playback clock.
        while True:
            ret, candidate = self._cap.read()
            if not ret:
                break
            frame = candidate
            if self._cap.get(cv2.CAP_PROP_POS_MSEC) >= target_ms:
                break

        if frame is None:
            return None
        return cv2.resize(frame, self._size)

    # ------------------------------------------------------------------
    def _open(self) -> None:
        self._cap = cv2.VideoCapture(str(self._path))
        if not self._cap.isOpened():
            self._cap = None
            raise FileNotFoundError(f"Cannot open instructional video {self._path}")

        fps = self._cap.get(cv2.CAP_PROP_FPS) or 0.0
        frames = self._cap.get(cv2.CAP_PROP_FRAME_COUNT) or 0.0
        self._duration = frames / fps if fps > 0 and frames > 0 else None
        logger.info("[VIDEO] opened %s (%s s)", self._path,
                    f"{self._duration:.1f}" if self._duration else "?")
