"""
OpenCVUI: all rendering logic isolated from detection and trigger logic.

The pipeline never calls cv2 drawing functions directly: it delegates to
this class. Drawing is split from showing so overlays can be checked
without a display.
"""
from __future__ import annotations
from typing import Any, Optional, Sequence

import cv2
import numpy as np

from app.config import AppConfig
from domain.enums import Command
from domain.models import Skeleton
from utils.constants import KEYPOINT_RADIUS, SKELETON_EDGES
from utils.geometry import confident_keypoints, format_playback_time, skeleton_segments

_KEYPOINT_COLOR  = (0, 255, 255)
_SKELETON_COLOR  = (0, 255, 0)
_EXPLOSION_COLOR = (0, 0, 255)      # BGR red
_TEXT_COLOR      = (255, 255, 255)

_KEYS = {
    ord("v"): Command.PLAY_VIDEO,
    ord("s"): Command.STOP_VIDEO,
    ord("w"): Command.STOP_WEBCAM,
    ord("q"): Command.QUIT,
    27:       Command.QUIT,          # ESC
}


class OpenCVUI:
    """Renders the webcam and instructional-video windows."""

    def __init__(
        self,
        config: AppConfig,
        live_window: str = "Pose Blast",
        video_window: str = "Instruction video",
    ) -> None:
        self._cfg = config
        self._live_name = live_window
        self._video_name = video_window
        self._shown: set = set()

    # ---- drawing (no GUI) -------------------------------------------
    def draw_live(
        self,
        frame: np.ndarray,
        skeleton: Optional[Skeleton],
        explode: bool,
        lines: Sequence[str],
        playback_time: float,
    ) -> np.ndarray:
        """Return a copy of `frame` with skeleton/explosion and label lines."""
        canvas = frame.copy()
        threshold = self._cfg.live_min_part_confidence

        if skeleton:
            if explode:
                for kp in confident_keypoints(skeleton, threshold):
                    cv2.circle(canvas, (int(kp.x), int(kp.y)),
                               self._cfg.explosion_radius, _EXPLOSION_COLOR, -1)
            else:
                self._draw_skeleton(canvas, skeleton, threshold)

        for i, line in enumerate(lines):
            cv2.putText(canvas, line, (20, 30 + 25 * i),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.6, _TEXT_COLOR, 1)

        h = canvas.shape[0]
        cv2.putText(canvas, format_playback_time(playback_time), (20, h - 20),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.6, _TEXT_COLOR, 1)
        return canvas

    def draw_video(
        self,
        frame: np.ndarray,
        skeleton: Optional[Skeleton],
        playback_time: float,
    ) -> np.ndarray:
        canvas = frame.copy()
        if skeleton:
            self._draw_skeleton(canvas, skeleton, self._cfg.video_min_part_confidence)
        cv2.putText(canvas, format_playback_time(playback_time), (20, 30),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.7, _TEXT_COLOR, 2)
        return canvas

    @staticmethod
    def _draw_skeleton(canvas: np.ndarray, skeleton: Skeleton, threshold: float) -> None:
        for a, b in skeleton_segments(skeleton, SKELETON_EDGES, threshold):
            cv2.line(canvas, a, b, _SKELETON_COLOR, 2)
        for kp in confident_keypoints(skeleton, threshold):
            cv2.circle(canvas, (int(kp.x), int(kp.y)), KEYPOINT_RADIUS, _KEYPOINT_COLOR, -1)

    # ---- showing -------------------------------------------------------
    def render_live(self, frame: Any, skeleton=None, explode=False, lines=(), playback_time=0.0) -> None:
        """Draw and show the webcam view; silently skips a missing frame or window."""
        if frame is None or self._closed(self._live_name):
            return
        self._show(self._live_name, self.draw_live(frame, skeleton, explode, lines, playback_time))

    def render_video(self, frame: Any, skeleton=None, playback_time=0.0) -> None:
        if frame is None or self._closed(self._video_name):
            return
        self._show(self._video_name, self.draw_video(frame, skeleton, playback_time))

    def clear_live(self) -> None:
        self._destroy(self._live_name)

    def clear_video(self) -> None:
        self._destroy(self._video_name)

    def poll_key(self) -> Optional[Command]:
        """Returns the command for the last key pressed, if any."""
        return _KEYS.get(cv2.waitKey(1) & 0xFF)

    def close(self) -> None:
        self._shown.clear()
        cv2.destroyAllWindows()

    # ------------------------------------------------------------------
    def _show(self, name: str, image: np.ndarray) -> None:
        cv2.imshow(name, image)
        self._shown.add(name)

    def _closed(self, name: str) -> bool:
        """True once the user closed a window that had been shown."""
        if name not in self._shown:
            return False
        try:
            return cv2.getWindowProperty(name, cv2.WND_PROP_VISIBLE) < 1
        except cv2.error:
            return True

    def _destroy(self, name: str) -> None:
        if name in self._shown:
            self._shown.discard(name)
            try:
                cv2.destroyWindow(name)
            except cv2.error:
                pass
