"""
Camera: thin wrapper around OpenCV VideoCapture.
No ML, no pose detection, no pacing (the frame loop paces itself).
"""
from __future__ import annotations
import logging
from typing import Optional

import cv2
import numpy as np

from domain.errors import CaptureError
from utils.constants import LIVE_SIZE

logger = logging.getLogger(__name__)


class Camera:
    """
    Parameters
    ----------
    device : int
        Camera index (0 = default webcam).
    width, height : int
        Size of the frames handed to the classifier.
    flip : bool
        Mirror frames horizontally (selfie view).
    """

    def __init__(
        self,
        device: int = 0,
        width: int = LIVE_SIZE[0],
        height: int = LIVE_SIZE[1],
        flip: bool = True,
    ) -> None:
        self._device = device
        self._size = (width, height)
        self._flip = flip
        self._cap: Optional[cv2.VideoCapture] = None
        self._playing = False

    # ------------------------------------------------------------------
    def setup(self) -> None:
        """Open the device. Raises CaptureError if it is unavailable."""
        self._cap = cv2.VideoCapture(self._device)
        if not self._cap.isOpened():
            self._cap.release()
            self._cap = None
            raise CaptureError(f"Cannot open camera device {self._device}")
        logger.info("[CAMERA] device %s opened", self._device)

    def start(self) -> None:
        if self._cap is None:
            self.setup()
        self._playing = True

    def stop(self) -> None:
        self._playing = False
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            logger.info("[CAMERA] device %s released", self._device)

    def next_frame(self) -> Optional[np.ndarray]:
        """
        Read, resize and mirror the next frame.
        Returns None once stopped or on read failure.
        """
        cap = self._cap
        if not self._playing or cap is None:
            return None

        ret, frame = cap.read()
        if not ret:
            return None

        frame = cv2.resize(frame, self._size)
        if self._flip:
            frame = cv2.flip(frame, 1)
        return frame
