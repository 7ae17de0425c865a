"""
MediaPipePoseEstimator: encapsulates all MediaPipe logic.
The rest of the application never imports mediapipe directly.
"""
from __future__ import annotations
from typing import Any, List

import cv2

from domain.models import Keypoint, PoseEstimate
from utils.constants import COCO17_NAMES, LANDMARK_AXES, POSE_LANDMARK_COUNT

EMPTY_FEATURES = [0.0] * (POSE_LANDMARK_COUNT * len(LANDMARK_AXES))


class MediaPipePoseEstimator:
    """
    Processes a BGR frame and returns the COCO-17 skeleton in pixel space
    plus the flattened landmark features the classifier was trained on.

    Parameters
    ----------
    model_complexity : int
    min_detection_confidence : float
    min_tracking_confidence : float
    """

    def __init__(
        self,
        model_complexity: int = 1,
        min_detection_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5,
    ) -> None:
        try:
            import mediapipe as mp
        except ImportError as exc:
            raise RuntimeError(
                "MediaPipe is not installed. Install it with: pip install mediapipe"
            ) from exc

        self._landmark_ids = mp.solutions.pose.PoseLandmark
        self._pose = mp.solutions.pose.Pose(
            static_image_mode=False,
            model_complexity=model_complexity,
            enable_segmentation=False,
            smooth_landmarks=True,
            min_detection_confidence=min_detection_confidence,
            min_tracking_confidence=min_tracking_confidence,
        )

    # ------------------------------------------------------------------
    def estimate(self, frame: Any) -> PoseEstimate:
        """
        Parameters
        ----------
        frame : np.ndarray
            BGR frame from OpenCV.

        Returns
        -------
        PoseEstimate
            skeleton is None when no body was found; features are then zeros.
        """
        h, w = frame.shape[:2]
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        results = self._pose.process(rgb)

        if not results or results.pose_landmarks is None:
            return PoseEstimate(skeleton=None, features=list(EMPTY_FEATURES))

        landmarks = results.pose_landmarks.landmark
        skeleton: List[Keypoint] = []
        for name in COCO17_NAMES:
            lm = landmarks[int(self._landmark_ids[name.upper()])]
            skeleton.append(Keypoint(
                name=name,
                x=lm.x * w,
                y=lm.y * h,
                confidence=float(lm.visibility),
            ))

        features = [
            float(getattr(lm, axis)) for lm in landmarks for axis in LANDMARK_AXES
        ]
        return PoseEstimate(skeleton=skeleton, features=features)

    def close(self) -> None:
        self._pose.close()
