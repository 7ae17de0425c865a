"""
PoseModel: wraps the trained scikit-learn pose classifier and its label
metadata. No thresholds, no windows: just estimate() and classify().
"""
from __future__ import annotations
import io
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import joblib
import pandas as pd
import requests

from domain.errors import FrameClassificationError, ModelLoadError
from domain.models import PoseEstimate, Prediction
from utils.constants import (
    FETCH_TIMEOUT, LANDMARK_AXES, METADATA_FILE, MODEL_FILE, POSE_LANDMARK_COUNT,
)

logger = logging.getLogger(__name__)

# ---- feature definition --------------------------------------------------
FEATURE_NAMES = [
    f"lm{i}_{axis}" for i in range(POSE_LANDMARK_COUNT) for axis in LANDMARK_AXES
]


# ---- resource fetching ----------------------------------------------------
def _is_remote(base: str) -> bool:
    return base.startswith(("http://", "https://"))


def _fetch_bytes(base: str, name: str) -> bytes:
    if _is_remote(base):
        url = base.rstrip("/") + "/" + name
        try:
            resp = requests.get(url, timeout=FETCH_TIMEOUT)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise ModelLoadError(f"Cannot fetch {url}: {exc}") from exc
        return resp.content

    path = Path(base) / name
    try:
        return path.read_bytes()
    except OSError as exc:
        raise ModelLoadError(f"Cannot read {path}: {exc}") from exc


def _read_labels(raw: bytes) -> List[str]:
    try:
        metadata = json.loads(raw)
        labels = [str(label) for label in metadata["labels"]]
    except (ValueError, KeyError, TypeError) as exc:
        raise ModelLoadError(f"Invalid label metadata: {exc}") from exc
    if not labels:
        raise ModelLoadError("Label metadata lists no classes")
    return labels


# ---- model ----------------------------------------------------------------
class PoseModel:
    """
    Parameters
    ----------
    classifier : sklearn estimator
        Anything with predict_proba(DataFrame) over FEATURE_NAMES.
    labels : list[str]
        Class names in display order (from metadata.json).
    estimator : object
        Anything with estimate(frame) -> PoseEstimate.
    """

    def __init__(self, classifier: Any, labels: Sequence[str], estimator: Any) -> None:
        self._classifier = classifier
        self._labels = list(labels)
        self._estimator = estimator
        self._columns = self._column_index()

    def _column_index(self) -> List[int]:
        """Position of each metadata label in the predict_proba output."""
        classes = getattr(self._classifier, "classes_", None)
        if classes is None:
            return list(range(len(self._labels)))

        index: Dict[str, int] = {str(c): i for i, c in enumerate(classes)}
        if set(index) != set(self._labels):
            raise ModelLoadError(
                f"Metadata labels {self._labels} do not match model classes {list(index)}"
            )
        return [index[label] for label in self._labels]

    # ------------------------------------------------------------------
    @property
    def labels(self) -> List[str]:
        return list(self._labels)

    @property
    def total_classes(self) -> int:
        return len(self._labels)

    def estimate(self, frame: Any) -> PoseEstimate:
        try:
            return self._estimator.estimate(frame)
        except Exception as exc:
            raise FrameClassificationError(f"Pose estimation failed: {exc}") from exc

    def classify(self, estimate: PoseEstimate) -> List[Prediction]:
        """
        Returns one Prediction per label, in metadata order.
        """
        try:
            X = pd.DataFrame([list(estimate.features)], columns=FEATURE_NAMES)
            probabilities = self._classifier.predict_proba(X)[0]
        except Exception as exc:
            raise FrameClassificationError(f"Classification failed: {exc}") from exc

        return [
            Prediction(label, float(probabilities[col]))
            for label, col in zip(self._labels, self._columns)
        ]

    def with_estimator(self, estimator: Any) -> "PoseModel":
        """Same classifier and labels, paired with a separate pose estimator."""
        return PoseModel(self._classifier, self._labels, estimator)

    def close(self) -> None:
        close = getattr(self._estimator, "close", None)
        if close is not None:
            close()


def create_estimator() -> Any:
    """Build a MediaPipe pose estimator. Raises ModelLoadError if unavailable."""
    from core.pose_estimator import MediaPipePoseEstimator
    try:
        return MediaPipePoseEstimator()
    except (RuntimeError, AttributeError) as exc:
        raise ModelLoadError(f"Cannot start pose estimator: {exc}") from exc


def load_model(base_url: str, estimator: Optional[Any] = None) -> PoseModel:
    """
    Load `model.pkl` and `metadata.json` from a directory or http(s) base.

    Raises
    ------
    ModelLoadError
        If either resource is missing or invalid.
    """
    logger.info("[MODEL] loading from %s", base_url)
    model_bytes = _fetch_bytes(base_url, MODEL_FILE)
    labels = _read_labels(_fetch_bytes(base_url, METADATA_FILE))

    try:
        classifier = joblib.load(io.BytesIO(model_bytes))
    except Exception as exc:
        raise ModelLoadError(f"Cannot deserialise {MODEL_FILE}: {exc}") from exc

    if estimator is None:
        estimator = create_estimator()

    model = PoseModel(classifier, labels, estimator)
    logger.info("[MODEL] %d classes: %s", model.total_classes, ", ".join(labels))
    return model
