"""
PoseSession: lifecycle of one instructional-video run.

Owns the tracker and the effect; stopping or replaying the video, or
switching the model source, starts a fresh session with every guard cleared.
"""
from __future__ import annotations
import logging
from typing import Optional

from core.effect_controller import EffectController
from core.pose_tracker import PoseEventTracker
from domain.models import Prediction, TriggerEvent

logger = logging.getLogger(__name__)


class PoseSession:

    def __init__(
        self,
        model_url: str,
        effect: EffectController,
        tracker: Optional[PoseEventTracker] = None,
    ) -> None:
        self._model_url = model_url
        self.effect = effect
        self.tracker = tracker or PoseEventTracker(effect)

    @property
    def model_url(self) -> str:
        return self._model_url

    def set_model_url(self, url: str) -> None:
        """Point at another model; resets all session state."""
        self._model_url = url
        logger.info("[SESSION] model source -> %s", url)
        self.restart()

    def restart(self) -> None:
        self.tracker.reset()
        self.effect.reset()
        logger.info("[SESSION] restarted")

    def evaluate(self, prediction: Prediction, time: float) -> Optional[TriggerEvent]:
        return self.tracker.evaluate(prediction, time)
