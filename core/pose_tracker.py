"""
PoseEventTracker: turns per-frame class predictions into one-shot trigger
events tied to windows of the instructional video.

Previously this logic lived as module-level dictionaries and flags.
Now it is a proper class owned by one session, with an explicit reset().

Decision order for every prediction:
  1. Label must parse to one of the five poses (others are ignored).
  2. The label's state record is created on first sighting.
  3. Probability must be strictly above the threshold.
  4. No trigger while the effect is already running.
  5. The first window containing `time` whose guard is still clear fires.
"""
from __future__ import annotations
import logging
from typing import Dict, Mapping, Optional, Sequence

from core.effect_controller import EffectController
from domain.enums import PoseLabel, WindowSlot, parse_pose_label
from domain.models import Prediction, PoseTriggerState, TimeWindow, TriggerEvent
from utils.constants import (
    PROBABILITY_THRESHOLD,
    POSE1_WINDOW, POSE2_WINDOW, POSE3_FIRST_WINDOW, POSE3_SECOND_WINDOW,
    POSE4_WINDOW, POSE5_START,
)

logger = logging.getLogger(__name__)

PoseWindows = Mapping[PoseLabel, Sequence[TimeWindow]]

DEFAULT_WINDOWS: PoseWindows = {
    PoseLabel.POSE1: (TimeWindow(*POSE1_WINDOW),),
    PoseLabel.POSE2: (TimeWindow(*POSE2_WINDOW),),
    PoseLabel.POSE3: (
        TimeWindow(*POSE3_FIRST_WINDOW, slot=WindowSlot.FIRST),
        TimeWindow(*POSE3_SECOND_WINDOW, slot=WindowSlot.SECOND),
    ),
    PoseLabel.POSE4: (TimeWindow(*POSE4_WINDOW),),
    PoseLabel.POSE5: (TimeWindow(POSE5_START),),
}


class PoseEventTracker:
    """
    Parameters
    ----------
    effect : EffectController
        Shared effect; its active flag gates every pose globally.
    windows : mapping
        Playback-time windows per pose.
    threshold : float
        Probabilities must be strictly greater than this.
    """

    def __init__(
        self,
        effect: EffectController,
        windows: PoseWindows = DEFAULT_WINDOWS,
        threshold: float = PROBABILITY_THRESHOLD,
    ) -> None:
        self._effect = effect
        self._windows = windows
        self._threshold = threshold
        self._states: Dict[PoseLabel, PoseTriggerState] = {}

    # ------------------------------------------------------------------
    def evaluate(self, prediction: Prediction, time: float) -> Optional[TriggerEvent]:
        """
        Returns a TriggerEvent if this prediction opens a not-yet-fired
        window at playback `time`, else None.
        """
        label = parse_pose_label(prediction.label)
        if label is None:
            return None

        state = self._states.setdefault(label, PoseTriggerState())

        if prediction.probability <= self._threshold:
            return None
        if self._effect.is_active():
            return None

        for window in self._windows.get(label, ()):
            if window.contains(time) and not state.is_set(window.slot):
                state.mark(window.slot)
                event = TriggerEvent(label, window.slot, time, prediction.probability)
                logger.info("[TRIGGER] %s", event)
                self._effect.activate()
                return event

        return None

    @property
    def states(self) -> Mapping[PoseLabel, PoseTriggerState]:
        """Guard records of every pose sighted this session."""
        return self._states

    def reset(self) -> None:
        self._states.clear()
