from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from domain.enums import PoseLabel, WindowSlot


@dataclass(frozen=True)
class Prediction:
    """One class score produced by the classifier for a single frame."""
    label: str
    probability: float

    def display(self) -> str:
        return f"{self.label}: {self.probability:.2f}"


@dataclass(frozen=True)
class Keypoint:
    """A skeleton joint in pixel coordinates."""
    name: str
    x: float
    y: float
    confidence: float


Skeleton = List[Keypoint]


@dataclass
class PoseEstimate:
    """
    Output of the estimation step for one frame.
    `features` is the model input consumed by classify().
    """
    skeleton: Optional[Skeleton]
    features: Sequence[float] = field(default_factory=list)


@dataclass
class PoseTriggerState:
    """Per-label guard flags; lives for one playback session."""
    triggered: bool = False
    first_window_triggered: bool = False
    second_window_triggered: bool = False

    def is_set(self, slot: WindowSlot) -> bool:
        if slot is WindowSlot.FIRST:
            return self.first_window_triggered
        if slot is WindowSlot.SECOND:
            return self.second_window_triggered
        return self.triggered

    def mark(self, slot: WindowSlot) -> None:
        if slot is WindowSlot.FIRST:
            self.first_window_triggered = True
        elif slot is WindowSlot.SECOND:
            self.second_window_triggered = True
        else:
            self.triggered = True


@dataclass(frozen=True)
class TimeWindow:
    """
    Closed interval of playback time. `end=None` leaves it open upwards.
    """
    start: float
    end: Optional[float] = None
    slot: WindowSlot = WindowSlot.SINGLE

    def contains(self, time: float) -> bool:
        if time < self.start:
            return False
        return self.end is None or time <= self.end


@dataclass(frozen=True)
class TriggerEvent:
    """A (label, window) pair fired for the first time this session."""
    label: PoseLabel
    slot: WindowSlot
    time: float
    probability: float

    def __str__(self) -> str:
        return (f"{self.label.value} ({self.slot.value}) "
                f"@ {self.time:.2f}s p={self.probability:.2f}")
