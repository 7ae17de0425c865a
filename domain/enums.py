from __future__ import annotations
import re
from enum import Enum
from typing import Optional


class PoseLabel(str, Enum):
    """The five poses the instructional video asks for."""
    POSE1 = "pose1"
    POSE2 = "pose2"
    POSE3 = "pose3"
    POSE4 = "pose4"
    POSE5 = "pose5"


class WindowSlot(str, Enum):
    """Which guard flag of a PoseTriggerState a window writes to."""
    SINGLE = "single"
    FIRST  = "first"
    SECOND = "second"


_NON_DIGITS = re.compile(r"[^0-9]")


def parse_pose_label(class_name: str) -> Optional[PoseLabel]:
    """
    Map a classifier class name onto a PoseLabel.

    The name must contain "pose" (any case). All non-digit characters are
    stripped and the remaining digits must form a number in 1..5, so
    "Pose10" and "Pose6" are rejected. The digits are kept verbatim in the
    key: "pose01" passes the range check but names no pose and is ignored.
    """
    lowered = class_name.lower()
    if "pose" not in lowered:
        return None

    digits = _NON_DIGITS.sub("", lowered)
    if not digits or not 1 <= int(digits) <= 5:
        return None

    try:
        return PoseLabel(f"pose{digits}")
    except ValueError:
        return None


class Command(str, Enum):
    """Keyboard commands; they stand in for the demo page's buttons."""
    PLAY_VIDEO  = "PLAY_VIDEO"
    STOP_VIDEO  = "STOP_VIDEO"
    STOP_WEBCAM = "STOP_WEBCAM"
    QUIT        = "QUIT"
