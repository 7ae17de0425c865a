"""
Pure helpers for skeleton and playback-time handling.
No imports from the rest of the project beyond domain types.
"""
from __future__ import annotations
from typing import Dict, Iterable, List, Tuple

from domain.models import Keypoint

Point2D = Tuple[int, int]


def confident_keypoints(keypoints: Iterable[Keypoint], min_confidence: float) -> List[Keypoint]:
    """Keypoints whose confidence is strictly above the threshold."""
    return [kp for kp in keypoints if kp.confidence > min_confidence]


def skeleton_segments(
    keypoints: Iterable[Keypoint],
    edges: Iterable[Tuple[str, str]],
    min_confidence: float,
) -> List[Tuple[Point2D, Point2D]]:
    """Line segments for every edge whose two ends pass the threshold."""
    by_name: Dict[str, Keypoint] = {
        kp.name: kp for kp in confident_keypoints(keypoints, min_confidence)
    }
    segments = []
    for a, b in edges:
        if a in by_name and b in by_name:
            pa, pb = by_name[a], by_name[b]
            segments.append(((int(pa.x), int(pa.y)), (int(pb.x), int(pb.y))))
    return segments


def format_playback_time(seconds: float) -> str:
    """'Time: m:ss' label shown next to the instructional video."""
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"Time: {minutes}:{secs:02d}"
