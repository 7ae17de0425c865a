"""
Constants and pure helpers shared by the pipeline.
"""

from .constants import *
from .geometry import confident_keypoints, skeleton_segments, format_playback_time

__all__ = [
    'confident_keypoints',
    'skeleton_segments',
    'format_playback_time',
    'PROBABILITY_THRESHOLD',
    'EFFECT_DURATION',
    'EFFECT_VOLUME',
    'LIVE_MIN_PART_CONFIDENCE',
    'VIDEO_MIN_PART_CONFIDENCE',
    'SKELETON_EDGES',
    'COCO17_NAMES',
]
