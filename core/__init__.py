from core.camera import Camera
from core.effect_controller import EffectController
from core.frame_loop import LiveFrameLoop, VideoFrameLoop
from core.instruction_video import InstructionVideo
from core.pose_classifier import PoseModel, load_model
from core.pose_tracker import PoseEventTracker
from core.session import PoseSession

__all__ = [
    "Camera",
    "EffectController",
    "LiveFrameLoop",
    "VideoFrameLoop",
    "InstructionVideo",
    "PoseModel",
    "load_model",
    "PoseEventTracker",
    "PoseSession",
]
