class PoseBlastError(Exception):
    """Base class for every error raised by this project."""


class ModelLoadError(PoseBlastError):
    """The pose model or its label metadata could not be loaded."""


class FrameClassificationError(PoseBlastError):
    """A single frame could not be estimated or classified."""


class CaptureError(PoseBlastError, RuntimeError):
    """The capture device could not be opened."""
