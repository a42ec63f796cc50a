"""
Hands-free control: pose classification and dwell-time confirmation.
"""

from .camera import CameraSource, GestureController
from .classifier import DEFAULT_THRESHOLDS, PoseLabel, PoseThresholds, classify
from .confirmation import HOLD_MS, GestureConfirmationTimer
from .frame_loop import FrameClassificationLoop, LandmarkProvider, PoseLandmarkerAdapter
from .landmarks import BodyPoint, LandmarkSet, Point

__all__ = [
    "BodyPoint",
    "CameraSource",
    "DEFAULT_THRESHOLDS",
    "FrameClassificationLoop",
    "GestureConfirmationTimer",
    "GestureController",
    "HOLD_MS",
    "LandmarkProvider",
    "LandmarkSet",
    "Point",
    "PoseLabel",
    "PoseLandmarkerAdapter",
    "PoseThresholds",
    "classify",
]
