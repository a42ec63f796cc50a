"""
Pose Classifier: one frame of landmarks -> one discrete pose label.

Pure and stateless. Rules are tried in priority order and the first match
wins, which settles frames that satisfy several rules at once:

1. Cross_Arms  wrists closer than cross_arms_distance, left wrist below nose
2. Both_Up     both wrists above the nose
3. Left_Up     only the left wrist above the nose
4. Right_Up    only the right wrist above the nose
5. Left_Side / Right_Side
               wrist between shoulder height and hip height + side_hip_margin,
               and reaching outward past its shoulder by side_extension_margin
6. None

Image y grows downward, so "above" means a smaller y. "Outward" is measured
from the shoulder line, so mirrored (selfie) frames classify the same way.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from .landmarks import BodyPoint, LandmarkSet, Point


class PoseLabel(str, Enum):
    NONE = "None"
    BOTH_UP = "Both_Up"
    LEFT_UP = "Left_Up"
    RIGHT_UP = "Right_Up"
    LEFT_SIDE = "Left_Side"
    RIGHT_SIDE = "Right_Side"
    CROSS_ARMS = "Cross_Arms"

    @property
    def is_active(self) -> bool:
        return self is not PoseLabel.NONE


@dataclass(frozen=True)
class PoseThresholds:
    """Tunable classifier constants (normalized image units)."""

    cross_arms_distance: float = 0.15
    side_extension_margin: float = 0.05
    side_hip_margin: float = 0.10


DEFAULT_THRESHOLDS = PoseThresholds()


def _distance(a: Point, b: Point) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def _is_side(wrist: Point, shoulder: Point, hip: Point, outward: float, t: PoseThresholds) -> bool:
    in_band = shoulder.y <= wrist.y <= hip.y + t.side_hip_margin
    reach = (wrist.x - shoulder.x) * outward
    return in_band and reach > t.side_extension_margin


def classify(landmarks: LandmarkSet | None, thresholds: PoseThresholds = DEFAULT_THRESHOLDS) -> PoseLabel:
    """
    Classify one frame.

    Args:
        landmarks: Detected person, or None when nobody was detected
        thresholds: Classifier constants

    Returns:
        The highest-priority matching label
    """
    if landmarks is None:
        return PoseLabel.NONE

    nose = landmarks[BodyPoint.NOSE]
    lw = landmarks[BodyPoint.LEFT_WRIST]
    rw = landmarks[BodyPoint.RIGHT_WRIST]

    if _distance(lw, rw) < thresholds.cross_arms_distance and lw.y > nose.y:
        return PoseLabel.CROSS_ARMS

    left_up = lw.y < nose.y
    right_up = rw.y < nose.y
    if left_up and right_up:
        return PoseLabel.BOTH_UP
    if left_up:
        return PoseLabel.LEFT_UP
    if right_up:
        return PoseLabel.RIGHT_UP

    ls = landmarks[BodyPoint.LEFT_SHOULDER]
    rs = landmarks[BodyPoint.RIGHT_SHOULDER]
    # +1 when the person's left side lies toward larger x in the image
    outward = 1.0 if ls.x >= rs.x else -1.0

    if _is_side(lw, ls, landmarks[BodyPoint.LEFT_HIP], outward, thresholds):
        return PoseLabel.LEFT_SIDE
    if _is_side(rw, rs, landmarks[BodyPoint.RIGHT_HIP], -outward, thresholds):
        return PoseLabel.RIGHT_SIDE

    return PoseLabel.NONE
