"""
Landmark set: the boundary between the pose detector and the classifier.

The detector is opaque. Whatever it returns is converted here into a
LandmarkSet of named, normalized points (x, y in [0, 1] image coordinates,
y growing downward) and the classifier sees nothing else.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any


class BodyPoint(str, Enum):
    """Points the classifier needs, with their BlazePose (33-point) indices."""

    NOSE = "nose"
    LEFT_SHOULDER = "left_shoulder"
    RIGHT_SHOULDER = "right_shoulder"
    LEFT_ELBOW = "left_elbow"
    RIGHT_ELBOW = "right_elbow"
    LEFT_WRIST = "left_wrist"
    RIGHT_WRIST = "right_wrist"
    LEFT_HIP = "left_hip"
    RIGHT_HIP = "right_hip"

    @property
    def pose_index(self) -> int:
        return _POSE_INDEX[self]


_POSE_INDEX = {
    BodyPoint.NOSE: 0,
    BodyPoint.LEFT_SHOULDER: 11,
    BodyPoint.RIGHT_SHOULDER: 12,
    BodyPoint.LEFT_ELBOW: 13,
    BodyPoint.RIGHT_ELBOW: 14,
    BodyPoint.LEFT_WRIST: 15,
    BodyPoint.RIGHT_WRIST: 16,
    BodyPoint.LEFT_HIP: 23,
    BodyPoint.RIGHT_HIP: 24,
}


@dataclass(frozen=True)
class Point:
    x: float
    y: float
    z: float = 0.0


class LandmarkSet:
    """
    Named landmarks for one detected person.

    Raises ValueError at construction if a required point is
    missing, so a half-filled set never reaches the classifier.
    """

    __slots__ = ("_points",)

    def __init__(self, points: Mapping[BodyPoint, Point]):
        missing = [p.value for p in BodyPoint if p not in points]
        if missing:
            raise ValueError(f"Landmark set is missing: {', '.join(missing)}")
        self._points = dict(points)

    def __getitem__(self, name: BodyPoint) -> Point:
        return self._points[name]

    def __repr__(self) -> str:
        return f"LandmarkSet({len(self._points)} points)"

    @classmethod
    def from_pose_landmarks(cls, landmarks: Sequence[Any]) -> LandmarkSet:
        """
        Build from an indexed detector result.

        Each element needs x and y attributes (z optional), as in the
        33-point pose landmark lists returned by MediaPipe.
        """
        points = {}
        for name in BodyPoint:
            lm = landmarks[name.pose_index]
            points[name] = Point(float(lm.x), float(lm.y), float(getattr(lm, "z", 0.0) or 0.0))
        return cls(points)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Sequence[float]]) -> LandmarkSet:
        """
        Build from {"left_wrist": [x, y, z?], ...}, the recording format.
        """
        points = {}
        for name in BodyPoint:
            if name.value not in data:
                continue
            coords = list(data[name.value])
            points[name] = Point(*(float(c) for c in coords[:3]))
        return cls(points)
