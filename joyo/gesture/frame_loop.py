"""
Frame classification loop and detector adapters.

One pass per delivered video frame: timestamp gate -> landmark provider ->
classifier -> confirmation timer. Frames must arrive with strictly increasing
timestamps; a frame at or before the last processed timestamp is dropped
without being classified.
"""

from __future__ import annotations

from typing import Any, Protocol

from loguru import logger

from .classifier import DEFAULT_THRESHOLDS, PoseLabel, PoseThresholds, classify
from .confirmation import GestureConfirmationTimer
from .landmarks import LandmarkSet


class LandmarkProvider(Protocol):
    """Pose detector boundary: zero or one person per frame."""

    def detect(self, frame: Any, timestamp_ms: int) -> LandmarkSet | None: ...


class PoseLandmarkerAdapter:
    """
    Wraps a video-mode pose landmarker (detect_for_video(image, ts) returning
    a result with a pose_landmarks list of people) as a LandmarkProvider.
    Only the first person is used.
    """

    def __init__(self, landmarker: Any):
        self.landmarker = landmarker

    def detect(self, frame: Any, timestamp_ms: int) -> LandmarkSet | None:
        result = self.landmarker.detect_for_video(frame, timestamp_ms)
        people = getattr(result, "pose_landmarks", None)
        if not people:
            return None
        return LandmarkSet.from_pose_landmarks(people[0])

    def close(self) -> None:
        close = getattr(self.landmarker, "close", None)
        if close is not None:
            close()


class FrameClassificationLoop:
    """
    Classifies frames and feeds the labels to the confirmation timer.
    """

    def __init__(
        self,
        provider: LandmarkProvider,
        timer: GestureConfirmationTimer,
        thresholds: PoseThresholds = DEFAULT_THRESHOLDS,
    ):
        self.provider = provider
        self.timer = timer
        self.thresholds = thresholds
        self.last_timestamp_ms: int | None = None
        self.last_label = PoseLabel.NONE
        self.dropped_frames = 0

    def process(self, frame: Any, timestamp_ms: int) -> PoseLabel | None:
        """
        Run one frame through the pipeline.

        Returns:
            The frame's label, or None if the frame was dropped
        """
        if self.last_timestamp_ms is not None and timestamp_ms <= self.last_timestamp_ms:
            self.dropped_frames += 1
            logger.debug(f"Dropped frame at {timestamp_ms}ms (last {self.last_timestamp_ms}ms)")
            return None
        self.last_timestamp_ms = timestamp_ms

        label = classify(self.provider.detect(frame, timestamp_ms), self.thresholds)
        self.last_label = label
        self.timer.observe(label)
        return label

    def reset(self) -> None:
        self.last_timestamp_ms = None
        self.last_label = PoseLabel.NONE
