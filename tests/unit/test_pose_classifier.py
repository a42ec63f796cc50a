"""
Unit tests for the pose classifier and the landmark boundary.

Coordinates are normalized image coordinates with y growing downward; the
neutral pose from conftest has the nose at y=0.20, shoulders at 0.35 and hips
at 0.70, with the person's left side at larger x.

Run: pytest tests/unit/test_pose_classifier.py -v
"""

from types import SimpleNamespace

import pytest

from joyo.gesture.classifier import PoseLabel, PoseThresholds, classify
from joyo.gesture.landmarks import BodyPoint, LandmarkSet, Point


class TestBasicPoses:
    def test_no_detection(self):
        assert classify(None) is PoseLabel.NONE

    def test_neutral_stance(self, make_pose):
        assert classify(make_pose()) is PoseLabel.NONE

    def test_both_up(self, make_pose):
        pose = make_pose(left_wrist=(0.65, 0.10), right_wrist=(0.35, 0.10))
        assert classify(pose) is PoseLabel.BOTH_UP

    def test_left_up(self, make_pose):
        assert classify(make_pose(left_wrist=(0.65, 0.10))) is PoseLabel.LEFT_UP

    def test_right_up(self, make_pose):
        assert classify(make_pose(right_wrist=(0.35, 0.10))) is PoseLabel.RIGHT_UP

    def test_cross_arms(self, make_pose):
        pose = make_pose(left_wrist=(0.48, 0.45), right_wrist=(0.52, 0.45))
        assert classify(pose) is PoseLabel.CROSS_ARMS

    def test_left_side(self, make_pose):
        assert classify(make_pose(left_wrist=(0.80, 0.40))) is PoseLabel.LEFT_SIDE

    def test_right_side(self, make_pose):
        assert classify(make_pose(right_wrist=(0.20, 0.40))) is PoseLabel.RIGHT_SIDE


class TestPriority:
    def test_cross_arms_beats_single_arm_up(self, make_pose):
        # Wrists together at the chin: right wrist just above the nose,
        # left wrist just below. Right_Up also matches; Cross_Arms wins.
        pose = make_pose(left_wrist=(0.50, 0.22), right_wrist=(0.52, 0.18))
        assert classify(pose) is PoseLabel.CROSS_ARMS

    def test_close_wrists_above_nose_are_both_up(self, make_pose):
        # Cross_Arms needs the left wrist below the nose
        pose = make_pose(left_wrist=(0.50, 0.10), right_wrist=(0.52, 0.10))
        assert classify(pose) is PoseLabel.BOTH_UP

    def test_arm_up_beats_other_arm_side(self, make_pose):
        pose = make_pose(left_wrist=(0.65, 0.10), right_wrist=(0.20, 0.40))
        assert classify(pose) is PoseLabel.LEFT_UP

    def test_both_sides_resolves_left_first(self, make_pose):
        pose = make_pose(left_wrist=(0.80, 0.40), right_wrist=(0.20, 0.40))
        assert classify(pose) is PoseLabel.LEFT_SIDE


class TestSideBoundaries:
    def test_not_extended_enough(self, make_pose):
        assert classify(make_pose(left_wrist=(0.63, 0.50))) is PoseLabel.NONE

    def test_above_shoulder_band(self, make_pose):
        assert classify(make_pose(left_wrist=(0.80, 0.30))) is PoseLabel.NONE

    def test_within_hip_margin(self, make_pose):
        assert classify(make_pose(left_wrist=(0.80, 0.75))) is PoseLabel.LEFT_SIDE

    def test_below_hip_margin(self, make_pose):
        assert classify(make_pose(left_wrist=(0.80, 0.90))) is PoseLabel.NONE

    def test_mirrored_frame(self, make_pose):
        pose = make_pose(
            left_shoulder=(0.40, 0.35),
            right_shoulder=(0.60, 0.35),
            left_wrist=(0.20, 0.40),
            right_wrist=(0.60, 0.65),
        )
        assert classify(pose) is PoseLabel.LEFT_SIDE


class TestThresholds:
    def test_defaults(self):
        t = PoseThresholds()
        assert t.cross_arms_distance == 0.15
        assert t.side_extension_margin == 0.05

    def test_wider_cross_distance(self, make_pose):
        # Hanging wrists are 0.20 apart
        assert classify(make_pose()) is PoseLabel.NONE
        assert classify(make_pose(), PoseThresholds(cross_arms_distance=0.3)) is PoseLabel.CROSS_ARMS

    def test_larger_extension_margin(self, make_pose):
        pose = make_pose(left_wrist=(0.70, 0.40))
        assert classify(pose) is PoseLabel.LEFT_SIDE
        assert classify(pose, PoseThresholds(side_extension_margin=0.2)) is PoseLabel.NONE


class TestLandmarkSet:
    def test_missing_point_rejected(self):
        with pytest.raises(ValueError, match="left_wrist"):
            LandmarkSet({p: Point(0.5, 0.5) for p in BodyPoint if p is not BodyPoint.LEFT_WRIST})

    def test_from_pose_landmarks_uses_indices(self):
        landmarks = [SimpleNamespace(x=0.0, y=0.0, z=0.0) for _ in range(33)]
        landmarks[15] = SimpleNamespace(x=0.7, y=0.1, z=-0.2)
        lm_set = LandmarkSet.from_pose_landmarks(landmarks)
        assert lm_set[BodyPoint.LEFT_WRIST] == Point(0.7, 0.1, -0.2)

    def test_from_mapping(self, make_pose):
        data = {p.value: [0.5, 0.6] for p in BodyPoint}
        data["nose"] = [0.5, 0.2, 0.1]
        lm_set = LandmarkSet.from_mapping(data)
        assert lm_set[BodyPoint.NOSE] == Point(0.5, 0.2, 0.1)
        assert lm_set[BodyPoint.LEFT_HIP] == Point(0.5, 0.6)
