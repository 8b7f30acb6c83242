"""
Unit tests for the Pose value type.

Tests cover:
- Validation and construction helpers
- Rotation matrix properties
- World-to-local transform
- Serialization
"""

import math

import numpy as np
import pytest

from course_core.proto import Pose, create_pose


class TestPoseConstruction:
    """Tests for building poses."""

    def test_defaults(self):
        pose = Pose()

        assert pose.position == (0.0, 0.0, 0.0)
        assert pose.roll == pose.pitch == pose.yaw == 0.0

    def test_position_coerced_to_floats(self):
        pose = Pose(position=(1, 2, 3))

        assert pose.position == (1.0, 2.0, 3.0)
        assert all(isinstance(c, float) for c in pose.position)
        assert (pose.x, pose.y, pose.z) == (1.0, 2.0, 3.0)

    def test_invalid_position_length(self):
        with pytest.raises(ValueError):
            Pose(position=(1.0, 2.0))

    def test_non_finite_angle_rejected(self):
        with pytest.raises(ValueError):
            Pose(yaw=float('nan'))

    @pytest.mark.parametrize("position", [
        (float('nan'), 0.0, 0.0),
        (0.0, float('inf'), 0.0),
        (0.0, 0.0, float('-inf')),
    ])
    def test_non_finite_position_rejected(self, position):
        with pytest.raises(ValueError, match="finite"):
            Pose(position=position)

    def test_non_numeric_angle_rejected(self):
        with pytest.raises(ValueError, match="roll"):
            Pose.from_dict({'position': [0.0, 0.0, 0.0], 'roll': None})

    def test_create_pose(self):
        pose = create_pose(1.0, 2.0, yaw=0.5)

        assert pose.position == (1.0, 2.0, 0.0)
        assert pose.yaw == 0.5

    def test_from_dict_nested(self):
        pose = Pose.from_dict({'position': [1.0, 2.0, 3.0], 'yaw': 0.25})

        assert pose.position == (1.0, 2.0, 3.0)
        assert pose.yaw == 0.25
        assert pose.roll == 0.0

    def test_from_dict_flat(self):
        pose = Pose.from_dict({'x': 4.0, 'y': 5.0})

        assert pose.position == (4.0, 5.0, 0.0)

    def test_from_dict_without_position(self):
        with pytest.raises(ValueError, match="no position"):
            Pose.from_dict({'yaw': 1.0})

    def test_from_value(self):
        existing = Pose(position=(1.0, 1.0, 1.0))

        assert Pose.from_value(existing) is existing
        assert Pose.from_value([1.0, 2.0, 3.0]).position == (1.0, 2.0, 3.0)
        assert Pose.from_value({'x': 1.0, 'y': 2.0}).position == (1.0, 2.0, 0.0)

    def test_from_value_invalid(self):
        with pytest.raises(ValueError):
            Pose.from_value(42)

    def test_to_dict_round_trip(self):
        pose = Pose(position=(1.0, -2.0, 0.5), roll=0.1, pitch=0.2, yaw=0.3)

        assert Pose.from_dict(pose.to_dict()) == pose


class TestRotation:
    """Tests for orientation math."""

    def test_identity_rotation(self):
        np.testing.assert_allclose(Pose().rotation_matrix(), np.eye(3))

    def test_rotation_is_orthonormal(self):
        R = Pose(roll=0.3, pitch=-0.7, yaw=2.1).rotation_matrix()

        np.testing.assert_allclose(R @ R.T, np.eye(3), atol=1e-12)
        assert np.linalg.det(R) == pytest.approx(1.0)

    def test_yaw_rotates_x_axis(self):
        R = Pose(yaw=math.pi / 2).rotation_matrix()

        np.testing.assert_allclose(R @ np.array([1.0, 0.0, 0.0]), [0.0, 1.0, 0.0], atol=1e-12)


class TestToLocal:
    """Tests for world-to-local transform."""

    def test_translation_only(self):
        pose = Pose(position=(10.0, 5.0, 0.0))

        np.testing.assert_allclose(pose.to_local((12.0, 4.0, 1.0)), [2.0, -1.0, 1.0])

    def test_yaw_quarter_turn(self):
        """A point ahead along the heading maps onto +x."""
        pose = Pose(position=(1.0, 1.0, 0.0), yaw=math.pi / 2)

        np.testing.assert_allclose(pose.to_local((1.0, 3.0, 0.0)), [2.0, 0.0, 0.0], atol=1e-12)
        np.testing.assert_allclose(pose.to_local((0.0, 1.0, 0.0)), [0.0, 1.0, 0.0], atol=1e-12)

    def test_to_local_inverts_body_transform(self):
        pose = Pose(position=(3.0, -2.0, 1.0), roll=0.2, pitch=0.4, yaw=-1.3)
        local = np.array([1.5, -0.5, 2.0])

        world = pose.rotation_matrix() @ local + pose.position_array

        np.testing.assert_allclose(pose.to_local(world), local, atol=1e-12)
