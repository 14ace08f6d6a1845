"""Unit tests for resolving relative Cartesian commands into absolute poses."""

import math

import pytest
from hypothesis import given

from arm_commander.errors import InvalidOrientation
from arm_commander.spatial import EulerRPY, Pose3D, rpy_to_orientation, to_absolute

from .strategies import deltas, euler_rpys, poses


@given(poses(), deltas())
def test_to_absolute_adds_delta_and_keeps_orientation(pose: Pose3D, delta: tuple) -> None:
    """Verify that a relative move without RPY offsets the position and keeps the orientation."""
    # Arrange/Act - Resolve the relative command against the current pose
    result = to_absolute(pose, delta)

    # Assert - Expect an additive position and an unchanged orientation and frame
    expected = [p + d for p, d in zip(pose.position.to_tuple(), delta)]
    assert list(result.position.to_tuple()) == pytest.approx(expected)
    assert result.orientation == pose.orientation
    assert result.ref_frame == pose.ref_frame


@given(poses(), deltas(), euler_rpys())
def test_to_absolute_replaces_orientation(pose: Pose3D, delta: tuple, rpy: EulerRPY) -> None:
    """Verify that a relative move with RPY angles sets the goal orientation absolutely."""
    # Arrange/Act
    result = to_absolute(pose, delta, rpy)

    # Assert - Expect the orientation to equal the given angles, not to be composed with the pose
    assert result.orientation.approx_equal(rpy.to_quaternion())


def test_zero_delta_relative_move_scenario() -> None:
    """Verify the goal of a 10 cm move along x from the origin with identity orientation."""
    # Arrange
    current = Pose3D.identity()

    # Act
    goal = to_absolute(current, (0.1, 0.0, 0.0))

    # Assert
    assert goal.approx_equal(Pose3D.from_xyz_rpy(x=0.1))


def test_non_finite_delta_raises_value_error() -> None:
    """Verify that a NaN offset is rejected before any pose is produced."""
    with pytest.raises(ValueError, match="finite"):
        to_absolute(Pose3D.identity(), (math.nan, 0.0, 0.0))


def test_non_finite_rpy_raises_invalid_orientation() -> None:
    """Verify that NaN orientation angles raise InvalidOrientation (also a ValueError)."""
    # Arrange
    rpy = EulerRPY(math.nan, 0.0, 0.0)

    # Act/Assert
    with pytest.raises(InvalidOrientation):
        rpy_to_orientation(rpy)
    with pytest.raises(ValueError):
        to_absolute(Pose3D.identity(), (0.0, 0.0, 0.0), rpy)
