"""Unit tests for classes representing 3D rotations and orientations."""

import numpy as np
import pytest
from hypothesis import given

from arm_commander.spatial import EulerRPY, Quaternion

from .strategies import euler_rpys, quaternions


@given(quaternions())
def test_quaternion_to_euler_rpy_and_back(quat: Quaternion) -> None:
    """Verify that any Quaternion is unchanged after converting to and from Euler angles."""
    # Arrange/Act - Given a unit quaternion, convert to and from Euler RPY angles
    euler_rpy = quat.to_euler_rpy()
    result_quat = euler_rpy.to_quaternion()

    # Assert - Expect that the resulting quaternion equals the original (modulo negation)
    assert quat.approx_equal(result_quat, rtol=1e-05, atol=1e-07)


@given(quaternions())
def test_quaternion_to_homogeneous_matrix_and_back(quat: Quaternion) -> None:
    """Verify that a Quaternion is unchanged after converting to and from a homogeneous matrix."""
    # Arrange/Act - Given a unit quaternion, convert to and from a homogeneous matrix
    matrix = quat.to_homogeneous_matrix()
    result_quat = Quaternion.from_homogeneous_matrix(matrix)

    # Assert - Expect that the resulting quaternion equals the original (modulo negation)
    assert quat.approx_equal(result_quat)


@given(euler_rpys())
def test_euler_rpy_always_yields_unit_quaternion(rpy: EulerRPY) -> None:
    """Verify that any finite roll, pitch, and yaw angles convert into a unit quaternion."""
    # Arrange/Act - Convert the Euler angles into a quaternion
    quat = rpy.to_quaternion()

    # Assert - Expect that the quaternion has unit norm
    assert np.linalg.norm(quat.to_array()) == pytest.approx(1.0)


def test_zero_quaternion_raises_error() -> None:
    """Verify that attempting to construct an all-zero Quaternion raises a ValueError."""
    with pytest.raises(ValueError, match="zero-valued"):
        Quaternion(0.0, 0.0, 0.0, 0.0)


def test_non_finite_quaternion_raises_error() -> None:
    """Verify that a Quaternion with a NaN component raises a ValueError."""
    with pytest.raises(ValueError, match="non-finite"):
        Quaternion(float("nan"), 0.0, 0.0, 1.0)


def test_quaternion_is_normalized_on_construction() -> None:
    """Verify that a Quaternion is scaled to unit norm when constructed."""
    # Arrange/Act - Construct a quaternion with norm 2
    quat = Quaternion(0.0, 0.0, 0.0, 2.0)

    # Assert - Expect the identity rotation
    assert quat.approx_equal(Quaternion.identity())


def test_identity_rpy_is_identity_quaternion() -> None:
    """Verify that zero roll, pitch, and yaw produce the identity quaternion."""
    assert EulerRPY.identity().to_quaternion().approx_equal(Quaternion.identity())


@given(quaternions(), quaternions())
def test_slerp_endpoints_match_inputs(q0: Quaternion, q1: Quaternion) -> None:
    """Verify that spherical interpolation starts at the first and ends at the second rotation."""
    # Arrange/Act - Interpolate at the beginning and end of the arc
    start = q0.slerp(q1, 0.0)
    end = q0.slerp(q1, 1.0)

    # Assert - Expect the endpoints to be the given rotations (modulo negation)
    assert start.approx_equal(q0, atol=1e-06)
    assert end.approx_equal(q1, atol=1e-06)


def test_slerp_halfway_about_z() -> None:
    """Verify that halfway between identity and a 90-degree yaw is a 45-degree yaw."""
    # Arrange - Create rotations of 0 and 90 degrees about the z-axis
    q0 = Quaternion.identity()
    q1 = EulerRPY(0.0, 0.0, np.pi / 2).to_quaternion()

    # Act - Interpolate halfway between them
    halfway = q0.slerp(q1, 0.5)

    # Assert - Expect a 45-degree rotation about the z-axis
    assert halfway.approx_equal(EulerRPY(0.0, 0.0, np.pi / 4).to_quaternion(), atol=1e-07)
    assert q0.angle_to_rad(halfway) == pytest.approx(np.pi / 4)


def test_quaternion_multiplication_composes_rotations() -> None:
    """Verify that two 45-degree yaw rotations compose into a 90-degree yaw."""
    # Arrange
    yaw_45 = EulerRPY(0.0, 0.0, np.pi / 4).to_quaternion()

    # Act
    product = yaw_45 * yaw_45

    # Assert
    assert product.approx_equal(EulerRPY(0.0, 0.0, np.pi / 2).to_quaternion(), atol=1e-07)
