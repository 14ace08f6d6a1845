"""Define functions to resolve relative Cartesian commands into absolute target poses."""

from __future__ import annotations

from typing import TYPE_CHECKING

from arm_commander.errors import InvalidOrientation
from arm_commander.spatial.points import Point3D

if TYPE_CHECKING:
    from collections.abc import Sequence

    from arm_commander.spatial.poses import Pose3D
    from arm_commander.spatial.rotations import EulerRPY, Quaternion


def to_absolute(
    current_pose: Pose3D,
    delta_xyz: Sequence[float],
    rpy: EulerRPY | None = None,
) -> Pose3D:
    """Resolve a relative Cartesian command into an absolute target pose.

    Position is additive relative to the current pose. The orientation, if given, replaces the
        current orientation; it is interpreted as absolute fixed-axis roll, pitch, and yaw.

    :param current_pose: Pose of the end-effector when the command is issued
    :param delta_xyz: Translation (dx, dy, dz) in meters, expressed in the pose's frame
    :param rpy: Optional absolute orientation (None keeps the current orientation)
    :return: Absolute target pose in the same reference frame as the current pose
    :raises InvalidOrientation: If the resulting rotation is degenerate (e.g., NaN components)
    """
    delta = Point3D.from_sequence(delta_xyz)
    if not delta.is_finite():
        raise ValueError(f"Cartesian delta must be finite, got {delta.to_tuple()}.")

    orientation = current_pose.orientation if rpy is None else rpy_to_orientation(rpy)
    return current_pose.with_position(current_pose.position + delta).with_orientation(orientation)


def rpy_to_orientation(rpy: EulerRPY) -> Quaternion:
    """Convert absolute fixed-axis RPY angles into a unit quaternion, rejecting degenerate input.

    :raises InvalidOrientation: If the angles (or the resulting quaternion) are not finite
    """
    if not rpy.is_finite():
        raise InvalidOrientation(f"Roll/pitch/yaw must be finite, got {rpy.to_tuple()}.")

    try:
        return rpy.to_quaternion()
    except ValueError as error:
        raise InvalidOrientation(f"Cannot build a rotation from {rpy.to_tuple()}.") from error
