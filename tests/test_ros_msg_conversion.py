"""Unit tests for conversions between ROS messages and the commander's types."""

import pytest

pytest.importorskip("rospy")

from geometry_msgs.msg import Pose  # noqa: E402
from sensor_msgs.msg import JointState as JointStateMsg  # noqa: E402

from arm_commander.kinematics import JointState  # noqa: E402
from arm_commander.motion_planning import Trajectory, TrajectoryPoint  # noqa: E402
from arm_commander.ros.msg_conversion import (  # noqa: E402
    joint_state_from_msg,
    pose_from_msg,
    pose_to_msg,
    pose_to_stamped_msg,
    trajectory_from_msg,
    trajectory_to_msg,
)
from arm_commander.spatial import Pose3D  # noqa: E402


def test_stamped_pose_keeps_reference_frame() -> None:
    """Verify that a stamped pose message carries the pose's reference frame."""
    pose = Pose3D.from_xyz_rpy(0.4, -0.1, 0.3, yaw_rad=0.5, ref_frame="base_link")

    result = pose_from_msg(pose_to_stamped_msg(pose))

    assert result.approx_equal(pose)
    assert result.ref_frame == "base_link"


def test_unstamped_pose_uses_default_frame() -> None:
    """Verify that an unstamped pose message is expressed in the given default frame."""
    msg = pose_to_msg(Pose3D.identity())

    result = pose_from_msg(msg, default_frame="world")

    assert isinstance(msg, Pose)
    assert result.ref_frame == "world"


def test_pose_from_unexpected_message_raises_type_error() -> None:
    """Verify that converting a non-pose message raises a TypeError."""
    with pytest.raises(TypeError):
        pose_from_msg(JointStateMsg())


def test_joint_state_message_is_reordered_canonically() -> None:
    """Verify that joint states are reordered and filtered to the manipulator's joints."""
    # Arrange - The driver reports the joints out of order, plus a gripper joint
    msg = JointStateMsg()
    msg.name = ["joint2", "gripper", "joint1"]
    msg.position = [0.2, 0.04, 0.1]

    # Act
    result = joint_state_from_msg(msg, ["joint1", "joint2"])

    # Assert
    assert result == JointState(("joint1", "joint2"), (0.1, 0.2))


def test_trajectory_message_preserves_points() -> None:
    """Verify that trajectory messages keep each point's timing, positions, and velocities."""
    # Arrange
    trajectory = Trajectory(
        (
            TrajectoryPoint(0.0, {"joint1": 0.0, "joint2": 0.5}),
            TrajectoryPoint(1.5, {"joint1": 0.2, "joint2": 0.4}, {"joint1": 0.1, "joint2": 0.0}),
        ),
    )

    # Act
    result = trajectory_from_msg(trajectory_to_msg(trajectory))

    # Assert
    assert result.joint_names == ["joint1", "joint2"]
    assert [p.time_s for p in result.points] == pytest.approx([0.0, 1.5])
    assert result.points[1].positions == pytest.approx({"joint1": 0.2, "joint2": 0.4})
    assert result.points[1].velocities == pytest.approx({"joint1": 0.1, "joint2": 0.0})
