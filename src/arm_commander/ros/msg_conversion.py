"""Define functions to convert between the commander's data structures and ROS messages."""

from __future__ import annotations

from typing import Sequence

import rospy
from geometry_msgs.msg import Point, Pose, PoseStamped
from geometry_msgs.msg import Quaternion as QuaternionMsg
from sensor_msgs.msg import JointState as JointStateMsg
from trajectory_msgs.msg import JointTrajectory, JointTrajectoryPoint

from arm_commander.kinematics import JointState
from arm_commander.motion_planning import Trajectory, TrajectoryPoint
from arm_commander.spatial import DEFAULT_FRAME, Point3D, Pose3D, Quaternion


def point_to_msg(point: Point3D) -> Point:
    """Convert the given point into a geometry_msgs/Point message."""
    return Point(point.x, point.y, point.z)


def point_from_msg(point_msg: Point) -> Point3D:
    """Construct a Point3D from a geometry_msgs/Point message."""
    return Point3D(point_msg.x, point_msg.y, point_msg.z)


def quaternion_to_msg(q: Quaternion) -> QuaternionMsg:
    """Convert the given quaternion into a geometry_msgs/Quaternion message."""
    return QuaternionMsg(q.x, q.y, q.z, q.w)


def quaternion_from_msg(q_msg: QuaternionMsg) -> Quaternion:
    """Construct a Quaternion from a geometry_msgs/Quaternion message."""
    return Quaternion(q_msg.x, q_msg.y, q_msg.z, q_msg.w)


def pose_to_msg(pose: Pose3D) -> Pose:
    """Convert the given pose into a geometry_msgs/Pose message."""
    return Pose(point_to_msg(pose.position), quaternion_to_msg(pose.orientation))


def pose_to_stamped_msg(pose: Pose3D) -> PoseStamped:
    """Convert the given pose into a geometry_msgs/PoseStamped message."""
    msg = PoseStamped()
    msg.header.frame_id = pose.ref_frame
    msg.pose = pose_to_msg(pose)
    return msg


def pose_from_msg(pose_msg: Pose | PoseStamped, default_frame: str = DEFAULT_FRAME) -> Pose3D:
    """Construct a Pose3D from a geometry_msgs/Pose or geometry_msgs/PoseStamped message.

    :param pose_msg: ROS message representing a pose or time-stamped pose
    :param default_frame: Reference frame assumed for an unstamped pose
    :return: Constructed Pose3D instance
    :raises TypeError: If the given message is neither a geometry_msgs/Pose nor PoseStamped
    """
    if isinstance(pose_msg, Pose):
        frame_id = default_frame
        pose = pose_msg
    elif isinstance(pose_msg, PoseStamped):
        frame_id = pose_msg.header.frame_id or default_frame
        pose = pose_msg.pose
    else:
        raise TypeError(f"Received unexpected ROS message type: {type(pose_msg)}")

    return Pose3D(point_from_msg(pose.position), quaternion_from_msg(pose.orientation), frame_id)


def joint_state_from_msg(msg: JointStateMsg, joint_names: Sequence[str]) -> JointState:
    """Construct a JointState from a sensor_msgs/JointState message in canonical joint order.

    :param msg: Message that may list the joints in any order (and include extra joints)
    :param joint_names: Canonical order of the manipulator's joints
    :raises ValueError: If the message is missing any of the manipulator's joints
    """
    reported = dict(zip(msg.name, msg.position))
    config = {name: reported[name] for name in joint_names if name in reported}
    return JointState.from_configuration(config, joint_names)


def joint_state_to_msg(joint_state: JointState) -> JointStateMsg:
    """Convert the given joint state into a sensor_msgs/JointState message."""
    msg = JointStateMsg()
    msg.header.stamp = rospy.Time.now()
    msg.name = list(joint_state.joint_names)
    msg.position = list(joint_state.positions)
    return msg


def trajectory_point_to_msg(point: TrajectoryPoint) -> JointTrajectoryPoint:
    """Convert a trajectory point into a trajectory_msgs/JointTrajectoryPoint message."""
    msg = JointTrajectoryPoint()
    msg.positions = [point.positions[j] for j in point.joint_names]
    msg.velocities = [point.velocities.get(j, 0.0) for j in point.joint_names]
    msg.time_from_start = rospy.Duration.from_sec(point.time_s)
    return msg


def trajectory_to_msg(trajectory: Trajectory) -> JointTrajectory:
    """Convert a trajectory of points into a trajectory_msgs/JointTrajectory message."""
    msg = JointTrajectory()
    msg.joint_names = trajectory.joint_names
    msg.points = [trajectory_point_to_msg(p) for p in trajectory.points]
    return msg


def trajectory_point_from_msg(
    msg: JointTrajectoryPoint,
    joint_names: list[str],
) -> TrajectoryPoint:
    """Construct a TrajectoryPoint from a trajectory_msgs/JointTrajectoryPoint message."""
    return TrajectoryPoint(
        time_s=msg.time_from_start.to_sec(),
        positions=dict(zip(joint_names, msg.positions)),
        velocities=dict(zip(joint_names, msg.velocities)),
    )


def trajectory_from_msg(traj_msg: JointTrajectory) -> Trajectory:
    """Construct a Trajectory from a trajectory_msgs/JointTrajectory message."""
    joint_names = list(traj_msg.joint_names)
    points = traj_msg.points or []
    return Trajectory(tuple(trajectory_point_from_msg(p_msg, joint_names) for p_msg in points))
