"""Define a live feedback source fed by the manipulator driver's ROS topics."""

from __future__ import annotations

import threading
import time
from typing import TYPE_CHECKING, Sequence

import rospy
from geometry_msgs.msg import PoseStamped
from sensor_msgs.msg import JointState as JointStateMsg

from arm_commander.robots import FeedbackSample, LiveFeedbackSource
from arm_commander.ros.msg_conversion import joint_state_from_msg, pose_from_msg

if TYPE_CHECKING:
    from arm_commander.kinematics import JointState
    from arm_commander.spatial import Pose3D


class TopicFeedbackSource(LiveFeedbackSource):
    """Caches the latest end-effector pose and joint state published by the driver."""

    def __init__(self, tool_pose_topic: str, joint_states_topic: str, joint_names: Sequence[str]):
        """Subscribe to the driver's tool pose and joint state topics.

        :param tool_pose_topic: Topic of geometry_msgs/PoseStamped end-effector poses
        :param joint_states_topic: Topic of sensor_msgs/JointState messages
        :param joint_names: Canonical order of the manipulator's joints
        """
        self._joint_names = tuple(joint_names)
        self._lock = threading.Lock()
        self._latest_pose: FeedbackSample[Pose3D] | None = None
        self._latest_joint_state: FeedbackSample[JointState] | None = None

        self._pose_sub = rospy.Subscriber(tool_pose_topic, PoseStamped, self._pose_callback)
        self._joints_sub = rospy.Subscriber(joint_states_topic, JointStateMsg, self._joint_callback)

    def latest_pose(self) -> FeedbackSample[Pose3D] | None:
        """Retrieve the most recently received end-effector pose (None if none yet)."""
        with self._lock:
            return self._latest_pose

    def latest_joint_state(self) -> FeedbackSample[JointState] | None:
        """Retrieve the most recently received joint state of the manipulator (None if none yet)."""
        with self._lock:
            return self._latest_joint_state

    def _pose_callback(self, msg: PoseStamped) -> None:
        """Store the received end-effector pose, stamped with its time of arrival."""
        sample = FeedbackSample(pose_from_msg(msg), time.time())
        with self._lock:
            self._latest_pose = sample

    def _joint_callback(self, msg: JointStateMsg) -> None:
        """Store the received joint state if it covers all of the manipulator's joints."""
        if not set(self._joint_names).issubset(msg.name):
            return  # e.g., a gripper-only message

        sample = FeedbackSample(joint_state_from_msg(msg, self._joint_names), time.time())
        with self._lock:
            self._latest_joint_state = sample
