"""Define an execution backend that sends trajectories to a FollowJointTrajectory action server."""

from __future__ import annotations

from typing import TYPE_CHECKING

import rospy
from actionlib.simple_action_client import SimpleActionClient
from actionlib_msgs.msg import GoalStatus as GoalStatusMsg
from control_msgs.msg import (
    FollowJointTrajectoryAction,
    FollowJointTrajectoryGoal,
    FollowJointTrajectoryResult,
)

from arm_commander.io.logging import log_error, log_info
from arm_commander.robots import ExecutionBackend, GoalStatus, TerminalState
from arm_commander.ros.msg_conversion import trajectory_to_msg

if TYPE_CHECKING:
    from arm_commander.motion_planning import Trajectory

ACTIONLIB_STATUSES = {
    GoalStatusMsg.SUCCEEDED: GoalStatus.SUCCEEDED,
    GoalStatusMsg.ABORTED: GoalStatus.ABORTED,
    GoalStatusMsg.REJECTED: GoalStatus.REJECTED,
    GoalStatusMsg.PREEMPTED: GoalStatus.PREEMPTED,
    GoalStatusMsg.RECALLED: GoalStatus.PREEMPTED,
    GoalStatusMsg.LOST: GoalStatus.LOST,
}
"""Map from actionlib terminal goal statuses to the backend's terminal statuses."""


class FollowJointTrajectoryBackend(ExecutionBackend):
    """Executes trajectories through a control_msgs/FollowJointTrajectory action server."""

    def __init__(self, action_name: str) -> None:
        """Initialize the backend with the name of the trajectory action (e.g., a controller's)."""
        self.action_name = action_name
        self._client: SimpleActionClient | None = None

    def connect(self, timeout_s: float) -> bool:
        """Create a fresh action client and wait for its server to become available."""
        self._client = SimpleActionClient(self.action_name, FollowJointTrajectoryAction)
        if not self._client.wait_for_server(timeout=rospy.Duration.from_sec(timeout_s)):
            log_error(f"Couldn't find ROS action server '{self.action_name}' in time!")
            self._client = None
            return False

        log_info(f"Connected to ROS action server '{self.action_name}'.")
        return True

    def send_trajectory_and_wait(
        self,
        trajectory: Trajectory,
        goal_time_tolerance_s: float,
        timeout_s: float,
    ) -> TerminalState:
        """Send the trajectory as one goal and block until it finishes or times out."""
        if self._client is None:
            raise RuntimeError("Cannot send a trajectory before connecting to the action server.")

        goal_msg = FollowJointTrajectoryGoal()
        goal_msg.trajectory = trajectory_to_msg(trajectory)
        goal_msg.goal_time_tolerance = rospy.Duration.from_sec(goal_time_tolerance_s)

        self._client.send_goal(goal_msg)
        if not self._client.wait_for_result(timeout=rospy.Duration.from_sec(timeout_s)):
            self._client.cancel_goal()
            return TerminalState(GoalStatus.TIMED_OUT, f"No result within {timeout_s:.1f} seconds.")

        status = ACTIONLIB_STATUSES.get(self._client.get_state(), GoalStatus.LOST)
        reason = self._client.get_goal_status_text()

        result: FollowJointTrajectoryResult | None = self._client.get_result()
        if result is not None and result.error_code != FollowJointTrajectoryResult.SUCCESSFUL:
            reason = result.error_string or f"controller error code {result.error_code}"
            if status is GoalStatus.SUCCEEDED:
                status = GoalStatus.ABORTED

        return TerminalState(status, reason)
