"""Define a planning engine that computes and re-times manipulator plans using MoveIt."""

from __future__ import annotations

import sys
from math import floor
from typing import TYPE_CHECKING, Mapping, Tuple

import rospy
from moveit_commander import MoveGroupCommander, RobotCommander, roscpp_initialize
from moveit_msgs.msg import MoveItErrorCodes, PositionIKRequest, RobotTrajectory
from moveit_msgs.srv import GetPositionIK

from arm_commander.config import load_named_targets
from arm_commander.io.logging import log_info, log_warning
from arm_commander.kinematics import JointState
from arm_commander.motion_planning import Plan, PathMode
from arm_commander.robots import PlanningEngine
from arm_commander.ros.msg_conversion import (
    joint_state_from_msg,
    joint_state_to_msg,
    pose_from_msg,
    pose_to_msg,
    pose_to_stamped_msg,
    trajectory_from_msg,
    trajectory_to_msg,
)

if TYPE_CHECKING:
    from pathlib import Path

    from arm_commander.config import MoveItConfig
    from arm_commander.motion_planning import WaypointSequence
    from arm_commander.robots import NamedTargetValue
    from arm_commander.spatial import Pose3D

MoveItResult = Tuple[bool, RobotTrajectory, float, MoveItErrorCodes]
"""Boolean success, trajectory message, planning time (s), and error codes.

Reference: https://tinyurl.com/moveit-noetic-plan
"""


class MoveItPlanningEngine(PlanningEngine):
    """Plans through waypoint sequences using a MoveIt move group."""

    def __init__(
        self,
        config: MoveItConfig,
        targets_yaml: Path | None = None,
    ) -> None:
        """Initialize the move group and apply the configured planning parameters.

        :param config: Settings of the move group, its planner, and its ROS interfaces
        :param targets_yaml: Optional YAML file of named targets added to those in the SRDF
        """
        self.config = config

        roscpp_initialize(sys.argv)
        self.robot = RobotCommander()
        self.move_group = MoveGroupCommander(config.move_group, wait_for_servers=30)

        self.move_group.set_planner_id(config.planner_id)
        self.move_group.set_planning_time(config.planning_time_s)
        self.move_group.set_num_planning_attempts(config.planning_attempts)
        self.move_group.set_goal_position_tolerance(config.position_tolerance_m)
        self.move_group.set_goal_orientation_tolerance(config.orientation_tolerance_rad)
        self.move_group.set_max_velocity_scaling_factor(config.max_velocity_scale)
        self.move_group.set_max_acceleration_scaling_factor(config.max_acceleration_scale)

        self.base_frame: str = self.move_group.get_planning_frame()
        self.ee_link: str = self.move_group.get_end_effector_link()
        log_info(f"[MoveIt {config.move_group}] Planning for {self.ee_link} in {self.base_frame}.")

        self._extra_targets: dict[str, NamedTargetValue] = {}
        if targets_yaml is not None:
            self._extra_targets = load_named_targets(targets_yaml, self.joint_names)

    @property
    def joint_names(self) -> tuple[str, ...]:
        """Retrieve the names of the move group's active joints in their canonical order."""
        return tuple(self.move_group.get_active_joints())

    def current_state(self) -> tuple[JointState, Pose3D]:
        """Retrieve MoveIt's current joint state and end-effector pose."""
        joint_values = self.move_group.get_current_joint_values()
        joint_state = JointState(self.joint_names, tuple(joint_values))

        pose_msg = self.move_group.get_current_pose(self.ee_link)
        return joint_state, pose_from_msg(pose_msg, default_frame=self.base_frame)

    def named_targets(self) -> Mapping[str, NamedTargetValue]:
        """Retrieve the SRDF's named joint configurations plus any extra named targets."""
        targets: dict[str, NamedTargetValue] = {}
        for name in self.move_group.get_named_targets():
            values = self.move_group.get_named_target_values(name)
            targets[name] = JointState.from_configuration(values, self.joint_names)

        targets.update(self._extra_targets)
        return targets

    def plan_to(self, sequence: WaypointSequence) -> Plan:
        """Compute a single plan through the given waypoints, starting at the current state."""
        self.move_group.set_start_state_to_current_state()

        if sequence.mode is PathMode.CARTESIAN:
            return self._plan_cartesian(sequence)
        if sequence.mode is PathMode.FREE_SPACE:
            return self._plan_free_space(sequence)
        return self._plan_joints(sequence)

    def _plan_cartesian(self, sequence: WaypointSequence) -> Plan:
        """Plan a straight end-effector path through the pose waypoints."""
        waypoint_msgs = [pose_to_msg(pose) for pose in sequence.waypoints]

        robot_traj, fraction = self.move_group.compute_cartesian_path(
            waypoint_msgs,
            self.config.ee_step_m,
            self.config.jump_threshold,
        )
        rospy.loginfo(f"MoveIt's Cartesian plan followed {fraction * 100.0:.2f}% of the path.")

        n = floor(fraction * sequence.count)
        if n == 0:
            return Plan.failure(f"Cartesian path covered {fraction * 100.0:.2f}% of the path.")

        trajectory = trajectory_from_msg(robot_traj.joint_trajectory)
        return Plan(trajectory, planned_waypoints=n, valid=True, message=f"fraction {fraction:.4f}")

    def _plan_free_space(self, sequence: WaypointSequence) -> Plan:
        """Plan any collision-free path to the sequence's pose goal."""
        self.move_group.set_pose_target(pose_to_stamped_msg(sequence.goal))
        try:
            return self._plan_to_target(sequence.count)
        finally:
            self.move_group.clear_pose_targets()

    def _plan_joints(self, sequence: WaypointSequence) -> Plan:
        """Plan to the last joint waypoint that lies within the joints' bounds."""
        reachable = 0
        for waypoint in sequence.waypoints:
            if not self._within_bounds(waypoint):
                log_warning(f"Joint waypoint {reachable} is outside the joint limits: {waypoint}")
                break
            reachable += 1

        if reachable == 0:
            return Plan.failure("The first joint waypoint is outside the joint limits.")

        goal = sequence.waypoints[reachable - 1]
        self.move_group.set_joint_value_target(goal.to_configuration())
        return self._plan_to_target(reachable)

    def _plan_to_target(self, num_waypoints: int) -> Plan:
        """Plan to the move group's current target, covering the given number of waypoints."""
        result: MoveItResult = self.move_group.plan()
        success, robot_traj, planning_time_s, error_code = result

        outcome_desc = "succeeded" if success else "failed"
        rospy.loginfo(f"Motion planning {outcome_desc} after {planning_time_s:.4f} seconds.")

        if not success:
            rospy.logerr(f"Motion planning error code: {error_code.val}.")
            return Plan.failure(f"MoveIt error code {error_code.val}")

        trajectory = trajectory_from_msg(robot_traj.joint_trajectory)
        return Plan(trajectory, planned_waypoints=num_waypoints, valid=True)

    def _within_bounds(self, joint_state: JointState) -> bool:
        """Check whether every joint value lies within the joint's position limits."""
        for name, value in zip(joint_state.joint_names, joint_state.positions):
            bounds = self.robot.get_joint(name).bounds()
            if bounds and not bounds[0] <= value <= bounds[1]:
                return False
        return True

    def time_parameterize(self, plan: Plan, velocity_scale: float) -> Plan:
        """Re-time the plan's trajectory with MoveIt, scaling velocities uniformly."""
        traj_msg = RobotTrajectory()
        traj_msg.joint_trajectory = trajectory_to_msg(plan.trajectory)

        retimed = self.move_group.retime_trajectory(
            self.robot.get_current_state(),
            traj_msg,
            velocity_scaling_factor=velocity_scale,
            acceleration_scaling_factor=self.config.max_acceleration_scale,
        )
        trajectory = trajectory_from_msg(retimed.joint_trajectory)
        return plan.with_trajectory(trajectory, time_parameterized=True)

    def solve_ik(self, pose: Pose3D, seed: JointState) -> JointState | None:
        """Compute a collision-free IK solution for the end-effector pose using MoveIt's service.

        :param pose: Target pose of the end-effector
        :param seed: Joint state used to seed the IK solver
        :return: Joint state reaching the pose, or None if no solution was found
        """
        request = PositionIKRequest()
        request.group_name = self.config.move_group
        request.ik_link_name = self.ee_link
        request.robot_state.joint_state = joint_state_to_msg(seed)
        request.pose_stamped = pose_to_stamped_msg(pose)
        request.timeout = rospy.Duration.from_sec(self.config.planning_time_s)
        request.avoid_collisions = True

        rospy.wait_for_service(self.config.ik_service, timeout=self.config.planning_time_s)
        compute_ik = rospy.ServiceProxy(self.config.ik_service, GetPositionIK)
        response = compute_ik(request)

        if response.error_code.val != MoveItErrorCodes.SUCCESS:
            log_warning(f"IK failed for {pose} with error code {response.error_code.val}.")
            return None

        return joint_state_from_msg(response.solution.joint_state, self.joint_names)
