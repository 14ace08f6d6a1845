"""Define the waypoint interpolator that expands a motion goal into intermediate targets.

Convention: for two or more points, the sequence includes both the start and the goal, with
    samples evenly spaced in between. A request for one point (or fewer) yields only the goal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Union

import numpy as np

from arm_commander.kinematics import JointState
from arm_commander.spatial import Point3D, Pose3D

logger = logging.getLogger(__name__)

Waypoint = Union[Pose3D, JointState]
"""A target end-effector pose or joint configuration along a planned path."""


class PathMode(Enum):
    """How the planning engine should connect the waypoints of a sequence."""

    CARTESIAN = "cartesian"
    """Follow a straight end-effector path through the pose waypoints."""

    FREE_SPACE = "free_space"
    """Let the planner choose any collision-free path to the pose goal."""

    JOINT = "joint"
    """Interpolate linearly in joint space through the joint waypoints."""


@dataclass(frozen=True)
class WaypointSequence:
    """An ordered, non-empty list of waypoints generated for one motion request."""

    waypoints: tuple[Waypoint, ...]
    mode: PathMode

    clamped_from: int | None = None
    """Point count originally requested, if it exceeded the configured maximum (else None)."""

    def __post_init__(self) -> None:
        """Verify that the sequence is non-empty and its waypoints match its mode."""
        object.__setattr__(self, "waypoints", tuple(self.waypoints))
        if not self.waypoints:
            raise ValueError("A waypoint sequence must contain at least one waypoint.")

        expected_t = JointState if self.mode is PathMode.JOINT else Pose3D
        for wp in self.waypoints:
            if not isinstance(wp, expected_t):
                raise TypeError(f"{self.mode.value} sequences hold {expected_t.__name__}, got {wp}")

    def __len__(self) -> int:
        """Return the number of waypoints in the sequence."""
        return len(self.waypoints)

    @property
    def count(self) -> int:
        """Retrieve the number of waypoints requested from the planning engine."""
        return len(self.waypoints)

    @property
    def was_clamped(self) -> bool:
        """Check whether the requested point count was reduced to the configured maximum."""
        return self.clamped_from is not None

    @property
    def goal(self) -> Waypoint:
        """Retrieve the final waypoint of the sequence."""
        return self.waypoints[-1]


def interpolation_fractions(num_points: int) -> np.ndarray:
    """Compute the interpolation fractions for the given number of points.

    :param num_points: Number of samples requested (values <= 1 produce only the goal)
    :return: Array of fractions in [0, 1], always ending with 1.0
    """
    if num_points <= 1:
        return np.array([1.0])
    return np.linspace(0.0, 1.0, num_points)


class WaypointInterpolator:
    """Expands start and goal states into evenly spaced waypoint sequences."""

    def __init__(self, max_cartesian_points: int, max_joint_points: int) -> None:
        """Initialize the interpolator with separate point-count limits per path mode.

        :param max_cartesian_points: Maximum number of waypoints in a Cartesian sequence
        :param max_joint_points: Maximum number of waypoints in a joint-space sequence
        """
        if max_cartesian_points < 1 or max_joint_points < 1:
            raise ValueError("Waypoint limits must allow at least one point.")

        self.max_cartesian_points = max_cartesian_points
        self.max_joint_points = max_joint_points

    def interpolate(
        self,
        start: Waypoint,
        goal: Waypoint,
        num_cartesian_points: int,
        num_joint_points: int,
    ) -> WaypointSequence:
        """Interpolate between the start and goal, choosing the mode from their types.

        :param start: Current (or requested initial) end-effector pose or joint state
        :param goal: Resolved goal of the same type as the start
        :param num_cartesian_points: Number of samples used if interpolating poses
        :param num_joint_points: Number of samples used if interpolating joint states
        :return: Non-empty sequence of waypoints ending at the goal
        """
        if isinstance(start, Pose3D) and isinstance(goal, Pose3D):
            return self.interpolate_cartesian(start, goal, num_cartesian_points)
        if isinstance(start, JointState) and isinstance(goal, JointState):
            return self.interpolate_joints(start, goal, num_joint_points)

        raise TypeError(f"Cannot interpolate from {type(start)} to {type(goal)}.")

    def interpolate_cartesian(
        self,
        start: Pose3D,
        goal: Pose3D,
        num_points: int,
    ) -> WaypointSequence:
        """Interpolate poses linearly in position and spherically in orientation.

        :param start: First pose of the straight-line path
        :param goal: Final pose of the straight-line path
        :param num_points: Requested number of waypoints (clamped to the Cartesian maximum)
        :return: Sequence of poses from the start to the goal
        """
        if start.ref_frame != goal.ref_frame:
            raise ValueError(f"Reference frames differ: {start.ref_frame} vs {goal.ref_frame}.")

        n, clamped_from = self._clamp(num_points, self.max_cartesian_points, "Cartesian")

        p0 = start.position.to_array()
        p1 = goal.position.to_array()
        poses = []
        for t in interpolation_fractions(n):
            if t == 1.0:
                poses.append(goal)  # The final waypoint is exactly the goal
                continue

            position = Point3D.from_array(p0 + t * (p1 - p0))
            orientation = start.orientation.slerp(goal.orientation, float(t))
            poses.append(Pose3D(position, orientation, start.ref_frame))

        return WaypointSequence(tuple(poses), PathMode.CARTESIAN, clamped_from)

    def interpolate_joints(
        self,
        start: JointState,
        goal: JointState,
        num_points: int,
    ) -> WaypointSequence:
        """Interpolate linearly per joint between two joint states.

        :param start: Joint state at the beginning of the path
        :param goal: Joint state at the end of the path (same joints, same order)
        :param num_points: Requested number of waypoints (clamped to the joint-space maximum)
        :return: Sequence of joint states from the start to the goal
        """
        goal.require_order(start.joint_names)

        n, clamped_from = self._clamp(num_points, self.max_joint_points, "joint-space")

        q0 = start.to_array()
        q1 = goal.to_array()
        states = [
            goal if t == 1.0 else start.with_positions(q0 + t * (q1 - q0))
            for t in interpolation_fractions(n)
        ]

        return WaypointSequence(tuple(states), PathMode.JOINT, clamped_from)

    @staticmethod
    def single_goal(goal: Waypoint, mode: PathMode) -> WaypointSequence:
        """Create a sequence holding only the given goal (no intermediate waypoints)."""
        return WaypointSequence((goal,), mode)

    def _clamp(self, requested: int, maximum: int, label: str) -> tuple[int, int | None]:
        """Clamp a requested point count to the given maximum.

        :return: Pair of the usable count and the original count if clamping occurred (else None)
        """
        if requested <= maximum:
            return requested, None

        logger.warning(f"Clamped {label} waypoints from {requested} to the maximum of {maximum}.")
        return maximum, requested
