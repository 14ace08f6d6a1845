"""Define the interfaces of the collaborators used by the motion commander.

The planning engine (e.g., MoveIt), the execution backend (e.g., a FollowJointTrajectory action
server), and the live feedback source (e.g., a driver's tool-pose topic) are injected into the
commander through these interfaces, so that any of them can be replaced by a test double.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Generic, Mapping, TypeVar, Union

if TYPE_CHECKING:
    from arm_commander.kinematics import JointState
    from arm_commander.motion_planning.trajectories import Plan, Trajectory
    from arm_commander.motion_planning.waypoints import WaypointSequence
    from arm_commander.spatial import Pose3D

NamedTargetValue = Union["Pose3D", "JointState"]
"""A stored target: either an end-effector pose or a joint configuration."""

SampleT = TypeVar("SampleT")


class GoalStatus(Enum):
    """Terminal states reported by a trajectory execution backend."""

    SUCCEEDED = "succeeded"
    ABORTED = "aborted"
    REJECTED = "rejected"
    PREEMPTED = "preempted"
    TIMED_OUT = "timed_out"
    LOST = "lost"


@dataclass(frozen=True)
class TerminalState:
    """The final status of a trajectory execution, with the backend's reported reason."""

    status: GoalStatus
    reason: str = ""

    @property
    def succeeded(self) -> bool:
        """Check whether the backend reported success (the only successful terminal state)."""
        return self.status is GoalStatus.SUCCEEDED


@dataclass(frozen=True)
class FeedbackSample(Generic[SampleT]):
    """A value received from a live feedback source, with its receipt time."""

    value: SampleT
    stamp_s: float
    """Time (seconds since the epoch) at which the value was received."""


class PlanningEngine(ABC):
    """An external kinematics and motion planning engine for one manipulator."""

    @property
    @abstractmethod
    def joint_names(self) -> tuple[str, ...]:
        """Retrieve the names of the manipulator's joints in their canonical order."""
        ...

    @abstractmethod
    def plan_to(self, sequence: WaypointSequence) -> Plan:
        """Compute a single plan through all waypoints of the given sequence.

        :param sequence: Waypoints to be planned through, starting from the current state
        :return: Plan reporting validity and the number of waypoints it covers
        """
        ...

    @abstractmethod
    def current_state(self) -> tuple[JointState, Pose3D]:
        """Retrieve the engine's (possibly slightly stale) joint state and end-effector pose."""
        ...

    @abstractmethod
    def named_targets(self) -> Mapping[str, NamedTargetValue]:
        """Retrieve the registry of named targets known to the engine."""
        ...

    @abstractmethod
    def time_parameterize(self, plan: Plan, velocity_scale: float) -> Plan:
        """Assign time stamps and velocities to the plan's trajectory.

        :param plan: Valid plan whose trajectory should be re-timed
        :param velocity_scale: Factor in (0, 1] applied uniformly to the maximum joint velocities
        :return: Plan holding the time-parameterized trajectory
        """
        ...

    def solve_ik(self, pose: Pose3D, seed: JointState) -> JointState | None:
        """Compute a joint state placing the end-effector at the given pose (None if unsupported).

        :param pose: Target end-effector pose
        :param seed: Joint state used to seed the solver (typically the current state)
        :return: Joint state solving the IK problem, or None if no solution was found
        """
        return None


class ExecutionBackend(ABC):
    """A remote trajectory follower that executes complete joint trajectories."""

    @abstractmethod
    def connect(self, timeout_s: float) -> bool:
        """Establish a fresh connection to the backend.

        :param timeout_s: Maximum duration (seconds) to wait for the backend
        :return: True if the backend is reachable, else False
        """
        ...

    @abstractmethod
    def send_trajectory_and_wait(
        self,
        trajectory: Trajectory,
        goal_time_tolerance_s: float,
        timeout_s: float,
    ) -> TerminalState:
        """Send the full trajectory as one goal and block until it terminates.

        :param trajectory: Time-parameterized joint trajectory to be executed
        :param goal_time_tolerance_s: Allowed lateness (seconds) when reaching the final point
        :param timeout_s: Maximum duration (seconds) to wait before reporting a time-out
        :return: Terminal state reported by the backend
        """
        ...


class LiveFeedbackSource(ABC):
    """An authoritative (but possibly unavailable) source of the manipulator's live state."""

    @abstractmethod
    def latest_pose(self) -> FeedbackSample[Pose3D] | None:
        """Retrieve the most recently received end-effector pose (None if none yet)."""
        ...

    def latest_joint_state(self) -> FeedbackSample[JointState] | None:
        """Retrieve the most recently received joint state (None if unsupported or absent)."""
        return None
