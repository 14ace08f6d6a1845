"""Define accessors for the manipulator's current joint state and end-effector pose."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, TypeVar

from arm_commander.errors import SourceUnavailable

if TYPE_CHECKING:
    from arm_commander.kinematics import JointState
    from arm_commander.robots.interfaces import FeedbackSample, LiveFeedbackSource, PlanningEngine
    from arm_commander.spatial import EulerRPY, Pose3D

logger = logging.getLogger(__name__)

SampleT = TypeVar("SampleT")


class StateSource(Enum):
    """Where a state reading should come from."""

    PLANNER = "planner"
    """The planning engine's internal model: always available, possibly slightly stale."""

    LIVE = "live"
    """The live feedback source: authoritative, but possibly unavailable."""


@dataclass(frozen=True)
class StateSnapshot:
    """The manipulator's joint state and end-effector pose captured at one moment."""

    joint_state: JointState
    pose: Pose3D


class StateAccessor:
    """Reads the current joint state and end-effector pose from a chosen source."""

    def __init__(
        self,
        engine: PlanningEngine,
        feedback: LiveFeedbackSource | None = None,
        max_feedback_age_s: float | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the accessor with its planning engine and optional live feedback.

        :param engine: Planning engine providing its internally tracked state
        :param feedback: Optional live feedback source (None means live readings are unavailable)
        :param max_feedback_age_s: Maximum age (seconds) of a usable live reading (None = any age)
        :param clock: Function returning the current time (seconds), matching the sample stamps
        """
        self._engine = engine
        self._feedback = feedback
        self._max_feedback_age_s = max_feedback_age_s
        self._clock = clock

    def current_joint_state(self, source: StateSource = StateSource.PLANNER) -> JointState:
        """Retrieve the manipulator's current joint state.

        :param source: Source of the reading (defaults to the planning engine)
        :return: Joint state in the manipulator's canonical joint order
        :raises SourceUnavailable: If the live source was requested but has no fresh reading
        """
        if source is StateSource.PLANNER:
            joint_state, _ = self._engine.current_state()
            return joint_state

        sample = None if self._feedback is None else self._feedback.latest_joint_state()
        joint_state = self._check_sample(sample, "joint state")
        joint_state.require_order(self._engine.joint_names)
        return joint_state

    def current_pose(self, source: StateSource = StateSource.PLANNER) -> Pose3D:
        """Retrieve the current pose of the end-effector.

        :param source: Source of the reading (defaults to the planning engine)
        :return: End-effector pose w.r.t. the manipulator's base frame
        :raises SourceUnavailable: If the live source was requested but has no fresh reading
        """
        if source is StateSource.PLANNER:
            _, pose = self._engine.current_state()
            return pose

        sample = None if self._feedback is None else self._feedback.latest_pose()
        return self._check_sample(sample, "end-effector pose")

    def current_rpy(self, source: StateSource = StateSource.PLANNER) -> EulerRPY:
        """Retrieve the end-effector orientation as fixed-axis roll, pitch, and yaw angles."""
        return self.current_pose(source).orientation.to_euler_rpy()

    def snapshot(self) -> StateSnapshot:
        """Capture the planning engine's current joint state and pose together."""
        joint_state, pose = self._engine.current_state()
        joint_state.require_order(self._engine.joint_names)
        return StateSnapshot(joint_state, pose)

    def _check_sample(self, sample: FeedbackSample[SampleT] | None, label: str) -> SampleT:
        """Return the sample's value if it exists and is fresh enough.

        :raises SourceUnavailable: If the sample is missing or older than the allowed age
        """
        if sample is None:
            raise SourceUnavailable(f"No live {label} has been received.")

        if self._max_feedback_age_s is not None:
            age_s = self._clock() - sample.stamp_s
            if age_s > self._max_feedback_age_s:
                raise SourceUnavailable(
                    f"Latest live {label} is {age_s:.2f} s old "
                    f"(limit {self._max_feedback_age_s:.2f} s).",
                )

        logger.debug(f"Using live {label} stamped at {sample.stamp_s:.3f}.")
        return sample.value
