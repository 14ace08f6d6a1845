"""Define in-memory fakes of the motion commander's collaborators."""

from __future__ import annotations

import threading
from dataclasses import replace
from math import floor
from typing import Mapping

from arm_commander.execution import ApprovalChannel
from arm_commander.kinematics import JointState
from arm_commander.motion_planning import Plan, Trajectory, TrajectoryPoint, WaypointSequence
from arm_commander.robots import (
    ExecutionBackend,
    FeedbackSample,
    GoalStatus,
    LiveFeedbackSource,
    NamedTargetValue,
    PlanningEngine,
    TerminalState,
)
from arm_commander.spatial import Pose3D

JOINT_NAMES = ("joint1", "joint2", "joint3", "joint4", "joint5", "joint6")


class FakePlanningEngine(PlanningEngine):
    """A planning engine that covers a configurable fraction of every waypoint sequence."""

    def __init__(
        self,
        joint_state: JointState | None = None,
        pose: Pose3D | None = None,
        targets: Mapping[str, NamedTargetValue] | None = None,
        coverage: float = 1.0,
        infeasible_modes: tuple = (),
        ik_solution: JointState | None = None,
    ) -> None:
        """Initialize the fake engine with its state and planning behavior.

        :param coverage: Fraction of each sequence's waypoints covered by returned plans
        :param infeasible_modes: Path modes for which every planning call fails
        :param ik_solution: Joint state returned by solve_ik (None means no solution)
        """
        self.joint_state = joint_state or JointState(JOINT_NAMES, (0.0,) * len(JOINT_NAMES))
        self.pose = pose or Pose3D.from_xyz_rpy(0.4, 0.0, 0.3)
        self.targets = dict(targets or {})
        self.coverage = coverage
        self.infeasible_modes = infeasible_modes
        self.ik_solution = ik_solution

        self.plan_calls: list[WaypointSequence] = []
        self.retime_calls: list[float] = []
        self.ik_calls: list[Pose3D] = []

    @property
    def joint_names(self) -> tuple[str, ...]:
        return JOINT_NAMES

    def plan_to(self, sequence: WaypointSequence) -> Plan:
        self.plan_calls.append(sequence)
        if sequence.mode in self.infeasible_modes:
            return Plan.failure("no feasible path")

        n = floor(self.coverage * sequence.count)
        points = [
            TrajectoryPoint(0.1 * idx, self.joint_state.to_configuration()) for idx in range(n)
        ]
        return Plan(Trajectory(tuple(points)), planned_waypoints=n, valid=True)

    def current_state(self) -> tuple[JointState, Pose3D]:
        return self.joint_state, self.pose

    def named_targets(self) -> Mapping[str, NamedTargetValue]:
        return self.targets

    def time_parameterize(self, plan: Plan, velocity_scale: float) -> Plan:
        self.retime_calls.append(velocity_scale)
        points = [
            replace(p, time_s=(idx + 1) * 0.5 / velocity_scale)
            for idx, p in enumerate(plan.trajectory.points)
        ]
        return plan.with_trajectory(Trajectory(tuple(points)), time_parameterized=True)

    def solve_ik(self, pose: Pose3D, seed: JointState) -> JointState | None:
        self.ik_calls.append(pose)
        return self.ik_solution


class FakeBackend(ExecutionBackend):
    """An execution backend returning scripted connection results and terminal states."""

    def __init__(
        self,
        connects: list[bool] | None = None,
        terminal_state: TerminalState | None = None,
    ) -> None:
        self.connects = list(connects or [])
        self.terminal_state = terminal_state or TerminalState(GoalStatus.SUCCEEDED)

        self.connect_calls = 0
        self.sent: list[tuple[Trajectory, float, float]] = []

    def connect(self, timeout_s: float) -> bool:
        self.connect_calls += 1
        return self.connects.pop(0) if self.connects else True

    def send_trajectory_and_wait(
        self,
        trajectory: Trajectory,
        goal_time_tolerance_s: float,
        timeout_s: float,
    ) -> TerminalState:
        self.sent.append((trajectory, goal_time_tolerance_s, timeout_s))
        return self.terminal_state


class FakeFeedback(LiveFeedbackSource):
    """A live feedback source holding fixed samples."""

    def __init__(
        self,
        pose: FeedbackSample[Pose3D] | None = None,
        joint_state: FeedbackSample[JointState] | None = None,
    ) -> None:
        self.pose = pose
        self.joint_state = joint_state

    def latest_pose(self) -> FeedbackSample[Pose3D] | None:
        return self.pose

    def latest_joint_state(self) -> FeedbackSample[JointState] | None:
        return self.joint_state


class ScriptedApprovalChannel(ApprovalChannel):
    """An approval channel answering from a script (or blocking until released)."""

    def __init__(self, *answers: bool, release: threading.Event | None = None) -> None:
        self.answers = list(answers)
        self.release = release
        self.prompts: list[str] = []
        self.prompted = threading.Event()

    def prompt(self, message: str) -> bool:
        self.prompts.append(message)
        self.prompted.set()
        if self.release is not None:
            self.release.wait(timeout=5.0)
        return self.answers.pop(0) if self.answers else True


class FailingApprovalChannel(ApprovalChannel):
    """An approval channel whose prompt always raises an error."""

    def prompt(self, message: str) -> bool:
        raise RuntimeError("console closed")


class HeldApprovalChannel(ApprovalChannel):
    """An approval channel whose answers are each held until released individually."""

    def __init__(self, *answers: bool) -> None:
        self.answers = list(answers)
        self.releases = [threading.Event() for _ in answers]
        self.prompts: list[str] = []
        self._prompted = threading.Condition()

    def prompt(self, message: str) -> bool:
        with self._prompted:
            idx = len(self.prompts)
            self.prompts.append(message)
            self._prompted.notify_all()

        self.releases[idx].wait(timeout=5.0)
        return self.answers[idx]

    def wait_for_prompts(self, count: int, timeout_s: float = 5.0) -> bool:
        """Wait until the channel has been prompted the given number of times."""
        with self._prompted:
            return self._prompted.wait_for(lambda: len(self.prompts) >= count, timeout=timeout_s)

    def release_all(self) -> None:
        for release in self.releases:
            release.set()
