"""Define the motion commander, which turns high-level goals into executed trajectories.

Every request follows the same pipeline, one request at a time:

    resolve the goal -> interpolate waypoints -> evaluate the plan -> confirm -> dispatch
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Sequence

from rich.table import Table

from arm_commander.config import CommanderConfig
from arm_commander.errors import MotionCommandError, PlanningFailed, UnknownTarget
from arm_commander.execution import ConfirmationGate, ExecutionResult, TrajectoryDispatcher
from arm_commander.io.cli_handlers import ConsoleApprovalChannel
from arm_commander.io.logging import console, log_info, log_warning
from arm_commander.kinematics import JointState
from arm_commander.motion_planning import (
    AbsolutePose,
    EvaluatedPlan,
    JointTarget,
    MotionRequest,
    NamedTarget,
    PathMode,
    PlanEvaluator,
    RelativeCartesian,
    WaypointInterpolator,
    WaypointSequence,
    describe_request,
)
from arm_commander.outcome import Outcome
from arm_commander.robots import StateAccessor, StateSnapshot
from arm_commander.spatial import EulerRPY, Pose3D, to_absolute

if TYPE_CHECKING:
    from arm_commander.execution import ApprovalChannel
    from arm_commander.robots import (
        ExecutionBackend,
        LiveFeedbackSource,
        NamedTargetValue,
        PlanningEngine,
    )

logger = logging.getLogger(__name__)


def _point_count(requested: int | None, default: int) -> int:
    """Use the requested number of waypoints, or the default if the request gave none."""
    return default if requested is None else requested


class MotionCommander:
    """Plans, confirms, and executes manipulator motion requests."""

    def __init__(
        self,
        engine: PlanningEngine,
        backend: ExecutionBackend,
        approval_channel: ApprovalChannel | None = None,
        feedback: LiveFeedbackSource | None = None,
        config: CommanderConfig | None = None,
    ) -> None:
        """Initialize the commander with its injected collaborators.

        :param engine: Planning engine used for state, named targets, planning, and re-timing
        :param backend: Execution backend that follows the approved trajectories
        :param approval_channel: Channel asking the operator to approve motions
            (defaults to a console prompt)
        :param feedback: Optional live feedback source for authoritative state readings
        :param config: Configuration of the pipeline (defaults to CommanderConfig())
        """
        self.config = config or CommanderConfig()
        self.engine = engine

        self.state = StateAccessor(engine, feedback, self.config.max_feedback_age_s)
        self.interpolator = WaypointInterpolator(
            self.config.max_cartesian_points,
            self.config.max_joint_points,
        )
        self.evaluator = PlanEvaluator(engine, self.config.velocity_scale)
        self.gate = ConfirmationGate(
            approval_channel or ConsoleApprovalChannel(),
            enabled=self.config.confirm_before_motion,
            timeout_s=self.config.confirmation_timeout_s,
        )
        self.dispatcher = TrajectoryDispatcher(
            backend,
            connect_timeout_s=self.config.connect_timeout_s,
            goal_time_tolerance_s=self.config.goal_time_tolerance_s,
            grace_s=self.config.execution_grace_s,
        )

        self.snapshot: StateSnapshot | None = None
        """State captured at the start of the most recent request."""

        self._request_lock = threading.Lock()  # Held for an entire request

    def execute(self, request: MotionRequest) -> ExecutionResult:
        """Plan, confirm, and execute the given motion request.

        :param request: High-level goal to be reached
        :return: Result of the successful execution
        :raises MotionCommandError: If any stage of the pipeline fails (nothing is executed
            unless the plan is valid, acceptable, and approved)
        """
        with self._request_lock:
            snapshot = self._refresh_snapshot()
            evaluated = self._plan(request, snapshot)
            self._check_acceptable(evaluated)

            try:
                self.gate.confirm(self._confirmation_message(request, snapshot, evaluated))
                result = self.dispatcher.execute(
                    evaluated.plan,
                    reached_fraction=evaluated.success_fraction,
                )
            finally:
                self.gate.reset()

        log_info(f"Completed {describe_request(request)}.")
        return result

    def try_execute(self, request: MotionRequest) -> Outcome[ExecutionResult]:
        """Execute the request, reporting any failure as an unsuccessful outcome.

        :return: Outcome holding the execution result if the motion succeeded
        """
        try:
            result = self.execute(request)
        except (MotionCommandError, ValueError) as error:
            log_warning(f"Motion request failed: {error}")
            return Outcome.failed(error)

        message = f"Executed {describe_request(request)} ({result.reached_fraction:.0%} planned)."
        return Outcome.succeeded(message, result)

    def preview(self, request: MotionRequest) -> EvaluatedPlan:
        """Resolve and plan the request without asking for approval or executing it.

        :return: Evaluated plan, including its success fraction (invalid plans are returned too)
        """
        with self._request_lock:
            snapshot = self._refresh_snapshot()
            return self._plan(request, snapshot)

    def move_relative(
        self,
        dx: float,
        dy: float,
        dz: float,
        rpy: EulerRPY | None = None,
        num_cartesian_points: int | None = None,
        num_joint_points: int | None = None,
    ) -> ExecutionResult:
        """Move the end-effector along a straight line by the given offset (meters).

        :param rpy: Optional absolute fixed-axis orientation of the goal (None keeps the current)
        """
        request = RelativeCartesian(dx, dy, dz, rpy, num_cartesian_points, num_joint_points)
        return self.execute(request)

    def move_to_pose(self, pose: Pose3D) -> ExecutionResult:
        """Move the end-effector to the given pose along a path chosen by the planner."""
        return self.execute(AbsolutePose(pose, straight_line=False))

    def move_line(
        self,
        goal: Pose3D,
        start: Pose3D | None = None,
        num_cartesian_points: int | None = None,
    ) -> ExecutionResult:
        """Move the end-effector along a straight line to the goal (optionally via a start pose)."""
        return self.execute(AbsolutePose(goal, start, num_cartesian_points=num_cartesian_points))

    def move_to_named(self, name: str) -> ExecutionResult:
        """Move to the pose or joint configuration stored under the given name.

        :raises UnknownTarget: If the name isn't in the planning engine's target registry
        """
        return self.execute(NamedTarget(name))

    def move_joints(self, values: Sequence[float]) -> ExecutionResult:
        """Move all joints to the given absolute values (canonical joint order)."""
        return self.execute(JointTarget.absolute(values))

    def move_joint(self, joint_index: int, delta: float) -> ExecutionResult:
        """Offset a single joint from its current value."""
        return self.execute(JointTarget.relative_to_current(joint_index, delta))

    def set_joint(self, joint_index: int, value: float) -> ExecutionResult:
        """Move a single joint to an absolute value."""
        return self.execute(JointTarget.single(joint_index, value))

    def resolve_named(self, name: str) -> NamedTargetValue:
        """Look up the pose or joint state stored under the given name.

        :raises UnknownTarget: If the name isn't in the planning engine's target registry
        """
        targets = self.engine.named_targets()
        if name not in targets:
            raise UnknownTarget(name, list(targets))

        target = targets[name]
        if isinstance(target, JointState):
            target.require_order(self.engine.joint_names)
        return target

    def build_sequence(self, request: MotionRequest, snapshot: StateSnapshot) -> WaypointSequence:
        """Resolve the request into absolute targets and expand them into waypoints.

        :param request: High-level goal to be resolved
        :param snapshot: State of the manipulator when the request started
        :return: Waypoint sequence to be submitted to the planning engine
        """
        if isinstance(request, RelativeCartesian):
            goal = to_absolute(snapshot.pose, request.delta_xyz, request.rpy)
            n = _point_count(request.num_cartesian_points, self.config.default_cartesian_points)
            return self.interpolator.interpolate_cartesian(snapshot.pose, goal, n)

        if isinstance(request, AbsolutePose):
            if not request.straight_line:
                return self.interpolator.single_goal(request.pose, PathMode.FREE_SPACE)

            start = request.start or snapshot.pose
            n = _point_count(request.num_cartesian_points, self.config.default_cartesian_points)
            return self.interpolator.interpolate_cartesian(start, request.pose, n)

        if isinstance(request, NamedTarget):
            target = self.resolve_named(request.name)
            mode = PathMode.JOINT if isinstance(target, JointState) else PathMode.FREE_SPACE
            return self.interpolator.single_goal(target, mode)

        if isinstance(request, JointTarget):
            goal = self._resolve_joint_goal(request, snapshot.joint_state)
            n = _point_count(request.num_joint_points, self.config.default_joint_points)
            return self.interpolator.interpolate_joints(snapshot.joint_state, goal, n)

        raise TypeError(f"Unrecognized motion request type: {type(request)}.")

    def _refresh_snapshot(self) -> StateSnapshot:
        """Capture the manipulator's current state at the start of a request."""
        self.snapshot = self.state.snapshot()
        return self.snapshot

    def _plan(self, request: MotionRequest, snapshot: StateSnapshot) -> EvaluatedPlan:
        """Build and evaluate the request's waypoints, falling back to joint space if needed."""
        sequence = self.build_sequence(request, snapshot)
        evaluated = self.evaluator.evaluate(sequence)

        if (
            not evaluated.plan.valid
            and sequence.mode is PathMode.CARTESIAN
            and self.config.joint_space_fallback
        ):
            num_joint_points = getattr(request, "num_joint_points", None)
            fallback = self._plan_in_joint_space(sequence, snapshot, num_joint_points)
            if fallback is not None:
                evaluated = fallback

        if self.config.debug_print:
            self._print_plan_summary(request, snapshot, evaluated)

        return evaluated

    def _plan_in_joint_space(
        self,
        sequence: WaypointSequence,
        snapshot: StateSnapshot,
        num_joint_points: int | None,
    ) -> EvaluatedPlan | None:
        """Plan to the goal of an infeasible Cartesian sequence using joint-space waypoints.

        :return: Evaluated joint-space plan, or None if the goal pose has no IK solution
        """
        goal_pose = sequence.goal
        if not isinstance(goal_pose, Pose3D):
            raise TypeError(f"Joint-space fallback requires a pose goal, got {type(goal_pose)}.")

        ik_solution = self.engine.solve_ik(goal_pose, snapshot.joint_state)
        if ik_solution is None:
            log_warning(f"Cartesian path infeasible and no IK solution found for {goal_pose}.")
            return None

        ik_solution.require_order(self.engine.joint_names)
        n = _point_count(num_joint_points, self.config.default_joint_points)
        joint_sequence = self.interpolator.interpolate_joints(snapshot.joint_state, ik_solution, n)

        log_info(f"Cartesian path infeasible; planning {joint_sequence.count} joint waypoints.")
        return self.evaluator.evaluate(joint_sequence)

    def _resolve_joint_goal(self, request: JointTarget, current: JointState) -> JointState:
        """Compute the absolute joint state targeted by the request."""
        if request.values is not None:
            if len(request.values) != len(current):
                raise ValueError(
                    f"Expected {len(current)} joint values, got {len(request.values)}.",
                )
            return current.with_positions(request.values)

        if request.joint_index is None or request.joint_value is None:
            raise ValueError("JointTarget requires all joint values or a joint index and value.")
        if request.joint_index >= len(current):
            raise ValueError(f"Joint index {request.joint_index} is out of range.")

        value = request.joint_value
        if request.relative:
            value += current.positions[request.joint_index]
        return current.with_value(request.joint_index, value)

    def _check_acceptable(self, evaluated: EvaluatedPlan) -> None:
        """Verify that the evaluated plan may be executed.

        :raises PlanningFailed: If the plan is invalid, empty, or covers too few waypoints
        """
        if not evaluated.plan.valid:
            raise PlanningFailed(evaluated.requested, evaluated.achieved, evaluated.plan.message)

        if evaluated.achieved == 0 or len(evaluated.plan.trajectory) == 0:
            raise PlanningFailed(evaluated.requested, 0, "Plan covers none of the waypoints.")

        if evaluated.success_fraction < self.config.min_success_fraction:
            raise PlanningFailed(
                evaluated.requested,
                evaluated.achieved,
                f"{evaluated.success_fraction:.0%} planned is below the minimum of "
                f"{self.config.min_success_fraction:.0%}.",
            )

        partial = evaluated.partial
        if partial is not None:
            log_warning(
                f"Plan covers {partial.achieved}/{partial.requested} waypoints "
                f"({partial.success_fraction:.0%}); executing the planned prefix.",
            )

    def _confirmation_message(
        self,
        request: MotionRequest,
        snapshot: StateSnapshot,
        evaluated: EvaluatedPlan,
    ) -> str:
        """Describe the planned motion for the operator."""
        if evaluated.sequence.mode is PathMode.JOINT:
            start: object = snapshot.joint_state.positions
        else:
            start = snapshot.pose

        goal = evaluated.sequence.goal
        goal_desc = goal.positions if isinstance(goal, JointState) else goal

        return (
            f"{describe_request(request)}\n"
            f"start: {start}\n"
            f"goal:  {goal_desc}\n"
            f"planned {evaluated.achieved}/{evaluated.requested} "
            f"{evaluated.sequence.mode.value} waypoints ({evaluated.success_fraction:.0%}), "
            f"duration {evaluated.plan.trajectory.duration_s:.2f} s"
        )

    def _print_plan_summary(
        self,
        request: MotionRequest,
        snapshot: StateSnapshot,
        evaluated: EvaluatedPlan,
    ) -> None:
        """Print the planned waypoints and plan statistics to the console."""
        table = Table(title=describe_request(request), show_lines=False)
        table.add_column("#", justify="right", style="cyan", no_wrap=True)
        table.add_column("Waypoint", style="bold")

        for idx, waypoint in enumerate(evaluated.sequence.waypoints):
            values = waypoint.positions if isinstance(waypoint, JointState) else waypoint
            table.add_row(str(idx), str(values))

        console.print(f"Start pose: {snapshot.pose}")
        console.print(table)
        console.print(
            f"Plan valid: {evaluated.plan.valid}, {len(evaluated.plan.trajectory)} points, "
            f"{evaluated.success_fraction:.2%} of waypoints",
        )
        logger.debug(f"Clamped waypoint count: {evaluated.sequence.was_clamped}")
