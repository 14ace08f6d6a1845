"""Define the trajectory dispatcher, which sends approved plans to the execution backend."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from arm_commander.errors import ExecutionFailed, ExecutorUnavailable

if TYPE_CHECKING:
    from arm_commander.motion_planning.trajectories import Plan
    from arm_commander.robots.interfaces import ExecutionBackend, TerminalState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecutionResult:
    """The result of a motion request that reached the execution backend."""

    success: bool

    reached_fraction: float
    """Fraction of the requested waypoints covered by the executed plan, in [0, 1]."""

    duration_estimate_s: float
    """Planned duration (seconds) of the executed trajectory."""

    terminal_state: TerminalState | None = None
    message: str = ""


class TrajectoryDispatcher:
    """Sends complete trajectories to the execution backend and waits for their completion."""

    def __init__(
        self,
        backend: ExecutionBackend,
        connect_timeout_s: float = 2.0,
        goal_time_tolerance_s: float = 1.0,
        grace_s: float = 2.0,
    ) -> None:
        """Initialize the dispatcher with its execution backend and timing limits.

        :param backend: Remote trajectory follower executing the trajectories
        :param connect_timeout_s: Maximum wait (seconds) for a connection to the backend
        :param goal_time_tolerance_s: Allowed lateness (seconds) in reaching the final point
        :param grace_s: Extra wait (seconds) beyond the trajectory's duration and tolerance
        """
        self._backend = backend
        self.connect_timeout_s = connect_timeout_s
        self.goal_time_tolerance_s = goal_time_tolerance_s
        self.grace_s = grace_s

        self.dispatch_count = 0
        """Number of execution attempts made (including ones failing to connect)."""

    def completion_timeout_s(self, plan: Plan) -> float:
        """Compute how long (seconds) to wait for the given plan to finish executing."""
        return plan.trajectory.duration_s + self.goal_time_tolerance_s + self.grace_s

    def execute(
        self,
        plan: Plan,
        timeout_s: float | None = None,
        reached_fraction: float = 1.0,
    ) -> ExecutionResult:
        """Execute the plan's trajectory, reconnecting to the backend on every call.

        :param plan: Valid, time-parameterized plan to be executed
        :param timeout_s: Maximum wait (seconds) for completion (defaults to a bound computed
            from the trajectory duration, the goal-time tolerance, and a grace margin)
        :param reached_fraction: Success fraction of the plan, reported in the result
        :return: Successful execution result
        :raises ExecutorUnavailable: If the backend can't be reached (execution isn't attempted)
        :raises ExecutionFailed: If the backend reports any terminal state except "succeeded"
        """
        if not plan.valid:
            raise ValueError(f"Refusing to execute an invalid plan: {plan.message}")
        if len(plan.trajectory) == 0:
            raise ValueError("Refusing to execute an empty trajectory.")

        self.dispatch_count += 1

        if not self._backend.connect(self.connect_timeout_s):
            logger.error(f"Cannot connect to the execution backend in {self.connect_timeout_s} s.")
            raise ExecutorUnavailable(
                f"Execution backend unavailable after {self.connect_timeout_s:.1f} seconds.",
            )
        logger.info("Connected to the execution backend.")

        wait_s = self.completion_timeout_s(plan) if timeout_s is None else timeout_s
        start_s = time.monotonic()
        terminal_state = self._backend.send_trajectory_and_wait(
            plan.trajectory,
            self.goal_time_tolerance_s,
            wait_s,
        )
        elapsed_s = time.monotonic() - start_s

        if not terminal_state.succeeded:
            status = terminal_state.status.value
            logger.error(f"Execution ended as {status} after {elapsed_s:.2f} s.")
            raise ExecutionFailed(terminal_state)

        logger.info(
            f"Executed trajectory in {elapsed_s:.2f} s "
            f"(planned duration {plan.trajectory.duration_s:.2f} s).",
        )
        return ExecutionResult(
            success=True,
            reached_fraction=reached_fraction,
            duration_estimate_s=plan.trajectory.duration_s,
            terminal_state=terminal_state,
            message=terminal_state.reason,
        )
