"""Define the errors raised while turning motion requests into executed trajectories."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from arm_commander.robots.interfaces import TerminalState


class MotionCommandError(Exception):
    """Base class for any failure that aborts a motion request."""


class InvalidOrientation(MotionCommandError, ValueError):
    """An orientation could not be normalized into a valid rotation."""


class UnknownTarget(MotionCommandError, KeyError):
    """A named target was not found in the planning engine's target registry."""

    def __init__(self, name: str, known_names: list[str] | None = None) -> None:
        """Record the unresolved name and (optionally) the names that do exist."""
        self.name = name
        self.known_names = sorted(known_names or [])
        super().__init__(name)

    def __str__(self) -> str:
        """Describe the missing target and the available alternatives."""
        known = ", ".join(self.known_names) or "none"
        return f"Unknown target '{self.name}' (known targets: {known})."


class PlanningFailed(MotionCommandError):
    """The planning engine produced no usable trajectory for the requested waypoints."""

    def __init__(self, requested: int, achieved: int, reason: str = "") -> None:
        """Record how many waypoints were requested versus covered by the plan."""
        self.requested = requested
        self.achieved = achieved
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Planning failed ({achieved}/{requested} waypoints planned){detail}")


class UserDeclined(MotionCommandError):
    """The operator declined to approve the planned motion."""


class ExecutorUnavailable(MotionCommandError):
    """The execution backend could not be reached within the connection timeout."""


class ExecutionFailed(MotionCommandError):
    """The execution backend reached a terminal state other than 'succeeded'."""

    def __init__(self, terminal_state: TerminalState) -> None:
        """Preserve the backend's reported terminal state and reason."""
        self.terminal_state = terminal_state
        reason = terminal_state.reason or "no reason given"
        super().__init__(f"Trajectory execution ended as {terminal_state.status.value}: {reason}")


class SourceUnavailable(MotionCommandError):
    """The live feedback source has no (sufficiently fresh) reading."""
