"""Define classes to represent planned trajectories."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from arm_commander.kinematics import Configuration


@dataclass(frozen=True)
class TrajectoryPoint:
    """A planned state of joint values at a specified time in a trajectory."""

    time_s: float
    """Time (seconds) since the trajectory started."""

    positions: Configuration
    velocities: Configuration = field(default_factory=dict)

    @property
    def joint_names(self) -> list[str]:
        """Retrieve the names of the joints specified by the point."""
        return list(self.positions.keys())


@dataclass(frozen=True)
class Trajectory:
    """A sequence of planned configurations at specified times."""

    points: tuple[TrajectoryPoint, ...] = ()

    def __post_init__(self) -> None:
        """Verify properties expected of any valid trajectory."""
        object.__setattr__(self, "points", tuple(self.points))
        if not self.points:
            return

        # All points in any non-empty trajectory should use the same joint names
        j0_names = self.points[0].joint_names
        for p in self.points[1:]:
            jn_names = p.joint_names
            if j0_names != jn_names:
                raise ValueError(f"Trajectory points used joint names: {j0_names} and {jn_names}.")

    def __len__(self) -> int:
        """Return the number of points in the trajectory."""
        return len(self.points)

    @property
    def joint_names(self) -> list[str]:
        """Retrieve the names of the joints specified by the trajectory."""
        return [] if not self.points else self.points[0].joint_names

    @property
    def duration_s(self) -> float:
        """Retrieve the time (seconds) at which the final point should be reached."""
        return 0.0 if not self.points else float(self.points[-1].time_s)


@dataclass(frozen=True)
class Plan:
    """A trajectory returned by the planning engine for a sequence of waypoints."""

    trajectory: Trajectory

    planned_waypoints: int
    """Number of the requested waypoints that the trajectory actually covers."""

    valid: bool
    """Did the planning call succeed? An invalid plan must never be executed."""

    message: str = ""
    """Planner-reported detail (e.g., an error code) explaining the result."""

    time_parameterized: bool = False

    def with_trajectory(self, trajectory: Trajectory, *, time_parameterized: bool) -> Plan:
        """Return a copy of the plan holding a different (e.g., re-timed) trajectory."""
        return replace(self, trajectory=trajectory, time_parameterized=time_parameterized)

    @classmethod
    def failure(cls, message: str) -> Plan:
        """Construct an invalid plan reporting the given planner failure."""
        return Plan(Trajectory(), planned_waypoints=0, valid=False, message=message)
