"""Define the motion requests accepted by the motion commander.

Each request resolves to one or more absolute end-effector poses or joint states. All entry
points of the commander build one of these variants and then share a single pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from collections.abc import Sequence

    from arm_commander.spatial import EulerRPY, Pose3D


@dataclass(frozen=True)
class RelativeCartesian:
    """Move the end-effector by a Cartesian offset, optionally to an absolute orientation."""

    dx: float
    dy: float
    dz: float

    rpy: EulerRPY | None = None
    """Absolute fixed-axis orientation replacing the current one (None keeps it unchanged)."""

    num_cartesian_points: int | None = None
    num_joint_points: int | None = None

    @property
    def delta_xyz(self) -> tuple[float, float, float]:
        """Retrieve the (dx, dy, dz) offset of the request."""
        return (self.dx, self.dy, self.dz)


@dataclass(frozen=True)
class AbsolutePose:
    """Move the end-effector to an absolute pose."""

    pose: Pose3D

    start: Pose3D | None = None
    """Optional first waypoint of a straight-line path (defaults to the current pose)."""

    straight_line: bool = True
    """Follow a straight Cartesian line (True) or let the planner choose the path (False)."""

    num_cartesian_points: int | None = None
    num_joint_points: int | None = None

    def __post_init__(self) -> None:
        """Reject a start pose for free-space motions, which always begin at the current state."""
        if self.start is not None and not self.straight_line:
            raise ValueError("A start pose is only meaningful for straight-line motions.")


@dataclass(frozen=True)
class NamedTarget:
    """Move to a pose or joint configuration stored under a name (e.g., "home")."""

    name: str


@dataclass(frozen=True)
class JointTarget:
    """Move the manipulator's joints to absolute values, or offset/set a single joint.

    Prefer the `absolute`, `relative_to_current`, and `single` constructors to the raw fields.
    """

    values: tuple[float, ...] | None = None
    """Absolute values for every joint, in canonical order."""

    joint_index: int | None = None
    joint_value: float | None = None

    relative: bool = False
    """Is the single-joint value an offset from the current value (True) or absolute (False)?"""

    num_joint_points: int | None = None

    def __post_init__(self) -> None:
        """Verify that the target specifies either all joints or exactly one joint."""
        if self.values is not None:
            object.__setattr__(self, "values", tuple(float(v) for v in self.values))
            if self.joint_index is not None or self.joint_value is not None:
                raise ValueError("JointTarget takes all joint values or one joint, not both.")
            if self.relative:
                raise ValueError("Relative JointTargets must address a single joint.")
            return

        if self.joint_index is None or self.joint_value is None:
            raise ValueError("JointTarget requires all joint values or a joint index and value.")
        if self.joint_index < 0:
            raise ValueError(f"Joint index must be non-negative, got {self.joint_index}.")

    @classmethod
    def absolute(cls, values: Sequence[float], num_joint_points: int | None = None) -> JointTarget:
        """Construct a target giving absolute values for every joint."""
        return JointTarget(values=tuple(values), num_joint_points=num_joint_points)

    @classmethod
    def relative_to_current(
        cls,
        joint_index: int,
        delta: float,
        num_joint_points: int | None = None,
    ) -> JointTarget:
        """Construct a target offsetting one joint from its current value."""
        return JointTarget(
            joint_index=joint_index,
            joint_value=delta,
            relative=True,
            num_joint_points=num_joint_points,
        )

    @classmethod
    def single(
        cls,
        joint_index: int,
        value: float,
        num_joint_points: int | None = None,
    ) -> JointTarget:
        """Construct a target setting one joint to an absolute value."""
        return JointTarget(
            joint_index=joint_index,
            joint_value=value,
            num_joint_points=num_joint_points,
        )


MotionRequest = Union[RelativeCartesian, AbsolutePose, NamedTarget, JointTarget]
"""Any of the high-level goals accepted by the motion commander."""


def describe_request(request: MotionRequest) -> str:
    """Summarize a motion request as a short human-readable string."""
    if isinstance(request, RelativeCartesian):
        rpy = "current" if request.rpy is None else str(request.rpy.to_tuple())
        return f"relative move by {request.delta_xyz} with orientation {rpy}"
    if isinstance(request, AbsolutePose):
        kind = "straight-line" if request.straight_line else "free-space"
        return f"{kind} move to {request.pose}"
    if isinstance(request, NamedTarget):
        return f"move to named target '{request.name}'"
    if isinstance(request, JointTarget):
        if request.values is not None:
            return f"joint move to {request.values}"
        if request.relative:
            return f"offset joint {request.joint_index} by {request.joint_value}"
        return f"set joint {request.joint_index} to {request.joint_value}"

    raise TypeError(f"Unrecognized motion request type: {type(request)}.")
