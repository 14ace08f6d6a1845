"""Define configuration for the motion commander and its MoveIt adapters."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Any, Dict, TypeVar

from arm_commander.io.yaml_utils import load_yaml_data
from arm_commander.kinematics import JointState
from arm_commander.spatial import DEFAULT_FRAME, Pose3D

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from arm_commander.robots.interfaces import NamedTargetValue

ConfigT = TypeVar("ConfigT")


def _from_mapping(config_t: type[ConfigT], data: Dict[str, Any] | None) -> ConfigT:
    """Construct a config dataclass from a mapping, rejecting keys it doesn't define.

    :raises KeyError: If the mapping contains an unrecognized key
    """
    data = data or {}
    known = {f.name for f in fields(config_t)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise KeyError(f"Unrecognized {config_t.__name__} keys: {unknown}")

    return config_t(**data)


@dataclass(frozen=True)
class CommanderConfig:
    """Configures how motion requests are interpolated, planned, confirmed, and executed."""

    default_cartesian_points: int = 10
    """Number of Cartesian waypoints used when a request doesn't specify one."""

    default_joint_points: int = 5
    """Number of joint-space waypoints used when a request doesn't specify one."""

    max_cartesian_points: int = 200
    max_joint_points: int = 30

    velocity_scale: float = 1.0
    """Velocity scaling applied uniformly when time-parameterizing trajectories."""

    min_success_fraction: float = 0.0
    """Smallest fraction of planned waypoints for which a plan is still executed."""

    joint_space_fallback: bool = True
    """Retry infeasible Cartesian paths in joint space (requires IK from the planning engine)."""

    confirm_before_motion: bool = True
    confirmation_timeout_s: float | None = None

    connect_timeout_s: float = 2.0
    goal_time_tolerance_s: float = 1.0
    execution_grace_s: float = 2.0

    max_feedback_age_s: float | None = 1.0
    """Maximum age (seconds) of a usable live feedback reading (None accepts any age)."""

    debug_print: bool = False

    def __post_init__(self) -> None:
        """Verify that the configured values are usable."""
        point_counts = (
            "default_cartesian_points",
            "default_joint_points",
            "max_cartesian_points",
            "max_joint_points",
        )
        for name in point_counts:
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1, got {getattr(self, name)}.")
        if not 0.0 < self.velocity_scale <= 1.0:
            raise ValueError(f"velocity_scale must be in (0, 1], got {self.velocity_scale}.")
        if not 0.0 <= self.min_success_fraction <= 1.0:
            raise ValueError(f"min_success_fraction must be in [0, 1]: {self.min_success_fraction}")
        for name in ("connect_timeout_s", "goal_time_tolerance_s", "execution_grace_s"):
            if getattr(self, name) < 0.0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}.")

    @classmethod
    def from_yaml_data(cls, data: Dict[str, Any] | None) -> CommanderConfig:
        """Construct a CommanderConfig from a mapping of YAML data (missing keys use defaults)."""
        return _from_mapping(cls, data)

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> CommanderConfig:
        """Load a CommanderConfig from the 'commander' section of the given YAML file."""
        yaml_data = load_yaml_data(yaml_path, required_keys={"commander"})
        return cls.from_yaml_data(yaml_data["commander"])


@dataclass(frozen=True)
class MoveItConfig:
    """Configures the MoveIt planning engine and the trajectory execution adapters."""

    move_group: str = "arm"
    planner_id: str = "RRTConnect"
    planning_time_s: float = 5.0
    planning_attempts: int = 10
    position_tolerance_m: float = 0.001
    orientation_tolerance_rad: float = 0.01
    max_velocity_scale: float = 1.0
    max_acceleration_scale: float = 1.0

    ee_step_m: float = 0.01
    """Maximum distance (meters) between consecutive configurations of a Cartesian plan."""

    jump_threshold: float = 0.0
    """Maximum allowed jump in joint space between Cartesian plan points (0 disables)."""

    trajectory_action: str = "/arm_controller/follow_joint_trajectory"
    tool_pose_topic: str = "/arm_driver/out/tool_pose"
    joint_states_topic: str = "/joint_states"
    ik_service: str = "/compute_ik"

    @classmethod
    def from_yaml_data(cls, data: Dict[str, Any] | None) -> MoveItConfig:
        """Construct a MoveItConfig from a mapping of YAML data (missing keys use defaults)."""
        return _from_mapping(cls, data)

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> MoveItConfig:
        """Load a MoveItConfig from the 'moveit' section of the given YAML file."""
        yaml_data = load_yaml_data(yaml_path, required_keys={"moveit"})
        return cls.from_yaml_data(yaml_data["moveit"])


def named_target_from_yaml_data(
    target_data: dict | list,
    joint_names: Sequence[str],
    default_frame: str = DEFAULT_FRAME,
) -> NamedTargetValue:
    """Construct a named target (a pose or a joint state) from YAML data.

    :param target_data: Either pose data (list or {xyz_rpy, frame}) or {joints: {name: value}}
    :param joint_names: Canonical order of the manipulator's joints
    :param default_frame: Frame used for poses that don't specify one
    :return: Pose3D or JointState described by the data
    """
    if isinstance(target_data, dict) and "joints" in target_data:
        return JointState.from_configuration(dict(target_data["joints"]), joint_names)

    return Pose3D.from_yaml_data(target_data, default_frame)


def load_named_targets(yaml_path: Path, joint_names: Sequence[str]) -> dict[str, NamedTargetValue]:
    """Load the 'named_targets' collection from the given YAML file.

    :param yaml_path: Path to a YAML file containing named target data
    :param joint_names: Canonical order of the manipulator's joints
    :return: Map from target names to their poses or joint states
    """
    yaml_data = load_yaml_data(yaml_path, required_keys={"named_targets"})
    default_frame = yaml_data.get("default_frame", DEFAULT_FRAME)
    targets_data: dict[str, Any] = yaml_data["named_targets"] or {}

    return {
        name: named_target_from_yaml_data(data, joint_names, default_frame)
        for name, data in targets_data.items()
    }
