"""Define classes to represent manipulator joint states."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict

import numpy as np

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from numpy.typing import NDArray

Configuration = Dict[str, float]
"""A map from joint names to positions (rad or m)."""


@dataclass(frozen=True)
class JointState:
    """Joint positions of a manipulator, ordered by its canonical joint names.

    The order of the joints is fixed at construction and is never silently changed.
    """

    joint_names: tuple[str, ...]
    positions: tuple[float, ...]

    def __post_init__(self) -> None:
        """Verify that every joint has exactly one position and that names are unique."""
        object.__setattr__(self, "joint_names", tuple(self.joint_names))
        object.__setattr__(self, "positions", tuple(float(p) for p in self.positions))

        if len(self.joint_names) != len(self.positions):
            raise ValueError(
                f"JointState has {len(self.joint_names)} names "
                f"but {len(self.positions)} positions.",
            )
        if len(set(self.joint_names)) != len(self.joint_names):
            raise ValueError(f"JointState has duplicate joint names: {self.joint_names}")

    def __len__(self) -> int:
        """Return the number of joints in the state."""
        return len(self.joint_names)

    def __iter__(self) -> Iterator[float]:
        """Provide an iterator over the joint positions in canonical order."""
        yield from self.positions

    def __getitem__(self, joint_name: str) -> float:
        """Retrieve the position of the named joint."""
        return self.positions[self.joint_names.index(joint_name)]

    @classmethod
    def from_configuration(cls, config: Configuration, joint_names: Sequence[str]) -> JointState:
        """Construct a JointState from a map of joint values, ordered by the given names.

        :param config: Map from joint names to positions
        :param joint_names: Canonical order of the manipulator's joints
        :return: Constructed JointState instance
        :raises ValueError: If the configuration is missing joints or names unexpected joints
        """
        missing = [name for name in joint_names if name not in config]
        extra = sorted(set(config) - set(joint_names))
        if missing or extra:
            raise ValueError(f"Configuration mismatch: missing joints {missing}, extra {extra}.")

        return JointState(tuple(joint_names), tuple(config[name] for name in joint_names))

    def to_configuration(self) -> Configuration:
        """Convert the joint state into a map from joint names to positions."""
        return dict(zip(self.joint_names, self.positions))

    def to_array(self) -> NDArray[np.float64]:
        """Convert the joint positions into a NumPy array."""
        return np.array(self.positions, dtype=np.float64)

    def with_positions(self, positions: Sequence[float]) -> JointState:
        """Return a joint state with the same joints but the given positions."""
        return JointState(self.joint_names, tuple(positions))

    def with_value(self, joint_index: int, value: float) -> JointState:
        """Return a copy of this joint state with a single joint position replaced.

        :param joint_index: Index (in canonical order) of the joint to be replaced
        :param value: New position of the joint (rad or m)
        :raises IndexError: If the index is outside the manipulator's joints
        """
        if not 0 <= joint_index < len(self):
            raise IndexError(f"Joint index {joint_index} is out of range for {len(self)} joints.")

        positions = list(self.positions)
        positions[joint_index] = float(value)
        return self.with_positions(positions)

    def require_order(self, joint_names: Sequence[str]) -> None:
        """Verify that this state uses exactly the given canonical joint order.

        :raises ValueError: If the joint names or their order differ
        """
        expected = tuple(joint_names)
        if expected != self.joint_names:
            raise ValueError(f"Joint order {self.joint_names} doesn't match canonical {expected}.")

    def approx_equal(self, other: JointState, atol: float = 1e-08) -> bool:
        """Evaluate whether another JointState has the same joints and nearly equal positions."""
        return self.joint_names == other.joint_names and np.allclose(
            self.to_array(),
            other.to_array(),
            atol=atol,
        )
