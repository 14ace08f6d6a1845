"""Define a class to represent poses in 3D space."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Tuple

import numpy as np

from arm_commander.spatial.frames import DEFAULT_FRAME
from arm_commander.spatial.points import Point3D
from arm_commander.spatial.rotations import EulerRPY, Quaternion

if TYPE_CHECKING:
    from collections.abc import Sequence

XYZ_RPY = Tuple[float, float, float, float, float, float]
"""A 6-tuple of (x, y, z, roll, pitch, yaw) values."""


@dataclass(frozen=True)
class Pose3D:
    """A position and orientation in 3D space."""

    position: Point3D
    orientation: Quaternion
    ref_frame: str = DEFAULT_FRAME

    def __str__(self) -> str:
        """Return a human-readable string representation of the Pose3D."""
        xyz_rpy = ", ".join(f"{value:.3f}" for value in self.to_xyz_rpy())
        return f'Pose3D([{xyz_rpy}], ref_frame="{self.ref_frame}")'

    @classmethod
    def identity(cls, ref_frame: str = DEFAULT_FRAME) -> Pose3D:
        """Construct a Pose3D corresponding to the identity transformation."""
        return Pose3D(Point3D.identity(), Quaternion.identity(), ref_frame)

    @classmethod
    def from_xyz_rpy(
        cls,
        x: float = 0.0,
        y: float = 0.0,
        z: float = 0.0,
        roll_rad: float = 0.0,
        pitch_rad: float = 0.0,
        yaw_rad: float = 0.0,
        ref_frame: str = DEFAULT_FRAME,
    ) -> Pose3D:
        """Construct a Pose3D from the given XYZ coordinates and Euler RPY angles.

        :param x: Translation along the x-axis
        :param y: Translation along the y-axis
        :param z: Translation along the z-axis
        :param roll_rad: Fixed-frame roll angle (radians) about the x-axis
        :param pitch_rad: Fixed-frame pitch angle (radians) about the y-axis
        :param yaw_rad: Fixed-frame yaw angle (radians) about the z-axis
        :param ref_frame: Reference frame of the constructed pose
        :return: Constructed Pose3D instance
        """
        position = Point3D(x, y, z)
        orientation = EulerRPY(roll_rad, pitch_rad, yaw_rad).to_quaternion()

        return Pose3D(position, orientation, ref_frame)

    def to_xyz_rpy(self) -> XYZ_RPY:
        """Convert the pose into a tuple of its (x, y, z, roll, pitch, yaw) values.

        :return: 6-tuple of (x, y, z, roll, pitch, yaw) values with angles in radians
        """
        return (*self.position.to_tuple(), *self.orientation.to_euler_rpy().to_tuple())

    @classmethod
    def from_sequence(cls, data: Sequence[float], ref_frame: str = DEFAULT_FRAME) -> Pose3D:
        """Construct a Pose3D from the given sequence of XYZ-RPY data.

        :param data: Sequence of six floats specifying (x, y, z, roll, pitch, yaw)
        :param ref_frame: Reference frame of the constructed Pose3D
        :return: Constructed Pose3D instance
        """
        if len(data) != 6:
            raise ValueError(f"Cannot construct Pose3D from sequence of length {len(data)}.")
        x, y, z, roll, pitch, yaw = (float(v) for v in data)
        return Pose3D.from_xyz_rpy(x, y, z, roll, pitch, yaw, ref_frame)

    def to_homogeneous_matrix(self) -> np.ndarray:
        """Convert the Pose3D into a 4x4 homogeneous transformation matrix."""
        matrix = self.orientation.to_homogeneous_matrix()
        matrix[:3, 3] = self.position.to_array()
        return matrix

    @classmethod
    def from_yaml_data(cls, pose_data: dict | list, default_frame: str = DEFAULT_FRAME) -> Pose3D:
        """Construct a Pose3D instance from data imported from YAML.

        :param pose_data: Dictionary or list of YAML data representing a 3D pose
        :param default_frame: Default frame used for the pose, if the YAML doesn't provide one
        :return: Constructed Pose3D instance
        :raises TypeError: If the given YAML data has an unsupported type
        """
        if isinstance(pose_data, dict):
            xyz_rpy = pose_data["xyz_rpy"]
            ref_frame = pose_data.get("frame", default_frame)
        elif isinstance(pose_data, list):
            xyz_rpy = pose_data
            ref_frame = default_frame
        else:
            raise TypeError(f"Cannot load Pose3D from YAML data of type {type(pose_data)}")

        return Pose3D.from_sequence(xyz_rpy, ref_frame)

    def to_yaml_data(self) -> dict[str, Any]:
        """Convert the pose into a dictionary suitable for export to YAML."""
        return {"xyz_rpy": list(self.to_xyz_rpy()), "frame": self.ref_frame}

    def with_position(self, position: Point3D) -> Pose3D:
        """Return a copy of this pose with its position replaced."""
        return replace(self, position=position)

    def with_orientation(self, orientation: Quaternion) -> Pose3D:
        """Return a copy of this pose with its orientation replaced."""
        return replace(self, orientation=orientation)

    def approx_equal(self, other: Pose3D, rtol: float = 1e-05, atol: float = 1e-08) -> bool:
        """Evaluate whether another Pose3D is approximately equal to this one."""
        return (
            self.ref_frame == other.ref_frame
            and self.position.approx_equal(other.position, rtol=rtol, atol=atol)
            and self.orientation.approx_equal(other.orientation, rtol=rtol, atol=atol)
        )
