"""Define classes to represent 3D rotations and orientations."""

from __future__ import annotations

from dataclasses import astuple, dataclass
from typing import TYPE_CHECKING

import numpy as np
from pyquaternion import Quaternion as Q
from trimesh.transformations import (
    euler_from_quaternion,
    euler_matrix,
    quaternion_from_euler,
    quaternion_from_matrix,
    quaternion_matrix,
)

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from numpy.typing import NDArray


@dataclass(frozen=True)
class EulerRPY:
    """A 3D rotation represented using three fixed-frame Euler angles.

    Roll, pitch, and yaw rotate about the world-fixed X, Y, and Z axes, applied in that order.
    """

    roll_rad: float
    pitch_rad: float
    yaw_rad: float

    def __iter__(self) -> Iterator[float]:
        """Provide an iterator over the roll, pitch, and yaw values."""
        yield from astuple(self)

    @classmethod
    def identity(cls) -> EulerRPY:
        """Construct EulerRPY angles corresponding to the identity rotation."""
        return EulerRPY(0.0, 0.0, 0.0)

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> EulerRPY:
        """Construct Euler angles from a sequence of angle values (in radians)."""
        if len(values) != 3:
            raise ValueError(f"EulerRPY expects 3 values, got {len(values)}")
        return EulerRPY(float(values[0]), float(values[1]), float(values[2]))

    def to_tuple(self) -> tuple[float, float, float]:
        """Convert the angles into a (roll, pitch, yaw) tuple of floats."""
        return (float(self.roll_rad), float(self.pitch_rad), float(self.yaw_rad))

    def is_finite(self) -> bool:
        """Check whether all three angles are finite numbers."""
        return bool(np.all(np.isfinite(self.to_tuple())))

    def to_homogeneous_matrix(self) -> NDArray[np.float64]:
        """Convert the Euler RPY angles into an equivalent homogeneous transformation matrix."""
        return euler_matrix(self.roll_rad, self.pitch_rad, self.yaw_rad, axes="sxyz")

    def to_quaternion(self) -> Quaternion:
        """Convert the Euler angles into an equivalent unit quaternion."""
        w, x, y, z = quaternion_from_euler(self.roll_rad, self.pitch_rad, self.yaw_rad, axes="sxyz")
        return Quaternion(x=float(x), y=float(y), z=float(z), w=float(w))


@dataclass(frozen=True)
class Quaternion:
    """A unit quaternion representing a 3D orientation."""

    x: float
    y: float
    z: float
    w: float

    def __post_init__(self) -> None:
        """Normalize the quaternion after it is initialized.

        :raises ValueError: If the quaternion has non-finite or all-zero components
        """
        values = np.array([self.x, self.y, self.z, self.w], dtype=np.float64)
        if not np.all(np.isfinite(values)):
            raise ValueError(f"Cannot normalize a quaternion with non-finite values: {values}")

        norm = float(np.linalg.norm(values))
        if norm == 0:
            raise ValueError(f"Cannot normalize a zero-valued quaternion: {values}")

        for name, value in zip("xyzw", values / norm):
            object.__setattr__(self, name, float(value))

    def _to_pyquaternion(self) -> Q:
        """Convert into a pyquaternion.Quaternion (which stores w first)."""
        return Q(self.w, self.x, self.y, self.z)

    @classmethod
    def identity(cls) -> Quaternion:
        """Construct a Quaternion corresponding to the identity rotation."""
        return Quaternion(0.0, 0.0, 0.0, 1.0)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> Quaternion:
        """Construct a quaternion from a NumPy array of the form [x,y,z,w]."""
        if arr.shape != (4,):
            raise ValueError(f"Quaternion expects a 4-vector, got {arr.shape}")

        return cls(float(arr[0]), float(arr[1]), float(arr[2]), float(arr[3]))

    def to_array(self) -> NDArray[np.float64]:
        """Convert the quaternion to a NumPy array of the form [x,y,z,w]."""
        return np.array([self.x, self.y, self.z, self.w], dtype=np.float64)

    def to_euler_rpy(self) -> EulerRPY:
        """Convert the quaternion into equivalent Euler roll, pitch, and yaw angles."""
        r, p, y = euler_from_quaternion([self.w, self.x, self.y, self.z], axes="sxyz")
        return EulerRPY(float(r), float(p), float(y))

    @classmethod
    def from_homogeneous_matrix(cls, matrix: NDArray[np.float64]) -> Quaternion:
        """Construct a quaternion from a 4x4 homogeneous transformation matrix."""
        if matrix.shape != (4, 4):
            raise ValueError(f"Quaternion expects a 4x4 homogeneous matrix, got {matrix.shape}")
        w, x, y, z = quaternion_from_matrix(matrix)  # Note: trimesh puts w (q's real value) first
        return Quaternion(x=float(x), y=float(y), z=float(z), w=float(w))

    def to_homogeneous_matrix(self) -> NDArray[np.float64]:
        """Convert the quaternion to a 4x4 homogeneous transformation matrix."""
        return quaternion_matrix([self.w, self.x, self.y, self.z])

    def slerp(self, other: Quaternion, fraction: float) -> Quaternion:
        """Spherically interpolate from this orientation toward another along the shortest arc.

        :param other: Orientation reached when the fraction is 1.0
        :param fraction: Interpolation amount, clipped into [0, 1]
        :return: Interpolated unit quaternion
        """
        result = Q.slerp(self._to_pyquaternion(), other._to_pyquaternion(), amount=fraction)
        return Quaternion(result.x, result.y, result.z, result.w)

    def angle_to_rad(self, other: Quaternion) -> float:
        """Compute the absolute angle (radians) of the rotation between two orientations."""
        dot = abs(float(np.dot(self.to_array(), other.to_array())))
        return 2.0 * float(np.arccos(min(1.0, dot)))

    def approx_equal(self, other: Quaternion, rtol: float = 1e-05, atol: float = 1e-08) -> bool:
        """Evaluate whether another Quaternion is approximately equal to this one.

        Note: A quaternion is considered equal to its negation, as they express the same rotation.
        """
        self_array = self.to_array()
        other_array = other.to_array()

        return np.allclose(self_array, other_array, rtol=rtol, atol=atol) or np.allclose(
            -self_array,
            other_array,
            rtol=rtol,
            atol=atol,
        )
