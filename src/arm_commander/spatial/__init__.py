"""Import classes and definitions representing 3D coordinate frames, poses, and rotations."""

from .frames import DEFAULT_FRAME as DEFAULT_FRAME
from .points import Point3D as Point3D
from .poses import XYZ_RPY as XYZ_RPY
from .poses import Pose3D as Pose3D
from .relative import rpy_to_orientation as rpy_to_orientation
from .relative import to_absolute as to_absolute
from .rotations import EulerRPY as EulerRPY
from .rotations import Quaternion as Quaternion
