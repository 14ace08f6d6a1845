"""Import classes and definitions for manipulator joint states."""

from .joint_state import Configuration as Configuration
from .joint_state import JointState as JointState
