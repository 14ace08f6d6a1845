"""Import the motion commander and the types used to make motion requests."""

from .commander import MotionCommander as MotionCommander
from .config import CommanderConfig as CommanderConfig
from .config import MoveItConfig as MoveItConfig
from .errors import ExecutionFailed as ExecutionFailed
from .errors import ExecutorUnavailable as ExecutorUnavailable
from .errors import InvalidOrientation as InvalidOrientation
from .errors import MotionCommandError as MotionCommandError
from .errors import PlanningFailed as PlanningFailed
from .errors import SourceUnavailable as SourceUnavailable
from .errors import UnknownTarget as UnknownTarget
from .errors import UserDeclined as UserDeclined
from .motion_planning import AbsolutePose as AbsolutePose
from .motion_planning import JointTarget as JointTarget
from .motion_planning import MotionRequest as MotionRequest
from .motion_planning import NamedTarget as NamedTarget
from .motion_planning import RelativeCartesian as RelativeCartesian
from .outcome import Outcome as Outcome
