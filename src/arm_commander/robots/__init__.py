"""Import the collaborator interfaces and state accessors of the manipulator."""

from .interfaces import ExecutionBackend as ExecutionBackend
from .interfaces import FeedbackSample as FeedbackSample
from .interfaces import GoalStatus as GoalStatus
from .interfaces import LiveFeedbackSource as LiveFeedbackSource
from .interfaces import NamedTargetValue as NamedTargetValue
from .interfaces import PlanningEngine as PlanningEngine
from .interfaces import TerminalState as TerminalState
from .state import StateAccessor as StateAccessor
from .state import StateSnapshot as StateSnapshot
from .state import StateSource as StateSource
