"""Import classes gating and dispatching approved trajectories."""

from .confirmation import ApprovalChannel as ApprovalChannel
from .confirmation import AutoApprovalChannel as AutoApprovalChannel
from .confirmation import ConfirmationGate as ConfirmationGate
from .confirmation import GateState as GateState
from .dispatcher import ExecutionResult as ExecutionResult
from .dispatcher import TrajectoryDispatcher as TrajectoryDispatcher
