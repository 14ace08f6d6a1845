"""Import classes and definitions enabling waypoint generation and plan evaluation."""

from .evaluation import EvaluatedPlan as EvaluatedPlan
from .evaluation import PartialPlan as PartialPlan
from .evaluation import PlanEvaluator as PlanEvaluator
from .evaluation import compute_success_fraction as compute_success_fraction
from .requests import AbsolutePose as AbsolutePose
from .requests import JointTarget as JointTarget
from .requests import MotionRequest as MotionRequest
from .requests import NamedTarget as NamedTarget
from .requests import RelativeCartesian as RelativeCartesian
from .requests import describe_request as describe_request
from .trajectories import Plan as Plan
from .trajectories import Trajectory as Trajectory
from .trajectories import TrajectoryPoint as TrajectoryPoint
from .waypoints import PathMode as PathMode
from .waypoints import Waypoint as Waypoint
from .waypoints import WaypointInterpolator as WaypointInterpolator
from .waypoints import WaypointSequence as WaypointSequence
