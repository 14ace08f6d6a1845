"""Import ROS adapters implementing the motion commander's collaborator interfaces."""

from .feedback import TopicFeedbackSource as TopicFeedbackSource
from .moveit_engine import MoveItPlanningEngine as MoveItPlanningEngine
from .params import get_ros_param as get_ros_param
from .params import load_config_from_params as load_config_from_params
from .trajectory_backend import FollowJointTrajectoryBackend as FollowJointTrajectoryBackend
