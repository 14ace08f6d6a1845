"""Send motion requests to a MoveIt-controlled manipulator through a command-line interface."""

from pathlib import Path

import rospy

from arm_commander import CommanderConfig, MotionCommander, MoveItConfig
from arm_commander.io.motion_cli import build_cli
from arm_commander.ros import (
    FollowJointTrajectoryBackend,
    MoveItPlanningEngine,
    TopicFeedbackSource,
    get_ros_param,
    load_config_from_params,
)


def main() -> None:
    """Wire the ROS adapters into a motion commander and run one CLI command."""
    rospy.init_node("motion_commander", anonymous=True)

    config_yaml = get_ros_param("~config_yaml", str, default_value="")
    if config_yaml:
        config_path = Path(config_yaml)
        commander_config = CommanderConfig.from_yaml(config_path)
        moveit_config = MoveItConfig.from_yaml(config_path)
        engine = MoveItPlanningEngine(moveit_config, targets_yaml=config_path)
    else:
        commander_config = load_config_from_params(CommanderConfig, "~commander")
        moveit_config = load_config_from_params(MoveItConfig, "~moveit")
        engine = MoveItPlanningEngine(moveit_config)

    feedback = TopicFeedbackSource(
        moveit_config.tool_pose_topic,
        moveit_config.joint_states_topic,
        engine.joint_names,
    )
    backend = FollowJointTrajectoryBackend(moveit_config.trajectory_action)
    commander = MotionCommander(engine, backend, feedback=feedback, config=commander_config)

    cli = build_cli(commander)
    cli(args=rospy.myargv()[1:])


if __name__ == "__main__":
    main()
