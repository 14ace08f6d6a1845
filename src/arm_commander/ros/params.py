"""Define utility functions to support loading from ROS parameters."""

from __future__ import annotations

from dataclasses import fields
from typing import Any, TypeVar

import rospy

from arm_commander.config import CommanderConfig, MoveItConfig

ParamT = TypeVar("ParamT")
ConfigT = TypeVar("ConfigT", CommanderConfig, MoveItConfig)


def get_ros_param(name: str, param_t: type[ParamT], default_value: ParamT | None = None) -> ParamT:
    """Retrieve the parameter with the given name and type from the ROS parameter server.

    :param name: Name of the retrieved ROS parameter
    :param param_t: Type of the retrieved parameter
    :param default_value: Default value used if the ROS parameter doesn't exist (defaults to None)
    :return: Value retrieved from the ROS parameter server
    """
    if default_value is None:
        param_value = rospy.get_param(name)
    else:
        param_value = rospy.get_param(name, default=default_value)

    return param_t(param_value)


def load_config_from_params(config_t: type[ConfigT], namespace: str) -> ConfigT:
    """Construct a config dataclass from the ROS parameters under the given namespace.

    Parameters missing from the server keep the dataclass defaults.

    :param config_t: Config dataclass to be constructed (CommanderConfig or MoveItConfig)
    :param namespace: Namespace holding the parameters (e.g., "~commander")
    :return: Constructed configuration
    """
    overrides: dict[str, Any] = {}
    for f in fields(config_t):
        name = f"{namespace.rstrip('/')}/{f.name}"
        if rospy.has_param(name):
            overrides[f.name] = rospy.get_param(name)

    return config_t(**overrides)
