"""Unit tests for JointState, a class representing ordered manipulator joint values."""

import pytest
from hypothesis import given

from arm_commander.kinematics import JointState

from .fakes import JOINT_NAMES
from .strategies import joint_states


@given(joint_states())
def test_joint_state_to_configuration_and_back(state: JointState) -> None:
    """Verify that a JointState is unchanged after converting to and from a name-value map."""
    # Arrange/Act
    config = state.to_configuration()
    result = JointState.from_configuration(config, JOINT_NAMES)

    # Assert
    assert result == state


def test_from_configuration_orders_by_canonical_names() -> None:
    """Verify that joint values given in any order are stored in canonical order."""
    # Arrange - A configuration listing the joints in reverse order
    config = {name: float(idx) for idx, name in reversed(list(enumerate(JOINT_NAMES)))}

    # Act
    state = JointState.from_configuration(config, JOINT_NAMES)

    # Assert
    assert state.joint_names == JOINT_NAMES
    assert state.positions == (0.0, 1.0, 2.0, 3.0, 4.0, 5.0)


def test_from_configuration_rejects_missing_joint() -> None:
    """Verify that a configuration missing a joint raises a ValueError."""
    config = {name: 0.0 for name in JOINT_NAMES[:-1]}

    with pytest.raises(ValueError, match="joint6"):
        JointState.from_configuration(config, JOINT_NAMES)


def test_from_configuration_rejects_extra_joint() -> None:
    """Verify that a configuration naming an unknown joint raises a ValueError."""
    config = {name: 0.0 for name in JOINT_NAMES}
    config["gripper"] = 0.1

    with pytest.raises(ValueError, match="gripper"):
        JointState.from_configuration(config, JOINT_NAMES)


def test_require_order_never_reorders() -> None:
    """Verify that a state with a different joint order is rejected rather than reordered."""
    # Arrange
    state = JointState(tuple(reversed(JOINT_NAMES)), (0.0,) * len(JOINT_NAMES))

    # Act/Assert
    with pytest.raises(ValueError, match="doesn't match canonical"):
        state.require_order(JOINT_NAMES)


def test_mismatched_lengths_raise_value_error() -> None:
    """Verify that a JointState needs exactly one position per joint."""
    with pytest.raises(ValueError, match="6 names but 2 positions"):
        JointState(JOINT_NAMES, (0.0, 1.0))


def test_duplicate_joint_names_raise_value_error() -> None:
    """Verify that joint names in a JointState must be unique."""
    with pytest.raises(ValueError, match="duplicate"):
        JointState(("joint1", "joint1"), (0.0, 1.0))


@given(joint_states())
def test_with_value_replaces_only_one_joint(state: JointState) -> None:
    """Verify that replacing one joint's value leaves the others unchanged."""
    # Arrange/Act
    result = state.with_value(2, 1.25)

    # Assert
    assert result["joint3"] == 1.25
    assert [p for i, p in enumerate(result.positions) if i != 2] == [
        p for i, p in enumerate(state.positions) if i != 2
    ]


def test_with_value_out_of_range_raises_index_error() -> None:
    """Verify that replacing a nonexistent joint raises an IndexError."""
    state = JointState(JOINT_NAMES, (0.0,) * len(JOINT_NAMES))

    with pytest.raises(IndexError):
        state.with_value(6, 0.0)
