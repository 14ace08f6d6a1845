"""Unit tests for the confirmation gate."""

import threading
import time

import pytest

from arm_commander.errors import UserDeclined
from arm_commander.execution import AutoApprovalChannel, ConfirmationGate, GateState

from .fakes import FailingApprovalChannel, HeldApprovalChannel, ScriptedApprovalChannel


def test_approved_motion_passes() -> None:
    """Verify that an approved motion returns normally and leaves the gate approved."""
    # Arrange
    channel = ScriptedApprovalChannel(True)
    gate = ConfirmationGate(channel)

    # Act
    gate.confirm("move 10 cm along x")

    # Assert
    assert channel.prompts == ["move 10 cm along x"]
    assert gate.state is GateState.APPROVED


def test_declined_motion_raises_user_declined() -> None:
    """Verify that declining at the prompt raises UserDeclined."""
    gate = ConfirmationGate(ScriptedApprovalChannel(False))

    with pytest.raises(UserDeclined):
        gate.confirm("move to home")
    assert gate.state is GateState.DECLINED


def test_disabled_gate_never_prompts() -> None:
    """Verify that a disabled gate approves without asking the operator."""
    # Arrange
    channel = ScriptedApprovalChannel(False)
    gate = ConfirmationGate(channel, enabled=False)

    # Act
    gate.confirm("move to home")

    # Assert
    assert channel.prompts == []
    assert gate.state is GateState.IDLE


def test_timeout_declines_pending_confirmation() -> None:
    """Verify that an unanswered confirmation is declined once its timeout expires."""
    # Arrange - The operator never answers before the timeout
    release = threading.Event()
    gate = ConfirmationGate(ScriptedApprovalChannel(True, release=release), timeout_s=0.05)

    # Act/Assert
    try:
        with pytest.raises(UserDeclined, match="No confirmation"):
            gate.confirm("move to home")
    finally:
        release.set()


def test_late_answer_after_timeout_is_ignored() -> None:
    """Verify that the first decision wins even if the operator answers afterward."""
    # Arrange
    release = threading.Event()
    channel = ScriptedApprovalChannel(True, release=release)
    gate = ConfirmationGate(channel, timeout_s=0.05)

    # Act
    with pytest.raises(UserDeclined):
        gate.confirm("move to home")
    release.set()

    # Assert
    assert gate.state is GateState.DECLINED


def test_decline_from_another_thread() -> None:
    """Verify that a pending confirmation can be declined externally."""
    # Arrange
    release = threading.Event()
    channel = ScriptedApprovalChannel(True, release=release)
    gate = ConfirmationGate(channel)

    def decline_when_prompted() -> None:
        channel.prompted.wait(timeout=5.0)
        gate.decline("operator pressed stop")

    decliner = threading.Thread(target=decline_when_prompted)
    decliner.start()

    # Act/Assert
    try:
        with pytest.raises(UserDeclined, match="operator pressed stop"):
            gate.confirm("move to home")
    finally:
        release.set()
        decliner.join()


def test_decline_without_pending_confirmation_does_nothing() -> None:
    """Verify that declining an idle gate has no effect."""
    gate = ConfirmationGate(AutoApprovalChannel())

    assert not gate.decline()
    assert gate.state is GateState.IDLE


def test_channel_error_is_propagated() -> None:
    """Verify that an error raised by the approval channel reaches the caller."""
    gate = ConfirmationGate(FailingApprovalChannel())

    with pytest.raises(RuntimeError, match="console closed"):
        gate.confirm("move to home")


def test_reset_returns_gate_to_idle() -> None:
    """Verify that resetting a decided gate makes it idle again."""
    # Arrange
    gate = ConfirmationGate(AutoApprovalChannel())
    gate.confirm("move to home")

    # Act
    gate.reset()

    # Assert
    assert gate.state is GateState.IDLE


def test_late_answer_never_approves_the_next_confirmation() -> None:
    """Verify that an answer to a timed-out confirmation cannot approve a later one."""
    # Arrange - The first confirmation times out while its prompt is still open
    channel = HeldApprovalChannel(True, False)
    gate = ConfirmationGate(channel, timeout_s=0.05)
    with pytest.raises(UserDeclined):
        gate.confirm("request 1")

    errors: list[BaseException] = []

    def confirm_second() -> None:
        try:
            gate.confirm("request 2", timeout_s=5.0)
        except UserDeclined as error:
            errors.append(error)

    second = threading.Thread(target=confirm_second)

    try:
        # Act - The operator answers "yes" to the first prompt while the second is pending
        second.start()
        assert channel.wait_for_prompts(2)
        channel.releases[0].set()
        time.sleep(0.1)

        # Assert - The second confirmation is still waiting for its own answer
        assert gate.state is GateState.AWAITING_CONFIRMATION
        assert gate.decline("operator pressed stop")
        second.join(timeout=5.0)
        assert len(errors) == 1
        assert gate.state is GateState.DECLINED
    finally:
        channel.release_all()
        second.join(timeout=5.0)


def test_second_concurrent_confirmation_is_refused() -> None:
    """Verify that only one motion at a time may await confirmation."""
    # Arrange
    channel = HeldApprovalChannel(True)
    gate = ConfirmationGate(channel)
    first = threading.Thread(target=gate.confirm, args=("request 1",))
    first.start()

    # Act/Assert
    try:
        assert channel.wait_for_prompts(1)
        with pytest.raises(RuntimeError, match="already awaiting confirmation"):
            gate.confirm("request 2")
    finally:
        channel.release_all()
        first.join(timeout=5.0)

    assert gate.state is GateState.APPROVED
    assert channel.prompts == ["request 1"]
