"""Define the confirmation gate that must approve motions before they are executed."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from enum import Enum

from arm_commander.errors import UserDeclined

logger = logging.getLogger(__name__)


class ApprovalChannel(ABC):
    """A synchronous yes/no channel to the operator (e.g., a CLI prompt or a UI dialog)."""

    @abstractmethod
    def prompt(self, message: str) -> bool:
        """Ask the operator to approve the described motion.

        :param message: Description of the motion awaiting approval
        :return: True if the operator approved, False if they declined
        """
        ...


class AutoApprovalChannel(ApprovalChannel):
    """Approves every motion without asking (for automated pipelines)."""

    def prompt(self, message: str) -> bool:
        """Approve the described motion immediately."""
        logger.debug(f"Auto-approved: {message}")
        return True


class GateState(Enum):
    """States of the confirmation gate during a single motion request."""

    IDLE = "idle"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    APPROVED = "approved"
    DECLINED = "declined"


class ConfirmationGate:
    """Blocks a motion request until the operator approves or declines it.

    The approval channel is queried in a helper thread so that the pending confirmation can
        also be declined through `decline()` or by an expiring timeout.
    """

    def __init__(
        self,
        channel: ApprovalChannel,
        enabled: bool = True,
        timeout_s: float | None = None,
    ) -> None:
        """Initialize the gate with its approval channel.

        :param channel: Channel used to ask the operator for approval
        :param enabled: Whether motions require approval at all (defaults to True)
        :param timeout_s: Duration (seconds) after which a pending approval is declined
            (defaults to None, meaning the gate waits indefinitely)
        """
        self.channel = channel
        self.enabled = enabled
        self.timeout_s = timeout_s

        self._lock = threading.Lock()
        self._decided = threading.Event()
        self._state = GateState.IDLE
        self._reason = ""
        self._error: BaseException | None = None
        self._confirmation_id = 0  # Identifies the most recent call to confirm()

    @property
    def state(self) -> GateState:
        """Retrieve the current state of the gate."""
        with self._lock:
            return self._state

    def confirm(self, message: str, timeout_s: float | None = None) -> None:
        """Block until the described motion is approved; return immediately if the gate is off.

        :param message: Description of the motion shown to the operator
        :param timeout_s: Optional override of the gate's timeout (seconds)
        :raises UserDeclined: If the operator declines, or the approval times out
        """
        if not self.enabled:
            return

        with self._lock:
            if self._state is GateState.AWAITING_CONFIRMATION:
                raise RuntimeError("Another motion is already awaiting confirmation.")
            self._state = GateState.AWAITING_CONFIRMATION
            self._reason = ""
            self._error = None
            self._decided.clear()
            self._confirmation_id += 1
            confirmation_id = self._confirmation_id

        prompt_thread = threading.Thread(
            target=self._ask,
            args=(message, confirmation_id),
            name="confirmation-prompt",
            daemon=True,
        )
        prompt_thread.start()

        wait_s = self.timeout_s if timeout_s is None else timeout_s
        if not self._decided.wait(timeout=wait_s):
            reason = f"No confirmation within {wait_s:.1f} seconds."
            self._resolve(approved=False, reason=reason, confirmation_id=confirmation_id)

        with self._lock:
            state, reason, error = self._state, self._reason, self._error

        if error is not None:
            raise error
        if state is GateState.DECLINED:
            logger.info(f"Motion declined: {reason}")
            raise UserDeclined(reason)

        logger.info("Motion approved.")

    def decline(self, reason: str = "Declined before dispatch.") -> bool:
        """Decline the pending confirmation, if any.

        :return: True if a pending confirmation was declined, else False
        """
        return self._resolve(approved=False, reason=reason)

    def reset(self) -> None:
        """Return the gate to its idle state once the current request has finished."""
        with self._lock:
            if self._state is not GateState.AWAITING_CONFIRMATION:
                self._state = GateState.IDLE

    def _ask(self, message: str, confirmation_id: int) -> None:
        """Query the approval channel and record the operator's decision for one confirmation."""
        try:
            approved = bool(self.channel.prompt(message))
        except Exception as error:  # Re-raised in the thread waiting in confirm()
            self._resolve(
                approved=False,
                reason=f"Approval channel failed: {error}",
                confirmation_id=confirmation_id,
                error=error,
            )
            return

        reason = "" if approved else "Declined by the operator."
        self._resolve(approved, reason, confirmation_id=confirmation_id)

    def _resolve(
        self,
        approved: bool,
        reason: str,
        confirmation_id: int | None = None,
        error: BaseException | None = None,
    ) -> bool:
        """Record a decision for the pending confirmation; the first decision wins.

        :param confirmation_id: Confirmation the decision answers (None means the pending one)
        :param error: Error raised by the approval channel, re-raised by confirm()
        :return: True if the decision was recorded, False if it was stale or nothing was pending
        """
        with self._lock:
            if self._state is not GateState.AWAITING_CONFIRMATION:
                return False
            if confirmation_id is not None and confirmation_id != self._confirmation_id:
                logger.debug(f"Ignored a late answer to confirmation {confirmation_id}.")
                return False

            self._state = GateState.APPROVED if approved else GateState.DECLINED
            self._reason = reason
            self._error = error

        self._decided.set()
        return True
