"""Define CLI handlers used to ask the operator for input."""

from __future__ import annotations

from click import confirm
from rich.panel import Panel

from arm_commander.execution.confirmation import ApprovalChannel
from arm_commander.io.logging import console


class ConsoleApprovalChannel(ApprovalChannel):
    """Asks the operator at the console to approve each motion before it executes."""

    def __init__(self, title: str = "Confirm motion", default: bool = False) -> None:
        """Initialize the channel with the title of its prompt panel.

        :param title: Title displayed above the motion description
        :param default: Answer assumed when the operator just presses Enter (defaults to "no")
        """
        self.title = title
        self.default = default

    def prompt(self, message: str) -> bool:
        """Display the motion description and ask the operator for a yes/no answer."""
        console.print(Panel(message, title=f"[bold]{self.title}[/]", border_style="yellow"))
        return confirm(text="Execute this motion?", default=self.default)
