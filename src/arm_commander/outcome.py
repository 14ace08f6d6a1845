"""Define the outcome of a motion request as reported to service or CLI layers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

OutputT = TypeVar("OutputT")
"""Type variable representing output data associated with an outcome."""


@dataclass(frozen=True)
class Outcome(Generic[OutputT]):
    """An outcome (and optional output value) from a motion request."""

    success: bool
    message: str
    output: OutputT | None = None
    """Optional output value resulting from the request (defaults to None)."""

    error: Exception | None = None
    """Typed failure that ended the request, if it failed."""

    @classmethod
    def succeeded(cls, message: str, output: OutputT) -> Outcome[OutputT]:
        """Construct a successful outcome carrying the request's output."""
        return cls(True, message, output)

    @classmethod
    def failed(cls, error: Exception) -> Outcome[OutputT]:
        """Construct an unsuccessful outcome describing the error that ended the request."""
        return cls(False, str(error), error=error)
