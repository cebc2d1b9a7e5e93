"""Exception types raised by mindmate."""

from __future__ import annotations


class MindMateError(Exception):
    """Base error for mindmate."""


class EmptyEntryError(MindMateError):
    """Raised when the user tries to analyze or save a blank entry."""

    def __init__(self, message: str = "Journal entry cannot be empty.") -> None:
        super().__init__(message)


class AnalysisError(MindMateError):
    """Base error for a failed analysis call."""

    @property
    def user_message(self) -> str:
        """Human-readable message shown in the editor."""
        return f"Failed to get analysis from AI. {self}"


class TransportError(AnalysisError):
    """The endpoint answered with a non-2xx status, or could not be reached.

    ``status`` is None when the request never got a response.
    """

    def __init__(self, status: int | None, body: str) -> None:
        self.status = status
        self.body = body
        if status is None:
            super().__init__(f"API Error: {body}")
        else:
            super().__init__(f"API Error: {status} - {body}")


class MalformedResponseError(AnalysisError):
    """No parseable JSON object could be pulled out of the response."""


class ValidationError(AnalysisError):
    """The parsed payload is missing required fields or has the wrong shape."""
