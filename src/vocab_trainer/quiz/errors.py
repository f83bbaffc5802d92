"""Errors raised by the quiz session engine.

``EmptyWordSetError`` is the only user-facing condition. The rest signal that
a caller drove a session out of order and should not be caught and ignored.
"""

from __future__ import annotations

__all__ = [
    "QuizError",
    "EmptyWordSetError",
    "SessionProtocolError",
    "NoActivePromptError",
    "AlreadyAnsweredError",
    "InvalidSessionStateError",
]


class QuizError(RuntimeError):
    """Base class for quiz session failures."""


class EmptyWordSetError(QuizError):
    """Raised when a session is requested for an empty word set."""

    user_message = "No words to practice."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.user_message)


class SessionProtocolError(QuizError):
    """A session operation was called in an order it does not support."""


class NoActivePromptError(SessionProtocolError):
    """There is no item awaiting an answer."""


class AlreadyAnsweredError(SessionProtocolError):
    """The targeted item has already been graded."""


class InvalidSessionStateError(SessionProtocolError):
    """The session's lifecycle state does not allow the operation."""
