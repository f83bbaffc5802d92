"""Vocabulary practice through quiz sessions."""

from .access import AccessGate, AccessTable
from .quiz import (
    EmptyWordSetError,
    QuizSession,
    current_prompt,
    finish_session,
    progress_summary,
    quit_session,
    start_session,
    submit_answer,
)
from .words import JsonlWordStore, VocabularyEntry

__all__ = [
    "AccessGate",
    "AccessTable",
    "EmptyWordSetError",
    "QuizSession",
    "current_prompt",
    "finish_session",
    "progress_summary",
    "quit_session",
    "start_session",
    "submit_answer",
    "JsonlWordStore",
    "VocabularyEntry",
]
