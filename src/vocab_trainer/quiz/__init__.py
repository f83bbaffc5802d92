from .engine import (
    GradingOutcome,
    ProgressUpdate,
    QuizItem,
    QuizSession,
    SessionState,
    SummaryRow,
    current_prompt,
    finish_session,
    progress_summary,
    quit_session,
    start_session,
    submit_answer,
)
from .errors import (
    AlreadyAnsweredError,
    EmptyWordSetError,
    InvalidSessionStateError,
    NoActivePromptError,
    QuizError,
    SessionProtocolError,
)
from .runner import QuizRunResult, run_quiz

__all__ = [
    "GradingOutcome",
    "ProgressUpdate",
    "QuizItem",
    "QuizSession",
    "SessionState",
    "SummaryRow",
    "current_prompt",
    "finish_session",
    "progress_summary",
    "quit_session",
    "start_session",
    "submit_answer",
    "AlreadyAnsweredError",
    "EmptyWordSetError",
    "InvalidSessionStateError",
    "NoActivePromptError",
    "QuizError",
    "SessionProtocolError",
    "QuizRunResult",
    "run_quiz",
]
