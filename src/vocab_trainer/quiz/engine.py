"""Quiz session state machine.

A session is built once from an ordered word set and then driven strictly in
order: ``current_prompt`` / ``submit_answer`` until the cursor runs off the
end, then exactly one of ``finish_session`` or ``quit_session``. The engine
never touches storage; ``finish_session`` returns the progress values a
caller should persist.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, List, Optional

from ..words.models import VocabularyEntry
from .errors import (
    AlreadyAnsweredError,
    EmptyWordSetError,
    InvalidSessionStateError,
    NoActivePromptError,
)

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    ABORTED = "aborted"

    @property
    def is_terminal(self) -> bool:
        return self is not SessionState.ACTIVE


@dataclass
class QuizItem:
    """One entry of a session and the answer given for it."""

    entry: VocabularyEntry
    answer: Optional[str] = None
    correct: Optional[bool] = None
    progress: int = field(init=False)

    def __post_init__(self) -> None:
        self.progress = self.entry.progress

    @property
    def answered(self) -> bool:
        return self.answer is not None


@dataclass(frozen=True)
class GradingOutcome:
    """Result of grading the active item."""

    index: int
    answer: str
    correct: bool
    exhausted: bool


@dataclass(frozen=True)
class ProgressUpdate:
    entry: VocabularyEntry
    new_progress: int

    def updated_entry(self) -> VocabularyEntry:
        return replace(self.entry, progress=self.new_progress)


@dataclass(frozen=True)
class SummaryRow:
    entry: VocabularyEntry
    answer: Optional[str]
    correct: bool


@dataclass
class QuizSession:
    """Ordered quiz items, a cursor into them, and a lifecycle state."""

    items: List[QuizItem]
    cursor: int = 0
    state: SessionState = SessionState.ACTIVE

    @property
    def length(self) -> int:
        return len(self.items)

    @property
    def remaining(self) -> int:
        return self.length - self.cursor

    @property
    def is_fresh(self) -> bool:
        return self.state is SessionState.ACTIVE and self.cursor == 0

    @property
    def is_exhausted(self) -> bool:
        return self.cursor >= self.length

    @property
    def is_last_prompt(self) -> bool:
        """True while the active item is the final one.

        Callers use this to offer a "finish" action instead of "next".
        """
        return (
            self.state is SessionState.ACTIVE
            and self.cursor == self.length - 1
        )

    @property
    def completion_ratio(self) -> float:
        if self.state is SessionState.COMPLETED:
            return 1.0
        return self.cursor / self.length

    def correct_count(self) -> int:
        return sum(1 for item in self.items if item.correct)


def start_session(entries: Iterable[VocabularyEntry]) -> QuizSession:
    """Build a session over ``entries`` in the given order."""

    items = [QuizItem(entry) for entry in entries]
    if not items:
        raise EmptyWordSetError()
    session = QuizSession(items=items)
    logger.info(
        "Quiz session started",
        extra={"event": "quiz_started", "words": session.length},
    )
    return session


def current_prompt(session: QuizSession) -> VocabularyEntry:
    """Return the entry awaiting an answer."""

    if session.state is not SessionState.ACTIVE:
        raise NoActivePromptError(
            f"Session is {session.state.value}; no prompt is active"
        )
    if session.is_exhausted:
        raise NoActivePromptError("All words in the session have been answered")
    return session.items[session.cursor].entry


def submit_answer(
    session: QuizSession,
    answer: str,
    *,
    index: Optional[int] = None,
) -> GradingOutcome:
    """Grade ``answer`` against the active item and advance the cursor.

    ``index`` optionally names the item the caller is answering; it must be
    the active one. Grading is an exact, case-sensitive comparison.
    """

    if session.state.is_terminal:
        raise InvalidSessionStateError(
            f"Cannot answer in a {session.state.value} session"
        )
    if index is not None and index < session.cursor:
        raise AlreadyAnsweredError(f"Item {index} has already been answered")
    if index is not None and index > session.cursor:
        raise NoActivePromptError(
            f"Item {index} is not active (cursor is {session.cursor})"
        )
    if session.is_exhausted:
        raise NoActivePromptError("All words in the session have been answered")

    position = session.cursor
    item = session.items[position]
    if item.answered:  # pragma: no cover - cursor invariant
        raise AlreadyAnsweredError(f"Item {position} has already been answered")

    item.answer = answer
    item.correct = answer == item.entry.translated
    if item.correct:
        item.progress += 1
    session.cursor += 1

    logger.debug(
        "Graded answer",
        extra={
            "event": "answer_graded",
            "index": position,
            "correct": item.correct,
        },
    )
    return GradingOutcome(
        index=position,
        answer=answer,
        correct=item.correct,
        exhausted=session.is_exhausted,
    )


def finish_session(
    session: QuizSession, pending_answer: Optional[str] = None
) -> List[ProgressUpdate]:
    """Complete ``session`` and return the progress values to persist.

    When the cursor has not reached the end, the active item is graded with
    ``pending_answer`` first (an empty answer if none is given). Items past
    it are left unanswered and keep their progress.
    """

    if session.state.is_terminal:
        raise InvalidSessionStateError(
            f"Cannot finish a {session.state.value} session"
        )
    if not session.is_exhausted:
        submit_answer(session, pending_answer or "")

    session.state = SessionState.COMPLETED
    updates = [
        ProgressUpdate(item.entry, item.progress) for item in session.items
    ]
    logger.info(
        "Quiz session completed",
        extra={
            "event": "quiz_completed",
            "words": session.length,
            "answered": session.cursor,
            "correct": session.correct_count(),
        },
    )
    return updates


def quit_session(session: QuizSession) -> None:
    """Abort ``session``; a no-op when it already ended."""

    if session.state.is_terminal:
        return
    session.state = SessionState.ABORTED
    logger.info(
        "Quiz session aborted",
        extra={"event": "quiz_aborted", "answered": session.cursor},
    )


def progress_summary(session: QuizSession) -> List[SummaryRow]:
    """Return (entry, answer, correct) rows for a completed session."""

    if session.state is not SessionState.COMPLETED:
        raise InvalidSessionStateError(
            "A summary is only available for completed sessions"
        )
    return [
        SummaryRow(item.entry, item.answer, bool(item.correct))
        for item in session.items
    ]
