"""Rich-powered console loop driving a quiz session.

The loop owns no quiz state: it renders whatever the engine reports,
forwards each typed answer, and returns a ``QuizRunResult`` so the CLI can
decide whether anything needs persisting.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Literal, Optional, Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table
from rich.text import Text

from ..words.models import VocabularyEntry
from .engine import (
    ProgressUpdate,
    QuizSession,
    SummaryRow,
    current_prompt,
    finish_session,
    progress_summary,
    quit_session,
    start_session,
    submit_answer,
)
from .errors import EmptyWordSetError

InputProvider = Callable[[], str]
ExitAction = Literal["finished", "quit", "empty"]

QUIT_COMMANDS = frozenset({":q", ":quit"})
ESCAPE_PREFIX = "\\"
SUCCESS_STYLE = "green"
FAILURE_STYLE = "red"


@dataclass(frozen=True)
class QuizRunResult:
    exit_action: ExitAction
    updates: List[ProgressUpdate] = field(default_factory=list)
    summary: List[SummaryRow] = field(default_factory=list)
    session: Optional[QuizSession] = None

    @property
    def correct_answers(self) -> int:
        return sum(1 for row in self.summary if row.correct)


def run_quiz(
    entries: Sequence[VocabularyEntry],
    console: Console,
    input_provider: InputProvider,
) -> QuizRunResult:
    """Run one quiz over ``entries`` reading answers from ``input_provider``."""

    try:
        session = start_session(entries)
    except EmptyWordSetError as exc:
        console.print(
            Panel(str(exc), title="Quiz", border_style="yellow")
        )
        return QuizRunResult("empty")

    while True:
        _render_prompt(console, session)
        try:
            raw = input_provider()
        except (EOFError, KeyboardInterrupt, StopIteration):
            console.print("\n[bold yellow]Session interrupted.[/]")
            quit_session(session)
            return QuizRunResult("quit", session=session)

        if raw in QUIT_COMMANDS:
            console.print("\n[bold yellow]Quiz abandoned, nothing saved.[/]")
            quit_session(session)
            return QuizRunResult("quit", session=session)
        raw = _unescape_answer(raw)

        if session.is_last_prompt:
            updates = finish_session(session, raw)
            break
        outcome = submit_answer(session, raw)
        _render_feedback(console, outcome.correct)

    summary = progress_summary(session)
    result = QuizRunResult(
        "finished", updates=updates, summary=summary, session=session
    )
    _render_summary(console, result)
    return result


def _unescape_answer(raw: str) -> str:
    # "\:q" answers a literal ":q"
    if raw.startswith(ESCAPE_PREFIX + ":"):
        return raw[len(ESCAPE_PREFIX):]
    return raw


def _render_prompt(console: Console, session: QuizSession) -> None:
    entry = current_prompt(session)
    header = Text.assemble(
        (f"Word {session.cursor + 1}", "bold cyan"),
        (f" / {session.length}", "dim"),
    )
    console.print()
    console.rule(header)
    console.print(
        ProgressBar(
            total=session.length, completed=session.cursor, width=40
        )
    )
    console.print(Text(entry.original, style="bold"))
    action = "finish" if session.is_last_prompt else "next"
    console.print(
        Text(
            f"Type the translation and press Enter to {action} "
            "(:q to quit)",
            style="dim",
        )
    )


def _render_feedback(console: Console, correct: bool) -> None:
    if correct:
        console.print(Text("Correct.", style=SUCCESS_STYLE))
    else:
        console.print(Text("Incorrect.", style=FAILURE_STYLE))


def _render_summary(console: Console, result: QuizRunResult) -> None:
    console.print()
    console.rule(Text("Quiz Summary", style="bold magenta"))

    table = Table(box=box.SIMPLE, expand=False)
    table.add_column("#", justify="right")
    table.add_column("Original")
    table.add_column("Translated")
    table.add_column("Your answer")
    for idx, row in enumerate(result.summary, start=1):
        table.add_row(
            str(idx),
            Text(row.entry.original),
            Text(row.entry.translated),
            Text(row.answer if row.answer is not None else "-"),
            style=SUCCESS_STYLE if row.correct else FAILURE_STYLE,
        )
    console.print(table)
    console.print(
        f"Correct: {result.correct_answers}/{len(result.summary)}"
    )
