"""Command line entry point for vocab-trainer."""

from __future__ import annotations

import argparse
import logging
import os
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.progress_bar import ProgressBar
from rich.table import Table
from rich.text import Text

from .access import AccessGate
from .config import (
    CONFIG_FILENAME,
    AppConfig,
    ConfigError,
    default_config,
    load_config,
    resolve_config_path,
    write_template,
)
from .core import (
    WorkspaceError,
    WorkspaceLayout,
    configure_logger,
    ensure_workspace,
)
from .quiz.runner import InputProvider, run_quiz
from .words import (
    PROGRESS_SCALE,
    JsonlWordStore,
    VocabularyEntry,
    WordNotFoundError,
    WordStore,
    WordStoreError,
    commit_progress,
    progress_ratio,
)

USER_ENV = "VOCAB_TRAINER_USER"
LOGGER_NAME = "vocab_trainer"

logger = logging.getLogger(__name__)


@dataclass
class CommandContext:
    console: Console
    layout: WorkspaceLayout
    config: AppConfig
    store: WordStore
    gate: AccessGate
    user: Optional[str]
    input_provider: InputProvider


def _cmd_init(args: argparse.Namespace, ctx: CommandContext) -> int:
    path = ctx.layout.path_for("config") / CONFIG_FILENAME
    try:
        write_template(path, overwrite=bool(args.force))
    except ConfigError as exc:
        ctx.console.print(f"[yellow]{escape(str(exc))}[/]")
        return 0
    ctx.console.print(f"Created config template {escape(str(path))}")
    return 0


def _cmd_home(args: argparse.Namespace, ctx: CommandContext) -> int:
    words = ctx.store.find_by_owner(ctx.user or "")
    learned = sum(1 for w in words if w.progress >= PROGRESS_SCALE)
    average = (
        sum(progress_ratio(w) for w in words) / len(words) if words else 0.0
    )
    ctx.console.print(f"Signed in as [bold]{escape(ctx.user or '')}[/]")
    ctx.console.print(f"Words: {len(words)}  Learned: {learned}")
    ctx.console.print(f"Average progress: {average * 100:.0f}%")
    return 0


def _cmd_words_list(args: argparse.Namespace, ctx: CommandContext) -> int:
    words = ctx.store.find_by_owner(ctx.user or "")
    if not words:
        ctx.console.print("No words yet. Add one with 'vocab words add'.")
        return 0
    table = Table(title="List of your words")
    table.add_column("ID", style="dim")
    table.add_column("Original")
    table.add_column("Translated")
    table.add_column("Progress")
    for word in words:
        table.add_row(
            word.id or "",
            Text(word.original),
            Text(word.translated),
            ProgressBar(
                total=PROGRESS_SCALE,
                completed=min(word.progress, PROGRESS_SCALE),
                width=12,
            ),
        )
    ctx.console.print(table)
    return 0


def _cmd_words_add(args: argparse.Namespace, ctx: CommandContext) -> int:
    try:
        entry = VocabularyEntry(
            owner=ctx.user or "",
            original=args.original,
            translated=args.translated,
        )
    except ValueError as exc:
        ctx.console.print(f"[red]Invalid word: {escape(str(exc))}[/]")
        return 2
    saved = ctx.store.save(entry)
    logger.info(
        "Added word", extra={"event": "word_added", "word_id": saved.id}
    )
    ctx.console.print(
        escape(f"Added {saved.original} -> {saved.translated} ({saved.id})")
    )
    return 0


def _cmd_words_delete(args: argparse.Namespace, ctx: CommandContext) -> int:
    words = {w.id: w for w in ctx.store.find_by_owner(ctx.user or "")}
    target = words.get(args.word_id)
    if target is None:
        ctx.console.print(f"[red]Word not found: {escape(args.word_id)}[/]")
        return 1
    try:
        ctx.store.delete(target)
    except WordNotFoundError as exc:
        ctx.console.print(f"[red]{escape(str(exc))}[/]")
        return 1
    ctx.console.print(escape(f"Deleted {target.original}"))
    return 0


def _cmd_quiz(args: argparse.Namespace, ctx: CommandContext) -> int:
    words = ctx.store.find_by_owner(ctx.user or "")
    limit = int(args.limit or 0)
    if limit > 0:
        words = words[:limit]
    result = run_quiz(words, ctx.console, ctx.input_provider)
    if result.exit_action == "empty":
        return 1
    if result.exit_action != "finished":
        return 0
    try:
        commit_progress(ctx.store, result.updates)
    except WordStoreError as exc:
        logger.error(
            "Failed to save quiz progress",
            extra={"event": "quiz_save_failed"},
            exc_info=True,
        )
        ctx.console.print(
            f"[red]Failed to save progress: {escape(str(exc))}[/]"
        )
        return 1
    ctx.console.print("Progress saved.")
    return 0


Handler = Callable[[argparse.Namespace, CommandContext], int]

_VIEWS: Dict[str, str] = {
    "home": "home",
    "words": "wordList",
    "quiz": "quiz",
}


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="vocab",
        description="Practice your vocabulary with quizzes",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    p.add_argument("--config", help="Path to a vocab.toml file")
    p.add_argument(
        "--user",
        help=f"Signed-in user id (defaults to ${USER_ENV})",
    )
    p.add_argument("--verbose", action="store_true")
    sub = p.add_subparsers(dest="command", required=True)

    sp_init = sub.add_parser("init", help="Create workspace and config")
    sp_init.add_argument("--force", action="store_true")
    sp_init.set_defaults(handler=_cmd_init)

    sp_home = sub.add_parser("home", help="Show your learning overview")
    sp_home.set_defaults(handler=_cmd_home)

    sp_words = sub.add_parser("words", help="Manage your word list")
    words_sub = sp_words.add_subparsers(dest="action", required=True)
    sp_w_list = words_sub.add_parser("list", help="List your words")
    sp_w_list.set_defaults(handler=_cmd_words_list)
    sp_w_add = words_sub.add_parser("add", help="Add a word")
    sp_w_add.add_argument("original")
    sp_w_add.add_argument("translated")
    sp_w_add.set_defaults(handler=_cmd_words_add)
    sp_w_del = words_sub.add_parser("delete", help="Delete a word by id")
    sp_w_del.add_argument("word_id")
    sp_w_del.set_defaults(handler=_cmd_words_delete)

    sp_quiz = sub.add_parser("quiz", help="Start a quiz over your words")
    sp_quiz.add_argument(
        "--limit", type=int, default=0, help="Max words (0 = all)"
    )
    sp_quiz.set_defaults(handler=_cmd_quiz)
    return p


def _build_context(
    args: argparse.Namespace,
    console: Console,
    input_provider: Optional[InputProvider],
) -> CommandContext:
    layout = ensure_workspace()
    config_path = resolve_config_path(args.config, layout)
    config = load_config(config_path) if config_path else default_config()
    configure_logger(
        LOGGER_NAME,
        log_dir=layout.path_for("logs"),
        level=config.logging.level,
        verbose=bool(args.verbose or config.logging.verbose),
    )
    user = (args.user or os.environ.get(USER_ENV) or "").strip() or None
    return CommandContext(
        console=console,
        layout=layout,
        config=config,
        store=JsonlWordStore(config.words_path(layout)),
        gate=AccessGate(config.access),
        user=user,
        input_provider=input_provider or (lambda: console.input("> ")),
    )


def run(
    argv: Optional[Sequence[str]] = None,
    *,
    console: Optional[Console] = None,
    input_provider: Optional[InputProvider] = None,
) -> int:
    """Parse ``argv`` and execute the selected command, returning its code."""

    parser = build_arg_parser()
    args = parser.parse_args(argv)
    console = console or Console()
    try:
        ctx = _build_context(args, console, input_provider)
    except (ConfigError, WorkspaceError) as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/]")
        return 2

    view = _VIEWS.get(args.command)
    if view is not None and not ctx.gate.is_access_granted(view, ctx.user):
        console.print(
            "[red]Access denied.[/] Sign in with --user or "
            f"${USER_ENV} to open '{view}'."
        )
        return 2

    handler: Handler = args.handler
    try:
        return handler(args, ctx)
    except WordStoreError as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/]")
        return 1


def main(argv: Optional[Sequence[str]] = None) -> None:
    raise SystemExit(run(argv))
