from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Iterator, List

import pytest

TESTS_DIR = Path(__file__).resolve().parent
ROOT = TESTS_DIR.parent
SRC = str(ROOT / "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from vocab_trainer.words import VocabularyEntry  # noqa: E402

OWNER = "user-1"


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch) -> Iterator[Path]:
    """Point the workspace at a tmp dir and clear user/config overrides."""

    home = tmp_path / "vocab-home"
    monkeypatch.setenv("VOCAB_TRAINER_HOME", str(home))
    monkeypatch.delenv("VOCAB_TRAINER_CONFIG", raising=False)
    monkeypatch.delenv("VOCAB_TRAINER_USER", raising=False)
    yield home


@pytest.fixture
def make_entries() -> Callable[..., List[VocabularyEntry]]:
    """Build entries from (original, translated) pairs with stable ids."""

    def _make(*pairs: tuple[str, str], progress: int = 0):
        return [
            VocabularyEntry(
                owner=OWNER,
                original=original,
                translated=translated,
                progress=progress,
                id=f"w{idx}",
            )
            for idx, (original, translated) in enumerate(pairs, start=1)
        ]

    return _make


@pytest.fixture
def scripted_input() -> Callable[[list[str]], Callable[[], str]]:
    """Return an input provider that replays ``commands`` then stops."""

    def _factory(commands: list[str]) -> Callable[[], str]:
        iterator = iter(commands)

        def _provider() -> str:
            return next(iterator)

        return _provider

    return _factory
