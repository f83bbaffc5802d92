from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from vocab_trainer.quiz import finish_session, start_session, submit_answer
from vocab_trainer.words import (
    InMemoryWordStore,
    JsonlWordStore,
    VocabularyEntry,
    WordNotFoundError,
    WordStoreError,
    commit_progress,
    progress_ratio,
)


@pytest.fixture(params=["memory", "jsonl"])
def store(request, tmp_path: Path):
    if request.param == "memory":
        return InMemoryWordStore()
    return JsonlWordStore(tmp_path / "words" / "words.jsonl")


def test_entry_rejects_blank_text_and_negative_progress() -> None:
    with pytest.raises(ValueError):
        VocabularyEntry(owner="u", original="  ", translated="kot")
    with pytest.raises(ValueError):
        VocabularyEntry(owner="u", original="cat", translated="")
    with pytest.raises(ValueError):
        VocabularyEntry(owner="u", original="cat", translated="kot", progress=-1)


def test_progress_ratio_is_clamped() -> None:
    entry = VocabularyEntry(owner="u", original="cat", translated="kot")
    assert progress_ratio(entry) == 0.0
    assert progress_ratio(
        VocabularyEntry(owner="u", original="a", translated="b", progress=2)
    ) == pytest.approx(0.4)
    assert progress_ratio(
        VocabularyEntry(owner="u", original="a", translated="b", progress=9)
    ) == 1.0


def test_save_assigns_id_and_find_filters_by_owner(store) -> None:
    mine = store.save(VocabularyEntry(owner="me", original="dog", translated="pies"))
    store.save(VocabularyEntry(owner="you", original="cat", translated="kot"))
    second = store.save(
        VocabularyEntry(owner="me", original="cow", translated="krowa")
    )

    assert mine.id and second.id and mine.id != second.id
    assert [e.original for e in store.find_by_owner("me")] == ["dog", "cow"]
    assert store.find_by_owner("nobody") == []


def test_save_existing_id_replaces_in_place(store) -> None:
    first = store.save(VocabularyEntry(owner="me", original="dog", translated="pies"))
    store.save(VocabularyEntry(owner="me", original="cat", translated="kot"))

    store.save(VocabularyEntry(
        owner="me", original="dog", translated="pies", progress=2, id=first.id
    ))

    words = store.find_by_owner("me")
    assert [e.original for e in words] == ["dog", "cat"]
    assert words[0].progress == 2


def test_delete(store) -> None:
    saved = store.save(VocabularyEntry(owner="me", original="dog", translated="pies"))

    store.delete(saved)

    assert store.find_by_owner("me") == []
    with pytest.raises(WordNotFoundError):
        store.delete(saved)
    with pytest.raises(WordNotFoundError):
        store.delete(VocabularyEntry(owner="me", original="a", translated="b"))


def test_commit_progress_persists_finished_session(store) -> None:
    dog = store.save(VocabularyEntry(owner="me", original="dog", translated="pies"))
    cat = store.save(VocabularyEntry(owner="me", original="cat", translated="kot"))
    session = start_session(store.find_by_owner("me"))
    submit_answer(session, "pies")
    updates = finish_session(session, "pies")

    commit_progress(store, updates)

    stored = {e.id: e.progress for e in store.find_by_owner("me")}
    assert stored == {dog.id: 1, cat.id: 0}


def test_commit_progress_skips_words_deleted_mid_quiz(
    store, caplog, monkeypatch
) -> None:
    monkeypatch.setattr(logging.getLogger("vocab_trainer"), "propagate", True)
    dog = store.save(VocabularyEntry(owner="me", original="dog", translated="pies"))
    cat = store.save(VocabularyEntry(owner="me", original="cat", translated="kot"))
    session = start_session(store.find_by_owner("me"))
    submit_answer(session, "pies")
    store.delete(dog)
    updates = finish_session(session, "kot")

    with caplog.at_level("WARNING", logger="vocab_trainer.words.store"):
        saved = commit_progress(store, updates)

    assert [e.id for e in saved] == [cat.id]
    stored = {e.id: e.progress for e in store.find_by_owner("me")}
    assert stored == {cat.id: 1}
    assert "no longer stored" in caplog.text


def test_commit_progress_with_every_word_deleted(store) -> None:
    dog = store.save(VocabularyEntry(owner="me", original="dog", translated="pies"))
    session = start_session(store.find_by_owner("me"))
    store.delete(dog)
    updates = finish_session(session, "pies")

    assert commit_progress(store, updates) == []
    assert store.find_by_owner("me") == []


def test_jsonl_store_round_trips_file(tmp_path: Path) -> None:
    path = tmp_path / "words.jsonl"
    JsonlWordStore(path).save(
        VocabularyEntry(owner="me", original="żaba", translated="frog")
    )

    lines = path.read_text(encoding="utf-8").splitlines()
    assert json.loads(lines[0])["original"] == "żaba"
    assert JsonlWordStore(path).find_by_owner("me")[0].translated == "frog"


def test_jsonl_store_reports_corrupt_lines(tmp_path: Path) -> None:
    path = tmp_path / "words.jsonl"
    path.write_text('{"owner": "me", "original": "dog"}\n', encoding="utf-8")

    with pytest.raises(WordStoreError, match=":1"):
        JsonlWordStore(path).find_by_owner("me")


def test_jsonl_failed_write_keeps_previous_contents(tmp_path, monkeypatch):
    path = tmp_path / "words.jsonl"
    store = JsonlWordStore(path)
    store.save(VocabularyEntry(owner="me", original="dog", translated="pies"))
    before = path.read_text(encoding="utf-8")

    def _boom(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("vocab_trainer.words.store.os.replace", _boom)
    with pytest.raises(WordStoreError, match="disk full"):
        store.save(VocabularyEntry(owner="me", original="cat", translated="kot"))

    assert path.read_text(encoding="utf-8") == before
    assert [p.name for p in tmp_path.iterdir()] == ["words.jsonl"]
