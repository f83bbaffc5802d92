from __future__ import annotations

import pytest

from vocab_trainer.access import (
    DEFAULT_ACCESS_TABLE,
    AccessConfigError,
    AccessGate,
    AccessTable,
    normalize_view_id,
)


@pytest.fixture
def gate() -> AccessGate:
    return AccessGate(
        AccessTable(
            permit_all=frozenset({"login", "register"}),
            authenticated_only=frozenset({"home"}),
            user_role=frozenset({"profile"}),
            admin_role=frozenset({"admin"}),
        )
    )


@pytest.mark.parametrize("view", ["login", "register", "loginView"])
@pytest.mark.parametrize("user", [None, "user-1"])
def test_public_views_always_allowed(gate, view, user) -> None:
    assert gate.is_access_granted(view, user) is True


def test_authenticated_view_requires_user(gate) -> None:
    assert gate.is_access_granted("home", None) is False
    assert gate.is_access_granted("home", "user-1") is True
    assert gate.is_access_granted("homeView", "user-1") is True


@pytest.mark.parametrize("view", ["profile", "admin"])
def test_role_views_are_denied_even_when_signed_in(gate, view) -> None:
    assert gate.is_access_granted(view, None) is False
    assert gate.is_access_granted(view, "user-1") is False


def test_unknown_view_is_denied(gate) -> None:
    assert gate.is_access_granted("settings", "user-1") is False


def test_normalize_strips_first_view_suffix() -> None:
    assert normalize_view_id("quizView") == "quiz"
    assert normalize_view_id("quiz") == "quiz"
    assert normalize_view_id("ViewView") == "View"


def test_table_rejects_overlapping_sets() -> None:
    with pytest.raises(AccessConfigError, match="home"):
        AccessTable(
            permit_all=frozenset({"home"}),
            authenticated_only=frozenset({"homeView"}),
        )


def test_from_mapping_builds_frozen_sets() -> None:
    table = AccessTable.from_mapping(
        {"permit_all": ["login"], "authenticated_only": ["quizView"]}
    )

    assert table.permit_all == frozenset({"login"})
    assert table.authenticated_only == frozenset({"quiz"})
    assert table.user_role == frozenset()


def test_from_mapping_rejects_unknown_keys_and_strings() -> None:
    with pytest.raises(AccessConfigError, match="Unknown"):
        AccessTable.from_mapping({"guests": []})
    with pytest.raises(AccessConfigError, match="list"):
        AccessTable.from_mapping({"permit_all": "login"})


def test_default_table_covers_app_views() -> None:
    gate = AccessGate()

    assert gate.table is DEFAULT_ACCESS_TABLE
    for view in ("home", "wordList", "quiz"):
        assert gate.is_access_granted(view, None) is False
        assert gate.is_access_granted(view, "user-1") is True
