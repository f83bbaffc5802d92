"""View access policy.

A view is allowed when it is public, or when a user is signed in and the view
only asks for authentication. Views listed under ``user_role`` or
``admin_role`` are always denied: role checks are not implemented yet, and
membership in those tables is recorded only so routing can name them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any, FrozenSet, Iterable, Mapping, Optional

logger = logging.getLogger(__name__)

VIEW_SUFFIX = "View"


class AccessConfigError(RuntimeError):
    """Raised when an access table is malformed."""


def _names(values: Iterable[str]) -> FrozenSet[str]:
    return frozenset(normalize_view_id(str(v)) for v in values)


def normalize_view_id(view_id: str) -> str:
    """Map ``"quizView"`` and ``"quiz"`` to the same view name."""

    return view_id.replace(VIEW_SUFFIX, "", 1)


@dataclass(frozen=True)
class AccessTable:
    permit_all: FrozenSet[str] = frozenset()
    authenticated_only: FrozenSet[str] = frozenset()
    user_role: FrozenSet[str] = frozenset()
    admin_role: FrozenSet[str] = frozenset()

    def __post_init__(self) -> None:
        seen: dict[str, str] = {}
        for f in fields(self):
            names = _names(getattr(self, f.name))
            object.__setattr__(self, f.name, names)
            for name in sorted(names):
                if name in seen:
                    raise AccessConfigError(
                        f"View '{name}' is listed in both "
                        f"'{seen[name]}' and '{f.name}'"
                    )
                seen[name] = f.name

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "AccessTable":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise AccessConfigError(
                f"Unknown access table keys: {', '.join(unknown)}"
            )
        values: dict[str, FrozenSet[str]] = {}
        for key, raw in data.items():
            if isinstance(raw, str) or not isinstance(raw, Iterable):
                raise AccessConfigError(
                    f"Access table '{key}' must be a list of view names"
                )
            values[key] = frozenset(raw)
        return cls(**values)


DEFAULT_ACCESS_TABLE = AccessTable(
    permit_all=frozenset({"login", "register"}),
    authenticated_only=frozenset({"home", "wordList", "quiz"}),
)


class AccessGate:
    """Decide whether a view may be shown for the current user."""

    def __init__(self, table: AccessTable = DEFAULT_ACCESS_TABLE) -> None:
        self.table = table

    def is_access_granted(self, view_id: str, user: Optional[object]) -> bool:
        view = normalize_view_id(view_id)
        if view in self.table.permit_all:
            return True
        if user is None:
            return self._deny(view, "not signed in")
        if view in self.table.authenticated_only:
            return True
        if view in self.table.user_role or view in self.table.admin_role:
            # TODO: grant role-tagged views once users carry roles.
            return self._deny(view, "role checks not implemented")
        return self._deny(view, "unknown view")

    @staticmethod
    def _deny(view: str, reason: str) -> bool:
        logger.debug(
            "Access denied",
            extra={"event": "access_denied", "view": view, "reason": reason},
        )
        return False
