"""Core shared helpers for vocab-trainer commands."""

from __future__ import annotations

from .config import TomlConfigError, load_toml, merge_defaults
from .logging import JsonLogFormatter, configure_logger
from .workspace import (
    WORKSPACE_ENV,
    WorkspaceError,
    WorkspaceLayout,
    ensure_workspace,
)

__all__ = [
    "configure_logger",
    "JsonLogFormatter",
    "ensure_workspace",
    "WorkspaceLayout",
    "WorkspaceError",
    "WORKSPACE_ENV",
    "TomlConfigError",
    "load_toml",
    "merge_defaults",
]
