"""TOML helpers shared by vocab-trainer configuration code."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, MutableMapping

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError as exc:  # pragma: no cover
    raise RuntimeError("Python 3.11+ is required for tomllib support.") from exc

__all__ = [
    "TomlConfigError",
    "load_toml",
    "merge_defaults",
]


class TomlConfigError(RuntimeError):
    """Raised when a TOML document cannot be read or does not fit."""


def load_toml(path: Path) -> Mapping[str, Any]:
    """Parse the TOML file at ``path``."""

    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except FileNotFoundError as exc:
        raise TomlConfigError(f"Config file not found: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise TomlConfigError(f"Failed to parse config TOML: {exc}") from exc


def merge_defaults(
    base: MutableMapping[str, Any],
    override: Mapping[str, Any],
    *,
    path: str = "",
) -> None:
    """Overlay ``override`` onto ``base`` in place.

    Only keys already present in ``base`` are accepted, and a table in
    ``base`` must be overridden by a table.
    """

    for key, value in override.items():
        dotted = f"{path}{key}"
        if key not in base:
            raise TomlConfigError(f"Unknown configuration key '{dotted}'.")
        if isinstance(base[key], MutableMapping):
            if not isinstance(value, Mapping):
                raise TomlConfigError(
                    f"Expected table for '{dotted}', "
                    f"found {type(value).__name__}."
                )
            merge_defaults(base[key], value, path=f"{dotted}.")
            continue
        base[key] = value
