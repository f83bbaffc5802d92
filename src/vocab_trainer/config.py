"""Configuration loading for vocab-trainer.

Settings live in a small TOML document with ``[storage]``, ``[access]`` and
``[logging]`` tables. Missing keys fall back to the defaults below; unknown
keys are rejected so typos surface instead of being ignored.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .access import AccessConfigError, AccessTable
from .core.config import TomlConfigError, load_toml, merge_defaults
from .core.workspace import WorkspaceLayout

CONFIG_PATH_ENV = "VOCAB_TRAINER_CONFIG"
CONFIG_FILENAME = "vocab.toml"
WORDS_FILENAME = "words.jsonl"

_DEFAULTS: Dict[str, Any] = {
    "storage": {"words_file": ""},
    "access": {
        "permit_all": ["login", "register"],
        "authenticated_only": ["home", "wordList", "quiz"],
        "user_role": [],
        "admin_role": [],
    },
    "logging": {"level": "INFO", "verbose": False},
}


class ConfigError(RuntimeError):
    """Raised when configuration parsing or validation fails."""


@dataclass(frozen=True)
class StorageConfig:
    words_file: Optional[Path]


@dataclass(frozen=True)
class LoggingConfig:
    level: str
    verbose: bool


@dataclass(frozen=True)
class AppConfig:
    storage: StorageConfig
    access: AccessTable
    logging: LoggingConfig
    source: Optional[Path] = None

    def words_path(self, layout: WorkspaceLayout) -> Path:
        if self.storage.words_file is not None:
            return self.storage.words_file
        return layout.path_for("words") / WORDS_FILENAME


def _build(data: Mapping[str, Any], source: Optional[Path]) -> AppConfig:
    raw_words = str(data["storage"]["words_file"] or "").strip()
    level = data["logging"]["level"]
    if not isinstance(level, str) or not level.strip():
        raise ConfigError("logging.level must be a non-empty string")
    try:
        access = AccessTable.from_mapping(data["access"])
    except AccessConfigError as exc:
        raise ConfigError(str(exc)) from exc
    return AppConfig(
        storage=StorageConfig(
            words_file=Path(raw_words).expanduser() if raw_words else None
        ),
        access=access,
        logging=LoggingConfig(
            level=level.strip().upper(),
            verbose=bool(data["logging"]["verbose"]),
        ),
        source=source,
    )


def default_config() -> AppConfig:
    return _build(copy.deepcopy(_DEFAULTS), None)


def load_config(path: Path) -> AppConfig:
    """Load ``path`` and overlay it on the defaults."""

    data = copy.deepcopy(_DEFAULTS)
    try:
        merge_defaults(data, load_toml(path))
    except TomlConfigError as exc:
        raise ConfigError(str(exc)) from exc
    return _build(data, path)


def resolve_config_path(
    explicit: Optional[str],
    layout: WorkspaceLayout,
    *,
    env: Optional[Mapping[str, str]] = None,
) -> Optional[Path]:
    """Pick the config file to read, or ``None`` to use defaults.

    An explicit path or ``$VOCAB_TRAINER_CONFIG`` is returned even when
    missing so the caller reports it; the workspace file is optional.
    """

    if explicit:
        return Path(explicit).expanduser()
    env_map = os.environ if env is None else env
    from_env = (env_map.get(CONFIG_PATH_ENV) or "").strip()
    if from_env:
        return Path(from_env).expanduser()
    candidate = layout.path_for("config") / CONFIG_FILENAME
    return candidate if candidate.exists() else None


def read_template() -> str:
    resource = resources.files("vocab_trainer").joinpath(CONFIG_FILENAME)
    return resource.read_text(encoding="utf-8")


def write_template(path: Path, *, overwrite: bool = False) -> Path:
    """Write the packaged config template to ``path``."""

    if path.exists() and not overwrite:
        raise ConfigError(f"Config already exists: {path}")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(read_template(), encoding="utf-8")
    try:
        path.chmod(0o600)
    except PermissionError:  # pragma: no cover - depends on filesystem
        pass
    return path
