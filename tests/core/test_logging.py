from __future__ import annotations

import json
import logging
from pathlib import Path

from vocab_trainer.core import logging as core_logging


def _close(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_configure_logger_writes_json(tmp_path):
    logger, log_path = core_logging.configure_logger(
        "vocab_trainer.test",
        log_dir=tmp_path / "logs",
        level="INFO",
    )

    logger.debug("filtered out")
    logger.info(
        "graded", extra={"event": "unit", "items": [Path("a"), 1]}
    )
    try:
        raise ValueError("boom")
    except ValueError:
        logger.exception("with error", extra={"obj": object()})
    for handler in logger.handlers:
        handler.flush()

    lines = log_path.read_text(encoding="utf-8").strip().splitlines()
    assert log_path.name == "test.log"
    assert len(lines) == 2
    first = json.loads(lines[0])
    assert first["message"] == "graded"
    assert first["level"] == "INFO"
    assert first["extra"] == {"event": "unit", "items": ["a", 1]}
    last = json.loads(lines[1])
    assert "ValueError: boom" in last["exception"]
    assert last["extra"]["obj"].startswith("<object")

    _close(logger)


def test_configure_logger_is_idempotent(tmp_path):
    logger, first = core_logging.configure_logger(
        "vocab_trainer.idem", log_dir=tmp_path / "logs"
    )
    _, second = core_logging.configure_logger(
        "vocab_trainer.idem", log_dir=tmp_path / "other"
    )

    assert first == second
    assert len(logger.handlers) == 1

    _close(logger)


def test_verbose_toggles_console_handler(tmp_path):
    logger, _ = core_logging.configure_logger(
        "vocab_trainer.verbose", log_dir=tmp_path / "logs", verbose=True
    )
    assert any(
        isinstance(h, logging.StreamHandler)
        and getattr(h, "_vocab_trainer_console", False)
        for h in logger.handlers
    )

    core_logging.configure_logger(
        "vocab_trainer.verbose", log_dir=tmp_path / "logs", verbose=False
    )
    assert not any(
        getattr(h, "_vocab_trainer_console", False) for h in logger.handlers
    )

    _close(logger)


def test_unknown_level_falls_back_to_info():
    assert core_logging._coerce_level("nope") == logging.INFO
    assert core_logging._coerce_level("debug") == logging.DEBUG
