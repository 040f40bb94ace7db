"""Tests for pathgen.logging."""

from __future__ import annotations

import io
import logging
from pathlib import Path

import pytest

from pathgen.logging import LEVEL_ENV, LOG_FILE_ENV, configure_logging, get_logger, resolve_level


@pytest.fixture(autouse=True)
def restore_package_logger(monkeypatch):
    monkeypatch.delenv(LEVEL_ENV, raising=False)
    monkeypatch.delenv(LOG_FILE_ENV, raising=False)
    logger = logging.getLogger("pathgen")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate


def test_get_logger_nests_under_package() -> None:
    assert get_logger().name == "pathgen"
    assert get_logger("generation").name == "pathgen.generation"


def test_repeated_configuration_replaces_handlers() -> None:
    stream = io.StringIO()
    configure_logging(stream=stream)
    logger = configure_logging(verbose=True, stream=stream)

    get_logger("orchestrator").debug("planning %s", "src")

    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG
    assert stream.getvalue() == "[pathgen] DEBUG planning src\n"


@pytest.mark.parametrize(
    ("env", "verbose", "quiet", "expected"),
    [
        (None, False, False, logging.INFO),
        (None, False, True, logging.WARNING),
        ("error", False, False, logging.ERROR),
        ("error", True, False, logging.DEBUG),
        ("chatty", False, False, logging.INFO),
    ],
)
def test_resolve_level(monkeypatch, env, verbose, quiet, expected) -> None:
    if env is not None:
        monkeypatch.setenv(LEVEL_ENV, env)

    assert resolve_level(verbose=verbose, quiet=quiet) == expected


def test_quiet_console_hides_info(tmp_path: Path) -> None:
    stream = io.StringIO()
    configure_logging(quiet=True, stream=stream)

    get_logger("generation").info("created a.txt")
    get_logger("generation").warning("fallback for b.txt")

    assert stream.getvalue() == "[pathgen] WARNING fallback for b.txt\n"


def test_log_file_from_environment(tmp_path: Path, monkeypatch) -> None:
    log_path = tmp_path / "pathgen.log"
    monkeypatch.setenv(LOG_FILE_ENV, str(log_path))

    logger = configure_logging(stream=io.StringIO())
    get_logger("provider").info("runner rebuilt")
    for handler in logger.handlers:
        handler.flush()

    assert len(logger.handlers) == 2
    assert "INFO pathgen.provider: runner rebuilt" in log_path.read_text(encoding="utf-8")
