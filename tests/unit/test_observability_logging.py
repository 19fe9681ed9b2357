"""Tests for structured logging configuration."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

import pytest

from scenelint.observability import (
    close_file_logging,
    configure_logging,
    get_logger,
)

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Leave logging at the default level with no file handler after each test."""
    yield
    close_file_logging()
    configure_logging(verbosity=0)


def test_configure_logging_sets_level_warning() -> None:
    """Default verbosity (0) sets WARNING level."""
    configure_logging(verbosity=0)

    root_logger = logging.getLogger()
    assert root_logger.level == logging.WARNING


def test_configure_logging_verbose_sets_debug_root() -> None:
    """verbosity=1 opens the root logger; the console handler filters at INFO."""
    configure_logging(verbosity=1)

    root_logger = logging.getLogger()
    assert root_logger.level == logging.DEBUG
    assert root_logger.handlers[0].level == logging.INFO


def test_configure_logging_very_verbose_sets_debug() -> None:
    """verbosity=2 sets DEBUG level."""
    configure_logging(verbosity=2)

    root_logger = logging.getLogger()
    assert root_logger.level == logging.DEBUG
    assert root_logger.handlers[0].level == logging.DEBUG


def test_get_logger_returns_bound_logger() -> None:
    """get_logger returns a structlog logger with expected methods."""
    logger = get_logger(__name__)

    assert hasattr(logger, "info")
    assert hasattr(logger, "debug")
    assert hasattr(logger, "warning")


def test_get_logger_auto_configures() -> None:
    """get_logger configures logging if not already done."""
    import scenelint.observability.logging as log_module

    log_module._configured = False

    logger = get_logger("test")

    assert log_module._configured is True
    assert logger is not None


def test_file_logging_writes_jsonl(tmp_path: Path) -> None:
    """Events are written to the log file as JSON lines with their context."""
    log_file = tmp_path / "logs" / "scenelint.jsonl"
    configure_logging(verbosity=0, log_file=log_file)

    get_logger("scenelint.test").info("scene_loaded", file="sc_1.json", references=2)
    close_file_logging()

    lines = log_file.read_text().strip().splitlines()
    entry = json.loads(lines[-1])
    assert entry["message"] == "scene_loaded"
    assert entry["level"] == "INFO"
    assert entry["file"] == "sc_1.json"
    assert entry["references"] == 2


def test_close_file_logging_releases_handler(tmp_path: Path) -> None:
    import scenelint.observability.logging as log_module

    configure_logging(log_file=tmp_path / "run.jsonl")
    assert log_module._file_handler is not None

    close_file_logging()

    assert log_module._file_handler is None
