"""Tests for mousecycle.utils.logging."""

from __future__ import annotations

import logging
import sys

import pytest

from mousecycle.utils.logging import ROOT_LOGGER_NAME, configure_logging, get_logger


@pytest.fixture
def clean_logger():
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    saved_handlers = logger.handlers[:]
    saved_level = logger.level
    yield logger
    logger.handlers[:] = saved_handlers
    logger.setLevel(saved_level)


def _stderr_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [
        h for h in logger.handlers
        if isinstance(h, logging.StreamHandler) and h.stream is sys.stderr
    ]


def test_get_logger_defaults_to_package_logger():
    assert get_logger().name == "mousecycle"
    assert get_logger("mousecycle.profile_widget.aggregator").parent.name in {
        "mousecycle",
        "mousecycle.profile_widget",
    }


def test_configure_logging_is_idempotent(clean_logger):
    configure_logging("DEBUG", force=True)
    configure_logging("DEBUG")
    assert len(_stderr_handlers(clean_logger)) == 1
    assert clean_logger.level == logging.DEBUG


def test_configure_logging_reads_env(clean_logger, monkeypatch):
    monkeypatch.setenv("MOUSECYCLE_LOG_LEVEL", "warning")
    configure_logging(force=True)
    assert clean_logger.level == logging.WARNING


def test_unknown_level_falls_back_to_info(clean_logger):
    configure_logging("chatty", force=True)
    assert clean_logger.level == logging.INFO


def test_configure_logging_leaves_root_alone(clean_logger):
    root_handlers = logging.getLogger().handlers[:]
    configure_logging("INFO", force=True)
    assert logging.getLogger().handlers == root_handlers
