"""Tests for logging setup."""

import logging

import pytest

from sicp_eval.config.logging_config import LOG_FORMAT, get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)

def test_setup_logging_sets_level():
    setup_logging("DEBUG")
    assert logging.getLogger().level == logging.DEBUG

def test_setup_logging_unknown_level_falls_back_to_warning():
    setup_logging("CHATTY")
    assert logging.getLogger().level == logging.WARNING

def test_setup_logging_to_file(tmp_path):
    log_file = tmp_path / "logs" / "eval.log"
    setup_logging("INFO", str(log_file))
    get_logger("sicp_eval.test").info("hello from the test")
    for handler in logging.getLogger().handlers:
        handler.flush()
    content = log_file.read_text()
    assert "hello from the test" in content
    assert "sicp_eval.test - INFO" in content

def test_get_logger_returns_named_logger():
    assert get_logger("sicp_eval.x").name == "sicp_eval.x"
    assert "%(levelname)s" in LOG_FORMAT
