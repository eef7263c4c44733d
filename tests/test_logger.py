"""
Tests for logger setup.
"""

import logging

import pytest

from querykit.logger import setup_logger


@pytest.fixture
def logger_name(request):
    name = f"querykit.test.{request.node.name}"
    yield name
    logging.getLogger(name).handlers.clear()


def test_configures_stdout_handler(logger_name):
    logger = setup_logger(logger_name, level="DEBUG")
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert logger.propagate is False


def test_configures_only_once(logger_name):
    setup_logger(logger_name, level="DEBUG")
    logger = setup_logger(logger_name, level="ERROR")
    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG


def test_level_from_environment(logger_name, monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "warning")
    assert setup_logger(logger_name).level == logging.WARNING


def test_null_handler_does_not_count(logger_name):
    logging.getLogger(logger_name).addHandler(logging.NullHandler())
    logger = setup_logger(logger_name, level="INFO")
    assert any(isinstance(h, logging.StreamHandler) for h in logger.handlers)


def test_library_logs_reach_caplog(caplog):
    from querykit.sequences import has_duplicates

    with caplog.at_level(logging.DEBUG, logger="querykit"):
        has_duplicates([1, 2, 1])
    assert any(r.name == "querykit.sequences" for r in caplog.records)
