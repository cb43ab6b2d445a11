"""Tests for logging setup."""

import logging

from common.logging_config import LOG_FORMAT, get_logger, setup_logging


def test_setup_logging_attaches_one_stdout_handler():
    logger = setup_logging('test-component', log_level='DEBUG')

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert logger.handlers[0].formatter._fmt == LOG_FORMAT
    assert logger.propagate is False


def test_setup_logging_again_only_changes_level():
    setup_logging('test-relevel', log_level='DEBUG')
    logger = setup_logging('test-relevel', log_level='WARNING')

    assert len(logger.handlers) == 1
    assert logger.level == logging.WARNING
    assert logger.handlers[0].level == logging.WARNING


def test_setup_logging_reads_env_level(monkeypatch):
    monkeypatch.setenv('LOG_LEVEL', 'error')

    logger = setup_logging('test-env-level')

    assert logger.level == logging.ERROR


def test_module_loggers_inherit_component_handler(capsys):
    setup_logging('test-tree', log_level='INFO')

    get_logger('test-tree.child').info("chunk written")

    assert "test-tree.child - INFO - chunk written" in capsys.readouterr().out
