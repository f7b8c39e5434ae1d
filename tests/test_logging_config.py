"""Tests for logging configuration."""

import logging

import pytest

from kopy.core.logging_config import LOGGER_NAME, configure_logging, get_logger


@pytest.fixture
def clean_logger():
    logger = logging.getLogger(LOGGER_NAME)
    handlers, level = list(logger.handlers), logger.level
    yield logger
    logger.handlers = handlers
    logger.setLevel(level)


def test_get_logger_namespacing():
    assert get_logger().name == 'kopy'
    assert get_logger('cloning').name == 'kopy.cloning'


def test_configure_logging_adds_one_handler(clean_logger):
    clean_logger.handlers = []

    configure_logging(level=logging.DEBUG)
    logger = configure_logging(level=logging.INFO)

    assert logger is clean_logger
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1


def test_configure_logging_custom_handler(clean_logger):
    clean_logger.handlers = []
    handler = logging.NullHandler()

    configure_logging(handler=handler)

    assert clean_logger.handlers == [handler]


def test_cloner_debug_logging(cloner, jack, caplog):
    with caplog.at_level(logging.DEBUG, logger='kopy'):
        cloner.clone(jack, include='mateys', use_dictionary=True)

    assert "cloning Pirate" in caplog.text
    assert "cloned 2 members of mateys" in caplog.text
