"""
Tests for the queue-based logging setup.
"""

import io
import logging
import logging.handlers

import pytest

from recommendation_service.logging_config import (
    PACKAGE_LOGGER,
    ThreadSafeLoggingConfig,
    get_logger,
)


@pytest.fixture
def package_logger():
    logger = logging.getLogger(PACKAGE_LOGGER)
    level, propagate = logger.level, logger.propagate
    yield logger
    logger.setLevel(level)
    logger.propagate = propagate


def test_debug_records_reach_stream(package_logger):
    stream = io.StringIO()
    config = ThreadSafeLoggingConfig()
    config.setup_logging(debug=True, stream=stream)
    try:
        assert config.active
        get_logger("recommendation_service.recommendations.ranking").debug("ranked %d items", 3)
    finally:
        config.stop()

    output = stream.getvalue()
    assert "ranked 3 items" in output
    assert "DEBUG" in output
    assert not config.active


def test_info_level_hides_debug(package_logger):
    stream = io.StringIO()
    config = ThreadSafeLoggingConfig()
    config.setup_logging(debug=False, stream=stream)
    try:
        get_logger("recommendation_service.cache").debug("hidden")
        get_logger("recommendation_service.cache").info("visible")
    finally:
        config.stop()

    output = stream.getvalue()
    assert "visible" in output
    assert "hidden" not in output


def test_setup_twice_keeps_single_handler(package_logger):
    config = ThreadSafeLoggingConfig()
    config.setup_logging(stream=io.StringIO())
    config.setup_logging(stream=io.StringIO())
    try:
        queue_handlers = [
            h for h in package_logger.handlers if isinstance(h, logging.handlers.QueueHandler)
        ]
        assert len(queue_handlers) == 1
    finally:
        config.stop()

    assert not any(isinstance(h, logging.handlers.QueueHandler) for h in package_logger.handlers)
