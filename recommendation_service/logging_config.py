"""
Logging Configuration Module

This module provides thread-safe logging configuration for the recommendation
service. Web handlers may rank for many users at once, so records are routed
through a queue and written by a single listener.
"""

import logging
import logging.handlers
import sys
from queue import Queue
from typing import Optional

PACKAGE_LOGGER = "recommendation_service"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"


class ThreadSafeLoggingConfig:
    """Thread-safe logging configuration with queue-based logging."""

    def __init__(self):
        self._log_listener: Optional[logging.handlers.QueueListener] = None
        self._log_queue: Optional[Queue] = None
        self._queue_handler: Optional[logging.handlers.QueueHandler] = None

    @property
    def active(self) -> bool:
        return self._log_listener is not None

    def setup_logging(self, debug: bool = False, stream=None) -> None:
        """
        Configure queue-based logging for the package logger.

        Args:
            debug: Whether to enable debug logging (ranking summaries, clamped options)
            stream: Output stream, defaults to stdout
        """
        self.stop()

        self._log_queue = Queue()
        self._queue_handler = logging.handlers.QueueHandler(self._log_queue)

        console_handler = logging.StreamHandler(stream or sys.stdout)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))

        self._log_listener = logging.handlers.QueueListener(
            self._log_queue, console_handler, respect_handler_level=True
        )
        self._log_listener.start()

        package_logger = logging.getLogger(PACKAGE_LOGGER)
        package_logger.addHandler(self._queue_handler)
        package_logger.setLevel(logging.DEBUG if debug else logging.INFO)
        package_logger.propagate = False

    def stop(self) -> None:
        """Stop the logging listener and detach the queue handler."""
        if self._log_listener:
            self._log_listener.stop()
            self._log_listener = None
        if self._queue_handler:
            logging.getLogger(PACKAGE_LOGGER).removeHandler(self._queue_handler)
            self._queue_handler = None
        self._log_queue = None


# Global logging configuration instance
logging_config = ThreadSafeLoggingConfig()


def setup_logging(debug: bool = False, stream=None) -> None:
    """
    Setup thread-safe logging configuration.

    Args:
        debug: Whether to enable debug logging
        stream: Optional output stream
    """
    logging_config.setup_logging(debug, stream)


def stop_logging() -> None:
    """Stop the logging listener and cleanup."""
    logging_config.stop()


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the specified name.

    Args:
        name: Logger name

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)
