"""Logging collaborator used by the country lookup core.

The core never writes log records itself: it reports errors and lifecycle events
through a `LookupLogger`, so applications can plug in their own telemetry.
"""
import logging
from typing import Protocol

from country_lookup.logging_setup import get_logger


class LookupLogger(Protocol):
    """Capability interface for error reporting and tracing."""

    def log_error(self, context: str, error: BaseException) -> None:
        """Report an error raised in `context`."""
        ...

    def trace(self, message: str, category: str) -> None:
        """Report a notable lifecycle event."""
        ...


class StandardLookupLogger:
    """`LookupLogger` backed by the standard `logging` module."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger if logger is not None else get_logger('country_lookup')

    def log_error(self, context: str, error: BaseException) -> None:
        self._logger.error('[%s] %s: %s', context, type(error).__name__, error, exc_info=error)

    def trace(self, message: str, category: str) -> None:
        self._logger.info('[%s] %s', category, message)
