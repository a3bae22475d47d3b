"""Reporting port used by the XML converter.

Parsing code never logs directly; it hands messages to an ``ErrorReporter``.
The default implementation forwards them to the standard logging module,
tests can inject a collecting reporter instead.
"""

import logging
from typing import Protocol

logger = logging.getLogger("wikiapi_core.parsing")


class ErrorReporter(Protocol):
    """Receives diagnostics at the point an error is detected."""

    def report(self, message: str) -> None: ...


class LoggingReporter:
    """Report errors through ``logging`` at ERROR level."""

    def __init__(self, log: logging.Logger | None = None):
        self._log = log or logger

    def report(self, message: str) -> None:
        self._log.error(message)


class CollectingReporter:
    """Keep reported messages in memory."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def report(self, message: str) -> None:
        self.messages.append(message)
