"""Status sinks that receive progress narration while sourcing.

All sinks implement the ``Status`` protocol: a single ``update(message)``
method accepting human-readable text.  Nothing is structured beyond that.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from rich.console import Console
from rich.text import Text

logger = logging.getLogger(__name__)


@runtime_checkable
class Status(Protocol):
    """Protocol for progress narration receivers."""

    def update(self, message: str) -> None:
        """Receive a progress message."""
        ...


class LoggingStatus:
    """Forwards messages to a logger at the given level."""

    def __init__(
        self, log: logging.Logger | None = None, level: int = logging.INFO
    ) -> None:
        self._log = log or logger
        self._level = level

    def update(self, message: str) -> None:
        self._log.log(self._level, message)


class ConsoleStatus:
    """Prints messages to a Rich console as dimmed text.

    Parameters
    ----------
    console:
        Console to print to.  A stderr console is created when omitted so
        narration never mixes with command output.
    prefix:
        Optional text placed before every message, e.g. the binary name.
    """

    def __init__(self, console: Console | None = None, prefix: str = "") -> None:
        self._console = console or Console(stderr=True)
        self._prefix = prefix

    def update(self, message: str) -> None:
        text = f"{self._prefix}{message}" if self._prefix else message
        self._console.print(Text(text, style="dim"))


class RecordingStatus:
    """Collects messages in memory, in order."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def update(self, message: str) -> None:
        self.messages.append(message)


def default_status() -> Status:
    """Sink used when the caller supplies none: narration goes to the debug log."""
    return LoggingStatus(level=logging.DEBUG)
