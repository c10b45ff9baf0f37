"""Logging setup for the ``binsmith`` command.

Library modules only create module loggers; handlers are installed here,
once, by the CLI entry point.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_HANDLER_NAME = "binsmith-rich"


def configure_logging(level: str | int = "INFO", console: Console | None = None) -> None:
    """Attach a Rich handler to the ``binsmith`` logger at ``level``.

    Calling again only updates the level.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    log = logging.getLogger("binsmith")
    log.setLevel(level)
    if any(h.get_name() == _HANDLER_NAME for h in log.handlers):
        return

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    handler.set_name(_HANDLER_NAME)
    log.addHandler(handler)
    log.propagate = False
