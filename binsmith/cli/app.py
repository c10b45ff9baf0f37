"""Main Typer application: imports and registers all CLI commands.

Entry point: ``binsmith`` (configured via pyproject.toml console scripts).
"""

from __future__ import annotations

import typer

from binsmith.cli.commands.cache_cmd import cache_cmd, clean_cmd
from binsmith.cli.commands.releases import releases_cmd
from binsmith.cli.commands.resolve import resolve_cmd
from binsmith.cli.commands.source import source_cmd
from binsmith.config import config
from binsmith.logs import configure_logging

app = typer.Typer(
    name="binsmith",
    help="Binsmith: resolve, cache and source the binaries your tools depend on.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        None,
        "--log-level",
        help="Log level (DEBUG, INFO, WARNING). Defaults to BINSMITH_LOG_LEVEL.",
    ),
) -> None:
    """Binsmith: resolve, cache and source the binaries your tools depend on."""
    configure_logging(log_level or config.log_level)


# Register subcommands
app.command(name="cache", help="List cached binaries.")(cache_cmd)
app.command(name="clean", help="Remove cached binaries.")(clean_cmd)
app.command(name="resolve", help="Show the version and cache path a binary resolves to.")(resolve_cmd)
app.command(name="releases", help="List GitHub release tags, most preferred first.")(releases_cmd)
app.command(name="source", help="Source a binary into the cache.")(source_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
