"""``binsmith resolve NAME``: show which version would be used and where it lives."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from binsmith.config import config
from binsmith.core.versions import resolve_version
from binsmith.models.origins import versioned_name

console = Console()


def resolve_cmd(
    name: str = typer.Argument(..., help="The binary name."),
    version: str = typer.Option(
        None,
        "--version",
        "-v",
        help="An explicitly requested version; always used verbatim.",
    ),
    available: list[str] = typer.Option(
        None,
        "--available",
        help="A version available upstream. Repeat for each version.",
    ),
    cache_dir: Path = typer.Option(
        None,
        "--cache",
        "-c",
        help="Cache directory. Defaults to BINSMITH_CACHE_DIR.",
    ),
) -> None:
    """Resolve the version of NAME and print its cache path.

    A requested version wins; otherwise the highest-ranked available
    version that is already cached, otherwise the highest-ranked one.
    """
    cache = cache_dir or config.cache_dir
    resolved = resolve_version(name, version, available or [], cache)
    if version is None and not available:
        console.print(
            "[yellow]No version requested or available; "
            "assuming an unversioned binary.[/yellow]"
        )

    path = cache / versioned_name(name, resolved)
    cached = "[green]yes[/green]" if path.exists() else "[yellow]no[/yellow]"
    console.print(
        Panel(
            "\n".join([
                f"[bold]Binary:[/bold]  {name}",
                f"[bold]Version:[/bold] {resolved or '-'}",
                f"[bold]Path:[/bold]    {path}",
                f"[bold]Cached:[/bold]  {cached}",
            ]),
            title="[bold]Resolution[/bold]",
            border_style="cyan",
            padding=(1, 2),
        )
    )
