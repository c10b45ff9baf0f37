"""``binsmith cache`` and ``binsmith clean``: inspect and prune the binary cache."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from binsmith.config import config
from binsmith.core.cache import list_cached, remove_cached

console = Console()


def _human_size(size: int) -> str:
    value = float(size)
    for unit in ("B", "KiB", "MiB", "GiB"):
        if value < 1024 or unit == "GiB":
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{size} B"


def cache_cmd(
    cache_dir: Path = typer.Option(
        None,
        "--cache",
        "-c",
        help="Cache directory. Defaults to BINSMITH_CACHE_DIR.",
    ),
) -> None:
    """List the binaries in the cache."""
    cache = cache_dir or config.cache_dir
    cached = list_cached(cache)
    if not cached:
        console.print(f"[dim]No cached binaries in {cache}.[/dim]")
        return

    table = Table(title=f"Cached binaries ({cache})")
    table.add_column("Binary", style="cyan")
    table.add_column("Size", justify="right")
    for item in cached:
        table.add_row(item.name, _human_size(item.size_bytes))
    console.print(table)


def clean_cmd(
    names: list[str] = typer.Argument(
        None,
        help=(
            "Binary names to remove, with every cached release, numeric or "
            "commit-hash version of each. Other binaries sharing the prefix, "
            "e.g. polkadot-parachain for polkadot, are kept."
        ),
    ),
    remove_all: bool = typer.Option(
        False,
        "--all",
        "-a",
        help="Remove every cached binary.",
    ),
    cache_dir: Path = typer.Option(
        None,
        "--cache",
        "-c",
        help="Cache directory. Defaults to BINSMITH_CACHE_DIR.",
    ),
) -> None:
    """Remove binaries from the cache."""
    if not names and not remove_all:
        console.print("[bold red]Name at least one binary, or pass --all.[/bold red]")
        raise typer.Exit(code=1)

    cache = cache_dir or config.cache_dir
    removed = remove_cached(cache, None if remove_all else names)
    if not removed:
        console.print("[dim]Nothing to remove.[/dim]")
        return
    for path in removed:
        console.print(f"[green]Removed[/green] {path.name}")
