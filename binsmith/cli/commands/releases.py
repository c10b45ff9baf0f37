"""``binsmith releases OWNER REPOSITORY``: list release tags in preference order."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from binsmith.config import config
from binsmith.sourcing.errors import DownloadError
from binsmith.sourcing.http import GitHubReleases

console = Console()


def releases_cmd(
    owner: str = typer.Argument(..., help="Repository owner."),
    repository: str = typer.Argument(..., help="Repository name."),
    prereleases: bool = typer.Option(
        False,
        "--prereleases",
        help="Include pre-releases.",
    ),
) -> None:
    """List the release tags of a GitHub repository, most preferred first."""
    github = GitHubReleases(
        owner,
        repository,
        api_url=config.github_api_url,
        token=config.github_token,
    )
    try:
        tags = asyncio.run(github.tags(include_prereleases=prereleases))
    except DownloadError as exc:
        console.print(f"[bold red]Release lookup failed:[/bold red] {exc}")
        raise typer.Exit(code=1)

    if not tags:
        console.print(f"[dim]No releases found for {owner}/{repository}.[/dim]")
        return

    table = Table(title=f"{owner}/{repository} releases")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Tag", style="cyan")
    for index, tag in enumerate(tags, start=1):
        label = f"{tag} [green](latest)[/green]" if index == 1 else tag
        table.add_row(str(index), label)
    console.print(table)
