"""``binsmith source NAME``: resolve a binary and materialize it into the cache.

Two origins are reachable from the command line:

- ``--github OWNER/REPO --asset ARCHIVE``: a GitHub release asset.  The
  release tags become the available versions, so the cached or newest
  release is picked unless ``--version`` is given.  ``{target}`` in the
  asset name is replaced with the host target triple.
- ``--url URL``: a single file downloaded as-is.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console

from binsmith.config import config
from binsmith.core.platform import target
from binsmith.core.resolver import resolve_binary
from binsmith.models.binary import SourcedBinary
from binsmith.models.origins import ArchiveEntry, ReleaseArchiveOrigin, UrlOrigin
from binsmith.sourcing.errors import SourcingError
from binsmith.sourcing.fetchers import FetchOptions
from binsmith.sourcing.http import GitHubReleases
from binsmith.sourcing.status import ConsoleStatus

console = Console()


def _release_binary(
    name: str,
    github: str,
    asset: str,
    tag_format: str | None,
    version: str | None,
    contents: list[str],
    cache: Path,
) -> SourcedBinary:
    owner, _, repository = github.partition("/")
    if not owner or not repository:
        raise typer.BadParameter("expected OWNER/REPO", param_hint="--github")

    available: list[str] = []
    if version is None:
        releases = GitHubReleases(
            owner,
            repository,
            api_url=config.github_api_url,
            token=config.github_token,
        )
        available = asyncio.run(releases.tags())

    archive = asset.replace("{target}", target())
    entries = [ArchiveEntry(name=c) for c in (contents or [name])]

    def origin_for(tag: str | None) -> ReleaseArchiveOrigin:
        return ReleaseArchiveOrigin(
            owner=owner,
            repository=repository,
            tag=tag,
            tag_format=tag_format,
            archive=archive,
            contents=entries,
        )

    return resolve_binary(
        name, origin_for, cache, version=version, available=available
    )


def source_cmd(
    name: str = typer.Argument(..., help="The binary name."),
    github: str = typer.Option(
        None, "--github", help="GitHub repository as OWNER/REPO."
    ),
    asset: str = typer.Option(
        None, "--asset", help="Release asset file name; may contain {target}."
    ),
    tag_format: str = typer.Option(
        None, "--tag-format", help="Release tag template, e.g. 'polkadot-{tag}'."
    ),
    contents: list[str] = typer.Option(
        None, "--contents", help="Binary inside the asset. Repeat for each."
    ),
    url: str = typer.Option(None, "--url", help="Download a single file from URL."),
    version: str = typer.Option(
        None, "--version", "-v", help="Use this release tag verbatim."
    ),
    latest: bool = typer.Option(
        False, "--latest", help="Upgrade to the latest release when the cached one is stale."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Source again even if already cached."
    ),
    cache_dir: Path = typer.Option(
        None,
        "--cache",
        "-c",
        help="Cache directory. Defaults to BINSMITH_CACHE_DIR.",
    ),
) -> None:
    """Source NAME from a GitHub release or a URL into the cache."""
    cache = cache_dir or config.cache_dir

    try:
        if github:
            if not asset:
                raise typer.BadParameter("required with --github", param_hint="--asset")
            binary = _release_binary(
                name, github, asset, tag_format, version, contents or [], cache
            )
        elif url:
            binary = SourcedBinary(
                name=name, origin=UrlOrigin(url=url, name=name), cache=cache
            )
        else:
            console.print("[bold red]Pass --github with --asset, or --url.[/bold red]")
            raise typer.Exit(code=1)

        if binary.stale:
            if latest:
                console.print(
                    f"[cyan]Upgrading {name} from {binary.version} to {binary.latest}[/cyan]"
                )
                binary.use_latest()
            else:
                console.print(
                    f"[yellow]{name} {binary.latest} is available "
                    f"(using {binary.version}); pass --latest to upgrade.[/yellow]"
                )

        if binary.exists() and not force:
            console.print(f"[green]Already cached:[/green] {binary.path}")
            return

        asyncio.run(
            binary.source(
                config.release_profile,
                ConsoleStatus(prefix=f"{name}: "),
                config.verbose,
                options=FetchOptions.from_config(config),
            )
        )
    except SourcingError as exc:
        console.print(f"[bold red]Sourcing {name} failed:[/bold red] {exc}")
        raise typer.Exit(code=1)

    console.print(f"[bold green]Sourced[/bold green] {binary.path}")
