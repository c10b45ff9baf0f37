"""Repository checkout via the ``git`` executable."""

from __future__ import annotations

import logging
from pathlib import Path

from binsmith.sourcing.errors import GitError
from binsmith.sourcing.process import CommandResult, run_command
from binsmith.sourcing.status import Status, default_status

logger = logging.getLogger(__name__)


async def _git(
    args: list[str],
    *,
    cwd: Path | None,
    git: str,
    status: Status,
    verbose: bool,
) -> CommandResult:
    try:
        result = await run_command(
            [git, *args], cwd=cwd, status=status, verbose=verbose
        )
    except FileNotFoundError as exc:
        raise GitError(f"git executable not found: {git}") from exc
    if not result.ok:
        raise GitError(f"git {args[0]} failed:\n{result.tail()}")
    return result


async def clone_repository(
    url: str,
    destination: Path,
    reference: str | None = None,
    *,
    git: str = "git",
    status: Status | None = None,
    verbose: bool = False,
) -> Path:
    """Check out ``url`` at ``reference`` (default branch when ``None``).

    Only the requested revision is fetched.  ``reference`` may be a branch,
    a tag or a full commit hash.

    Raises
    ------
    GitError
        If any git command fails.
    """
    status = status or default_status()
    destination.mkdir(parents=True, exist_ok=True)

    if reference is None:
        status.update(f"Cloning {url}...")
        await _git(
            ["clone", "--depth", "1", url, str(destination)],
            cwd=None, git=git, status=status, verbose=verbose,
        )
        return destination

    status.update(f"Cloning {url} at {reference}...")
    await _git(["init", "--quiet"], cwd=destination, git=git, status=status, verbose=verbose)
    await _git(
        ["remote", "add", "origin", url],
        cwd=destination, git=git, status=status, verbose=verbose,
    )
    await _git(
        ["fetch", "--depth", "1", "origin", reference],
        cwd=destination, git=git, status=status, verbose=verbose,
    )
    await _git(
        ["checkout", "--quiet", "FETCH_HEAD"],
        cwd=destination, git=git, status=status, verbose=verbose,
    )
    logger.debug("Checked out %s at %s into %s", url, reference, destination)
    return destination
