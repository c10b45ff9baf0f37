"""Local build collaborator.

Builds a package from a Cargo manifest.  Used directly for local binaries
that declare a manifest, and by the ``git`` and ``source_code_archive``
fetchers after a checkout.
"""

from __future__ import annotations

import logging
from pathlib import Path

from binsmith.sourcing.errors import BuildError
from binsmith.sourcing.process import run_command
from binsmith.sourcing.status import Status, default_status

logger = logging.getLogger(__name__)

DEFAULT_BUILD_TOOL = "cargo"


def profile_dir(release: bool) -> str:
    return "release" if release else "debug"


async def build_package(
    manifest: Path,
    package: str,
    *,
    release: bool = True,
    status: Status | None = None,
    verbose: bool = False,
    target_dir: Path | None = None,
    tool: str = DEFAULT_BUILD_TOOL,
) -> Path:
    """Build ``package`` from ``manifest`` and return the profile output directory.

    Parameters
    ----------
    manifest:
        Path to the ``Cargo.toml`` to build.
    package:
        The package within the manifest's workspace to build.
    release:
        Build with the optimized profile rather than the debug one.
    target_dir:
        Where build output goes.  Defaults to ``target/`` next to the manifest.

    Raises
    ------
    BuildError
        If the build tool is missing or exits unsuccessfully.
    """
    status = status or default_status()
    target = target_dir or manifest.parent / "target"
    args = [
        tool,
        "build",
        "--package",
        package,
        "--manifest-path",
        str(manifest),
        "--target-dir",
        str(target),
    ]
    if release:
        args.append("--release")

    status.update(f"Building {package}...")
    try:
        result = await run_command(
            args, cwd=manifest.parent, status=status, verbose=verbose
        )
    except FileNotFoundError as exc:
        raise BuildError(f"Build tool not found: {tool}") from exc
    if not result.ok:
        raise BuildError(
            f"Building {package} failed:\n{result.tail()}",
            returncode=result.returncode,
        )
    logger.info("Built %s (%s)", package, profile_dir(release))
    return target / profile_dir(release)


async def build_local_package(
    manifest: Path,
    name: str,
    release: bool = True,
    status: Status | None = None,
    verbose: bool = False,
    *,
    tool: str = DEFAULT_BUILD_TOOL,
) -> Path:
    """Build the local binary ``name`` from ``manifest``.

    The binary is left where the manifest's own conventions put it,
    ``target/{release|debug}/{name}`` next to the manifest.
    """
    output = await build_package(
        manifest,
        name,
        release=release,
        status=status,
        verbose=verbose,
        tool=tool,
    )
    return output / name
