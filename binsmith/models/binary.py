"""Binary identities: the unit callers resolve, query and source.

A binary is either already present on disk (``LocalBinary``) or obtained
from a declared origin into a cache directory (``SourcedBinary``).  The two
variants share one contract:

- ``exists()``, ``local``, ``name``, ``version``, ``latest``, ``path`` and
  ``stale`` are synchronous queries with no I/O beyond a file existence check
- ``use_latest()`` switches a release archive to its latest known tag
- ``source()`` materializes the binary and is the only coroutine

A sourced binary's ``path`` is ``{cache}/{name}`` for unversioned origins
and ``{cache}/{name}-{version}`` otherwise, which is also where the
fetchers put it.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from binsmith.models.origins import Origin, ReleaseArchiveOrigin, versioned_name
from binsmith.sourcing.errors import MissingBinaryError
from binsmith.sourcing.status import Status, default_status

if TYPE_CHECKING:
    from binsmith.sourcing.fetchers import FetchOptions


class LocalBinary(BaseModel):
    """A binary expected at ``path``.

    ``manifest`` optionally names a build recipe that can produce it.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["local"] = "local"
    name: str
    path: Path
    manifest: Path | None = None

    def exists(self) -> bool:
        return self.path.exists()

    @property
    def local(self) -> bool:
        return True

    @property
    def version(self) -> str | None:
        return None

    @property
    def latest(self) -> str | None:
        return None

    @property
    def stale(self) -> bool:
        return False

    def use_latest(self) -> None:
        pass

    async def source(
        self,
        release: bool = True,
        status: Status | None = None,
        verbose: bool = False,
        *,
        options: FetchOptions | None = None,
    ) -> None:
        """Build the binary from its manifest.

        Raises
        ------
        MissingBinaryError
            If there is no manifest to build from.
        """
        if self.manifest is None:
            raise MissingBinaryError(
                f"The '{self.path}' binary cannot be sourced automatically."
            )
        from binsmith.sourcing.builder import DEFAULT_BUILD_TOOL, build_local_package

        await build_local_package(
            self.manifest,
            self.name,
            release,
            status or default_status(),
            verbose,
            tool=options.build_tool if options else DEFAULT_BUILD_TOOL,
        )


class SourcedBinary(BaseModel):
    """A binary obtained from ``origin`` and stored under ``cache``.

    The only mutable identity: :meth:`use_latest` replaces ``origin`` with
    an updated copy.  The descriptor itself stays frozen.
    """

    model_config = ConfigDict(validate_assignment=True)

    kind: Literal["sourced"] = "sourced"
    name: str
    origin: Origin
    cache: Path

    def exists(self) -> bool:
        return self.path.exists()

    @property
    def local(self) -> bool:
        return False

    @property
    def version(self) -> str | None:
        return self.origin.version_reference()

    @property
    def latest(self) -> str | None:
        if isinstance(self.origin, ReleaseArchiveOrigin):
            return self.origin.latest
        return None

    @property
    def path(self) -> Path:
        return self.cache / versioned_name(self.name, self.version)

    @property
    def stale(self) -> bool:
        """Whether a newer release than the selected one is known.

        Only release archives track a latest release.  Without one, or
        without a selected tag, staleness is unknown and reported as
        ``False``.
        """
        origin = self.origin
        if not isinstance(origin, ReleaseArchiveOrigin):
            return False
        if origin.tag is None or origin.latest is None:
            return False
        return origin.tag != origin.latest

    def use_latest(self) -> None:
        """Select the latest known release, where one is known."""
        origin = self.origin
        if isinstance(origin, ReleaseArchiveOrigin) and origin.latest is not None:
            self.origin = origin.model_copy(update={"tag": origin.latest})

    async def source(
        self,
        release: bool = True,
        status: Status | None = None,
        verbose: bool = False,
        *,
        options: FetchOptions | None = None,
    ) -> None:
        """Materialize the binary into ``cache`` via the origin's fetcher.

        Fetcher errors propagate unchanged.
        """
        from binsmith.sourcing.fetchers import materialize

        await materialize(
            self.origin,
            self.name,
            self.cache,
            release,
            status or default_status(),
            verbose,
            options=options,
        )


Binary = Annotated[Union[LocalBinary, SourcedBinary], Field(discriminator="kind")]
