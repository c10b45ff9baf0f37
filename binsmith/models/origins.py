"""Origin descriptors: where a non-local binary comes from.

Five kinds are supported, discriminated by ``kind``:

- ``git``                 build from a repository checkout
- ``release_archive``     download a GitHub release asset
- ``source_code_archive`` build from a GitHub source code archive
- ``archive``             download and unpack an archive from any URL
- ``url``                 download a single file from any URL

Each descriptor is frozen.  ``version_reference()`` returns the component
that makes a cached copy version-specific, or ``None`` for unversioned kinds.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

GITHUB_URL = "https://github.com"
TAG_PLACEHOLDER = "{tag}"


class OriginKind(str, Enum):
    """The closed set of origin kinds."""

    GIT = "git"
    RELEASE_ARCHIVE = "release_archive"
    SOURCE_CODE_ARCHIVE = "source_code_archive"
    ARCHIVE = "archive"
    URL = "url"


def versioned_name(name: str, version: str | None) -> str:
    """Return the cache file name for ``name`` at ``version``.

    >>> versioned_name("polkadot", None)
    'polkadot'
    >>> versioned_name("polkadot", "v1.12.0")
    'polkadot-v1.12.0'
    """
    return name if version is None else f"{name}-{version}"


class _OriginBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    def version_reference(self) -> str | None:
        return None


class GitOrigin(_OriginBase):
    """A repository checkout built with the local build tool.

    ``artifacts`` lists the built binaries copied into the cache.
    """

    kind: Literal[OriginKind.GIT] = OriginKind.GIT
    url: str
    reference: str | None = None  # branch, tag or commit
    manifest: Path | None = None  # relative to the checkout root
    package: str
    artifacts: list[str] = Field(default_factory=list)

    def version_reference(self) -> str | None:
        return self.reference


class ArchiveEntry(BaseModel):
    """A binary within a release archive and its optional location inside it."""

    model_config = ConfigDict(frozen=True)

    name: str
    path: Path | None = None

    @property
    def source_path(self) -> Path:
        """Location of the binary relative to the extracted archive root."""
        return self.path if self.path is not None else Path(self.name)


class ReleaseArchiveOrigin(_OriginBase):
    """An asset attached to a GitHub release.

    ``tag`` is the selected release; ``latest`` is the newest release known
    upstream, if it has been looked up.  ``tag_format`` maps a tag to the
    one used in the download URL, e.g. ``"polkadot-{tag}"``.
    """

    kind: Literal[OriginKind.RELEASE_ARCHIVE] = OriginKind.RELEASE_ARCHIVE
    owner: str
    repository: str
    tag: str | None = None
    tag_format: str | None = None
    archive: str
    contents: list[ArchiveEntry] = Field(default_factory=list)
    latest: str | None = None

    def version_reference(self) -> str | None:
        return self.tag

    def formatted_tag(self) -> str | None:
        if self.tag is None:
            return None
        if self.tag_format is None:
            return self.tag
        return self.tag_format.replace(TAG_PLACEHOLDER, self.tag)

    def download_url(self) -> str:
        base = f"{GITHUB_URL}/{self.owner}/{self.repository}/releases"
        tag = self.formatted_tag()
        if tag is None:
            return f"{base}/latest/download/{self.archive}"
        return f"{base}/download/{tag}/{self.archive}"


class SourceCodeArchiveOrigin(_OriginBase):
    """A GitHub source code archive built with the local build tool."""

    kind: Literal[OriginKind.SOURCE_CODE_ARCHIVE] = OriginKind.SOURCE_CODE_ARCHIVE
    owner: str
    repository: str
    reference: str | None = None
    manifest: Path | None = None
    package: str
    artifacts: list[str] = Field(default_factory=list)

    def version_reference(self) -> str | None:
        return self.reference

    def download_url(self) -> str:
        reference = self.reference or "HEAD"
        return f"{GITHUB_URL}/{self.owner}/{self.repository}/archive/{reference}.tar.gz"


class ArchiveOrigin(_OriginBase):
    """An archive at an arbitrary URL containing the listed binaries."""

    kind: Literal[OriginKind.ARCHIVE] = OriginKind.ARCHIVE
    url: str
    contents: list[str] = Field(default_factory=list)


class UrlOrigin(_OriginBase):
    """A single binary at an arbitrary URL."""

    kind: Literal[OriginKind.URL] = OriginKind.URL
    url: str
    name: str


Origin = Annotated[
    Union[
        GitOrigin,
        ReleaseArchiveOrigin,
        SourceCodeArchiveOrigin,
        ArchiveOrigin,
        UrlOrigin,
    ],
    Field(discriminator="kind"),
]

