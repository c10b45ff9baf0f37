"""HTTP collaborators: file downloads and the GitHub releases API.

Both use ``httpx.AsyncClient``.  A client can be injected for connection
reuse or testing (``httpx.MockTransport``); otherwise one is created per
call and closed afterwards.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path

import httpx
from pydantic import BaseModel, ConfigDict

from binsmith.core.versions import sort_versions
from binsmith.sourcing.errors import DownloadError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 300.0
GITHUB_API_URL = "https://api.github.com"
USER_AGENT = "binsmith"
CHUNK_SIZE = 64 * 1024


@asynccontextmanager
async def _client_scope(
    client: httpx.AsyncClient | None, timeout: float
) -> AsyncIterator[httpx.AsyncClient]:
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(
        follow_redirects=True,
        timeout=timeout,
        headers={"User-Agent": USER_AGENT},
    ) as owned:
        yield owned


async def download_file(
    url: str,
    destination: Path,
    *,
    client: httpx.AsyncClient | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Path:
    """Stream ``url`` into ``destination``.

    Redirects are followed, which GitHub release downloads rely on.

    Raises
    ------
    DownloadError
        On any transport error or non-2xx response.
    """
    destination.parent.mkdir(parents=True, exist_ok=True)
    logger.debug("Downloading %s to %s", url, destination)
    try:
        async with _client_scope(client, timeout) as http:
            async with http.stream("GET", url, follow_redirects=True) as response:
                response.raise_for_status()
                with destination.open("wb") as fh:
                    async for chunk in response.aiter_bytes(CHUNK_SIZE):
                        fh.write(chunk)
    except httpx.HTTPStatusError as exc:
        raise DownloadError(
            f"Download of {url} failed with HTTP {exc.response.status_code}",
            url=url,
        ) from exc
    except httpx.HTTPError as exc:
        raise DownloadError(f"Download of {url} failed: {exc}", url=url) from exc
    return destination


# ---------------------------------------------------------------------------
# GitHub releases
# ---------------------------------------------------------------------------


class Release(BaseModel):
    """A GitHub release, reduced to the fields used for version selection."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    tag_name: str
    name: str | None = None
    prerelease: bool = False
    draft: bool = False
    published_at: datetime | None = None


class GitHubReleases:
    """Lists releases of a GitHub repository.

    The tags returned by :meth:`tags` are the ``available`` input of
    :func:`binsmith.core.versions.resolve_version`, and their head is the
    ``latest`` recorded on a release archive origin.

    Parameters
    ----------
    owner, repository:
        The repository to query.
    client:
        Optional client to reuse.
    api_url:
        Base URL of the GitHub API.
    token:
        Optional token sent as a bearer credential.
    """

    def __init__(
        self,
        owner: str,
        repository: str,
        *,
        client: httpx.AsyncClient | None = None,
        api_url: str = GITHUB_API_URL,
        token: str = "",
        timeout: float = 30.0,
    ) -> None:
        self.owner = owner
        self.repository = repository
        self._client = client
        self._api_url = api_url.rstrip("/")
        self._token = token
        self._timeout = timeout

    @property
    def releases_url(self) -> str:
        return f"{self._api_url}/repos/{self.owner}/{self.repository}/releases"

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": USER_AGENT,
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def releases(self) -> list[Release]:
        """Fetch the most recent page of releases, drafts excluded.

        Raises
        ------
        DownloadError
            If the API request fails.
        """
        url = self.releases_url
        try:
            async with _client_scope(self._client, self._timeout) as http:
                response = await http.get(
                    url, headers=self._headers(), params={"per_page": 100}
                )
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise DownloadError(
                f"Listing releases of {self.owner}/{self.repository} failed "
                f"with HTTP {exc.response.status_code}",
                url=url,
            ) from exc
        except httpx.HTTPError as exc:
            raise DownloadError(
                f"Listing releases of {self.owner}/{self.repository} failed: {exc}",
                url=url,
            ) from exc

        releases = [Release.model_validate(item) for item in payload]
        logger.debug(
            "Found %d releases for %s/%s", len(releases), self.owner, self.repository
        )
        return [r for r in releases if not r.draft]

    async def tags(self, *, include_prereleases: bool = False) -> list[str]:
        """Return release tags, highest-ranked first."""
        releases = await self.releases()
        return sort_versions(
            r.tag_name for r in releases if include_prereleases or not r.prerelease
        )
