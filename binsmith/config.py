"""Binsmith configuration: env-driven settings for the CLI and collaborators.

Centralized config using pydantic-settings.  Reads from a ``.env`` file and
``BINSMITH_*`` environment variables.  The resolution core never reads this
module; every core function takes its inputs as explicit parameters.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def default_cache_dir() -> Path:
    """Return ``$XDG_CACHE_HOME/binsmith``, or ``~/.cache/binsmith``."""
    base = os.environ.get("XDG_CACHE_HOME")
    root = Path(base) if base else Path.home() / ".cache"
    return root / "binsmith"


class BinsmithConfig(BaseSettings):
    """Binsmith settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export BINSMITH_CACHE_DIR=/data/binsmith
        export BINSMITH_LOG_LEVEL=DEBUG
        export BINSMITH_GITHUB_TOKEN=ghp_...

    Or via .env file::

        BINSMITH_RELEASE_PROFILE=false
        BINSMITH_BUILD_TOOL=/opt/rust/bin/cargo
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BINSMITH_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Cache
    cache_dir: Path = Field(default_factory=default_cache_dir)

    # Output
    log_level: str = "INFO"
    verbose: bool = False

    # Building
    release_profile: bool = True
    build_tool: str = "cargo"
    git_executable: str = "git"

    # Networking
    http_timeout_seconds: float = 300.0
    github_api_url: str = "https://api.github.com"
    github_token: str = ""  # optional, raises the GitHub API rate limit

    # Concurrent sourcing of the same cache entry
    lock_timeout_seconds: float = 600.0


# Module-level singleton: import as `from binsmith.config import config`
config = BinsmithConfig()
