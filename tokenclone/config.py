"""Configuration loading for tokenclone.

Config sources (in priority order):
1. Command-line flags
2. Environment variables (TOKENCLONE_APP_ID, etc.)
3. .env file in current directory
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from tokenclone.errors import ConfigurationError

load_dotenv()

DEFAULT_LOG_LEVEL = "WARNING"

ENV_APP_ID = "TOKENCLONE_APP_ID"
ENV_PEM_PATH = "TOKENCLONE_PEM_PATH"
ENV_REPO_URL = "TOKENCLONE_REPO_URL"
ENV_CLONE_DIR = "TOKENCLONE_CLONE_DIR"
ENV_INSTALLATION_ID = "TOKENCLONE_INSTALLATION_ID"
ENV_LOG_LEVEL = "TOKENCLONE_LOG_LEVEL"


def parse_installation_id(raw: str | None) -> int | None:
    """Turn an optional installation id string into an int."""
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw.strip())
    except ValueError:
        raise ConfigurationError(f"Installation id must be an integer, got {raw!r}") from None


@dataclass
class Config:
    app_id: str = ""
    pem_path: str = ""
    repo_url: str = ""  # "https://github.com/owner/repo(.git)"
    clone_dir: str = ""
    installation_id: int | None = None  # None means "first installation"
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def load(cls, installation_id: int | None = None) -> Config:
        """Read config from the environment.

        An explicit ``installation_id`` replaces TOKENCLONE_INSTALLATION_ID,
        which is then not parsed at all.
        """
        if installation_id is None:
            installation_id = parse_installation_id(os.getenv(ENV_INSTALLATION_ID))
        return cls(
            app_id=os.getenv(ENV_APP_ID, ""),
            pem_path=os.getenv(ENV_PEM_PATH, ""),
            repo_url=os.getenv(ENV_REPO_URL, ""),
            clone_dir=os.getenv(ENV_CLONE_DIR, ""),
            installation_id=installation_id,
            log_level=os.getenv(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL),
        )

    @property
    def clone_path(self) -> Path:
        return Path(self.clone_dir)

    def validate(self) -> list[str]:
        """Return a list of missing config issues."""
        issues = []
        if not self.app_id:
            issues.append(f"GitHub App ID not set (--app_id or {ENV_APP_ID})")
        if not self.pem_path:
            issues.append(f"Private key path not set (--pem_path or {ENV_PEM_PATH})")
        if not self.repo_url:
            issues.append(f"Repository URL not set (--repo_url or {ENV_REPO_URL})")
        if not self.clone_dir:
            issues.append(f"Clone directory not set (--clone_dir or {ENV_CLONE_DIR})")
        return issues
