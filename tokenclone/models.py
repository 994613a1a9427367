"""Transient values passed between pipeline steps."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path


@dataclass
class Installation:
    id: int
    account: str = ""  # login of the org/user the App is installed on
    target_type: str = ""  # "Organization" | "User"


@dataclass
class InstallationToken:
    token: str
    expires_at: datetime | None = None

    def __repr__(self) -> str:
        return f"InstallationToken(token='***', expires_at={self.expires_at!r})"


@dataclass
class RepoRef:
    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass
class RepoDetails:
    name: str
    full_name: str
    clone_url: str
    private: bool = False
    default_branch: str = ""


@dataclass
class CloneResult:
    installation: Installation
    repository: RepoDetails
    path: Path
