"""Thin wrappers around PyGithub for the App and installation identities."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from github import Auth, Github
from github.GithubException import GithubException, UnknownObjectException

from tokenclone.errors import InstallationError, RepositoryAccessError, TokenExchangeError
from tokenclone.models import Installation, InstallationToken, RepoDetails, RepoRef

logger = logging.getLogger(__name__)

# Connection failures surface from PyGithub as requests exceptions (OSError subclasses)
API_ERRORS = (GithubException, OSError)


def _describe(error: Exception) -> str:
    if isinstance(error, GithubException):
        message = error.data.get("message") if isinstance(error.data, dict) else None
        return f"{error.status} {message or error.data}"
    return str(error)


def _parse_timestamp(raw: str | None) -> datetime | None:
    if not raw:
        return None
    return datetime.fromisoformat(raw.replace("Z", "+00:00"))


def _to_installation(data: dict[str, Any]) -> Installation:
    account = data.get("account") or {}
    return Installation(
        id=int(data["id"]),
        account=account.get("login", ""),
        target_type=data.get("target_type") or account.get("type", ""),
    )


class GitHubAppClient:
    """GitHub client authenticated as the App itself via a signed JWT.

    Usage:
        client = GitHubAppClient(jwt_token)
        installations = client.list_installations()
        token = client.create_installation_token(installations[0].id)
    """

    def __init__(self, jwt_token: str) -> None:
        self._gh = Github(auth=Auth.AppAuthToken(jwt_token))

    def list_installations(self) -> list[Installation]:
        try:
            _, data = self._gh.requester.requestJsonAndCheck(
                "GET", "/app/installations", parameters={"per_page": 100}
            )
        except API_ERRORS as e:
            raise InstallationError(f"Error fetching installations: {_describe(e)}") from e

        installations = [_to_installation(item) for item in data or []]
        logger.info(f"App has {len(installations)} installation(s)")
        return installations

    def create_installation_token(self, installation_id: int) -> InstallationToken:
        try:
            _, data = self._gh.requester.requestJsonAndCheck(
                "POST", f"/app/installations/{installation_id}/access_tokens"
            )
        except API_ERRORS as e:
            raise TokenExchangeError(
                f"Error generating installation token for {installation_id}: {_describe(e)}"
            ) from e

        token = (data or {}).get("token")
        if not token:
            raise TokenExchangeError(
                f"Installation token response for {installation_id} did not include a token"
            )
        expires_at = _parse_timestamp(data.get("expires_at"))
        logger.info(f"Minted installation token for {installation_id} (expires {expires_at})")
        return InstallationToken(token=token, expires_at=expires_at)

    def close(self) -> None:
        self._gh.close()


def select_installation(
    installations: list[Installation], installation_id: int | None = None
) -> Installation:
    """Pick the installation to mint a token for.

    Without an explicit id the first installation GitHub returns is used,
    whichever account it belongs to.
    """
    if not installations:
        raise InstallationError("no installations found")

    if installation_id is None:
        chosen = installations[0]
        if len(installations) > 1:
            logger.warning(
                f"App has {len(installations)} installations, using the first "
                f"({chosen.id}, account {chosen.account or 'unknown'}); "
                "pass --installation_id to choose another"
            )
        return chosen

    for installation in installations:
        if installation.id == installation_id:
            return installation
    available = ", ".join(str(i.id) for i in installations)
    raise InstallationError(
        f"installation {installation_id} not found (available: {available})"
    )


class RepositoryClient:
    """GitHub client authenticated with an installation access token."""

    def __init__(self, token: str) -> None:
        self._gh = Github(auth=Auth.Token(token))

    def get_repository(self, ref: RepoRef) -> RepoDetails:
        try:
            repo = self._gh.get_repo(ref.full_name)
        except UnknownObjectException as e:
            logger.error(f"Repository {ref.full_name} not found")
            raise RepositoryAccessError(
                f"Repository {ref.full_name} not found or not accessible to the installation",
                not_found=True,
            ) from e
        except API_ERRORS as e:
            logger.error(f"Error accessing repository: {_describe(e)}")
            raise RepositoryAccessError(
                f"Error accessing repository {ref.full_name}: {_describe(e)}"
            ) from e

        return RepoDetails(
            name=repo.name,
            full_name=repo.full_name,
            clone_url=repo.clone_url,
            private=bool(repo.private),
            default_branch=repo.default_branch or "",
        )

    def close(self) -> None:
        self._gh.close()
