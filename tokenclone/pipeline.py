"""The clone procedure: App JWT -> installation token -> repo check -> clone."""

from __future__ import annotations

import logging
from typing import Callable

from tokenclone.clone import clone_repo
from tokenclone.config import Config
from tokenclone.errors import ConfigurationError
from tokenclone.github.auth import generate_jwt, load_private_key
from tokenclone.github.client import GitHubAppClient, RepositoryClient, select_installation
from tokenclone.github.urls import parse_repo_url
from tokenclone.models import CloneResult, Installation, InstallationToken, RepoDetails

logger = logging.getLogger(__name__)


def mint_installation_token(config: Config) -> tuple[Installation, InstallationToken]:
    """Authenticate as the App and exchange the JWT for an installation token.

    Returns the selected installation and its token.
    """
    private_key = load_private_key(config.pem_path)
    jwt_token = generate_jwt(config.app_id, private_key)
    logger.info(f"Signed JWT for GitHub App {config.app_id}")

    app_client = GitHubAppClient(jwt_token)
    try:
        installation = select_installation(
            app_client.list_installations(), config.installation_id
        )
        logger.info(
            f"Using installation {installation.id} "
            f"({installation.target_type or 'account'} {installation.account or 'unknown'})"
        )
        token = app_client.create_installation_token(installation.id)
    finally:
        app_client.close()
    return installation, token


def check_repo_access(repo_url: str, token: InstallationToken) -> RepoDetails:
    ref = parse_repo_url(repo_url)
    repo_client = RepositoryClient(token.token)
    try:
        details = repo_client.get_repository(ref)
    finally:
        repo_client.close()
    logger.info(f"Installation token can read {details.full_name}")
    return details


def run(
    config: Config,
    on_repository: Callable[[RepoDetails], None] | None = None,
) -> CloneResult:
    """Run every step in order. The first failure aborts the run.

    ``on_repository`` is called with the repository metadata before cloning.
    """
    issues = config.validate()
    if issues:
        raise ConfigurationError("; ".join(issues))

    installation, token = mint_installation_token(config)
    details = check_repo_access(config.repo_url, token)
    if on_repository is not None:
        on_repository(details)

    path = clone_repo(config.repo_url, config.clone_path, token.token)
    return CloneResult(installation=installation, repository=details, path=path)
