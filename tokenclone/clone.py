"""Clone a repository over HTTPS with an installation token."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from git import GitCommandError, Repo

from tokenclone.errors import CloneError
from tokenclone.github.urls import authenticated_url, redact

logger = logging.getLogger(__name__)

# Fail instead of hanging on a credential prompt when the token is rejected
GIT_ENV = {"GIT_TERMINAL_PROMPT": "0"}


def clone_repo(repo_url: str, clone_dir: str | Path, token: str) -> Path:
    """Clone ``repo_url`` into ``clone_dir`` using ``token`` as the password.

    The remote URL stored in the clone has no credentials in it.
    """
    dest = Path(clone_dir)
    logger.info(f"Cloning {repo_url} into {dest}")
    try:
        repo = Repo.clone_from(authenticated_url(repo_url, token), dest, env=GIT_ENV)
    except GitCommandError as e:
        raise CloneError(f"Error cloning repository: {redact(str(e), token)}") from None
    except OSError as e:
        raise CloneError(f"Error cloning repository into {dest}: {e}") from e

    try:
        repo.remotes.origin.set_url(repo_url)
    except GitCommandError as e:
        repo.close()
        # .git/config still holds the token, so the clone must not survive
        shutil.rmtree(dest, ignore_errors=True)
        raise CloneError(
            f"Error removing credentials from cloned remote: {redact(str(e), token)}"
        ) from None
    repo.close()

    logger.info(f"Cloned {repo_url} into {dest}")
    return dest
