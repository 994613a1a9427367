"""Repository URL helpers."""

from __future__ import annotations

from urllib.parse import quote, urlsplit, urlunsplit

from tokenclone.errors import InvalidRepoURLError
from tokenclone.models import RepoRef

GITHUB_PREFIX = "https://github.com/"

# GitHub ignores the username for token auth, but git needs a non-empty one
TOKEN_USERNAME = "x-access-token"


def parse_repo_url(url: str) -> RepoRef:
    """Extract owner and repository name from a github.com HTTPS URL.

    Both ``https://github.com/owner/repo`` and ``.../repo.git`` are accepted.
    Anything that does not leave exactly two path segments after the host
    is rejected.
    """
    parts = url.removeprefix(GITHUB_PREFIX).split("/")
    if len(parts) != 2:
        raise InvalidRepoURLError(f"invalid repository URL format: {url}")
    owner, name = parts[0], parts[1].removesuffix(".git")
    return RepoRef(owner=owner, name=name)


def authenticated_url(url: str, token: str, username: str = TOKEN_USERNAME) -> str:
    """Embed basic-auth credentials in an HTTPS clone URL."""
    parts = urlsplit(url)
    host = parts.hostname or ""
    if parts.port:
        host = f"{host}:{parts.port}"
    netloc = f"{quote(username, safe='')}:{quote(token, safe='')}@{host}"
    return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))


def redact(text: str, token: str) -> str:
    if not token:
        return text
    return text.replace(token, "***")
