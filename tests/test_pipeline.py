"""Tests for tokenclone.pipeline — GitHub and git are mocked."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from tokenclone.errors import (
    ConfigurationError,
    InstallationError,
    InvalidRepoURLError,
    PrivateKeyError,
    RepositoryAccessError,
)
from tokenclone.models import Installation
from tokenclone.pipeline import run


@pytest.fixture
def services(sample_token, sample_repo):
    """Patch every external call the pipeline makes."""
    with patch("tokenclone.pipeline.GitHubAppClient") as app_cls, patch(
        "tokenclone.pipeline.RepositoryClient"
    ) as repo_cls, patch("tokenclone.pipeline.clone_repo") as clone:
        app_client = app_cls.return_value
        app_client.list_installations.return_value = [
            Installation(id=987, account="acme", target_type="Organization"),
            Installation(id=654, account="octocat", target_type="User"),
        ]
        app_client.create_installation_token.return_value = sample_token
        repo_cls.return_value.get_repository.return_value = sample_repo
        clone.side_effect = lambda url, dest, token: Path(dest)
        yield MagicMock(app_cls=app_cls, app=app_client, repo_cls=repo_cls, clone=clone)


class TestRun:
    def test_full_run(self, config, services, sample_token, sample_repo):
        result = run(config)

        assert result.installation.id == 987
        assert result.repository == sample_repo
        assert result.path == Path(config.clone_dir)
        services.app.create_installation_token.assert_called_once_with(987)
        services.repo_cls.assert_called_once_with(sample_token.token)
        services.clone.assert_called_once_with(
            config.repo_url, Path(config.clone_dir), sample_token.token
        )

    def test_app_client_gets_signed_jwt(self, config, services):
        run(config)
        (jwt_token,) = services.app_cls.call_args.args
        assert jwt_token.count(".") == 2

    def test_clients_closed(self, config, services):
        run(config)
        services.app.close.assert_called_once()
        services.repo_cls.return_value.close.assert_called_once()

    def test_explicit_installation(self, config, services):
        config.installation_id = 654
        result = run(config)
        assert result.installation.account == "octocat"
        services.app.create_installation_token.assert_called_once_with(654)

    def test_repository_reported_before_clone(self, config, services, sample_repo):
        calls = []
        services.clone.side_effect = lambda *args: calls.append("clone") or Path(args[1])
        run(config, on_repository=lambda details: calls.append(details))
        assert calls == [sample_repo, "clone"]

    def test_missing_config_fails_before_network(self, config, services):
        config.repo_url = ""
        with pytest.raises(ConfigurationError, match="--repo_url"):
            run(config)
        services.app_cls.assert_not_called()
        services.clone.assert_not_called()

    def test_bad_key_fails_before_network(self, config, services, tmp_path):
        config.pem_path = str(tmp_path / "missing.pem")
        with pytest.raises(PrivateKeyError):
            run(config)
        services.app_cls.assert_not_called()

    def test_no_installations(self, config, services):
        services.app.list_installations.return_value = []
        with pytest.raises(InstallationError, match="no installations found"):
            run(config)
        services.app.create_installation_token.assert_not_called()
        services.app.close.assert_called_once()

    def test_invalid_url_skips_clone(self, config, services):
        config.repo_url = "https://github.com/acme"
        with pytest.raises(InvalidRepoURLError):
            run(config)
        services.clone.assert_not_called()

    def test_repo_access_error_skips_clone(self, config, services):
        services.repo_cls.return_value.get_repository.side_effect = RepositoryAccessError(
            "not found", not_found=True
        )
        with pytest.raises(RepositoryAccessError):
            run(config)
        services.clone.assert_not_called()
        services.repo_cls.return_value.close.assert_called_once()
