"""CLI entry point for tokenclone."""

from __future__ import annotations

import logging

import typer
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler

from tokenclone.config import Config
from tokenclone.errors import RepositoryAccessError, TokenCloneError
from tokenclone.models import RepoDetails
from tokenclone.pipeline import run

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Clone a GitHub repository using GitHub App credentials.",
    add_completion=False,
)


def _configure_logging(level: str) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    # PyGithub and urllib3 are chatty at INFO
    logging.getLogger("github").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def _print_repo_details(repo: RepoDetails) -> None:
    rprint("[bold]Repository Details:[/bold]")
    rprint(f"Name: {repo.name}")
    rprint(f"Full Name: {repo.full_name}")
    rprint(f"Clone URL: {repo.clone_url}")


@app.command()
def clone(
    app_id: str = typer.Option(None, "--app_id", help="GitHub App ID"),
    pem_path: str = typer.Option(
        None, "--pem_path", help="Path to the GitHub App private key PEM file"
    ),
    repo_url: str = typer.Option(None, "--repo_url", help="URL of the repository to clone"),
    clone_dir: str = typer.Option(
        None, "--clone_dir", help="Directory to clone the repository into"
    ),
    installation_id: int = typer.Option(
        None,
        "--installation_id",
        help="Installation to use when the App is installed on several accounts "
        "(default: the first one GitHub returns)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log each step"),
    log_level: str = typer.Option(None, "--log-level", help="Logging level (e.g. DEBUG)"),
) -> None:
    """Clone a repository with a GitHub App installation token.

    Signs a JWT with the App's private key, exchanges it for an installation
    access token, checks the repository is reachable and clones it over HTTPS.
    Flags override TOKENCLONE_* environment variables and .env values.
    """
    try:
        config = Config.load(installation_id=installation_id)
    except TokenCloneError as e:
        rprint(f"[red]Config error: {e}[/red]")
        raise typer.Exit(1)

    if app_id:
        config.app_id = app_id
    if pem_path:
        config.pem_path = pem_path
    if repo_url:
        config.repo_url = repo_url
    if clone_dir:
        config.clone_dir = clone_dir
    if log_level:
        config.log_level = log_level
    elif verbose:
        config.log_level = "INFO"

    level = config.log_level.upper()
    if not isinstance(logging.getLevelName(level), int):
        rprint(f"[red]Config error: unknown log level {config.log_level}[/red]")
        raise typer.Exit(1)
    _configure_logging(level)

    issues = config.validate()
    if issues:
        for issue in issues:
            rprint(f"[red]Config error: {issue}[/red]")
        raise typer.Exit(1)

    try:
        result = run(config, on_repository=_print_repo_details)
    except RepositoryAccessError:
        # already logged by the repository client
        raise typer.Exit(1)
    except TokenCloneError as e:
        logger.error(str(e))
        raise typer.Exit(1)

    logger.info(f"Clone of {result.repository.full_name} is at {result.path}")
    rprint("[green]Repository cloned successfully[/green]")


if __name__ == "__main__":
    app()
