from __future__ import annotations

import logging

from github import Auth, Github, GithubException, UnknownObjectException
from github.Repository import Repository

from .exceptions import MigrationError

# Module-wide logger
logger: logging.Logger = logging.getLogger(__name__)


def get_client(token: str) -> Github:
    """Get a GitHub client using the token.

    PyGithub's own retrying is disabled; writes go through retry.call_with_backoff.
    """
    return Github(auth=Auth.Token(token), retry=None)


def split_repo_path(repo_path: str) -> tuple[str, str]:
    """Split "owner/repo" into its parts, validating the format."""
    parts = repo_path.strip().split("/")
    if len(parts) != 2:
        msg = f"Invalid GitHub repository path '{repo_path}'. Expected format: 'owner/repository'"
        raise MigrationError(msg)
    owner, repo_name = parts
    if not owner or not repo_name:
        msg = f"Invalid GitHub repository path '{repo_path}'. Both owner and repository name must be non-empty"
        raise MigrationError(msg)
    return owner, repo_name


def get_repo(client: Github, repo_path: str) -> Repository:
    """Get the target repository, which must already exist."""
    split_repo_path(repo_path)
    try:
        return client.get_repo(repo_path)
    except UnknownObjectException as e:
        msg = f"GitHub repository {repo_path} not found or not accessible"
        raise MigrationError(msg) from e
    except GithubException as e:
        msg = f"Error getting repository {repo_path}: {e}"
        raise MigrationError(msg) from e
