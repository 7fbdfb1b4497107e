"""
Configuration for the Jira to GitHub migration tool, read from environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from .exceptions import ConfigMissingError, MigrationError
from .github_utils import split_repo_path
from .jira_utils import DEFAULT_WINDOW_DAYS
from .ledger import DEFAULT_STATE_DIR

if TYPE_CHECKING:
    from collections.abc import Mapping

REQUIRED_ENV_VARS: Final[tuple[str, ...]] = (
    "JIRA_URL",
    "JIRA_USERNAME",
    "JIRA_PASSWORD",
    "JIRA_PROJECT",
    "JIRA_LABEL",
    "GITHUB_TOKEN",
    "GITHUB_REPO",
)


@dataclass(frozen=True)
class MigrationConfig:
    """Everything a migration run needs to know."""

    jira_url: str
    jira_username: str
    jira_password: str
    jira_project: str
    jira_label: str
    github_token: str
    github_repo: str  # owner/repo
    state_dir: str = DEFAULT_STATE_DIR
    max_retries: int | None = None  # None retries GitHub writes forever
    window_days: int = DEFAULT_WINDOW_DAYS

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> MigrationConfig:
        """Read the configuration from environment variables.

        Raises:
            ConfigMissingError: If any required variable is unset or empty, or
                a variable has an invalid value
        """
        env = os.environ if environ is None else environ
        missing = [name for name in REQUIRED_ENV_VARS if not env.get(name, "").strip()]
        if missing:
            raise ConfigMissingError(missing)

        github_repo = env["GITHUB_REPO"].strip()
        try:
            split_repo_path(github_repo)
        except MigrationError as e:
            raise ConfigMissingError(["GITHUB_REPO"], str(e)) from e

        return cls(
            jira_url=env["JIRA_URL"].strip().rstrip("/"),
            jira_username=env["JIRA_USERNAME"],
            jira_password=env["JIRA_PASSWORD"],
            jira_project=env["JIRA_PROJECT"].strip(),
            jira_label=env["JIRA_LABEL"].strip(),
            github_token=env["GITHUB_TOKEN"].strip(),
            github_repo=github_repo,
            state_dir=env.get("MIGRATION_STATE_DIR") or DEFAULT_STATE_DIR,
            max_retries=_optional_int(env, "MIGRATION_MAX_RETRIES"),
            window_days=_optional_int(env, "JIRA_WINDOW_DAYS") or DEFAULT_WINDOW_DAYS,
        )


def _optional_int(env: Mapping[str, str], name: str) -> int | None:
    value = env.get(name, "").strip()
    if not value:
        return None
    try:
        number = int(value)
    except ValueError as e:
        raise ConfigMissingError([name], f"{name} must be an integer, got {value!r}") from e
    if number < 1:
        raise ConfigMissingError([name], f"{name} must be at least 1, got {number}")
    return number
