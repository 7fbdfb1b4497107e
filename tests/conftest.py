"""
Pytest configuration and shared fixtures.

No test talks to a real Jira or GitHub: clients and sessions are mocks, and
sleeping is replaced by a recording Mock.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from unittest.mock import Mock

import pytest

from jira_to_github_migrator.config import MigrationConfig
from jira_to_github_migrator.models import JiraTicket

if TYPE_CHECKING:
    from collections.abc import Callable

JIRA_URL = "https://example.atlassian.net"


@pytest.fixture
def config() -> MigrationConfig:
    return MigrationConfig(
        jira_url=JIRA_URL,
        jira_username="migrator@example.com",
        jira_password="secret",
        jira_project="PROJ",
        jira_label="Services",
        github_token="gh-token",
        github_repo="owner/repo",
    )


@pytest.fixture
def make_ticket() -> Callable[..., JiraTicket]:
    """Factory for JiraTicket objects with sensible defaults."""

    def _make(key: str = "PROJ-1", **overrides: Any) -> JiraTicket:
        fields: dict[str, Any] = {
            "key": key,
            "id": str(10000 + int(key.rsplit("-", 1)[-1])),
            "issue_type": "Task",
            "summary": f"Summary of {key}",
            "description": f"Description of {key}",
            "reporter": "Jane Reporter",
            "assignee": None,
        }
        fields.update(overrides)
        return JiraTicket(**fields)

    return _make


@pytest.fixture
def raw_ticket() -> Callable[..., dict[str, Any]]:
    """Factory for Jira REST search results (one entry of ``issues``)."""

    def _make(key: str = "PROJ-1", issue_type: str = "Task", assignee: str | None = None) -> dict[str, Any]:
        return {
            "id": str(10000 + int(key.rsplit("-", 1)[-1])),
            "key": key,
            "fields": {
                "summary": f"Summary of {key}",
                "description": f"Description of {key}",
                "issuetype": {"name": issue_type},
                "reporter": {"displayName": "Jane Reporter"},
                "assignee": {"displayName": assignee} if assignee else None,
            },
        }

    return _make


@pytest.fixture
def no_sleep() -> Mock:
    return Mock()
