"""Data models for migration from Jira tickets to GitHub issues.

JiraTicket is the raw record as the Jira REST search API returns it, reduced
to the fields the migration needs. GithubIssue is the normalized issue the
migrator submits to GitHub.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class JiraTicket:
    """A Jira ticket as returned by the REST search API."""

    key: str
    id: str
    issue_type: str
    summary: str
    description: str | None = None
    reporter: str = ""
    assignee: str | None = None  # Display name

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> JiraTicket:
        """Build a ticket from one entry of the search response's ``issues`` list."""
        fields: dict[str, Any] = data["fields"]
        reporter: dict[str, Any] = fields.get("reporter") or {}
        assignee: dict[str, Any] = fields.get("assignee") or {}
        return cls(
            key=data["key"],
            id=str(data["id"]),
            issue_type=fields["issuetype"]["name"],
            summary=fields.get("summary") or "",
            description=fields.get("description"),
            reporter=reporter.get("displayName", ""),
            assignee=assignee.get("displayName"),
        )


@dataclass
class GithubIssue:
    """An issue ready to be created on GitHub.

    ``assignable`` is only ever true for a non-empty ``assignee`` found in the
    allow-list; GitHub silently drops (or rejects) assignees who can't be
    assigned in the repository.
    """

    title: str
    description: str
    source_key: str
    source_id: str = ""
    labels: set[str] = field(default_factory=set)
    assignee: str = ""
    assignable: bool = False

    @property
    def assignees(self) -> list[str]:
        """Assignees to send with the create request."""
        if self.assignee and self.assignable:
            return [self.assignee]
        return []
