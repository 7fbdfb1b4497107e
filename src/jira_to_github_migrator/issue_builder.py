"""Build GitHub issues from Jira tickets."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Final

from .markup import translate, truncate
from .models import GithubIssue

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from .models import JiraTicket

logger: logging.Logger = logging.getLogger(__name__)

# Every migrated issue gets this label
IMPORT_LABEL: Final[str] = "jira"

SUBTASK_ISSUE_TYPE: Final[str] = "Sub-task"

ISSUE_TYPE_LABELS: Final[dict[str, str]] = {
    "Bug": "bug",
    "Unconfirmed Bug": "bug",
}


@dataclass(frozen=True)
class UserMapping:
    """Static lookup from Jira display names to GitHub handles.

    Only handles in ``assignable`` are assigned on creation. Everyone else
    has to be active in the repository first (GitHub spam prevention), so
    they get a comment asking them to self-assign instead.
    """

    handles: Mapping[str, str] = field(default_factory=dict)
    assignable: frozenset[str] = frozenset()

    @classmethod
    def from_file(cls, path: str | Path) -> UserMapping:
        """Load a mapping from JSON: ``{"handles": {name: handle}, "assignable": [handle, ...]}``."""
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        handles: dict[str, str] = {name: handle.strip() for name, handle in data.get("handles", {}).items()}
        assignable = frozenset(handle.strip() for handle in data.get("assignable", []))
        logger.debug(f"Loaded {len(handles)} user handles ({len(assignable)} assignable) from {path}")
        return cls(handles=handles, assignable=assignable)

    def handle_for(self, display_name: str | None) -> str:
        """Return the GitHub handle for a Jira display name, or "" if unknown."""
        if not display_name:
            return ""
        return self.handles.get(display_name, "")

    def is_assignable(self, handle: str) -> bool:
        return bool(handle) and handle in self.assignable


def label_for_issue_type(issue_type: str) -> str | None:
    return ISSUE_TYPE_LABELS.get(issue_type)


def build_issue_body(ticket: JiraTicket, *, jira_url: str) -> str:
    """Build the GitHub issue body: translated description plus migration footer.

    Args:
        ticket: Jira ticket to describe
        jira_url: Base URL of the Jira instance, used for the back link

    Returns:
        Complete issue body for GitHub
    """
    key = ticket.key
    body = truncate(translate(ticket.description or ""))
    body += (
        f"\n\nImported from Jira [{key}]({jira_url.rstrip('/')}/browse/{key}). "
        "Original Jira may contain additional context."
    )
    body += f"\nReported by: {ticket.reporter}."
    return body


def build_issue(ticket: JiraTicket, *, jira_url: str, user_mapping: UserMapping | None = None) -> GithubIssue:
    """Map a Jira ticket to the GitHub issue that replaces it."""
    users = user_mapping or UserMapping()

    labels = {IMPORT_LABEL}
    type_label = label_for_issue_type(ticket.issue_type)
    if type_label is not None:
        labels.add(type_label)

    assignee = users.handle_for(ticket.assignee)
    if ticket.assignee and not assignee:
        logger.debug(f"No GitHub handle for Jira user {ticket.assignee!r} ({ticket.key})")

    return GithubIssue(
        title=f"{ticket.key}: {ticket.summary}",
        description=build_issue_body(ticket, jira_url=jira_url),
        source_key=ticket.key,
        source_id=ticket.id,
        labels=labels,
        assignee=assignee,
        assignable=users.is_assignable(assignee),
    )


def tickets_to_issues(
    tickets: Iterable[JiraTicket],
    *,
    jira_url: str,
    user_mapping: UserMapping | None = None,
) -> list[GithubIssue]:
    """Map tickets to GitHub issues, in order, leaving out sub-tasks."""
    return [
        build_issue(ticket, jira_url=jira_url, user_mapping=user_mapping)
        for ticket in tickets
        if ticket.issue_type != SUBTASK_ISSUE_TYPE
    ]
