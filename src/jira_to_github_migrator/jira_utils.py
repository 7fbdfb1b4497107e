"""Jira REST API access: ticket search in creation-date windows and comments."""

from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Final

import requests

from .exceptions import JiraError
from .models import JiraTicket

# Module-wide logger
logger: logging.Logger = logging.getLogger(__name__)

# Days between start and end of one search window
DEFAULT_WINDOW_DAYS: Final[int] = 90
# Jira caps a single search response; windows are sized to stay below it
MAX_RESULTS: Final[int] = 1000
# The last window reaches back far enough to cover any project's history
FINAL_WINDOW_DAYS: Final[int] = 365 * 50
_REQUEST_TIMEOUT: Final[int] = 30


def get_session(username: str, password: str) -> requests.Session:
    """Get a requests session authenticated against Jira with basic auth."""
    session = requests.Session()
    session.auth = (username, password)
    session.headers.update({"Accept": "application/json"})
    return session


def _api_url(jira_url: str, path: str) -> str:
    return f"{jira_url.rstrip('/')}/rest/api/2/{path}"


def format_date(day: dt.date) -> str:
    return day.strftime("%Y-%m-%d")


def build_jql(project: str, label: str, start: dt.date, end: dt.date) -> str:
    """Build the JQL for unresolved, labelled tickets created between start and end (inclusive)."""
    return (
        f'project = "{project}" AND labels = "{label}" AND resolution = Unresolved '
        f"AND created >= {format_date(start)} AND created <= {format_date(end)} ORDER BY updated DESC"
    )


def search_issues(session: requests.Session, jira_url: str, jql: str) -> list[dict[str, Any]]:
    """Run a JQL search and return the raw ``issues`` list."""
    try:
        response = session.get(
            _api_url(jira_url, "search"),
            params={"jql": jql, "maxResults": MAX_RESULTS},
            timeout=_REQUEST_TIMEOUT,
        )
        response.raise_for_status()
    except requests.RequestException as e:
        msg = f"Failed to fetch Jira issues: {e}"
        raise JiraError(msg) from e

    issues: list[dict[str, Any]] = response.json().get("issues", [])
    if len(issues) >= MAX_RESULTS:
        logger.warning(f"Jira search hit the {MAX_RESULTS} result cap, some tickets may be missing: {jql}")
    return issues


def fetch_tickets(
    session: requests.Session,
    jira_url: str,
    project: str,
    label: str,
    *,
    window_days: int = DEFAULT_WINDOW_DAYS,
    today: dt.date | None = None,
) -> list[JiraTicket]:
    """Fetch all matching tickets, oldest first.

    Walks back from today in windows of ``window_days`` until a window comes
    back empty, then fetches everything older than that in one final window.

    Args:
        session: Authenticated Jira session
        jira_url: Base URL of the Jira instance
        project: Jira project key
        label: Only tickets with this label are fetched
        window_days: Size of one search window in days
        today: Day the first window ends on (defaults to the current date)

    Returns:
        Tickets in creation-window order, oldest window first
    """
    # Tomorrow, so tickets created today fall inside "created <= end"
    end = (today or dt.date.today()) + dt.timedelta(days=1)
    start = end - dt.timedelta(days=window_days)
    raw_tickets: list[dict[str, Any]] = []

    while True:
        print(f"Getting Jira issues between {format_date(start)} and {format_date(end)}")
        issues = search_issues(session, jira_url, build_jql(project, label, start, end))
        if not issues:
            break
        raw_tickets.extend(issues)
        end -= dt.timedelta(days=window_days + 1)
        start -= dt.timedelta(days=window_days + 1)

    start -= dt.timedelta(days=FINAL_WINDOW_DAYS)
    print(f"Getting Jira issues between {format_date(start)} and {format_date(end)}")
    raw_tickets.extend(search_issues(session, jira_url, build_jql(project, label, start, end)))

    raw_tickets.reverse()
    logger.info(f"Fetched {len(raw_tickets)} Jira tickets from project {project} with label {label}")
    return [JiraTicket.from_json(raw) for raw in raw_tickets]


def add_comment(session: requests.Session, jira_url: str, issue_key: str, body: str) -> None:
    """Post a comment on a Jira ticket."""
    try:
        response = session.post(
            _api_url(jira_url, f"issue/{issue_key}/comment"),
            json={"body": body},
            timeout=_REQUEST_TIMEOUT,
        )
        response.raise_for_status()
    except requests.RequestException as e:
        msg = f"Failed to comment on Jira issue {issue_key}: {e}"
        raise JiraError(msg) from e


def get_myself(session: requests.Session, jira_url: str) -> dict[str, Any]:
    """Return the authenticated Jira user; used to validate credentials."""
    try:
        response = session.get(_api_url(jira_url, "myself"), timeout=_REQUEST_TIMEOUT)
        response.raise_for_status()
    except requests.RequestException as e:
        msg = f"Jira API access failed: {e}"
        raise JiraError(msg) from e
    return response.json()
