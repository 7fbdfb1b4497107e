"""
Main migration class for Jira to GitHub migration.

Migration Flow
--------------
1. Validate API access to GitHub (user and target repository) and Jira.
2. Fetch unresolved, labelled Jira tickets in creation-date windows,
   oldest first.
3. Map tickets to GitHub issues, dropping sub-tasks and translating the
   descriptions from Jira markup to Markdown.
4. For each issue, one at a time:
   a. Skip it if the ledger already has its Jira key
   b. Create the GitHub issue (retried with exponential backoff)
   c. Record the issue number and the key in the ledger
   d. Ask unassignable users to self-assign, in a comment
   e. Cross-link: comment on the Jira ticket with the new issue's URL

Re-running against an unchanged ticket set creates nothing: every key is
already in the ledger.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeVar

import requests
from github import GithubException

from . import github_utils as ghu
from . import jira_utils as jiu
from .exceptions import CrossLinkError, JiraError, MigrationError, RetriesExhaustedError
from .issue_builder import SUBTASK_ISSUE_TYPE, UserMapping, tickets_to_issues
from .ledger import FileLedger
from .retry import call_with_backoff

if TYPE_CHECKING:
    from collections.abc import Callable

    import github.Issue
    import github.Repository
    from github import Github

    from .config import MigrationConfig
    from .models import GithubIssue, JiraTicket
    from .protocols import MigrationLedger

# Module-wide logger
logger: logging.Logger = logging.getLogger(__name__)

T = TypeVar("T")

CROSS_LINK_ATTEMPTS = 2
CROSS_LINK_FAILED_NOTE = "Previous line failed to be recorded in jira"


@dataclass
class MigrationStats:
    """Statistics collected during migration."""

    tickets_fetched: int = 0
    subtasks_skipped: int = 0
    already_migrated: int = 0
    issues_created: int = 0
    comments_created: int = 0
    cross_links_failed: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass
class MigrationResult:
    """Result of a migration run."""

    success: bool
    stats: MigrationStats
    number_map: dict[str, int]  # Jira key -> GitHub issue number
    dry_run: bool = False


class JiraToGithubMigrator:
    """Migrates Jira tickets into the issues of an existing GitHub repository."""

    def __init__(
        self,
        config: MigrationConfig,
        *,
        user_mapping: UserMapping | None = None,
        ledger: MigrationLedger | None = None,
        github_client: Github | None = None,
        jira_session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config: MigrationConfig = config
        self.user_mapping: UserMapping = user_mapping or UserMapping()
        if ledger is None:
            ledger = FileLedger(config.github_repo, config.state_dir)
        self.ledger: MigrationLedger = ledger

        self.github_client: Github = github_client or ghu.get_client(config.github_token)
        self.jira_session: requests.Session = jira_session or jiu.get_session(
            config.jira_username, config.jira_password
        )
        self._sleep: Callable[[float], None] = sleep
        self._github_repo: github.Repository.Repository | None = None

        logger.info(
            f"Initialized migrator for Jira {config.jira_project} ({config.jira_label}) -> {config.github_repo}"
        )

    @property
    def github_repo(self) -> github.Repository.Repository:
        if self._github_repo is None:
            msg = "GitHub repository not loaded yet. Call validate_api_access() first."
            raise MigrationError(msg)
        return self._github_repo

    @github_repo.setter
    def github_repo(self, value: github.Repository.Repository) -> None:
        self._github_repo = value

    def validate_api_access(self) -> None:
        """Validate GitHub and Jira API access and load the target repository."""
        try:
            login = self.github_client.get_user().login
            logger.info(f"GitHub API access validated as {login}")
        except GithubException as e:
            msg = f"GitHub API access failed: {e}"
            raise MigrationError(msg) from e

        self.github_repo = ghu.get_repo(self.github_client, self.config.github_repo)

        myself = jiu.get_myself(self.jira_session, self.config.jira_url)
        logger.info(f"Jira API access validated as {myself.get('displayName', self.config.jira_username)}")

    def fetch_tickets(self) -> list[JiraTicket]:
        return jiu.fetch_tickets(
            self.jira_session,
            self.config.jira_url,
            self.config.jira_project,
            self.config.jira_label,
            window_days=self.config.window_days,
        )

    def _with_backoff(self, operation: Callable[[], T], description: str) -> T:
        return call_with_backoff(operation, description, max_attempts=self.config.max_retries, sleep=self._sleep)

    def create_github_issue(self, issue: GithubIssue) -> github.Issue.Issue:
        """Create the GitHub issue, retrying until GitHub accepts it."""
        return self._with_backoff(
            lambda: self.github_repo.create_issue(
                title=issue.title,
                body=issue.description,
                labels=sorted(issue.labels),
                assignees=issue.assignees,
            ),
            f"create issue for {issue.source_key}",
        )

    def add_github_comment(self, github_issue: github.Issue.Issue, body: str) -> None:
        self._with_backoff(lambda: github_issue.create_comment(body), f"comment on issue #{github_issue.number}")

    def cross_link(self, issue: GithubIssue, github_issue: github.Issue.Issue) -> None:
        """Comment on the Jira ticket with the URL of the issue it was migrated to.

        Raises:
            CrossLinkError: If the comment could not be posted
        """
        body = f"This issue has been migrated to {github_issue.html_url}"
        last_error: JiraError | None = None
        for attempt in range(1, CROSS_LINK_ATTEMPTS + 1):
            try:
                jiu.add_comment(self.jira_session, self.config.jira_url, issue.source_key, body)
            except JiraError as e:
                logger.debug(f"Cross-link attempt {attempt} for {issue.source_key} failed: {e}")
                last_error = e
            else:
                return
        msg = f"Failed to record migration of {issue.source_key} to issue #{github_issue.number} in Jira"
        raise CrossLinkError(msg) from last_error

    def migrate_issue(self, issue: GithubIssue, stats: MigrationStats) -> int:
        """Create one issue on GitHub and record it. Returns the new issue number."""
        github_issue = self.create_github_issue(issue)
        stats.issues_created += 1
        print(f"Issue #{github_issue.number} maps to {issue.source_key}")

        self.ledger.record_mapping(github_issue.number, issue.source_key)
        self.ledger.append(issue.source_key)

        if issue.assignee and not issue.assignable:
            logger.info(f"Unable to assign {self.config.github_repo}#{github_issue.number} to (at){issue.assignee}")
            self.add_github_comment(
                github_issue,
                f"Unable to assign user (at){issue.assignee}. Please assign yourself. "
                "Due to GitHub's spam prevention system, you must be active in this repository "
                "before you can be assigned.",
            )
            stats.comments_created += 1

        try:
            self.cross_link(issue, github_issue)
        except CrossLinkError as e:
            logger.warning(str(e))
            self.ledger.annotate(CROSS_LINK_FAILED_NOTE)
            stats.cross_links_failed += 1

        return github_issue.number

    def migrate_issues(
        self, issues: list[GithubIssue], stats: MigrationStats, *, dry_run: bool = False
    ) -> dict[str, int]:
        """Migrate issues in order, skipping those already in the ledger."""
        number_map: dict[str, int] = {}
        for issue in issues:
            if issue.source_key in self.ledger:
                logger.debug(f"Skipping {issue.source_key}, already migrated")
                stats.already_migrated += 1
                continue

            if dry_run:
                print(f"Would create: {issue.title} (labels: {', '.join(sorted(issue.labels))})")
                continue

            try:
                number_map[issue.source_key] = self.migrate_issue(issue, stats)
            except RetriesExhaustedError as e:
                logger.exception(f"Giving up on {issue.source_key}")
                stats.errors.append(str(e))

        return number_map

    def migrate(self, *, dry_run: bool = False) -> MigrationResult:
        """Execute the complete migration process."""
        stats = MigrationStats()
        try:
            logger.info("Starting Jira to GitHub migration")
            self.validate_api_access()

            tickets = self.fetch_tickets()
            stats.tickets_fetched = len(tickets)
            stats.subtasks_skipped = sum(1 for t in tickets if t.issue_type == SUBTASK_ISSUE_TYPE)

            print("Exporting Jira tickets to GitHub issues")
            issues = tickets_to_issues(tickets, jira_url=self.config.jira_url, user_mapping=self.user_mapping)
            print(f"Found {len(issues)} issues to be created.")

            number_map = self.migrate_issues(issues, stats, dry_run=dry_run)
            logger.info("Migration completed")

        except (GithubException, requests.RequestException) as e:
            logger.exception("Migration failed")
            msg = f"Migration failed: {e}"
            raise MigrationError(msg) from e

        return MigrationResult(success=not stats.errors, stats=stats, number_map=number_map, dry_run=dry_run)
