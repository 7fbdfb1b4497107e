"""
Jira to GitHub Migration Tool

Migrates unresolved Jira tickets into GitHub issues, translating Jira wiki
markup to Markdown and keeping a ledger of migrated tickets so re-runs only
create what is missing.
"""

from __future__ import annotations

from .cli import main
from .config import MigrationConfig
from .exceptions import ConfigMissingError, MigrationError
from .issue_builder import UserMapping, build_issue, tickets_to_issues
from .markup import translate, truncate
from .migrator import JiraToGithubMigrator
from .utils import setup_logging

# Package version
__version__ = "0.1.0"

__all__ = [
    "ConfigMissingError",
    "JiraToGithubMigrator",
    "MigrationConfig",
    "MigrationError",
    "UserMapping",
    "build_issue",
    "main",
    "setup_logging",
    "tickets_to_issues",
    "translate",
    "truncate",
]
