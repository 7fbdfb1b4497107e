"""
Custom exception classes for the Jira to GitHub migration tool.
"""

from __future__ import annotations


class MigrationError(Exception):
    """Base exception for migration errors."""


class ConfigMissingError(MigrationError):
    """Raised when required configuration is missing or malformed."""

    def __init__(self, missing: list[str], message: str | None = None) -> None:
        self.missing: list[str] = missing
        super().__init__(message or f"Missing required environment variables: {', '.join(missing)}")


class JiraError(MigrationError):
    """Raised when a Jira REST call fails."""


class RetriesExhaustedError(MigrationError):
    """Raised when a GitHub write still fails after the configured number of attempts."""


class CrossLinkError(MigrationError):
    """Raised when the back-reference comment cannot be posted on the Jira ticket."""
