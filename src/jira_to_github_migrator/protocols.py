"""Protocols defining the contracts the migrator depends on.

The migrator keeps track of what it already migrated through a
MigrationLedger: FileLedger on disk, InMemoryLedger in tests.
"""

from __future__ import annotations

from typing import Protocol


class MigrationLedger(Protocol):
    """Record of Jira keys already migrated to one GitHub repository.

    Keys are only ever appended. A key is appended after its GitHub issue was
    created, so re-running a migration skips every ticket that made it.
    """

    def __contains__(self, key: object) -> bool:
        """Return True if the Jira key was already migrated."""
        ...

    def append(self, key: str) -> None:
        """Mark a Jira key as migrated."""
        ...

    def record_mapping(self, issue_number: int, key: str) -> None:
        """Log which GitHub issue number a Jira key became."""
        ...

    def annotate(self, note: str) -> None:
        """Add a free-form note to the mapping log (e.g. a failed cross-link)."""
        ...
