"""
Command-line interface for the Jira to GitHub migration tool.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys

from .config import MigrationConfig
from .exceptions import ConfigMissingError
from .issue_builder import UserMapping
from .migrator import JiraToGithubMigrator, MigrationResult
from .utils import setup_logging


def parse_arguments() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Migrate unresolved Jira tickets to GitHub issues",
        epilog=(
            "Required environment variables: JIRA_URL, JIRA_USERNAME, JIRA_PASSWORD, JIRA_PROJECT, "
            "JIRA_LABEL, GITHUB_TOKEN, GITHUB_REPO (owner/repo)."
        ),
    )

    _ = parser.add_argument(
        "--user-map",
        help='JSON file mapping Jira display names to GitHub handles: {"handles": {...}, "assignable": [...]}',
    )

    _ = parser.add_argument(
        "--state-dir", help="Directory for migration state (default: $MIGRATION_STATE_DIR or repo-state)"
    )

    _ = parser.add_argument(
        "--max-retries",
        type=int,
        help="Give up on a GitHub write after this many attempts (default: retry forever)",
    )

    _ = parser.add_argument("--window-days", type=int, help="Days per Jira search window (default: 90)")

    _ = parser.add_argument(
        "--dry-run", action="store_true", help="Fetch and translate tickets, but don't write anything"
    )

    _ = parser.add_argument(
        "--verbose", "-v", action="count", default=0, help="Show more output on the console (-v: info, -vv: debug)"
    )

    return parser.parse_args()


def _apply_overrides(config: MigrationConfig, args: argparse.Namespace) -> MigrationConfig:
    overrides: dict[str, object] = {}
    if args.state_dir:
        overrides["state_dir"] = args.state_dir
    if args.max_retries is not None:
        overrides["max_retries"] = args.max_retries
    if args.window_days is not None:
        overrides["window_days"] = args.window_days
    return dataclasses.replace(config, **overrides) if overrides else config


def _print_report(config: MigrationConfig, result: MigrationResult) -> None:
    stats = result.stats
    print()
    print("=" * 60)
    print(f"Jira {config.jira_project} ({config.jira_label}) -> GitHub {config.github_repo}")
    if result.dry_run:
        print("DRY RUN - nothing was written")
    print(f"Status: {'PASSED' if result.success else 'FAILED'}")
    print(f"Tickets fetched:       {stats.tickets_fetched}")
    print(f"Sub-tasks skipped:     {stats.subtasks_skipped}")
    print(f"Already migrated:      {stats.already_migrated}")
    print(f"Issues created:        {stats.issues_created}")
    print(f"Comments created:      {stats.comments_created}")
    print(f"Cross-links failed:    {stats.cross_links_failed}")
    if stats.errors:
        print("Errors:")
        for error in stats.errors:
            print(f"  - {error}")
    print("=" * 60)


def main() -> None:
    """Main entry point."""
    args = parse_arguments()

    verbosity: int = getattr(args, "verbose", 0)
    setup_logging(verbosity=verbosity)
    logger = logging.getLogger(__name__)

    try:
        config = _apply_overrides(MigrationConfig.from_env(), args)
    except ConfigMissingError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(2)

    try:
        user_mapping = UserMapping.from_file(args.user_map) if args.user_map else None
        migrator = JiraToGithubMigrator(config, user_mapping=user_mapping)
        result = migrator.migrate(dry_run=args.dry_run)
    except Exception:
        logger.exception("Migration failed")
        sys.exit(1)

    _print_report(config, result)
    sys.exit(0 if result.success else 1)
