"""
Utility functions for the Jira to GitHub migration tool.
"""

from __future__ import annotations

import logging
from typing import Final

LOG_FORMAT: Final[str] = "%(asctime)s - %(levelname)s - %(message)s"
LOG_FILE: Final[str] = "migration.log"


def setup_logging(*, verbosity: int = 0) -> None:
    """Configure logging for the migration process.

    The log file always gets everything down to DEBUG. The console shows
    warnings by default, INFO with -v and DEBUG with -vv.
    """
    console_level = logging.WARNING
    if verbosity == 1:
        console_level = logging.INFO
    elif verbosity >= 2:
        console_level = logging.DEBUG

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    file_handler = logging.FileHandler(LOG_FILE, mode="a")
    file_handler.setLevel(logging.DEBUG)

    logging.basicConfig(
        level=logging.DEBUG,
        format=LOG_FORMAT,
        handlers=[console_handler, file_handler],
    )
    # Keep HTTP client chatter out of the migration log
    logging.getLogger("urllib3").setLevel(logging.WARNING)
