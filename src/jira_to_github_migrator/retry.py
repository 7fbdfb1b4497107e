"""Retry GitHub writes with exponential backoff.

Every write waits ``60 * 2**attempt`` seconds after a failure and tries again.
Retries are unbounded unless ``max_attempts`` is given.
"""

from __future__ import annotations

import enum
import logging
import time
from typing import TYPE_CHECKING, Final, TypeVar

import requests
from github import GithubException, RateLimitExceededException

from .exceptions import RetriesExhaustedError

if TYPE_CHECKING:
    from collections.abc import Callable

logger: logging.Logger = logging.getLogger(__name__)

T = TypeVar("T")

BASE_BACKOFF_SECONDS: Final[int] = 60
_RATE_LIMIT_STATUSES: Final[frozenset[int]] = frozenset({403, 429})


class WriteFailureKind(enum.Enum):
    RATE_LIMITED = "rate limited"
    TRANSIENT = "transient failure"
    UNEXPECTED_STATUS = "unexpected status"


def classify(error: Exception) -> WriteFailureKind | None:
    """Classify a failed write; None means the error is not retryable."""
    if isinstance(error, RateLimitExceededException):
        return WriteFailureKind.RATE_LIMITED
    if isinstance(error, GithubException):
        if error.status in _RATE_LIMIT_STATUSES:
            return WriteFailureKind.RATE_LIMITED
        return WriteFailureKind.UNEXPECTED_STATUS
    if isinstance(error, (requests.ConnectionError, requests.Timeout)):
        return WriteFailureKind.TRANSIENT
    return None


def backoff_seconds(attempt: int) -> int:
    return BASE_BACKOFF_SECONDS * 2**attempt


def call_with_backoff(
    operation: Callable[[], T],
    description: str,
    *,
    max_attempts: int | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Call ``operation`` until it succeeds.

    Args:
        operation: The write to perform
        description: What the write does, for log messages (e.g. "create issue PROJ-1")
        max_attempts: Give up after this many attempts; None retries forever
        sleep: Sleep function (injected by tests)

    Returns:
        Whatever ``operation`` returns

    Raises:
        RetriesExhaustedError: If ``max_attempts`` attempts all failed
    """
    attempt = 0
    while True:
        try:
            return operation()
        except (GithubException, requests.ConnectionError, requests.Timeout) as e:
            kind = classify(e)
            assert kind is not None  # always true for the caught types
            if max_attempts is not None and attempt + 1 >= max_attempts:
                msg = f"Failed to {description} after {attempt + 1} attempts ({kind.value}): {e}"
                raise RetriesExhaustedError(msg) from e

            delay = backoff_seconds(attempt)
            if kind is WriteFailureKind.RATE_LIMITED:
                logger.warning(f"Getting rate limited trying to {description}. Sleeping {delay} seconds")
            else:
                logger.warning(f"Failed to {description} ({kind.value}): {e}. Sleeping {delay} seconds before retrying")
            sleep(delay)
            attempt += 1
            logger.info(f"Trying again to {description} (attempt {attempt + 1})")
