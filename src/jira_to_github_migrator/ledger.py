"""Ledger implementations recording which Jira tickets were migrated."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Final

from .github_utils import split_repo_path

logger: logging.Logger = logging.getLogger(__name__)

DEFAULT_STATE_DIR: Final[str] = "repo-state"
STATE_FILE_NAME: Final[str] = "already_created.txt"
MAPPING_FILE_NAME: Final[str] = "mapping.txt"


class FileLedger:
    """Ledger kept in a per-repository state directory.

    ``already_created.txt`` holds the comma-joined list of migrated keys and
    is rewritten on every append; ``mapping.txt`` gets one
    ``<issue number>: <key>`` line per created issue, plus annotations.
    """

    state_dir: Path
    _keys: list[str]
    _key_set: set[str]

    def __init__(self, repo_path: str, state_root: str | Path = DEFAULT_STATE_DIR) -> None:
        owner, repo_name = split_repo_path(repo_path)
        self.state_dir = Path(state_root) / owner / repo_name
        self._keys = self._load()
        self._key_set = set(self._keys)

    @property
    def state_file(self) -> Path:
        return self.state_dir / STATE_FILE_NAME

    @property
    def mapping_file(self) -> Path:
        return self.state_dir / MAPPING_FILE_NAME

    def _load(self) -> list[str]:
        if not self.state_file.exists():
            return []
        content = self.state_file.read_text(encoding="utf-8").strip()
        keys = [key.strip() for key in content.split(",") if key.strip()]
        logger.info(f"Loaded {len(keys)} already migrated keys from {self.state_file}")
        return keys

    def __contains__(self, key: object) -> bool:
        return key in self._key_set

    def __len__(self) -> int:
        return len(self._keys)

    @property
    def keys(self) -> list[str]:
        return list(self._keys)

    def append(self, key: str) -> None:
        if key in self._key_set:
            return
        self._keys.append(key)
        self._key_set.add(key)
        self.state_dir.mkdir(parents=True, exist_ok=True)
        self.state_file.write_text(",".join(self._keys), encoding="utf-8")

    def _append_line(self, line: str) -> None:
        self.state_dir.mkdir(parents=True, exist_ok=True)
        with self.mapping_file.open("a", encoding="utf-8") as f:
            f.write(f"{line}\n")

    def record_mapping(self, issue_number: int, key: str) -> None:
        self._append_line(f"{issue_number}: {key}")

    def annotate(self, note: str) -> None:
        self._append_line(note)


class InMemoryLedger:
    """Ledger that lives only for the duration of the process (tests)."""

    def __init__(self, keys: list[str] | None = None) -> None:
        self.keys: list[str] = list(keys or [])
        self.mapping: list[str] = []

    def __contains__(self, key: object) -> bool:
        return key in self.keys

    def __len__(self) -> int:
        return len(self.keys)

    def append(self, key: str) -> None:
        if key not in self.keys:
            self.keys.append(key)

    def record_mapping(self, issue_number: int, key: str) -> None:
        self.mapping.append(f"{issue_number}: {key}")

    def annotate(self, note: str) -> None:
        self.mapping.append(note)
