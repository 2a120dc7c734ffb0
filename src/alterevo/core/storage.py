"""Key-value string stores backing the creation history.

The history only needs three operations from durable storage: read a string
by key, write a string by key, and remove a key.  ``KeyValueStore`` defines
that interface; ``FileKeyValueStore`` keeps one UTF-8 file per key inside a
directory and ``MemoryKeyValueStore`` keeps values in a dict (tests and
ephemeral sessions).
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9._-]+$")


class KeyValueStore(Protocol):
    """Protocol for string key-value storage backends."""

    def get(self, key: str) -> str | None:
        """Return the stored value, or None if the key is absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...

    def remove(self, key: str) -> None:
        """Delete ``key``.  Removing an absent key is not an error."""
        ...


class MemoryKeyValueStore:
    """In-memory store, lost when the process exits."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._values


class FileKeyValueStore:
    """Directory-backed store: each key is a file named after the key.

    Writes go to a temporary sibling first and are then renamed into place,
    so a crash mid-write leaves the previous value intact.
    """

    def __init__(self, root: Path) -> None:
        """Initialize the store.

        Args:
            root: Directory holding one file per key (created if missing)
        """
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)
        logger.info(f"Initialized key-value store at {self.root}")

    def _path_for(self, key: str) -> Path:
        # Keys become file names, so anything that could escape root is rejected.
        if not _SAFE_KEY.match(key) or key in (".", ".."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.root / key

    def get(self, key: str) -> str | None:
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        tmp_path = path.with_name(f"{path.name}.tmp")
        tmp_path.write_text(value, encoding="utf-8")
        tmp_path.replace(path)
        logger.debug(f"Wrote {len(value)} characters to {path}")

    def remove(self, key: str) -> None:
        path = self._path_for(key)
        path.unlink(missing_ok=True)
        logger.debug(f"Removed {path}")
