"""Bounded creation history persisted in a key-value store.

The history is a tuple of :class:`HistoryItem`, newest first, never longer
than the configured capacity.  It is stored as a single JSON array under one
key.

Persistence rules:

- every append and every clear writes through to storage immediately
- a missing key loads as an empty history
- a value that cannot be parsed into history items is treated as corrupt:
  it is logged, removed from storage, and an empty history is returned, so
  the same failure does not repeat on the next load
"""

from __future__ import annotations

import logging

from pydantic import TypeAdapter, ValidationError

from .config import HISTORY_CAPACITY, HISTORY_STORAGE_KEY
from .models import History, HistoryItem
from .storage import KeyValueStore

logger = logging.getLogger(__name__)

_history_adapter = TypeAdapter(list[HistoryItem])


def make_id(timestamp: int) -> str:
    """Derive a history item id from a millisecond timestamp.

    Two items created within the same millisecond get the same id.
    """
    return str(timestamp)


def serialize_history(history: History) -> str:
    """Encode a history as the JSON array kept in storage."""
    return _history_adapter.dump_json(list(history), by_alias=True).decode("utf-8")


def deserialize_history(raw: str) -> History:
    """Decode a stored JSON array into a history.

    Raises:
        ValidationError: If ``raw`` is not valid JSON or not a list of
            well-formed history items
    """
    return tuple(_history_adapter.validate_json(raw))


class HistoryStore:
    """Load, append to and clear the persisted creation history."""

    def __init__(
        self,
        storage: KeyValueStore,
        key: str = HISTORY_STORAGE_KEY,
        capacity: int = HISTORY_CAPACITY,
    ) -> None:
        """Initialize the history store.

        Args:
            storage: Backend holding the serialized history
            key: Storage key for the history record
            capacity: Maximum number of items kept
        """
        if capacity < 1:
            raise ValueError(f"History capacity must be at least 1, got {capacity}")
        self.storage = storage
        self.key = key
        self.capacity = capacity

    def load(self) -> History:
        """Read the persisted history.

        Returns:
            The stored history (newest first), or an empty tuple when the key
            is missing or its value is corrupt
        """
        try:
            raw = self.storage.get(self.key)
            if raw is None:
                return ()
            history = deserialize_history(raw)
        except (ValidationError, UnicodeDecodeError) as e:
            logger.error(f"Failed to load history from '{self.key}', discarding record: {e}")
            self.storage.remove(self.key)
            return ()

        if len(history) > self.capacity:
            logger.warning(
                f"Stored history has {len(history)} items, keeping newest {self.capacity}"
            )
            history = history[: self.capacity]

        logger.info(f"Loaded {len(history)} history items")
        return history

    def append(self, history: History, item: HistoryItem) -> History:
        """Prepend ``item``, evict beyond capacity, and persist.

        Args:
            history: Current history (newest first)
            item: Newly completed creation

        Returns:
            New history with ``item`` at index 0
        """
        updated = (item, *history)[: self.capacity]
        self.storage.set(self.key, serialize_history(updated))
        logger.info(f"Saved history item {item.id} ({len(updated)}/{self.capacity} items)")
        return updated

    def clear(self) -> History:
        """Drop the whole history, including the persisted record."""
        self.storage.remove(self.key)
        logger.info("Cleared creation history")
        return ()
