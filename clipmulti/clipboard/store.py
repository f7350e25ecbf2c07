"""History/slot store: shared interface and the in-process (engine) backend."""
from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path
from typing import Any

from clipmulti.clipboard.indexing import flatten, resolve_content, resolve_index
from clipmulti.clipboard.storage import StoreFile, serialize_state
from clipmulti.clipboard.types import FlatEntry, HistoryItem, StoreState
from clipmulti.core.constants import MAX_HISTORY_ITEMS
from clipmulti.core.errors import StoreCorruptError, StoreIOError
from clipmulti.core.normalize import is_blank, normalize_content
from clipmulti.core.utils import preview

logger = logging.getLogger(__name__)


class ClipboardStore(ABC):
    """Operations every store backend provides.

    Mutating operations return True only after the full state has been
    persisted. Failures (blank input, unresolved index or content, I/O
    errors) are logged and reported as False.
    """

    def __init__(self, store_file: StoreFile, history_limit: int = MAX_HISTORY_ITEMS) -> None:
        self._file = store_file
        self._limit = history_limit
        self._state = StoreState()

    @property
    def path(self) -> Path:
        return self._file.path

    @property
    def history_limit(self) -> int:
        return self._limit

    @property
    def last_deleted(self) -> str | None:
        return self._state.last_deleted

    def snapshot(self) -> StoreState:
        """Copy of the current state; mutating it does not affect the store."""
        return self._state.copy()

    # --- Read-only operations ---

    def flattened(self) -> list[FlatEntry]:
        """Pinned then history, indexed from 0. Recomputed on every call."""
        return flatten(self._state)

    def history_items(self) -> list[HistoryItem]:
        return [self._state.item(entry.content) for entry in self.flattened()]

    def get_slot(self, slot: int) -> str | None:
        return self._state.slots.get(slot)

    def search(self, query: str) -> list[HistoryItem]:
        """Case-insensitive substring search over unpinned history only."""
        needle = query.lower()
        return [
            self._state.item(content)
            for content in self._state.history
            if needle in content.lower()
        ]

    def export(self) -> dict[str, Any]:
        """Serialized snapshot including the flattened ``all`` view."""
        return serialize_state(self._state)

    # --- Content-addressed operations ---

    def pin(self, text: str) -> bool:
        return self._by_content(text, self.pin_by_index, "pin")

    def unpin(self, text: str) -> bool:
        return self._by_content(text, self.unpin_by_index, "unpin")

    def delete(self, text: str) -> bool:
        return self._by_content(text, self.delete_by_index, "delete")

    def _by_content(self, text: str, op: Callable[[int], bool], action: str) -> bool:
        """Refresh, resolve content to its current index, then apply ``op``."""
        if is_blank(text):
            return False
        self.reload()
        entry = resolve_content(self._addressable_entries(), text)
        if entry is None:
            logger.warning("Item not found for %s: %r", action, preview(text))
            return False
        return op(entry.index)

    def _addressable_entries(self) -> list[FlatEntry]:
        return flatten(self._state)

    # --- Backend-specific operations ---

    @abstractmethod
    def add(self, text: str) -> bool:
        """Normalize, dedup and insert at the history front."""

    @abstractmethod
    def set_slot(self, slot: int, text: str) -> bool:
        """Store text under ``slot``, then add it to history."""

    @abstractmethod
    def pin_by_index(self, index: int) -> bool: ...

    @abstractmethod
    def unpin_by_index(self, index: int) -> bool: ...

    @abstractmethod
    def delete_by_index(self, index: int) -> bool: ...

    @abstractmethod
    def undo(self) -> bool:
        """Restore the last deleted item to the history front."""

    @abstractmethod
    def export_json(self, path: Path | None = None) -> bool:
        """Write the serialized snapshot to ``path`` (default: the store file)."""

    @abstractmethod
    def reload(self) -> bool:
        """Replace in-memory state with the store file's contents."""


class LocalStore(ClipboardStore):
    """Store that owns the file directly: the engine, and the mirror's fallback.

    Each mutation works on a copy of the state, persists the copy, and only
    then swaps it in, so a failed write leaves memory untouched.
    """

    def __init__(
        self,
        store_file: StoreFile,
        history_limit: int = MAX_HISTORY_ITEMS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        super().__init__(store_file, history_limit)
        self._clock = clock
        if self._file.exists():
            self.reload()

    @classmethod
    def open(cls, path: Path, history_limit: int = MAX_HISTORY_ITEMS) -> LocalStore:
        return cls(StoreFile(path), history_limit=history_limit)

    def reload(self) -> bool:
        if not self._file.exists():
            return False
        try:
            self._state = self._file.load()
        except StoreCorruptError as e:
            logger.warning("%s; starting from an empty store", e.message)
            self._state = StoreState()
            return False
        except StoreIOError as e:
            logger.error("%s", e.message)
            return False
        return True

    def _commit(self, state: StoreState, action: str) -> bool:
        try:
            self._file.save(state)
        except StoreIOError as e:
            logger.error("Failed to %s: %s", action, e.message)
            return False
        self._state = state
        return True

    def _resolve(self, index: int, action: str) -> FlatEntry | None:
        entry = resolve_index(self.flattened(), index)
        if entry is None:
            logger.info("Cannot %s index %d: out of range", action, index)
        return entry

    def add(self, text: str) -> bool:
        if is_blank(text):
            logger.debug("Rejected blank content")
            return False
        content = normalize_content(text)

        state = self._state.copy()
        evicted = state.push_history(content, limit=self._limit, now=self._clock())
        if evicted:
            logger.debug("Evicted %d oldest history item(s)", len(evicted))
        return self._commit(state, "add item")

    def set_slot(self, slot: int, text: str) -> bool:
        if is_blank(text):
            logger.debug("Rejected blank content for slot %d", slot)
            return False
        content = normalize_content(text)

        state = self._state.copy()
        state.slots[slot] = content
        if not self._commit(state, f"set slot {slot}"):
            return False

        if not self.add(content):
            logger.warning("Slot %d was written but adding its text to history failed", slot)
            return False
        return True

    def pin_by_index(self, index: int) -> bool:
        entry = self._resolve(index, "pin")
        if entry is None:
            return False
        if self._state.is_pinned(entry.content):
            logger.info("Item %d is already pinned", index)
            return False

        state = self._state.copy()
        state.history.remove(entry.content)
        state.pinned.append(entry.content)
        if not self._commit(state, "pin item"):
            return False
        logger.info("Pinned %r", preview(entry.content))
        return True

    def unpin_by_index(self, index: int) -> bool:
        entry = self._resolve(index, "unpin")
        if entry is None:
            return False
        if not self._state.is_pinned(entry.content):
            logger.info("Item %d is not pinned", index)
            return False

        state = self._state.copy()
        state.push_history(entry.content, limit=self._limit, now=self._clock())
        if not self._commit(state, "unpin item"):
            return False
        logger.info("Unpinned %r", preview(entry.content))
        return True

    def delete_by_index(self, index: int) -> bool:
        entry = self._resolve(index, "delete")
        if entry is None:
            return False

        state = self._state.copy()
        state.remove(entry.content)
        state.timestamps.pop(entry.content, None)
        state.last_deleted = entry.content
        if not self._commit(state, "delete item"):
            return False
        logger.info("Deleted %r", preview(entry.content))
        return True

    def undo(self) -> bool:
        content = self._state.last_deleted
        if content is None:
            return False

        state = self._state.copy()
        state.last_deleted = None
        state.push_history(content, limit=self._limit, now=self._clock())
        return self._commit(state, "undo delete")

    def export_json(self, path: Path | None = None) -> bool:
        target = StoreFile(path) if path is not None else self._file
        try:
            target.write_snapshot(self.export())
        except StoreIOError as e:
            logger.error("Failed to export: %s", e.message)
            return False
        return True
