"""JSON file storage for the shared clipboard history.

File format (a JSON object):

    {
      "slots": {"1": "text", ...},
      "history": ["newest", ..., "oldest"],
      "pinned": ["first pinned", ...],
      "all": [{"index": 0, "content": "..."}, ...],
      "lastDeleted": "text" | null,
      "timestamps": {"text": 1700000000.0, ...}
    }

``all`` is the flattened view computed at write time so that a mirror can
address items by index without re-deriving it. Unknown fields are ignored
and missing fields default to empty.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from clipmulti.clipboard.indexing import flatten
from clipmulti.clipboard.types import StoreState
from clipmulti.config.load_utils import parse_json_object
from clipmulti.core.errors import StoreCorruptError, StoreIOError
from clipmulti.core.secure_io import secure_mkdir, secure_write_atomic

logger = logging.getLogger(__name__)


def serialize_state(state: StoreState) -> dict[str, Any]:
    """Convert state to the shared-file dictionary, including the ``all`` view."""
    live = set(state.history) | set(state.pinned)
    return {
        "slots": {str(slot): text for slot, text in sorted(state.slots.items())},
        "history": list(state.history),
        "pinned": list(state.pinned),
        "all": [{"index": e.index, "content": e.content} for e in flatten(state)],
        "lastDeleted": state.last_deleted,
        "timestamps": {
            content: ts for content, ts in state.timestamps.items() if content in live
        },
    }


def deserialize_state(data: dict[str, Any]) -> StoreState:
    """Build state from a shared-file dictionary, repairing invariant violations.

    - non-string list entries and non-integer slot keys are dropped
    - duplicates keep their first occurrence; pinned wins over history
    """
    state = StoreState()

    slots = data.get("slots") or {}
    if isinstance(slots, dict):
        for key, text in slots.items():
            try:
                slot = int(key)
            except (TypeError, ValueError):
                logger.warning("Ignoring non-integer slot key in store file: %r", key)
                continue
            if isinstance(text, str):
                state.slots[slot] = text

    seen: set[str] = set()
    for content in _string_list(data.get("pinned")):
        if content not in seen:
            seen.add(content)
            state.pinned.append(content)
    for content in _string_list(data.get("history")):
        if content not in seen:
            seen.add(content)
            state.history.append(content)

    last_deleted = data.get("lastDeleted")
    state.last_deleted = last_deleted if isinstance(last_deleted, str) else None

    timestamps = data.get("timestamps") or {}
    if isinstance(timestamps, dict):
        for content, ts in timestamps.items():
            if content in seen and isinstance(ts, (int, float)) and not isinstance(ts, bool):
                state.timestamps[content] = float(ts)

    return state


def _string_list(raw: Any) -> list[str]:
    if not isinstance(raw, list):
        return []
    return [item for item in raw if isinstance(item, str)]


class StoreFile:
    """The shared history file at a fixed path."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def read_raw(self) -> dict[str, Any]:
        """Read the file as a dictionary.

        Raises:
            StoreIOError: File missing or unreadable.
            StoreCorruptError: File is not UTF-8, not JSON, or not an object.
        """
        if not self.exists():
            raise StoreIOError(f"Store file not found: {self._path}")
        try:
            raw = self._path.read_bytes()
        except OSError as e:
            raise StoreIOError(f"Failed to read store file {self._path}: {e}") from e

        try:
            return parse_json_object(raw)
        except ValueError as e:
            raise StoreCorruptError(str(self._path), str(e)) from e

    def load(self) -> StoreState:
        """Read and deserialize the file (see read_raw for errors)."""
        return deserialize_state(self.read_raw())

    def save(self, state: StoreState) -> None:
        """Persist state atomically.

        Raises:
            StoreIOError: The directory or file could not be written.
        """
        self.write_snapshot(serialize_state(state))

    def write_snapshot(self, snapshot: dict[str, Any]) -> None:
        """Write an already-serialized snapshot atomically."""
        payload = json.dumps(snapshot, indent=2, ensure_ascii=False)
        try:
            if not self._path.parent.exists():
                secure_mkdir(self._path.parent)
            secure_write_atomic(self._path, payload)
        except OSError as e:
            raise StoreIOError(f"Failed to write store file {self._path}: {e}") from e
