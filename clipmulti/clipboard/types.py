"""Clipboard store types and dataclasses."""
from __future__ import annotations

import time
from dataclasses import dataclass, field

from clipmulti.core.constants import MAX_HISTORY_ITEMS


@dataclass
class HistoryItem:
    """A single stored clipboard snapshot."""

    content: str
    timestamp: float = 0.0  # Unix timestamp, 0.0 when unknown
    pinned: bool = False

    @property
    def line_count(self) -> int:
        return self.content.count("\n") + (
            1 if self.content and not self.content.endswith("\n") else 0
        )


@dataclass(frozen=True)
class FlatEntry:
    """One position in the flattened view (pinned first, then history)."""

    index: int
    content: str
    pinned: bool


@dataclass
class StoreState:
    """Everything persisted in the shared history file.

    ``history`` is most-recent-first; ``pinned`` is in pin order. A content
    string lives in at most one of the two lists.
    """

    slots: dict[int, str] = field(default_factory=dict)
    history: list[str] = field(default_factory=list)
    pinned: list[str] = field(default_factory=list)
    last_deleted: str | None = None
    timestamps: dict[str, float] = field(default_factory=dict)

    def copy(self) -> StoreState:
        """Copy deep enough that mutating the copy never touches self."""
        return StoreState(
            slots=dict(self.slots),
            history=list(self.history),
            pinned=list(self.pinned),
            last_deleted=self.last_deleted,
            timestamps=dict(self.timestamps),
        )

    def is_pinned(self, content: str) -> bool:
        return content in self.pinned

    def remove(self, content: str) -> bool:
        """Remove content from history and pinned. Returns True if anything was removed."""
        removed = False
        if content in self.history:
            self.history = [c for c in self.history if c != content]
            removed = True
        if content in self.pinned:
            self.pinned = [c for c in self.pinned if c != content]
            removed = True
        return removed

    def push_history(
        self,
        content: str,
        *,
        limit: int = MAX_HISTORY_ITEMS,
        now: float | None = None,
    ) -> list[str]:
        """Move content to the history front, then evict beyond ``limit``.

        Any earlier occurrence in history or pinned is removed first.

        Returns:
            Evicted contents, oldest last.
        """
        self.remove(content)
        self.history.insert(0, content)
        self.timestamps[content] = time.time() if now is None else now

        evicted: list[str] = []
        while len(self.history) > limit:
            evicted.append(self.history.pop())
        for old in evicted:
            self.timestamps.pop(old, None)
        return evicted

    def item(self, content: str) -> HistoryItem:
        return HistoryItem(
            content=content,
            timestamp=self.timestamps.get(content, 0.0),
            pinned=self.is_pinned(content),
        )
