"""Flattened index addressing shared by the engine and mirror backends.

The flattened view is ``pinned`` (in list order) followed by ``history`` (in
list order). It is recomputed on every call and indices are not stable
across mutations: deleting index k shifts every later entry down by one.
Callers that address by index must resolve immediately before use.
"""

from __future__ import annotations

from typing import Any

from clipmulti.clipboard.types import FlatEntry, StoreState


def flatten(state: StoreState) -> list[FlatEntry]:
    """Build the flattened view for ``state``."""
    entries = [
        FlatEntry(index=i, content=content, pinned=True)
        for i, content in enumerate(state.pinned)
    ]
    offset = len(entries)
    entries.extend(
        FlatEntry(index=offset + i, content=content, pinned=False)
        for i, content in enumerate(state.history)
    )
    return entries


def resolve_index(entries: list[FlatEntry], index: int) -> FlatEntry | None:
    """Return the entry at ``index``, or None when out of range (negatives included)."""
    if index < 0 or index >= len(entries):
        return None
    return entries[index]


def resolve_content(entries: list[FlatEntry], text: str) -> FlatEntry | None:
    """Find an entry by content: exact match first, then whitespace-trimmed match."""
    for entry in entries:
        if entry.content == text:
            return entry

    trimmed = text.strip()
    for entry in entries:
        if entry.content.strip() == trimmed:
            return entry
    return None


def entries_from_export(raw: Any) -> list[FlatEntry]:
    """Read the engine-computed ``all`` list from an exported file.

    Malformed elements are skipped. The pinned flag is not part of the
    exported ``all`` list, so it comes back False here.
    """
    if not isinstance(raw, list):
        return []
    entries = []
    for element in raw:
        if not isinstance(element, dict):
            continue
        index = element.get("index")
        content = element.get("content")
        if isinstance(index, int) and not isinstance(index, bool) and isinstance(content, str):
            entries.append(FlatEntry(index=index, content=content, pinned=False))
    return entries
