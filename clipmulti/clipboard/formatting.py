"""Plain-text rendering of store contents for the command surface."""
from __future__ import annotations

import time

from clipmulti.clipboard.types import HistoryItem

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_timestamp(timestamp: float) -> str:
    """Local time for a Unix timestamp, or '-' when unknown (0)."""
    if timestamp <= 0:
        return "-"
    return time.strftime(TIMESTAMP_FORMAT, time.localtime(timestamp))


def format_time_ago(timestamp: float, now: float | None = None) -> str:
    """Format timestamp as relative time (e.g., '2m ago', '3d ago')."""
    if timestamp <= 0:
        return "unknown"
    delta = (time.time() if now is None else now) - timestamp
    if delta < 60:
        return "just now"
    elif delta < 3600:
        return f"{int(delta / 60)}m ago"
    elif delta < 86400:
        return f"{int(delta / 3600)}h ago"
    else:
        return f"{int(delta / 86400)}d ago"


def format_history_line(index: int, item: HistoryItem) -> str:
    """``i: [timestamp] [PINNED] content`` as printed by the history command."""
    marker = "[PINNED] " if item.pinned else ""
    return f"{index}: [{format_timestamp(item.timestamp)}] {marker}{item.content}"


def format_search_line(item: HistoryItem) -> str:
    """``[timestamp] content`` as printed by the search command."""
    return f"[{format_timestamp(item.timestamp)}] {item.content}"


def format_capture_notice(item: HistoryItem, limit: int = 60) -> str:
    """One-line notice for watch mode: first line of the capture plus line count."""
    head = item.content.split("\n", 1)[0].strip()
    if len(head) > limit:
        head = head[: limit - 3] + "..."
    if item.line_count > 1:
        head += f" ... (+{item.line_count - 1} more lines)"
    return f"Captured ({format_time_ago(item.timestamp)}): {head or '[Empty]'}"
