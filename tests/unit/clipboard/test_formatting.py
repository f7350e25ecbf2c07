"""Tests for history/search line rendering."""

import time

from clipmulti.clipboard.formatting import (
    format_capture_notice,
    format_history_line,
    format_search_line,
    format_time_ago,
    format_timestamp,
)
from clipmulti.clipboard.types import HistoryItem


class TestFormatTimestamp:
    def test_unknown(self) -> None:
        assert format_timestamp(0.0) == "-"

    def test_local_time(self) -> None:
        ts = 1_700_000_000.0
        assert format_timestamp(ts) == time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(ts))


class TestFormatTimeAgo:
    def test_ranges(self) -> None:
        now = 1_000_000.0
        assert format_time_ago(now - 10, now) == "just now"
        assert format_time_ago(now - 125, now) == "2m ago"
        assert format_time_ago(now - 3 * 3600, now) == "3h ago"
        assert format_time_ago(now - 2 * 86400, now) == "2d ago"

    def test_unknown(self) -> None:
        assert format_time_ago(0.0) == "unknown"


class TestHistoryLines:
    def test_history_line_unpinned(self) -> None:
        line = format_history_line(3, HistoryItem(content="hello"))

        assert line == "3: [-] hello"

    def test_history_line_pinned(self) -> None:
        line = format_history_line(0, HistoryItem(content="keep", pinned=True))

        assert line == "0: [-] [PINNED] keep"

    def test_search_line(self) -> None:
        assert format_search_line(HistoryItem(content="found")) == "[-] found"

    def test_content_printed_verbatim(self) -> None:
        """Markup-like and multi-line content is not altered."""
        item = HistoryItem(content="[bold]x[/bold]\n\tnext")

        assert format_history_line(1, item) == "1: [-] [bold]x[/bold]\n\tnext"


class TestCaptureNotice:
    def test_single_line(self) -> None:
        item = HistoryItem(content="hello", timestamp=time.time())

        assert format_capture_notice(item) == "Captured (just now): hello"

    def test_multi_line_and_truncation(self) -> None:
        item = HistoryItem(content="x" * 80 + "\nsecond\nthird", timestamp=time.time())

        notice = format_capture_notice(item, limit=10)

        assert notice == "Captured (just now): xxxxxxx... ... (+2 more lines)"
