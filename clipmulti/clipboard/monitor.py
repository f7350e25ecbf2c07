"""Clipboard change monitor.

Two capture paths feed one serialized decision point:

- a background poller that reads the clipboard every ``poll_interval``
  seconds and reports text that differs from the last value seen;
- ``notify_copy()``, for hosts that hook their own copy action and want the
  copy recorded immediately, even when the text repeats an older copy.

When both paths fire for the same copy, the second delivery of identical
text inside ``dedup_window`` seconds is suppressed.
"""
from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING

import pyperclip

from clipmulti.core.constants import DEFAULT_DEDUP_WINDOW, DEFAULT_POLL_INTERVAL
from clipmulti.core.normalize import is_blank, normalize_content
from clipmulti.core.utils import preview

if TYPE_CHECKING:
    from clipmulti.clipboard.store import ClipboardStore
    from clipmulti.clipboard.types import HistoryItem

logger = logging.getLogger(__name__)

ClipboardReader = Callable[[], str]
CaptureCallback = Callable[[str], object]


class MonitorState(Enum):
    """Monitor lifecycle states."""

    IDLE = "idle"
    WATCHING = "watching"


class CaptureSource(Enum):
    """Where an observed clipboard value came from."""

    POLL = "poll"
    HOOK = "hook"


def read_system_clipboard() -> str:
    """Current system clipboard text ('' when it holds no text)."""
    return pyperclip.paste() or ""


def capture_callback(
    store: ClipboardStore,
    on_added: Callable[[HistoryItem], object] | None = None,
) -> Callable[[str], bool]:
    """Standard monitor callback: normalize, then add to ``store``.

    ``on_added`` receives the stored item after each successful add.
    """

    def _capture(text: str) -> bool:
        content = normalize_content(text)
        ok = store.add(content)
        if ok and on_added is not None:
            on_added(store.snapshot().item(content))
        return ok

    return _capture


class ClipboardMonitor:
    """Watches the clipboard and forwards new text to a callback."""

    def __init__(
        self,
        reader: ClipboardReader = read_system_clipboard,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        dedup_window: float = DEFAULT_DEDUP_WINDOW,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize monitor.

        Args:
            reader: Returns the current clipboard text. May raise; errors are
                logged and the tick is skipped.
            poll_interval: Seconds between polls.
            dedup_window: Seconds during which a repeated identical delivery
                from the copy hook is suppressed.
            clock: Monotonic time source (injectable for tests).
        """
        self._reader = reader
        self._poll_interval = poll_interval
        self._dedup_window = dedup_window
        self._clock = clock

        # One lock guards state, last_seen and delivery; callbacks run under it
        self._lock = threading.RLock()
        self._state = MonitorState.IDLE
        self._callback: CaptureCallback | None = None
        self._last_seen = ""
        self._last_delivered_at: float | None = None
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def state(self) -> MonitorState:
        return self._state

    @property
    def last_seen(self) -> str:
        return self._last_seen

    def start(self, callback: CaptureCallback, *, poll: bool = True) -> None:
        """Transition IDLE -> WATCHING.

        The current clipboard text is recorded as already seen, so content
        present before start() is not captured.

        Args:
            callback: Called with each newly observed text.
            poll: Start the background poller. Hosts that only use
                notify_copy() can pass False.

        Raises:
            RuntimeError: If already watching.
        """
        with self._lock:
            if self._state is MonitorState.WATCHING:
                raise RuntimeError("Clipboard monitor is already running")
            self._last_seen = self._safe_read() or ""
            self._last_delivered_at = None
            self._callback = callback
            # Fresh event per run; a poller left over from an earlier run keeps its own
            self._stop_event = threading.Event()
            self._state = MonitorState.WATCHING

            if poll:
                self._thread = threading.Thread(
                    target=self._run,
                    args=(self._stop_event,),
                    name="ClipboardMonitor",
                    daemon=True,
                )
                self._thread.start()
        logger.debug("Clipboard monitor started (interval %.2fs)", self._poll_interval)

    def stop(self) -> None:
        """Transition WATCHING -> IDLE. No callback fires after this returns."""
        with self._lock:
            if self._state is MonitorState.IDLE:
                return
            self._state = MonitorState.IDLE
            self._callback = None
            self._stop_event.set()
            thread = self._thread
            self._thread = None

        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=max(self._poll_interval, 1.0) * 2)
        logger.debug("Clipboard monitor stopped")

    def notify_copy(self, text: str) -> bool:
        """Report text captured by a copy hook. Returns True if delivered."""
        return self._observe(text, CaptureSource.HOOK)

    def poll_once(self) -> bool:
        """Read the clipboard once and deliver if it changed. Returns True if delivered."""
        text = self._safe_read()
        if text is None:
            return False
        return self._observe(text, CaptureSource.POLL)

    def _safe_read(self) -> str | None:
        try:
            return self._reader()
        except pyperclip.PyperclipException as e:
            logger.warning("Clipboard read failed: %s", e)
        except Exception as e:
            logger.warning("Clipboard poll error: %s", e)
        return None

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self._poll_interval):
            text = self._safe_read()
            if text is not None:
                self._observe(text, CaptureSource.POLL, stop_event)

    def _observe(
        self,
        text: str,
        source: CaptureSource,
        stop_event: threading.Event | None = None,
    ) -> bool:
        """The single decision point for both capture paths.

        ``stop_event`` is the poller's own run event; once it is set, that
        poller delivers nothing, even if the monitor has been restarted.
        """
        with self._lock:
            if stop_event is not None and stop_event.is_set():
                return False
            if self._state is not MonitorState.WATCHING or self._callback is None:
                return False
            if is_blank(text):
                return False

            now = self._clock()
            if text == self._last_seen:
                if source is CaptureSource.POLL:
                    return False
                if (
                    self._last_delivered_at is not None
                    and now - self._last_delivered_at < self._dedup_window
                ):
                    logger.debug("Suppressed duplicate %s capture", source.value)
                    return False

            self._last_seen = text
            self._last_delivered_at = now
            logger.debug("Captured %r via %s", preview(text), source.value)
            try:
                self._callback(text)
            except Exception:
                logger.exception("Clipboard capture callback failed")
            return True
