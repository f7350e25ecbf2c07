"""ClipboardManager - selects the store backend and owns the monitor."""
from __future__ import annotations

import logging
from collections.abc import Callable

from clipmulti.clipboard.mirror import EngineRunner, MirrorStore
from clipmulti.clipboard.monitor import ClipboardMonitor, ClipboardReader, capture_callback
from clipmulti.clipboard.storage import StoreFile
from clipmulti.clipboard.store import ClipboardStore, LocalStore
from clipmulti.clipboard.types import HistoryItem
from clipmulti.config.schema import Config

logger = logging.getLogger(__name__)


def open_store(config: Config, *, allow_mirror: bool = True) -> ClipboardStore:
    """Build the store backend for ``config``.

    With an engine command configured (and ``allow_mirror``), returns a
    MirrorStore that drives the engine. Otherwise, or when the engine
    executable cannot be found, returns a LocalStore over the same file.

    The engine itself must pass ``allow_mirror=False`` so it never spawns
    another engine.
    """
    store_file = StoreFile(config.history_path)

    runner = EngineRunner.from_config(config.engine) if allow_mirror else None
    if runner is None:
        return LocalStore(store_file, history_limit=config.history_limit)

    if not runner.is_available():
        logger.warning(
            "Engine not found (%s); managing %s locally",
            runner.command[0],
            store_file.path,
        )
        return LocalStore(store_file, history_limit=config.history_limit)

    return MirrorStore(store_file, runner, history_limit=config.history_limit)


class ClipboardManager:
    """Context object owning one store and an optional clipboard monitor.

    Command handlers receive ``manager.store`` explicitly; there is no
    process-wide store state.
    """

    def __init__(self, config: Config, *, allow_mirror: bool = True) -> None:
        """Initialize clipboard manager.

        Args:
            config: Loaded configuration.
            allow_mirror: Permit the mirror backend (False for the engine CLI).
        """
        self._config = config
        self._allow_mirror = allow_mirror
        self._store: ClipboardStore | None = None
        self._monitor: ClipboardMonitor | None = None

    @property
    def config(self) -> Config:
        return self._config

    @property
    def store(self) -> ClipboardStore:
        """The store, opened on first access."""
        if self._store is None:
            self._store = open_store(self._config, allow_mirror=self._allow_mirror)
        return self._store

    @property
    def monitor(self) -> ClipboardMonitor | None:
        return self._monitor

    def start_monitor(
        self,
        reader: ClipboardReader | None = None,
        on_added: Callable[[HistoryItem], object] | None = None,
    ) -> ClipboardMonitor:
        """Start capturing clipboard changes into the store.

        Args:
            reader: Clipboard reader (defaults to the system clipboard).
            on_added: Called with each item the monitor stored.
        """
        if self._monitor is not None:
            raise RuntimeError("Clipboard monitor is already running")

        kwargs = {} if reader is None else {"reader": reader}
        monitor = ClipboardMonitor(
            poll_interval=self._config.monitor.poll_interval,
            dedup_window=self._config.monitor.dedup_window,
            **kwargs,
        )
        monitor.start(capture_callback(self.store, on_added))
        self._monitor = monitor
        return monitor

    def stop_monitor(self) -> None:
        if self._monitor is not None:
            self._monitor.stop()
            self._monitor = None

    def close(self) -> None:
        """Stop the monitor. The store holds no open handles."""
        self.stop_monitor()
