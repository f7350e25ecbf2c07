"""Mirror backend: drives an out-of-process engine and reloads the shared file.

Protocol:
    - every mutating engine call is followed by a reload (the engine exports
      into the mirror's file, then the mirror re-reads it wholesale)
    - a missing file is regenerated by the engine before the first read; if
      the engine is unavailable an empty store is written instead
    - text payloads travel through a temp file deleted on every exit path
    - an engine that cannot be launched makes the call fall back to a local
      store over the mirror's own file (state diverges until the engine is
      reachable again)

There is no cross-process locking. Two mirrors driving engines against the
same file race.
"""
from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
import sys
import tempfile
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from clipmulti.clipboard.indexing import entries_from_export, flatten
from clipmulti.clipboard.storage import StoreFile, deserialize_state
from clipmulti.clipboard.store import ClipboardStore, LocalStore
from clipmulti.clipboard.types import FlatEntry, StoreState
from clipmulti.config.schema import EngineConfig
from clipmulti.core.constants import DEFAULT_ENGINE_TIMEOUT, ENV_ENGINE, MAX_HISTORY_ITEMS
from clipmulti.core.errors import (
    EngineError,
    ExternalToolUnavailable,
    StoreCorruptError,
    StoreIOError,
)
from clipmulti.core.normalize import is_blank, normalize_content

logger = logging.getLogger(__name__)

# Keep a console window from flashing up for every engine call on Windows
if sys.platform == "win32":
    WINDOWS_CREATIONFLAGS = subprocess.CREATE_NO_WINDOW
else:
    WINDOWS_CREATIONFLAGS = 0


class EngineRunner:
    """Invokes the engine command once per operation."""

    def __init__(
        self,
        command: Sequence[str],
        data_dir: str | None = None,
        timeout: float = DEFAULT_ENGINE_TIMEOUT,
    ) -> None:
        if not command:
            raise ValueError("Engine command must not be empty")
        self._command = list(command)
        self._data_dir = data_dir
        self._timeout = timeout

    @classmethod
    def from_config(cls, config: EngineConfig) -> EngineRunner | None:
        """Build a runner from config, or None when no engine is configured."""
        if config.command is None:
            return None
        command = shlex.split(config.command, posix=sys.platform != "win32")
        if not command:
            return None
        return cls(command, data_dir=config.data_dir, timeout=config.timeout)

    @property
    def command(self) -> list[str]:
        return list(self._command)

    def is_available(self) -> bool:
        """True if the engine executable can be located."""
        executable = self._command[0]
        return shutil.which(executable) is not None or Path(executable).is_file()

    def run(self, *args: str) -> str:
        """Run one engine command and return its stdout.

        Raises:
            ExternalToolUnavailable: The engine could not be launched.
            EngineError: The engine exited non-zero or timed out.
        """
        argv = list(self._command)
        if self._data_dir:
            argv += ["--data-dir", self._data_dir]
        argv += list(args)

        # The child must act as the engine, never as another mirror
        env = dict(os.environ)
        env.pop(ENV_ENGINE, None)

        logger.debug("Engine call: %s", argv)
        try:
            result = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self._timeout,
                env=env,
                creationflags=WINDOWS_CREATIONFLAGS,
            )
        except subprocess.TimeoutExpired as e:
            raise EngineError(f"{args[0] if args else 'engine'} timed out after {self._timeout}s") from e
        except OSError as e:
            raise ExternalToolUnavailable(f"Cannot launch engine {self._command[0]!r}: {e}") from e

        if result.returncode != 0:
            message = (result.stderr or result.stdout or "").strip() or f"exit {result.returncode}"
            raise EngineError(message, returncode=result.returncode)
        return result.stdout


@contextmanager
def payload_file(text: str, prefix: str) -> Iterator[Path]:
    """Write text to a uniquely named temp file, yield its path, always delete it."""
    fd, name = tempfile.mkstemp(prefix=prefix, suffix=".txt")
    path = Path(name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        yield path
    finally:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not remove temp file %s: %s", path, e)


class MirrorStore(ClipboardStore):
    """Process-local copy of the engine's store, kept current by reloads."""

    def __init__(
        self,
        store_file: StoreFile,
        runner: EngineRunner,
        history_limit: int = MAX_HISTORY_ITEMS,
    ) -> None:
        super().__init__(store_file, history_limit)
        self._runner = runner
        self._exported: list[FlatEntry] | None = None
        self._degraded = False
        self._bootstrap()

    @property
    def degraded(self) -> bool:
        """True when the last engine call fell back to local management."""
        return self._degraded

    def _bootstrap(self) -> None:
        if not self._file.exists():
            try:
                self._runner.run("export-json", str(self.path))
            except ExternalToolUnavailable as e:
                logger.warning("%s; bootstrapping an empty store", e.message)
                self._degraded = True
            except EngineError as e:
                logger.warning("Engine export failed: %s", e.message)

        if not self._file.exists():
            self._state = StoreState()
            try:
                self._file.save(self._state)
            except StoreIOError as e:
                logger.error("Failed to create history file: %s", e.message)
            return

        self._read_file(reinit_corrupt=True)

    def _read_file(self, reinit_corrupt: bool = False) -> bool:
        try:
            raw = self._file.read_raw()
        except StoreCorruptError as e:
            if not reinit_corrupt:
                logger.error("Failed to reload history file: %s", e.message)
                return False
            logger.warning("%s; reinitializing", e.message)
            self._state = StoreState()
            self._exported = None
            try:
                self._file.save(self._state)
            except StoreIOError as save_error:
                logger.error("Failed to rewrite history file: %s", save_error.message)
            return False
        except StoreIOError as e:
            logger.error("Failed to reload history file: %s", e.message)
            return False

        self._state = deserialize_state(raw)
        self._exported = entries_from_export(raw["all"]) if "all" in raw else None
        return True

    def reload(self) -> bool:
        try:
            self._runner.run("export-json", str(self.path))
        except ExternalToolUnavailable as e:
            logger.debug("Reload without engine: %s", e.message)
        except EngineError as e:
            logger.warning("Engine export failed: %s", e.message)
        if not self._file.exists():
            return False
        return self._read_file()

    def _addressable_entries(self) -> list[FlatEntry]:
        # Prefer the engine-computed view the indices were issued against
        if self._exported is not None:
            return self._exported
        return flatten(self._state)

    def _invoke(
        self,
        action: str,
        args: Sequence[str],
        fallback: Callable[[LocalStore], bool],
    ) -> bool:
        """Run an engine command then reload; fall back locally if the engine is gone."""
        try:
            self._runner.run(*args)
        except ExternalToolUnavailable as e:
            logger.warning("%s; performing %s on the local copy", e.message, action)
            self._degraded = True
            local = LocalStore(self._file, history_limit=self._limit)
            ok = fallback(local)
            self._state = local.snapshot()
            self._exported = None
            return ok
        except EngineError as e:
            logger.error("Engine %s failed: %s", action, e.message)
            self._degraded = False
            self.reload()
            return False

        self._degraded = False
        self.reload()
        return True

    def add(self, text: str) -> bool:
        if is_blank(text):
            return False
        content = normalize_content(text)
        with payload_file(content, "cm_add_") as path:
            return self._invoke(
                "add", ["add-from-file", str(path)], lambda local: local.add(content)
            )

    def set_slot(self, slot: int, text: str) -> bool:
        if is_blank(text):
            return False
        content = normalize_content(text)
        with payload_file(content, f"cm_slot_{slot}_") as path:
            return self._invoke(
                "setslot",
                ["setslot-from-file", str(slot), str(path)],
                lambda local: local.set_slot(slot, content),
            )

    def pin_by_index(self, index: int) -> bool:
        return self._invoke("pin", ["pin", str(index)], lambda local: local.pin_by_index(index))

    def unpin_by_index(self, index: int) -> bool:
        return self._invoke(
            "unpin", ["unpin", str(index)], lambda local: local.unpin_by_index(index)
        )

    def delete_by_index(self, index: int) -> bool:
        return self._invoke(
            "delete", ["delete", str(index)], lambda local: local.delete_by_index(index)
        )

    def undo(self) -> bool:
        return self._invoke("undo", ["undo"], lambda local: local.undo())

    def export(self) -> dict[str, Any]:
        self.reload()
        return super().export()

    def export_json(self, path: Path | None = None) -> bool:
        if path is None or path == self.path:
            return self.reload()
        return self._invoke(
            "export", ["export-json", str(path)], lambda local: local.export_json(path)
        )
