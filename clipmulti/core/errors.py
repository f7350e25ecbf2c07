"""Typed exception hierarchy for clipmulti."""

from __future__ import annotations


class ClipError(Exception):
    """Base class for all clipmulti errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigError(ClipError):
    """Raised for configuration issues (invalid JSON, validation failure)."""


class LoadError(ClipError):
    """Base class for loading errors (config, store file)."""

    pass


class StoreCorruptError(LoadError):
    """The shared store file exists but does not hold a JSON object."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Corrupt store file '{path}': {reason}")


class StoreIOError(ClipError):
    """Reading or writing the shared store file failed."""


class ExternalToolUnavailable(ClipError):
    """The engine executable could not be located or launched."""


class EngineError(ClipError):
    """The engine ran but reported failure (non-zero exit or timeout)."""

    def __init__(self, message: str, returncode: int | None = None) -> None:
        self.returncode = returncode
        super().__init__(message)
