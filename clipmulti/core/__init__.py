"""Core errors, constants and helpers."""

from clipmulti.core.encoding import ENCODING, ENCODING_ERRORS, configure_stdio
from clipmulti.core.errors import (
    ClipError,
    ConfigError,
    EngineError,
    ExternalToolUnavailable,
    LoadError,
    StoreCorruptError,
    StoreIOError,
)
from clipmulti.core.normalize import is_blank, normalize_content

__all__ = [
    "ENCODING",
    "ENCODING_ERRORS",
    "configure_stdio",
    "ClipError",
    "ConfigError",
    "EngineError",
    "ExternalToolUnavailable",
    "LoadError",
    "StoreCorruptError",
    "StoreIOError",
    "is_blank",
    "normalize_content",
]
