"""JSON object loading shared by the config loader and the store file.

Both clipmulti.json and clipboard_history.json are a single JSON object,
possibly written with a UTF-8 BOM by Windows editors. parse_json_object()
holds the decoding rules; callers wrap its ValueError in their own error
type (LoadError here, StoreCorruptError in the store).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from clipmulti.core.errors import LoadError

logger = logging.getLogger(__name__)


def parse_json_object(raw: bytes) -> dict[str, Any]:
    """Decode file bytes as one JSON object.

    Blank content (whitespace only) is an empty object.

    Raises:
        ValueError: Bytes are not UTF-8, not JSON, or not a JSON object.
            The message reads "not UTF-8: ...", "invalid JSON: ..." or
            "expected object, got <type>".
    """
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ValueError(f"not UTF-8: {e}") from e

    text = text.strip()
    if not text:
        return {}

    try:
        result = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"invalid JSON: {e}") from e

    if not isinstance(result, dict):
        raise ValueError(f"expected object, got {type(result).__name__}")
    return result


def load_json_file(path: Path, error_context: str = "") -> dict[str, Any]:
    """Load a required JSON object file.

    Args:
        path: File to load.
        error_context: Prefix for error messages (e.g. "config").

    Raises:
        LoadError: File missing, unreadable, or not a JSON object.
    """
    context_prefix = f"{error_context}: " if error_context else ""

    if not path.exists():
        raise LoadError(f"{context_prefix}File not found: {path}")

    try:
        raw = path.read_bytes()
    except OSError as e:
        raise LoadError(f"{context_prefix}Failed to read file {path}: {e}") from e

    try:
        return parse_json_object(raw)
    except ValueError as e:
        raise LoadError(f"{context_prefix}Cannot load {path}: {e}") from e


def load_json_file_optional(path: Path, error_context: str = "") -> dict[str, Any] | None:
    """Like load_json_file(), but a missing file gives None."""
    if not path.is_file():
        logger.debug("Optional JSON file not found: %s", path)
        return None

    logger.debug("Loading JSON file: %s", path)
    return load_json_file(path, error_context)
