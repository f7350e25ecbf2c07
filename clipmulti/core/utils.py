"""Shared utility functions for clipmulti."""

from typing import Any


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge dicts. Override values take precedence.

    Dicts are merged key by key; lists and scalars are replaced outright.

    Returns:
        New merged dictionary (original dicts not modified).
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def preview(text: str, limit: int = 40) -> str:
    """Shorten text to its first line and ``limit`` characters for log messages."""
    first = text.split("\n", 1)[0]
    if len(first) > limit:
        return first[:limit] + "..."
    if first != text:
        return first + " ..."
    return first
