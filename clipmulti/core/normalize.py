"""Content normalization applied before any text enters the store."""


def normalize_content(text: str) -> str:
    """Unify line endings to ``\\n``.

    ``\\r\\n`` and lone ``\\r`` both become ``\\n``. Idempotent.
    """
    return text.replace("\r\n", "\n").replace("\r", "\n")


def is_blank(text: str | None) -> bool:
    """True for None, empty, or whitespace-only text."""
    return not text or not text.strip()
