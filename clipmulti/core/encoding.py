"""UTF-8 encoding constants and helpers for clipmulti."""

import sys

ENCODING = "utf-8"
ENCODING_ERRORS = "replace"  # Preserve data, mark corruption


def configure_stdio() -> None:
    """Reconfigure stdout/stderr to UTF-8 so clipboard text prints on every platform.

    Called once at CLI startup. Streams that cannot be reconfigured (pytest
    capture objects, for example) are left alone.
    """
    for stream in (sys.stdout, sys.stderr):
        if hasattr(stream, "reconfigure"):
            stream.reconfigure(encoding=ENCODING, errors=ENCODING_ERRORS)


def read_text_file(path) -> str:
    """Read a payload file as UTF-8, tolerating a BOM and invalid bytes."""
    with open(path, "rb") as f:
        data = f.read()
    return data.decode("utf-8-sig", errors=ENCODING_ERRORS)
