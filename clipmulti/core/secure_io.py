"""Secure file I/O utilities for clipmulti.

Clipboard history routinely holds passwords and tokens, so the data
directory and the shared history file are kept owner-only. Writes go to a
uniquely named sibling temp file that is atomically renamed over the target,
so readers in other processes see either the old file or the new one.
"""

import os
import stat
import tempfile
from pathlib import Path

SECURE_DIR_MODE: int = stat.S_IRWXU  # 0o700

SECURE_FILE_MODE: int = stat.S_IRUSR | stat.S_IWUSR  # 0o600


def secure_mkdir(path: Path) -> None:
    """Create a directory (and missing parents) and restrict it to the owner.

    Only the leaf is chmod-ed. Parents keep the umask default so that a
    relative data directory never changes permissions on the working
    directory.

    Raises:
        OSError: If the directory cannot be created.
    """
    path.mkdir(mode=SECURE_DIR_MODE, parents=True, exist_ok=True)
    os.chmod(path, SECURE_DIR_MODE)


def secure_write_atomic(path: Path, content: str | bytes) -> None:
    """Atomically replace ``path`` with ``content`` (owner read/write only).

    mkstemp() creates the temp file with mode 0o600 and a unique name, so
    two writers never share a temp file. On any failure the temp file is
    removed and the original target is left untouched.

    Raises:
        OSError: If the temp file cannot be written or renamed.
    """
    if isinstance(content, str):
        content = content.encode("utf-8")

    fd, temp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent)
    )
    try:
        try:
            os.write(fd, content)
            os.fsync(fd)
        finally:
            os.close(fd)
        os.replace(temp_name, path)
    except BaseException:
        try:
            os.unlink(temp_name)
        except FileNotFoundError:
            pass
        raise

    # Some filesystems do not carry the temp file's mode across the rename
    try:
        os.chmod(path, SECURE_FILE_MODE)
    except OSError:
        pass
