"""
File primitives for the database file.

The database is one text file holding one ciphertext. Reads take the whole
file; writes replace the whole file through a temporary sibling and
``os.replace`` so a crash never leaves a half-written database behind.

The parent directory is never created here: a missing folder is reported as
a StorageIOError like any other I/O failure.
"""

import os
import tempfile
from pathlib import Path

from .exceptions import DecryptionError, StorageIOError


def read_text(path: Path) -> str:
    """Read the whole file as UTF-8 text."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except UnicodeDecodeError as e:
        # the stored form is hex, so non-UTF-8 bytes mean corruption
        raise DecryptionError(f"database file {path} is not text") from e
    except OSError as e:
        raise StorageIOError(f"failed to read {path}: {e}", path=path) from e


def atomic_write_text(path: Path, text: str) -> None:
    """Replace ``path`` with ``text`` in one step."""
    path = Path(path)
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent)
        )
    except OSError as e:
        raise StorageIOError(f"failed to write {path}: {e}", path=path) from e

    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except OSError as e:
        try:
            tmp_path.unlink()
        except FileNotFoundError:
            pass
        raise StorageIOError(f"failed to write {path}: {e}", path=path) from e
