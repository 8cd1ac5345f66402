"""Scoped file IO shared by the container and the JPEG helpers."""
from __future__ import annotations

import os
import tempfile
from pathlib import Path


def read_file(path: Path) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def atomic_write_bytes(path: Path, data: bytes) -> Path:
    """Write data to path so the destination is either complete or untouched.

    Bytes go to a temporary sibling which is fsynced and then renamed over the
    destination. The temporary file is removed if anything fails.
    """
    path = Path(path)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()  # Durability: commit before the rename
            os.fdatasync(f.fileno()) if hasattr(os, "fdatasync") else os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise
    return path
