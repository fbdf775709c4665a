"""Durable snapshot writer.

Writes are atomic: the encoded snapshot is written to a temporary file next
to the target (``{name}.temp.{time_ns}``), flushed to disk, then renamed
over the target with ``os.replace``.  A reader opening the target path at
any instant sees either the complete previous snapshot or the complete new
one, never a partial write.  If any step fails the target is left untouched.
"""

from __future__ import annotations

import contextlib
import os
import time
from pathlib import Path

from loguru import logger

from docdb.errors import DocIOError


def temp_path_for(path: Path) -> Path:
    """Return a unique staging path beside ``path``."""
    return path.with_name(f"{path.name}.temp.{time.time_ns()}")


def atomic_write(path: Path, data: bytes) -> None:
    """Write ``data`` to ``path`` atomically: temp file + rename.

    The temp file is created in the same directory so ``os.replace`` stays
    on one filesystem.  Raises ``OSError`` on failure.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = temp_path_for(path)
    fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o644)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up temp file on any failure.
        with contextlib.suppress(OSError):
            os.unlink(tmp_path)
        raise


def write_snapshot(path: Path, data: bytes) -> None:
    """Atomically replace ``path`` with ``data``.  Raises ``DocIOError``."""
    try:
        atomic_write(path, data)
    except OSError as e:
        raise DocIOError(f"failed to write snapshot to {path}: {e}", path) from e
    logger.debug("Wrote snapshot {} ({} bytes)", path, len(data))


def read_snapshot(path: Path) -> bytes:
    """Read the whole snapshot file.  Raises ``DocIOError`` (including when missing)."""
    try:
        return path.read_bytes()
    except OSError as e:
        raise DocIOError(f"failed to read snapshot from {path}: {e}", path) from e
