"""Whole-file byte persistence."""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)

FILE_MODE = 0o644


def read_all(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def write_all(path: str, data: bytes) -> None:
    """Replace the contents of *path* with exactly *data*.

    The file is created if needed and truncated to ``len(data)`` before
    writing. Any failure propagates as :class:`OSError`.
    """
    fd = os.open(path, os.O_RDWR | os.O_CREAT, FILE_MODE)
    with os.fdopen(fd, "wb") as f:
        os.ftruncate(f.fileno(), len(data))
        written = f.write(data)
    if written != len(data):
        raise OSError(f"short write to {path}: {written} of {len(data)} bytes")
    logger.debug("wrote %d bytes to %s", len(data), path)
