"""Verbatim byte copy, used when no transform is configured.

Two paths:

* :func:`copy_stream` reads through a fixed-size buffer. It works with any
  readable stream (pipes, terminals, files) and is the default.
* :func:`copy_mapped` memory-maps a regular file and writes the whole
  mapping in one call. The file must not be truncated or replaced while it
  is mapped; nothing here can detect that, so only use it for files known
  to be stable.
"""
from __future__ import annotations

import logging
import mmap
import os
import stat
from pathlib import Path
from typing import BinaryIO

from ..errors import InputOutputError, MemoryMapError, MemoryMapWriteError

logger = logging.getLogger(__name__)

BUFFER_SIZE = 8192


def copy_stream(source: BinaryIO, sink: BinaryIO, buffer_size: int = BUFFER_SIZE) -> int:
    """Copy source to sink unchanged. Returns the number of bytes copied."""
    buffer = bytearray(buffer_size)
    view = memoryview(buffer)
    copied = 0
    while True:
        try:
            n = source.readinto(view)  # type: ignore[attr-defined]
        except OSError as exc:
            raise InputOutputError(f"read failed: {exc}") from exc
        if not n:
            break
        try:
            sink.write(view[:n])
        except BrokenPipeError:
            raise
        except OSError as exc:
            raise InputOutputError(f"write failed: {exc}") from exc
        copied += n
    return copied


def copy_mapped(path: str | Path, sink: BinaryIO) -> int:
    """Map path read-only and write its bytes to sink in one call.

    Returns the number of bytes written. Zero-length files write nothing.
    """
    path = Path(path)
    try:
        fd = os.open(str(path), os.O_RDONLY)
    except OSError as exc:
        raise MemoryMapError(f"{path}: {exc}") from exc
    try:
        size = os.fstat(fd).st_size
        if size == 0:
            # mmap cannot map zero-length files.
            return 0
        try:
            mapped = mmap.mmap(fd, 0, access=mmap.ACCESS_READ)
        except (OSError, ValueError) as exc:
            raise MemoryMapError(f"{path}: {exc}") from exc
        with mapped:
            try:
                sink.write(mapped)
            except BrokenPipeError:
                raise
            except OSError as exc:
                raise MemoryMapWriteError(f"{path}: {exc}") from exc
        logger.debug("Copied %d mapped bytes from %s", size, path)
        return size
    finally:
        os.close(fd)


def is_mappable(path: str | Path) -> bool:
    """True when path names a regular file (not a pipe, device or directory)."""
    try:
        return stat.S_ISREG(os.stat(path).st_mode)
    except OSError:
        return False
