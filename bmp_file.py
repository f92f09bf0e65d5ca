import logging
import mmap
import os
from contextlib import contextmanager

from bmp_errors import FileAccessError

logger = logging.getLogger(__name__)


@contextmanager
def open_buffer(path):
    """Map ``path`` read-only and yield the mapping as a bytes-like buffer.

    Images decoded from the buffer must be released before the block exits.
    """
    try:
        f = open(path, "rb")
    except OSError as e:
        raise FileAccessError(path, e.strerror or e) from e

    with f:
        size = os.fstat(f.fileno()).st_size
        # mmap refuses empty files; let the decoder report the truncation
        if size == 0:
            logger.debug("%s is empty", path)
            yield b""
            return

        try:
            m = mmap.mmap(f.fileno(), 0, access=mmap.ACCESS_READ)
        except (OSError, ValueError) as e:
            raise FileAccessError(path, e) from e

        logger.debug("Mapped %s (%d bytes)", path, size)
        try:
            yield m
        finally:
            m.close()
