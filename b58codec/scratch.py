"""Reusable scratch buffers for the encoder.

The encoder writes digits into a pre-sized ``bytearray``. Buffers are handed
out from a lock-guarded free list and zero-filled before they go back, so a
later call never sees bytes from an earlier one.

A pooled buffer is only lent for requests of at least half its length, and
buffers larger than ``max_buffer_size`` are never kept, so one large encode
does not slow down every small one after it.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

logger = logging.getLogger(__name__)

DEFAULT_MAX_BUFFERS = 16
DEFAULT_MAX_BUFFER_SIZE = 64 * 1024


class ScratchPool:
    """Thread-safe free list of ``bytearray`` scratch buffers."""

    def __init__(
        self,
        max_buffers: int = DEFAULT_MAX_BUFFERS,
        max_buffer_size: int = DEFAULT_MAX_BUFFER_SIZE,
    ):
        if max_buffers < 0:
            raise ValueError("max_buffers must be non-negative")
        if max_buffer_size < 0:
            raise ValueError("max_buffer_size must be non-negative")
        self.max_buffers = max_buffers
        self.max_buffer_size = max_buffer_size
        self._free: list[bytearray] = []
        self._lock = threading.Lock()
        # sliced through a memoryview, so clearing a buffer copies nothing new
        self._zeros = memoryview(bytes(max_buffer_size))

    def __len__(self) -> int:
        with self._lock:
            return len(self._free)

    def acquire(self, size: int) -> bytearray:
        """Return a zeroed buffer of at least ``size`` bytes.

        Picks the smallest idle buffer that fits and is at most twice
        ``size``, or allocates a new one.
        """
        if size < 0:
            raise ValueError("size must be non-negative")
        with self._lock:
            best = None
            for idx, buf in enumerate(self._free):
                if size <= len(buf) <= 2 * size and (
                    best is None or len(buf) < len(self._free[best])
                ):
                    best = idx
            if best is not None:
                return self._free.pop(best)

        logger.debug("Allocating scratch buffer of %d bytes", size)
        return bytearray(size)

    def release(self, buf: bytearray) -> None:
        """Zero ``buf`` and keep it for reuse if the pool has room.

        Buffers over ``max_buffer_size`` are dropped without being kept.
        """
        if len(buf) > self.max_buffer_size:
            return
        buf[:] = self._zeros[: len(buf)]
        with self._lock:
            if len(self._free) < self.max_buffers:
                self._free.append(buf)

    @contextmanager
    def buffer(self, size: int) -> Iterator[bytearray]:
        """Lend a buffer for the duration of a ``with`` block."""
        buf = self.acquire(size)
        try:
            yield buf
        finally:
            self.release(buf)


default_pool = ScratchPool()
