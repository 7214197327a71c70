"""Tests for the scratch-buffer pool."""

import threading

import pytest

from b58codec.scratch import ScratchPool


class TestScratchPool:
    """Buffers are reused, zeroed, and bounded in number."""

    def test_acquire_allocates_when_empty(self):
        pool = ScratchPool()
        buf = pool.acquire(10)
        assert isinstance(buf, bytearray)
        assert len(buf) == 10
        assert len(pool) == 0

    def test_release_then_reuse(self):
        pool = ScratchPool()
        buf = pool.acquire(10)
        pool.release(buf)
        assert len(pool) == 1
        assert pool.acquire(8) is buf
        assert len(pool) == 0

    def test_too_small_buffer_not_reused(self):
        pool = ScratchPool()
        small = pool.acquire(4)
        pool.release(small)
        big = pool.acquire(16)
        assert big is not small
        assert len(big) == 16
        assert len(pool) == 1

    def test_smallest_fitting_buffer_chosen(self):
        pool = ScratchPool()
        large = pool.acquire(100)
        medium = pool.acquire(20)
        pool.release(large)
        pool.release(medium)
        assert pool.acquire(10) is medium

    def test_release_zeroes_buffer(self):
        pool = ScratchPool()
        buf = pool.acquire(6)
        buf[:] = b"secret"
        pool.release(buf)
        assert pool.acquire(6) == bytearray(6)

    def test_max_buffers_bound(self):
        pool = ScratchPool(max_buffers=2)
        bufs = [pool.acquire(4) for _ in range(5)]
        for buf in bufs:
            pool.release(buf)
        assert len(pool) == 2

    def test_zero_capacity_pool_keeps_nothing(self):
        pool = ScratchPool(max_buffers=0)
        pool.release(pool.acquire(4))
        assert len(pool) == 0

    def test_invalid_arguments(self):
        with pytest.raises(ValueError):
            ScratchPool(max_buffers=-1)
        with pytest.raises(ValueError):
            ScratchPool().acquire(-1)
        with pytest.raises(ValueError):
            ScratchPool(max_buffer_size=-1)

    def test_large_buffer_not_lent_for_small_request(self):
        pool = ScratchPool()
        large = pool.acquire(1000)
        pool.release(large)
        small = pool.acquire(3)
        assert small is not large
        assert len(small) == 3

    def test_buffer_up_to_twice_request_is_reused(self):
        pool = ScratchPool()
        buf = pool.acquire(20)
        pool.release(buf)
        assert pool.acquire(10) is buf

    def test_oversized_buffer_dropped(self):
        pool = ScratchPool(max_buffer_size=64)
        pool.release(pool.acquire(65))
        assert len(pool) == 0
        pool.release(pool.acquire(64))
        assert len(pool) == 1

    def test_zeroing_uses_shared_block(self):
        pool = ScratchPool(max_buffer_size=16)
        buf = pool.acquire(16)
        buf[:] = b"\xff" * 16
        pool.release(buf)
        assert buf == bytearray(16)
        assert len(buf) == 16


class TestScratchBufferContext:
    """The context manager always returns the buffer."""

    def test_returns_buffer_after_block(self):
        pool = ScratchPool()
        with pool.buffer(8) as buf:
            buf[0] = 0x41
            assert len(pool) == 0
        assert len(pool) == 1
        assert pool.acquire(8) == bytearray(8)

    def test_returns_buffer_on_error(self):
        pool = ScratchPool()
        with pytest.raises(RuntimeError):
            with pool.buffer(8) as buf:
                buf[0] = 0xFF
                raise RuntimeError("boom")
        assert len(pool) == 1
        assert pool.acquire(8) == bytearray(8)

    def test_concurrent_use(self):
        pool = ScratchPool(max_buffers=4)
        errors = []

        def work(marker):
            for _ in range(200):
                with pool.buffer(32) as buf:
                    if any(buf):
                        errors.append("dirty buffer")
                    buf[:32] = bytes([marker]) * 32
                    if bytes(buf[:32]) != bytes([marker]) * 32:
                        errors.append("shared buffer")

        threads = [threading.Thread(target=work, args=(i,)) for i in range(1, 9)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(pool) <= 4
