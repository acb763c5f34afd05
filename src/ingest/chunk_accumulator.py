"""Batch accumulation for seed streams.

Seeds are collected into pooled buffers of at most ``max_chunk`` items.
Each full buffer is written before the next seed is accepted, so batches
of one source reach the store in stream order.
"""

from __future__ import annotations

from core.constants import MAX_CHUNK
from core.types import Seed, SourceResult
from store.batch_writer import BatchWriter
from store.pool import PoolSet


class ChunkAccumulator:
    """Collects seeds of one source into bounded write batches."""

    def __init__(
        self,
        writer: BatchWriter,
        pools: PoolSet,
        location: str,
        max_chunk: int = MAX_CHUNK,
        collect: bool = True,
    ) -> None:
        self._writer = writer
        self._pools = pools
        self._location = location
        self._max_chunk = max_chunk
        self._collect = collect
        self._buffer: list[Seed] | None = pools.buffers.acquire()
        self._written: list[Seed] = []
        self._batch_count = 0

    @property
    def batch_count(self) -> int:
        return self._batch_count

    async def push(self, seed: Seed) -> None:
        """Add a seed, writing the batch once it is full.

        Raises:
            SeedWriteError: If a full batch fails to write.
        """
        buffer = self._active_buffer()
        buffer.append(seed)
        if len(buffer) >= self._max_chunk:
            await self._flush()

    async def finish(self) -> SourceResult:
        """Write any partial batch and release the active buffer.

        Returns:
            Result for the source with written seeds in stream order.

        Raises:
            SeedWriteError: If the final batch fails to write.
        """
        if self._buffer is not None and self._buffer:
            await self._flush()
        self.release()
        return SourceResult(
            location=self._location,
            seeds=tuple(self._written),
            batch_count=self._batch_count,
        )

    def release(self) -> None:
        """Return the active buffer to the pool; safe to call more than once.

        Unflushed seeds in the buffer are dropped.
        """
        if self._buffer is not None:
            self._pools.buffers.release(self._buffer)
            self._buffer = None

    def _active_buffer(self) -> list[Seed]:
        if self._buffer is None:
            raise RuntimeError(f"Accumulator for {self._location} is already finished")
        return self._buffer

    async def _flush(self) -> None:
        batch = self._active_buffer()
        self._buffer = None
        try:
            await self._writer.write(batch)
            self._batch_count += 1
            if self._collect:
                self._written.extend(batch)
        finally:
            self._pools.buffers.release(batch)
        self._buffer = self._pools.buffers.acquire()
