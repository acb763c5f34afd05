"""Seed write orchestration across source files.

This module checks that every source exists, then drives each source
through the reader, accumulator, and batch writer concurrently on one
event loop. Results are aggregated in source-list order.
"""

from __future__ import annotations

import asyncio
import contextlib
from pathlib import Path
from typing import Sequence

from core.config import SeedConfig
from core.errors import SeedSourceNotFoundError
from core.logging_config import get_logger
from core.types import Seed, SeedWriteRequest, SourceResult
from ingest.chunk_accumulator import ChunkAccumulator
from ingest.seed_reader import aiter_seed_file
from store.batch_writer import BatchWriter, SleepFunction, WriteFunction
from store.pool import PoolSet

_LOGGER = get_logger(__name__)


class SourceSetProcessor:
    """Runs the seed pipeline for a list of sources against one table."""

    def __init__(
        self,
        write_fn: WriteFunction,
        table_name: str,
        config: SeedConfig | None = None,
        pools: PoolSet | None = None,
        sleep: SleepFunction = asyncio.sleep,
        collect: bool = True,
    ) -> None:
        """Initialize the processor.

        Args:
            write_fn: Async batch-write primitive.
            table_name: Target table name.
            config: Runtime configuration, defaults to built-in values.
            pools: Pools shared by all source pipelines of this processor.
            sleep: Coroutine used between write retries.
            collect: Whether written seeds are returned to the caller.
        """
        self._config = config or SeedConfig()
        self._pools = pools or PoolSet()
        self._collect = collect
        self._writer = BatchWriter(
            write_fn,
            table_name,
            self._pools,
            schedule=self._config.retry_schedule,
            sleep=sleep,
        )

    @property
    def pools(self) -> PoolSet:
        return self._pools

    async def process(self, request: SeedWriteRequest) -> list[Seed]:
        """Write every seed of every source in the request.

        Args:
            request: Table, sources, and base directory.

        Returns:
            All written seeds, concatenated in source-list order.

        Raises:
            SeedSourceNotFoundError: If any source does not exist.
            SeedParseError: If any source holds malformed JSON.
            SeedWriteError: If any batch write fails permanently.
        """
        locations = request.locations()
        await _ensure_sources_exist(locations)
        results = await asyncio.gather(
            *(self.process_source(location) for location in locations)
        )
        seeds = _concat_results(results)
        _LOGGER.info(
            "seed_sources_completed",
            table=request.table_name,
            source_count=len(locations),
            batch_count=sum(result.batch_count for result in results),
            seed_count=len(seeds),
        )
        return seeds

    async def process_source(self, location: Path) -> SourceResult:
        """Stream one seed file into the table.

        Args:
            location: Existing seed file path.

        Returns:
            Result for the source.
        """
        accumulator = ChunkAccumulator(
            self._writer,
            self._pools,
            str(location),
            max_chunk=self._config.max_chunk,
            collect=self._collect,
        )
        try:
            seeds = aiter_seed_file(location, self._config.read_chunk_bytes)
            async with contextlib.aclosing(seeds):
                async for seed in seeds:
                    await accumulator.push(seed)
            result = await accumulator.finish()
        finally:
            accumulator.release()
        _LOGGER.info(
            "seed_source_loaded",
            table=self._writer.table_name,
            source=result.location,
            batch_count=result.batch_count,
        )
        return result


async def _ensure_sources_exist(locations: Sequence[Path]) -> None:
    """Fail on the first missing source, in source-list order."""
    exists = await asyncio.gather(
        *(asyncio.to_thread(location.is_file) for location in locations)
    )
    for location, found in zip(locations, exists):
        if not found:
            raise SeedSourceNotFoundError(str(location))


def _concat_results(results: Sequence[SourceResult]) -> list[Seed]:
    seeds: list[Seed] = []
    for result in results:
        seeds.extend(result.seeds)
    return seeds
