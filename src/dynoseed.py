"""Public SDK surface for dynoseed.

This module provides a stable import path for seed loading.
It exposes the write entry points and re-exports the typed models.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Sequence

from core.config import SeedConfig
from core.errors import (
    DynoSeedError,
    SeedParseError,
    SeedSourceNotFoundError,
    SeedWriteError,
    StoreWriteError,
)
from core.types import RetrySchedule, Seed, SeedWriteRequest
from ingest.buffer_codec import decode_buffers, encode_buffer
from ingest.pipeline import SourceSetProcessor
from ingest.seed_reader import iter_seed_stream
from store.batch_writer import WriteFunction
from store.dynamodb_writer import async_batch_write
from store.pool import PoolSet

__all__ = [
    "DynoSeedError",
    "PoolSet",
    "RetrySchedule",
    "SeedConfig",
    "SeedParseError",
    "SeedSourceNotFoundError",
    "SeedWriteError",
    "SeedWriteRequest",
    "StoreWriteError",
    "async_batch_write",
    "decode_buffers",
    "encode_buffer",
    "iter_seed_stream",
    "write_seeds",
    "write_seeds_blocking",
]


async def write_seeds(
    write_fn: WriteFunction,
    sources: Sequence[str] | None,
    table_name: str,
    base_dir: str | Path | None = None,
    *,
    config: SeedConfig | None = None,
    pools: PoolSet | None = None,
) -> list[Seed]:
    """Write all seeds from the given source files into a table.

    Args:
        write_fn: Async batch-write primitive, see ``async_batch_write``.
        sources: Seed file names; None writes nothing.
        table_name: Target table name.
        base_dir: Directory sources are resolved against, default cwd.
        config: Runtime configuration, default ``SeedConfig.from_env()``.
        pools: Optional pools to reuse across calls.

    Returns:
        Every written seed, in source-list then file order.

    Raises:
        SeedSourceNotFoundError: If any source file is missing.
        SeedParseError: If any source holds malformed JSON.
        SeedWriteError: If any batch write fails permanently.
    """
    request = SeedWriteRequest(
        table_name=table_name,
        sources=tuple(sources or ()),
        base_dir=Path(base_dir) if base_dir is not None else Path.cwd(),
    )
    processor = SourceSetProcessor(
        write_fn,
        table_name,
        config=config or SeedConfig.from_env(),
        pools=pools,
    )
    return await processor.process(request)


def write_seeds_blocking(
    write_fn: WriteFunction,
    sources: Sequence[str] | None,
    table_name: str,
    base_dir: str | Path | None = None,
    *,
    config: SeedConfig | None = None,
) -> list[Seed]:
    """Run ``write_seeds`` on a fresh event loop and return its result."""
    return asyncio.run(
        write_seeds(write_fn, sources, table_name, base_dir, config=config)
    )
