"""Integration tests for the public seed writing entry points."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from botocore.exceptions import ClientError

from dynoseed import PoolSet, SeedConfig, async_batch_write, write_seeds, write_seeds_blocking
from tests.fakes import FakeBatchWrite
from tests.fixture_paths import fixture_path


@pytest.mark.asyncio
async def test_write_seeds_resolves_sources_against_base_dir() -> None:
    """Sources should be read relative to the given base directory."""
    write_fn = FakeBatchWrite()

    seeds = await write_seeds(write_fn, ["a.json", "b.json"], "seeds", fixture_path("seeds"))

    assert seeds == [{"id": 1}, {"id": 2}, {"id": 3}]
    assert set(write_fn.tables) == {"seeds"}


@pytest.mark.asyncio
async def test_write_seeds_defaults_to_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Omitting base_dir should resolve sources against the working directory."""
    (tmp_path / "only.json").write_text('[{"id": "x"}]', encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    seeds = await write_seeds(FakeBatchWrite(), ["only.json"], "seeds")

    assert seeds == [{"id": "x"}]


@pytest.mark.asyncio
async def test_write_seeds_with_no_sources_returns_empty() -> None:
    """A None source list should trivially succeed."""
    assert await write_seeds(FakeBatchWrite(), None, "seeds") == []


@pytest.mark.asyncio
async def test_pools_are_reused_across_calls() -> None:
    """Passing a PoolSet should recycle containers between calls."""
    pools = PoolSet()
    write_fn = FakeBatchWrite()

    for _ in range(3):
        await write_seeds(write_fn, ["a.json"], "seeds", fixture_path("seeds"), pools=pools)

    assert pools.params.size == 1
    assert pools.buffers.size == 1


def test_write_seeds_blocking_retries_botocore_not_ready(tmp_path: Path) -> None:
    """A blocking client raising ResourceNotFoundException should be retried."""
    (tmp_path / "seeds.json").write_text(json.dumps([{"id": 1}]), encoding="utf-8")
    calls: list[dict] = []

    def batch_write_item(**params: object) -> dict:
        calls.append(params)
        if len(calls) == 1:
            raise ClientError(
                {"Error": {"Code": "ResourceNotFoundException", "Message": "creating"}},
                "BatchWriteItem",
            )
        return {"UnprocessedItems": {}}

    config = SeedConfig(retry_increment_ms=1, retry_ceiling_ms=5)

    seeds = write_seeds_blocking(
        async_batch_write(batch_write_item), ["seeds.json"], "seeds", tmp_path, config=config
    )

    assert seeds == [{"id": 1}]
    assert len(calls) == 2
