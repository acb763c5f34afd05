"""Unit tests for batch writes and the not-ready retry schedule."""

from __future__ import annotations

import pytest

from core.errors import SeedWriteError, StoreWriteError
from core.types import RetrySchedule, WriteOutcome
from store.batch_writer import BatchWriter
from store.pool import PoolSet
from tests.fakes import FakeBatchWrite, RecordingSleep


def _not_ready() -> StoreWriteError:
    return StoreWriteError("ResourceNotFoundException", "table is being created")


@pytest.mark.asyncio
async def test_write_builds_put_requests_for_table() -> None:
    """Each seed should become one PutRequest under the table name."""
    write_fn = FakeBatchWrite()
    writer = BatchWriter(write_fn, "seeds", PoolSet(), sleep=RecordingSleep())

    attempt = await writer.write([{"id": 1}, {"id": 2}])

    assert write_fn.tables == ["seeds"]
    assert write_fn.batches == [[{"id": 1}, {"id": 2}]]
    assert (attempt.outcome, attempt.attempts, attempt.delay_ms) == (WriteOutcome.SUCCESS, 1, 0)


@pytest.mark.asyncio
async def test_transient_failure_then_success_writes_once() -> None:
    """A not-ready failure should be retried without duplicate writes."""
    sleep = RecordingSleep()
    write_fn = FakeBatchWrite(failures=[_not_ready(), _not_ready()])
    writer = BatchWriter(write_fn, "seeds", PoolSet(), sleep=sleep)

    attempt = await writer.write([{"id": 1}])

    assert write_fn.batches == [[{"id": 1}]]
    assert write_fn.attempts == 3
    assert sleep.delays == [1.0, 2.0]
    assert attempt.outcome is WriteOutcome.SUCCESS
    assert attempt.delay_ms == 2000


@pytest.mark.asyncio
async def test_persistent_not_ready_gives_up_after_six_attempts() -> None:
    """The default schedule should stop after delays 0 through 5000 ms."""
    sleep = RecordingSleep()
    write_fn = FakeBatchWrite(failures=[_not_ready() for _ in range(10)])
    writer = BatchWriter(write_fn, "seeds", PoolSet(), sleep=sleep)

    with pytest.raises(SeedWriteError) as error_info:
        await writer.write([{"id": 1}])

    assert write_fn.attempts == 6
    assert sleep.delays == [1.0, 2.0, 3.0, 4.0, 5.0]
    assert error_info.value.attempt.outcome is WriteOutcome.PERMANENT_FAILURE
    assert isinstance(error_info.value.__cause__, StoreWriteError)


@pytest.mark.asyncio
async def test_other_failures_are_not_retried() -> None:
    """Any failure other than not-ready should be permanent immediately."""
    sleep = RecordingSleep()
    write_fn = FakeBatchWrite(failures=[StoreWriteError("ValidationException")])
    writer = BatchWriter(write_fn, "seeds", PoolSet(), sleep=sleep)

    with pytest.raises(SeedWriteError):
        await writer.write([{"id": 1}])

    assert write_fn.attempts == 1
    assert sleep.delays == []


@pytest.mark.asyncio
async def test_custom_schedule_is_respected() -> None:
    """Configured increment and ceiling should bound the retries."""
    sleep = RecordingSleep()
    write_fn = FakeBatchWrite(failures=[_not_ready() for _ in range(5)])
    schedule = RetrySchedule(increment_ms=500, ceiling_ms=1000)
    writer = BatchWriter(write_fn, "seeds", PoolSet(), schedule=schedule, sleep=sleep)

    with pytest.raises(SeedWriteError):
        await writer.write([{"id": 1}])

    assert sleep.delays == [0.5, 1.0]


@pytest.mark.asyncio
async def test_params_released_once_after_last_attempt() -> None:
    """All attempts should share one params mapping, released once."""
    pools = PoolSet()
    write_fn = FakeBatchWrite(failures=[_not_ready(), _not_ready()])
    writer = BatchWriter(write_fn, "seeds", pools, sleep=RecordingSleep())

    await writer.write([{"id": 1}])

    assert len(set(write_fn.seen_params)) == 1
    assert pools.params.size == 1


@pytest.mark.asyncio
async def test_params_released_after_permanent_failure() -> None:
    """The params mapping should return to the pool even on failure."""
    pools = PoolSet()
    write_fn = FakeBatchWrite(failures=[StoreWriteError("AccessDeniedException")])
    writer = BatchWriter(write_fn, "seeds", pools, sleep=RecordingSleep())

    with pytest.raises(SeedWriteError):
        await writer.write([{"id": 1}])

    assert pools.params.size == 1


@pytest.mark.asyncio
async def test_sequential_writes_reuse_one_params_mapping() -> None:
    """N sequential writes should never grow the pool beyond N."""
    pools = PoolSet()
    write_fn = FakeBatchWrite()
    writer = BatchWriter(write_fn, "seeds", pools, sleep=RecordingSleep())

    for index in range(4):
        await writer.write([{"id": index}])

    assert pools.params.size == 1
    assert len(set(write_fn.seen_params)) == 1
