"""Bounded batch writes with a "resource not ready" retry schedule.

A freshly created DynamoDB table rejects writes with
``ResourceNotFoundException`` until provisioning finishes. BatchWriter
retries that failure on a linear delay schedule and surfaces every other
failure immediately.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Mapping

from core.constants import ITEM_KEY, PUT_REQUEST_KEY, REQUEST_ITEMS_KEY
from core.errors import SeedWriteError
from core.logging_config import get_logger
from core.types import RetrySchedule, Seed, WriteAttempt, WriteOutcome
from store.pool import PoolSet
from store.write_errors import failure_code, is_resource_not_ready

_LOGGER = get_logger(__name__)

WriteFunction = Callable[[Mapping[str, Any]], Awaitable[Any]]
SleepFunction = Callable[[float], Awaitable[Any]]


class BatchWriter:
    """Writes one batch per call through an async batch-write primitive."""

    def __init__(
        self,
        write_fn: WriteFunction,
        table_name: str,
        pools: PoolSet,
        schedule: RetrySchedule | None = None,
        sleep: SleepFunction = asyncio.sleep,
    ) -> None:
        """Initialize the writer.

        Args:
            write_fn: Async primitive receiving ``{"RequestItems": {...}}``.
            table_name: Target table name.
            pools: Shared pools; request params are drawn from ``pools.params``.
            schedule: Retry schedule, defaults to 0..5000 ms in 1000 ms steps.
            sleep: Coroutine used to wait between attempts, in seconds.
        """
        self._write_fn = write_fn
        self._table_name = table_name
        self._pools = pools
        self._schedule = schedule or RetrySchedule()
        self._sleep = sleep

    @property
    def table_name(self) -> str:
        return self._table_name

    async def write(self, batch: list[Seed]) -> WriteAttempt:
        """Write a batch, retrying while the table is not ready.

        The request parameter mapping is released back to the pool once,
        after the final attempt.

        Args:
            batch: Seeds to put, at most the store's batch limit.

        Returns:
            The finished attempt with outcome ``SUCCESS``.

        Raises:
            SeedWriteError: If the write fails permanently.
        """
        attempt = WriteAttempt(batch=batch)
        params = self._pools.params.acquire()
        params[REQUEST_ITEMS_KEY] = {
            self._table_name: [{PUT_REQUEST_KEY: {ITEM_KEY: seed}} for seed in batch]
        }
        try:
            await self._run_attempts(attempt, params)
        finally:
            self._pools.params.release(params)
        return attempt

    async def _run_attempts(self, attempt: WriteAttempt, params: Mapping[str, Any]) -> None:
        delays = list(self._schedule.delays())
        for index, delay_ms in enumerate(delays):
            attempt.delay_ms = delay_ms
            attempt.attempts += 1
            if delay_ms > 0:
                await self._sleep(delay_ms / 1000)
            try:
                await self._write_fn(params)
            except Exception as error:
                if is_resource_not_ready(error) and index + 1 < len(delays):
                    _LOGGER.warning(
                        "seed_write_retry",
                        table=self._table_name,
                        batch_size=len(attempt.batch),
                        attempt=attempt.attempts,
                        next_delay_ms=delays[index + 1],
                    )
                    continue
                raise self._permanent_failure(attempt, error) from error
            attempt.outcome = WriteOutcome.SUCCESS
            _LOGGER.debug(
                "seed_batch_written",
                table=self._table_name,
                batch_size=len(attempt.batch),
                attempts=attempt.attempts,
            )
            return

    def _permanent_failure(self, attempt: WriteAttempt, error: Exception) -> SeedWriteError:
        attempt.outcome = WriteOutcome.PERMANENT_FAILURE
        # The batch buffer goes back to the pool; the error keeps its own copy.
        attempt.batch = list(attempt.batch)
        _LOGGER.error(
            "seed_write_failed",
            table=self._table_name,
            batch_size=len(attempt.batch),
            attempts=attempt.attempts,
            error_code=failure_code(error),
        )
        return SeedWriteError(
            f"Failed to write {len(attempt.batch)} seeds to table {self._table_name} "
            f"after {attempt.attempts} attempt(s): {error}. "
            "Check that the table exists and the credentials allow writes, then retry.",
            attempt,
        )
