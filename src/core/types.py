"""Shared typed models.

This module defines the data models used by ingest and store layers
to keep interfaces between pipeline stages explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Iterator

from core.constants import DEFAULT_RETRY_CEILING_MS, DEFAULT_RETRY_INCREMENT_MS

Seed = dict[str, Any]


class WriteOutcome(Enum):
    """Lifecycle state of one logical batch write."""

    PENDING = "pending"
    SUCCESS = "success"
    PERMANENT_FAILURE = "permanent_failure"


@dataclass(frozen=True)
class RetrySchedule:
    """Linear delay schedule for "resource not ready" retries.

    Attributes:
        increment_ms: Delay added before each successive attempt.
        ceiling_ms: Largest delay an attempt may be scheduled with.
    """

    increment_ms: int = DEFAULT_RETRY_INCREMENT_MS
    ceiling_ms: int = DEFAULT_RETRY_CEILING_MS

    def delays(self) -> Iterator[int]:
        """Yield the delay before each attempt, starting at zero."""
        delay_ms = 0
        yield delay_ms
        if self.increment_ms <= 0:
            return
        while delay_ms + self.increment_ms <= self.ceiling_ms:
            delay_ms += self.increment_ms
            yield delay_ms

    @property
    def max_attempts(self) -> int:
        """Return how many attempts the schedule allows."""
        return sum(1 for _ in self.delays())


@dataclass
class WriteAttempt:
    """Transient state for one BatchWriter invocation.

    Attributes:
        batch: Seeds being written.
        delay_ms: Delay applied before the latest attempt.
        attempts: Number of primitive calls issued so far.
        outcome: Current lifecycle state.
    """

    batch: list[Seed]
    delay_ms: int = 0
    attempts: int = 0
    outcome: WriteOutcome = WriteOutcome.PENDING


@dataclass(frozen=True)
class SourceResult:
    """Outcome of processing one seed source.

    Attributes:
        location: Resolved source path.
        seeds: Written seeds in stream order, empty when not collected.
        batch_count: Number of batch writes issued for the source.
    """

    location: str
    seeds: tuple[Seed, ...] = ()
    batch_count: int = 0


@dataclass(frozen=True)
class SeedWriteRequest:
    """Aggregate seed write request.

    Attributes:
        table_name: Target table name.
        sources: Seed file names, relative to base_dir unless absolute.
        base_dir: Directory sources are resolved against.
    """

    table_name: str
    sources: tuple[str, ...] = ()
    base_dir: Path = field(default_factory=Path.cwd)

    def locations(self) -> list[Path]:
        """Resolve every source against base_dir, preserving order."""
        return [self.base_dir / source for source in self.sources]
