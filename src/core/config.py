"""Runtime configuration model for dynoseed.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from core.constants import (
    DEFAULT_READ_CHUNK_BYTES,
    DEFAULT_RETRY_CEILING_MS,
    DEFAULT_RETRY_INCREMENT_MS,
    ENV_MAX_CHUNK,
    ENV_READ_CHUNK_BYTES,
    ENV_RETRY_CEILING_MS,
    ENV_RETRY_INCREMENT_MS,
    MAX_CHUNK,
)
from core.errors import SeedConfigError
from core.types import RetrySchedule


@dataclass(frozen=True)
class SeedConfig:
    """Validated runtime configuration.

    Attributes:
        max_chunk: Maximum seeds per batch write, at most ``MAX_CHUNK``.
        retry_increment_ms: Delay added before each "not ready" retry.
        retry_ceiling_ms: Largest delay a retry may be scheduled with.
        read_chunk_bytes: Bytes read from a seed file per stream read.
    """

    max_chunk: int = MAX_CHUNK
    retry_increment_ms: int = DEFAULT_RETRY_INCREMENT_MS
    retry_ceiling_ms: int = DEFAULT_RETRY_CEILING_MS
    read_chunk_bytes: int = DEFAULT_READ_CHUNK_BYTES

    @property
    def retry_schedule(self) -> RetrySchedule:
        """Return the write retry schedule for this config."""
        return RetrySchedule(
            increment_ms=self.retry_increment_ms,
            ceiling_ms=self.retry_ceiling_ms,
        )

    @classmethod
    def from_env(cls) -> "SeedConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            SeedConfigError: If environment values are invalid.
        """
        max_chunk = _parse_int_env(ENV_MAX_CHUNK, MAX_CHUNK, minimum=1)
        if max_chunk > MAX_CHUNK:
            raise SeedConfigError(
                f"Invalid {ENV_MAX_CHUNK} value: expected at most {MAX_CHUNK}, "
                f"got {max_chunk}. DynamoDB rejects larger batch writes."
            )
        return cls(
            max_chunk=max_chunk,
            retry_increment_ms=_parse_int_env(
                ENV_RETRY_INCREMENT_MS, DEFAULT_RETRY_INCREMENT_MS, minimum=0
            ),
            retry_ceiling_ms=_parse_int_env(
                ENV_RETRY_CEILING_MS, DEFAULT_RETRY_CEILING_MS, minimum=0
            ),
            read_chunk_bytes=_parse_int_env(
                ENV_READ_CHUNK_BYTES, DEFAULT_READ_CHUNK_BYTES, minimum=1
            ),
        )


def _parse_int_env(name: str, default: int, minimum: int) -> int:
    """Parse a bounded integer environment value.

    Args:
        name: Environment variable name.
        default: Value used when the variable is unset.
        minimum: Smallest accepted value.

    Returns:
        Parsed integer value.

    Raises:
        SeedConfigError: If value is not an integer or below minimum.
    """
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        value = int(raw_value)
    except ValueError as error:
        raise SeedConfigError(
            f"Invalid {name} value: expected integer, got '{raw_value}'. "
            f"Set {name} to a numeric value."
        ) from error
    if value < minimum:
        raise SeedConfigError(
            f"Invalid {name} value: expected at least {minimum}, got {value}. "
            f"Set {name} to a larger value."
        )
    return value
