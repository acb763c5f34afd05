"""dynoseed exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.types import WriteAttempt


class DynoSeedError(Exception):
    """Base exception for all dynoseed failures."""


class SeedConfigError(DynoSeedError):
    """Raised for invalid runtime configuration."""


class SeedSourceNotFoundError(DynoSeedError):
    """Raised when a listed seed source does not exist on disk."""

    def __init__(self, location: str) -> None:
        super().__init__(
            f"Seed source file {location} does not exist. "
            "Check the source list and base directory, then retry."
        )
        self.location = location


class SeedParseError(DynoSeedError):
    """Raised for malformed seed JSON."""

    def __init__(self, source_id: str, reason: str) -> None:
        super().__init__(
            f"Failed to parse seed source {source_id}: {reason}. "
            "Fix the JSON syntax and retry."
        )
        self.source_id = source_id


class StoreWriteError(DynoSeedError):
    """Typed failure raised by batch-write primitives.

    Attributes:
        code: Store error code, e.g. ``ResourceNotFoundException``.
    """

    def __init__(self, code: str, message: str = "") -> None:
        super().__init__(f"{code}: {message}" if message else code)
        self.code = code


class SeedWriteError(DynoSeedError):
    """Raised when a batch write fails permanently."""

    def __init__(self, message: str, attempt: WriteAttempt) -> None:
        super().__init__(message)
        self.attempt = attempt


class SeedReadError(DynoSeedError):
    """Raised when a seed source exists but cannot be read."""
