"""Failure classification for batch-write primitives.

Primitives raise either ``StoreWriteError`` or botocore ``ClientError``.
This module reduces both to a store error code for retry decisions.
"""

from __future__ import annotations

from botocore.exceptions import ClientError

from core.constants import RESOURCE_NOT_READY_CODE
from core.errors import StoreWriteError


def failure_code(error: BaseException) -> str | None:
    """Return the store error code carried by a write failure, if any."""
    if isinstance(error, StoreWriteError):
        return error.code
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code")
    return None


def is_resource_not_ready(error: BaseException) -> bool:
    """Return whether a failure means the target table is still provisioning."""
    return failure_code(error) == RESOURCE_NOT_READY_CODE
