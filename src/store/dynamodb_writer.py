"""Async adapter for blocking DynamoDB batch-write callables.

boto3 clients and table resources expose blocking methods. The adapter
runs them in a worker thread so they fit the async write primitive.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Mapping

from store.batch_writer import WriteFunction


def async_batch_write(batch_write_item: Callable[..., Any]) -> WriteFunction:
    """Wrap a blocking ``batch_write_item(**params)`` callable.

    Args:
        batch_write_item: Blocking callable such as
            ``boto3.client("dynamodb").batch_write_item``.

    Returns:
        Async write primitive accepting the request parameter mapping.
    """

    async def write(params: Mapping[str, Any]) -> Any:
        return await asyncio.to_thread(batch_write_item, **params)

    return write
