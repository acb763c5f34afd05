"""Reusable container pools for the write path.

Batch buffers and request parameter mappings are recycled across write
cycles instead of being reallocated for every batch. Pools are owned by
one event loop and are not synchronized.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, TypeVar

T = TypeVar("T")


class ReusablePool(Generic[T]):
    """LIFO pool that hands out released items before building new ones."""

    def __init__(
        self,
        factory: Callable[[], T],
        clear: Callable[[T], None] | None = None,
    ) -> None:
        self._factory = factory
        self._clear = clear
        self._items: list[T] = []

    @property
    def size(self) -> int:
        """Return how many released items are waiting for reuse."""
        return len(self._items)

    def acquire(self) -> T:
        """Return the most recently released item, or a new one."""
        if self._items:
            return self._items.pop()
        return self._factory()

    def release(self, item: T) -> None:
        """Return an item to the pool.

        The caller must not touch the item after releasing it.
        """
        if self._clear is not None:
            self._clear(item)
        self._items.append(item)


def _clear_sequence(items: list[Any]) -> None:
    items.clear()


def mapping_pool() -> ReusablePool[dict[str, Any]]:
    """Build a pool of request parameter mappings.

    Mappings are overwritten wholesale on acquire, so release keeps them as is.
    """
    return ReusablePool(dict)


def sequence_pool() -> ReusablePool[list[Any]]:
    """Build a pool of batch buffers emptied on release."""
    return ReusablePool(list, clear=_clear_sequence)


@dataclass
class PoolSet:
    """Pools shared by every source pipeline of one write call.

    Attributes:
        params: Pool of batch-write request parameter mappings.
        buffers: Pool of batch buffers.
    """

    params: ReusablePool[dict[str, Any]] = field(default_factory=mapping_pool)
    buffers: ReusablePool[list[Any]] = field(default_factory=sequence_pool)
