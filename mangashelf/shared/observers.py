"""Publish-subscribe primitives for live store and status observation."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Iterable
from typing import Generic, TypeVar

T = TypeVar("T")


class ChangeBus:
    """
    Fan out sets of changed record ids to every subscriber queue.

    Each queue holds at most one pending set. Ids published while a
    subscriber is not reading are merged into that set.
    """

    def __init__(self) -> None:
        self._queues: set[asyncio.Queue[frozenset[str]]] = set()

    def subscribe(self) -> asyncio.Queue[frozenset[str]]:
        """
        Register a new subscriber.

        Returns:
            Queue receiving the ids changed since the last read.
        """
        queue: asyncio.Queue[frozenset[str]] = asyncio.Queue(maxsize=1)
        self._queues.add(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue[frozenset[str]]) -> None:
        self._queues.discard(queue)

    def publish(self, ids: Iterable[str]) -> None:
        """
        Notify subscribers about changed ids.

        Args:
            ids: Ids of rows touched by a committed write.

        Returns:
            None.
        """
        changed = frozenset(ids)
        if not changed:
            return
        for queue in list(self._queues):
            if queue.full():
                changed_for_queue = queue.get_nowait() | changed
            else:
                changed_for_queue = changed
            queue.put_nowait(changed_for_queue)

    @property
    def subscriber_count(self) -> int:
        return len(self._queues)


class StateHolder(Generic[T]):
    """
    Hold one value and stream it to observers whenever it changes.

    Observers that fall behind skip straight to the latest value.
    """

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._queues: set[asyncio.Queue[T]] = set()

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        if value == self._value:
            return
        self._value = value
        for queue in list(self._queues):
            if queue.full():
                queue.get_nowait()
            queue.put_nowait(value)

    async def observe(self) -> AsyncIterator[T]:
        """
        Yield the current value, then the latest value after each change.

        Returns:
            Async iterator of values.
        """
        queue: asyncio.Queue[T] = asyncio.Queue(maxsize=1)
        self._queues.add(queue)
        try:
            yield self._value
            while True:
                yield await queue.get()
        finally:
            self._queues.discard(queue)
