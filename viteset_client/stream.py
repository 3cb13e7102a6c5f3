"""
UPDATE STREAM

Ordered single-producer/single-consumer channel between the polling task
and the subscriber.

- Bounded: the producer waits in put() while the buffer is full
- Nothing is dropped or reordered while open
- Once closed, nothing more is delivered, including buffered updates,
  and a reader blocked in get() is released
"""

import asyncio
from typing import Optional

from .types import Update

_CLOSED = object()


class StreamClosed(Exception):
    """Raised by UpdateStream.get() once the stream is closed."""


class UpdateStream:
    """
    Async iterator of Update values for one subscription.

    Usage:
        async for update in stream:
            if update.error is not None:
                log(update.error)
                continue
            use(update.value)
    """

    def __init__(self, maxsize: int = 1):
        if maxsize < 1:
            raise ValueError("maxsize must be at least 1")
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def pending(self) -> int:
        """Number of buffered, undelivered updates."""
        if self._closed:
            return 0
        return self._queue.qsize()

    async def put(self, update: Update) -> None:
        """
        Enqueue an update, waiting while the buffer is full.

        Called only by the polling task, which is cancelled before close()
        so a waiting put never completes after close.
        """
        if self._closed:
            return
        await self._queue.put(update)

    async def get(self, timeout: Optional[float] = None) -> Update:
        """
        Wait for the next update.

        Raises:
            StreamClosed: If the stream is or becomes closed
            asyncio.TimeoutError: If timeout elapses first
        """
        if self._closed:
            raise StreamClosed()

        if timeout is None:
            item = await self._queue.get()
        else:
            item = await asyncio.wait_for(self._queue.get(), timeout=timeout)

        if item is _CLOSED or self._closed:
            raise StreamClosed()
        return item

    def close(self) -> None:
        """
        Close the stream. Idempotent.

        Buffered updates are discarded and a blocked reader wakes up
        with StreamClosed.
        """
        if self._closed:
            return
        self._closed = True

        while not self._queue.empty():
            self._queue.get_nowait()
        self._queue.put_nowait(_CLOSED)

    def __aiter__(self) -> "UpdateStream":
        return self

    async def __anext__(self) -> Update:
        try:
            return await self.get()
        except StreamClosed:
            raise StopAsyncIteration
