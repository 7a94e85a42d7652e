"""Bounded single-producer/single-consumer snapshot channel."""

from __future__ import annotations

import asyncio
from typing import Generic, TypeVar

from traffic_replay.exceptions import ChannelClosedError

T = TypeVar("T")

_END_OF_STREAM = object()


class SnapshotChannel(Generic[T]):
    """Bounded async FIFO between the poller and the consumer.

    :meth:`send` suspends while the buffer is full, which throttles the
    producer instead of dropping data.  The producer calls :meth:`close`
    once it is done; the consumer drains whatever is buffered and then
    :meth:`recv` returns ``None``.  A consumer that gives up calls
    :meth:`close_receiver`, after which :meth:`send` raises
    :class:`ChannelClosedError`.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        # One extra slot so close() never blocks behind a full buffer.
        self._queue: asyncio.Queue[object] = asyncio.Queue(maxsize=capacity + 1)
        self._capacity = capacity
        self._space = asyncio.Semaphore(capacity)
        self._sender_closed = False
        self._receiver_closed = False
        self._receiver_closed_event = asyncio.Event()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def is_closed(self) -> bool:
        return self._sender_closed

    async def send(self, item: T) -> None:
        """Queue *item*, waiting for space if the buffer is full.

        Raises
        ------
        ChannelClosedError
            If either side has been closed, including while waiting.
        """
        if self._sender_closed or self._receiver_closed:
            raise ChannelClosedError("snapshot channel is closed")

        acquire = asyncio.ensure_future(self._space.acquire())
        receiver_gone = asyncio.ensure_future(self._receiver_closed_event.wait())
        queued = False
        try:
            await asyncio.wait({acquire, receiver_gone}, return_when=asyncio.FIRST_COMPLETED)
            if not acquire.done() or acquire.cancelled() or self._receiver_closed:
                raise ChannelClosedError("snapshot channel receiver is gone")
            self._queue.put_nowait(item)
            queued = True
        finally:
            receiver_gone.cancel()
            if not acquire.done():
                acquire.cancel()
            elif not queued and not acquire.cancelled() and acquire.exception() is None:
                # Permit taken but nothing queued (receiver gone or sender cancelled).
                self._space.release()

    def close(self) -> None:
        """Signal end-of-stream to the receiver (idempotent)."""
        if self._sender_closed:
            return
        self._sender_closed = True
        self._queue.put_nowait(_END_OF_STREAM)

    def close_receiver(self) -> None:
        """Tell the producer nobody is listening any more (idempotent)."""
        self._receiver_closed = True
        self._receiver_closed_event.set()

    async def recv(self) -> T | None:
        """Next item in FIFO order, or ``None`` once the stream has ended."""
        if self._receiver_closed:
            return None
        item = await self._queue.get()
        if item is _END_OF_STREAM:
            # Keep the marker for any later recv() call.
            self._queue.put_nowait(_END_OF_STREAM)
            return None
        self._space.release()
        return item  # type: ignore[return-value]

    def __aiter__(self) -> SnapshotChannel[T]:
        return self

    async def __anext__(self) -> T:
        item = await self.recv()
        if item is None:
            raise StopAsyncIteration
        return item
