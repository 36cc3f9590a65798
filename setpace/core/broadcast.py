"""Fan-out channel for timer events (no replay, close-on-terminal)."""

from __future__ import annotations

import asyncio
from typing import Callable, Generic, Optional, TypeVar


T = TypeVar("T")

EventCallback = Callable[[T], None]
DoneCallback = Callable[[], None]


class _Closed:
    """Queue sentinel marking the end of a subscription."""


_CLOSED = _Closed()


class Subscription(Generic[T]):
    """One live attachment to a :class:`BroadcastChannel`.

    A subscription either forwards events to ``on_event`` as they are
    published, or buffers them for async iteration / :meth:`drain`.
    """

    def __init__(
        self,
        channel: "BroadcastChannel[T]",
        on_event: Optional[EventCallback[T]] = None,
        on_done: Optional[DoneCallback] = None,
    ) -> None:
        self._channel = channel
        self._on_event = on_event
        self._on_done = on_done
        self._queue: asyncio.Queue[T | _Closed] = asyncio.Queue()
        self._done = False

    @property
    def done(self) -> bool:
        return self._done

    def cancel(self) -> None:
        """Detach from the channel. ``on_done`` is not called."""
        if self._done:
            return
        self._done = True
        self._channel._detach(self)
        self._queue.put_nowait(_CLOSED)

    def drain(self) -> list[T]:
        """Return buffered events without waiting."""
        out: list[T] = []
        while not self._queue.empty():
            item = self._queue.get_nowait()
            if isinstance(item, _Closed):
                # keep the sentinel so iterators still terminate
                self._queue.put_nowait(item)
                break
            out.append(item)
        return out

    def __aiter__(self) -> "Subscription[T]":
        return self

    async def __anext__(self) -> T:
        item = await self._queue.get()
        if isinstance(item, _Closed):
            self._queue.put_nowait(item)
            raise StopAsyncIteration
        return item

    def _deliver(self, event: T) -> None:
        if self._on_event is not None:
            self._on_event(event)
        else:
            self._queue.put_nowait(event)

    def _close(self) -> None:
        if self._done:
            return
        self._done = True
        self._queue.put_nowait(_CLOSED)
        if self._on_done is not None:
            self._on_done()


class BroadcastChannel(Generic[T]):
    """Push events to every current subscriber.

    Subscribers that attach mid-session only see later events. Once
    closed, publishing is a silent no-op and new subscriptions are
    returned already finished.
    """

    def __init__(self) -> None:
        self._subscriptions: list[Subscription[T]] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(
        self,
        on_event: Optional[EventCallback[T]] = None,
        on_done: Optional[DoneCallback] = None,
    ) -> Subscription[T]:
        subscription = Subscription(self, on_event=on_event, on_done=on_done)
        if self._closed:
            subscription._close()
            return subscription
        self._subscriptions.append(subscription)
        return subscription

    def publish(self, event: T) -> None:
        if self._closed:
            return
        # Copy: a listener may unsubscribe while being notified.
        for subscription in list(self._subscriptions):
            subscription._deliver(event)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        subscriptions, self._subscriptions = self._subscriptions, []
        for subscription in subscriptions:
            subscription._close()

    def _detach(self, subscription: Subscription[T]) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)
