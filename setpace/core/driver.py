"""Periodic asyncio driver that ticks a timer engine."""

from __future__ import annotations

import asyncio
from typing import Callable, Optional


TickCallback = Callable[[], None]
ErrorCallback = Callable[[BaseException], None]


class PeriodicDriver:
    def __init__(
        self,
        callback: TickCallback,
        interval: float = 1.0,
        on_error: Optional[ErrorCallback] = None,
    ) -> None:
        self._callback = callback
        self._interval = interval
        self._on_error = on_error
        self._task: Optional[asyncio.Task[None]] = None
        self._in_callback = False

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Arm the driver on the running loop.

        Raises ``RuntimeError`` when called outside an event loop.
        """
        if self.is_running:
            return
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run())

    def stop(self) -> None:
        if self._task is None:
            return
        task, self._task = self._task, None
        # A stop issued from inside the callback lets the current tick finish;
        # the loop notices the swap and exits on its own.
        if not self._in_callback:
            task.cancel()

    async def _run(self) -> None:
        me = asyncio.current_task()
        while True:
            await asyncio.sleep(self._interval)
            if self._task is not me:
                return
            self._in_callback = True
            try:
                self._callback()
            except Exception as exc:
                # The owner tears its session down before the task dies.
                if self._on_error is not None:
                    self._on_error(exc)
                raise
            finally:
                self._in_callback = False
            if self._task is not me:
                return
