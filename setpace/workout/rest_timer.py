"""Rest countdown between sets."""

from __future__ import annotations

from typing import Callable, Optional

from setpace.core.broadcast import BroadcastChannel
from setpace.core.driver import PeriodicDriver
from setpace.workout.constants import TICK_INTERVAL_SEC
from setpace.workout.model import RestTimerState, format_time


RemainingCallback = Callable[[int], None]
DoneCallback = Callable[[], None]


class RestCountdownEngine:
    """One-second countdown with pause/resume/add-time/skip/cancel.

    Publishes the remaining seconds on a fresh :class:`BroadcastChannel`
    per session. With ``tick_interval=None`` no driver is armed and the
    host calls :meth:`tick` itself.
    """

    format_time = staticmethod(format_time)

    def __init__(self, tick_interval: float | None = TICK_INTERVAL_SEC) -> None:
        self._tick_interval = tick_interval
        self._driver: Optional[PeriodicDriver] = None
        self._channel: Optional[BroadcastChannel[int]] = None
        self._remaining_seconds = 0
        self._total_seconds = 0
        self._is_active = False
        self._is_paused = False

    @property
    def remaining_seconds(self) -> int:
        return self._remaining_seconds

    @property
    def total_seconds(self) -> int:
        return self._total_seconds

    @property
    def is_active(self) -> bool:
        return self._is_active

    @property
    def is_paused(self) -> bool:
        return self._is_paused

    @property
    def channel(self) -> Optional[BroadcastChannel[int]]:
        return self._channel

    @property
    def progress(self) -> float:
        if self._total_seconds == 0:
            return 0.0
        return 1.0 - (self._remaining_seconds / self._total_seconds)

    @property
    def formatted_time(self) -> str:
        return format_time(self._remaining_seconds)

    def snapshot(self) -> RestTimerState:
        return RestTimerState(
            remaining_seconds=self._remaining_seconds,
            total_seconds=self._total_seconds,
            is_active=self._is_active,
            is_paused=self._is_paused,
            progress=self.progress,
        )

    def start(
        self,
        duration_seconds: int,
        on_event: Optional[RemainingCallback] = None,
        on_done: Optional[DoneCallback] = None,
    ) -> BroadcastChannel[int]:
        self.cancel()
        self._driver = self._arm_driver()

        duration = max(0, int(duration_seconds))
        self._total_seconds = duration
        self._remaining_seconds = duration
        self._is_paused = False
        self._is_active = True

        channel: BroadcastChannel[int] = BroadcastChannel()
        self._channel = channel
        if on_event is not None or on_done is not None:
            channel.subscribe(on_event=on_event, on_done=on_done)

        channel.publish(self._remaining_seconds)

        return channel

    def tick(self) -> None:
        if not self._is_active or self._is_paused:
            return

        channel = self._channel
        self._remaining_seconds -= 1
        if self._remaining_seconds <= 0:
            self._remaining_seconds = 0
            self._publish()
            self._complete_if_current(channel)
        else:
            self._publish()

    def pause(self) -> None:
        if self._is_active and not self._is_paused:
            self._is_paused = True

    def resume(self) -> None:
        if self._is_active and self._is_paused:
            self._is_paused = False

    def cancel(self) -> None:
        self._stop_driver()
        channel, self._channel = self._channel, None

        self._remaining_seconds = 0
        self._total_seconds = 0
        self._is_paused = False
        self._is_active = False

        # Done listeners observe the reset state.
        if channel is not None:
            channel.close()

    def dispose(self) -> None:
        self.cancel()

    def add_time(self, seconds: int) -> None:
        """Grow (or shrink, when negative) both remaining and total time."""
        if not self._is_active:
            return

        self._remaining_seconds += seconds
        self._total_seconds += seconds
        if self._remaining_seconds < 0:
            self._remaining_seconds = 0

        channel = self._channel
        self._publish()
        if self._remaining_seconds == 0:
            self._complete_if_current(channel)

    def skip_to_time(self, seconds: int) -> None:
        """Jump to an absolute remaining time; total stays fixed."""
        if not self._is_active:
            return

        self._remaining_seconds = max(0, min(seconds, self._total_seconds))

        channel = self._channel
        self._publish()
        if self._remaining_seconds == 0:
            self._complete_if_current(channel)

    def _publish(self) -> None:
        if self._channel is not None:
            self._channel.publish(self._remaining_seconds)

    def _complete_if_current(self, channel: Optional[BroadcastChannel[int]]) -> None:
        # A listener may have cancelled or replaced the session while notified.
        if self._channel is channel and self._is_active and self._remaining_seconds == 0:
            self._complete()

    def _complete(self) -> None:
        self._stop_driver()
        self._is_active = False
        self._is_paused = False
        self._close_channel()

    def _arm_driver(self) -> Optional[PeriodicDriver]:
        if self._tick_interval is None:
            return None
        driver = PeriodicDriver(
            self.tick,
            interval=self._tick_interval,
            on_error=lambda _exc: self._on_driver_error(driver),
        )
        driver.start()
        return driver

    def _on_driver_error(self, driver: PeriodicDriver) -> None:
        if self._driver is driver:
            self.cancel()

    def _stop_driver(self) -> None:
        if self._driver is not None:
            self._driver.stop()
            self._driver = None

    def _close_channel(self) -> None:
        if self._channel is not None:
            self._channel.close()
