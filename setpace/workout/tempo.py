"""Tempo guidance: paces each rep through four timed phases.

Phase cycle per rep is eccentric -> bottom pause -> concentric -> top pause.
A pause of zero seconds is passed through without its own beat. A tempo
whose four phases are all zero completes one rep per tick.
"""

from __future__ import annotations

from typing import Callable, Optional

from setpace.core.broadcast import BroadcastChannel
from setpace.core.driver import PeriodicDriver
from setpace.workout.constants import TICK_INTERVAL_SEC
from setpace.workout.model import TempoBeat, TempoPhase, TempoSpec, TempoTimerState
from setpace.workout.parser import parse_tempo


BeatCallback = Callable[[TempoBeat], None]
DoneCallback = Callable[[], None]


class TempoPhaseEngine:
    def __init__(self, tick_interval: float | None = TICK_INTERVAL_SEC) -> None:
        self._tick_interval = tick_interval
        self._driver: Optional[PeriodicDriver] = None
        self._channel: Optional[BroadcastChannel[TempoBeat]] = None
        self._last_beat: Optional[TempoBeat] = None

        self._spec: Optional[TempoSpec] = None
        self._current_phase = TempoPhase.ECCENTRIC
        self._seconds_in_phase = 0
        self._current_rep = 1
        self._total_reps = 0
        self._is_active = False
        self._is_paused = False

    @property
    def is_active(self) -> bool:
        return self._is_active

    @property
    def is_paused(self) -> bool:
        return self._is_paused

    @property
    def spec(self) -> Optional[TempoSpec]:
        return self._spec

    @property
    def current_phase(self) -> TempoPhase:
        return self._current_phase

    @property
    def seconds_in_phase(self) -> int:
        return self._seconds_in_phase

    @property
    def current_rep(self) -> int:
        return self._current_rep

    @property
    def total_reps(self) -> int:
        return self._total_reps

    @property
    def channel(self) -> Optional[BroadcastChannel[TempoBeat]]:
        return self._channel

    @property
    def progress(self) -> float:
        """Progress within the current phase."""
        if self._spec is None:
            return 0.0
        return _phase_progress(self._seconds_in_phase, self._phase_duration())

    def snapshot(self) -> TempoTimerState:
        return TempoTimerState(
            is_active=self._is_active,
            is_paused=self._is_paused,
            current_rep=self._current_rep,
            total_reps=self._total_reps,
            tempo=self._spec,
            current_beat=self._last_beat,
        )

    def start(
        self,
        tempo: str | TempoSpec,
        reps: int,
        on_event: Optional[BeatCallback] = None,
        on_done: Optional[DoneCallback] = None,
    ) -> BroadcastChannel[TempoBeat]:
        self.stop()
        self._driver = self._arm_driver()

        self._spec = tempo if isinstance(tempo, TempoSpec) else parse_tempo(tempo)
        self._total_reps = max(1, int(reps))
        self._current_rep = 1
        self._current_phase = TempoPhase.ECCENTRIC
        self._seconds_in_phase = 0
        self._is_active = True
        self._is_paused = False

        channel: BroadcastChannel[TempoBeat] = BroadcastChannel()
        self._channel = channel
        if on_event is not None or on_done is not None:
            channel.subscribe(on_event=on_event, on_done=on_done)

        self._publish_beat()

        return channel

    def tick(self) -> None:
        if not self._is_active or self._is_paused:
            return
        assert self._spec is not None
        channel = self._channel

        if self._spec.time_under_tension == 0:
            self._complete_rep()
        else:
            self._seconds_in_phase += 1
            if self._seconds_in_phase >= self._phase_duration():
                self._advance_phase()

        if self._channel is channel:
            self._publish_beat()

    def pause(self) -> None:
        if self._is_active and not self._is_paused:
            self._is_paused = True

    def resume(self) -> None:
        if self._is_active and self._is_paused:
            self._is_paused = False

    def skip_to_next_rep(self) -> None:
        if not self._is_active:
            return
        channel = self._channel
        self._complete_rep()
        if self._channel is channel:
            self._publish_beat()

    def skip_to_rep(self, rep: int) -> None:
        if not self._is_active or rep < 1 or rep > self._total_reps:
            return
        self._current_rep = rep
        self._current_phase = TempoPhase.ECCENTRIC
        self._seconds_in_phase = 0
        self._publish_beat()

    def stop(self) -> None:
        self._stop_driver()
        channel, self._channel = self._channel, None

        self._spec = None
        self._last_beat = None
        self._current_phase = TempoPhase.ECCENTRIC
        self._seconds_in_phase = 0
        self._current_rep = 1
        self._total_reps = 0
        self._is_active = False
        self._is_paused = False

        if channel is not None:
            channel.close()

    def dispose(self) -> None:
        self.stop()

    def _phase_duration(self) -> int:
        assert self._spec is not None
        return self._spec.duration_of(self._current_phase)

    def _advance_phase(self) -> None:
        assert self._spec is not None
        self._seconds_in_phase = 0

        phase = self._current_phase
        if phase is TempoPhase.ECCENTRIC:
            if self._spec.bottom_pause == 0:
                self._current_phase = TempoPhase.CONCENTRIC
            else:
                self._current_phase = TempoPhase.BOTTOM_PAUSE
        elif phase is TempoPhase.BOTTOM_PAUSE:
            self._current_phase = TempoPhase.CONCENTRIC
        elif phase is TempoPhase.CONCENTRIC:
            if self._spec.top_pause == 0:
                self._complete_rep()
            else:
                self._current_phase = TempoPhase.TOP_PAUSE
        else:
            self._complete_rep()

    def _complete_rep(self) -> None:
        self._current_rep += 1
        self._seconds_in_phase = 0
        if self._current_rep > self._total_reps:
            self._complete()
        else:
            self._current_phase = TempoPhase.ECCENTRIC

    def _complete(self) -> None:
        self._stop_driver()
        self._is_active = False
        self._is_paused = False
        if self._channel is not None:
            self._channel.close()

    def _publish_beat(self) -> None:
        # Nothing goes out once the session has ended, even if a stale
        # driver still fires.
        if not self._is_active or self._channel is None:
            return
        duration = self._phase_duration()
        beat = TempoBeat(
            phase=self._current_phase,
            seconds_in_phase=self._seconds_in_phase,
            total_seconds_in_phase=duration,
            current_rep=self._current_rep,
            progress=_phase_progress(self._seconds_in_phase, duration),
        )
        self._last_beat = beat
        self._channel.publish(beat)

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
            self.stop()

    def _stop_driver(self) -> None:
        if self._driver is not None:
            self._driver.stop()
            self._driver = None


def _phase_progress(seconds_in_phase: int, duration: int) -> float:
    if duration <= 0:
        return 1.0
    return max(0.0, min(1.0, seconds_in_phase / duration))
