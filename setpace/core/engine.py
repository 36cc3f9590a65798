"""Per-workout owner of the rest and tempo timers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Optional

from setpace.core.broadcast import BroadcastChannel
from setpace.core.state import TimerHostState
from setpace.workout.constants import DEFAULT_REST_SEC, DEFAULT_TEMPO, TICK_INTERVAL_SEC
from setpace.workout.model import TempoBeat, TempoSpec
from setpace.workout.parser import resolve_tempo
from setpace.workout.rest_timer import RestCountdownEngine
from setpace.workout.tempo import TempoPhaseEngine


class WorkoutTimers:
    """Drives one rest countdown and one tempo guide for a single workout.

    Create one instance per workout; nothing is shared between instances.
    ``state`` mirrors what the engines last reported, including pause
    changes that do not produce events.
    """

    def __init__(
        self,
        tick_interval: float | None = TICK_INTERVAL_SEC,
        rest: RestCountdownEngine | None = None,
        tempo: TempoPhaseEngine | None = None,
    ) -> None:
        self.rest = rest or RestCountdownEngine(tick_interval=tick_interval)
        self.tempo = tempo or TempoPhaseEngine(tick_interval=tick_interval)
        self.state = TimerHostState()
        self._on_rest_tick: Optional[Callable[[int], None]] = None
        self._on_rest_done: Optional[Callable[[], None]] = None
        self._on_beat: Optional[Callable[[TempoBeat], None]] = None
        self._on_tempo_done: Optional[Callable[[], None]] = None

    # ----- Rest -----
    def start_rest(
        self,
        duration_seconds: int = DEFAULT_REST_SEC,
        on_tick: Optional[Callable[[int], None]] = None,
        on_done: Optional[Callable[[], None]] = None,
    ) -> BroadcastChannel[int]:
        # The previous done callback must fire before the new ones are installed.
        self.rest.cancel()
        self._on_rest_tick = on_tick
        self._on_rest_done = on_done
        channel = self.rest.start(
            duration_seconds,
            on_event=self._handle_rest_tick,
            on_done=self._handle_rest_done,
        )
        self._refresh_rest()
        return channel

    def pause_rest(self) -> None:
        self.rest.pause()
        self._refresh_rest()

    def resume_rest(self) -> None:
        self.rest.resume()
        self._refresh_rest()

    def cancel_rest(self) -> None:
        self.rest.cancel()
        self._refresh_rest()

    def add_rest_time(self, seconds: int) -> None:
        self.rest.add_time(seconds)
        self._refresh_rest()

    def skip_rest_to(self, seconds: int) -> None:
        self.rest.skip_to_time(seconds)
        self._refresh_rest()

    # ----- Tempo -----
    def start_tempo(
        self,
        tempo: str | TempoSpec = DEFAULT_TEMPO,
        reps: int = 1,
        on_beat: Optional[Callable[[TempoBeat], None]] = None,
        on_done: Optional[Callable[[], None]] = None,
    ) -> BroadcastChannel[TempoBeat]:
        self.tempo.stop()
        self._on_beat = on_beat
        self._on_tempo_done = on_done
        if isinstance(tempo, TempoSpec):
            self.state.tempo_text = tempo.notation
        else:
            tempo = resolve_tempo(tempo)
            self.state.tempo_text = tempo
        channel = self.tempo.start(
            tempo,
            reps,
            on_event=self._handle_beat,
            on_done=self._handle_tempo_done,
        )
        self._refresh_tempo()
        return channel

    def pause_tempo(self) -> None:
        self.tempo.pause()
        self._refresh_tempo()

    def resume_tempo(self) -> None:
        self.tempo.resume()
        self._refresh_tempo()

    def stop_tempo(self) -> None:
        self.tempo.stop()
        self.state.tempo_text = None
        self._refresh_tempo()

    def skip_to_next_rep(self) -> None:
        self.tempo.skip_to_next_rep()
        self._refresh_tempo()

    def skip_to_rep(self, rep: int) -> None:
        self.tempo.skip_to_rep(rep)
        self._refresh_tempo()

    def dispose(self) -> None:
        self.rest.dispose()
        self.tempo.dispose()
        self.state.tempo_text = None
        self._refresh_rest()
        self._refresh_tempo()

    @property
    def is_running(self) -> bool:
        return self.rest.is_active or self.tempo.is_active

    # ----- Engine listeners -----
    def _handle_rest_tick(self, remaining: int) -> None:
        self._refresh_rest()
        if self._on_rest_tick is not None:
            self._on_rest_tick(remaining)

    def _handle_rest_done(self) -> None:
        self._refresh_rest()
        callback, self._on_rest_done = self._on_rest_done, None
        if callback is not None:
            callback()

    def _handle_beat(self, beat: TempoBeat) -> None:
        self._refresh_tempo()
        if self._on_beat is not None:
            self._on_beat(beat)

    def _handle_tempo_done(self) -> None:
        self._refresh_tempo()
        callback, self._on_tempo_done = self._on_tempo_done, None
        if callback is not None:
            callback()

    def _refresh_rest(self) -> None:
        self.state.rest = self.rest.snapshot()
        self.state.last_update = datetime.now(tz=timezone.utc)

    def _refresh_tempo(self) -> None:
        self.state.tempo = self.tempo.snapshot()
        self.state.last_update = datetime.now(tz=timezone.utc)
