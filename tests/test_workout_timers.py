from __future__ import annotations

import asyncio

from setpace.core.engine import WorkoutTimers
from setpace.workout.model import RestTimerState, TempoBeat, TempoSpec, TempoTimerState


def test_rest_state_mirrors_engine_including_pause() -> None:
    timers = WorkoutTimers(tick_interval=None)
    ticks: list[int] = []

    timers.start_rest(30, on_tick=ticks.append)
    assert timers.state.rest.remaining_seconds == 30
    assert timers.state.rest.formatted_time == "00:30"
    assert timers.state.last_update is not None

    timers.rest.tick()
    assert timers.state.rest.remaining_seconds == 29

    timers.pause_rest()
    assert timers.state.rest.is_paused is True
    timers.resume_rest()
    assert timers.state.rest.is_paused is False

    timers.add_rest_time(15)
    assert timers.state.rest.total_seconds == 45
    timers.skip_rest_to(10)
    assert timers.state.rest.remaining_seconds == 10

    timers.cancel_rest()
    assert timers.state.rest == RestTimerState()
    assert ticks == [30, 29, 44, 10]


def test_rest_completion_updates_state_and_fires_done() -> None:
    timers = WorkoutTimers(tick_interval=None)
    done: list[bool] = []
    timers.start_rest(2, on_done=lambda: done.append(True))

    timers.rest.tick()
    timers.rest.tick()

    assert done == [True]
    assert timers.state.rest.is_active is False
    assert timers.state.rest.progress == 1.0
    assert timers.is_running is False


def test_restarting_rest_fires_only_previous_done_callback() -> None:
    timers = WorkoutTimers(tick_interval=None)
    calls: list[str] = []

    timers.start_rest(60, on_done=lambda: calls.append("first"))
    timers.start_rest(20, on_done=lambda: calls.append("second"))

    assert calls == ["first"]
    assert timers.state.rest.remaining_seconds == 20
    assert timers.state.rest.is_active is True


def test_tempo_preset_and_state_mirror() -> None:
    timers = WorkoutTimers(tick_interval=None)
    beats: list[TempoBeat] = []

    timers.start_tempo("strength", 2, on_beat=beats.append)

    assert timers.state.tempo_text == "2-1-X-0"
    assert timers.state.tempo.tempo == TempoSpec(2, 1, 1, 0)
    assert timers.state.tempo.total_time_under_tension == 8
    assert timers.state.tempo.current_beat == beats[-1]

    timers.skip_to_next_rep()
    assert timers.state.tempo.current_rep == 2
    timers.skip_to_rep(1)
    assert timers.state.tempo.current_rep == 1

    timers.pause_tempo()
    assert timers.state.tempo.is_paused is True
    timers.resume_tempo()

    timers.stop_tempo()
    assert timers.state.tempo == TempoTimerState(current_rep=1)
    assert timers.state.tempo_text is None


def test_instances_do_not_share_state() -> None:
    first = WorkoutTimers(tick_interval=None)
    second = WorkoutTimers(tick_interval=None)

    first.start_rest(90)
    first.start_tempo("3-0-1-0", 8)

    assert second.rest.is_active is False
    assert second.tempo.is_active is False
    assert second.state.rest == RestTimerState()


def test_dispose_ends_both_sessions() -> None:
    timers = WorkoutTimers(tick_interval=None)
    rest_channel = timers.start_rest(90)
    tempo_channel = timers.start_tempo("3-0-1-0", 8)

    timers.dispose()

    assert rest_channel.closed
    assert tempo_channel.closed
    assert timers.is_running is False


def test_rest_and_tempo_run_side_by_side() -> None:
    async def _run() -> None:
        timers = WorkoutTimers(tick_interval=0.01)
        rest_done = asyncio.Event()
        tempo_done = asyncio.Event()
        ticks: list[int] = []
        beats: list[TempoBeat] = []

        timers.start_rest(4, on_tick=ticks.append, on_done=rest_done.set)
        channel = timers.start_tempo("1-1-1-1", 2, on_beat=beats.append, on_done=tempo_done.set)
        observer = channel.subscribe()

        await asyncio.wait_for(rest_done.wait(), timeout=2.0)
        await asyncio.wait_for(tempo_done.wait(), timeout=2.0)

        assert ticks == [4, 3, 2, 1, 0]
        assert len(beats) == 8
        # Attached after the initial beat, so it saw everything but that one.
        assert [beat async for beat in observer] == beats[1:]
        assert timers.is_running is False

        timers.dispose()

    asyncio.run(_run())


def test_tempo_accepts_parsed_spec() -> None:
    timers = WorkoutTimers(tick_interval=None)
    beats: list[TempoBeat] = []

    timers.start_tempo(TempoSpec(4, 1, 2, 0), 3, on_beat=beats.append)

    assert timers.state.tempo_text == "4-1-2-0"
    assert timers.state.tempo.tempo == TempoSpec(4, 1, 2, 0)
    assert timers.state.tempo.total_time_under_tension == 21
    assert beats[0].total_seconds_in_phase == 4
