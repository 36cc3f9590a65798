"""Terminal CLI for the setpace rest and tempo timers."""

from __future__ import annotations

import argparse
import asyncio

from setpace.core.engine import WorkoutTimers
from setpace.workout.constants import TEMPO_PRESETS, TICK_INTERVAL_SEC
from setpace.workout.model import TempoBeat, format_time
from setpace.workout.parser import parse_tempo, resolve_tempo, set_time_under_tension


def _positive_float(raw: str) -> float:
    try:
        value = float(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {raw!r}") from exc
    if value <= 0:
        raise argparse.ArgumentTypeError("must be > 0")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="setpace rest and tempo timers")
    parser.add_argument(
        "--rest",
        type=int,
        default=None,
        metavar="SECONDS",
        help="Run a rest countdown of the given length",
    )
    parser.add_argument(
        "--tempo",
        default=None,
        help=(
            "Run tempo guidance, e.g. 3-0-1-0, 3010 or a preset "
            f"({', '.join(sorted(TEMPO_PRESETS))})"
        ),
    )
    parser.add_argument("--reps", type=int, default=8, help="Reps for --tempo/--info")
    parser.add_argument(
        "--info",
        default=None,
        metavar="TEMPO",
        help="Print parsed tempo phases and time under tension, then exit",
    )
    parser.add_argument(
        "--tick-interval",
        type=_positive_float,
        default=TICK_INTERVAL_SEC,
        help="Seconds between timer ticks (shorten for demos)",
    )
    return parser


def print_tempo_info(tempo: str, reps: int) -> int:
    notation = resolve_tempo(tempo)
    spec = parse_tempo(notation)
    print(
        f"Tempo {notation}: eccentric={spec.eccentric}s bottom={spec.bottom_pause}s "
        f"concentric={spec.concentric}s top={spec.top_pause}s"
    )
    print(
        f"Time under tension: {spec.time_under_tension}s per rep, "
        f"{set_time_under_tension(spec, reps)}s for {reps} reps"
    )
    return 0


def _format_beat(beat: TempoBeat, total_reps: int) -> str:
    return (
        f"Rep {beat.current_rep}/{total_reps} | {beat.phase_name:<11} "
        f"{beat.seconds_in_phase}/{beat.total_seconds_in_phase}s "
        f"| {beat.progress * 100:.0f}%"
    )


async def run_rest(duration_seconds: int, tick_interval: float) -> int:
    timers = WorkoutTimers(tick_interval=tick_interval)
    finished = asyncio.Event()

    def on_tick(remaining: int) -> None:
        progress = timers.rest.progress * 100
        print(f"Rest: {format_time(remaining)} | progress {progress:.0f}%")

    try:
        timers.start_rest(duration_seconds, on_tick=on_tick, on_done=finished.set)
        await finished.wait()
        print("Rest complete")
    finally:
        timers.dispose()
    return 0


async def run_tempo(tempo: str, reps: int, tick_interval: float) -> int:
    timers = WorkoutTimers(tick_interval=tick_interval)
    finished = asyncio.Event()
    total_reps = max(1, reps)

    try:
        timers.start_tempo(
            tempo,
            reps,
            on_beat=lambda beat: print(_format_beat(beat, total_reps)),
            on_done=finished.set,
        )
        await finished.wait()
        print(f"Set complete: {total_reps} reps")
    finally:
        timers.dispose()
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.info is not None:
        return print_tempo_info(args.info, args.reps)

    try:
        if args.rest is not None:
            return asyncio.run(run_rest(args.rest, args.tick_interval))
        if args.tempo is not None:
            return asyncio.run(run_tempo(args.tempo, args.reps, args.tick_interval))
    except KeyboardInterrupt:
        print("Timer cancelled")
        return 0

    parser.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
