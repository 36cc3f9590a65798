"""Timing domain models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TempoPhase(Enum):
    ECCENTRIC = "eccentric"
    BOTTOM_PAUSE = "bottom_pause"
    CONCENTRIC = "concentric"
    TOP_PAUSE = "top_pause"

    @property
    def label(self) -> str:
        return _PHASE_LABELS[self]


_PHASE_LABELS: dict[TempoPhase, str] = {
    TempoPhase.ECCENTRIC: "Lower",
    TempoPhase.BOTTOM_PAUSE: "Hold Bottom",
    TempoPhase.CONCENTRIC: "Lift",
    TempoPhase.TOP_PAUSE: "Hold Top",
}


@dataclass(frozen=True)
class TempoSpec:
    eccentric: int
    bottom_pause: int
    concentric: int
    top_pause: int

    @property
    def time_under_tension(self) -> int:
        return self.eccentric + self.bottom_pause + self.concentric + self.top_pause

    def duration_of(self, phase: TempoPhase) -> int:
        if phase is TempoPhase.ECCENTRIC:
            return self.eccentric
        if phase is TempoPhase.BOTTOM_PAUSE:
            return self.bottom_pause
        if phase is TempoPhase.CONCENTRIC:
            return self.concentric
        return self.top_pause

    def as_tuple(self) -> tuple[int, int, int, int]:
        return (self.eccentric, self.bottom_pause, self.concentric, self.top_pause)

    @property
    def notation(self) -> str:
        return "-".join(str(value) for value in self.as_tuple())


@dataclass(frozen=True)
class TempoBeat:
    phase: TempoPhase
    seconds_in_phase: int
    total_seconds_in_phase: int
    current_rep: int
    progress: float  # 0.0..1.0 within the current phase

    @property
    def phase_name(self) -> str:
        return self.phase.label


@dataclass(frozen=True)
class RestTimerState:
    remaining_seconds: int = 0
    total_seconds: int = 0
    is_active: bool = False
    is_paused: bool = False
    progress: float = 0.0

    @property
    def formatted_time(self) -> str:
        return format_time(self.remaining_seconds)


@dataclass(frozen=True)
class TempoTimerState:
    is_active: bool = False
    is_paused: bool = False
    current_rep: int = 0
    total_reps: int = 0
    tempo: TempoSpec | None = None
    current_beat: TempoBeat | None = None

    @property
    def total_time_under_tension(self) -> int:
        if self.tempo is None:
            return 0
        return self.tempo.time_under_tension * self.total_reps


def format_time(seconds: int) -> str:
    """Render a second count as zero-padded ``MM:SS``."""
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{secs:02d}"
