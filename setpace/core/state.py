"""Last observed timer state for one workout."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from setpace.workout.model import RestTimerState, TempoTimerState


@dataclass
class TimerHostState:
    rest: RestTimerState = field(default_factory=RestTimerState)
    tempo: TempoTimerState = field(default_factory=TempoTimerState)
    tempo_text: str | None = None
    last_update: datetime | None = None
