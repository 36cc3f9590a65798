"""Tempo notation parser ("3-0-1-0" or "3010")."""

from __future__ import annotations

import string

from setpace.workout.constants import (
    DEFAULT_BOTTOM_PAUSE_SEC,
    DEFAULT_CONCENTRIC_SEC,
    DEFAULT_ECCENTRIC_SEC,
    DEFAULT_TOP_PAUSE_SEC,
    TEMPO_PRESETS,
)
from setpace.workout.model import TempoSpec


DEFAULT_TEMPO_SPEC = TempoSpec(
    eccentric=DEFAULT_ECCENTRIC_SEC,
    bottom_pause=DEFAULT_BOTTOM_PAUSE_SEC,
    concentric=DEFAULT_CONCENTRIC_SEC,
    top_pause=DEFAULT_TOP_PAUSE_SEC,
)


def parse_tempo(text: str) -> TempoSpec:
    """Parse tempo notation into four phase durations.

    Never raises: malformed input resolves to the default tempo, and in
    the dashed form only the unparsable fields fall back.
    """
    compact = "".join(str(text).split())

    if "-" in compact:
        parts = compact.split("-")
        if len(parts) == 4:
            return TempoSpec(
                eccentric=_parse_field(parts[0], DEFAULT_ECCENTRIC_SEC),
                bottom_pause=_parse_field(parts[1], DEFAULT_BOTTOM_PAUSE_SEC),
                concentric=_parse_field(parts[2], DEFAULT_CONCENTRIC_SEC),
                top_pause=_parse_field(parts[3], DEFAULT_TOP_PAUSE_SEC),
            )

    if len(compact) == 4 and all(ch in string.digits for ch in compact):
        return TempoSpec(*(int(ch) for ch in compact))

    return DEFAULT_TEMPO_SPEC


def resolve_tempo(name_or_text: str) -> str:
    """Map a preset name (e.g. ``strength``) to its notation."""
    key = name_or_text.strip().lower()
    return TEMPO_PRESETS.get(key, name_or_text)


def time_under_tension(tempo: str | TempoSpec) -> int:
    return _as_spec(tempo).time_under_tension


def set_time_under_tension(tempo: str | TempoSpec, reps: int) -> int:
    return time_under_tension(tempo) * reps


def _as_spec(tempo: str | TempoSpec) -> TempoSpec:
    if isinstance(tempo, TempoSpec):
        return tempo
    return parse_tempo(tempo)


def _parse_field(raw: str, default: int) -> int:
    if not raw or not all(ch in string.digits for ch in raw):
        return default
    return int(raw)
