"""Timing defaults and named tempo presets."""

from __future__ import annotations

TICK_INTERVAL_SEC = 1.0

DEFAULT_REST_SEC = 90

# Fallback value per tempo field when a dashed part does not parse.
DEFAULT_ECCENTRIC_SEC = 3
DEFAULT_BOTTOM_PAUSE_SEC = 0
DEFAULT_CONCENTRIC_SEC = 1
DEFAULT_TOP_PAUSE_SEC = 0

DEFAULT_TEMPO = "3-0-1-0"

# "X" marks an explosive lift; it parses to the concentric default.
TEMPO_PRESETS: dict[str, str] = {
    "hypertrophy": "3-0-1-0",
    "strength": "2-1-X-0",
    "endurance": "1-0-1-0",
}
