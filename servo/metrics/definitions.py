"""Metric names reported by the step-batch reporter.

Names are a stable contract with downstream dashboards: renaming one is a
breaking change.
"""

from __future__ import annotations

from enum import Enum


# ---------------------------------------------------------------------------
# Per-player metrics (sampled through the gate)
# ---------------------------------------------------------------------------

IN_AIR_RATIO = "Player/In Air Ratio"
BALL_TOUCH_RATIO = "Player/Ball Touch Ratio"
DEMOED_RATIO = "Player/Demoed Ratio"
SPEED = "Player/Speed"
SPEED_TOWARDS_BALL = "Player/Speed Towards Ball"
BOOST = "Player/Boost"
TOUCH_HEIGHT = "Player/Touch Height"

PLAYER_METRIC_KEYS: list[str] = [
    IN_AIR_RATIO,
    BALL_TOUCH_RATIO,
    DEMOED_RATIO,
    SPEED,
    SPEED_TOWARDS_BALL,
    BOOST,
    TOUCH_HEIGHT,
]


# ---------------------------------------------------------------------------
# Game metrics (recorded every step)
# ---------------------------------------------------------------------------

GOAL_SPEED = "Game/Goal Speed"

GAME_METRIC_KEYS: list[str] = [GOAL_SPEED]


# ---------------------------------------------------------------------------
# Semantic event types (replay driver)
# ---------------------------------------------------------------------------

class EventType(Enum):
    """Semantic events emitted during a replay."""

    EPISODE_END = "episode_end"


EVENT_SCHEMAS: dict[str, dict[str, str]] = {
    EventType.EPISODE_END.value: {
        "event": "str",
        "step": "int",
        "env_index": "int",
        "reason": "str",
    },
}
