"""Soccar arena constants (Unreal units, uu/s)."""

from __future__ import annotations

from servo.core.vec import vec3

CAR_MAX_SPEED = 2300.0
BALL_MAX_SPEED = 6000.0
BOOST_MAX = 100.0

TICK_RATE = 120  # physics ticks per second

# Back of the net at mid goal height: the aim point for ball-to-goal shaping.
BACK_NET_Y = 6000.0
GOAL_HEIGHT = 642.775
ORANGE_GOAL_BACK = vec3(0.0, BACK_NET_Y, GOAL_HEIGHT / 2)
BLUE_GOAL_BACK = vec3(0.0, -BACK_NET_Y, GOAL_HEIGHT / 2)


def kph_to_vel(kph: float) -> float:
    """Convert km/h to uu/s (1 uu = 1 cm)."""
    return kph / 0.036
