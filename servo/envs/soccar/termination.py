"""Terminal conditions for the Soccar arena.

Two conditions are supported:
  1. no_touch     — nobody touched the ball for a configured number of seconds
  2. goal_scored  — a goal was scored this step

Conditions are per-arena objects; the stepping loop owns one set per
environment and calls reset() at the start of every episode.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from servo.config.schema import ServoConfig
from servo.core.types import TerminationReason
from servo.envs.soccar.constants import TICK_RATE
from servo.envs.soccar.state import GameState


class TerminalCondition(ABC):
    """Decides whether an episode is over."""

    @property
    @abstractmethod
    def reason(self) -> TerminationReason:
        ...

    def reset(self, initial_state: GameState) -> None:
        """Called once at the start of each episode."""

    @abstractmethod
    def is_terminal(self, state: GameState) -> bool:
        ...


class NoTouchCondition(TerminalCondition):
    """Terminal once no player has touched the ball for timeout_seconds.

    Counts steps, so the timeout is converted through tick_skip: one step
    covers tick_skip physics ticks.
    """

    def __init__(
        self,
        timeout_seconds: float,
        tick_skip: int = 8,
        tick_rate: int = TICK_RATE,
    ) -> None:
        if timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {timeout_seconds}")
        if tick_skip < 1:
            raise ValueError(f"tick_skip must be >= 1, got {tick_skip}")
        self.timeout_seconds = timeout_seconds
        self.max_steps = int(timeout_seconds * tick_rate / tick_skip)
        self._steps_since_touch = 0

    @property
    def reason(self) -> TerminationReason:
        return TerminationReason.NO_TOUCH

    @property
    def steps_since_touch(self) -> int:
        return self._steps_since_touch

    def reset(self, initial_state: GameState) -> None:
        self._steps_since_touch = 0

    def is_terminal(self, state: GameState) -> bool:
        if any(p.ball_touched for p in state.players):
            self._steps_since_touch = 0
            return False
        self._steps_since_touch += 1
        return self._steps_since_touch >= self.max_steps


class GoalScoreCondition(TerminalCondition):
    @property
    def reason(self) -> TerminationReason:
        return TerminationReason.GOAL_SCORED

    def is_terminal(self, state: GameState) -> bool:
        return state.goal_scored


def check_termination(
    conditions: Sequence[TerminalCondition],
    state: GameState,
) -> TerminationReason | None:
    """Return the first applicable termination reason, or None.

    Every condition is evaluated, even after one fires, so that stateful
    counters stay in step with the episode.
    """
    fired: TerminationReason | None = None
    for cond in conditions:
        if cond.is_terminal(state) and fired is None:
            fired = cond.reason
    return fired


def build_conditions(config: ServoConfig) -> list[TerminalCondition]:
    """Instantiate the terminal conditions described by config."""
    term = config.terminal
    conditions: list[TerminalCondition] = []
    if term.no_touch_timeout_seconds is not None:
        conditions.append(
            NoTouchCondition(
                term.no_touch_timeout_seconds,
                tick_skip=config.identity.tick_skip,
                tick_rate=config.identity.tick_rate,
            )
        )
    if term.goal_score:
        conditions.append(GoalScoreCondition())
    return conditions
