"""Step-batch metrics reporter.

Called once per synchronized step across every parallel arena.  Per-player
metrics cost O(players x arenas), so they are only computed on a random
fraction of calls (gate_probability, 1/4 by default); trend-level accuracy
is all the dashboards need.  Goal speed is recorded on every call.

The reporter mutates only the Report it is handed; it never resets it and
never touches the states.
"""

from __future__ import annotations

import threading

import numpy as np

from servo.core.seeding import make_rng, thread_rng
from servo.core.vec import dot, length, safe_normalized
from servo.envs.soccar.state import GameStateBatch
from servo.metrics import definitions as m
from servo.metrics.report import Report


class MetricsReporter:
    """Fills a Report from batches of GameStates."""

    def __init__(
        self,
        gate_probability: float = 0.25,
        seed: int | None = None,
    ) -> None:
        if not 0.0 <= gate_probability <= 1.0:
            raise ValueError(
                f"gate_probability must be in [0, 1], got {gate_probability}"
            )
        self.gate_probability = gate_probability
        # A seeded generator belongs to one worker; without a seed the
        # calling thread's generator is used per call
        self._rng: np.random.Generator | None = (
            make_rng(seed) if seed is not None else None
        )
        self._local = threading.local()

    @property
    def last_gate_open(self) -> bool:
        """Gate outcome of this reporter's most recent call on the calling thread."""
        return getattr(self._local, "gate_open", False)

    def on_step_batch(
        self,
        states: GameStateBatch,
        report: Report,
        rng: np.random.Generator | None = None,
    ) -> Report:
        """Accumulate this step's metrics into report and return it."""
        if rng is None:
            rng = self._rng if self._rng is not None else thread_rng()
        expensive = bool(rng.random() < self.gate_probability)
        self._local.gate_open = expensive

        for state in states:
            if expensive:
                ball = state.ball
                for player in state.players:
                    report.add_avg(m.IN_AIR_RATIO, not player.on_ground)
                    report.add_avg(m.BALL_TOUCH_RATIO, player.ball_touched)
                    report.add_avg(m.DEMOED_RATIO, player.demoed)

                    report.add_avg(m.SPEED, length(player.vel))
                    # Moving away from the ball counts as zero, not negative
                    dir_to_ball = safe_normalized(ball.pos - player.pos)
                    report.add_avg(m.SPEED_TOWARDS_BALL, max(0.0, dot(player.vel, dir_to_ball)))

                    report.add_avg(m.BOOST, player.boost)

                    if player.ball_touched:
                        report.add_avg(m.TOUCH_HEIGHT, ball.pos[2])

            if state.goal_scored:
                report.add_avg(m.GOAL_SPEED, length(state.ball.vel))

        return report
