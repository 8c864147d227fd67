"""Zero-sum wrapper for scoring terms.

Turns a per-agent term into a competitive signal: the agent is charged
the mean value the inner term hands out to the opposing team, so both
sides cannot profit from the same undifferentiated quantity.

    own * (1 - team_spirit)
      + team_spirit * mean(inner over own team)
      - spread * mean(inner over opponents)

With the default team_spirit=0 this reduces to
``inner(agent) - spread * mean(inner(opponents))``.  When the arena has
no opponents (single-team training) the subtracted mean is zero.
"""

from __future__ import annotations

from servo.core.types import AgentID
from servo.envs.soccar.state import GameState
from servo.rewards.base import ScoringTerm


class ZeroSumReward(ScoringTerm):
    def __init__(
        self,
        inner: ScoringTerm,
        team_spirit: float = 0.0,
        spread: float = 1.0,
    ) -> None:
        if not 0.0 <= team_spirit <= 1.0:
            raise ValueError(f"team_spirit must be in [0, 1], got {team_spirit}")
        if spread < 0.0:
            raise ValueError(f"spread must be >= 0, got {spread}")
        self.inner = inner
        self.team_spirit = team_spirit
        self.spread = spread

    @property
    def name(self) -> str:
        return f"ZeroSum({self.inner.name})"

    def evaluate(
        self,
        previous_state: GameState,
        current_state: GameState,
        agent_id: AgentID,
    ) -> float:
        team = current_state.team_of(agent_id)
        own = self.inner.evaluate(previous_state, current_state, agent_id)

        teammates: list[float] = []
        opponents: list[float] = []
        for p in current_state.players:
            if p.team is not team:
                opponents.append(
                    self.inner.evaluate(previous_state, current_state, p.agent_id)
                )
            elif self.team_spirit != 0.0:
                value = (
                    own if p.agent_id == agent_id
                    else self.inner.evaluate(previous_state, current_state, p.agent_id)
                )
                teammates.append(value)

        if self.team_spirit != 0.0:
            reward = (
                own * (1.0 - self.team_spirit)
                + self.team_spirit * sum(teammates) / len(teammates)
            )
        else:
            reward = own

        if opponents:
            reward -= self.spread * (sum(opponents) / len(opponents))
        return reward

    def __repr__(self) -> str:
        return (
            f"ZeroSumReward({self.inner!r}, team_spirit={self.team_spirit}, "
            f"spread={self.spread})"
        )
