"""Reward aggregation.

A RewardAggregator holds an ordered sequence of WeightedTerm and turns a
(previous, current) pair of GameStates into one scalar per agent:

    reward(agent) = sum(weight_i * term_i.evaluate(prev, cur, agent))

Terms are pure functions of their inputs.  Errors raised inside a term
(TermEvaluationError for degenerate geometry, or anything else) are
propagated to the caller untouched.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable

from servo.core.types import AgentID
from servo.envs.soccar.state import GameState


class ScoringTerm(ABC):
    """A single reward signal evaluated for one agent on one step."""

    @abstractmethod
    def evaluate(
        self,
        previous_state: GameState,
        current_state: GameState,
        agent_id: AgentID,
    ) -> float:
        ...

    @property
    def name(self) -> str:
        return type(self).__name__

    def __repr__(self) -> str:
        return f"{self.name}()"


@dataclass(frozen=True, slots=True)
class WeightedTerm:
    """A scoring term paired with its scalar weight (any sign)."""

    term: ScoringTerm
    weight: float
    label: str | None = None

    @property
    def name(self) -> str:
        return self.label if self.label is not None else self.term.name


class RewardAggregator:
    """Combines weighted scoring terms into a single reward per agent."""

    def __init__(self, terms: Iterable[WeightedTerm]) -> None:
        self._terms: tuple[WeightedTerm, ...] = tuple(terms)

    @property
    def terms(self) -> tuple[WeightedTerm, ...]:
        return self._terms

    def __len__(self) -> int:
        return len(self._terms)

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def compute(
        self,
        previous_state: GameState,
        current_state: GameState,
        agent_id: AgentID,
    ) -> float:
        """Weighted sum of every term for one agent."""
        _check_population(previous_state, current_state)
        total = 0.0
        for wt in self._terms:
            total += wt.weight * wt.term.evaluate(previous_state, current_state, agent_id)
        return total

    def compute_all(
        self,
        previous_state: GameState,
        current_state: GameState,
    ) -> dict[AgentID, float]:
        """Rewards for every agent in the current state, in player order."""
        return {
            aid: self.compute(previous_state, current_state, aid)
            for aid in current_state.agent_ids()
        }

    def breakdown(
        self,
        previous_state: GameState,
        current_state: GameState,
        agent_id: AgentID,
    ) -> dict[str, float]:
        """Weighted contribution of each term, keyed by term name.

        Terms sharing a name are summed into one entry.
        """
        _check_population(previous_state, current_state)
        parts: dict[str, float] = {}
        for wt in self._terms:
            value = wt.weight * wt.term.evaluate(previous_state, current_state, agent_id)
            parts[wt.name] = parts.get(wt.name, 0.0) + value
        return parts

    def scaled(self, factor: float) -> RewardAggregator:
        """New aggregator with every weight multiplied by factor."""
        return RewardAggregator(
            WeightedTerm(wt.term, wt.weight * factor, wt.label) for wt in self._terms
        )

    def __repr__(self) -> str:
        inner = ", ".join(f"{wt.name}={wt.weight:g}" for wt in self._terms)
        return f"RewardAggregator({inner})"


def _check_population(previous_state: GameState, current_state: GameState) -> None:
    prev_ids = set(previous_state.agent_ids())
    cur_ids = set(current_state.agent_ids())
    if prev_ids != cur_ids:
        raise ValueError(
            "previous and current states describe different agents "
            f"({sorted(prev_ids ^ cur_ids)} not in both)."
        )
