"""Common per-agent scoring terms for Soccar.

Each term is a function of one agent's view of the (previous, current)
state pair.  Velocity-based terms are normalised by the arena's maximum
speeds so that their natural range is roughly [-1, 1].
"""

from __future__ import annotations

import math

from servo.core.types import AgentID, Team
from servo.core.vec import dot, length, normalized
from servo.envs.soccar.constants import (
    BALL_MAX_SPEED,
    BLUE_GOAL_BACK,
    BOOST_MAX,
    CAR_MAX_SPEED,
    ORANGE_GOAL_BACK,
    kph_to_vel,
)
from servo.envs.soccar.state import GameState
from servo.rewards.base import ScoringTerm


# ---------------------------------------------------------------------------
# Movement
# ---------------------------------------------------------------------------

class AirReward(ScoringTerm):
    """1 while the car is off the ground."""

    def evaluate(self, previous_state: GameState, current_state: GameState, agent_id: AgentID) -> float:
        return 0.0 if current_state.player(agent_id).on_ground else 1.0


# ---------------------------------------------------------------------------
# Player-ball
# ---------------------------------------------------------------------------

class FaceBallReward(ScoringTerm):
    """Cosine between the car's nose and the direction to the ball."""

    def evaluate(self, previous_state: GameState, current_state: GameState, agent_id: AgentID) -> float:
        player = current_state.player(agent_id)
        dir_to_ball = normalized(current_state.ball.pos - player.pos)
        return dot(player.forward, dir_to_ball)


class VelocityPlayerToBallReward(ScoringTerm):
    """Car velocity projected on the direction to the ball, over max car speed."""

    def evaluate(self, previous_state: GameState, current_state: GameState, agent_id: AgentID) -> float:
        player = current_state.player(agent_id)
        dir_to_ball = normalized(current_state.ball.pos - player.pos)
        return dot(dir_to_ball, player.vel / CAR_MAX_SPEED)


class TouchBallReward(ScoringTerm):
    def evaluate(self, previous_state: GameState, current_state: GameState, agent_id: AgentID) -> float:
        return 1.0 if current_state.player(agent_id).ball_touched else 0.0


class StrongTouchReward(ScoringTerm):
    """Rewards touches by how hard they change the ball's velocity.

    Hits below min_kph score nothing; the value saturates at 1 for hits of
    max_kph or more.
    """

    def __init__(self, min_kph: float = 20.0, max_kph: float = 130.0) -> None:
        if not 0.0 <= min_kph < max_kph:
            raise ValueError(
                f"need 0 <= min_kph < max_kph, got min_kph={min_kph}, max_kph={max_kph}"
            )
        self.min_kph = min_kph
        self.max_kph = max_kph
        self._min_vel = kph_to_vel(min_kph)
        self._max_vel = kph_to_vel(max_kph)

    def evaluate(self, previous_state: GameState, current_state: GameState, agent_id: AgentID) -> float:
        if not current_state.player(agent_id).ball_touched:
            return 0.0
        hit_force = length(current_state.ball.vel - previous_state.ball.vel)
        if hit_force < self._min_vel:
            return 0.0
        return min(1.0, hit_force / self._max_vel)

    def __repr__(self) -> str:
        return f"StrongTouchReward(min_kph={self.min_kph}, max_kph={self.max_kph})"


# ---------------------------------------------------------------------------
# Ball-goal
# ---------------------------------------------------------------------------

class VelocityBallToGoalReward(ScoringTerm):
    """Ball velocity toward the opponent's net, over max ball speed.

    With own_goal=True the target is the agent's own net instead.
    """

    def __init__(self, own_goal: bool = False) -> None:
        self.own_goal = own_goal

    def evaluate(self, previous_state: GameState, current_state: GameState, agent_id: AgentID) -> float:
        team = current_state.team_of(agent_id)
        goal_team = team if self.own_goal else team.opponent
        target = ORANGE_GOAL_BACK if goal_team is Team.ORANGE else BLUE_GOAL_BACK
        ball = current_state.ball
        return dot(normalized(target - ball.pos), ball.vel / BALL_MAX_SPEED)

    def __repr__(self) -> str:
        return f"VelocityBallToGoalReward(own_goal={self.own_goal})"


# ---------------------------------------------------------------------------
# Boost
# ---------------------------------------------------------------------------

class PickupBoostReward(ScoringTerm):
    """Gain in sqrt(boost fraction); weights small pickups on an empty tank higher."""

    def evaluate(self, previous_state: GameState, current_state: GameState, agent_id: AgentID) -> float:
        boost = current_state.player(agent_id).boost
        prev_boost = previous_state.player(agent_id).boost
        if boost <= prev_boost:
            return 0.0
        return math.sqrt(boost / BOOST_MAX) - math.sqrt(prev_boost / BOOST_MAX)


class SaveBoostReward(ScoringTerm):
    def __init__(self, exponent: float = 0.5) -> None:
        self.exponent = exponent

    def evaluate(self, previous_state: GameState, current_state: GameState, agent_id: AgentID) -> float:
        return (current_state.player(agent_id).boost / BOOST_MAX) ** self.exponent

    def __repr__(self) -> str:
        return f"SaveBoostReward(exponent={self.exponent})"


# ---------------------------------------------------------------------------
# Game events
# ---------------------------------------------------------------------------

class GoalReward(ScoringTerm):
    """1 when the agent's team scores, concede_scale when it concedes."""

    def __init__(self, concede_scale: float = -1.0) -> None:
        self.concede_scale = concede_scale

    def evaluate(self, previous_state: GameState, current_state: GameState, agent_id: AgentID) -> float:
        if not current_state.goal_scored:
            return 0.0
        if current_state.scoring_team() is current_state.team_of(agent_id):
            return 1.0
        return self.concede_scale

    def __repr__(self) -> str:
        return f"GoalReward(concede_scale={self.concede_scale})"


class BumpReward(ScoringTerm):
    def evaluate(self, previous_state: GameState, current_state: GameState, agent_id: AgentID) -> float:
        return 1.0 if current_state.player(agent_id).bumped else 0.0


class DemoReward(ScoringTerm):
    def evaluate(self, previous_state: GameState, current_state: GameState, agent_id: AgentID) -> float:
        return 1.0 if current_state.player(agent_id).demoed_opponent else 0.0
