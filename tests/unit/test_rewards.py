"""Tests for RewardAggregator and the common Soccar scoring terms."""

from __future__ import annotations

import pytest

from servo.core.types import AgentID, Team, TermEvaluationError
from servo.core.vec import vec3
from servo.envs.soccar.constants import (
    BACK_NET_Y,
    BALL_MAX_SPEED,
    BLUE_GOAL_BACK,
    CAR_MAX_SPEED,
    GOAL_HEIGHT,
    ORANGE_GOAL_BACK,
    kph_to_vel,
)
from servo.envs.soccar.state import BallState, GameState, PlayerState
from servo.rewards.base import RewardAggregator, ScoringTerm, WeightedTerm
from servo.rewards.common import (
    AirReward,
    BumpReward,
    DemoReward,
    FaceBallReward,
    GoalReward,
    PickupBoostReward,
    SaveBoostReward,
    StrongTouchReward,
    TouchBallReward,
    VelocityBallToGoalReward,
    VelocityPlayerToBallReward,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _player(agent_id: str = "blue_0", team: Team = Team.BLUE, **kw) -> PlayerState:
    return PlayerState(agent_id=agent_id, team=team, **kw)


def _state(*players: PlayerState, ball: BallState | None = None, **kw) -> GameState:
    return GameState(players=tuple(players), ball=ball or BallState(pos=vec3(0, 0, 92.75)), **kw)


def _one_v_one(**blue_kw) -> GameState:
    return _state(
        _player("blue_0", Team.BLUE, pos=vec3(0, -1000, 17), **blue_kw),
        _player("orange_0", Team.ORANGE, pos=vec3(0, 1000, 17)),
    )


class _Constant(ScoringTerm):
    def __init__(self, value: float) -> None:
        self.value = value

    def evaluate(self, previous_state: GameState, current_state: GameState, agent_id: AgentID) -> float:
        return self.value


class _Degenerate(ScoringTerm):
    def evaluate(self, previous_state: GameState, current_state: GameState, agent_id: AgentID) -> float:
        raise TermEvaluationError("zero-length direction")


# ---------------------------------------------------------------------------
# Aggregator
# ---------------------------------------------------------------------------

class TestAggregator:
    def test_weighted_sum(self):
        agg = RewardAggregator([
            WeightedTerm(_Constant(1.0), 0.5),
            WeightedTerm(_Constant(2.0), 3.0),
            WeightedTerm(_Constant(4.0), -0.25),
        ])
        s = _one_v_one()
        assert agg.compute(s, s, "blue_0") == pytest.approx(0.5 + 6.0 - 1.0)

    def test_empty_aggregator_returns_zero(self):
        s = _one_v_one()
        assert RewardAggregator([]).compute(s, s, "blue_0") == 0.0

    def test_deterministic(self):
        agg = RewardAggregator([
            WeightedTerm(FaceBallReward(), 1.0),
            WeightedTerm(VelocityPlayerToBallReward(), 8.0),
            WeightedTerm(VelocityBallToGoalReward(), 4.0),
        ])
        prev = _one_v_one(vel=vec3(100, 500, 0))
        cur = _one_v_one(vel=vec3(120, 700, 0), forward=vec3(0.6, 0.8, 0))
        first = agg.compute(prev, cur, "blue_0")
        for _ in range(20):
            assert agg.compute(prev, cur, "blue_0") == first

    def test_linear_in_weights(self):
        agg = RewardAggregator([
            WeightedTerm(FaceBallReward(), 1.0),
            WeightedTerm(VelocityPlayerToBallReward(), 8.0),
            WeightedTerm(AirReward(), 0.1),
        ])
        prev = _one_v_one()
        cur = _one_v_one(vel=vec3(0, 900, 0), on_ground=False)
        base = agg.compute(prev, cur, "blue_0")
        for k in (2.0, -3.0, 0.5, 0.0):
            assert agg.scaled(k).compute(prev, cur, "blue_0") == pytest.approx(k * base)

    def test_breakdown_sums_to_compute(self):
        agg = RewardAggregator([
            WeightedTerm(FaceBallReward(), 1.0),
            WeightedTerm(AirReward(), 0.1),
            WeightedTerm(TouchBallReward(), 0.1, label="touch"),
        ])
        s = _one_v_one(on_ground=False, ball_touched=True)
        parts = agg.breakdown(s, s, "blue_0")
        assert list(parts) == ["FaceBallReward", "AirReward", "touch"]
        assert sum(parts.values()) == pytest.approx(agg.compute(s, s, "blue_0"))

    def test_compute_all_covers_every_agent(self):
        agg = RewardAggregator([WeightedTerm(AirReward(), 1.0)])
        s = _one_v_one(on_ground=False)
        assert agg.compute_all(s, s) == {"blue_0": 1.0, "orange_0": 0.0}

    def test_term_errors_propagate(self):
        agg = RewardAggregator([
            WeightedTerm(_Constant(1.0), 1.0),
            WeightedTerm(_Degenerate(), 1.0),
        ])
        s = _one_v_one()
        with pytest.raises(TermEvaluationError):
            agg.compute(s, s, "blue_0")

    def test_zero_length_direction_raises(self):
        agg = RewardAggregator([WeightedTerm(FaceBallReward(), 1.0)])
        s = _state(_player(pos=vec3(0, 0, 92.75)))
        with pytest.raises(TermEvaluationError):
            agg.compute(s, s, "blue_0")

    def test_population_mismatch_rejected(self):
        agg = RewardAggregator([WeightedTerm(AirReward(), 1.0)])
        prev = _one_v_one()
        cur = _state(_player("blue_0", pos=vec3(0, -1000, 17)))
        with pytest.raises(ValueError, match="different agents"):
            agg.compute(prev, cur, "blue_0")


# ---------------------------------------------------------------------------
# Terms
# ---------------------------------------------------------------------------

class TestMovementAndPlayerBall:
    def test_air(self):
        s_air = _one_v_one(on_ground=False)
        s_ground = _one_v_one()
        assert AirReward().evaluate(s_air, s_air, "blue_0") == 1.0
        assert AirReward().evaluate(s_ground, s_ground, "blue_0") == 0.0

    def test_face_ball(self):
        s = _state(_player(pos=vec3(-100, 0, 92.75), forward=vec3(1, 0, 0)))
        assert FaceBallReward().evaluate(s, s, "blue_0") == pytest.approx(1.0)
        s = _state(_player(pos=vec3(-100, 0, 92.75), forward=vec3(0, 1, 0)))
        assert FaceBallReward().evaluate(s, s, "blue_0") == pytest.approx(0.0)

    def test_velocity_player_to_ball(self):
        s = _one_v_one(vel=vec3(0, CAR_MAX_SPEED, 0))
        prev = _one_v_one()
        value = VelocityPlayerToBallReward().evaluate(prev, s, "blue_0")
        # Ball sits slightly above the car, so the direction is not pure +y
        assert 0.99 < value <= 1.0

    def test_velocity_player_to_ball_can_be_negative(self):
        s = _one_v_one(vel=vec3(0, -CAR_MAX_SPEED, 0))
        assert VelocityPlayerToBallReward().evaluate(s, s, "blue_0") < -0.99

    def test_touch(self):
        s = _one_v_one(ball_touched=True)
        assert TouchBallReward().evaluate(s, s, "blue_0") == 1.0
        assert TouchBallReward().evaluate(s, s, "orange_0") == 0.0


class TestStrongTouch:
    def _pair(self, hit_speed: float, touched: bool = True):
        prev = _one_v_one()
        cur = _state(
            _player("blue_0", pos=vec3(0, -1000, 17), ball_touched=touched),
            _player("orange_0", Team.ORANGE, pos=vec3(0, 1000, 17)),
            ball=BallState(pos=vec3(0, 0, 92.75), vel=vec3(0, hit_speed, 0)),
        )
        return prev, cur

    def test_saturates_at_one(self):
        prev, cur = self._pair(kph_to_vel(260))
        assert StrongTouchReward().evaluate(prev, cur, "blue_0") == 1.0

    def test_scales_linearly_below_max(self):
        prev, cur = self._pair(kph_to_vel(65))
        assert StrongTouchReward().evaluate(prev, cur, "blue_0") == pytest.approx(0.5)

    def test_weak_hit_scores_nothing(self):
        prev, cur = self._pair(kph_to_vel(10))
        assert StrongTouchReward().evaluate(prev, cur, "blue_0") == 0.0

    def test_no_touch_scores_nothing(self):
        prev, cur = self._pair(kph_to_vel(200), touched=False)
        assert StrongTouchReward().evaluate(prev, cur, "blue_0") == 0.0

    def test_rejects_bad_range(self):
        with pytest.raises(ValueError):
            StrongTouchReward(min_kph=100, max_kph=50)


class TestBallGoal:
    def _state_with_ball_vel(self, vel_y: float, ball_y: float = 0.0) -> GameState:
        return _state(
            _player("blue_0", pos=vec3(0, -1000, 17)),
            _player("orange_0", Team.ORANGE, pos=vec3(0, 1000, 17)),
            ball=BallState(pos=vec3(0, ball_y, GOAL_HEIGHT / 2), vel=vec3(0, vel_y, 0)),
        )

    def test_toward_orange_goal_rewards_blue(self):
        s = self._state_with_ball_vel(6000.0)
        term = VelocityBallToGoalReward()
        assert term.evaluate(s, s, "blue_0") == pytest.approx(1.0)
        assert term.evaluate(s, s, "orange_0") == pytest.approx(-1.0)

    def test_straight_into_goal_mouth_scores_full(self):
        s = self._state_with_ball_vel(BALL_MAX_SPEED, ball_y=5000.0)
        assert VelocityBallToGoalReward().evaluate(s, s, "blue_0") == pytest.approx(1.0)

    def test_aim_point_is_back_of_net_mid_height(self):
        assert ORANGE_GOAL_BACK.tolist() == [0.0, BACK_NET_Y, GOAL_HEIGHT / 2]
        assert BLUE_GOAL_BACK.tolist() == [0.0, -BACK_NET_Y, GOAL_HEIGHT / 2]

    def test_own_goal_flag_flips_target(self):
        s = self._state_with_ball_vel(3000.0)
        term = VelocityBallToGoalReward(own_goal=True)
        assert term.evaluate(s, s, "blue_0") == pytest.approx(-0.5)

    def test_goal_reward(self):
        s = _state(
            _player("blue_0", pos=vec3(0, -1000, 17)),
            _player("orange_0", Team.ORANGE, pos=vec3(0, 1000, 17)),
            ball=BallState(pos=vec3(0, 5200, 300)),
            goal_scored=True,
        )
        term = GoalReward(concede_scale=-0.5)
        assert term.evaluate(s, s, "blue_0") == 1.0
        assert term.evaluate(s, s, "orange_0") == -0.5

    def test_no_goal_no_reward(self):
        s = _one_v_one()
        assert GoalReward().evaluate(s, s, "blue_0") == 0.0


class TestBoostAndEvents:
    def test_pickup_boost(self):
        prev = _one_v_one(boost=0.0)
        cur = _one_v_one(boost=25.0)
        assert PickupBoostReward().evaluate(prev, cur, "blue_0") == pytest.approx(0.5)

    def test_spending_boost_is_not_penalised(self):
        prev = _one_v_one(boost=80.0)
        cur = _one_v_one(boost=40.0)
        assert PickupBoostReward().evaluate(prev, cur, "blue_0") == 0.0

    def test_save_boost(self):
        s = _one_v_one(boost=25.0)
        assert SaveBoostReward().evaluate(s, s, "blue_0") == pytest.approx(0.5)
        assert SaveBoostReward(exponent=1.0).evaluate(s, s, "blue_0") == pytest.approx(0.25)

    def test_bump_and_demo(self):
        s = _one_v_one(bumped=True, demoed_opponent=True)
        assert BumpReward().evaluate(s, s, "blue_0") == 1.0
        assert DemoReward().evaluate(s, s, "blue_0") == 1.0
        assert BumpReward().evaluate(s, s, "orange_0") == 0.0
        assert DemoReward().evaluate(s, s, "orange_0") == 0.0
