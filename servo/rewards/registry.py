"""Name -> class registry used to build aggregators from config."""

from __future__ import annotations

from servo.config.schema import RewardConfig, RewardTermConfig
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
from servo.rewards.zero_sum import ZeroSumReward

TERM_REGISTRY: dict[str, type[ScoringTerm]] = {
    cls.__name__: cls
    for cls in (
        AirReward,
        FaceBallReward,
        VelocityPlayerToBallReward,
        TouchBallReward,
        StrongTouchReward,
        VelocityBallToGoalReward,
        GoalReward,
        PickupBoostReward,
        SaveBoostReward,
        BumpReward,
        DemoReward,
    )
}


def build_term(cfg: RewardTermConfig) -> ScoringTerm:
    """Instantiate one term, wrapping it in ZeroSumReward if configured."""
    try:
        cls = TERM_REGISTRY[cfg.name]
    except KeyError:
        raise ValueError(f"Unknown reward term {cfg.name!r}") from None
    term = cls(**cfg.params)
    if cfg.zero_sum is not None:
        term = ZeroSumReward(
            term,
            team_spirit=cfg.zero_sum.team_spirit,
            spread=cfg.zero_sum.spread,
        )
    return term


def build_aggregator(config: RewardConfig) -> RewardAggregator:
    return RewardAggregator(
        WeightedTerm(build_term(tc), tc.weight) for tc in config.terms
    )
