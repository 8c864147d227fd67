"""Reward terms and weighted aggregation."""

from servo.rewards.base import RewardAggregator, ScoringTerm, WeightedTerm
from servo.rewards.zero_sum import ZeroSumReward

__all__ = ["RewardAggregator", "ScoringTerm", "WeightedTerm", "ZeroSumReward"]
