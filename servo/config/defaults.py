"""Default servo configuration.

Reproduces the reference 1v1 run: movement, player-ball, ball-goal and
goal terms, 30 s no-touch timeout, tick skip 8.
"""

from servo.config.schema import (
    MetricsConfig,
    RewardConfig,
    RewardTermConfig,
    RunIdentity,
    ServoConfig,
    TerminalConfig,
    ZeroSumConfig,
)


def default_config(seed: int = 123) -> ServoConfig:
    """Return a complete, valid default config."""
    return ServoConfig(
        identity=RunIdentity(seed=seed, tick_skip=8),
        rewards=RewardConfig(
            terms=[
                # Movement
                RewardTermConfig(name="AirReward", weight=0.1),
                # Player-ball
                RewardTermConfig(name="FaceBallReward", weight=1.0),
                RewardTermConfig(name="VelocityPlayerToBallReward", weight=8.0),
                RewardTermConfig(name="TouchBallReward", weight=0.1),
                RewardTermConfig(name="StrongTouchReward", weight=40.0),
                # Ball-goal
                RewardTermConfig(
                    name="VelocityBallToGoalReward",
                    weight=4.0,
                    zero_sum=ZeroSumConfig(team_spirit=1.0),
                ),
                # Game events
                RewardTermConfig(name="GoalReward", weight=150.0),
            ]
        ),
        terminal=TerminalConfig(no_touch_timeout_seconds=30.0, goal_score=True),
        metrics=MetricsConfig(gate_probability=0.25),
    )
