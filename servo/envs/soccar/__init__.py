"""Soccar arena package: state snapshots, constants and terminal conditions."""

from servo.envs.soccar.state import BallState, GameState, GameStateBatch, PlayerState

__all__ = ["BallState", "GameState", "GameStateBatch", "PlayerState"]
