"""State snapshots for the Soccar arena.

Snapshots are immutable: the external simulator produces a fresh
GameState every step, and rewards / metrics only ever read them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

import numpy as np

from servo.core.types import AgentID, Team
from servo.core.vec import as_vec3, vec3


@dataclass(frozen=True, slots=True, eq=False)
class PlayerState:
    """One car at one tick."""

    agent_id: AgentID
    team: Team
    pos: np.ndarray = field(default_factory=vec3)
    vel: np.ndarray = field(default_factory=vec3)
    # Unit vector the car's nose points along
    forward: np.ndarray = field(default_factory=lambda: vec3(1.0, 0.0, 0.0))
    boost: float = 0.0
    on_ground: bool = True
    ball_touched: bool = False
    demoed: bool = False
    # Events caused by this car during the tick
    bumped: bool = False
    demoed_opponent: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "agent_id": self.agent_id,
            "team": self.team.name.lower(),
            "pos": self.pos.tolist(),
            "vel": self.vel.tolist(),
            "forward": self.forward.tolist(),
            "boost": self.boost,
            "on_ground": self.on_ground,
            "ball_touched": self.ball_touched,
            "demoed": self.demoed,
            "bumped": self.bumped,
            "demoed_opponent": self.demoed_opponent,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PlayerState:
        return cls(
            agent_id=data["agent_id"],
            team=Team[str(data["team"]).upper()],
            pos=as_vec3(data.get("pos", (0.0, 0.0, 0.0))),
            vel=as_vec3(data.get("vel", (0.0, 0.0, 0.0))),
            forward=as_vec3(data.get("forward", (1.0, 0.0, 0.0))),
            boost=float(data.get("boost", 0.0)),
            on_ground=bool(data.get("on_ground", True)),
            ball_touched=bool(data.get("ball_touched", False)),
            demoed=bool(data.get("demoed", False)),
            bumped=bool(data.get("bumped", False)),
            demoed_opponent=bool(data.get("demoed_opponent", False)),
        )


@dataclass(frozen=True, slots=True, eq=False)
class BallState:
    pos: np.ndarray = field(default_factory=vec3)
    vel: np.ndarray = field(default_factory=vec3)

    def to_dict(self) -> dict[str, Any]:
        return {"pos": self.pos.tolist(), "vel": self.vel.tolist()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BallState:
        return cls(
            pos=as_vec3(data.get("pos", (0.0, 0.0, 0.0))),
            vel=as_vec3(data.get("vel", (0.0, 0.0, 0.0))),
        )


@dataclass(frozen=True, slots=True, eq=False)
class GameState:
    """Complete snapshot of one arena at one step."""

    players: tuple[PlayerState, ...]
    ball: BallState = field(default_factory=BallState)
    goal_scored: bool = False
    tick: int = 0

    def player(self, agent_id: AgentID) -> PlayerState:
        for p in self.players:
            if p.agent_id == agent_id:
                return p
        raise KeyError(f"unknown agent {agent_id!r}")

    def agent_ids(self) -> list[AgentID]:
        return [p.agent_id for p in self.players]

    def team_of(self, agent_id: AgentID) -> Team:
        return self.player(agent_id).team

    def scoring_team(self) -> Team:
        """Team credited with the goal.  Only meaningful when goal_scored."""
        return Team.BLUE if self.ball.pos[1] > 0 else Team.ORANGE

    def to_dict(self) -> dict[str, Any]:
        return {
            "tick": self.tick,
            "goal_scored": self.goal_scored,
            "ball": self.ball.to_dict(),
            "players": [p.to_dict() for p in self.players],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameState:
        return cls(
            players=tuple(PlayerState.from_dict(p) for p in data["players"]),
            ball=BallState.from_dict(data.get("ball", {})),
            goal_scored=bool(data.get("goal_scored", False)),
            tick=int(data.get("tick", 0)),
        )


# One synchronized step across every parallel arena
GameStateBatch = Sequence[GameState]
