"""Framework-level types shared by rewards, metrics and termination.

Arena-specific state (players, ball) lives in servo.envs.soccar, not here.
"""

from __future__ import annotations

from enum import Enum


# ---------------------------------------------------------------------------
# Agent identity
# ---------------------------------------------------------------------------

AgentID = str  # unique within an arena


class Team(Enum):
    """Car-soccer teams.  Blue attacks the +y goal, orange the -y goal."""

    BLUE = 0
    ORANGE = 1

    @property
    def opponent(self) -> Team:
        return Team.ORANGE if self is Team.BLUE else Team.BLUE


# ---------------------------------------------------------------------------
# Termination
# ---------------------------------------------------------------------------

class TerminationReason(Enum):
    """Why an episode ended."""

    NO_TOUCH = "no_touch"
    GOAL_SCORED = "goal_scored"


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class TermEvaluationError(ArithmeticError):
    """A scoring term hit degenerate geometry (e.g. a zero-length direction).

    Raised from inside a term and never caught by the aggregator: it means
    the simulation handed over a state the term cannot score.
    """
