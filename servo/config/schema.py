"""Configuration schema for a servo training run — single source of truth.

These Pydantic models describe which scoring terms are combined (and with
what weights), which terminal conditions end an episode, and how the
metrics reporter samples.  The physics simulator and learner receive
their own settings elsewhere.
"""

from __future__ import annotations

import inspect
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator


# ---------------------------------------------------------------------------
# Section 1: Run Identity
# ---------------------------------------------------------------------------

class RunIdentity(BaseModel):
    """Reproducibility and timing settings."""

    seed: int = Field(
        default=123, ge=0,
        description="Root seed; per-worker seeds are derived from it.",
    )
    tick_skip: int = Field(
        default=8, ge=1, le=120,
        description="Physics ticks advanced per environment step.",
    )
    tick_rate: int = Field(
        default=120, ge=1,
        description="Physics ticks per simulated second.",
    )


# ---------------------------------------------------------------------------
# Section 2: Rewards
# ---------------------------------------------------------------------------

class ZeroSumConfig(BaseModel):
    """Zero-sum wrapping applied around a single term."""

    team_spirit: float = Field(
        default=0.0, ge=0.0, le=1.0,
        description="Share of the reward taken from the team mean instead of the agent.",
    )
    spread: float = Field(
        default=1.0, ge=0.0,
        description="Scale of the opponent mean subtracted from the reward.",
    )


class RewardTermConfig(BaseModel):
    """One weighted scoring term."""

    name: str = Field(description="Registered term name, e.g. 'AirReward'.")
    weight: float = Field(description="Scalar weight. Negative values are allowed.")
    params: dict[str, Any] = Field(
        default_factory=dict,
        description="Keyword arguments forwarded to the term constructor.",
    )
    zero_sum: ZeroSumConfig | None = Field(
        default=None,
        description="Wrap the term in ZeroSumReward when set.",
    )

    @field_validator("name")
    @classmethod
    def name_is_registered(cls, value: str) -> str:
        from servo.rewards.registry import TERM_REGISTRY

        if value not in TERM_REGISTRY:
            raise ValueError(
                f"Unknown reward term {value!r}. "
                f"Known terms: {', '.join(sorted(TERM_REGISTRY))}."
            )
        return value

    @model_validator(mode="after")
    def params_match_term(self) -> RewardTermConfig:
        from servo.rewards.registry import TERM_REGISTRY

        cls = TERM_REGISTRY[self.name]
        try:
            inspect.signature(cls).bind(**self.params)
            cls(**self.params)
        except (TypeError, ValueError) as exc:
            raise ValueError(
                f"Invalid params for reward term {self.name!r}: {exc}"
            ) from None
        return self


class RewardConfig(BaseModel):
    """Ordered list of weighted terms.  Order is kept for logging."""

    terms: list[RewardTermConfig] = Field(min_length=1)


# ---------------------------------------------------------------------------
# Section 3: Terminal conditions
# ---------------------------------------------------------------------------

class TerminalConfig(BaseModel):
    no_touch_timeout_seconds: float | None = Field(
        default=30.0, gt=0.0,
        description="End the episode after this long without a touch. None disables.",
    )
    goal_score: bool = Field(
        default=True,
        description="End the episode when a goal is scored.",
    )


# ---------------------------------------------------------------------------
# Section 4: Metrics
# ---------------------------------------------------------------------------

class MetricsConfig(BaseModel):
    """How the step-batch reporter samples."""

    gate_probability: float = Field(
        default=0.25, ge=0.0, le=1.0,
        description="Chance per step batch that per-player metrics are computed.",
    )
    report_every_steps: int = Field(
        default=1, ge=1,
        description="Replay driver flushes the report to metrics.jsonl every N steps.",
    )


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------

class ServoConfig(BaseModel):
    """Complete configuration for one run."""

    identity: RunIdentity = RunIdentity()
    rewards: RewardConfig
    terminal: TerminalConfig = TerminalConfig()
    metrics: MetricsConfig = MetricsConfig()

    @model_validator(mode="after")
    def no_touch_spans_a_step(self) -> ServoConfig:
        timeout = self.terminal.no_touch_timeout_seconds
        if timeout is None:
            return self
        steps = timeout * self.identity.tick_rate / self.identity.tick_skip
        if steps < 1:
            raise ValueError(
                "no_touch_timeout_seconds is shorter than one environment step "
                f"({timeout}s at tick_skip={self.identity.tick_skip})."
            )
        return self
