"""Replay recorded state batches through rewards, termination and metrics.

Stands in for the external stepping loop when analysing recorded games:
each line of the input file is one synchronized step, a JSON list with
one GameState dict per arena.

Usage:
    python -m servo.runner.replay --states storage/replays/run.jsonl --run-id r1
"""

from __future__ import annotations

import argparse
import json
import sys
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Iterator, Sequence

from pydantic import ValidationError

from servo.config.defaults import default_config
from servo.config.schema import ServoConfig
from servo.core.types import AgentID, TerminationReason
from servo.envs.soccar.state import GameState
from servo.envs.soccar.termination import (
    TerminalCondition,
    build_conditions,
    check_termination,
)
from servo.metrics.definitions import EventType
from servo.metrics.report import Report
from servo.metrics.reporter import MetricsReporter
from servo.rewards.registry import build_aggregator
from servo.runner.run_logger import RunLogger

STORAGE_DIR = Path("storage/runs")


@dataclass
class ReplaySummary:
    """What a replay produced."""

    steps: int = 0
    episodes_completed: int = 0
    termination_counts: dict[str, int] = field(default_factory=dict)
    # Per arena index: cumulative reward per agent across all its episodes
    total_reward_per_agent: dict[int, dict[AgentID, float]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "steps": self.steps,
            "episodes_completed": self.episodes_completed,
            "termination_counts": dict(self.termination_counts),
            "total_reward_per_agent": {
                str(i): dict(r) for i, r in self.total_reward_per_agent.items()
            },
        }


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------

def load_batches(path: str | Path) -> Iterator[list[GameState]]:
    """Yield one list of GameStates per non-empty line of a JSONL file."""
    with Path(path).open("r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            yield [GameState.from_dict(d) for d in json.loads(line)]


def write_batches(path: str | Path, batches: Iterable[Sequence[GameState]]) -> None:
    """Inverse of load_batches."""
    with Path(path).open("w", encoding="utf-8") as f:
        for batch in batches:
            f.write(json.dumps([s.to_dict() for s in batch]) + "\n")


# ---------------------------------------------------------------------------
# Driver
# ---------------------------------------------------------------------------

def replay(
    batches: Iterable[Sequence[GameState]],
    config: ServoConfig,
    logger: RunLogger | None = None,
) -> ReplaySummary:
    """Step through batches, scoring every agent and filling metric reports.

    The first batch, and the first state of an arena after its episode
    ended, only start an episode: rewards need a previous state.
    """
    aggregator = build_aggregator(config.rewards)
    reporter = MetricsReporter(config.metrics.gate_probability, seed=config.identity.seed)
    report = Report()
    flush_every = config.metrics.report_every_steps

    summary = ReplaySummary()
    prev_batch: Sequence[GameState] | None = None
    conditions: list[list[TerminalCondition]] = []
    needs_reset: list[bool] = []

    for step, batch in enumerate(batches):
        if prev_batch is None:
            conditions = [build_conditions(config) for _ in batch]
            needs_reset = [True] * len(batch)
            summary.total_reward_per_agent = {i: {} for i in range(len(batch))}
        elif len(batch) != len(prev_batch):
            raise ValueError(
                f"step {step}: batch has {len(batch)} arenas, expected {len(prev_batch)}"
            )

        events: list[dict[str, Any]] = []
        for i, state in enumerate(batch):
            if needs_reset[i]:
                for cond in conditions[i]:
                    cond.reset(state)
                needs_reset[i] = False
                continue

            totals = summary.total_reward_per_agent[i]
            for aid, r in aggregator.compute_all(prev_batch[i], state).items():
                totals[aid] = totals.get(aid, 0.0) + r

            reason = check_termination(conditions[i], state)
            if reason is not None:
                needs_reset[i] = True
                summary.episodes_completed += 1
                summary.termination_counts[reason.value] = (
                    summary.termination_counts.get(reason.value, 0) + 1
                )
                events.append(_episode_end_event(step, i, reason))

        reporter.on_step_batch(batch, report)
        summary.steps = step + 1

        if logger is not None:
            logger.log_events(events)
            if summary.steps % flush_every == 0:
                logger.log_report(step, report)
                report.reset()

        prev_batch = batch

    if logger is not None:
        if summary.steps % flush_every != 0:
            logger.log_report(summary.steps - 1, report)
        logger.write_episode_summary(summary.to_dict())

    return summary


def _episode_end_event(step: int, env_index: int, reason: TerminationReason) -> dict[str, Any]:
    return {
        "event": EventType.EPISODE_END.value,
        "step": step,
        "env_index": env_index,
        "reason": reason.value,
    }


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Replay recorded Soccar state batches through rewards and metrics."
    )
    parser.add_argument(
        "--states",
        required=True,
        help="JSONL file, one list of GameState dicts per line.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="ServoConfig JSON file. Defaults to default_config().",
    )
    parser.add_argument(
        "--run-id",
        default=None,
        help="Run directory name under --storage. Random if omitted.",
    )
    parser.add_argument(
        "--storage",
        default=str(STORAGE_DIR),
        help="Base directory for run artifacts.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Override identity.seed (metric gate sampling).",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)

    states_path = Path(args.states)
    if not states_path.exists():
        print(f"ERROR: states file not found: {states_path}", file=sys.stderr)
        sys.exit(1)

    if args.config is None:
        config = default_config()
    else:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"ERROR: config not found: {config_path}", file=sys.stderr)
            sys.exit(1)
        try:
            config = ServoConfig.model_validate_json(config_path.read_text(encoding="utf-8"))
        except ValidationError as exc:
            print(f"ERROR: invalid config {config_path}:\n{exc}", file=sys.stderr)
            sys.exit(1)

    if args.seed is not None:
        config = config.model_copy(
            update={"identity": config.identity.model_copy(update={"seed": args.seed})}
        )

    run_id = args.run_id or f"replay_{uuid.uuid4().hex[:8]}"
    logger = RunLogger(args.storage, run_id)
    logger.write_config(json.loads(config.model_dump_json()))

    print(f"Replaying {states_path} ...")
    summary = replay(load_batches(states_path), config, logger=logger)
    print(
        f"  {summary.steps} steps, {summary.episodes_completed} episodes completed"
    )
    print(f"Artifacts saved to: {logger.run_dir}")


if __name__ == "__main__":
    main()
