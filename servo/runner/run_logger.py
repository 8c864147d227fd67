"""Run artifact logger — writes structured files into storage/runs/{run_id}/.

Produces:
  - config.json          Full run config snapshot
  - metrics.jsonl        One report snapshot per flush (append)
  - events.jsonl         Semantic event records (append)
  - episode_summary.json Replay-level summary (written once at end)
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from servo.metrics.report import Report


class RunLogger:
    """Writes run artifacts to a run directory."""

    def __init__(self, base_dir: str | Path, run_id: str) -> None:
        self._run_dir = Path(base_dir) / run_id
        self._run_dir.mkdir(parents=True, exist_ok=True)
        self._metrics_path = self._run_dir / "metrics.jsonl"
        self._events_path = self._run_dir / "events.jsonl"

    @property
    def run_dir(self) -> Path:
        return self._run_dir

    # ------------------------------------------------------------------
    # Config snapshot
    # ------------------------------------------------------------------

    def write_config(self, config_dict: dict[str, Any]) -> None:
        """Write the full run config as config.json."""
        payload = {
            "written_at": datetime.now(timezone.utc).isoformat(),
            **config_dict,
        }
        (self._run_dir / "config.json").write_text(
            json.dumps(payload, indent=2, default=str), encoding="utf-8"
        )

    # ------------------------------------------------------------------
    # Report snapshots (append)
    # ------------------------------------------------------------------

    def log_report(self, step: int, report: Report) -> None:
        """Append the report's current averages to metrics.jsonl.

        Empty reports (nothing sampled this interval) are skipped.
        """
        if not len(report):
            return
        record = {"step": step, "metrics": report.averages()}
        with self._metrics_path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(record, default=str) + "\n")

    # ------------------------------------------------------------------
    # Events (append)
    # ------------------------------------------------------------------

    def log_events(self, events: list[dict[str, Any]]) -> None:
        """Append semantic events to events.jsonl."""
        if not events:
            return
        with self._events_path.open("a", encoding="utf-8") as f:
            for evt in events:
                f.write(json.dumps(evt, default=str) + "\n")

    # ------------------------------------------------------------------
    # Episode summary (write once)
    # ------------------------------------------------------------------

    def write_episode_summary(self, summary: dict[str, Any]) -> None:
        """Write the summary as episode_summary.json."""
        if not summary:
            return
        payload = {
            "written_at": datetime.now(timezone.utc).isoformat(),
            **summary,
        }
        (self._run_dir / "episode_summary.json").write_text(
            json.dumps(payload, indent=2, default=str), encoding="utf-8"
        )
