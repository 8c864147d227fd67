"""Running-average accumulator for step metrics.

A Report is created (or reset) by the training loop at the start of each
reporting interval, filled by the reporter, read once, then reset again.
It is passed explicitly into every call rather than living in a global.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator


@dataclass(slots=True)
class MetricSample:
    """Running count and sum for one metric."""

    count: int = 0
    total: float = 0.0

    def add(self, value: float) -> None:
        self.count += 1
        self.total += value

    @property
    def mean(self) -> float:
        return self.total / self.count


class Report:
    """Mapping of metric name -> running average."""

    def __init__(self) -> None:
        self._samples: dict[str, MetricSample] = {}

    def add_avg(self, name: str, value: float) -> None:
        sample = self._samples.get(name)
        if sample is None:
            sample = self._samples[name] = MetricSample()
        sample.add(float(value))

    def sample(self, name: str) -> MetricSample:
        return self._samples[name]

    def mean(self, name: str) -> float:
        return self._samples[name].mean

    def count(self, name: str) -> int:
        sample = self._samples.get(name)
        return sample.count if sample is not None else 0

    def averages(self) -> dict[str, float]:
        return {name: s.mean for name, s in self._samples.items()}

    def reset(self) -> None:
        """Drop every sample.  Owned by the training loop, never the reporter."""
        self._samples.clear()

    def to_dict(self) -> dict[str, dict[str, float]]:
        return {
            name: {"mean": s.mean, "count": s.count}
            for name, s in self._samples.items()
        }

    def __contains__(self, name: object) -> bool:
        return name in self._samples

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[str]:
        return iter(self._samples)

    def __repr__(self) -> str:
        return f"Report({self.averages()!r})"
