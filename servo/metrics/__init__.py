"""Step metrics: running-average report and the gated step-batch reporter."""

from servo.metrics.report import MetricSample, Report
from servo.metrics.reporter import MetricsReporter

__all__ = ["MetricSample", "MetricsReporter", "Report"]
