"""Periodic metrics reporting to Fluentd-style log collectors.

Converts gauges, counters, histograms, meters and timers from a metrics
registry into tagged, timestamped records and hands them to a sink.
"""

from fluency_reporter.adapters.sinks import InMemorySink, NDJSONSink, SQLiteSink
from fluency_reporter.core.config import ReporterConfig, accept_all
from fluency_reporter.core.errors import SinkError
from fluency_reporter.core.models import (
    MetricAttribute,
    MetricKind,
    Record,
    TimeUnit,
    metric_name,
)
from fluency_reporter.core.ports import MetricRegistryPort, SinkPort
from fluency_reporter.reporter import FluencyReporter, ReporterBuilder

__all__ = [
    "FluencyReporter",
    "InMemorySink",
    "MetricAttribute",
    "MetricKind",
    "MetricRegistryPort",
    "NDJSONSink",
    "Record",
    "ReporterBuilder",
    "ReporterConfig",
    "SQLiteSink",
    "SinkError",
    "SinkPort",
    "TimeUnit",
    "accept_all",
    "metric_name",
]
