"""Conversion of metric instances into records.

One builder per MetricKind. Builders are pure: they read the metric once,
apply unit conversion and attribute filtering, and return a Record that may
be empty. Deciding whether to emit is left to the caller.
"""

from collections.abc import Callable, Iterable
from typing import Any

from fluency_reporter.core.config import ReporterConfig
from fluency_reporter.core.models import MetricAttribute, MetricKind, Record, metric_name
from fluency_reporter.core.ports import Counter, Gauge, Histogram, Metered, Snapshot, Timer

A = MetricAttribute

RecordBuilder = Callable[[ReporterConfig, str, Any, int], Record | None]


def _filtered(
    config: ReporterConfig, values: Iterable[tuple[MetricAttribute, Any]]
) -> dict[str, Any]:
    """Build a field mapping, dropping disabled attributes."""
    disabled = config.disabled_attributes
    return {attr.code: value for attr, value in values if attr not in disabled}


def _snapshot_values(
    snapshot: Snapshot, scale: float | None = None
) -> list[tuple[MetricAttribute, float]]:
    def conv(value: float) -> float:
        return value if scale is None else value * scale

    return [
        (A.MAX, conv(snapshot.get_max())),
        (A.MEAN, conv(snapshot.get_mean())),
        (A.MIN, conv(snapshot.get_min())),
        (A.STDDEV, conv(snapshot.get_stddev())),
        (A.P50, conv(snapshot.get_median())),
        (A.P75, conv(snapshot.get_75th_percentile())),
        (A.P95, conv(snapshot.get_95th_percentile())),
        (A.P98, conv(snapshot.get_98th_percentile())),
        (A.P99, conv(snapshot.get_99th_percentile())),
        (A.P999, conv(snapshot.get_999th_percentile())),
    ]


def _metered_values(
    metered: Metered, rate_factor: float
) -> list[tuple[MetricAttribute, float]]:
    return [
        (A.COUNT, metered.get_count()),
        (A.M1_RATE, metered.get_one_minute_rate() * rate_factor),
        (A.M5_RATE, metered.get_five_minute_rate() * rate_factor),
        (A.M15_RATE, metered.get_fifteen_minute_rate() * rate_factor),
        (A.MEAN_RATE, metered.get_mean_rate() * rate_factor),
    ]


def gauge_record(
    config: ReporterConfig, name: str, gauge: Gauge, timestamp: int
) -> Record | None:
    """Build a gauge record, or None when the gauge has no value.

    The value is reported under the ``count`` code and is never subject to
    attribute filtering.
    """
    value = gauge.get_value()
    if value is None:
        return None
    return Record(
        tag=metric_name(config.prefix, name),
        timestamp=timestamp,
        fields={A.COUNT.code: value},
    )


def counter_record(
    config: ReporterConfig, name: str, counter: Counter, timestamp: int
) -> Record:
    """Build a counter record."""
    return Record(
        tag=metric_name(config.prefix, name),
        timestamp=timestamp,
        fields=_filtered(config, [(A.COUNT, counter.get_count())]),
    )


def histogram_record(
    config: ReporterConfig, name: str, histogram: Histogram, timestamp: int
) -> Record:
    """Build a histogram record from its count and unconverted snapshot."""
    values = [(A.COUNT, histogram.get_count())]
    values.extend(_snapshot_values(histogram.get_snapshot()))
    return Record(
        tag=metric_name(config.prefix, name),
        timestamp=timestamp,
        fields=_filtered(config, values),
    )


def metered_record(
    config: ReporterConfig, name: str, meter: Metered, timestamp: int
) -> Record:
    """Build a meter record with rates converted to the configured unit."""
    return Record(
        tag=metric_name(config.prefix, name),
        timestamp=timestamp,
        fields=_filtered(config, _metered_values(meter, config.rate_factor)),
    )


def timer_record(
    config: ReporterConfig, name: str, timer: Timer, timestamp: int
) -> Record:
    """Build a timer record.

    Snapshot durations are converted from nanoseconds to the configured
    duration unit, rates to the configured rate unit.
    """
    values = _snapshot_values(timer.get_snapshot(), config.duration_factor)
    values.extend(_metered_values(timer, config.rate_factor))
    return Record(
        tag=metric_name(config.prefix, name),
        timestamp=timestamp,
        fields=_filtered(config, values),
    )


RECORD_BUILDERS: dict[MetricKind, RecordBuilder] = {
    MetricKind.GAUGE: gauge_record,
    MetricKind.COUNTER: counter_record,
    MetricKind.HISTOGRAM: histogram_record,
    MetricKind.METER: metered_record,
    MetricKind.TIMER: timer_record,
}


def build_record(
    kind: MetricKind,
    config: ReporterConfig,
    name: str,
    metric: Any,
    timestamp: int,
) -> Record | None:
    """Build the record for a metric of the given kind."""
    return RECORD_BUILDERS[kind](config, name, metric, timestamp)
