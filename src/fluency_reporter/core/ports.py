"""Port interfaces for metric sources and record sinks.

These protocols define the contracts the reporter consumes. The registry
side is read-only and the sink side is write-only; neither is implemented
by the core. Any object with matching methods satisfies them, so metric
types from an existing registry library can be reported without wrapping.
"""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Snapshot(Protocol):
    """Point-in-time view of a value distribution."""

    def get_max(self) -> float: ...

    def get_mean(self) -> float: ...

    def get_min(self) -> float: ...

    def get_stddev(self) -> float: ...

    def get_median(self) -> float: ...

    def get_75th_percentile(self) -> float: ...

    def get_95th_percentile(self) -> float: ...

    def get_98th_percentile(self) -> float: ...

    def get_99th_percentile(self) -> float: ...

    def get_999th_percentile(self) -> float: ...


@runtime_checkable
class Gauge(Protocol):
    """Metric exposing an instantaneous value, possibly None."""

    def get_value(self) -> Any: ...


@runtime_checkable
class Counter(Protocol):
    """Metric exposing a running count."""

    def get_count(self) -> int: ...


@runtime_checkable
class Histogram(Protocol):
    """Metric exposing a count and a distribution snapshot."""

    def get_count(self) -> int: ...

    def get_snapshot(self) -> Snapshot: ...


@runtime_checkable
class Metered(Protocol):
    """Metric exposing a count and per-second rates."""

    def get_count(self) -> int: ...

    def get_one_minute_rate(self) -> float: ...

    def get_five_minute_rate(self) -> float: ...

    def get_fifteen_minute_rate(self) -> float: ...

    def get_mean_rate(self) -> float: ...


@runtime_checkable
class Timer(Metered, Protocol):
    """Metered metric whose snapshot holds durations in nanoseconds."""

    def get_snapshot(self) -> Snapshot: ...


@runtime_checkable
class MetricRegistryPort(Protocol):
    """Port for reading the registered metrics of each kind.

    Each getter returns a mapping of metric name to metric instance.
    """

    def get_gauges(self) -> Mapping[str, Gauge]: ...

    def get_counters(self) -> Mapping[str, Counter]: ...

    def get_histograms(self) -> Mapping[str, Histogram]: ...

    def get_meters(self) -> Mapping[str, Metered]: ...

    def get_timers(self) -> Mapping[str, Timer]: ...


@runtime_checkable
class SinkPort(Protocol):
    """Port for delivering records to a collector.

    Adapters implementing this protocol forward tagged, timestamped field
    mappings somewhere else. Examples: InMemorySink, NDJSONSink, SQLiteSink.
    """

    def emit(self, tag: str, timestamp: int, fields: Mapping[str, Any]) -> None:
        """Deliver one record.

        Raises:
            OSError: On transport or serialization failure.
        """
        ...

    def close(self) -> None:
        """Release the underlying resource.

        Raises:
            OSError: If the resource cannot be released cleanly.
        """
        ...
