"""Core domain models for exported metric records."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

NAME_SEPARATOR = "."


class MetricAttribute(Enum):
    """Statistical attributes a record may carry, keyed by wire code."""

    COUNT = "count"
    MAX = "max"
    MEAN = "mean"
    MIN = "min"
    STDDEV = "stddev"
    P50 = "p50"
    P75 = "p75"
    P95 = "p95"
    P98 = "p98"
    P99 = "p99"
    P999 = "p999"
    M1_RATE = "m1_rate"
    M5_RATE = "m5_rate"
    M15_RATE = "m15_rate"
    MEAN_RATE = "mean_rate"

    @property
    def code(self) -> str:
        """Field key used in emitted records."""
        return self.value

    @classmethod
    def parse(cls, value: "MetricAttribute | str") -> "MetricAttribute":
        """Coerce an attribute or its code into a MetricAttribute.

        Raises:
            ValueError: If the code is not a known attribute.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"unknown metric attribute: {value!r}") from None


_SNAPSHOT_ATTRIBUTES = (
    MetricAttribute.MAX,
    MetricAttribute.MEAN,
    MetricAttribute.MIN,
    MetricAttribute.STDDEV,
    MetricAttribute.P50,
    MetricAttribute.P75,
    MetricAttribute.P95,
    MetricAttribute.P98,
    MetricAttribute.P99,
    MetricAttribute.P999,
)

_METERED_ATTRIBUTES = (
    MetricAttribute.COUNT,
    MetricAttribute.M1_RATE,
    MetricAttribute.M5_RATE,
    MetricAttribute.M15_RATE,
    MetricAttribute.MEAN_RATE,
)


class MetricKind(Enum):
    """Kinds of metric the reporter understands, with their field lists."""

    GAUGE = "gauge"
    COUNTER = "counter"
    HISTOGRAM = "histogram"
    METER = "meter"
    TIMER = "timer"

    @property
    def attributes(self) -> tuple[MetricAttribute, ...]:
        """Fixed, ordered attribute list reported for this kind."""
        return _KIND_ATTRIBUTES[self]


_KIND_ATTRIBUTES: dict[MetricKind, tuple[MetricAttribute, ...]] = {
    MetricKind.GAUGE: (MetricAttribute.COUNT,),
    MetricKind.COUNTER: (MetricAttribute.COUNT,),
    MetricKind.HISTOGRAM: (MetricAttribute.COUNT, *_SNAPSHOT_ATTRIBUTES),
    MetricKind.METER: _METERED_ATTRIBUTES,
    MetricKind.TIMER: (*_SNAPSHOT_ATTRIBUTES, *_METERED_ATTRIBUTES),
}


class TimeUnit(Enum):
    """Time units for rate and duration conversion, valued in nanoseconds."""

    NANOSECONDS = 1
    MICROSECONDS = 1_000
    MILLISECONDS = 1_000_000
    SECONDS = 1_000_000_000
    MINUTES = 60 * 1_000_000_000
    HOURS = 60 * 60 * 1_000_000_000
    DAYS = 24 * 60 * 60 * 1_000_000_000

    @property
    def nanos(self) -> int:
        """Length of one unit in nanoseconds."""
        return self.value

    def to_seconds(self) -> float:
        """Length of one unit in seconds."""
        return self.value / TimeUnit.SECONDS.value


def metric_name(*parts: str | None) -> str:
    """Join name segments with dots, skipping empty or None segments.

    Example:
        >>> metric_name("metrics", "http.requests")
        'metrics.http.requests'
        >>> metric_name(None, "http.requests")
        'http.requests'
    """
    return NAME_SEPARATOR.join(part for part in parts if part)


@dataclass(frozen=True)
class Record:
    """A single metric record handed to a sink.

    Attributes:
        tag: Prefixed metric name used as the sink tag.
        timestamp: Unix timestamp in whole seconds.
        fields: Read-only mapping of attribute code to value. Copied on
            construction and left out of the hash.
    """

    tag: str
    timestamp: int
    fields: Mapping[str, object] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @property
    def is_empty(self) -> bool:
        """True when the record carries no fields."""
        return not self.fields
