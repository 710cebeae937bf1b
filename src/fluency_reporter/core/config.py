"""Reporter configuration with documented defaults."""

import time
from collections.abc import Callable, Iterable
from concurrent.futures import Executor
from dataclasses import dataclass, field
from typing import Any

from fluency_reporter.core.models import MetricAttribute, TimeUnit

DEFAULT_PREFIX = "metrics"

MetricFilter = Callable[[str, Any], bool]
Clock = Callable[[], float]


def accept_all(name: str, metric: Any) -> bool:
    """Metric filter that reports every metric."""
    return True


def parse_attributes(
    attributes: Iterable[MetricAttribute | str] | None,
) -> frozenset[MetricAttribute]:
    """Coerce attributes or attribute codes into a frozenset.

    Raises:
        ValueError: If any code is not a known attribute.
    """
    if attributes is None:
        return frozenset()
    if isinstance(attributes, str):
        attributes = [attributes]
    return frozenset(MetricAttribute.parse(attr) for attr in attributes)


@dataclass(frozen=True)
class ReporterConfig:
    """Immutable settings for a FluencyReporter.

    Attributes:
        prefix: Namespace prepended to every metric name. Empty or None
            means names are reported as-is.
        rate_unit: Unit rates are expressed in (events per unit).
        duration_unit: Unit timer durations are expressed in.
        metric_filter: Predicate deciding which registry metrics to report.
        disabled_attributes: Attributes left out of every record.
        clock: Callable returning the current Unix time in seconds.
        executor: Externally managed executor driving the reporter, if any.
        shutdown_executor_on_stop: Whether stop() shuts the executor down.
    """

    prefix: str | None = DEFAULT_PREFIX
    rate_unit: TimeUnit = TimeUnit.SECONDS
    duration_unit: TimeUnit = TimeUnit.MILLISECONDS
    metric_filter: MetricFilter = accept_all
    disabled_attributes: frozenset[MetricAttribute] = field(default_factory=frozenset)
    clock: Clock = time.time
    executor: Executor | None = None
    shutdown_executor_on_stop: bool = True

    def __post_init__(self) -> None:
        if not callable(self.metric_filter):
            raise TypeError("metric_filter must be callable")
        if not callable(self.clock):
            raise TypeError("clock must be callable")
        if not isinstance(self.rate_unit, TimeUnit):
            raise TypeError("rate_unit must be a TimeUnit")
        if not isinstance(self.duration_unit, TimeUnit):
            raise TypeError("duration_unit must be a TimeUnit")
        object.__setattr__(
            self, "disabled_attributes", parse_attributes(self.disabled_attributes)
        )

    @property
    def rate_factor(self) -> float:
        """Multiplier turning a per-second rate into a per-rate_unit rate."""
        return self.rate_unit.to_seconds()

    @property
    def duration_factor(self) -> float:
        """Multiplier turning nanoseconds into duration_unit."""
        return 1.0 / self.duration_unit.nanos
