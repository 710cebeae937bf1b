"""Reporter that publishes metric records to a Fluentd-style sink.

The reporter is driven from outside: a scheduler calls report_registry()
(or report() with pre-collected metrics) once per tick, serially. Every
metric becomes one record stamped with the tick's timestamp and is handed
to the sink with a blocking emit() call.

Example:
    ```python
    from fluency_reporter import FluencyReporter, InMemorySink, TimeUnit

    reporter = (
        FluencyReporter.for_registry(registry)
        .prefixed_with("myapp")
        .convert_rates_to(TimeUnit.MINUTES)
        .build(InMemorySink())
    )
    reporter.report_registry()
    reporter.stop()
    ```
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from concurrent.futures import Executor
from typing import Any

from fluency_reporter.core.config import (
    DEFAULT_PREFIX,
    ReporterConfig,
    accept_all,
    parse_attributes,
)
from fluency_reporter.core.models import MetricAttribute, MetricKind, TimeUnit
from fluency_reporter.core.ports import (
    Counter,
    Gauge,
    Histogram,
    Metered,
    MetricRegistryPort,
    SinkPort,
    Timer,
)
from fluency_reporter.core.records import build_record

logger = logging.getLogger(__name__)


class FluencyReporter:
    """Converts registry metrics into records and emits them to a sink.

    Two states: running (accepting report calls) and stopped (sink closed).
    The transition happens once, in stop().
    """

    def __init__(
        self,
        sink: SinkPort,
        config: ReporterConfig | None = None,
        registry: MetricRegistryPort | None = None,
    ) -> None:
        """Initialize the reporter.

        Args:
            sink: Destination for records. Closed by stop().
            config: Reporter settings (default: ReporterConfig()).
            registry: Metric source used by report_registry() (optional).
        """
        self._sink = sink
        self._config = config or ReporterConfig()
        self._registry = registry
        self._stopped = False

    @staticmethod
    def for_registry(registry: MetricRegistryPort) -> "ReporterBuilder":
        """Return a builder for a reporter reading from the given registry."""
        return ReporterBuilder(registry)

    @property
    def config(self) -> ReporterConfig:
        return self._config

    @property
    def sink(self) -> SinkPort:
        return self._sink

    @property
    def stopped(self) -> bool:
        return self._stopped

    def report_registry(self) -> None:
        """Report every registry metric accepted by the metric filter.

        Raises:
            RuntimeError: If the reporter was built without a registry.
        """
        if self._registry is None:
            raise RuntimeError("no registry configured for this reporter")
        registry = self._registry
        self.report(
            gauges=self._select(registry.get_gauges()),
            counters=self._select(registry.get_counters()),
            histograms=self._select(registry.get_histograms()),
            meters=self._select(registry.get_meters()),
            timers=self._select(registry.get_timers()),
        )

    def _select(self, metrics: Mapping[str, Any]) -> dict[str, Any]:
        """Apply the metric filter and order by name."""
        accept = self._config.metric_filter
        return {
            name: metrics[name] for name in sorted(metrics) if accept(name, metrics[name])
        }

    def report(
        self,
        gauges: Mapping[str, Gauge] | None = None,
        counters: Mapping[str, Counter] | None = None,
        histograms: Mapping[str, Histogram] | None = None,
        meters: Mapping[str, Metered] | None = None,
        timers: Mapping[str, Timer] | None = None,
    ) -> None:
        """Emit one record per metric, all stamped with the same timestamp.

        The first sink failure ends the cycle: it is logged as a warning and
        the remaining metrics are skipped until the next call. Sink failures
        are never raised to the caller.
        """
        if self._stopped:
            logger.debug("Reporter is stopped, skipping report")
            return

        timestamp = int(self._config.clock())
        batches: list[tuple[MetricKind, Mapping[str, Any] | None]] = [
            (MetricKind.GAUGE, gauges),
            (MetricKind.COUNTER, counters),
            (MetricKind.HISTOGRAM, histograms),
            (MetricKind.METER, meters),
            (MetricKind.TIMER, timers),
        ]
        name = None
        try:
            for kind, metrics in batches:
                for name, metric in (metrics or {}).items():
                    self._report_metric(kind, name, metric, timestamp)
        except OSError as e:
            logger.warning(
                "Unable to report to sink: sink=%r, name=%s, message=%s",
                self._sink,
                name,
                e,
                exc_info=True,
            )

    def _report_metric(
        self, kind: MetricKind, name: str, metric: Any, timestamp: int
    ) -> None:
        record = build_record(kind, self._config, name, metric, timestamp)
        if record is None:
            return
        logger.debug("send metrics to sink: name=%s, data=%s", name, record.fields)
        if not record.is_empty:
            self._sink.emit(record.tag, record.timestamp, record.fields)

    def stop(self) -> None:
        """Stop reporting and close the sink.

        Safe to call more than once; only the first call has any effect.
        Failures to shut down the executor or close the sink are logged at
        DEBUG and never raised.
        """
        if self._stopped:
            return
        self._stopped = True
        try:
            executor = self._config.executor
            if executor is not None and self._config.shutdown_executor_on_stop:
                executor.shutdown(wait=True)
        except Exception:
            logger.debug("Error shutting down executor %r", executor, exc_info=True)
        finally:
            try:
                self._sink.close()
            except OSError:
                logger.debug("Error closing sink %r", self._sink, exc_info=True)

    def __enter__(self) -> "FluencyReporter":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()


class ReporterBuilder:
    """Builder for FluencyReporter instances.

    Defaults to the "metrics" prefix, the wall clock, rates in events per
    second, durations in milliseconds, no filtering and no disabled
    attributes.
    """

    def __init__(self, registry: MetricRegistryPort | None) -> None:
        self._registry = registry
        self._clock: Callable[[], float] | None = None
        self._prefix: str | None = DEFAULT_PREFIX
        self._rate_unit = TimeUnit.SECONDS
        self._duration_unit = TimeUnit.MILLISECONDS
        self._filter: Callable[[str, Any], bool] = accept_all
        self._executor: Executor | None = None
        self._shutdown_executor_on_stop = True
        self._disabled: frozenset[MetricAttribute] = frozenset()

    def shutdown_executor_on_stop(self, enabled: bool) -> "ReporterBuilder":
        """Set whether stop() also shuts down the executor given to schedule_on().

        Args:
            enabled: True (default) to shut the executor down on stop.
        """
        self._shutdown_executor_on_stop = enabled
        return self

    def schedule_on(self, executor: Executor | None) -> "ReporterBuilder":
        """Record the executor that drives this reporter."""
        self._executor = executor
        return self

    def with_clock(self, clock: Callable[[], float]) -> "ReporterBuilder":
        """Use the given callable, returning Unix seconds, as the time source."""
        self._clock = clock
        return self

    def prefixed_with(self, prefix: str | None) -> "ReporterBuilder":
        """Prefix all metric names with the given string."""
        self._prefix = prefix
        return self

    def convert_rates_to(self, rate_unit: TimeUnit) -> "ReporterBuilder":
        """Convert rates to events per the given unit."""
        self._rate_unit = rate_unit
        return self

    def convert_durations_to(self, duration_unit: TimeUnit) -> "ReporterBuilder":
        """Convert durations to the given unit."""
        self._duration_unit = duration_unit
        return self

    def filter(self, metric_filter: Callable[[str, Any], bool]) -> "ReporterBuilder":
        """Only report registry metrics accepted by the given predicate."""
        self._filter = metric_filter
        return self

    def disabled_metric_attributes(
        self, attributes: Iterable[MetricAttribute | str]
    ) -> "ReporterBuilder":
        """Leave the given attributes (e.g. "p999", "stddev") out of every record.

        Raises:
            ValueError: If an attribute code is unknown.
        """
        self._disabled = parse_attributes(attributes)
        return self

    def build_config(self) -> ReporterConfig:
        """Return the ReporterConfig described by this builder.

        Raises:
            TypeError: If the clock or filter is not callable.
            ValueError: If a disabled attribute code is unknown.
        """
        kwargs: dict[str, Any] = {}
        if self._clock is not None:
            kwargs["clock"] = self._clock
        return ReporterConfig(
            prefix=self._prefix,
            rate_unit=self._rate_unit,
            duration_unit=self._duration_unit,
            metric_filter=self._filter,
            disabled_attributes=self._disabled,
            executor=self._executor,
            shutdown_executor_on_stop=self._shutdown_executor_on_stop,
            **kwargs,
        )

    def build(self, sink: SinkPort) -> FluencyReporter:
        """Build a FluencyReporter sending records to the given sink."""
        return FluencyReporter(sink, self.build_config(), registry=self._registry)
