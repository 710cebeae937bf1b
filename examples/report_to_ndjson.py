"""Report a small set of metrics to stdout as NDJSON every few seconds.

Run with: python examples/report_to_ndjson.py

The registry here is a plain object exposing the MetricRegistryPort
getters; in a real service it would come from a metrics library.
"""

import logging
import random
import time

from fluency_reporter import FluencyReporter, NDJSONSink, TimeUnit


class Counter:
    def __init__(self) -> None:
        self.count = 0

    def get_count(self) -> int:
        return self.count


class Gauge:
    def __init__(self, read) -> None:
        self._read = read

    def get_value(self):
        return self._read()


class Registry:
    def __init__(self) -> None:
        self.counters = {"jobs.processed": Counter()}
        self.gauges = {"queue.depth": Gauge(lambda: random.randint(0, 50))}

    def get_gauges(self):
        return self.gauges

    def get_counters(self):
        return self.counters

    def get_histograms(self):
        return {}

    def get_meters(self):
        return {}

    def get_timers(self):
        return {}


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    registry = Registry()
    reporter = (
        FluencyReporter.for_registry(registry)
        .prefixed_with("example")
        .convert_rates_to(TimeUnit.MINUTES)
        .build(NDJSONSink())
    )
    with reporter:
        for _ in range(3):
            registry.counters["jobs.processed"].count += random.randint(1, 10)
            reporter.report_registry()
            time.sleep(2)


if __name__ == "__main__":
    main()
