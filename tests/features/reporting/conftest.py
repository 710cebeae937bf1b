"""BDD step definitions for reporting features."""

import logging
from dataclasses import dataclass, field
from typing import Any

import pytest
from pytest_bdd import given, parsers, then, when

from fluency_reporter.core.config import ReporterConfig
from fluency_reporter.core.models import Record, TimeUnit
from fluency_reporter.reporter import FluencyReporter
from tests.fakes import (
    ZERO_TO_99_SNAPSHOT,
    FakeCounter,
    FakeGauge,
    FakeHistogram,
    FakeMeter,
    FlakySink,
)


@dataclass
class ReportingScenarioContext:
    """State shared between the steps of one scenario."""

    now: float = 0.0
    config: dict[str, Any] = field(default_factory=dict)
    metrics: dict[str, dict[str, Any]] = field(
        default_factory=lambda: {
            "gauges": {},
            "counters": {},
            "histograms": {},
            "meters": {},
            "timers": {},
        }
    )
    sink: FlakySink = field(default_factory=FlakySink)
    error: BaseException | None = None
    _reporter: FluencyReporter | None = None

    @property
    def reporter(self) -> FluencyReporter:
        if self._reporter is None:
            config = ReporterConfig(clock=lambda: self.now, **self.config)
            self._reporter = FluencyReporter(self.sink, config)
        return self._reporter

    def record(self, tag: str) -> Record:
        matches = [r for r in self.sink.records if r.tag == tag]
        assert matches, f"no record tagged {tag!r} in {self.sink.records}"
        return matches[0]


@pytest.fixture
def ctx() -> ReportingScenarioContext:
    """Fresh scenario context for each test."""
    return ReportingScenarioContext()


# --- Given ---


@given(parsers.parse("the clock reads {now}"))
def given_clock(ctx: ReportingScenarioContext, now: str) -> None:
    ctx.now = float(now)


@given(parsers.parse('a reporter prefixed with "{prefix}"'))
def given_reporter_with_prefix(ctx: ReportingScenarioContext, prefix: str) -> None:
    ctx.config["prefix"] = prefix


@given("a reporter without a prefix")
def given_reporter_without_prefix(ctx: ReportingScenarioContext) -> None:
    ctx.config["prefix"] = ""


@given(parsers.parse('a reporter with "{code}" disabled'))
def given_reporter_with_disabled(ctx: ReportingScenarioContext, code: str) -> None:
    ctx.config["disabled_attributes"] = {code}


@given("a reporter converting rates to minutes")
def given_reporter_rates_in_minutes(ctx: ReportingScenarioContext) -> None:
    ctx.config["rate_unit"] = TimeUnit.MINUTES


@given(parsers.parse('a histogram "{name}" holding the values 0 to 99'))
def given_histogram(ctx: ReportingScenarioContext, name: str) -> None:
    ctx.metrics["histograms"][name] = FakeHistogram(count=100, snapshot=ZERO_TO_99_SNAPSHOT)


@given(parsers.parse('a counter "{name}" at {count:d}'))
def given_counter(ctx: ReportingScenarioContext, name: str, count: int) -> None:
    ctx.metrics["counters"][name] = FakeCounter(count)


@given(parsers.parse('a gauge "{name}" at {value:d}'))
def given_gauge(ctx: ReportingScenarioContext, name: str, value: int) -> None:
    ctx.metrics["gauges"][name] = FakeGauge(value)


@given(parsers.parse('a gauge "{name}" without a value'))
def given_null_gauge(ctx: ReportingScenarioContext, name: str) -> None:
    ctx.metrics["gauges"][name] = FakeGauge(None)


@given(parsers.parse('a meter "{name}" with a one minute rate of {rate:d} per second'))
def given_meter(ctx: ReportingScenarioContext, name: str, rate: int) -> None:
    ctx.metrics["meters"][name] = FakeMeter(count=1, m1_rate=float(rate))


@given(parsers.parse("the sink fails the next {n:d} emit"))
def given_sink_fails_emits(ctx: ReportingScenarioContext, n: int) -> None:
    ctx.sink.fail_emits = n


@given("the sink fails on close")
def given_sink_fails_close(ctx: ReportingScenarioContext) -> None:
    ctx.sink.fail_close = True


# --- When ---


@when("the reporter reports")
def when_reporter_reports(ctx: ReportingScenarioContext) -> None:
    ctx.reporter.report(**ctx.metrics)


@when("the reporter is stopped")
def when_reporter_stopped(ctx: ReportingScenarioContext) -> None:
    try:
        ctx.reporter.stop()
    except Exception as e:
        ctx.error = e


# --- Then ---


@then(parsers.parse("the sink holds {n:d} record"))
@then(parsers.parse("the sink holds {n:d} records"))
def then_sink_holds(ctx: ReportingScenarioContext, n: int) -> None:
    assert len(ctx.sink.records) == n


@then(parsers.parse('record "{tag}" is stamped {timestamp:d}'))
def then_record_stamped(ctx: ReportingScenarioContext, tag: str, timestamp: int) -> None:
    assert ctx.record(tag).timestamp == timestamp


@then(parsers.parse('record "{tag}" has field "{code}" equal to {value}'))
def then_record_field(
    ctx: ReportingScenarioContext, tag: str, code: str, value: str
) -> None:
    assert ctx.record(tag).fields[code] == pytest.approx(float(value))


@then("a warning was logged")
def then_warning_logged(caplog: pytest.LogCaptureFixture) -> None:
    assert any(
        r.levelno == logging.WARNING and r.name == "fluency_reporter.reporter"
        for r in caplog.records
    )


@then("no exception escaped")
def then_no_exception(ctx: ReportingScenarioContext) -> None:
    assert ctx.error is None


@then(parsers.parse("the sink was closed {n:d} time"))
def then_sink_closed(ctx: ReportingScenarioContext, n: int) -> None:
    assert ctx.sink.close_calls == n
