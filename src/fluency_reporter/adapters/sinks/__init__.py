"""Sink adapters for delivering metric records."""

from fluency_reporter.adapters.sinks.in_memory import InMemorySink
from fluency_reporter.adapters.sinks.ndjson import NDJSONSink, encode_record
from fluency_reporter.adapters.sinks.sqlite import SQLiteSink

__all__ = [
    "InMemorySink",
    "NDJSONSink",
    "SQLiteSink",
    "encode_record",
]
