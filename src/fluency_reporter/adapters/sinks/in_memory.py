"""In-memory sink adapter."""

from collections.abc import Mapping
from typing import Any

from fluency_reporter.core.errors import SinkError
from fluency_reporter.core.models import Record


class InMemorySink:
    """In-memory implementation of SinkPort.

    Stores emitted records in a list. Suitable for testing and for hosts
    that forward records themselves.
    """

    def __init__(self) -> None:
        self._records: list[Record] = []
        self._closed = False

    @property
    def records(self) -> list[Record]:
        """Records emitted so far, in emit order."""
        return list(self._records)

    @property
    def closed(self) -> bool:
        return self._closed

    def emit(self, tag: str, timestamp: int, fields: Mapping[str, Any]) -> None:
        """Store a record.

        Raises:
            SinkError: If the sink has been closed.
        """
        if self._closed:
            raise SinkError("sink is closed")
        self._records.append(Record(tag=tag, timestamp=timestamp, fields=dict(fields)))

    def clear(self) -> None:
        """Drop all stored records."""
        self._records.clear()

    def close(self) -> None:
        self._closed = True
