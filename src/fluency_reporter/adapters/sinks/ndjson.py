"""NDJSON sink adapter writing one JSON object per record."""

import json
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import IO, Any

from fluency_reporter.core.errors import SinkError


def encode_record(tag: str, timestamp: int, fields: Mapping[str, Any]) -> str:
    """Encode a record as a single JSON line (without trailing newline).

    Raises:
        SinkError: If a field value is not JSON serializable, including NaN
            and infinite floats.
    """
    obj = {"tag": tag, "timestamp": timestamp, "fields": dict(fields)}
    try:
        return json.dumps(obj, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise SinkError(f"cannot serialize record {tag!r}: {e}") from e


class NDJSONSink:
    """Sink writing newline-delimited JSON records to a text stream.

    Args:
        stream: Text stream to write to (default: sys.stdout).
        close_stream: Whether close() also closes the stream. Defaults to
            False for caller-provided streams.
    """

    def __init__(self, stream: IO[str] | None = None, close_stream: bool = False) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._close_stream = close_stream

    @classmethod
    def open(cls, path: str | Path) -> "NDJSONSink":
        """Create a sink appending to the file at path, owning the file handle."""
        try:
            stream = open(path, "a", encoding="utf-8")
        except OSError as e:
            raise SinkError(f"cannot open {path}: {e}") from e
        return cls(stream, close_stream=True)

    def emit(self, tag: str, timestamp: int, fields: Mapping[str, Any]) -> None:
        """Write one record line.

        Raises:
            SinkError: On serialization failure or when the stream is closed.
            OSError: If the stream cannot be written.
        """
        line = encode_record(tag, timestamp, fields)
        try:
            self._stream.write(line + "\n")
        except ValueError as e:
            # io raises ValueError for operations on a closed file
            raise SinkError(f"cannot write record {tag!r}: {e}") from e

    def close(self) -> None:
        """Flush the stream, closing it when this sink owns it."""
        if self._stream.closed:
            return
        self._stream.flush()
        if self._close_stream:
            self._stream.close()
