"""Reporting sinks for operator-facing output."""

import sys
import threading
from dataclasses import dataclass
from typing import TextIO


class ConsoleSink:
    """Write progress, output and errors to a text stream.

    Each call becomes exactly one write under a lock, so lines from
    concurrent output streams never interleave mid-line.
    """

    def __init__(self, stream: TextIO | None = None, prefix: str = "") -> None:
        """Initialize the sink.

        Args:
            stream: Destination (defaults to sys.stdout at write time)
            prefix: Text placed before every line, e.g. a machine name
        """
        self._stream = stream
        self.prefix = prefix
        self._lock = threading.Lock()

    def _write(self, marker: str, text: str) -> None:
        stream = self._stream or sys.stdout
        line = f"{self.prefix}{marker}{text}\n"
        with self._lock:
            stream.write(line)
            stream.flush()

    def say(self, message: str) -> None:
        self._write("==> ", message)

    def message(self, line: str) -> None:
        self._write("    ", line)

    def error(self, message: str) -> None:
        self._write("!!  ", message)


@dataclass(frozen=True)
class SinkEvent:
    """One call recorded by CapturingSink."""

    kind: str  # "say", "message" or "error"
    text: str


class CapturingSink:
    """Record every sink call in arrival order."""

    def __init__(self) -> None:
        self.events: list[SinkEvent] = []
        self._lock = threading.Lock()

    def _record(self, kind: str, text: str) -> None:
        with self._lock:
            self.events.append(SinkEvent(kind=kind, text=text))

    def say(self, message: str) -> None:
        self._record("say", message)

    def message(self, line: str) -> None:
        self._record("message", line)

    def error(self, message: str) -> None:
        self._record("error", message)

    def texts(self, kind: str) -> list[str]:
        """Texts of all recorded events of one kind."""
        with self._lock:
            return [e.text for e in self.events if e.kind == kind]

    @property
    def messages(self) -> list[str]:
        """Streamed output lines."""
        return self.texts("message")
