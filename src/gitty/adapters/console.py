"""Terminal implementation of the Display protocol."""

from __future__ import annotations

import sys
from typing import TextIO


class ConsoleDisplay:
    """Writes diagnostics to a text stream, stderr by default.

    Example:
        display = ConsoleDisplay()
        display.error("Your gitty configuration has invalid JSON syntax")
        display.hint("File location: ~/.gitty/config.json")
    """

    ERROR_PREFIX = "error: "
    WARNING_PREFIX = "warning: "
    HINT_PREFIX = "  "

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        # Resolved lazily so pytest's capsys replacement of stderr is honoured
        return self._stream if self._stream is not None else sys.stderr

    def _write(self, prefix: str, message: str) -> None:
        print(f"{prefix}{message}", file=self.stream)

    def error(self, message: str) -> None:
        self._write(self.ERROR_PREFIX, message)

    def warning(self, message: str) -> None:
        self._write(self.WARNING_PREFIX, message)

    def hint(self, message: str) -> None:
        self._write(self.HINT_PREFIX, message)
