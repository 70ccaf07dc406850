"""Destinations for rendered lines, plus optional console styling.

Each sink call carries exactly one finished line, written under a lock
so that lines rendered for different families never split each other.
"""

from __future__ import annotations

import logging
import sys
import threading
from typing import TextIO

from rich.console import Console
from rich.text import Text


class ConsoleSink:
    """Writes lines to a text stream (``sys.stdout`` by default)."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self._lock = threading.Lock()

    @property
    def stream(self) -> TextIO:
        # Resolved per call so redirected sys.stdout is honoured
        return self._stream if self._stream is not None else sys.stdout

    def write_line(self, line: str) -> None:
        with self._lock:
            self.stream.write(line + "\n")

    def flush(self) -> None:
        with self._lock:
            self.stream.flush()


class LoggerSink:
    """Routes lines through a standard library logger at INFO level."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger("tree_reporter")

    def write_line(self, line: str) -> None:
        self.logger.info(line)

    def flush(self) -> None:
        for handler in self.logger.handlers:
            handler.flush()


class Styler:
    """Applies rich styles to line fragments when enabled.

    Fragments are rendered to ANSI text through a rich Console so they
    can be joined with connector glyphs into a single sink line.
    """

    def __init__(self, enabled: bool = False) -> None:
        self.enabled = enabled
        self._console = Console(
            force_terminal=True,
            color_system="standard",
            no_color=not enabled,
            highlight=False,
            legacy_windows=False,
        )

    def _render(self, text: str, style: str) -> str:
        if not self.enabled or not text:
            return text
        with self._console.capture() as capture:
            self._console.print(Text(text, style=style), end="", soft_wrap=True)
        return capture.get()

    def strong(self, text: str) -> str:
        return self._render(text, "bold")

    def success(self, text: str) -> str:
        return self._render(text, "green")

    def failure(self, text: str) -> str:
        return self._render(text, "red")

    def warning(self, text: str) -> str:
        return self._render(text, "yellow")
