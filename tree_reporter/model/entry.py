"""Report entries delivered by the test execution engine.

A ReportEntry describes one observed outcome: either a class-level
summary (the scope itself) or a single test method inside a scope.
Statuses follow the four-status model: success, failure, error, skipped.
"""

from __future__ import annotations

import re
from dataclasses import dataclass


SUCCESS = "success"
FAILURE = "failure"
ERROR = "error"
SKIPPED = "skipped"

# Valid status values in the four-status model
VALID_STATUSES = frozenset({SUCCESS, FAILURE, ERROR, SKIPPED})

# A dotted, package-qualified type name such as java.lang.String
_QUALIFIED_TYPE = re.compile(r"(?:[A-Za-z_$][\w$]*\.)+([A-Za-z_$][\w$]*)")


@dataclass
class ReportEntry:
    """Result of a single class or test method."""

    source_name: str
    name: str | None = None
    status: str = SUCCESS
    elapsed: int | None = None  # milliseconds
    source_text: str | None = None
    name_text: str | None = None
    message: str | None = None
    stdout: bytes | None = None
    stderr: bytes | None = None
    stack_trace: str | None = None

    def __post_init__(self) -> None:
        if self.status not in VALID_STATUSES:
            raise ValueError(f"Unknown entry status: {self.status!r}")

    @property
    def report_name(self) -> str:
        """Display name of the test method."""
        if self.name_text:
            return self.name_text
        return self.name or ""

    @property
    def report_name_with_group(self) -> str:
        """Display name of the enclosing class, nested names included."""
        if self.source_text:
            return self.source_text
        return self.source_name

    @property
    def is_succeeded(self) -> bool:
        return self.status == SUCCESS

    @property
    def is_error_or_failure(self) -> bool:
        return self.status in (ERROR, FAILURE)

    @property
    def is_skipped(self) -> bool:
        return self.status == SKIPPED

    def elapsed_time_as_string(self) -> str:
        """Format the elapsed time in seconds, e.g. ``"1.234 s"``."""
        if self.elapsed is None:
            return "0 s"
        return f"{format_seconds(self.elapsed / 1000.0)} s"


def format_seconds(seconds: float) -> str:
    """Format seconds with grouping and one to three decimals.

    Args:
        seconds: Duration in seconds.

    Returns:
        Text such as ``"0.5"``, ``"1.234"`` or ``"1,500.0"``.
    """
    text = f"{seconds:,.3f}".rstrip("0")
    if text.endswith("."):
        text += "0"
    return text


def abbreviate_name(text: str) -> str:
    """Shorten package-qualified types in a trailing parameter list.

    ``"method(java.lang.String, int)"`` becomes ``"method(String, int)"``.
    Names without a parameter list are returned unchanged.
    """
    if not text or not text.endswith(")"):
        return text
    start = text.find("(")
    if start == -1:
        return text
    return text[:start] + _QUALIFIED_TYPE.sub(r"\1", text[start:])
