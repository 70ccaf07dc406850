"""Recorded test-set event streams.

An event stream file (JSON or YAML) lists the starting/completed events
an execution engine emitted, in order::

    events:
      - {type: starting, source_name: "OuterTest$InnerTest"}
      - {type: starting, source_name: OuterTest}
      - type: completed
        entry: {source_name: OuterTest, elapsed: 12}
        tests:
          - {source_name: OuterTest, name: shouldPass, status: success, elapsed: 3}
      - type: completed
        entry: {source_name: "OuterTest$InnerTest", elapsed: 4}

A bare list of events is accepted as well.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Union

import yaml

from tree_reporter.config import YAML_SUFFIXES
from tree_reporter.model.entry import ReportEntry
from tree_reporter.reporter import ConsoleTreeReporter

STARTING = "starting"
COMPLETED = "completed"

_TEXT_FIELDS = ("name", "source_text", "name_text", "message", "stack_trace")


class EventStreamError(ValueError):
    """Raised when an event stream cannot be parsed."""


@dataclass
class StartingEvent:
    """A test set is about to run."""

    source_name: str


@dataclass
class CompletedEvent:
    """A test set finished, with the test results reported alongside it."""

    entry: ReportEntry
    tests: list[ReportEntry] = field(default_factory=list)


Event = Union[StartingEvent, CompletedEvent]


def _encode_output(value: Any, key: str) -> bytes | None:
    if value is None:
        return None
    if isinstance(value, bytes):
        return value
    if isinstance(value, str):
        return value.encode("utf-8")
    raise EventStreamError(f"'{key}' must be text, got {type(value).__name__}")


def entry_from_dict(data: Any) -> ReportEntry:
    """Build a ReportEntry from its mapping form.

    Raises:
        EventStreamError: If required fields are missing or malformed.
    """
    if not isinstance(data, dict):
        raise EventStreamError(f"Report entry must be a mapping, got {type(data).__name__}")
    source_name = data.get("source_name")
    if not isinstance(source_name, str):
        raise EventStreamError("Report entry is missing 'source_name'")

    kwargs: dict[str, Any] = {"source_name": source_name}
    for key in _TEXT_FIELDS:
        if data.get(key) is not None:
            kwargs[key] = str(data[key])
    if data.get("status") is not None:
        kwargs["status"] = str(data["status"]).lower()
    if data.get("elapsed") is not None:
        try:
            kwargs["elapsed"] = int(data["elapsed"])
        except (TypeError, ValueError) as e:
            raise EventStreamError(f"Invalid elapsed time: {data['elapsed']!r}") from e
    kwargs["stdout"] = _encode_output(data.get("stdout"), "stdout")
    kwargs["stderr"] = _encode_output(data.get("stderr"), "stderr")

    try:
        return ReportEntry(**kwargs)
    except ValueError as e:
        raise EventStreamError(str(e)) from e


def parse_events(data: Any) -> list[Event]:
    """Convert a decoded event stream into event objects.

    Args:
        data: ``{"events": [...]}`` or a list of event mappings.

    Raises:
        EventStreamError: If the stream or one of its events is malformed.
    """
    if isinstance(data, dict):
        data = data.get("events")
    if not isinstance(data, list):
        raise EventStreamError("Event stream must be a list or contain an 'events' list")

    events: list[Event] = []
    for position, raw in enumerate(data):
        if not isinstance(raw, dict):
            raise EventStreamError(f"Event {position} must be a mapping")
        event_type = raw.get("type")
        if event_type == STARTING:
            source_name = raw.get("source_name")
            if not isinstance(source_name, str):
                raise EventStreamError(f"Event {position} is missing 'source_name'")
            events.append(StartingEvent(source_name=source_name))
        elif event_type == COMPLETED:
            tests = raw.get("tests") or []
            if not isinstance(tests, list):
                raise EventStreamError(f"Event {position}: 'tests' must be a list")
            events.append(CompletedEvent(
                entry=entry_from_dict(raw.get("entry")),
                tests=[entry_from_dict(t) for t in tests],
            ))
        else:
            raise EventStreamError(f"Event {position} has unknown type: {event_type!r}")
    return events


def load_events(path: Path) -> list[Event]:
    """Read an event stream file.

    Raises:
        FileNotFoundError: If the file does not exist.
        EventStreamError: If the file cannot be decoded or parsed.
    """
    text = path.read_text()
    try:
        if path.suffix.lower() in YAML_SUFFIXES:
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise EventStreamError(f"Cannot decode {path}: {e}") from e
    return parse_events(data)


def replay(events: list[Event], reporter: ConsoleTreeReporter) -> int:
    """Feed recorded events to a reporter.

    Returns:
        Number of families printed.
    """
    printed = 0
    for event in events:
        if isinstance(event, StartingEvent):
            reporter.test_set_starting(event.source_name)
        elif reporter.test_set_completed(event.entry, event.tests):
            printed += 1
    return printed
