"""Display options for the console tree reporter.

Reads and writes a JSON or YAML options file holding the theme and the
per-status switches for success lines, stack traces and captured output.
Missing keys fall back to DEFAULT_OPTIONS.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

if TYPE_CHECKING:
    from tree_reporter.rendering.theme import Theme

# Default option values
DEFAULT_OPTIONS: dict[str, Any] = {
    "theme": "unicode",
    "hide_results_on_success": False,
    "print_stacktrace_on_error": True,
    "print_stacktrace_on_failure": True,
    "print_stdout_on_success": False,
    "print_stdout_on_error": True,
    "print_stdout_on_failure": True,
    "print_stderr_on_success": False,
    "print_stderr_on_error": True,
    "print_stderr_on_failure": True,
    "print_blank_line_between_tests": False,
    "color": False,
}

YAML_SUFFIXES = frozenset({".yaml", ".yml"})

_FLAG_WORDS = {
    "true": True, "yes": True, "on": True, "1": True,
    "false": False, "no": False, "off": False, "0": False,
}


class ReporterOptions:
    """Manages the reporter options file."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        self._data: dict[str, Any] = dict(DEFAULT_OPTIONS)
        if path is not None and path.exists():
            self._load()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReporterOptions:
        """Build options in memory, without a backing file."""
        options = cls(None)
        options.set_options(**data)
        return options

    def _is_yaml(self) -> bool:
        assert self.path is not None
        return self.path.suffix.lower() in YAML_SUFFIXES

    def _load(self) -> None:
        """Load options from the file."""
        assert self.path is not None
        try:
            text = self.path.read_text()
            if self._is_yaml():
                data = yaml.safe_load(text)
            else:
                data = json.loads(text)
            if isinstance(data, dict):
                self._apply(data)
        except (json.JSONDecodeError, yaml.YAMLError, OSError):
            self._data = dict(DEFAULT_OPTIONS)
        except ValueError as e:
            print(f"tree reporter: ignoring options file {self.path}: {e}", file=sys.stderr)
            self._data = dict(DEFAULT_OPTIONS)

    def save(self) -> None:
        """Write options to the file."""
        if self.path is None:
            raise ValueError("No options file path specified")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            if self._is_yaml():
                yaml.safe_dump(self._data, f, sort_keys=True)
            else:
                json.dump(self._data, f, indent=2)
                f.write("\n")

    @property
    def options(self) -> dict[str, Any]:
        """Get the full options dict."""
        return dict(self._data)

    def _flag(self, key: str) -> bool:
        return self._data.get(key, DEFAULT_OPTIONS[key])

    @property
    def theme(self) -> Theme:
        """Get the glyph theme.

        Raises:
            ValueError: If the configured theme name is unknown.
        """
        from tree_reporter.rendering.theme import Theme

        return Theme.by_name(str(self._data.get("theme", DEFAULT_OPTIONS["theme"])))

    @property
    def hide_results_on_success(self) -> bool:
        return self._flag("hide_results_on_success")

    @property
    def print_stacktrace_on_error(self) -> bool:
        return self._flag("print_stacktrace_on_error")

    @property
    def print_stacktrace_on_failure(self) -> bool:
        return self._flag("print_stacktrace_on_failure")

    @property
    def print_stdout_on_success(self) -> bool:
        return self._flag("print_stdout_on_success")

    @property
    def print_stdout_on_error(self) -> bool:
        return self._flag("print_stdout_on_error")

    @property
    def print_stdout_on_failure(self) -> bool:
        return self._flag("print_stdout_on_failure")

    @property
    def print_stderr_on_success(self) -> bool:
        return self._flag("print_stderr_on_success")

    @property
    def print_stderr_on_error(self) -> bool:
        return self._flag("print_stderr_on_error")

    @property
    def print_stderr_on_failure(self) -> bool:
        return self._flag("print_stderr_on_failure")

    @property
    def print_blank_line_between_tests(self) -> bool:
        """Emit an empty line before each top-level scope."""
        return self._flag("print_blank_line_between_tests")

    @property
    def color(self) -> bool:
        """Style lines with ANSI colors."""
        return self._flag("color")

    def set_options(self, **overrides: Any) -> None:
        """Update option values; None leaves a value unchanged.

        Raises:
            ValueError: If an option name is unknown or its value does
                not fit the option.
        """
        self._apply(overrides)

    def _apply(self, values: dict[Any, Any]) -> None:
        for key, value in values.items():
            if key not in DEFAULT_OPTIONS:
                raise ValueError(f"Unknown reporter option: {key}")
            if value is not None:
                self._data[key] = _coerce(key, value)


def _coerce(key: str, value: Any) -> Any:
    """Check an option value against the type of its default.

    Flags accept booleans and the strings true/false, yes/no, on/off, 1/0.

    Raises:
        ValueError: If the value does not fit the option.
    """
    if key == "theme":
        if not isinstance(value, str):
            raise ValueError(f"Option {key!r} must be a theme name, got {value!r}")
        return value
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in _FLAG_WORDS:
        return _FLAG_WORDS[value.strip().lower()]
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise ValueError(f"Option {key!r} must be true or false, got {value!r}")
