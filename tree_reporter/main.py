"""Command-line entry point for the console tree reporter.

Replays a recorded event stream through the reporter, printing the
resulting tree to stdout.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from tree_reporter.config import ReporterOptions
from tree_reporter.events import EventStreamError, load_events, replay
from tree_reporter.rendering.theme import THEMES
from tree_reporter.reporter import ConsoleTreeReporter


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Console tree reporter - prints test results as a tree"
    )
    parser.add_argument(
        "--events",
        required=True,
        type=Path,
        help="Path to the JSON or YAML event stream file",
    )
    parser.add_argument(
        "--config-file",
        type=Path,
        default=None,
        help="Path to a JSON or YAML reporter options file",
    )
    parser.add_argument(
        "--theme",
        choices=sorted(THEMES),
        default=None,
        help="Glyph theme (default: from config, else unicode)",
    )
    parser.add_argument(
        "--hide-successes",
        action="store_true",
        default=False,
        help="Do not print lines for successful tests",
    )
    parser.add_argument(
        "--blank-lines",
        action="store_true",
        default=False,
        help="Print an empty line before each top-level test class",
    )
    parser.add_argument(
        "--color",
        action="store_true",
        default=False,
        help="Style output with ANSI colors",
    )
    return parser.parse_args(argv)


def _build_options(args: argparse.Namespace) -> ReporterOptions:
    options = ReporterOptions(args.config_file)
    options.set_options(
        theme=args.theme,
        hide_results_on_success=True if args.hide_successes else None,
        print_blank_line_between_tests=True if args.blank_lines else None,
        color=True if args.color else None,
    )
    return options


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    try:
        events = load_events(args.events)
    except FileNotFoundError:
        print(f"Error: Event stream file not found: {args.events}", file=sys.stderr)
        return 1
    except EventStreamError as e:
        print(f"Error: Invalid event stream: {e}", file=sys.stderr)
        return 1

    # An unknown theme in the options file surfaces when the renderer is built
    try:
        reporter = ConsoleTreeReporter(_build_options(args))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    with reporter:
        replay(events, reporter)
    return 0


if __name__ == "__main__":
    sys.exit(main())
