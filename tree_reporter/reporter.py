"""Console tree reporter: the entry point used by a test execution engine.

One ConsoleTreeReporter is constructed per run. It owns the scope tree,
the pending-family registry and the renderer, and forwards the engine's
test-set events to the aggregator.
"""

from __future__ import annotations

import sys
from typing import BinaryIO, Iterable

from tree_reporter.aggregation.aggregator import Aggregator
from tree_reporter.aggregation.registry import FamilyRegistry
from tree_reporter.config import ReporterOptions
from tree_reporter.model.entry import ReportEntry
from tree_reporter.rendering.renderer import LineSink, TreeRenderer
from tree_reporter.rendering.sink import ConsoleSink
from tree_reporter.tree.node import Tree


class ConsoleTreeReporter:
    """Prints test results as a tree, one top-level scope at a time.

    Usage::

        with ConsoleTreeReporter(options) as reporter:
            reporter.test_set_starting("OuterTest$InnerTest")
            reporter.test_set_starting("OuterTest")
            reporter.test_set_completed(outer_entry, outer_tests)
            reporter.test_set_completed(inner_entry)

    Args:
        options: Display options (defaults when omitted).
        sink: Destination for rendered lines (stdout when omitted).
        out_stream: Byte stream for replayed standard output.
        err_stream: Byte stream for replayed standard error.
    """

    def __init__(
        self,
        options: ReporterOptions | None = None,
        sink: LineSink | None = None,
        out_stream: BinaryIO | None = None,
        err_stream: BinaryIO | None = None,
    ) -> None:
        self.options = options if options is not None else ReporterOptions()
        self.sink = sink if sink is not None else ConsoleSink()
        self.tree = Tree()
        self.registry = FamilyRegistry()
        self.renderer = TreeRenderer(self.options, self.sink, out_stream, err_stream)
        self.aggregator = Aggregator(self.tree, self.renderer, self.registry)

    def run_starting(self) -> None:
        """Start a new print session with an empty tree."""
        self.registry.clear()
        self.tree.clear()

    def test_set_starting(self, entry: ReportEntry | str) -> None:
        """Announce a test set (class or nested class) before it runs."""
        name = entry if isinstance(entry, str) else entry.source_name
        self.aggregator.on_scope_starting(name)

    def test_set_completed(
        self,
        entry: ReportEntry,
        member_entries: Iterable[ReportEntry] = (),
    ) -> bool:
        """Report a completed test set with its test results.

        Returns:
            True if the test set's family was printed by this call.
        """
        return self.aggregator.on_scope_completed(entry, member_entries)

    def pending_families(self) -> list[str]:
        return self.aggregator.pending_families()

    def close(self) -> list[str]:
        """End the run, dropping anything still buffered.

        Returns:
            Names of families that never received all their results.
        """
        pending = self.registry.clear()
        self.tree.clear()
        if pending:
            print(
                "tree reporter: results never completed for: " + ", ".join(pending),
                file=sys.stderr,
            )
        self.sink.flush()
        return pending

    def __enter__(self) -> ConsoleTreeReporter:
        self.run_starting()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
