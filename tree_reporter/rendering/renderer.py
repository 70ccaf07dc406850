"""Console rendering of a completed scope subtree.

Walks a top-level scope depth-first: the scope's class line, then its
test entries in arrival order, then each nested scope in insertion
order. Connector glyphs depend only on the node's depth, whether it sits
in the last branch of the top-level scope, and whether more entries
follow at the same node.
"""

from __future__ import annotations

import sys
from typing import BinaryIO, Protocol

from tree_reporter.config import ReporterOptions
from tree_reporter.model.entry import ERROR, FAILURE, SUCCESS, ReportEntry, abbreviate_name
from tree_reporter.rendering.sink import ConsoleSink, Styler
from tree_reporter.rendering.theme import Theme
from tree_reporter.tree.node import Node, Tree

NO_STACK_TRACE = "[No stack trace available]"


class LineSink(Protocol):
    def write_line(self, line: str) -> None: ...

    def flush(self) -> None: ...


class TreeRenderer:
    """Renders top-level scopes handed over by the aggregator.

    A renderer holds no per-family state, so several threads may render
    different families at once.

    Args:
        options: Display options.
        sink: Destination for text lines.
        out_stream: Byte stream captured standard output is replayed to
            (``sys.stdout.buffer`` by default).
        err_stream: Byte stream captured standard error is replayed to
            (``sys.stderr.buffer`` by default).
    """

    def __init__(
        self,
        options: ReporterOptions | None = None,
        sink: LineSink | None = None,
        out_stream: BinaryIO | None = None,
        err_stream: BinaryIO | None = None,
    ) -> None:
        self.options = options if options is not None else ReporterOptions()
        self.theme: Theme = self.options.theme
        self.sink = sink if sink is not None else ConsoleSink()
        self.styler = Styler(self.options.color)
        self._out_stream = out_stream
        self._err_stream = err_stream

    @property
    def out_stream(self) -> BinaryIO:
        if self._out_stream is not None:
            return self._out_stream
        return sys.stdout.buffer

    @property
    def err_stream(self) -> BinaryIO:
        if self._err_stream is not None:
            return self._err_stream
        return sys.stderr.buffer

    def render(self, family: Node) -> None:
        """Render a top-level scope and everything below it."""
        if self.options.print_blank_line_between_tests:
            self.println("")
        _FamilyPrinter(self, family).print_node(family)

    def println(self, line: str) -> None:
        self.sink.write_line(line)


class _FamilyPrinter:
    """Prints one family; knows which top-level branch is the last one."""

    def __init__(self, renderer: TreeRenderer, family: Node) -> None:
        self.renderer = renderer
        self.family = family
        self.theme = renderer.theme
        self.options = renderer.options
        self.styler = renderer.styler

    def print_node(self, node: Node) -> None:
        self.print_class(node)
        for index, entry in enumerate(node.entries):
            self.print_entry(node, entry, index)
        for branch in node.children:
            self.print_node(branch)

    def is_last_missing_branch(self, node: Node) -> bool:
        """True if nothing follows ``node`` among the family's branches."""
        last_branch = self.family.last_child
        if last_branch is None:
            return True
        if node is last_branch:
            return True
        ancestor = Tree.ancestor_named(node, last_branch.name)
        while ancestor is not None and ancestor is not last_branch:
            ancestor = Tree.ancestor_named(ancestor, last_branch.name)
        return ancestor is not None

    def print_class(self, node: Node) -> None:
        theme = self.theme
        prefix = ""
        if node.depth > 2:
            prefix += theme.blank if self.is_last_missing_branch(node) else theme.pipe
            prefix += theme.blank * (node.depth - 3)
            prefix += theme.end
        elif node.depth == 2:
            prefix += theme.end if self.is_last_missing_branch(node) else theme.entry
        prefix += theme.down if node.has_children else theme.dash

        line = prefix + self.styler.strong(_clean_report_name(node))
        if node.summary is not None:
            line += " - " + node.summary.elapsed_time_as_string()
        self.renderer.println(line)

    def print_entry(self, node: Node, entry: ReportEntry, index: int) -> None:
        styler = self.styler
        if entry.is_error_or_failure:
            self.print_result(
                node, index, styler.failure(self.theme.failed + abbreviate_name(entry.report_name))
            )
        elif entry.is_skipped:
            label = styler.warning(self.theme.skipped + _skipped_name(entry))
            if entry.message and entry.message.strip():
                label += styler.warning(f" ({entry.message})")
            self.print_result(node, index, label)
        elif not self.options.hide_results_on_success:
            self.print_result(
                node, index, styler.success(self.theme.successful + abbreviate_name(entry.report_name))
            )
        self.print_details(entry)

    def print_result(self, node: Node, index: int, label: str) -> None:
        entry = node.entries[index]
        self.renderer.println(
            self.test_prefix(node, index) + label + " - " + entry.elapsed_time_as_string()
        )

    def test_prefix(self, node: Node, index: int) -> str:
        theme = self.theme
        prefix = theme.blank if self.is_last_missing_branch(node) else theme.pipe
        if node.depth > 1:
            prefix += theme.blank * (node.depth - 2)
            parent = node.parent
            if parent is not None and parent.has_children and node.has_children:
                prefix += theme.pipe
            else:
                prefix += theme.blank
        if index + 1 < len(node.entries):
            prefix += theme.entry
        else:
            prefix += theme.end
        return prefix

    def print_details(self, entry: ReportEntry) -> None:
        options = self.options
        is_success = entry.status == SUCCESS
        is_error = entry.status == ERROR
        is_failure = entry.status == FAILURE

        print_stack_trace = (
            options.print_stacktrace_on_error and is_error
            or options.print_stacktrace_on_failure and is_failure
        )
        print_stdout = (
            options.print_stdout_on_success and is_success
            or options.print_stdout_on_error and is_error
            or options.print_stdout_on_failure and is_failure
        )
        print_stderr = (
            options.print_stderr_on_success and is_success
            or options.print_stderr_on_error and is_error
            or options.print_stderr_on_failure and is_failure
        )

        if not (print_stack_trace or print_stdout or print_stderr):
            return
        self.print_preamble(entry)
        if print_stack_trace:
            self.print_stack_trace(entry)
        if print_stdout:
            self.replay("Standard out", entry.stdout, self.renderer.out_stream)
        if print_stderr:
            self.replay("Standard error", entry.stderr, self.renderer.err_stream)

    def print_preamble(self, entry: ReportEntry) -> None:
        header = self.theme.details + abbreviate_name(entry.report_name)
        if entry.is_succeeded:
            self.renderer.println(self.styler.success(header))
        else:
            self.renderer.println(self.styler.failure(header))

    def print_stack_trace(self, entry: ReportEntry) -> None:
        self.renderer.println("")
        self.renderer.println(self.styler.strong("Stack trace"))
        if entry.stack_trace and entry.stack_trace.strip():
            self.renderer.println(entry.stack_trace)
        else:
            self.renderer.println(NO_STACK_TRACE)

    def replay(self, label: str, data: bytes | None, stream: BinaryIO) -> None:
        """Print a labelled block and copy captured bytes to ``stream``."""
        self.renderer.println("")
        self.renderer.println(self.styler.strong(label))
        if not data:
            return
        try:
            self.renderer.sink.flush()
            stream.write(data)
            stream.flush()
        except (OSError, ValueError) as e:
            print(f"tree reporter: could not replay {label.lower()}: {e}", file=sys.stderr)


def _clean_report_name(node: Node) -> str:
    """Class display name without the enclosing scope's display name."""
    if node.summary is None:
        return node.name
    name = node.summary.report_name_with_group
    parent = node.parent
    if parent is not None and parent.summary is not None:
        enclosing = parent.summary.report_name_with_group
        if name.startswith(enclosing) and len(name) > len(enclosing):
            return name[len(enclosing) + 1:]
    return name


def _skipped_name(entry: ReportEntry) -> str:
    if entry.report_name.strip():
        return abbreviate_name(entry.report_name)
    return entry.report_name_with_group
