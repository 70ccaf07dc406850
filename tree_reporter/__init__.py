"""Console tree reporter: prints hierarchical test results as a tree."""

from tree_reporter.config import ReporterOptions
from tree_reporter.model.entry import ReportEntry
from tree_reporter.reporter import ConsoleTreeReporter

__all__ = [
    "ConsoleTreeReporter",
    "ReportEntry",
    "ReporterOptions",
]
