"""Report entry model shared by the tree, aggregation and rendering layers."""

from tree_reporter.model.entry import (
    ERROR,
    FAILURE,
    SKIPPED,
    SUCCESS,
    VALID_STATUSES,
    ReportEntry,
    abbreviate_name,
    format_seconds,
)

__all__ = [
    "ERROR",
    "FAILURE",
    "SKIPPED",
    "SUCCESS",
    "VALID_STATUSES",
    "ReportEntry",
    "abbreviate_name",
    "format_seconds",
]
