"""Console rendering: glyph themes, line sinks and the tree renderer."""

from tree_reporter.rendering.renderer import NO_STACK_TRACE, TreeRenderer
from tree_reporter.rendering.sink import ConsoleSink, LoggerSink, Styler
from tree_reporter.rendering.theme import ASCII, EMOJI, THEMES, UNICODE, Theme

__all__ = [
    "ASCII",
    "ConsoleSink",
    "EMOJI",
    "LoggerSink",
    "NO_STACK_TRACE",
    "Styler",
    "THEMES",
    "Theme",
    "TreeRenderer",
    "UNICODE",
]
