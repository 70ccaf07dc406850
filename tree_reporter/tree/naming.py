"""Scope name segmentation.

Qualified scope names nest with a single delimiter character, e.g.
``com.example.OuterTest$InnerTest``. Everything that needs the path of a
scope goes through these functions so the delimiter scheme can change
without touching the tree or aggregation code.
"""

from __future__ import annotations

NESTED_SCOPE_DELIMITER = "$"


def split_scope_name(qualified_name: str | None) -> list[str]:
    """Split a qualified scope name into path segments.

    Empty segments are kept (``"A$"`` gives ``["A", ""]``) so every
    delimiter produces exactly one extra level.

    Args:
        qualified_name: Delimiter-separated scope name.

    Returns:
        Path segments from the top-level scope down, or an empty list
        for an empty or missing name.
    """
    if not qualified_name:
        return []
    return qualified_name.split(NESTED_SCOPE_DELIMITER)
