"""Pending-family registry for nested test scopes.

A family is every scope that shares one top-level scope. Families with
nested scopes are tracked here until each registered scope has
completed; the registry then evicts the family in the same locked step
that observed readiness, so exactly one caller ever sees a family become
ready.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field


@dataclass
class FamilyBuffer:
    """Completion bookkeeping of one nested family, keyed by its root scope."""

    family: str
    scope_names: set[str] = field(default_factory=set)
    completed_names: set[str] = field(default_factory=set)

    @property
    def is_ready(self) -> bool:
        """True once every registered scope has completed.

        Completed scopes that were never registered do not count towards
        readiness.
        """
        return bool(self.scope_names) and self.scope_names <= self.completed_names


class FamilyRegistry:
    """Thread-safe map of family name to FamilyBuffer."""

    def __init__(self) -> None:
        self._buffers: dict[str, FamilyBuffer] = {}
        self._lock = threading.Lock()

    def register(self, family: str, scope_name: str) -> FamilyBuffer:
        """Register a scope as a member of a nested family.

        The family's own root scope is always a member, so the first
        registration seeds the name set with it.

        Args:
            family: Root scope name of the family.
            scope_name: Qualified name of the member scope.

        Returns:
            The family's live buffer.
        """
        with self._lock:
            buffer = self._buffers.get(family)
            if buffer is None:
                buffer = FamilyBuffer(family=family, scope_names={family})
                self._buffers[family] = buffer
            buffer.scope_names.add(scope_name)
            return buffer

    def add_completed(self, family: str, scope_name: str) -> bool:
        """Record a completed scope and evict its family once it is ready.

        Args:
            family: Root scope name of the family.
            scope_name: Qualified name of the completed scope.

        Returns:
            True if the family is ready to render: either it was never
            registered (a singleton) or this completion was its last
            missing scope.
        """
        with self._lock:
            buffer = self._buffers.get(family)
            if buffer is None:
                return True
            buffer.completed_names.add(scope_name)
            if not buffer.is_ready:
                return False
            del self._buffers[family]
            return True

    def pending(self) -> list[str]:
        """Names of families still waiting for completed scopes."""
        with self._lock:
            return sorted(self._buffers)

    def clear(self) -> list[str]:
        """Drop every buffer and return the names of the dropped families."""
        with self._lock:
            dropped = sorted(self._buffers)
            self._buffers.clear()
            return dropped

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffers)
