"""Reconciles scope starting/completed events into renderable subtrees.

The execution engine announces every scope before running it and reports
each scope when it completes. Scopes with nested members may complete in
any order; their family is held back until every registered member has
completed, then the whole family subtree is rendered once and pruned.
Scopes without nested members are rendered as soon as they complete.
"""

from __future__ import annotations

from typing import Callable, Iterable, Protocol

from tree_reporter.aggregation.registry import FamilyRegistry
from tree_reporter.model.entry import ReportEntry
from tree_reporter.tree.naming import split_scope_name
from tree_reporter.tree.node import Node, Tree


class SubtreeRenderer(Protocol):
    def render(self, family: Node) -> None: ...


class Aggregator:
    """Buffers nested families and hands complete subtrees to a renderer.

    Args:
        tree: Tree the scopes are inserted into.
        renderer: Receives each top-level scope once its family is complete.
        registry: Pending-family registry (a fresh one by default).
        splitter: Splits a qualified scope name into path segments.
    """

    def __init__(
        self,
        tree: Tree,
        renderer: SubtreeRenderer,
        registry: FamilyRegistry | None = None,
        splitter: Callable[[str], list[str]] = split_scope_name,
    ) -> None:
        self.tree = tree
        self.renderer = renderer
        self.registry = registry if registry is not None else FamilyRegistry()
        self._split = splitter

    def on_scope_starting(self, qualified_name: str) -> Node | None:
        """Record that a scope is about to run.

        The scope's path is inserted right away so the tree has its final
        shape before any result arrives. Nested scopes register themselves
        (and their top-level scope) with the family of their top-level scope.

        Returns:
            The scope's node, or None for an empty name.
        """
        path = self._split(qualified_name)
        if not path:
            return None
        node = self.tree.insert(path)
        if len(path) > 1:
            self.registry.register(path[0], qualified_name)
        return node

    def on_scope_completed(
        self,
        class_summary: ReportEntry,
        member_entries: Iterable[ReportEntry] = (),
    ) -> bool:
        """Record a completed scope and render its family when complete.

        Args:
            class_summary: Class-level entry of the completed scope.
            member_entries: Test entries reported with the scope, in
                execution order. Each one is attached to the node of its
                own source name.

        Returns:
            True if a family subtree was rendered, False if it is still
            waiting for other members (or the summary has no name).
        """
        path = self._split(class_summary.source_name)
        if not path:
            return False

        node = self.tree.insert(path)
        node.summary = class_summary
        for entry in member_entries:
            self.tree.attach(self._split(entry.source_name) or path, entry)

        family = path[0]
        if not self.registry.add_completed(family, class_summary.source_name):
            return False

        family_node = self.tree.lookup([family])
        assert family_node is not None, (
            f"scope {family!r} is ready but no longer in the tree"
        )
        self.renderer.render(family_node)
        self.tree.prune(family_node)
        return True

    def pending_families(self) -> list[str]:
        """Families still waiting for completed members."""
        return self.registry.pending()
