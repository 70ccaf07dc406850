"""Tree data structures for nested test scopes.

Provides Node (one segment of a qualified scope name, with its class
summary and attached test entries) and Tree (path-based insertion,
lookup and pruning below a sentinel root).
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Iterable

from tree_reporter.model.entry import ReportEntry

ROOT_NAME = "ROOT"


@dataclass(eq=False)
class Node:
    """A scope in the tree: a test class or a nested scope inside it."""

    name: str
    depth: int = 0
    parent: Node | None = field(default=None, repr=False)
    summary: ReportEntry | None = field(default=None, repr=False)
    children: list[Node] = field(default_factory=list, repr=False)
    entries: list[ReportEntry] = field(default_factory=list, repr=False)

    # Child lookup by name, kept in sync with ``children``
    _index: dict[str, Node] = field(default_factory=dict, repr=False)

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    @property
    def last_child(self) -> Node | None:
        return self.children[-1] if self.children else None

    @property
    def path(self) -> list[str]:
        """Segments from the top-level scope down to this node."""
        segments: list[str] = []
        node: Node | None = self
        while node is not None and node.parent is not None:
            segments.append(node.name)
            node = node.parent
        segments.reverse()
        return segments

    def child(self, name: str) -> Node | None:
        """Get the direct child with the given name."""
        return self._index.get(name)

    def contains(self, name: str) -> bool:
        return name in self._index

    def _add_child(self, name: str) -> Node:
        branch = Node(name=name, depth=self.depth + 1, parent=self)
        self.children.append(branch)
        self._index[name] = branch
        return branch

    def _remove_child(self, branch: Node) -> bool:
        if self._index.get(branch.name) is not branch:
            return False
        del self._index[branch.name]
        self.children.remove(branch)
        return True

    def _clear_children(self) -> None:
        self.children.clear()
        self._index.clear()


class Tree:
    """Named tree of scopes below a sentinel ``ROOT`` node.

    One tree is built per reporting session. Structural changes
    (insert, prune, clear, attaching entries) are serialized so that
    different families can be fed from different threads.
    """

    def __init__(self) -> None:
        self.root = Node(name=ROOT_NAME, depth=0)
        self._lock = threading.RLock()

    def insert(self, path: Iterable[str]) -> Node:
        """Insert a path, creating missing segments.

        Inserting the same path again returns the existing node.

        Args:
            path: Segments from the top-level scope down.

        Returns:
            The node at the end of the path, or the root for an empty path.
        """
        with self._lock:
            node = self.root
            for segment in path:
                branch = node.child(segment)
                if branch is None:
                    branch = node._add_child(segment)
                node = branch
            return node

    def lookup(self, path: Iterable[str]) -> Node | None:
        """Find the node at a path.

        Returns:
            The node, or None if any segment is missing or the path is empty.
        """
        with self._lock:
            node: Node | None = self.root
            found = False
            for segment in path:
                node = node.child(segment)
                if node is None:
                    return None
                found = True
            return node if found else None

    @staticmethod
    def ancestor_named(node: Node, name: str) -> Node | None:
        """Return the nearest ancestor of ``node`` called ``name``."""
        parent = node.parent
        while parent is not None:
            if parent.name == name:
                return parent
            parent = parent.parent
        return None

    def attach(self, path: Iterable[str], entry: ReportEntry) -> Node:
        """Append a test entry to the node at ``path``, inserting it if needed."""
        with self._lock:
            node = self.insert(path)
            node.entries.append(entry)
            return node

    def prune(self, node: Node) -> None:
        """Detach ``node`` and its subtree from its parent.

        Sibling order is preserved. Pruning the root or a node that is
        already detached does nothing.
        """
        with self._lock:
            parent = node.parent
            if parent is None:
                return
            parent._remove_child(node)

    def clear(self) -> None:
        """Drop every scope below the root."""
        with self._lock:
            self.root._clear_children()

    def __len__(self) -> int:
        """Number of top-level scopes currently held."""
        return len(self.root.children)
