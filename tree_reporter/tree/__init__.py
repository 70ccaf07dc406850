"""Scope tree: name segmentation, nodes and path-based tree operations."""

from tree_reporter.tree.naming import NESTED_SCOPE_DELIMITER, split_scope_name
from tree_reporter.tree.node import ROOT_NAME, Node, Tree

__all__ = [
    "NESTED_SCOPE_DELIMITER",
    "ROOT_NAME",
    "Node",
    "Tree",
    "split_scope_name",
]
