"""Event aggregation: pending nested families and their readiness."""

from tree_reporter.aggregation.aggregator import Aggregator
from tree_reporter.aggregation.registry import FamilyBuffer, FamilyRegistry

__all__ = [
    "Aggregator",
    "FamilyBuffer",
    "FamilyRegistry",
]
