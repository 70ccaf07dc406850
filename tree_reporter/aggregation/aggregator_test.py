"""Unit tests for the aggregator."""

from __future__ import annotations

import random
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from tree_reporter.aggregation.aggregator import Aggregator
from tree_reporter.model.entry import FAILURE, ReportEntry
from tree_reporter.tree.node import Node, Tree


class _RecordingRenderer:
    """Captures the shape of every rendered family."""

    def __init__(self) -> None:
        self.rendered: list[Node] = []
        self.shapes: list[dict] = []
        self._lock = threading.Lock()

    def render(self, family: Node) -> None:
        with self._lock:
            self.rendered.append(family)
            self.shapes.append(_shape(family))


def _shape(node: Node) -> dict:
    return {
        "name": node.name,
        "summary": node.summary.source_name if node.summary else None,
        "tests": [e.name for e in node.entries],
        "children": [_shape(b) for b in node.children],
    }


def _make_aggregator() -> tuple[Aggregator, Tree, _RecordingRenderer]:
    tree = Tree()
    renderer = _RecordingRenderer()
    return Aggregator(tree, renderer), tree, renderer


def _test(source_name: str, name: str, status: str = "success") -> ReportEntry:
    return ReportEntry(source_name, name=name, status=status, elapsed=1)


class TestStarting:
    """Tests for Aggregator.on_scope_starting()."""

    def test_inserts_path_eagerly(self):
        aggregator, tree, _ = _make_aggregator()
        node = aggregator.on_scope_starting("Outer$Inner$Deep")
        assert node is tree.lookup(["Outer", "Inner", "Deep"])

    def test_nested_scope_registers_family(self):
        aggregator, _, _ = _make_aggregator()
        aggregator.on_scope_starting("Outer$Inner")
        assert aggregator.pending_families() == ["Outer"]

    def test_plain_scope_does_not_register(self):
        aggregator, _, _ = _make_aggregator()
        aggregator.on_scope_starting("Plain")
        assert aggregator.pending_families() == []

    def test_empty_name_is_noop(self):
        aggregator, tree, _ = _make_aggregator()
        assert aggregator.on_scope_starting("") is None
        assert len(tree) == 0


class TestPlainScopes:
    """Tests for scopes without nested members."""

    def test_plain_scope_renders_immediately(self):
        aggregator, tree, renderer = _make_aggregator()
        aggregator.on_scope_starting("Plain")
        printed = aggregator.on_scope_completed(
            ReportEntry("Plain", elapsed=5),
            [_test("Plain", "a"), _test("Plain", "b", FAILURE)],
        )

        assert printed
        assert renderer.shapes == [
            {"name": "Plain", "summary": "Plain", "tests": ["a", "b"], "children": []}
        ]
        assert len(tree) == 0

    def test_completed_without_starting_is_singleton(self):
        aggregator, tree, renderer = _make_aggregator()
        assert aggregator.on_scope_completed(ReportEntry("Unannounced"), [])
        assert [n.name for n in renderer.rendered] == ["Unannounced"]
        assert len(tree) == 0

    def test_completed_with_empty_name_is_noop(self):
        aggregator, tree, renderer = _make_aggregator()
        assert not aggregator.on_scope_completed(ReportEntry(""), [])
        assert renderer.rendered == []
        assert len(tree) == 0


class TestNestedFamilies:
    """Tests for buffering nested families until complete."""

    def test_outer_then_inner(self):
        """Two registered scopes are emitted only after the second completion."""
        aggregator, tree, renderer = _make_aggregator()
        aggregator.on_scope_starting("Outer$Inner")
        aggregator.on_scope_starting("Outer")

        first = aggregator.on_scope_completed(
            ReportEntry("Outer"),
            [_test("Outer", "outerTest"), _test("Outer$Inner", "innerTest")],
        )
        assert not first
        assert renderer.rendered == []
        assert aggregator.pending_families() == ["Outer"]

        second = aggregator.on_scope_completed(ReportEntry("Outer$Inner"), [])
        assert second
        assert renderer.shapes == [{
            "name": "Outer",
            "summary": "Outer",
            "tests": ["outerTest"],
            "children": [
                {"name": "Inner", "summary": "Outer$Inner", "tests": ["innerTest"], "children": []},
            ],
        }]
        assert aggregator.pending_families() == []
        assert len(tree) == 0

    def test_inner_completes_first(self):
        aggregator, _, renderer = _make_aggregator()
        aggregator.on_scope_starting("Outer")
        aggregator.on_scope_starting("Outer$Inner")

        assert not aggregator.on_scope_completed(ReportEntry("Outer$Inner"), [])
        assert aggregator.on_scope_completed(ReportEntry("Outer"), [])
        assert [n.name for n in renderer.rendered] == ["Outer"]

    def test_deep_family_any_order(self):
        """Emission happens exactly once, after the last of N completions."""
        scopes = ["Outer", "Outer$A", "Outer$B", "Outer$A$Deep", "Outer$B$Deep"]
        rng = random.Random(11)
        for _ in range(20):
            aggregator, tree, renderer = _make_aggregator()
            for name in scopes:
                aggregator.on_scope_starting(name)
            order = scopes[:]
            rng.shuffle(order)
            results = [aggregator.on_scope_completed(ReportEntry(name), []) for name in order]

            assert results == [False] * (len(scopes) - 1) + [True]
            assert len(renderer.rendered) == 1
            assert [b.name for b in renderer.rendered[0].children] == ["A", "B"]
            assert len(tree) == 0

    def test_member_entries_keep_arrival_order(self):
        aggregator, _, renderer = _make_aggregator()
        aggregator.on_scope_starting("Outer$Inner")
        aggregator.on_scope_completed(
            ReportEntry("Outer"),
            [_test("Outer$Inner", "third"), _test("Outer", "first"), _test("Outer$Inner", "fourth")],
        )
        aggregator.on_scope_completed(ReportEntry("Outer$Inner"), [_test("Outer$Inner", "fifth")])

        shape = renderer.shapes[0]
        assert shape["tests"] == ["first"]
        assert shape["children"][0]["tests"] == ["third", "fourth", "fifth"]

    def test_other_family_unaffected_while_pending(self):
        aggregator, tree, renderer = _make_aggregator()
        aggregator.on_scope_starting("Outer$Inner")
        aggregator.on_scope_starting("Outer")
        aggregator.on_scope_starting("Plain")

        aggregator.on_scope_completed(ReportEntry("Outer"), [])
        assert aggregator.on_scope_completed(ReportEntry("Plain"), [])

        assert [n.name for n in renderer.rendered] == ["Plain"]
        assert tree.lookup(["Outer", "Inner"]) is not None

    def test_incomplete_family_stays_buffered(self):
        aggregator, tree, renderer = _make_aggregator()
        aggregator.on_scope_starting("Outer$Inner")
        aggregator.on_scope_completed(ReportEntry("Outer"), [])
        assert renderer.rendered == []
        assert aggregator.pending_families() == ["Outer"]
        assert tree.lookup(["Outer"]) is not None

    def test_unregistered_member_does_not_release_family(self):
        """A completed scope that was never announced waits for the announced ones."""
        aggregator, _, renderer = _make_aggregator()
        aggregator.on_scope_starting("Outer")
        aggregator.on_scope_starting("Outer$Inner")

        assert not aggregator.on_scope_completed(ReportEntry("Outer$Surprise"), [])
        assert not aggregator.on_scope_completed(ReportEntry("Outer"), [])
        assert renderer.rendered == []

        assert aggregator.on_scope_completed(ReportEntry("Outer$Inner"), [])
        assert len(renderer.rendered) == 1
        assert [(c["name"], c["summary"]) for c in renderer.shapes[0]["children"]] == [
            ("Inner", "Outer$Inner"),
            ("Surprise", "Outer$Surprise"),
        ]

    def test_missing_family_node_is_contract_violation(self):
        aggregator = Aggregator(_ForgetfulTree(), _RecordingRenderer())
        with pytest.raises(AssertionError, match="no longer in the tree"):
            aggregator.on_scope_completed(ReportEntry("Plain"), [])


class _ForgetfulTree(Tree):
    """Tree whose lookups always miss."""

    def lookup(self, path):
        return None


class TestConcurrentFamilies:
    """Tests for completions arriving from many threads."""

    def test_each_family_rendered_once(self):
        aggregator, tree, renderer = _make_aggregator()
        families = [f"Family{i}" for i in range(30)]
        scopes = {
            family: [family, f"{family}$A", f"{family}$B", f"{family}$A$Deep"]
            for family in families
        }
        for names in scopes.values():
            for name in names:
                aggregator.on_scope_starting(name)

        jobs = [name for names in scopes.values() for name in names]
        random.Random(3).shuffle(jobs)

        def complete(name: str) -> bool:
            return aggregator.on_scope_completed(
                ReportEntry(name), [_test(name, f"test_{name}")]
            )

        with ThreadPoolExecutor(max_workers=8) as pool:
            printed = list(pool.map(complete, jobs))

        assert printed.count(True) == len(families)
        assert sorted(n.name for n in renderer.rendered) == sorted(families)
        for shape in renderer.shapes:
            family = shape["name"]
            assert shape["tests"] == [f"test_{family}"]
            assert [c["name"] for c in shape["children"]] == ["A", "B"]
        assert len(tree) == 0
        assert aggregator.pending_families() == []
