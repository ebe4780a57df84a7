"""Tests for core/tree_builder.py - Forest construction from flat snapshots."""

import pytest


def ids(nodes):
    return [node.id for node in nodes]


class TestTreeBuilder:
    """Tests for TreeBuilder on well-formed snapshots."""

    def test_roots_and_children(self, org_forest):
        assert ids(org_forest) == ["hq", "ops"]
        assert ids(org_forest[0].children) == ["fin", "it"]
        assert ids(org_forest[0].children[0].children) == ["ap"]
        assert ids(org_forest[1].children) == ["log"]

    def test_levels(self, org_forest):
        from orgnav.core.locator import walk_forest

        levels = {node.id: node.level for node in walk_forest(org_forest)}

        assert levels == {"hq": 0, "fin": 1, "ap": 2, "it": 1, "ops": 0, "log": 1}

    def test_every_node_appears_once(self, org_nodes, org_forest):
        from orgnav.core.locator import flatten_ids

        built = flatten_ids(org_forest)

        assert sorted(built) == sorted(node.id for node in org_nodes)
        assert len(built) == len(set(built))

    def test_child_before_parent_in_input(self, make_node):
        from orgnav.core.tree_builder import build_forest

        forest = build_forest([make_node("c", "b"), make_node("b", "a"), make_node("a")])

        assert ids(forest) == ["a"]
        assert forest[0].children[0].children[0].id == "c"
        assert forest[0].children[0].children[0].level == 2

    def test_empty_input(self):
        from orgnav.core.tree_builder import TreeBuilder

        builder = TreeBuilder()
        forest = builder.build()

        assert forest == []
        assert not builder.report.has_anomalies

    def test_add_nodes_chains(self, make_node):
        from orgnav.core.tree_builder import TreeBuilder

        forest = TreeBuilder().add_nodes([make_node("a")]).add_nodes([make_node("b", "a")]).build()

        assert ids(forest[0].children) == ["b"]

    def test_input_not_mutated(self, org_nodes):
        from orgnav.core.tree_builder import build_forest

        before = [(n.id, n.parent_id, n.name, dict(n.attributes)) for n in org_nodes]
        build_forest(org_nodes)
        after = [(n.id, n.parent_id, n.name, dict(n.attributes)) for n in org_nodes]

        assert before == after

    def test_attributes_carried(self, org_forest):
        assert org_forest[0].attributes == {"code": "HQ"}

    def test_deep_chain_does_not_recurse(self, make_node):
        from orgnav.core.locator import find_node
        from orgnav.core.tree_builder import build_forest

        depth = 5000
        nodes = [make_node("n0")]
        nodes += [make_node(f"n{i}", f"n{i - 1}") for i in range(1, depth)]
        forest = build_forest(nodes)

        deepest = find_node(forest, f"n{depth - 1}")
        assert deepest is not None
        assert deepest.level == depth - 1


class TestChildOrder:
    """Tests for the sort_children option."""

    def test_source_order_default(self, make_node):
        from orgnav.core.tree_builder import build_forest

        forest = build_forest(
            [make_node("r"), make_node("z", "r", "Zeta"), make_node("a", "r", "alpha")]
        )

        assert ids(forest[0].children) == ["z", "a"]

    def test_name_order_is_case_insensitive(self, make_node):
        from orgnav.core.tree_builder import build_forest

        forest = build_forest(
            [
                make_node("r"),
                make_node("z", "r", "Zeta"),
                make_node("b", "r", "beta"),
                make_node("a", "r", "Alpha"),
            ],
            sort_children="name",
        )

        assert ids(forest[0].children) == ["a", "b", "z"]

    def test_name_order_sorts_roots_stably(self, make_node):
        from orgnav.core.tree_builder import build_forest

        forest = build_forest(
            [make_node("x", name="Same"), make_node("m", name="Alpha"), make_node("y", name="Same")],
            sort_children="name",
        )

        assert ids(forest) == ["m", "x", "y"]

    def test_none_means_source_order(self, make_node):
        from orgnav.core.tree_builder import TreeBuilder, build_forest

        nodes = [make_node("r"), make_node("z", "r", "Zeta"), make_node("a", "r", "alpha")]

        assert ids(build_forest(nodes, sort_children=None)[0].children) == ["z", "a"]
        assert ids(build_forest(nodes)[0].children) == ["z", "a"]
        assert TreeBuilder(sort_children=None).sort_children == "source"

    def test_unknown_order_raises(self):
        from orgnav.core.tree_builder import TreeBuilder

        with pytest.raises(ValueError, match="Unknown child order"):
            TreeBuilder(sort_children="random")


class TestMalformedInput:
    """Malformed snapshots never raise and never lose nodes."""

    def test_orphan_becomes_root(self, make_node):
        from orgnav.core.tree_builder import TreeBuilder

        builder = TreeBuilder().add_nodes([make_node("a"), make_node("b", "missing")])
        forest, report = builder.build_and_report()

        assert ids(forest) == ["a", "b"]
        assert forest[1].level == 0
        assert forest[1].parent_id == "missing"
        assert report.orphan_ids == ["b"]
        assert "Orphaned node promoted to root: b" in report.warnings

    def test_orphan_keeps_its_subtree(self, make_node):
        from orgnav.core.tree_builder import build_forest

        forest = build_forest([make_node("b", "missing"), make_node("c", "b")])

        assert ids(forest) == ["b"]
        assert forest[0].children[0].level == 1

    def test_self_reference_becomes_root(self, make_node):
        from orgnav.core.tree_builder import TreeBuilder

        forest, report = TreeBuilder().add_nodes([make_node("a", "a")]).build_and_report()

        assert ids(forest) == ["a"]
        assert forest[0].children == ()
        assert report.self_referencing_ids == ["a"]

    def test_duplicate_id_last_write_wins(self, make_node):
        from orgnav.core.tree_builder import TreeBuilder

        builder = TreeBuilder().add_nodes(
            [make_node("a", name="First"), make_node("b"), make_node("a", name="Second")]
        )
        forest, report = builder.build_and_report()

        assert ids(forest) == ["a", "b"]
        assert forest[0].name == "Second"
        assert report.duplicate_ids == ["a"]

    def test_two_node_loop_is_broken(self, make_node):
        from orgnav.core.locator import flatten_ids
        from orgnav.core.tree_builder import TreeBuilder

        builder = TreeBuilder().add_nodes([make_node("a", "b"), make_node("b", "a")])
        forest, report = builder.build_and_report()

        assert ids(forest) == ["a"]
        assert ids(forest[0].children) == ["b"]
        assert sorted(flatten_ids(forest)) == ["a", "b"]
        assert len(report.broken_loops) == 1
        assert sorted(report.broken_loops[0]) == ["a", "b"]

    def test_loop_with_tail(self, make_node):
        from orgnav.core.locator import find_node
        from orgnav.core.tree_builder import TreeBuilder

        # t hangs off a loop c -> d -> e -> c
        builder = TreeBuilder().add_nodes(
            [make_node("t", "d"), make_node("c", "e"), make_node("d", "c"), make_node("e", "d")]
        )
        forest, report = builder.build_and_report()

        assert ids(forest) == ["c"]
        assert ids(find_node(forest, "d").children) == ["t", "e"]
        assert find_node(forest, "t").level == 2
        assert find_node(forest, "e").level == 2
        assert report.broken_loops == [["d", "c", "e"]]

    def test_independent_loops(self, make_node):
        from orgnav.core.locator import count_nodes
        from orgnav.core.tree_builder import TreeBuilder

        builder = TreeBuilder().add_nodes(
            [make_node("a", "b"), make_node("b", "a"), make_node("x", "y"), make_node("y", "x")]
        )
        forest, report = builder.build_and_report()

        assert ids(forest) == ["a", "x"]
        assert count_nodes(forest) == 4
        assert len(report.broken_loops) == 2

    def test_clean_report(self, org_nodes):
        from orgnav.core.tree_builder import TreeBuilder

        _, report = TreeBuilder().add_nodes(org_nodes).build_and_report()

        assert not report.has_anomalies
        assert report.warnings == []
