"""Tests for the replacement tree arena."""
from __future__ import annotations

import pytest

from adoc_reducer.core.reduction.tree import Delete, Overwrite, ReplacementTree


class TestReplacementTree:
    """Nodes are appended in creation order and point at their parent by id."""

    def test_new_tree_has_only_a_root(self):
        tree = ReplacementTree()

        assert len(tree) == 1
        assert tree.root.id == 0
        assert tree.root.is_root
        assert tree.root.drop_list == []
        assert tree.is_trivial()

    def test_attach_assigns_increasing_ids_after_parent(self):
        tree = ReplacementTree()
        child = tree.attach(0, 2, "include::a.adoc[]", ["a"])
        grandchild = tree.attach(child.id, 0, "include::b.adoc[]", ["b"])

        assert [node.id for node in tree] == [0, 1, 2]
        for node in tree:
            if not node.is_root:
                assert node.parent_id < node.id
        assert tree.parent_of(grandchild) is child
        assert tree.parent_of(tree.root) is None

    def test_attach_copies_lines(self):
        tree = ReplacementTree()
        lines = ["a", "b"]
        node = tree.attach(0, 0, "include::a.adoc[]", lines)
        lines.append("c")

        assert node.lines == ["a", "b"]

    def test_attach_to_unknown_parent_raises(self):
        tree = ReplacementTree()

        with pytest.raises(IndexError):
            tree.attach(5, 0, "include::a.adoc[]")

    def test_tree_with_root_drops_is_not_trivial(self):
        tree = ReplacementTree()
        tree.root.drop_list.append(Delete(0))

        assert not tree.is_trivial()

    def test_tree_with_child_is_not_trivial(self):
        tree = ReplacementTree()
        tree.attach(0, 0, "include::a.adoc[]")

        assert not tree.is_trivial()

    def test_reversed_visits_children_before_parents(self):
        tree = ReplacementTree()
        tree.attach(0, 0, "include::a.adoc[]")
        tree.attach(1, 0, "include::b.adoc[]")

        assert [node.id for node in reversed(tree)] == [2, 1, 0]


class TestIndexOf:
    def test_index_of_without_offset(self):
        tree = ReplacementTree()

        assert tree.root.index_of(1) == 0
        assert tree.root.index_of(4) == 3

    def test_index_of_partial_include(self):
        tree = ReplacementTree()
        node = tree.attach(0, 0, "include::a.adoc[lines=5..8]", ["e", "f"], line_offset=4)

        assert node.index_of(5) == 0
        assert node.index_of(6) == 1

    def test_index_of_with_synthetic_leading_lines(self):
        tree = ReplacementTree()
        node = tree.attach(0, 0, "include::a.adoc[leveloffset=+1]", line_offset=-2)

        # Line 1 of the file follows ":leveloffset: +1" and a blank line.
        assert node.index_of(1) == 2


def test_drop_instructions_compare_by_value():
    assert Delete(1) == Delete(1)
    assert Overwrite(2, "text") == Overwrite(2, "text")
    assert Overwrite(2, "text") != Overwrite(2, "other")
