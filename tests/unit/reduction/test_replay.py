"""Tests for replaying a replacement tree into flat lines."""
from __future__ import annotations

import logging

from adoc_reducer.core.reduction.replay import replay
from adoc_reducer.core.reduction.tree import Delete, Overwrite, ReplacementTree


class TestReplay:
    """Substitutions, drops, the drift guard and trailing blank trimming."""

    def test_trivial_tree_returns_input_unchanged(self):
        lines = ["a", "", "b", ""]

        result = replay(ReplacementTree(), lines)

        assert result is lines
        assert result == ["a", "", "b", ""]

    def test_child_lines_replace_directive_in_place(self):
        tree = ReplacementTree()
        tree.attach(0, 1, "include::a.adoc[]", ["a1", "a2"])

        assert replay(tree, ["before", "include::a.adoc[]", "after"]) == ["before", "a1", "a2", "after"]

    def test_nested_children_are_inlined_depth_first(self):
        tree = ReplacementTree()
        outer = tree.attach(0, 0, "include::a.adoc[]", ["a start", "include::b.adoc[]", "a end"])
        tree.attach(outer.id, 1, "include::b.adoc[]", ["b"])

        assert replay(tree, ["include::a.adoc[]", "root end"]) == ["a start", "b", "a end", "root end"]

    def test_drops_apply_in_descending_index_order(self):
        tree = ReplacementTree()
        tree.root.drop_list.extend([Delete(1), Overwrite(2, "C"), Delete(3)])

        assert replay(tree, ["a", "b", "c", "d", "e"]) == ["a", "C", "e"]

    def test_earlier_drops_do_not_shift_substitution_position(self):
        tree = ReplacementTree()
        tree.root.drop_list.extend([Delete(0), Delete(2)])
        tree.attach(0, 3, "include::a.adoc[]", ["a"])

        result = replay(tree, ["ifdef::x[]", "kept", "endif::[]", "include::a.adoc[]"])

        assert result == ["kept", "a"]

    def test_child_drops_apply_to_child_lines(self):
        tree = ReplacementTree()
        child = tree.attach(0, 0, "include::a.adoc[]", ["ifdef::x[]", "hidden", "endif::[]", "shown"])
        child.drop_list.extend([Delete(0), Delete(1), Delete(2)])

        assert replay(tree, ["include::a.adoc[]"]) == ["shown"]

    def test_drift_guard_skips_mismatched_directive(self, caplog):
        caplog.set_level(logging.DEBUG, logger="adoc_reducer")
        tree = ReplacementTree()
        tree.attach(0, 1, "include::a.adoc[]", ["a"])

        result = replay(tree, ["x", "include::rewritten.adoc[]", "y"])

        assert result == ["x", "include::rewritten.adoc[]", "y"]
        assert "Include directive to reduce not found" in caplog.text
        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]

    def test_drift_guard_out_of_range_position(self):
        tree = ReplacementTree()
        tree.attach(0, 7, "include::a.adoc[]", ["a"])

        assert replay(tree, ["only"]) == ["only"]

    def test_single_line_conditional_holding_include(self):
        tree = ReplacementTree()
        tree.root.drop_list.append(Overwrite(0, "include::a.adoc[]"))
        tree.attach(0, 0, "include::a.adoc[]", ["a"])

        assert replay(tree, ["ifdef::x[include::a.adoc[]]", "after"]) == ["a", "after"]

    def test_trailing_empty_lines_are_trimmed(self):
        tree = ReplacementTree()
        tree.attach(0, 2, "include::empty.adoc[]", [])

        assert replay(tree, ["content", "", "include::empty.adoc[]"]) == ["content"]

    def test_all_empty_result_is_empty(self):
        tree = ReplacementTree()
        tree.attach(0, 1, "include::empty.adoc[]", [""])

        assert replay(tree, ["", "include::empty.adoc[]", ""]) == []

    def test_repeated_delete_removes_line_once(self):
        tree = ReplacementTree()
        tree.root.drop_list.extend([Delete(1), Delete(1), Delete(2)])

        assert replay(tree, ["a", "b", "c", "d"]) == ["a", "d"]

    def test_delete_wins_over_overwrite_at_same_index(self, caplog):
        caplog.set_level(logging.DEBUG, logger="adoc_reducer")
        tree = ReplacementTree()
        tree.root.drop_list.extend([Overwrite(1, "B"), Delete(1)])

        assert replay(tree, ["a", "b", "c"]) == ["a", "c"]
        assert "Delete at index 1 replaces" in caplog.text

    def test_overwrite_after_delete_is_ignored(self):
        tree = ReplacementTree()
        tree.root.drop_list.extend([Delete(1), Overwrite(1, "B")])

        assert replay(tree, ["a", "b", "c"]) == ["a", "c"]
