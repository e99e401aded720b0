"""End-to-end reduction of document trees."""
from __future__ import annotations

import logging
from pathlib import Path

import pytest

from adoc_reducer.core.document import IncludeProcessor
from adoc_reducer.core.reduction import DocumentReducer


def _reduce(main: Path, **options) -> list:
    return DocumentReducer().reduce_file(main, **options).source_lines


class TestIdempotence:
    def test_document_without_directives_is_unchanged(self):
        source = "= Title\n\nparagraph one\n\n----\ncode\n----\n\nparagraph two"

        document = DocumentReducer().reduce(source)

        assert document.source == source

    def test_escaped_directives_are_left_as_written(self):
        source = "\\include::a.adoc[]\n\\ifdef::flag[]"

        assert DocumentReducer().reduce(source).source == source


class TestIncludes:
    """Include directives are replaced by the lines of the scope they opened."""

    def test_single_line_include_takes_directive_position(self, write_doc):
        main = write_doc({
            "main.adoc": "before\n\ninclude::single.adoc[]\n\nafter",
            "single.adoc": "single line paragraph",
        })

        assert _reduce(main) == ["before", "", "single line paragraph", "", "after"]

    def test_nested_includes_are_inlined_depth_first(self, write_doc):
        main = write_doc({
            "main.adoc": "include::a/a.adoc[]\nroot end",
            "a/a.adoc": "a start\ninclude::b.adoc[]\na end",
            "a/b.adoc": "b content",
        })

        assert _reduce(main) == ["a start", "b content", "a end", "root end"]

    def test_include_resolving_to_empty_content_leaves_no_trailing_blank(self, write_doc):
        main = write_doc({
            "main.adoc": "content\n\ninclude::empty.adoc[]",
            "empty.adoc": "",
        })

        assert _reduce(main) == ["content"]

    def test_unresolved_include_leaves_one_placeholder_line(self, write_doc, caplog):
        main = write_doc({"main.adoc": "before\ninclude::missing.adoc[]\nafter"})

        lines = _reduce(main)

        assert lines == ["before", "Unresolved directive in main.adoc - include::missing.adoc[]", "after"]
        assert "include file not found" in caplog.text

    def test_unresolved_include_inside_include(self, write_doc):
        main = write_doc({
            "main.adoc": "include::a.adoc[]",
            "a.adoc": "a\ninclude::missing.adoc[]",
        })

        assert _reduce(main) == ["a", "Unresolved directive in a.adoc - include::missing.adoc[]"]

    def test_optional_missing_include_is_dropped(self, write_doc):
        main = write_doc({"main.adoc": "before\ninclude::missing.adoc[opts=optional]\nafter"})

        assert _reduce(main) == ["before", "after"]

    def test_missing_attribute_with_drop_line_drops_include(self, write_doc):
        main = write_doc({"main.adoc": "before\ninclude::{no-such}.adoc[]\nafter"})

        assert _reduce(main, attributes={"attribute-missing": "drop-line"}) == ["before", "after"]

    def test_attribute_reference_in_target(self, write_doc):
        main = write_doc({
            "main.adoc": ":dir: parts\n\ninclude::{dir}/a.adoc[]",
            "parts/a.adoc": "part a",
        })

        assert _reduce(main) == [":dir: parts", "", "part a"]

    def test_max_include_depth_keeps_directive(self, write_doc, caplog):
        main = write_doc({"main.adoc": "include::a.adoc[]", "a.adoc": "a"})

        lines = _reduce(main, attributes={"max-include-depth": "0"})

        assert lines == ["include::a.adoc[]"]
        assert "maximum include depth of 0 exceeded" in caplog.text

    def test_secure_mode_turns_includes_into_links(self, write_doc):
        main = write_doc({"main.adoc": "include::a.adoc[]", "a.adoc": "a"})

        assert _reduce(main, safe="secure") == ["link:a.adoc[role=include]"]

    def test_uri_include_becomes_link_without_allow_uri_read(self, write_doc):
        main = write_doc({"main.adoc": "include::https://example.org/a.adoc[]"})

        assert _reduce(main) == ["link:https://example.org/a.adoc[role=include]"]

    def test_catalog_records_included_files(self, write_doc):
        main = write_doc({
            "main.adoc": "include::chapters/ch1.adoc[]\ninclude::code.adoc[lines=1]",
            "chapters/ch1.adoc": "chapter",
            "code.adoc": "one\ntwo",
        })

        document = DocumentReducer().reduce_file(main)

        assert document.catalog["includes"] == {"chapters/ch1": True, "code": False}


class TestConditionals:
    """Conditional directives vanish; their content stays only when selected."""

    def test_false_branch_is_removed(self):
        source = "before\nifdef::flag[]\nconditional content\nendif::[]\nafter"

        assert DocumentReducer().reduce(source).source_lines == ["before", "after"]

    def test_true_branch_keeps_content(self):
        source = "before\nifdef::flag[]\nconditional content\nendif::[]\nafter"

        lines = DocumentReducer().reduce(source, attributes={"flag": ""}).source_lines

        assert lines == ["before", "conditional content", "after"]

    def test_single_line_form_kept(self):
        lines = DocumentReducer().reduce("before\nifdef::flag[kept]\nafter", attributes="flag").source_lines

        assert lines == ["before", "kept", "after"]

    def test_single_line_form_dropped(self):
        assert DocumentReducer().reduce("before\nifdef::flag[kept]\nafter").source_lines == ["before", "after"]

    def test_ifndef_and_ifeval(self):
        source = "\n".join([
            ":level: 2",
            "",
            "ifeval::[{level} > 1]",
            "deep",
            "endif::[]",
            "ifndef::level[]",
            "no level",
            "endif::[]",
        ])

        assert DocumentReducer().reduce(source).source_lines == [":level: 2", "", "deep"]

    def test_nested_conditionals(self):
        source = "ifdef::a[]\nA\nifdef::b[]\nB\nendif::b[]\nA2\nendif::a[]\nend"

        assert DocumentReducer().reduce(source, attributes="a").source_lines == ["A", "A2", "end"]

    def test_include_inside_false_branch_is_not_resolved(self, write_doc):
        main = write_doc({
            "main.adoc": "ifdef::flag[]\ninclude::a.adoc[]\nendif::[]\nafter",
            "a.adoc": "a",
        })

        document = DocumentReducer().reduce_file(main)

        assert document.source_lines == ["after"]
        assert document.catalog["includes"] == {}

    def test_conditional_inside_include(self, write_doc):
        main = write_doc({
            "main.adoc": "before\ninclude::a.adoc[]\nafter",
            "a.adoc": "a1\nifdef::flag[]\nhidden\nendif::[]\na2",
        })

        assert _reduce(main) == ["before", "a1", "a2", "after"]

    def test_skip_opened_in_include_closed_in_parent(self, write_doc):
        main = write_doc({
            "main.adoc": "include::a.adoc[]\nhidden in main\nendif::[]\nafter",
            "a.adoc": "a line\nifdef::flag[]\nhidden in a",
        })

        assert _reduce(main) == ["a line", "after"]

    def test_single_line_conditional_holding_include(self, write_doc):
        main = write_doc({
            "main.adoc": "ifdef::flag[include::a.adoc[]]\nafter",
            "a.adoc": "a",
        })

        assert _reduce(main, attributes={"flag": ""}) == ["a", "after"]

    def test_preserve_conditionals_keeps_directive_lines(self, write_doc):
        main = write_doc({
            "main.adoc": "ifdef::flag[]\ninclude::a.adoc[]\nendif::[]\nafter",
            "a.adoc": "a",
        })

        document = DocumentReducer(preserve_conditionals=True).reduce_file(main, attributes={"flag": ""})

        assert document.source_lines == ["ifdef::flag[]", "a", "endif::[]", "after"]

    def test_malformed_directive_is_consumed(self, caplog):
        lines = DocumentReducer().reduce("before\nifeval::[not an expression]\nafter").source_lines

        assert lines == ["before", "after"]
        assert "invalid expression" in caplog.text

    def test_unterminated_skip_removes_everything_to_the_end(self):
        lines = DocumentReducer().reduce("before\nifdef::nope[]\nhidden\n").source_lines

        assert lines == ["before"]

    def test_unterminated_skip_at_last_line_removes_directive(self):
        assert DocumentReducer().reduce("before\nifdef::nope[]").source == "before"

    def test_unterminated_skip_in_include_continues_to_end_of_parent(self, write_doc):
        main = write_doc({
            "main.adoc": "top\ninclude::j.adoc[]\nmid\n",
            "j.adoc": "j1\nifdef::nope[]\nj3\n",
        })

        assert _reduce(main) == ["top", "j1"]

    def test_unterminated_skip_in_last_include(self, write_doc):
        main = write_doc({
            "main.adoc": "top\ninclude::j.adoc[]",
            "j.adoc": "j1\nifdef::nope[]\nj3",
        })

        assert _reduce(main) == ["top", "j1"]

    def test_unterminated_skip_is_kept_with_preserve_conditionals(self):
        document = DocumentReducer(preserve_conditionals=True).reduce("before\nifdef::nope[]\nhidden")

        assert document.source_lines == ["before", "ifdef::nope[]", "hidden"]


class TestSelections:
    def test_lines_attribute_keeps_selected_lines(self, write_doc):
        main = write_doc({
            "main.adoc": "include::code.adoc[lines=2..3]",
            "code.adoc": "one\ntwo\nthree\nfour",
        })

        assert _reduce(main) == ["two", "three"]

    def test_directives_inside_line_selection(self, write_doc):
        main = write_doc({
            "main.adoc": "include::code.adoc[lines=2..5]",
            "code.adoc": "one\nifdef::flag[]\ntwo\nendif::[]\nthree",
        })

        assert _reduce(main) == ["three"]

    def test_tag_selection(self, write_doc):
        main = write_doc({
            "main.adoc": "include::code.adoc[tag=snippet]",
            "code.adoc": "// tag::snippet[]\nsnippet line\n// end::snippet[]\nother",
        })

        assert _reduce(main) == ["snippet line"]

    def test_level_offset_frames_included_lines(self, write_doc):
        main = write_doc({
            "main.adoc": "= Doc\n\ninclude::section.adoc[leveloffset=+1]",
            "section.adoc": "= Section\n\nifdef::flag[]\nhidden\nendif::[]\ncontent",
        })

        assert _reduce(main) == [
            "= Doc",
            "",
            ":leveloffset: +1",
            "",
            "= Section",
            "",
            "content",
            "",
            ":leveloffset!:",
        ]


class _Snippets(IncludeProcessor):
    def handles(self, target: str) -> bool:
        return target.startswith("snippet:")

    def process(self, document, reader, target, attributes) -> None:
        reader.push_include([f"from {target}"], path=target, attributes=attributes)


class _Dropper(IncludeProcessor):
    def handles(self, target: str) -> bool:
        return target.startswith("drop:")

    def process(self, document, reader, target, attributes) -> None:
        pass


class TestIncludeProcessors:
    def test_processor_lines_are_inlined(self):
        document = DocumentReducer().reduce(
            "before\ninclude::snippet:x[]\nafter", include_processors=[_Snippets()]
        )

        assert document.source_lines == ["before", "from snippet:x", "after"]

    def test_processor_pushing_nothing_removes_directive(self):
        document = DocumentReducer().reduce("before\ninclude::drop:x[]\nafter", include_processors=[_Dropper()])

        assert document.source_lines == ["before", "after"]

    def test_processor_pushing_empty_content(self):
        class _Empty(_Snippets):
            def process(self, document, reader, target, attributes) -> None:
                reader.push_include([], path=target)

        document = DocumentReducer().reduce("before\ninclude::snippet:x[]\nafter", include_processors=[_Empty()])

        assert document.source_lines == ["before", "after"]


class TestSourcemap:
    def test_reduced_document_is_reloaded_with_block_positions(self, write_doc):
        main = write_doc({
            "main.adoc": "before\n\ninclude::two.adoc[]\n\nafter",
            "two.adoc": "para one\n\npara two",
        })

        document = DocumentReducer().reduce_file(main, sourcemap=True)

        assert document.options["reduced"] is True
        assert [block.lineno for block in document.blocks] == [1, 3, 5, 7]
        assert {block.file for block in document.blocks} == {str(main.resolve())}
        assert document.catalog["includes"] == {"two": True}

    def test_without_sourcemap_blocks_are_kept_and_source_replaced(self, write_doc):
        main = write_doc({"main.adoc": "include::a.adoc[]", "a.adoc": "a"})

        document = DocumentReducer().reduce_file(main)

        assert document.options["reduced"] is False
        assert document.source_lines == ["a"]
        assert [block.source_location for block in document.blocks] == [None]

    def test_sourcemap_without_directives_keeps_document(self):
        document = DocumentReducer().reduce("para one\n\npara two", sourcemap=True)

        assert document.options["reduced"] is False
        assert [block.lineno for block in document.blocks] == [1, 3]


class TestIncludeMapOption:
    def test_include_map_trailer_is_appended(self, write_doc):
        main = write_doc({
            "main.adoc": "include::a.adoc[]\ninclude::b.adoc[tag=x]",
            "a.adoc": "a",
            "b.adoc": "// tag::x[]\nb\n// end::x[]",
        })

        lines = DocumentReducer(include_map=True).reduce_file(main).source_lines

        assert lines == ["a", "b", "", "//# includes=a,~b"]


def test_each_call_uses_a_fresh_tree(write_doc):
    reducer = DocumentReducer()
    main = write_doc({"main.adoc": "include::a.adoc[]", "a.adoc": "a"})

    first = reducer.reduce_file(main).source_lines
    second = reducer.reduce_file(main).source_lines

    assert first == second == ["a"]


@pytest.mark.parametrize("keyword", ["ifdef", "ifndef"])
def test_unmatched_endif_is_removed(keyword, caplog):
    source = f"{keyword}::flag[]\ntext\nendif::[]\nendif::[]\nafter"

    lines = DocumentReducer().reduce(source, attributes={"flag": ""}).source_lines

    assert "endif::[]" not in lines
    assert "unmatched preprocessor directive" in caplog.text
    assert logging.ERROR in {record.levelno for record in caplog.records}
