"""Tests for line, token and comment extraction."""

from __future__ import annotations

import pytest

from yamlstyle.parser import (
    Comment,
    Kind,
    Line,
    Mark,
    Resolved,
    ScalarType,
    Token,
    comments_between_tokens,
    line_generator,
    scanner_text,
    token_generator,
    token_or_comment_generator,
    token_or_comment_or_line_generator,
)


def kinds(source: str) -> list[Kind]:
    return [token.kind for token in token_generator(source)]


def label(item: Token | Comment | Line) -> str:
    if isinstance(item, Line):
        return "line"
    if isinstance(item, Comment):
        return "comment"
    return item.kind.value


class TestLineGenerator:
    def test_lines_exclude_terminator(self) -> None:
        lines = list(line_generator("a\nbc\n"))
        assert [line.content for line in lines] == ["a", "bc", ""]
        assert [(line.start, line.end) for line in lines] == [(0, 1), (2, 4), (5, 5)]
        assert [line.line_no for line in lines] == [1, 2, 3]

    def test_mixed_line_breaks(self) -> None:
        lines = list(line_generator("a\r\nb\rc\n"))
        assert [line.content for line in lines] == ["a", "b", "c", ""]
        assert lines[1].start == 3

    def test_empty_buffer_has_one_line(self) -> None:
        assert list(line_generator("")) == [Line(1, "", 0, 0)]

    def test_no_final_newline(self) -> None:
        lines = list(line_generator("---\nkey"))
        assert lines[-1].content == "key"
        assert len(lines) == 2

    @pytest.mark.parametrize(
        "source", ["", "a", "a\nb\n", "a\r\n\r\nb", "x\ry\n\n", "- a\n  # c\n"]
    )
    def test_lines_reconstruct_the_buffer(self, source: str) -> None:
        lines = list(line_generator(source))
        rebuilt = "".join(
            source[line.start : after.start] for line, after in zip(lines, lines[1:])
        )
        assert rebuilt + lines[-1].content == source


class TestTokenGenerator:
    def test_simple_mapping(self) -> None:
        assert kinds("---\nkey: value\n") == [
            Kind.DOCUMENT,
            Kind.DOC_START,
            Kind.BLOCK_MAP,
            Kind.SCALAR,
            Kind.MAP_VALUE_IND,
            Kind.SCALAR,
        ]

    def test_empty_source_has_no_tokens(self) -> None:
        assert kinds("") == []

    def test_document_token_is_zero_width(self) -> None:
        document = next(token_generator("# comment\nkey: value\n"))
        assert document.kind is Kind.DOCUMENT
        assert document.start_mark == document.end_mark
        assert document.line_no == 2
        assert not document.is_visible

    def test_marks_are_one_based(self) -> None:
        tokens = list(token_generator("---\nkey: value\n"))
        value = tokens[-1]
        assert value.start_mark == Mark(line=2, column=6, pointer=9)
        assert value.end_mark == Mark(line=2, column=11, pointer=14)
        assert value.source == "value"
        assert value.indent == 5

    def test_parents_and_depths(self) -> None:
        document, doc_start, mapping, key, colon, value = token_generator("---\nkey: value\n")
        assert document.parent is None
        assert doc_start.parent is document
        assert mapping.parent is document
        assert key.parent is mapping
        assert (document.depth, mapping.depth, key.depth) == (0, 1, 2)

    def test_key_and_value_roles(self) -> None:
        tokens = list(token_generator("key: value\n"))
        key, value = tokens[2], tokens[4]
        assert key.is_key and not key.is_value
        assert value.is_value and not value.is_key

    def test_scalar_resolution(self) -> None:
        tokens = list(token_generator("'a': \"b\"\nc: |\n  d\n"))
        scalars = [token for token in tokens if token.resolve is not None]
        assert [token.kind for token in scalars] == [
            Kind.SINGLE_QUOTED_SCALAR,
            Kind.DOUBLE_QUOTED_SCALAR,
            Kind.SCALAR,
            Kind.BLOCK_SCALAR,
        ]
        assert scalars[0].resolve == Resolved(ScalarType.QUOTE_SINGLE, "a")
        assert scalars[1].resolve == Resolved(ScalarType.QUOTE_DOUBLE, "b")
        assert scalars[3].resolve == Resolved(ScalarType.BLOCK_LITERAL, "d\n")

    def test_flow_collections(self) -> None:
        assert kinds("[a, {b: c}]\n") == [
            Kind.DOCUMENT,
            Kind.FLOW_SEQ_START,
            Kind.SCALAR,
            Kind.COMMA,
            Kind.FLOW_MAP_START,
            Kind.SCALAR,
            Kind.MAP_VALUE_IND,
            Kind.SCALAR,
            Kind.FLOW_MAP_END,
            Kind.FLOW_SEQ_END,
        ]

    def test_explicit_key(self) -> None:
        tokens = list(token_generator("? a\n: b\n"))
        assert [token.kind for token in tokens] == [
            Kind.DOCUMENT,
            Kind.BLOCK_MAP,
            Kind.EXPLICIT_KEY_IND,
            Kind.SCALAR,
            Kind.MAP_VALUE_IND,
            Kind.SCALAR,
        ]
        assert tokens[3].is_key

    def test_properties_keep_the_value_role(self) -> None:
        tokens = list(token_generator("a: &x !!str v\nb: *x\n"))
        by_kind = {token.kind: token for token in tokens}
        assert not by_kind[Kind.ANCHOR].is_value
        assert not by_kind[Kind.TAG].is_value
        assert by_kind[Kind.ALIAS].is_value
        assert tokens[6].source == "v"
        assert tokens[6].is_value

    def test_directive_precedes_document(self) -> None:
        assert kinds("%YAML 1.2\n---\na: 1\n")[:3] == [
            Kind.DIRECTIVE,
            Kind.DOCUMENT,
            Kind.DOC_START,
        ]

    def test_indentless_sequence_is_synthesized(self) -> None:
        tokens = list(token_generator("key:\n- a\n- b\n"))
        assert [token.kind for token in tokens] == [
            Kind.DOCUMENT,
            Kind.BLOCK_MAP,
            Kind.SCALAR,
            Kind.MAP_VALUE_IND,
            Kind.BLOCK_SEQ,
            Kind.SEQ_ITEM_IND,
            Kind.SCALAR,
            Kind.SEQ_ITEM_IND,
            Kind.SCALAR,
        ]
        sequence = tokens[4]
        assert sequence.is_value
        assert sequence.start_mark == sequence.end_mark
        assert sequence.parent is tokens[1]
        assert tokens[5].parent is sequence

    def test_links(self) -> None:
        tokens = list(token_generator("a: 1\n"))
        assert tokens[0].prev is None
        assert tokens[-1].next is None
        for before, after in zip(tokens, tokens[1:]):
            assert before.next is after
            assert after.prev is before

    def test_unlinked_next_raises(self) -> None:
        token = Token(Kind.SCALAR, 0, "a", Mark(1, 1, 0), Mark(1, 2, 1))
        assert not token.is_linked
        with pytest.raises(RuntimeError, match="has not been generated yet"):
            _ = token.next

    def test_is_block_end(self) -> None:
        tokens = list(token_generator("a: 1\nb: 2\n"))
        one = next(token for token in tokens if token.source == "1")
        two = next(token for token in tokens if token.source == "2")
        assert not one.is_block_end
        assert two.is_block_end

    def test_is_block_end_on_dedent(self) -> None:
        tokens = list(token_generator("a:\n  b: 1\nc: 2\n"))
        one = next(token for token in tokens if token.source == "1")
        assert one.is_block_end

    def test_block_scalar_end_line(self) -> None:
        tokens = list(token_generator("a: |\n  x\n  y\n\nb: 1\n"))
        block = next(token for token in tokens if token.kind is Kind.BLOCK_SCALAR)
        assert block.line_no == 1
        assert block.end_line == 3

    def test_scanner_error_on_one_character_is_skipped(self) -> None:
        tokens = list(token_generator("---\nkey: `value`\nnext: 1\n"))
        scalars = [token for token in tokens if token.resolve is not None]
        assert [token.source for token in scalars] == ["key", "`value`", "next", "1"]
        assert scalars[1].resolve == Resolved(ScalarType.PLAIN, "_value`")
        assert tokens[-1].next is None

    def test_scanner_error_truncates_stream(self) -> None:
        tokens = list(token_generator('---\nkey: "value\n'))
        assert [token.kind for token in tokens] == [
            Kind.DOCUMENT,
            Kind.DOC_START,
            Kind.BLOCK_MAP,
            Kind.SCALAR,
            Kind.MAP_VALUE_IND,
        ]
        assert tokens[-1].next is None

    def test_trailing_tab_after_plain_scalar(self) -> None:
        tokens = list(token_generator("---\nsome: text\t\nother: 1\n"))
        scalars = [token.source for token in tokens if token.resolve is not None]
        assert scalars == ["some", "text", "other", "1"]

    def test_scanner_text_keeps_offsets(self) -> None:
        assert scanner_text("a: b\t \r\nc: d\t") == "a: b  \r\nc: d "
        assert scanner_text("a:\tb\n") == "a:\tb\n"
        assert scanner_text("a: b\n") == "a: b\n"

    @pytest.mark.parametrize(
        ("source", "key", "colon"),
        [("{a:}\n", 1, 2), ("[a:, b]\n", 1, 2), ("{x: 1, long:}\n", 7, 11)],
    )
    def test_colon_glued_to_a_flow_key(self, source: str, key: int, colon: int) -> None:
        tokens = list(token_generator(source))
        (scalar,) = [token for token in tokens if token.start_mark.pointer == key]
        assert scalar.kind is Kind.SCALAR
        assert scalar.is_key
        assert scalar.end_mark.pointer == colon
        indicator = scalar.next
        assert indicator is not None
        assert indicator.kind is Kind.MAP_VALUE_IND
        assert (indicator.start_mark.pointer, indicator.end_mark.pointer) == (colon, colon + 1)
        assert indicator.next is not None
        assert indicator.next.kind in (Kind.FLOW_MAP_END, Kind.FLOW_SEQ_END, Kind.COMMA)


class TestComments:
    def test_inline_comment(self) -> None:
        comments = [
            item
            for item in token_or_comment_generator("key: value  # inline\n")
            if isinstance(item, Comment)
        ]
        assert len(comments) == 1
        comment = comments[0]
        assert (comment.line_no, comment.column_no) == (1, 13)
        assert str(comment) == "# inline"
        assert comment.is_inline()
        assert comment.token_before is not None
        assert comment.token_before.source == "value"
        assert comment.token_after is None

    def test_leading_comment(self) -> None:
        items = list(token_or_comment_generator("# head\nkey: value\n"))
        comment = items[0]
        assert isinstance(comment, Comment)
        assert (comment.line_no, comment.column_no) == (1, 1)
        assert not comment.is_inline()
        assert comment.token_before is None
        assert comment.token_after is items[1]

    def test_inline_and_block_classification(self) -> None:
        items = token_or_comment_generator("- a  # inline\n# block\n")
        first, second = [item for item in items if isinstance(item, Comment)]
        assert first.is_inline()
        assert not second.is_inline()

    def test_comment_before_links_the_gap(self) -> None:
        buffer = "---\n# one\n  # two\nkey: 1\n"
        tokens = list(token_generator(buffer))
        first, second = comments_between_tokens(buffer, tokens[1], tokens[2])
        assert (first.line_no, first.column_no) == (2, 1)
        assert (second.line_no, second.column_no) == (3, 3)
        assert first.comment_before is None
        assert second.comment_before is first
        assert str(second) == "# two"

    def test_no_comment_between_tokens_on_one_line(self) -> None:
        buffer = "a: 1\n"
        tokens = list(token_generator(buffer))
        assert list(comments_between_tokens(buffer, tokens[2], tokens[3])) == []

    def test_comment_text_stops_at_line_break(self) -> None:
        buffer = "a: 1 # x\r\nb: 2\n"
        items = token_or_comment_generator(buffer)
        (comment,) = [item for item in items if isinstance(item, Comment)]
        assert str(comment) == "# x"

    def test_equality(self) -> None:
        buffer = "# c\n"
        assert Comment(1, 1, buffer, 0) == Comment(1, 1, "# c", 0)
        assert Comment(1, 1, buffer, 0) != Comment(2, 1, "\n# c", 1)


class TestStream:
    def test_lines_follow_their_tokens_and_comments(self) -> None:
        items = list(token_or_comment_or_line_generator("a: 1  # c\nb: 2\n"))
        assert [label(item) for item in items] == [
            "document",
            "block-map",
            "scalar",
            "map-value-ind",
            "scalar",
            "comment",
            "line",
            "scalar",
            "map-value-ind",
            "scalar",
            "line",
            "line",
        ]

    def test_line_numbers_never_decrease(self) -> None:
        source = "---\n# top\nkey:\n  - [a, b]  # tail\n\nother: |\n  text\n"
        numbers = [item.line_no for item in token_or_comment_or_line_generator(source)]
        assert numbers == sorted(numbers)

    def test_empty_buffer(self) -> None:
        assert list(token_or_comment_or_line_generator("")) == [Line(1, "", 0, 0)]
