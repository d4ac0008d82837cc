"""Indentation rule.

Keeps a stack of :class:`Parent` entries mirroring the block and flow nesting
of the document. Every token first gets linted against the indentation the
top of the stack expects (when it opens a line), then updates the stack: a
container, a sequence entry, a key or a non-empty value pushes one entry,
and a reconciliation loop pops every entry the token closes.

With ``spaces: consistent`` the width is pinned to the first indentation
step met in the document; ``indent-sequences: consistent`` likewise pins
itself to the first block sequence found as a mapping value.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING, Literal, TypeVar

from pydantic import Field

from yamlstyle.models.problem import LintProblem
from yamlstyle.parser.lines import LINE_BREAK_RE
from yamlstyle.parser.tokens import FLOW_END_KINDS, PROPERTY_KINDS, Kind, Token
from yamlstyle.rules.base import Rule, RuleOptions, RuleType
from yamlstyle.rules.registry import RuleRegistry

if TYPE_CHECKING:
    from yamlstyle.config import YamlStyleConfig

logger = logging.getLogger("yamlstyle.rules.indentation")

_T = TypeVar("_T")


class IndentationInferenceError(Exception):
    """Raised when a token does not fit the structure inferred so far."""


class ParentType(IntEnum):
    ROOT = 0
    B_MAP = 1
    F_MAP = 2
    B_SEQ = 3
    F_SEQ = 4
    B_ENT = 5
    KEY = 6
    VAL = 7


@dataclass
class Parent:
    """One level of the implicit YAML structure."""

    token: Token | None
    type: ParentType
    indent: int
    line_indent: int
    explicit_key: bool = False

    def __repr__(self) -> str:
        return f"{self.type.name}:{self.indent}"


@dataclass
class IndentationContext:
    stack: list[Parent] = field(
        default_factory=lambda: [Parent(None, ParentType.ROOT, 0, 0)]
    )
    cur_line: int = -1
    cur_line_indent: int = 0
    spaces: int | str = "consistent"
    indent_sequences: bool | str = True


class IndentationOptions(RuleOptions):
    spaces: int | Literal["consistent"] = "consistent"
    indent_sequences: bool | Literal["whatever", "consistent"] = Field(
        True, alias="indent-sequences"
    )
    check_multi_line_strings: bool = Field(False, alias="check-multi-line-strings")


_KEY_PREFIX_KINDS = frozenset({Kind.ANCHOR, Kind.TAG, Kind.EXPLICIT_KEY_IND})
_OPENER_KINDS = frozenset(
    {Kind.BLOCK_MAP, Kind.BLOCK_SEQ, Kind.FLOW_MAP_START, Kind.FLOW_SEQ_START}
)


def _expect(condition: bool) -> None:
    if not condition:
        raise IndentationInferenceError


def _present(item: _T | None) -> _T:
    if item is None:
        raise IndentationInferenceError
    return item


def _is_key(token: Token | None) -> bool:
    """Whether ``token`` starts a key, counting its anchor/tag/``?`` prefix.

    ``?`` always starts a key, even an empty one (``? : value``).
    """
    if token is None:
        return False
    if token.kind is Kind.EXPLICIT_KEY_IND:
        return True
    if token.prev is not None and token.prev.kind in _KEY_PREFIX_KINDS:
        return False
    if token.is_key:
        return True
    following = token.next
    while (
        token.kind in PROPERTY_KINDS
        and following is not None
        and following.kind in PROPERTY_KINDS
        and following.is_linked
    ):
        following = following.next
    return token.kind in PROPERTY_KINDS and following is not None and following.is_key


def _detect_indent(context: IndentationContext, base_indent: int, next_token: Token) -> int:
    if not isinstance(context.spaces, int):
        context.spaces = next_token.start_mark.column - 1 - base_indent
    return base_indent + context.spaces


def _check_scalar_indentation(
    token: Token, context: IndentationContext, problems: list[LintProblem]
) -> None:
    """Lint the continuation lines of a multi-line scalar."""
    if token.start_mark.line == token.end_mark.line:
        return

    last_item = context.stack[-1]
    last_second_item = context.stack[-2] if len(context.stack) > 1 else None

    def compute_expected_indent(found_indent: int) -> int:
        def detect_indent(base_indent: int) -> int:
            if not isinstance(context.spaces, int):
                context.spaces = found_indent - base_indent
            return base_indent + context.spaces

        if token.kind is Kind.SCALAR:
            return token.start_mark.column - 1
        if token.kind in (Kind.SINGLE_QUOTED_SCALAR, Kind.DOUBLE_QUOTED_SCALAR):
            return token.start_mark.column
        _expect(token.kind is Kind.BLOCK_SCALAR)

        if last_item.type is ParentType.B_ENT:
            # - >
            #     multi
            #     line
            return detect_indent(token.start_mark.column - 1)
        if last_item.type is ParentType.KEY:
            # - ? >
            #       multi-line
            #       key
            _expect(last_item.explicit_key)
            return detect_indent(token.start_mark.column - 1)
        if last_item.type is ParentType.VAL:
            if token.start_mark.line > context.cur_line:
                # - key:
                #     >
                #       multi
                #       line
                return detect_indent(last_item.indent)
            key_item = _present(last_second_item)
            if key_item.explicit_key:
                # - ? key
                #   : >
                #       multi-line
                #       value
                return detect_indent(token.start_mark.column - 1)
            # - key: >
            #     multi
            #     line
            return detect_indent(key_item.indent)
        return detect_indent(last_item.indent)

    buffer = token.buffer
    end = token.end_mark.pointer - 1
    expected_indent: int | None = None
    line_no = token.start_mark.line
    for line_break in LINE_BREAK_RE.finditer(buffer, token.start_mark.pointer, end):
        line_start = line_break.end()
        line_no += 1

        indent = 0
        while line_start + indent < len(buffer) and buffer[line_start + indent] == " ":
            indent += 1
        if buffer[line_start + indent : line_start + indent + 1] in ("\n", "\r"):
            continue

        if expected_indent is None:
            expected_indent = compute_expected_indent(indent)
        if indent != expected_indent:
            problems.append(
                LintProblem(
                    line_no,
                    indent + 1,
                    f"wrong indentation: expected {expected_indent} but found {indent}",
                )
            )


def _check(
    conf: IndentationOptions,
    token: Token,
    context: IndentationContext,
    problems: list[LintProblem],
) -> None:
    stack = context.stack
    next_token = token.next

    def push(parent_type: ParentType, indent: int, explicit_key: bool = False) -> None:
        stack.append(
            Parent(token, parent_type, indent, context.cur_line_indent, explicit_key)
        )

    # Step 1: lint

    last_item = stack[-1]
    first_in_line = token.is_visible and token.start_mark.line > context.cur_line
    found_indentation = token.indent

    if first_in_line:
        expected = last_item.indent
        if token.kind in FLOW_END_KINDS:
            expected = last_item.line_indent
        elif (
            last_item.type is ParentType.KEY
            and last_item.explicit_key
            and token.kind is not Kind.MAP_VALUE_IND
        ):
            expected = _detect_indent(context, expected, token)

        if found_indentation != expected:
            if expected < 0:
                message = f"wrong indentation: expected at least {found_indentation + 1}"
            else:
                message = (
                    f"wrong indentation: expected {expected} but found {found_indentation}"
                )
            problems.append(LintProblem(token.start_mark.line, found_indentation + 1, message))

    if token.resolve is not None and conf.check_multi_line_strings:
        _check_scalar_indentation(token, context, problems)

    # Step 2.a: remember the line we are on

    if token.is_visible:
        context.cur_line = token.end_line
        if first_in_line:
            context.cur_line_indent = found_indentation

    # Step 2.b: update state

    if next_token is None and token.kind in _OPENER_KINDS:
        # the stream was cut short by a syntax error
        return

    if token.kind is Kind.BLOCK_MAP:
        #   - a: 1
        # or
        #   - ? a
        #     : 1
        next_token = _present(next_token)
        _expect(next_token.is_key or next_token.kind in _KEY_PREFIX_KINDS)
        _expect(next_token.start_mark.line == token.start_mark.line)
        push(ParentType.B_MAP, token.indent)

    elif token.kind is Kind.FLOW_MAP_START:
        if _is_key(token):
            #   {a: 1}: value
            push(ParentType.KEY, last_item.indent)
        next_token = _present(next_token)
        if next_token.start_mark.line == token.start_mark.line:
            #   - {a: 1, b: 2}
            indent = next_token.start_mark.column - 1
        else:
            #   - {
            #     a: 1, b: 2
            #   }
            indent = _detect_indent(context, context.cur_line_indent, next_token)
        push(ParentType.F_MAP, indent)

    elif token.kind is Kind.BLOCK_SEQ:
        #   - - a
        #     - b
        next_token = _present(next_token)
        _expect(next_token.kind is Kind.SEQ_ITEM_IND)
        _expect(next_token.start_mark.line == token.start_mark.line)
        push(ParentType.B_SEQ, token.indent)

    elif token.kind is Kind.SEQ_ITEM_IND and not (
        token.is_block_end
        or (next_token is not None and next_token.kind is Kind.SEQ_ITEM_IND)
    ):
        next_token = _present(next_token)
        if next_token.start_mark.line == token.end_mark.line:
            #   - item1
            #   - item2
            indent = next_token.start_mark.column - 1
        elif next_token.start_mark.column == token.start_mark.column:
            #   -
            #   key: value
            indent = next_token.start_mark.column - 1
        else:
            #   -
            #     item 1
            indent = _detect_indent(context, token.indent, next_token)
        push(ParentType.B_ENT, indent)

    elif token.kind is Kind.FLOW_SEQ_START:
        if _is_key(token):
            #   [a, b]: value
            push(ParentType.KEY, last_item.indent)
        next_token = _present(next_token)
        if next_token.start_mark.line == token.start_mark.line:
            #   - [a, b]
            indent = next_token.start_mark.column - 1
        else:
            #   - [
            #     a, b
            #   ]
            indent = _detect_indent(context, context.cur_line_indent, next_token)
        push(ParentType.F_SEQ, indent)

    elif _is_key(token):
        push(ParentType.KEY, last_item.indent, token.kind is Kind.EXPLICIT_KEY_IND)

    elif token.kind is Kind.MAP_VALUE_IND:
        value = next_token
        # key: &anchor
        #   value
        if (
            value is not None
            and value.kind in (Kind.ANCHOR, Kind.TAG)
            and value.start_mark.line == token.start_mark.line
            and value.next is not None
            and value.start_mark.line < value.next.start_mark.line
        ):
            value = value.next

        # only if the value is not empty
        if (
            not token.is_block_end
            and (value is None or value.kind not in FLOW_END_KINDS)
            and not (value is not None and value.is_key)
        ):
            value = _present(value)
            if last_item.explicit_key:
                #   ? k
                #   : value
                indent = _detect_indent(context, last_item.indent, value)
            elif token.prev is not None and value.start_mark.line == token.prev.start_mark.line:
                #   k: value
                indent = value.start_mark.column - 1
            elif value.kind in (Kind.BLOCK_SEQ, Kind.SEQ_ITEM_IND):
                indent = _sequence_value_indent(context, last_item, value)
            else:
                #   k:
                #     value
                indent = _detect_indent(context, last_item.indent, value)
            push(ParentType.VAL, indent)

    _reconcile(token, context)


def _sequence_value_indent(
    context: IndentationContext, last_item: Parent, value: Token
) -> int:
    """Indent of a block sequence used as a mapping value."""
    column = value.start_mark.column - 1
    if context.indent_sequences is False:
        return last_item.indent
    if context.indent_sequences is True:
        if context.spaces == "consistent" and column - last_item.indent == 0:
            # the sequence is not indented while it should be, but the width
            # is still unknown: expect an unknown value
            return -1
        return _detect_indent(context, last_item.indent, value)
    # "whatever" or "consistent"
    if column == last_item.indent:
        #   key:
        #   - e1
        if context.indent_sequences == "consistent":
            context.indent_sequences = False
        return last_item.indent
    #   key:
    #     - e1
    if context.indent_sequences == "consistent":
        context.indent_sequences = True
    return _detect_indent(context, last_item.indent, value)


def _reconcile(token: Token, context: IndentationContext) -> None:
    """Pop every stack entry closed by ``token``."""
    stack = context.stack
    next_token = token.next
    consumed_current_token = False
    while len(stack) > 1:
        last_item = stack[-1]

        if (
            last_item.type is ParentType.F_SEQ
            and token.kind is Kind.FLOW_SEQ_END
            and not consumed_current_token
        ) or (
            last_item.type is ParentType.F_MAP
            and token.kind is Kind.FLOW_MAP_END
            and not consumed_current_token
        ):
            stack.pop()
            consumed_current_token = True

        elif (
            last_item.type in (ParentType.B_MAP, ParentType.B_SEQ)
            and token.is_block_end
            and next_token is not None
            and last_item.indent > next_token.indent
        ):
            stack.pop()

        elif (
            last_item.type is ParentType.B_ENT
            and token.kind not in (Kind.SEQ_ITEM_IND, Kind.ANCHOR, Kind.TAG)
            and (next_token is None or next_token.kind is not Kind.SEQ_ITEM_IND)
        ):
            stack.pop()
            stack.pop()

        elif (
            last_item.type is ParentType.B_ENT
            and last_item.token is not token
            and (
                (next_token is not None and next_token.kind is Kind.SEQ_ITEM_IND)
                or token.is_block_end
            )
        ):
            stack.pop()

        elif (
            last_item.type is ParentType.VAL
            and last_item.token is not token
            and token.kind not in (Kind.ANCHOR, Kind.TAG)
        ):
            _expect(len(stack) > 2 and stack[-2].type is ParentType.KEY)
            stack.pop()
            stack.pop()

        elif last_item.type is ParentType.KEY and (
            (
                next_token is not None
                and next_token.kind in FLOW_END_KINDS | {Kind.EXPLICIT_KEY_IND}
            )
            or _is_key(next_token)
        ):
            # a key without a value, as in a set: make room for the next one
            stack.pop()

        else:
            break


@RuleRegistry.register
class Indentation(Rule):
    options_model = IndentationOptions

    @property
    def id(self) -> str:
        return "indentation"

    @property
    def type(self) -> RuleType:
        return RuleType.TOKEN

    def new_context(
        self, options: IndentationOptions, config: YamlStyleConfig | None = None
    ) -> IndentationContext:
        return IndentationContext(
            spaces=options.spaces,
            indent_sequences=options.indent_sequences,
        )

    def check(
        self, conf: IndentationOptions, token: Token, context: IndentationContext
    ) -> list[LintProblem]:
        problems: list[LintProblem] = []
        try:
            _check(conf, token, context, problems)
        except IndentationInferenceError:
            logger.debug("indentation stack lost track at %r: %r", token, context.stack)
            problems.append(
                LintProblem(
                    token.start_mark.line,
                    token.start_mark.column,
                    "cannot infer indentation: unexpected token",
                )
            )
        return problems
