"""Rule ``quoted-strings``: control how string values are quoted.

Options:

* ``quote-type``: ``any``, ``single``, ``double`` or ``consistent`` (the
  first quote style met in the file becomes the norm).
* ``required``: ``true`` requires quotes on every string, ``false`` only
  checks the style of quotes when present, ``only-when-needed`` also reports
  quotes that could be dropped.
* ``extra-required`` / ``extra-allowed``: regexes of values that must stay
  quoted, or that may stay quoted even when not needed.
* ``allow-quoted-quotes``: accept the other quote style when the value
  contains the configured quote character.
* ``check-keys``: also check mapping keys.

Numbers, booleans and other non-string plain scalars are never reported;
they are told apart with the YAML 1.1 resolver, with ``0o`` octals also
counted as numbers. Explicitly tagged (``!!str``) values and block
scalars are skipped too.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from pydantic import Field
from ruamel.yaml.nodes import ScalarNode
from ruamel.yaml.resolver import VersionedResolver

from yamlstyle.models.problem import LintProblem
from yamlstyle.parser.tokens import Kind, ScalarType, Token, token_generator
from yamlstyle.rules.base import Rule, RuleOptions, RuleType
from yamlstyle.rules.common import compile_patterns
from yamlstyle.rules.registry import RuleRegistry

if TYPE_CHECKING:
    from yamlstyle.config import YamlStyleConfig

# https://yaml.org/spec/1.2.2/#character-set
NON_PRINTABLE = re.compile(
    r"[^\x09\x0A\x0D\x20-\x7E\x85\xA0-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]"
)

_FLOW_START_KINDS = frozenset({Kind.FLOW_MAP_START, Kind.FLOW_SEQ_START})
_ENTRY_PREFIX_KINDS = frozenset({Kind.SEQ_ITEM_IND, Kind.COMMA, Kind.FLOW_SEQ_START, Kind.TAG})
_QUOTES = {ScalarType.QUOTE_SINGLE: "'", ScalarType.QUOTE_DOUBLE: '"'}

_resolver = VersionedResolver(version=(1, 1))
# YAML 1.2 octal, which the 1.1 resolver reads as a string
_OCTAL_1_2 = re.compile(r"^[-+]?0o[0-7_]+$")


class QuotedStringsOptions(RuleOptions):
    quote_type: Literal["any", "single", "double", "consistent"] = Field(
        "any", alias="quote-type"
    )
    required: bool | Literal["only-when-needed"] = True
    extra_required: list[str] = Field(default_factory=list, alias="extra-required")
    extra_allowed: list[str] = Field(default_factory=list, alias="extra-allowed")
    allow_quoted_quotes: bool = Field(False, alias="allow-quoted-quotes")
    check_keys: bool = Field(False, alias="check-keys")


@dataclass
class QuotedStringsContext:
    extra_required: list[re.Pattern[str]] = field(default_factory=list)
    extra_allowed: list[re.Pattern[str]] = field(default_factory=list)
    flow_nest_count: int = 0
    quote_style: str | None = None


def _is_string(value: str) -> bool:
    if _OCTAL_1_2.match(value):
        return False
    tag = _resolver.resolve(ScalarNode, value, (True, False))
    return tag == _resolver.DEFAULT_SCALAR_TAG


def _quote_match(quote_type: str, style: str | None, context: QuotedStringsContext) -> bool:
    if quote_type == "consistent" and style is not None:
        # the first quoted scalar of the file sets the style
        if context.quote_style is None:
            context.quote_style = style
        return context.quote_style == style
    return (
        quote_type == "any"
        or (quote_type == "single" and style == "'")
        or (quote_type == "double" and style == '"')
    )


def _has_quoted_quotes(token: Token) -> bool:
    resolve = token.resolve
    if resolve is None:
        return False
    return (resolve.type is ScalarType.QUOTE_SINGLE and '"' in resolve.value) or (
        resolve.type is ScalarType.QUOTE_DOUBLE and "'" in resolve.value
    )


def _has_backslash_on_line_ending(token: Token) -> bool:
    if token.start_mark.line == token.end_mark.line:
        return False
    source = token.buffer[token.start_mark.pointer + 1 : token.end_mark.pointer - 1]
    return "\\\n" in source or "\\\r\n" in source


def _quotes_are_needed(token: Token, is_inside_a_flow: bool) -> bool:
    assert token.resolve is not None
    value = token.resolve.value

    # flow indicators inside a flow collection
    if is_inside_a_flow and set(value) & {",", "[", "]", "{", "}"}:
        return True

    if token.resolve.type is ScalarType.QUOTE_DOUBLE and (
        NON_PRINTABLE.search(value) or _has_backslash_on_line_ending(token)
    ):
        return True

    # the value must read back unchanged as a lone plain scalar
    tokens = token_generator(f"key: {value}")
    # document, block-map, key scalar, ":"
    for _ in range(4):
        next(tokens, None)
    scalar = next(tokens, None)
    return not (
        scalar is not None
        and scalar.resolve is not None
        and scalar.resolve.type is ScalarType.PLAIN
        and scalar.is_block_end
        and scalar.resolve.value == value
    )


@RuleRegistry.register
class QuotedStrings(Rule):
    options_model = QuotedStringsOptions

    @property
    def id(self) -> str:
        return "quoted-strings"

    @property
    def type(self) -> RuleType:
        return RuleType.TOKEN

    def validate(self, options: QuotedStringsOptions) -> str | None:
        if options.required is True and options.extra_allowed:
            return 'cannot use both "required: true" and "extra-allowed"'
        if options.required is True and options.extra_required:
            return 'cannot use both "required: true" and "extra-required"'
        if options.required is False and options.extra_allowed:
            return 'cannot use both "required: false" and "extra-allowed"'
        for pattern in options.extra_required + options.extra_allowed:
            try:
                re.compile(pattern)
            except re.error as exc:
                return f'invalid regex "{pattern}": {exc}'
        return None

    def new_context(
        self, options: QuotedStringsOptions, config: YamlStyleConfig | None = None
    ) -> QuotedStringsContext:
        return QuotedStringsContext(
            extra_required=compile_patterns(options.extra_required),
            extra_allowed=compile_patterns(options.extra_allowed),
        )

    def check(
        self, conf: QuotedStringsOptions, token: Token, context: QuotedStringsContext
    ) -> list[LintProblem]:
        if token.kind in _FLOW_START_KINDS:
            context.flow_nest_count += 1
        elif token.kind in (Kind.FLOW_MAP_END, Kind.FLOW_SEQ_END):
            context.flow_nest_count -= 1

        prev = token.prev
        if token.resolve is None or not (
            token.is_key
            or token.is_value
            or (prev is not None and prev.kind in _ENTRY_PREFIX_KINDS)
        ):
            return []

        node = "key" if token.is_key else "value"
        if token.is_key and not conf.check_keys:
            return []

        # explicit types, e.g. !!str testtest or !!int 42
        if prev is not None and prev.kind is Kind.TAG and prev.source.startswith("!!"):
            return []

        resolve = token.resolve
        value = resolve.value
        is_string = _is_string(value)
        # numbers, booleans, null...
        if resolve.type is ScalarType.PLAIN and not is_string:
            return []
        # multi-line strings
        if resolve.type in (ScalarType.BLOCK_FOLDED, ScalarType.BLOCK_LITERAL):
            return []

        quote_type = conf.quote_type
        style = _QUOTES.get(resolve.type)
        is_plain = resolve.type is ScalarType.PLAIN

        def style_mismatch() -> bool:
            return not _quote_match(quote_type, style, context) and not (
                conf.allow_quoted_quotes and _has_quoted_quotes(token)
            )

        def extra_required() -> bool:
            return any(pattern.search(value) for pattern in context.extra_required)

        msg = None
        if conf.required is True:
            if is_plain or style_mismatch():
                msg = f"string {node} is not quoted with {quote_type} quotes"

        elif conf.required is False:
            if not is_plain and style_mismatch():
                msg = f"string {node} is not quoted with {quote_type} quotes"
            elif is_plain and extra_required():
                msg = f"string {node} is not quoted"

        elif (
            not is_plain
            and is_string
            and value
            and not _quotes_are_needed(token, context.flow_nest_count > 0)
        ):
            extra_allowed = any(pattern.search(value) for pattern in context.extra_allowed)
            if not (extra_required() or extra_allowed):
                msg = f"string {node} is redundantly quoted with {quote_type} quotes"

        elif not is_plain and style_mismatch():
            msg = f"string {node} is not quoted with {quote_type} quotes"

        elif is_plain and extra_required():
            msg = f"string {node} is not quoted"

        if msg is None:
            return []
        return [LintProblem(token.start_mark.line, token.start_mark.column, msg)]
