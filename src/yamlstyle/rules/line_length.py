"""Rule ``line-length``: limit the length of lines.

``allow-non-breakable-words`` lets a line overflow when its content (after
the indentation and a leading ``- `` or ``#``) has no space to break it at,
such as a long URL. ``allow-non-breakable-inline-mappings`` extends that to
``key: <non-breakable value>`` lines and implies the former.
"""

from __future__ import annotations

from pydantic import Field

from yamlstyle.models.problem import LintProblem
from yamlstyle.parser.lines import Line
from yamlstyle.parser.tokens import Kind, token_generator
from yamlstyle.rules.base import Rule, RuleOptions, RuleType
from yamlstyle.rules.registry import RuleRegistry


class LineLengthOptions(RuleOptions):
    max: int = 80
    allow_non_breakable_words: bool = Field(True, alias="allow-non-breakable-words")
    allow_non_breakable_inline_mappings: bool = Field(
        False, alias="allow-non-breakable-inline-mappings"
    )


def _is_inline_mapping(line: Line) -> bool:
    """Whether the line is ``key: value`` with a value that has no space."""
    content = line.content
    tokens = token_generator(content)
    for token in tokens:
        if token.kind is not Kind.BLOCK_MAP:
            continue
        for inner in tokens:
            if inner.kind is Kind.MAP_VALUE_IND:
                value = next(tokens, None)
                if value is not None and value.resolve is not None:
                    return " " not in content[value.start_mark.column - 1 :]
    return False


@RuleRegistry.register
class LineLength(Rule):
    options_model = LineLengthOptions

    @property
    def id(self) -> str:
        return "line-length"

    @property
    def type(self) -> RuleType:
        return RuleType.LINE

    def check(self, conf: LineLengthOptions, line: Line, context: None) -> list[LintProblem]:
        length = line.end - line.start
        if length <= conf.max:
            return []

        if conf.allow_non_breakable_words or conf.allow_non_breakable_inline_mappings:
            buffer = line.buffer
            start = line.start
            while start < line.end and buffer[start] == " ":
                start += 1

            if start != line.end:
                if buffer[start] == "#":
                    while start < line.end and buffer[start] == "#":
                        start += 1
                    start += 1
                elif buffer[start] == "-":
                    start += 2

                if " " not in buffer[start : line.end]:
                    return []

                if conf.allow_non_breakable_inline_mappings and _is_inline_mapping(line):
                    return []

        return [
            LintProblem(
                line.line_no,
                conf.max + 1,
                f"line too long ({length} > {conf.max} characters)",
            )
        ]
