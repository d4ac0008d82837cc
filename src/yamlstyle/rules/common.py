"""Spacing helpers shared by the punctuation rules."""

from __future__ import annotations

import re

from yamlstyle.models.problem import LintProblem
from yamlstyle.parser.tokens import Token


def spaces_after(
    token: Token,
    min: int = -1,
    max: int = -1,
    min_desc: str = "<no description>",
    max_desc: str = "<no description>",
) -> LintProblem | None:
    """Check the gap between ``token`` and the next token on the same line."""
    next_token = token.next
    if next_token is None or token.end_mark.line != next_token.start_mark.line:
        return None
    spaces = next_token.start_mark.pointer - token.end_mark.pointer
    if max != -1 and spaces > max:
        return LintProblem(token.start_mark.line, next_token.start_mark.column - 1, max_desc)
    if min != -1 and spaces < min:
        return LintProblem(token.start_mark.line, next_token.start_mark.column, min_desc)
    return None


def spaces_before(
    token: Token,
    min: int = -1,
    max: int = -1,
    min_desc: str = "<no description>",
    max_desc: str = "<no description>",
) -> LintProblem | None:
    """Check the gap between the previous token and ``token`` on the same line."""
    prev = token.prev
    if prev is None or prev.end_mark.line != token.start_mark.line:
        return None
    # tokens ending on a line break (block scalars) do not share the line
    if prev.end_mark.pointer != 0 and prev.buffer[prev.end_mark.pointer - 1] == "\n":
        return None
    spaces = token.start_mark.pointer - prev.end_mark.pointer
    if max != -1 and spaces > max:
        return LintProblem(token.start_mark.line, token.start_mark.column - 1, max_desc)
    if min != -1 and spaces < min:
        return LintProblem(token.start_mark.line, token.start_mark.column, min_desc)
    return None


def get_line_indent(buffer: str, pointer: int) -> int:
    """Indentation (leading spaces) of the line containing ``pointer``."""
    start = buffer.rfind("\n", 0, pointer + 1) + 1
    content = start
    while content < len(buffer) and buffer[content] == " ":
        content += 1
    return content - start


def compile_patterns(patterns: list[str]) -> list[re.Pattern[str]]:
    return [re.compile(pattern) for pattern in patterns]
