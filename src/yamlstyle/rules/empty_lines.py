"""Rule ``empty-lines``: limit consecutive blank lines.

``max`` applies inside the document, ``max-start`` at the beginning of the
file and ``max-end`` at its end. Only the last blank line of a series is
reported.
"""

from __future__ import annotations

from pydantic import Field

from yamlstyle.models.problem import LintProblem
from yamlstyle.parser.lines import Line
from yamlstyle.rules.base import Rule, RuleOptions, RuleType
from yamlstyle.rules.registry import RuleRegistry


class EmptyLinesOptions(RuleOptions):
    max: int = 2
    max_start: int = Field(0, alias="max-start")
    max_end: int = Field(0, alias="max-end")


@RuleRegistry.register
class EmptyLines(Rule):
    options_model = EmptyLinesOptions

    @property
    def id(self) -> str:
        return "empty-lines"

    @property
    def type(self) -> RuleType:
        return RuleType.LINE

    def check(self, conf: EmptyLinesOptions, line: Line, context: None) -> list[LintProblem]:
        buffer = line.buffer
        if line.start != line.end or line.end >= len(buffer):
            return []

        # only the last blank line of a series
        if buffer[line.end : line.end + 2] == "\n\n":
            return []
        if buffer[line.end : line.end + 4] == "\r\n\r\n":
            return []

        blank_lines = 0
        start = line.start
        while start >= 2 and buffer[start - 2 : start] == "\r\n":
            blank_lines += 1
            start -= 2
        while start >= 1 and buffer[start - 1] == "\n":
            blank_lines += 1
            start -= 1

        max_lines = conf.max

        # start of the document: the first line has no preceding break
        if start == 0:
            blank_lines += 1
            max_lines = conf.max_start

        # end of the document: the last line is supposed to end with a break
        if buffer[line.end :] in ("\n", "\r\n", "\r"):
            # a file made of a single "\n" is fine
            if line.end == 0:
                return []
            max_lines = conf.max_end

        if blank_lines > max_lines:
            return [
                LintProblem(
                    line.line_no, 1, f"too many blank lines ({blank_lines} > {max_lines})"
                )
            ]
        return []
