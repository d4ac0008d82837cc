"""Rule ``new-line-at-end-of-file``: require a line break after the last line."""

from __future__ import annotations

from yamlstyle.models.problem import LintProblem
from yamlstyle.parser.lines import Line
from yamlstyle.rules.base import Rule, RuleType
from yamlstyle.rules.registry import RuleRegistry


@RuleRegistry.register
class NewLineAtEndOfFile(Rule):
    @property
    def id(self) -> str:
        return "new-line-at-end-of-file"

    @property
    def type(self) -> RuleType:
        return RuleType.LINE

    def check(self, conf: object, line: Line, context: None) -> list[LintProblem]:
        if line.end == len(line.buffer) and line.end > line.start:
            return [
                LintProblem(
                    line.line_no,
                    line.end - line.start + 1,
                    "no new line character at the end of file",
                )
            ]
        return []
