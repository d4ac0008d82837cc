"""Rule ``trailing-spaces``: forbid spaces and tabs at the end of lines."""

from __future__ import annotations

from yamlstyle.models.problem import LintProblem
from yamlstyle.parser.lines import Line
from yamlstyle.rules.base import Rule, RuleType
from yamlstyle.rules.registry import RuleRegistry


@RuleRegistry.register
class TrailingSpaces(Rule):
    @property
    def id(self) -> str:
        return "trailing-spaces"

    @property
    def type(self) -> RuleType:
        return RuleType.LINE

    def check(self, conf: object, line: Line, context: None) -> list[LintProblem]:
        if line.end == 0:
            return []

        buffer = line.buffer
        pos = line.end
        while pos > line.start and buffer[pos - 1].isspace():
            pos -= 1

        # YAML only knows two white space characters: space and tab
        if pos != line.end and buffer[pos] in " \t":
            return [LintProblem(line.line_no, pos - line.start + 1, "trailing spaces")]
        return []
