"""Rule ``new-lines``: enforce the line break style (``unix``, ``dos`` or ``platform``).

Only the first line break of the file is checked; a file without any ``\\n`` is
not checked.
"""

from __future__ import annotations

import os
from typing import Literal

from yamlstyle.models.problem import LintProblem
from yamlstyle.parser.lines import Line
from yamlstyle.rules.base import Rule, RuleOptions, RuleType
from yamlstyle.rules.registry import RuleRegistry

_NEWLINES = {"unix": "\n", "dos": "\r\n"}


class NewLinesOptions(RuleOptions):
    type: Literal["unix", "dos", "platform"] = "unix"


@RuleRegistry.register
class NewLines(Rule):
    options_model = NewLinesOptions

    @property
    def id(self) -> str:
        return "new-lines"

    @property
    def type(self) -> RuleType:
        return RuleType.LINE

    def check(self, conf: NewLinesOptions, line: Line, context: None) -> list[LintProblem]:
        if line.start != 0 or "\n" not in line.buffer:
            return []

        newline = _NEWLINES.get(conf.type, os.linesep)
        if line.buffer[line.end : line.end + len(newline)] != newline:
            expected = repr(newline)[1:-1]
            return [
                LintProblem(
                    1,
                    line.end - line.start + 1,
                    f"wrong new line character: expected {expected}",
                )
            ]
        return []
