"""Rule ``octal-values``: forbid implicit (``010``) and explicit (``0o10``) octals."""

from __future__ import annotations

import re

from pydantic import Field

from yamlstyle.models.problem import LintProblem
from yamlstyle.parser.tokens import Kind, ScalarType, Token
from yamlstyle.rules.base import Rule, RuleOptions, RuleType
from yamlstyle.rules.registry import RuleRegistry

IS_OCTAL_NUMBER_PATTERN = re.compile(r"[0-7]+$")


class OctalValuesOptions(RuleOptions):
    forbid_implicit_octal: bool = Field(True, alias="forbid-implicit-octal")
    forbid_explicit_octal: bool = Field(True, alias="forbid-explicit-octal")


@RuleRegistry.register
class OctalValues(Rule):
    options_model = OctalValuesOptions

    @property
    def id(self) -> str:
        return "octal-values"

    @property
    def type(self) -> RuleType:
        return RuleType.TOKEN

    def check(
        self, conf: OctalValuesOptions, token: Token, context: None
    ) -> list[LintProblem]:
        if token.prev is not None and token.prev.kind is Kind.TAG:
            return []
        if token.resolve is None or token.resolve.type is not ScalarType.PLAIN:
            return []

        val = token.resolve.value
        problems: list[LintProblem] = []
        if (
            conf.forbid_implicit_octal
            and val.isdigit()
            and len(val) > 1
            and val[0] == "0"
            and IS_OCTAL_NUMBER_PATTERN.match(val[1:])
        ):
            problems.append(
                LintProblem(
                    token.start_mark.line,
                    token.end_mark.column,
                    f'forbidden implicit octal value "{val}"',
                )
            )
        if (
            conf.forbid_explicit_octal
            and len(val) > 2
            and val[:2] == "0o"
            and IS_OCTAL_NUMBER_PATTERN.match(val[2:])
        ):
            problems.append(
                LintProblem(
                    token.start_mark.line,
                    token.end_mark.column,
                    f'forbidden explicit octal value "{val}"',
                )
            )
        return problems
