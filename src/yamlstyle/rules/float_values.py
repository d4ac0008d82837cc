"""Rule ``float-values``: restrict the accepted spellings of floats."""

from __future__ import annotations

import re

from pydantic import Field

from yamlstyle.models.problem import LintProblem
from yamlstyle.parser.tokens import Kind, ScalarType, Token
from yamlstyle.rules.base import Rule, RuleOptions, RuleType
from yamlstyle.rules.registry import RuleRegistry

IS_NUMERAL_BEFORE_DECIMAL_PATTERN = re.compile(r"[-+]?(\.[0-9]+)([eE][-+]?[0-9]+)?$")
IS_SCIENTIFIC_NOTATION_PATTERN = re.compile(
    r"[-+]?(\.[0-9]+|[0-9]+(\.[0-9]*)?)([eE][-+]?[0-9]+)$"
)
IS_INF_PATTERN = re.compile(r"[-+]?(\.inf|\.Inf|\.INF)$")
IS_NAN_PATTERN = re.compile(r"(\.nan|\.NaN|\.NAN)$")


class FloatValuesOptions(RuleOptions):
    require_numeral_before_decimal: bool = Field(False, alias="require-numeral-before-decimal")
    forbid_scientific_notation: bool = Field(False, alias="forbid-scientific-notation")
    forbid_nan: bool = Field(False, alias="forbid-nan")
    forbid_inf: bool = Field(False, alias="forbid-inf")


@RuleRegistry.register
class FloatValues(Rule):
    options_model = FloatValuesOptions

    @property
    def id(self) -> str:
        return "float-values"

    @property
    def type(self) -> RuleType:
        return RuleType.TOKEN

    def check(
        self, conf: FloatValuesOptions, token: Token, context: None
    ) -> list[LintProblem]:
        if token.prev is not None and token.prev.kind is Kind.TAG:
            return []
        if token.resolve is None or token.resolve.type is not ScalarType.PLAIN:
            return []

        val = token.resolve.value
        line, column = token.start_mark.line, token.start_mark.column
        problems: list[LintProblem] = []

        if conf.forbid_nan and IS_NAN_PATTERN.match(val):
            problems.append(LintProblem(line, column, f'forbidden not a number value "{val}"'))
        if conf.forbid_inf and IS_INF_PATTERN.match(val):
            problems.append(LintProblem(line, column, f'forbidden infinite value "{val}"'))
        if conf.forbid_scientific_notation and IS_SCIENTIFIC_NOTATION_PATTERN.match(val):
            problems.append(LintProblem(line, column, f'forbidden scientific notation "{val}"'))
        if conf.require_numeral_before_decimal and IS_NUMERAL_BEFORE_DECIMAL_PATTERN.match(val):
            problems.append(
                LintProblem(line, column, f'forbidden decimal missing 0 prefix "{val}"')
            )
        return problems
