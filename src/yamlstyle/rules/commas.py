"""Rule ``commas``: spaces around ``,`` in flow collections."""

from __future__ import annotations

from pydantic import Field

from yamlstyle.models.problem import LintProblem
from yamlstyle.parser.tokens import Kind, Token
from yamlstyle.rules.base import Rule, RuleOptions, RuleType
from yamlstyle.rules.common import spaces_after, spaces_before
from yamlstyle.rules.registry import RuleRegistry


class CommasOptions(RuleOptions):
    max_spaces_before: int = Field(0, alias="max-spaces-before")
    min_spaces_after: int = Field(1, alias="min-spaces-after")
    max_spaces_after: int = Field(1, alias="max-spaces-after")


@RuleRegistry.register
class Commas(Rule):
    options_model = CommasOptions

    @property
    def id(self) -> str:
        return "commas"

    @property
    def type(self) -> RuleType:
        return RuleType.TOKEN

    def check(self, conf: CommasOptions, token: Token, context: None) -> list[LintProblem]:
        if token.kind is not Kind.COMMA:
            return []

        problems: list[LintProblem] = []
        prev = token.prev
        if (
            prev is not None
            and conf.max_spaces_before != -1
            and prev.end_mark.line < token.start_mark.line
        ):
            problems.append(
                LintProblem(
                    token.start_mark.line,
                    max(1, token.start_mark.column - 1),
                    "too many spaces before comma",
                )
            )
        else:
            problem = spaces_before(
                token,
                max=conf.max_spaces_before,
                max_desc="too many spaces before comma",
            )
            if problem:
                problems.append(problem)

        problem = spaces_after(
            token,
            min=conf.min_spaces_after,
            max=conf.max_spaces_after,
            min_desc="too few spaces after comma",
            max_desc="too many spaces after comma",
        )
        if problem:
            problems.append(problem)
        return problems
