"""Rule ``colons``: spaces before and after ``:`` (and after ``?``)."""

from __future__ import annotations

from pydantic import Field

from yamlstyle.models.problem import LintProblem
from yamlstyle.parser.tokens import Kind, Token
from yamlstyle.rules.base import Rule, RuleOptions, RuleType
from yamlstyle.rules.common import spaces_after, spaces_before
from yamlstyle.rules.registry import RuleRegistry


class ColonsOptions(RuleOptions):
    max_spaces_before: int = Field(0, alias="max-spaces-before")
    max_spaces_after: int = Field(1, alias="max-spaces-after")


@RuleRegistry.register
class Colons(Rule):
    options_model = ColonsOptions

    @property
    def id(self) -> str:
        return "colons"

    @property
    def type(self) -> RuleType:
        return RuleType.TOKEN

    def check(self, conf: ColonsOptions, token: Token, context: None) -> list[LintProblem]:
        problems: list[LintProblem] = []
        prev = token.prev

        # `*alias :` needs the space, or the colon would be part of the alias
        after_alias = (
            prev is not None
            and prev.kind is Kind.ALIAS
            and token.start_mark.pointer - prev.end_mark.pointer == 1
        )
        if token.kind is Kind.MAP_VALUE_IND and not after_alias:
            problem = spaces_before(
                token,
                max=conf.max_spaces_before,
                max_desc="too many spaces before colon",
            )
            if problem:
                problems.append(problem)
            problem = spaces_after(
                token,
                max=conf.max_spaces_after,
                max_desc="too many spaces after colon",
            )
            if problem:
                problems.append(problem)

        if token.kind is Kind.EXPLICIT_KEY_IND:
            problem = spaces_after(
                token,
                max=conf.max_spaces_after,
                max_desc="too many spaces after question mark",
            )
            if problem:
                problems.append(problem)
        return problems
