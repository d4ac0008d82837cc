"""Rule ``hyphens``: spaces after the ``-`` of block sequence entries."""

from __future__ import annotations

from pydantic import Field

from yamlstyle.models.problem import LintProblem
from yamlstyle.parser.tokens import Kind, Token
from yamlstyle.rules.base import Rule, RuleOptions, RuleType
from yamlstyle.rules.common import spaces_after
from yamlstyle.rules.registry import RuleRegistry


class HyphensOptions(RuleOptions):
    max_spaces_after: int = Field(1, alias="max-spaces-after")


@RuleRegistry.register
class Hyphens(Rule):
    options_model = HyphensOptions

    @property
    def id(self) -> str:
        return "hyphens"

    @property
    def type(self) -> RuleType:
        return RuleType.TOKEN

    def check(self, conf: HyphensOptions, token: Token, context: None) -> list[LintProblem]:
        if token.kind is not Kind.SEQ_ITEM_IND:
            return []
        problem = spaces_after(
            token,
            max=conf.max_spaces_after,
            max_desc="too many spaces after hyphen",
        )
        return [problem] if problem else []
