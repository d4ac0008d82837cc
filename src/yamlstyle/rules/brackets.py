"""Rule ``brackets``: spacing inside flow sequences (``[ ]``), or forbid them."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from yamlstyle.models.problem import LintProblem
from yamlstyle.parser.tokens import Kind, Token
from yamlstyle.rules.base import Rule, RuleOptions, RuleType
from yamlstyle.rules.common import spaces_after, spaces_before
from yamlstyle.rules.registry import RuleRegistry


class BracketsOptions(RuleOptions):
    forbid: bool | Literal["non-empty"] = False
    min_spaces_inside: int = Field(0, alias="min-spaces-inside")
    max_spaces_inside: int = Field(0, alias="max-spaces-inside")
    min_spaces_inside_empty: int = Field(-1, alias="min-spaces-inside-empty")
    max_spaces_inside_empty: int = Field(-1, alias="max-spaces-inside-empty")


@RuleRegistry.register
class Brackets(Rule):
    options_model = BracketsOptions

    @property
    def id(self) -> str:
        return "brackets"

    @property
    def type(self) -> RuleType:
        return RuleType.TOKEN

    def check(self, conf: BracketsOptions, token: Token, context: None) -> list[LintProblem]:
        next_token = token.next
        prev = token.prev
        is_start = token.kind is Kind.FLOW_SEQ_START
        is_empty = is_start and next_token is not None and next_token.kind is Kind.FLOW_SEQ_END

        if is_start and (conf.forbid is True or (conf.forbid == "non-empty" and not is_empty)):
            return [
                LintProblem(token.start_mark.line, token.end_mark.column, "forbidden flow sequence")
            ]

        problem = None
        if is_empty:
            problem = spaces_after(
                token,
                min=(
                    conf.min_spaces_inside_empty
                    if conf.min_spaces_inside_empty != -1
                    else conf.min_spaces_inside
                ),
                max=(
                    conf.max_spaces_inside_empty
                    if conf.max_spaces_inside_empty != -1
                    else conf.max_spaces_inside
                ),
                min_desc="too few spaces inside empty brackets",
                max_desc="too many spaces inside empty brackets",
            )
        elif is_start:
            problem = spaces_after(
                token,
                min=conf.min_spaces_inside,
                max=conf.max_spaces_inside,
                min_desc="too few spaces inside brackets",
                max_desc="too many spaces inside brackets",
            )
        elif token.kind is Kind.FLOW_SEQ_END and (
            prev is None or prev.kind is not Kind.FLOW_SEQ_START
        ):
            problem = spaces_before(
                token,
                min=conf.min_spaces_inside,
                max=conf.max_spaces_inside,
                min_desc="too few spaces inside brackets",
                max_desc="too many spaces inside brackets",
            )
        return [problem] if problem else []
