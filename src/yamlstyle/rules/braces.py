"""Rule ``braces``: spacing inside flow mappings (``{ }``), or forbid them."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from yamlstyle.models.problem import LintProblem
from yamlstyle.parser.tokens import Kind, Token
from yamlstyle.rules.base import Rule, RuleOptions, RuleType
from yamlstyle.rules.common import spaces_after, spaces_before
from yamlstyle.rules.registry import RuleRegistry


class BracesOptions(RuleOptions):
    forbid: bool | Literal["non-empty"] = False
    min_spaces_inside: int = Field(0, alias="min-spaces-inside")
    max_spaces_inside: int = Field(0, alias="max-spaces-inside")
    min_spaces_inside_empty: int = Field(-1, alias="min-spaces-inside-empty")
    max_spaces_inside_empty: int = Field(-1, alias="max-spaces-inside-empty")


@RuleRegistry.register
class Braces(Rule):
    options_model = BracesOptions

    @property
    def id(self) -> str:
        return "braces"

    @property
    def type(self) -> RuleType:
        return RuleType.TOKEN

    def check(self, conf: BracesOptions, token: Token, context: None) -> list[LintProblem]:
        next_token = token.next
        prev = token.prev
        is_start = token.kind is Kind.FLOW_MAP_START
        is_empty = is_start and next_token is not None and next_token.kind is Kind.FLOW_MAP_END

        if is_start and (conf.forbid is True or (conf.forbid == "non-empty" and not is_empty)):
            return [
                LintProblem(token.start_mark.line, token.end_mark.column, "forbidden flow mapping")
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
                min_desc="too few spaces inside empty braces",
                max_desc="too many spaces inside empty braces",
            )
        elif is_start:
            problem = spaces_after(
                token,
                min=conf.min_spaces_inside,
                max=conf.max_spaces_inside,
                min_desc="too few spaces inside braces",
                max_desc="too many spaces inside braces",
            )
        elif token.kind is Kind.FLOW_MAP_END and (
            prev is None or prev.kind is not Kind.FLOW_MAP_START
        ):
            problem = spaces_before(
                token,
                min=conf.min_spaces_inside,
                max=conf.max_spaces_inside,
                min_desc="too few spaces inside braces",
                max_desc="too many spaces inside braces",
            )
        return [problem] if problem else []
