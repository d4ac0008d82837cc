"""Rule ``empty-values``: forbid implicit null values.

Each option forbids empty values in one kind of collection: block mappings,
flow mappings and block sequences.
"""

from __future__ import annotations

from pydantic import Field

from yamlstyle.models.problem import LintProblem
from yamlstyle.parser.tokens import Kind, Token
from yamlstyle.rules.base import Rule, RuleOptions, RuleType
from yamlstyle.rules.registry import RuleRegistry


class EmptyValuesOptions(RuleOptions):
    forbid_in_block_mappings: bool = Field(True, alias="forbid-in-block-mappings")
    forbid_in_flow_mappings: bool = Field(True, alias="forbid-in-flow-mappings")
    forbid_in_block_sequences: bool = Field(True, alias="forbid-in-block-sequences")


@RuleRegistry.register
class EmptyValues(Rule):
    options_model = EmptyValuesOptions

    @property
    def id(self) -> str:
        return "empty-values"

    @property
    def type(self) -> RuleType:
        return RuleType.TOKEN

    def check(
        self, conf: EmptyValuesOptions, token: Token, context: None
    ) -> list[LintProblem]:
        problems: list[LintProblem] = []
        next_token = token.next

        if (
            conf.forbid_in_block_mappings
            and token.kind is Kind.MAP_VALUE_IND
            and (token.is_block_end or (next_token is not None and next_token.is_key))
        ):
            problems.append(
                LintProblem(
                    token.start_mark.line, token.end_mark.column, "empty value in block mapping"
                )
            )

        if (
            conf.forbid_in_flow_mappings
            and token.kind is Kind.MAP_VALUE_IND
            and next_token is not None
            and next_token.kind in (Kind.FLOW_MAP_END, Kind.COMMA)
        ):
            problems.append(
                LintProblem(
                    token.start_mark.line, token.end_mark.column, "empty value in flow mapping"
                )
            )

        if (
            conf.forbid_in_block_sequences
            and token.kind is Kind.SEQ_ITEM_IND
            and (
                token.is_block_end
                or (
                    next_token is not None
                    and (next_token.is_key or next_token.kind is Kind.SEQ_ITEM_IND)
                )
            )
        ):
            problems.append(
                LintProblem(
                    token.start_mark.line, token.end_mark.column, "empty value in block sequence"
                )
            )
        return problems
