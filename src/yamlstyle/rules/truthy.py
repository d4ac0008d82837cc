"""Rule ``truthy``: forbid non-explicit boolean spellings (``yes``, ``On``...).

Documents declared ``%YAML 1.2`` only know ``true`` and ``false`` in their
three casings; every other document follows YAML 1.1, which also treats
yes/no/on/off as booleans.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from pydantic import Field

from yamlstyle.models.problem import LintProblem
from yamlstyle.parser.tokens import Kind, ScalarType, Token
from yamlstyle.rules.base import Rule, RuleOptions, RuleType
from yamlstyle.rules.registry import RuleRegistry

if TYPE_CHECKING:
    from yamlstyle.config import YamlStyleConfig

TRUTHY_1_2 = ("TRUE", "True", "true", "FALSE", "False", "false")
TRUTHY_1_1 = TRUTHY_1_2 + (
    "YES", "Yes", "yes", "NO", "No", "no",
    "ON", "On", "on", "OFF", "Off", "off",
)  # fmt: skip

TruthyValue = Literal[
    "TRUE", "True", "true", "FALSE", "False", "false",
    "YES", "Yes", "yes", "NO", "No", "no",
    "ON", "On", "on", "OFF", "Off", "off",
]  # fmt: skip


class TruthyOptions(RuleOptions):
    allowed_values: list[TruthyValue] = Field(["true", "false"], alias="allowed-values")
    check_keys: bool = Field(True, alias="check-keys")


@dataclass
class TruthyContext:
    yaml_spec_version: str | None = None
    bad_truthy_values: set[str] | None = None


@RuleRegistry.register
class Truthy(Rule):
    options_model = TruthyOptions

    @property
    def id(self) -> str:
        return "truthy"

    @property
    def type(self) -> RuleType:
        return RuleType.TOKEN

    def new_context(
        self, options: TruthyOptions, config: YamlStyleConfig | None = None
    ) -> TruthyContext:
        return TruthyContext()

    def check(
        self, conf: TruthyOptions, token: Token, context: TruthyContext
    ) -> list[LintProblem]:
        if token.kind is Kind.DIRECTIVE and token.source.startswith("%YAML"):
            parts = token.source.split()
            context.yaml_spec_version = parts[1] if len(parts) > 1 else None
        elif token.kind is Kind.DOC_END:
            context.yaml_spec_version = None
            context.bad_truthy_values = None

        if token.prev is not None and token.prev.kind is Kind.TAG:
            return []
        if not conf.check_keys and token.is_key:
            return []
        if token.resolve is None or token.resolve.type is not ScalarType.PLAIN:
            return []

        if context.bad_truthy_values is None:
            candidates = TRUTHY_1_2 if context.yaml_spec_version == "1.2" else TRUTHY_1_1
            context.bad_truthy_values = set(candidates) - set(conf.allowed_values)

        if token.resolve.value in context.bad_truthy_values:
            allowed = ", ".join(sorted(conf.allowed_values))
            return [
                LintProblem(
                    token.start_mark.line,
                    token.start_mark.column,
                    f"truthy value should be one of [{allowed}]",
                )
            ]
        return []
