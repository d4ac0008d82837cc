"""Rule ``anchors``: report undeclared aliases and duplicated or unused anchors.

Options:

* ``forbid-undeclared-aliases`` reports aliases with no anchor declared
  before them in the document (default ``true``).
* ``forbid-duplicated-anchors`` reports an anchor name declared twice in the
  same document (default ``false``).
* ``forbid-unused-anchors`` reports anchors no alias refers to (default
  ``false``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pydantic import Field

from yamlstyle.models.problem import LintProblem
from yamlstyle.parser.tokens import Kind, Token
from yamlstyle.rules.base import Rule, RuleOptions, RuleType
from yamlstyle.rules.registry import RuleRegistry

if TYPE_CHECKING:
    from yamlstyle.config import YamlStyleConfig

_DOCUMENT_BOUNDARIES = frozenset({Kind.DOCUMENT, Kind.DOC_START, Kind.DOC_END})


class AnchorsOptions(RuleOptions):
    forbid_undeclared_aliases: bool = Field(True, alias="forbid-undeclared-aliases")
    forbid_duplicated_anchors: bool = Field(False, alias="forbid-duplicated-anchors")
    forbid_unused_anchors: bool = Field(False, alias="forbid-unused-anchors")


@dataclass
class AnchorInfo:
    line: int
    column: int
    used: bool = False


@dataclass
class AnchorsContext:
    anchors: dict[str, AnchorInfo] = field(default_factory=dict)


@RuleRegistry.register
class Anchors(Rule):
    options_model = AnchorsOptions

    @property
    def id(self) -> str:
        return "anchors"

    @property
    def type(self) -> RuleType:
        return RuleType.TOKEN

    def new_context(
        self, options: AnchorsOptions, config: YamlStyleConfig | None = None
    ) -> AnchorsContext:
        return AnchorsContext()

    def check(
        self, conf: AnchorsOptions, token: Token, context: AnchorsContext
    ) -> list[LintProblem]:
        problems: list[LintProblem] = []
        if token.kind in _DOCUMENT_BOUNDARIES:
            context.anchors = {}

        name = token.source[1:] if token.kind in (Kind.ANCHOR, Kind.ALIAS) else ""

        if (
            conf.forbid_undeclared_aliases
            and token.kind is Kind.ALIAS
            and name not in context.anchors
        ):
            problems.append(
                LintProblem(
                    token.start_mark.line,
                    token.start_mark.column,
                    f'found undeclared alias "{name}"',
                )
            )

        if (
            conf.forbid_duplicated_anchors
            and token.kind is Kind.ANCHOR
            and name in context.anchors
        ):
            problems.append(
                LintProblem(
                    token.start_mark.line,
                    token.start_mark.column,
                    f'found duplicated anchor "{name}"',
                )
            )

        if token.kind is Kind.ANCHOR:
            context.anchors[name] = AnchorInfo(token.start_mark.line, token.start_mark.column)

        if conf.forbid_unused_anchors:
            if token.kind is Kind.ALIAS and name in context.anchors:
                context.anchors[name].used = True
            # unused anchors can only be told apart once the document is over
            next_token = token.next
            if next_token is None or next_token.kind in _DOCUMENT_BOUNDARIES:
                for anchor, info in context.anchors.items():
                    if not info.used:
                        problems.append(
                            LintProblem(info.line, info.column, f'found unused anchor "{anchor}"')
                        )

        return problems
