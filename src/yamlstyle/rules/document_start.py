"""Rule ``document-start``: require or forbid the ``---`` marker."""

from __future__ import annotations

from yamlstyle.models.problem import LintProblem
from yamlstyle.parser.tokens import Kind, Token
from yamlstyle.rules.base import Rule, RuleOptions, RuleType
from yamlstyle.rules.registry import RuleRegistry


class DocumentStartOptions(RuleOptions):
    present: bool = True


@RuleRegistry.register
class DocumentStart(Rule):
    options_model = DocumentStartOptions

    @property
    def id(self) -> str:
        return "document-start"

    @property
    def type(self) -> RuleType:
        return RuleType.TOKEN

    def check(
        self, conf: DocumentStartOptions, token: Token, context: None
    ) -> list[LintProblem]:
        if conf.present:
            next_token = token.next
            prev = token.prev
            if (
                token.kind is Kind.DOCUMENT
                and (next_token is None or next_token.kind is not Kind.DOC_START)
                and (prev is None or prev.kind is not Kind.DIRECTIVE)
            ):
                return [LintProblem(token.start_mark.line, 1, 'missing document start "---"')]
        elif token.kind is Kind.DOC_START:
            return [
                LintProblem(
                    token.start_mark.line,
                    token.start_mark.column,
                    'found forbidden document start "---"',
                )
            ]
        return []
