"""Rule ``document-end``: require or forbid the ``...`` marker.

With ``present: true`` every document must be closed by ``...``; a document
left open is reported where the next one starts, or on the last line of the
stream.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from yamlstyle.models.problem import LintProblem
from yamlstyle.parser.lines import LINE_BREAK_RE
from yamlstyle.parser.tokens import Kind, Token
from yamlstyle.rules.base import Rule, RuleOptions, RuleType
from yamlstyle.rules.registry import RuleRegistry

if TYPE_CHECKING:
    from yamlstyle.config import YamlStyleConfig


class DocumentEndOptions(RuleOptions):
    present: bool = True


@dataclass
class DocumentEndContext:
    in_document: bool = False


def _stream_end_line(buffer: str) -> int:
    """Line of the end of the stream: the last terminated line, if any."""
    breaks = len(LINE_BREAK_RE.findall(buffer))
    if buffer.endswith(("\n", "\r")):
        return breaks
    return breaks + 1


@RuleRegistry.register
class DocumentEnd(Rule):
    options_model = DocumentEndOptions

    @property
    def id(self) -> str:
        return "document-end"

    @property
    def type(self) -> RuleType:
        return RuleType.TOKEN

    def new_context(
        self, options: DocumentEndOptions, config: YamlStyleConfig | None = None
    ) -> DocumentEndContext:
        return DocumentEndContext()

    def check(
        self, conf: DocumentEndOptions, token: Token, context: DocumentEndContext
    ) -> list[LintProblem]:
        if not conf.present:
            if token.kind is Kind.DOC_END:
                return [
                    LintProblem(
                        token.start_mark.line,
                        token.start_mark.column,
                        'found forbidden document end "..."',
                    )
                ]
            return []

        problems: list[LintProblem] = []
        if token.kind is Kind.DOC_END:
            context.in_document = False
        elif token.kind is Kind.DOCUMENT:
            if context.in_document:
                problems.append(
                    LintProblem(token.start_mark.line, 1, 'missing document end "..."')
                )
            context.in_document = True

        if token.next is None and context.in_document:
            problems.append(
                LintProblem(_stream_end_line(token.buffer), 1, 'missing document end "..."')
            )
        return problems
