"""Rule ``comments-indentation``: block comments are indented like content."""

from __future__ import annotations

from yamlstyle.models.problem import LintProblem
from yamlstyle.parser.comments import Comment
from yamlstyle.rules.base import Rule, RuleType
from yamlstyle.rules.common import get_line_indent
from yamlstyle.rules.registry import RuleRegistry


@RuleRegistry.register
class CommentsIndentation(Rule):
    @property
    def id(self) -> str:
        return "comments-indentation"

    @property
    def type(self) -> RuleType:
        return RuleType.COMMENT

    def check(self, conf: object, comment: Comment, context: None) -> list[LintProblem]:
        if comment.is_inline():
            return []

        next_line_indent = (
            comment.token_after.start_mark.column - 1 if comment.token_after is not None else 0
        )
        if comment.token_before is None or comment.token_before.end_mark.pointer == 0:
            prev_line_indent = 0
        else:
            prev_line_indent = get_line_indent(
                comment.buffer, comment.pointer - comment.column_no - 1
            )

        # list:
        #     # comment
        #     - 1
        # only the next line indent is valid here
        prev_line_indent = max(prev_line_indent, next_line_indent)

        # once a block comment went back to the lower indent, the following
        # ones must stay there
        if comment.comment_before is not None and not comment.comment_before.is_inline():
            prev_line_indent = comment.comment_before.column_no - 1

        column = comment.column_no - 1
        if column != prev_line_indent and column != next_line_indent:
            return [
                LintProblem(
                    comment.line_no, comment.column_no, "comment not indented like content"
                )
            ]
        return []
