"""Rule ``comments``: spacing of comments.

Options:

* ``require-starting-space`` requires a space after the ``#`` (``#!`` on the
  very first line is tolerated with ``ignore-shebangs``).
* ``min-spaces-from-content`` is the minimal gap between an inline comment
  and the content before it (``-1`` disables the check).
"""

from __future__ import annotations

from pydantic import Field

from yamlstyle.models.problem import LintProblem
from yamlstyle.parser.comments import Comment
from yamlstyle.rules.base import Rule, RuleOptions, RuleType
from yamlstyle.rules.registry import RuleRegistry


class CommentsOptions(RuleOptions):
    require_starting_space: bool = Field(True, alias="require-starting-space")
    ignore_shebangs: bool = Field(True, alias="ignore-shebangs")
    min_spaces_from_content: int = Field(2, alias="min-spaces-from-content")


@RuleRegistry.register
class Comments(Rule):
    options_model = CommentsOptions

    @property
    def id(self) -> str:
        return "comments"

    @property
    def type(self) -> RuleType:
        return RuleType.COMMENT

    def check(
        self, conf: CommentsOptions, comment: Comment, context: None
    ) -> list[LintProblem]:
        problems: list[LintProblem] = []
        if (
            conf.min_spaces_from_content != -1
            and comment.is_inline()
            and comment.token_before is not None
            and comment.pointer - comment.token_before.end_mark.pointer
            < conf.min_spaces_from_content
        ):
            problems.append(
                LintProblem(
                    comment.line_no,
                    comment.column_no,
                    "too few spaces before comment: "
                    f"expected {conf.min_spaces_from_content}",
                )
            )

        if conf.require_starting_space:
            buffer = comment.buffer
            text_start = comment.pointer + 1
            while text_start < len(buffer) and buffer[text_start] == "#":
                text_start += 1
            if text_start < len(buffer):
                is_shebang = (
                    conf.ignore_shebangs
                    and comment.line_no == 1
                    and comment.column_no == 1
                    and buffer[text_start] == "!"
                )
                if not is_shebang and buffer[text_start] not in (" ", "\n", "\r", "\x00"):
                    problems.append(
                        LintProblem(
                            comment.line_no,
                            comment.column_no + text_start - comment.pointer,
                            "missing starting space in comment",
                        )
                    )
        return problems
