"""YAML source parsing: lines, token graph, comments and the merged stream."""

from yamlstyle.parser.comments import Comment, comments_between_tokens, token_or_comment_generator
from yamlstyle.parser.lines import Line, line_generator
from yamlstyle.parser.stream import token_or_comment_or_line_generator
from yamlstyle.parser.tokens import (
    UNLINKED,
    Kind,
    Mark,
    Resolved,
    ScalarType,
    Token,
    scanner_text,
    token_generator,
)

__all__ = [
    "Comment",
    "Kind",
    "Line",
    "Mark",
    "Resolved",
    "ScalarType",
    "Token",
    "UNLINKED",
    "comments_between_tokens",
    "line_generator",
    "scanner_text",
    "token_generator",
    "token_or_comment_generator",
    "token_or_comment_or_line_generator",
]
