"""Single ordered stream of tokens, comments and lines."""

from __future__ import annotations

from collections.abc import Iterator

from yamlstyle.parser.comments import Comment, token_or_comment_generator
from yamlstyle.parser.lines import Line, line_generator
from yamlstyle.parser.tokens import Token


def token_or_comment_or_line_generator(buffer: str) -> Iterator[Token | Comment | Line]:
    """Merge tokens/comments with physical lines, ordered by line number.

    On a tie the token or comment comes first, so a line is only emitted once
    every token and comment starting on it has been seen.
    """
    tok_or_com_gen = token_or_comment_generator(buffer)
    line_gen = line_generator(buffer)

    tok_or_com = next(tok_or_com_gen, None)
    line = next(line_gen, None)

    while tok_or_com is not None or line is not None:
        if tok_or_com is None or (line is not None and tok_or_com.line_no > line.line_no):
            assert line is not None
            yield line
            line = next(line_gen, None)
        else:
            yield tok_or_com
            tok_or_com = next(tok_or_com_gen, None)
