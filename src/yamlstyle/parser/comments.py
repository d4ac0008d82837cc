"""Comments found in the gaps between tokens."""

from __future__ import annotations

import re
from collections.abc import Iterator

from yamlstyle.parser.lines import line_generator
from yamlstyle.parser.tokens import Token, token_generator

_COMMENT_END_RE = re.compile(r"[\r\n\0]")


class Comment:
    """A ``#`` comment with its position and surrounding tokens."""

    def __init__(
        self,
        line_no: int,
        column_no: int,
        buffer: str,
        pointer: int,
        token_before: Token | None = None,
        token_after: Token | None = None,
        comment_before: Comment | None = None,
    ) -> None:
        self.line_no = line_no
        self.column_no = column_no
        self.buffer = buffer
        self.pointer = pointer
        self.token_before = token_before
        self.token_after = token_after
        self.comment_before = comment_before

    def __str__(self) -> str:
        match = _COMMENT_END_RE.search(self.buffer, self.pointer)
        end = match.start() if match else len(self.buffer)
        return self.buffer[self.pointer : end]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Comment):
            return NotImplemented
        return (self.line_no, self.column_no, str(self)) == (
            other.line_no,
            other.column_no,
            str(other),
        )

    def __hash__(self) -> int:
        return hash((self.line_no, self.column_no, str(self)))

    def __repr__(self) -> str:
        return f"Comment({self.line_no}:{self.column_no}, {str(self)!r})"

    def is_inline(self) -> bool:
        """True when something other than whitespace precedes the ``#``."""
        start = self.pointer - self.column_no + 1
        return self.buffer[start : self.pointer].strip() != ""


def comments_between_tokens(
    buffer: str, token1: Token | None = None, token2: Token | None = None
) -> Iterator[Comment]:
    """Yield the comments in the source between ``token1`` and ``token2``.

    Without ``token1`` the scan starts at the beginning of the buffer, without
    ``token2`` it runs to the end. Two tokens on the same line never have a
    comment between them.
    """
    if token2 is None:
        start = token1.end_mark.pointer if token1 is not None else 0
        gap = buffer[start:]
    elif (
        token1 is not None
        and token1.end_mark.line == token2.start_mark.line
        and token1.end_mark.pointer != 0
        and token2.start_mark.pointer != len(buffer)
    ):
        return
    else:
        start = token1.end_mark.pointer if token1 is not None else 0
        gap = buffer[start : token2.start_mark.pointer]

    line_no = token1.end_mark.line if token1 is not None else 1
    column_no = token1.end_mark.column if token1 is not None else 1

    comment_before: Comment | None = None
    for line in line_generator(gap):
        pos = line.content.find("#")
        if pos != -1:
            comment = Comment(
                line_no + line.line_no - 1,
                (column_no if line.line_no == 1 else 1) + pos,
                buffer,
                start + line.start + pos,
                token1,
                token2,
                comment_before,
            )
            yield comment
            comment_before = comment


def token_or_comment_generator(buffer: str) -> Iterator[Token | Comment]:
    """Tokens in document order with the comments between them interleaved."""
    prev: Token | None = None
    for curr in token_generator(buffer):
        yield from comments_between_tokens(buffer, prev, curr)
        yield curr
        prev = curr
    yield from comments_between_tokens(buffer, prev)
