"""Token graph built from the ruamel.yaml scanner stream.

The scanner emits a flat stream bracketed by block-start / block-end markers.
This module folds it into a linked, depth-annotated token sequence in which
every token knows the container it belongs to (``parent``), its neighbours
(``prev`` / ``next``) and, for scalars, its quoting style and decoded value.
Structural markers without source text (stream boundaries, block ends,
implicit key markers) never become tokens.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum

from ruamel.yaml import YAML
from ruamel.yaml import tokens as yaml_tokens
from ruamel.yaml.reader import ReaderError
from ruamel.yaml.scanner import ScannerError

logger = logging.getLogger("yamlstyle.parser")


class Kind(StrEnum):
    DOCUMENT = "document"
    DIRECTIVE = "directive"
    DOC_START = "doc-start"
    DOC_END = "doc-end"
    BLOCK_MAP = "block-map"
    BLOCK_SEQ = "block-seq"
    FLOW_MAP_START = "flow-map-start"
    FLOW_MAP_END = "flow-map-end"
    FLOW_SEQ_START = "flow-seq-start"
    FLOW_SEQ_END = "flow-seq-end"
    EXPLICIT_KEY_IND = "explicit-key-ind"
    MAP_VALUE_IND = "map-value-ind"
    SEQ_ITEM_IND = "seq-item-ind"
    COMMA = "comma"
    ANCHOR = "anchor"
    TAG = "tag"
    ALIAS = "alias"
    SCALAR = "scalar"
    SINGLE_QUOTED_SCALAR = "single-quoted-scalar"
    DOUBLE_QUOTED_SCALAR = "double-quoted-scalar"
    BLOCK_SCALAR = "block-scalar"


class ScalarType(StrEnum):
    PLAIN = "PLAIN"
    QUOTE_SINGLE = "QUOTE_SINGLE"
    QUOTE_DOUBLE = "QUOTE_DOUBLE"
    BLOCK_FOLDED = "BLOCK_FOLDED"
    BLOCK_LITERAL = "BLOCK_LITERAL"


SCALAR_KINDS = frozenset(
    {Kind.SCALAR, Kind.SINGLE_QUOTED_SCALAR, Kind.DOUBLE_QUOTED_SCALAR, Kind.BLOCK_SCALAR}
)
FLOW_END_KINDS = frozenset({Kind.FLOW_MAP_END, Kind.FLOW_SEQ_END})
PROPERTY_KINDS = frozenset({Kind.ANCHOR, Kind.TAG})

# Kinds that open a node: the first of them after a key/value marker carries
# the is_key / is_value role.
_NODE_KINDS = SCALAR_KINDS | {
    Kind.BLOCK_MAP,
    Kind.BLOCK_SEQ,
    Kind.FLOW_MAP_START,
    Kind.FLOW_SEQ_START,
    Kind.ALIAS,
}

_SCALAR_STYLES: dict[str | None, tuple[Kind, ScalarType]] = {
    None: (Kind.SCALAR, ScalarType.PLAIN),
    "'": (Kind.SINGLE_QUOTED_SCALAR, ScalarType.QUOTE_SINGLE),
    '"': (Kind.DOUBLE_QUOTED_SCALAR, ScalarType.QUOTE_DOUBLE),
    "|": (Kind.BLOCK_SCALAR, ScalarType.BLOCK_LITERAL),
    ">": (Kind.BLOCK_SCALAR, ScalarType.BLOCK_FOLDED),
}

_SIMPLE_KINDS: dict[type, Kind] = {
    yaml_tokens.DirectiveToken: Kind.DIRECTIVE,
    yaml_tokens.DocumentStartToken: Kind.DOC_START,
    yaml_tokens.DocumentEndToken: Kind.DOC_END,
    yaml_tokens.BlockMappingStartToken: Kind.BLOCK_MAP,
    yaml_tokens.BlockSequenceStartToken: Kind.BLOCK_SEQ,
    yaml_tokens.FlowMappingStartToken: Kind.FLOW_MAP_START,
    yaml_tokens.FlowMappingEndToken: Kind.FLOW_MAP_END,
    yaml_tokens.FlowSequenceStartToken: Kind.FLOW_SEQ_START,
    yaml_tokens.FlowSequenceEndToken: Kind.FLOW_SEQ_END,
    yaml_tokens.ValueToken: Kind.MAP_VALUE_IND,
    yaml_tokens.BlockEntryToken: Kind.SEQ_ITEM_IND,
    yaml_tokens.FlowEntryToken: Kind.COMMA,
    yaml_tokens.AnchorToken: Kind.ANCHOR,
    yaml_tokens.TagToken: Kind.TAG,
    yaml_tokens.AliasToken: Kind.ALIAS,
}

IGNORED_TOKEN_TYPES: tuple[type, ...] = (
    yaml_tokens.StreamStartToken,
    yaml_tokens.StreamEndToken,
    yaml_tokens.CommentToken,
)

_CONTAINER_KINDS = frozenset(
    {Kind.BLOCK_MAP, Kind.BLOCK_SEQ, Kind.FLOW_MAP_START, Kind.FLOW_SEQ_START}
)
_MATCHING_OPENER = {Kind.FLOW_MAP_END: Kind.FLOW_MAP_START, Kind.FLOW_SEQ_END: Kind.FLOW_SEQ_START}
_FLOW_START_KINDS = frozenset({Kind.FLOW_MAP_START, Kind.FLOW_SEQ_START})

_TRAILING_WHITESPACE_RE = re.compile(r"[ \t]+(?=[\r\n]|\Z)")


@dataclass(frozen=True)
class Mark:
    """Source position: 1-based line and column, 0-based buffer offset."""

    line: int
    column: int
    pointer: int


@dataclass(frozen=True)
class Resolved:
    """Quoting style and decoded value of a scalar token."""

    type: ScalarType
    value: str


class _Unlinked:
    def __repr__(self) -> str:
        return "UNLINKED"


UNLINKED = _Unlinked()


class Token:
    """A node of the token graph.

    ``next`` is only readable once the following token has been generated;
    the generator guarantees that ``token.next.next`` is linked by the time
    ``token`` is handed out.
    """

    def __init__(
        self,
        kind: Kind,
        depth: int,
        buffer: str,
        start_mark: Mark,
        end_mark: Mark,
        parent: Token | None = None,
        *,
        is_key: bool = False,
        is_value: bool = False,
        resolve: Resolved | None = None,
    ) -> None:
        self.kind = kind
        self.depth = depth
        self.buffer = buffer
        self.start_mark = start_mark
        self.end_mark = end_mark
        self.parent = parent
        self.is_key = is_key
        self.is_value = is_value
        self.resolve = resolve
        self.prev: Token | None = None
        self._next: Token | None | _Unlinked = UNLINKED

    @property
    def next(self) -> Token | None:
        if isinstance(self._next, _Unlinked):
            raise RuntimeError(f"next token of {self!r} has not been generated yet")
        return self._next

    @next.setter
    def next(self, token: Token | None) -> None:
        self._next = token

    @property
    def is_linked(self) -> bool:
        return not isinstance(self._next, _Unlinked)

    @property
    def line_no(self) -> int:
        return self.start_mark.line

    @property
    def source(self) -> str:
        return self.buffer[self.start_mark.pointer : self.end_mark.pointer]

    @property
    def is_visible(self) -> bool:
        """Whether the token occupies a place on its line (documents do not)."""
        return self.kind is not Kind.DOCUMENT

    @property
    def indent(self) -> int:
        """Indentation level of the token, i.e. its 0-based column."""
        return self.start_mark.column - 1

    @property
    def end_line(self) -> int:
        """Line of the last character of the token.

        Block scalars swallow their trailing line breaks, so their end mark
        sits at the beginning of the line that follows the body.
        """
        if self.kind is not Kind.BLOCK_SCALAR:
            return self.end_mark.line
        line = self.end_mark.line
        pos = self.end_mark.pointer - 1
        while pos >= self.start_mark.pointer and self.buffer[pos] in " \t\r\n":
            char = self.buffer[pos]
            if char == "\n" or (char == "\r" and self.buffer[pos + 1 : pos + 2] != "\n"):
                line -= 1
            pos -= 1
        return line

    @property
    def is_block_end(self) -> bool:
        """Whether this is the last token of its block before a dedent or the end."""
        next_token = self.next
        if self.parent is None:
            return False
        if next_token is None:
            return True
        if self.end_line == next_token.start_mark.line:
            return False

        target: Token | None = next_token
        while target is not None and target.depth > self.depth:
            target = target.parent
        return target is None or self.parent is not target.parent

    def __repr__(self) -> str:
        return (
            f"Token({self.kind.value}, {self.start_mark.line}:{self.start_mark.column}, "
            f"depth={self.depth})"
        )


def _mark(mark: object) -> Mark:
    return Mark(
        line=mark.line + 1,  # type: ignore[attr-defined]
        column=mark.column + 1,  # type: ignore[attr-defined]
        pointer=mark.index,  # type: ignore[attr-defined]
    )


def scanner_text(buffer: str) -> str:
    """``buffer`` with tabs in trailing whitespace turned into spaces.

    Tabs are valid white space at the end of a line, but the block-context
    scanner only skips spaces there. Offsets are preserved.
    """
    if "\t" not in buffer:
        return buffer
    return _TRAILING_WHITESPACE_RE.sub(lambda match: " " * len(match.group()), buffer)


def _skippable_error(exc: ReaderError | ScannerError) -> int | None:
    """Offset of the single character an error is about, if it is one."""
    if isinstance(exc, ReaderError):
        return int(exc.position)
    if exc.problem is not None and "cannot start any token" in exc.problem:
        if exc.problem_mark is not None:
            return int(exc.problem_mark.index)
    return None


def _scan(buffer: str) -> Iterator[yaml_tokens.Token]:
    """Raw scanner tokens.

    A character that cannot start any token (or that is not printable) is
    masked out and the scan starts over, skipping the tokens already yielded.
    Any other scanner error ends the stream.
    """
    text = scanner_text(buffer)
    yielded = 0
    last_skipped = -1
    while True:
        yaml = YAML(typ="safe", pure=True)
        try:
            for position, rtoken in enumerate(yaml.scan(text)):
                if position >= yielded:
                    yielded += 1
                    yield rtoken
            return
        except (ReaderError, ScannerError) as exc:
            offset = _skippable_error(exc)
            if offset is None or offset <= last_skipped or offset >= len(text):
                logger.debug("token stream truncated by scanner error: %s", exc)
                return
            logger.debug("skipping %r at offset %d: %s", text[offset], offset, exc)
            filler = " " if text[offset] == "\t" else "_"
            text = text[:offset] + filler + text[offset + 1 :]
            last_skipped = offset


def _is_glued_flow_key(buffer: str, rtoken: yaml_tokens.Token, container: Token) -> bool:
    if not isinstance(rtoken, yaml_tokens.ScalarToken) or rtoken.style is not None:
        return False
    if container.kind not in _FLOW_START_KINDS or not rtoken.value.endswith(":"):
        return False
    end = rtoken.end_mark.index
    return buffer[end - 1 : end] == ":" and buffer[end : end + 1] in (",", "]", "}")


def _flatten(buffer: str) -> Iterator[Token]:
    """Fold the scanner stream into parented tokens (links not set yet).

    ``stack[0]`` is the current document token, the rest are open containers.
    An indentless block sequence (dashes directly inside a block mapping) has
    no start marker in the scanner stream, so a zero-width ``block-seq`` is
    synthesized for it and closed with the next key, value or block end of
    the enclosing mapping.
    """
    stack: list[Token] = []
    indentless: set[int] = set()
    pending_key = False
    pending_value = False

    def close_indentless() -> None:
        if len(stack) > 1 and id(stack[-1]) in indentless:
            indentless.discard(id(stack.pop()))

    def make(
        kind: Kind, rtoken: yaml_tokens.Token, parent: Token | None, **kwargs: object
    ) -> Token:
        depth = 0 if parent is None else parent.depth + 1
        return Token(
            kind,
            depth,
            buffer,
            _mark(rtoken.start_mark),
            _mark(rtoken.end_mark),
            parent,
            **kwargs,  # type: ignore[arg-type]
        )

    for rtoken in _scan(buffer):
        if isinstance(rtoken, IGNORED_TOKEN_TYPES):
            continue

        if isinstance(rtoken, yaml_tokens.BlockEndToken):
            close_indentless()
            if len(stack) > 1:
                indentless.discard(id(stack.pop()))
            pending_key = pending_value = False
            continue

        if isinstance(rtoken, yaml_tokens.DirectiveToken):
            stack = []
            yield make(Kind.DIRECTIVE, rtoken, None)
            continue

        if isinstance(rtoken, yaml_tokens.DocumentStartToken) or not stack:
            start = _mark(rtoken.start_mark)
            document = Token(Kind.DOCUMENT, 0, buffer, start, start)
            stack = [document]
            indentless.clear()
            pending_key = pending_value = False
            yield document

        if isinstance(rtoken, yaml_tokens.KeyToken):
            close_indentless()
            pending_key, pending_value = True, False
            if rtoken.start_mark.index == rtoken.end_mark.index:
                # implicit key: no source text, the key node itself is flagged
                continue
            yield make(Kind.EXPLICIT_KEY_IND, rtoken, stack[-1])
            continue

        if isinstance(rtoken, yaml_tokens.ScalarToken):
            kind, scalar_type = _SCALAR_STYLES[rtoken.style]
            resolve: Resolved | None = Resolved(scalar_type, rtoken.value)
        else:
            kind = _SIMPLE_KINDS[type(rtoken)]
            resolve = None

        if _is_glued_flow_key(buffer, rtoken, stack[-1]):
            # {a:} is scanned as the plain scalar "a:"
            parent = stack[-1]
            start, end = _mark(rtoken.start_mark), _mark(rtoken.end_mark)
            colon = Mark(end.line, end.column - 1, end.pointer - 1)
            yield Token(
                Kind.SCALAR,
                parent.depth + 1,
                buffer,
                start,
                colon,
                parent,
                is_key=True,
                resolve=Resolved(ScalarType.PLAIN, rtoken.value[:-1]),
            )
            yield Token(Kind.MAP_VALUE_IND, parent.depth + 1, buffer, colon, end, parent)
            pending_key, pending_value = False, True
            continue

        if kind is Kind.MAP_VALUE_IND:
            close_indentless()
        elif kind is Kind.SEQ_ITEM_IND and stack[-1].kind is Kind.BLOCK_MAP:
            start = _mark(rtoken.start_mark)
            sequence = Token(
                Kind.BLOCK_SEQ,
                stack[-1].depth + 1,
                buffer,
                start,
                start,
                stack[-1],
                is_key=pending_key,
                is_value=pending_value,
            )
            pending_key = pending_value = False
            stack.append(sequence)
            indentless.add(id(sequence))
            yield sequence

        parent = stack[-1]
        if kind in FLOW_END_KINDS and len(stack) > 1 and parent.kind is _MATCHING_OPENER[kind]:
            stack.pop()

        is_key = is_value = False
        if kind in _NODE_KINDS:
            is_key, is_value = pending_key, pending_value
            pending_key = pending_value = False
        elif kind not in PROPERTY_KINDS:
            pending_key = pending_value = False

        token = make(kind, rtoken, parent, is_key=is_key, is_value=is_value, resolve=resolve)
        if kind is Kind.MAP_VALUE_IND:
            pending_value = True
        elif kind is Kind.DOC_END:
            stack = []
        elif kind in _CONTAINER_KINDS:
            stack.append(token)
        yield token


def token_generator(buffer: str) -> Iterator[Token]:
    """Yield linked tokens in document order with two tokens of lookahead."""
    tokens = _flatten(buffer)
    curr = next(tokens, None)
    following = next(tokens, None) if curr is not None else None
    while curr is not None and following is not None:
        curr.next = following
        following.prev = curr
        after = next(tokens, None)
        following.next = after
        if after is not None:
            after.prev = following
        yield curr
        curr, following = following, after
    if curr is not None:
        if not curr.is_linked:
            curr.next = None
        yield curr
