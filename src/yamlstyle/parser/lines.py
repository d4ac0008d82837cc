"""Physical line records of a YAML buffer."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

# Same break set the ruamel.yaml reader counts, so line numbers agree with marks.
LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class Line:
    """One physical line: ``buffer[start:end]``, terminator excluded."""

    line_no: int
    buffer: str
    start: int
    end: int

    @property
    def content(self) -> str:
        return self.buffer[self.start : self.end]


def line_generator(buffer: str) -> Iterator[Line]:
    """Yield every line of ``buffer``, including the (possibly empty) last one."""
    line_no = 1
    cur = 0
    for match in LINE_BREAK_RE.finditer(buffer):
        yield Line(line_no, buffer, cur, match.start())
        cur = match.end()
        line_no += 1
    yield Line(line_no, buffer, cur, len(buffer))
