"""Lint problem model shared by the rules, the linter and the CLI."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class Level(StrEnum):
    WARNING = "warning"
    ERROR = "error"


@dataclass(eq=False)
class LintProblem:
    """A problem found by a rule (or by the parser, for syntax errors).

    ``line`` and ``column`` start at 1. Two problems are equal when they sit
    at the same position and come from the same rule; the description and
    level are ignored so tests can assert positions without message text.
    """

    line: int
    column: int
    desc: str = "<no description>"
    rule: str | None = None
    level: Level = Level.ERROR

    @property
    def message(self) -> str:
        if self.rule is not None:
            return f"{self.desc} ({self.rule})"
        return self.desc

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LintProblem):
            return NotImplemented
        return (self.line, self.column, self.rule) == (other.line, other.column, other.rule)

    def __lt__(self, other: LintProblem) -> bool:
        return (self.line, self.column) < (other.line, other.column)

    def __hash__(self) -> int:
        return hash((self.line, self.column, self.rule))

    def __repr__(self) -> str:
        return f"{self.line}:{self.column}: {self.message}"
