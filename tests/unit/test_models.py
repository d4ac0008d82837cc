"""Tests for the lint problem model."""

from __future__ import annotations

from yamlstyle.models import Level, LintProblem


class TestLintProblem:
    def test_defaults(self) -> None:
        problem = LintProblem(3, 7)
        assert problem.desc == "<no description>"
        assert problem.rule is None
        assert problem.level is Level.ERROR

    def test_message_with_rule(self) -> None:
        problem = LintProblem(1, 2, "too many spaces", "colons")
        assert problem.message == "too many spaces (colons)"

    def test_message_without_rule(self) -> None:
        problem = LintProblem(1, 2, "syntax error: bad (syntax)")
        assert problem.message == "syntax error: bad (syntax)"

    def test_repr(self) -> None:
        problem = LintProblem(4, 9, "trailing spaces", "trailing-spaces")
        assert repr(problem) == "4:9: trailing spaces (trailing-spaces)"

    def test_equality_ignores_description_and_level(self) -> None:
        first = LintProblem(1, 1, "first", "colons", Level.WARNING)
        second = LintProblem(1, 1, "second", "colons", Level.ERROR)
        assert first == second
        assert hash(first) == hash(second)

    def test_inequality(self) -> None:
        assert LintProblem(1, 1, rule="colons") != LintProblem(1, 1, rule="commas")
        assert LintProblem(1, 1, rule="colons") != LintProblem(1, 2, rule="colons")
        assert LintProblem(1, 1) != (1, 1)

    def test_set_deduplicates(self) -> None:
        problems = {LintProblem(2, 3, "a", "commas"), LintProblem(2, 3, "b", "commas")}
        assert len(problems) == 1

    def test_ordering_by_position(self) -> None:
        problems = [LintProblem(2, 1), LintProblem(1, 5), LintProblem(1, 2)]
        assert [(p.line, p.column) for p in sorted(problems)] == [(1, 2), (1, 5), (2, 1)]


class TestLevel:
    def test_values(self) -> None:
        assert Level.WARNING.value == "warning"
        assert Level("error") is Level.ERROR
