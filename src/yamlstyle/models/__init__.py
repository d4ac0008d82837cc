"""Domain models for yamlstyle."""

from yamlstyle.models.problem import Level, LintProblem

__all__ = [
    "Level",
    "LintProblem",
]
