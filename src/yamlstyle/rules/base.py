"""Abstract base rule and the option model every rule builds on."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from yamlstyle.models.problem import LintProblem

if TYPE_CHECKING:
    from yamlstyle.config import YamlStyleConfig


class RuleType(StrEnum):
    """Which element of the merged stream a rule is fed."""

    LINE = "line"
    TOKEN = "token"
    COMMENT = "comment"


class RuleOptions(BaseModel):
    """Options of a rule, as written in the configuration.

    Field names use underscores; the configuration spells them with hyphens
    (``max-spaces-before``), so every field carries a hyphenated alias.
    """

    model_config = {"populate_by_name": True, "extra": "forbid", "frozen": True, "strict": True}


class Rule(ABC):
    """Abstract base for all rules.

    Rules are stateless: anything that must survive from one element to the
    next lives in the context object returned by ``new_context``, which the
    linter creates once per run and passes back to every ``check`` call.
    """

    options_model: type[RuleOptions] = RuleOptions

    @property
    @abstractmethod
    def id(self) -> str: ...

    @property
    @abstractmethod
    def type(self) -> RuleType: ...

    def validate(self, options: RuleOptions) -> str | None:
        """Cross-field validation; return an error message or None."""
        return None

    def new_context(self, options: RuleOptions, config: YamlStyleConfig | None = None) -> Any:
        return None

    @abstractmethod
    def check(self, conf: Any, elem: Any, context: Any) -> list[LintProblem]:
        """Return the problems found on ``elem``."""
