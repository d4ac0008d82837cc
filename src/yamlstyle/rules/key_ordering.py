"""Rule ``key-ordering``: require mapping keys in alphabetical order.

Keys compare by code point unless the configuration sets a ``locale``, in
which case they are collated with :func:`locale.strcoll` (the CLI installs
that locale before linting). Keys matching one of ``ignored-keys`` are
skipped.
"""

from __future__ import annotations

import locale
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pydantic import Field

from yamlstyle.models.problem import LintProblem
from yamlstyle.parser.tokens import Token
from yamlstyle.rules.base import Rule, RuleOptions, RuleType
from yamlstyle.rules.common import compile_patterns
from yamlstyle.rules.key_duplicates import KeysContext
from yamlstyle.rules.registry import RuleRegistry

if TYPE_CHECKING:
    from yamlstyle.config import YamlStyleConfig


class KeyOrderingOptions(RuleOptions):
    ignored_keys: list[str] = Field(default_factory=list, alias="ignored-keys")


@dataclass
class KeyOrderingContext(KeysContext):
    ignored_keys: list[re.Pattern[str]] = field(default_factory=list)
    use_locale: bool = False


@RuleRegistry.register
class KeyOrdering(Rule):
    options_model = KeyOrderingOptions

    @property
    def id(self) -> str:
        return "key-ordering"

    @property
    def type(self) -> RuleType:
        return RuleType.TOKEN

    def validate(self, options: KeyOrderingOptions) -> str | None:
        for pattern in options.ignored_keys:
            try:
                re.compile(pattern)
            except re.error as exc:
                return f'invalid regex "{pattern}" in ignored-keys: {exc}'
        return None

    def new_context(
        self, options: KeyOrderingOptions, config: YamlStyleConfig | None = None
    ) -> KeyOrderingContext:
        return KeyOrderingContext(
            ignored_keys=compile_patterns(options.ignored_keys),
            use_locale=config is not None and config.locale is not None,
        )

    def check(
        self, conf: KeyOrderingOptions, token: Token, context: KeyOrderingContext
    ) -> list[LintProblem]:
        keys = context.mapping_keys(token)
        if keys is None:
            return []

        value = token.resolve.value  # type: ignore[union-attr]
        if any(pattern.search(value) for pattern in context.ignored_keys):
            return []

        if keys and keys[-1] != value and _before(value, keys[-1], context.use_locale):
            return [
                LintProblem(
                    token.start_mark.line,
                    token.start_mark.column,
                    f'wrong ordering of key "{value}" in mapping',
                )
            ]
        keys.append(value)
        return []


def _before(value: str, other: str, use_locale: bool) -> bool:
    if use_locale:
        return locale.strcoll(value, other) < 0
    return value < other
