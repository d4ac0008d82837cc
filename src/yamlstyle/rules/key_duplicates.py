"""Rule ``key-duplicates``: forbid the same key twice in one mapping.

Keys are compared on their decoded value, so ``key`` and ``"key"`` collide.
The merge key ``<<`` may repeat unless ``forbid-duplicated-merge-keys`` is
set.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pydantic import Field

from yamlstyle.models.problem import LintProblem
from yamlstyle.parser.tokens import Kind, Token
from yamlstyle.rules.base import Rule, RuleOptions, RuleType
from yamlstyle.rules.registry import RuleRegistry

if TYPE_CHECKING:
    from yamlstyle.config import YamlStyleConfig

MAPPING_KINDS = frozenset({Kind.BLOCK_MAP, Kind.FLOW_MAP_START})


class KeyDuplicatesOptions(RuleOptions):
    forbid_duplicated_merge_keys: bool = Field(False, alias="forbid-duplicated-merge-keys")


@dataclass
class KeysContext:
    """Keys seen so far, per mapping token."""

    keys: dict[Token, list[str]] = field(default_factory=dict)

    def mapping_keys(self, token: Token) -> list[str] | None:
        """Keys of the mapping ``token`` is a key of, or None outside mappings.

        Keys directly inside a flow sequence (``[a: 1]``) belong to implicit
        single-pair mappings and are never compared.
        """
        if token.kind is Kind.DOCUMENT:
            self.keys = {}
        if not token.is_key or token.resolve is None:
            return None
        if token.parent is None or token.parent.kind not in MAPPING_KINDS:
            return None
        return self.keys.setdefault(token.parent, [])


@RuleRegistry.register
class KeyDuplicates(Rule):
    options_model = KeyDuplicatesOptions

    @property
    def id(self) -> str:
        return "key-duplicates"

    @property
    def type(self) -> RuleType:
        return RuleType.TOKEN

    def new_context(
        self, options: KeyDuplicatesOptions, config: YamlStyleConfig | None = None
    ) -> KeysContext:
        return KeysContext()

    def check(
        self, conf: KeyDuplicatesOptions, token: Token, context: KeysContext
    ) -> list[LintProblem]:
        keys = context.mapping_keys(token)
        if keys is None:
            return []

        value = token.resolve.value  # type: ignore[union-attr]
        # "<<" is the merge key, see http://yaml.org/type/merge.html
        if value in keys and (value != "<<" or conf.forbid_duplicated_merge_keys):
            return [
                LintProblem(
                    token.start_mark.line,
                    token.start_mark.column,
                    f'duplication of key "{value}" in mapping',
                )
            ]
        keys.append(value)
        return []
