"""Rule registry: rules register themselves at import time."""

from __future__ import annotations

from yamlstyle.rules.base import Rule


class UnsupportedRuleError(Exception):
    """Raised when a requested rule is not registered."""

    def __init__(self, rule_id: str, available: list[str]) -> None:
        self.rule_id = rule_id
        self.available = available
        super().__init__(f'no such rule: "{rule_id}"')


class RuleRegistry:
    """Registry for lint rules, keyed by rule id."""

    _rules: dict[str, type[Rule]] = {}

    @classmethod
    def register(cls, rule_class: type[Rule]) -> type[Rule]:
        """Register a rule class. Can be used as a decorator."""
        instance = rule_class()
        cls._rules[instance.id] = rule_class
        return rule_class

    @classmethod
    def get(cls, rule_id: str) -> Rule:
        """Get an instance of the rule with the given id."""
        if rule_id not in cls._rules:
            raise UnsupportedRuleError(rule_id, available=cls.available())
        return cls._rules[rule_id]()

    @classmethod
    def available(cls) -> list[str]:
        """List registered rule ids."""
        return sorted(cls._rules.keys())

    @classmethod
    def reset(cls) -> None:
        """Clear all registered rules (for testing)."""
        cls._rules.clear()
