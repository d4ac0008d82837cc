"""Lint configuration: rule selection, rule options and ignored paths.

A configuration is a YAML mapping::

    extends: default            # built-in preset or path to another config
    ignore: |                   # gitignore-style patterns of files to skip
      /generated/
    yaml-files: ['*.yaml', '*.yml']
    locale: en_US.UTF-8
    rules:
      line-length: {max: 120, level: warning}
      truthy: disable

Rule entries are merged over the extended configuration; every rule entry is
then validated against the rule's option model.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pathspec import GitIgnoreSpec, PathSpec
from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from yamlstyle import decoder
from yamlstyle.models.problem import Level
from yamlstyle.rules import Rule, RuleOptions, RuleRegistry, UnsupportedRuleError

logger = logging.getLogger("yamlstyle.config")

CONF_DIR = Path(__file__).parent / "conf"

DEFAULT_YAML_FILES = ["*.yaml", "*.yml", ".yamllint"]

_RESERVED_RULE_KEYS = frozenset({"level", "ignore", "ignore-from-file"})


class YamlStyleConfigError(Exception):
    """Raised when a configuration cannot be loaded or is invalid."""


@dataclass
class RuleConfig:
    """A rule enabled by the configuration, with its validated options."""

    rule: Rule
    level: Level
    options: RuleOptions
    ignore: PathSpec | None = None

    @property
    def id(self) -> str:
        return self.rule.id

    def is_file_ignored(self, filepath: str | None) -> bool:
        return filepath is not None and self.ignore is not None and self.ignore.match_file(filepath)


def _load_yaml(content: str) -> Any:
    yaml = YAML(typ="safe", pure=True)
    return yaml.load(content)


def _patterns(value: Any, message: str) -> list[str]:
    if isinstance(value, str):
        return value.strip().splitlines()
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return value
    raise YamlStyleConfigError(message)


def _parse_ignore(data: dict[str, Any]) -> PathSpec | None:
    if "ignore" in data and "ignore-from-file" in data:
        raise YamlStyleConfigError(
            "invalid config: ignore and ignore-from-file keys cannot be used together"
        )
    if "ignore-from-file" in data:
        files = _patterns(
            data["ignore-from-file"],
            "invalid config: ignore-from-file should contain filename(s), "
            "either as a list or string",
        )
        try:
            lines = list(decoder.lines_in_files(files))
        except OSError as exc:
            raise YamlStyleConfigError(f"invalid config: {exc}") from exc
        return GitIgnoreSpec.from_lines(lines)
    if "ignore" in data:
        patterns = _patterns(data["ignore"], "invalid config: ignore should contain file patterns")
        return GitIgnoreSpec.from_lines(patterns)
    return None


def _parse_level(value: Any) -> Level:
    if value is None:
        return Level.ERROR
    try:
        return Level(value)
    except ValueError:
        raise YamlStyleConfigError('invalid config: level should be "error" or "warning"') from None


def extended_config_file(name: str) -> str:
    """Path of the configuration ``extends: <name>`` refers to."""
    # a preset shipped with yamlstyle...
    if "/" not in name and os.sep not in name:
        preset = CONF_DIR / f"{name}.yaml"
        if preset.is_file():
            return str(preset)
    # ...or a configuration file on disk
    return name


def validate_rule_conf(rule: Rule, conf: Any) -> RuleConfig | None:
    """Validate one ``rules:`` entry; ``None`` means the rule is disabled."""
    if conf is False:
        return None
    if not isinstance(conf, dict):
        raise YamlStyleConfigError(
            f'invalid config: rule "{rule.id}": should be either "enable", "disable" or a mapping'
        )

    level = _parse_level(conf.get("level"))
    ignore = _parse_ignore(conf)
    raw_options = {key: value for key, value in conf.items() if key not in _RESERVED_RULE_KEYS}

    try:
        options = rule.options_model.model_validate(raw_options)
    except ValidationError as exc:
        error = exc.errors()[0]
        option = error["loc"][0] if error["loc"] else ""
        if error["type"] == "extra_forbidden":
            raise YamlStyleConfigError(
                f'invalid config: unknown option "{option}" for rule "{rule.id}"'
            ) from None
        raise YamlStyleConfigError(
            f'invalid config: option "{option}" of "{rule.id}" {error["msg"].lower()}'
        ) from None

    message = rule.validate(options)
    if message:
        raise YamlStyleConfigError(f"invalid config: {rule.id}: {message}")

    return RuleConfig(rule=rule, level=level, options=options, ignore=ignore)


class YamlStyleConfig:
    """A parsed and validated lint configuration.

    Built either from YAML text (``content``) or from a file (``file``).
    ``rules`` holds the merged, not yet validated, rule entries (``False``
    for disabled rules); ``rule_configs`` holds their validated form.
    """

    def __init__(self, content: str | None = None, file: str | Path | None = None) -> None:
        if (content is None) == (file is None):
            raise ValueError("exactly one of content or file is required")

        self.ignore: PathSpec | None = None
        self.yaml_files = GitIgnoreSpec.from_lines(DEFAULT_YAML_FILES)
        self.locale: str | None = None
        self.rules: dict[str, Any] = {}
        self.rule_configs: dict[str, RuleConfig | None] = {}

        if file is not None:
            try:
                content = decoder.auto_decode(Path(file).read_bytes())
            except OSError as exc:
                raise YamlStyleConfigError(f'failed to load config file "{file}": {exc}') from exc

        self._parse(content)  # type: ignore[arg-type]
        self._validate()

    def is_file_ignored(self, filepath: str) -> bool:
        return self.ignore is not None and self.ignore.match_file(filepath)

    def is_yaml_file(self, filepath: str) -> bool:
        return self.yaml_files.match_file(os.path.basename(filepath))

    def enabled_rules(self, filepath: str | None = None) -> list[RuleConfig]:
        """Rules that apply to ``filepath`` (all enabled rules when None)."""
        return [
            rule_conf
            for rule_conf in self.rule_configs.values()
            if rule_conf is not None and not rule_conf.is_file_ignored(filepath)
        ]

    def extend(self, base: YamlStyleConfig) -> None:
        """Merge this configuration's rule entries over ``base``'s."""
        rules = dict(base.rules)
        for rule_id, entry in self.rules.items():
            if isinstance(entry, dict) and isinstance(rules.get(rule_id), dict):
                rules[rule_id] = {**rules[rule_id], **entry}
            else:
                rules[rule_id] = entry
        self.rules = rules
        if base.ignore is not None:
            self.ignore = base.ignore

    def _parse(self, content: str) -> None:
        try:
            conf = _load_yaml(content)
        except YAMLError as exc:
            raise YamlStyleConfigError(f"invalid config: {exc}") from exc

        if not isinstance(conf, dict):
            raise YamlStyleConfigError("invalid config: not a mapping")

        rules = conf.get("rules", {})
        if not isinstance(rules, dict):
            raise YamlStyleConfigError("invalid config: rules should be a mapping")
        for rule_id, entry in rules.items():
            if entry in ("disable", False):
                self.rules[rule_id] = False
            elif entry == "enable":
                self.rules[rule_id] = {}
            elif entry in (Level.ERROR.value, Level.WARNING.value):
                self.rules[rule_id] = {"level": entry}
            else:
                self.rules[rule_id] = entry

        # Does this conf override another conf that we need to load?
        if "extends" in conf:
            if not isinstance(conf["extends"], str):
                raise YamlStyleConfigError("invalid config: extends should be a string")
            path = extended_config_file(conf["extends"])
            logger.debug("extending configuration %s", path)
            self.extend(YamlStyleConfig(file=path))

        ignore = _parse_ignore(conf)
        if ignore is not None:
            self.ignore = ignore

        if "yaml-files" in conf:
            patterns = _patterns(
                conf["yaml-files"],
                "invalid config: yaml-files should be a list of file patterns",
            )
            self.yaml_files = GitIgnoreSpec.from_lines(patterns)

        if "locale" in conf:
            if not isinstance(conf["locale"], str):
                raise YamlStyleConfigError("invalid config: locale should be a string")
            self.locale = conf["locale"]

    def _validate(self) -> None:
        for rule_id, entry in self.rules.items():
            try:
                rule = RuleRegistry.get(rule_id)
            except UnsupportedRuleError as exc:
                raise YamlStyleConfigError(f"invalid config: {exc}") from exc
            self.rule_configs[rule_id] = validate_rule_conf(rule, entry)
