"""Tests for configuration loading, validation and extension."""

from __future__ import annotations

import warnings
from pathlib import Path

import pytest

from yamlstyle.config import CONF_DIR, YamlStyleConfig, YamlStyleConfigError, extended_config_file
from yamlstyle.models.problem import Level
from tests.conftest import build_config

DEFAULT_ENABLED = [
    "anchors",
    "braces",
    "brackets",
    "colons",
    "commas",
    "comments",
    "comments-indentation",
    "document-start",
    "empty-lines",
    "hyphens",
    "indentation",
    "key-duplicates",
    "line-length",
    "new-line-at-end-of-file",
    "new-lines",
    "trailing-spaces",
    "truthy",
]


def enabled_ids(conf: YamlStyleConfig, filepath: str | None = None) -> list[str]:
    return sorted(rule_conf.id for rule_conf in conf.enabled_rules(filepath))


class TestRuleEntries:
    def test_enable_and_disable(self) -> None:
        conf = YamlStyleConfig(content="rules:\n  colons: enable\n  commas: disable\n")
        assert enabled_ids(conf) == ["colons"]
        assert conf.rules == {"colons": {}, "commas": False}

    def test_mapping_entry(self) -> None:
        conf = build_config("colons: {max-spaces-before: 1}")
        options = conf.rule_configs["colons"].options  # type: ignore[union-attr]
        assert options.max_spaces_before == 1  # type: ignore[attr-defined]
        assert options.max_spaces_after == 1  # type: ignore[attr-defined]

    def test_level(self) -> None:
        conf = build_config("colons: {level: warning}", "commas: enable")
        assert conf.rule_configs["colons"].level is Level.WARNING  # type: ignore[union-attr]
        assert conf.rule_configs["commas"].level is Level.ERROR  # type: ignore[union-attr]

    def test_level_shorthand(self) -> None:
        conf = build_config("colons: warning")
        assert conf.rule_configs["colons"].level is Level.WARNING  # type: ignore[union-attr]

    def test_empty_rules(self) -> None:
        assert enabled_ids(YamlStyleConfig(content="rules: {}\n")) == []
        assert enabled_ids(YamlStyleConfig(content="locale: C\n")) == []


class TestValidationErrors:
    def test_unknown_rule(self) -> None:
        with pytest.raises(YamlStyleConfigError, match='invalid config: no such rule: "tabs"'):
            build_config("tabs: enable")

    def test_unknown_option(self) -> None:
        with pytest.raises(
            YamlStyleConfigError,
            match='invalid config: unknown option "max-spaces" for rule "colons"',
        ):
            build_config("colons: {max-spaces: 1}")

    def test_wrong_option_type(self) -> None:
        with pytest.raises(YamlStyleConfigError, match='option "max-spaces-before" of "colons"'):
            build_config("colons: {max-spaces-before: 'one'}")

    def test_entry_of_wrong_shape(self) -> None:
        with pytest.raises(
            YamlStyleConfigError,
            match='rule "colons": should be either "enable", "disable" or a mapping',
        ):
            build_config("colons: [1, 2]")

    def test_invalid_level(self) -> None:
        with pytest.raises(YamlStyleConfigError, match='level should be "error" or "warning"'):
            build_config("colons: {level: fatal}")

    def test_cross_option_validation(self) -> None:
        with pytest.raises(
            YamlStyleConfigError,
            match=(
                'invalid config: quoted-strings: cannot use both "required: true" '
                'and "extra-allowed"'
            ),
        ):
            build_config("quoted-strings: {required: true, extra-allowed: ['^http']}")

    def test_not_a_mapping(self) -> None:
        with pytest.raises(YamlStyleConfigError, match="invalid config: not a mapping"):
            YamlStyleConfig(content="- colons\n")

    def test_rules_not_a_mapping(self) -> None:
        with pytest.raises(YamlStyleConfigError, match="rules should be a mapping"):
            YamlStyleConfig(content="rules: [colons]\n")

    def test_yaml_syntax_error(self) -> None:
        with pytest.raises(YamlStyleConfigError, match="^invalid config:"):
            YamlStyleConfig(content="rules: {colons: enable\n")

    def test_extends_must_be_string(self) -> None:
        with pytest.raises(YamlStyleConfigError, match="extends should be a string"):
            YamlStyleConfig(content="extends: [default]\n")

    def test_locale_must_be_string(self) -> None:
        with pytest.raises(YamlStyleConfigError, match="locale should be a string"):
            YamlStyleConfig(content="locale: [C]\n")

    def test_content_or_file_required(self) -> None:
        with pytest.raises(ValueError, match="exactly one of content or file"):
            YamlStyleConfig()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(YamlStyleConfigError, match="failed to load config file"):
            YamlStyleConfig(file=tmp_path / "missing.yaml")


class TestPresets:
    def test_default_preset(self) -> None:
        conf = YamlStyleConfig(content="extends: default\n")
        assert enabled_ids(conf) == DEFAULT_ENABLED
        for rule_id in ("comments", "comments-indentation", "document-start", "truthy"):
            assert conf.rule_configs[rule_id].level is Level.WARNING  # type: ignore[union-attr]
        assert conf.rule_configs["colons"].level is Level.ERROR  # type: ignore[union-attr]

    def test_relaxed_preset(self) -> None:
        conf = YamlStyleConfig(content="extends: relaxed\n")
        ids = enabled_ids(conf)
        for rule_id in ("comments", "comments-indentation", "document-start", "truthy"):
            assert rule_id not in ids
        braces = conf.rule_configs["braces"]
        assert braces is not None
        assert braces.level is Level.WARNING
        assert braces.options.max_spaces_inside == 1  # type: ignore[attr-defined]
        indentation = conf.rule_configs["indentation"]
        assert indentation is not None
        assert indentation.options.indent_sequences == "consistent"  # type: ignore[attr-defined]
        assert conf.rule_configs["trailing-spaces"].level is Level.ERROR  # type: ignore[union-attr]

    def test_preset_files_resolve(self) -> None:
        assert extended_config_file("default") == str(CONF_DIR / "default.yaml")
        assert extended_config_file("./default") == "./default"
        assert extended_config_file("unknown-preset") == "unknown-preset"

    def test_unknown_preset(self) -> None:
        with pytest.raises(YamlStyleConfigError, match="failed to load config file"):
            YamlStyleConfig(content="extends: unknown-preset\n")


class TestExtends:
    def test_options_are_merged(self, tmp_path: Path) -> None:
        base = tmp_path / "base.yaml"
        base.write_text("rules:\n  colons: {max-spaces-after: 2}\n  commas: enable\n")
        conf = YamlStyleConfig(
            content=f"extends: {base}\nrules:\n  colons: {{max-spaces-before: 1}}\n"
        )
        options = conf.rule_configs["colons"].options  # type: ignore[union-attr]
        assert options.max_spaces_before == 1  # type: ignore[attr-defined]
        assert options.max_spaces_after == 2  # type: ignore[attr-defined]
        assert enabled_ids(conf) == ["colons", "commas"]

    def test_disable_extended_rule(self) -> None:
        conf = build_config("document-start: disable", "truthy: disable", extends="default")
        ids = enabled_ids(conf)
        assert "document-start" not in ids
        assert "truthy" not in ids
        assert "colons" in ids

    def test_enable_after_disable(self, tmp_path: Path) -> None:
        base = tmp_path / "base.yaml"
        base.write_text("rules:\n  colons: disable\n")
        conf = YamlStyleConfig(content=f"extends: {base}\nrules:\n  colons: {{level: warning}}\n")
        assert conf.rule_configs["colons"].level is Level.WARNING  # type: ignore[union-attr]

    def test_ignore_is_inherited(self, tmp_path: Path) -> None:
        base = tmp_path / "base.yaml"
        base.write_text("ignore: generated/\nrules: {}\n")
        conf = YamlStyleConfig(content=f"extends: {base}\n")
        assert conf.is_file_ignored("generated/out.yaml")
        assert not conf.is_file_ignored("src/in.yaml")

    def test_own_ignore_wins(self, tmp_path: Path) -> None:
        base = tmp_path / "base.yaml"
        base.write_text("ignore: generated/\n")
        conf = YamlStyleConfig(content=f"extends: {base}\nignore: vendor/\n")
        assert conf.is_file_ignored("vendor/lib.yaml")
        assert not conf.is_file_ignored("generated/out.yaml")


class TestIgnore:
    def test_ignore_block_string(self) -> None:
        conf = YamlStyleConfig(content="ignore: |\n  *.tmp.yaml\n  /build/\n")
        assert conf.is_file_ignored("a.tmp.yaml")
        assert conf.is_file_ignored("build/out.yaml")
        assert not conf.is_file_ignored("src/build.yaml")

    def test_ignore_list(self) -> None:
        conf = YamlStyleConfig(content="ignore: ['*.tmp.yaml', 'vendor/']\n")
        assert conf.is_file_ignored("deep/dir/x.tmp.yaml")
        assert conf.is_file_ignored("vendor/x.yaml")
        assert not conf.is_file_ignored("x.yaml")

    def test_ignore_negation(self) -> None:
        conf = YamlStyleConfig(content="ignore: |\n  *.yaml\n  !keep.yaml\n")
        assert conf.is_file_ignored("drop.yaml")
        assert not conf.is_file_ignored("keep.yaml")

    def test_patterns_compile_without_deprecation_warnings(self) -> None:
        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)
            conf = YamlStyleConfig(content="ignore: build/\nyaml-files: ['*.yaml']\n")
            assert conf.is_file_ignored("build/a.yaml")
            assert conf.is_yaml_file("a.yaml")

    def test_ignore_must_be_patterns(self) -> None:
        with pytest.raises(YamlStyleConfigError, match="ignore should contain file patterns"):
            YamlStyleConfig(content="ignore: 3\n")

    def test_ignore_from_file(self, tmp_path: Path) -> None:
        first = tmp_path / ".gitignore"
        first.write_text("*.tmp.yaml\n")
        second = tmp_path / ".ignore"
        second.write_bytes("vendor/\n".encode("utf-16"))
        conf = YamlStyleConfig(content=f"ignore-from-file: ['{first}', '{second}']\n")
        assert conf.is_file_ignored("x.tmp.yaml")
        assert conf.is_file_ignored("vendor/a.yaml")
        assert not conf.is_file_ignored("a.yaml")

    def test_ignore_from_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(YamlStyleConfigError, match="^invalid config:"):
            YamlStyleConfig(content=f"ignore-from-file: {tmp_path / 'missing'}\n")

    def test_ignore_and_ignore_from_file_conflict(self) -> None:
        with pytest.raises(YamlStyleConfigError, match="cannot be used together"):
            YamlStyleConfig(content="ignore: a\nignore-from-file: .gitignore\n")

    def test_rule_ignore(self) -> None:
        conf = build_config("trailing-spaces: {ignore: 'generated/'}", "colons: enable")
        assert enabled_ids(conf, "generated/x.yaml") == ["colons"]
        assert enabled_ids(conf, "src/x.yaml") == ["colons", "trailing-spaces"]
        assert enabled_ids(conf) == ["colons", "trailing-spaces"]

    def test_rule_ignore_from_file(self, tmp_path: Path) -> None:
        patterns = tmp_path / "patterns"
        patterns.write_text("*.gen.yaml\n")
        conf = build_config(f"colons: {{ignore-from-file: '{patterns}'}}")
        assert enabled_ids(conf, "a.gen.yaml") == []
        assert enabled_ids(conf, "a.yaml") == ["colons"]


class TestYamlFiles:
    def test_default_patterns(self) -> None:
        conf = YamlStyleConfig(content="rules: {}\n")
        assert conf.is_yaml_file("a.yaml")
        assert conf.is_yaml_file("dir/b.yml")
        assert conf.is_yaml_file("dir/.yamllint")
        assert not conf.is_yaml_file("c.txt")

    def test_custom_patterns(self) -> None:
        conf = YamlStyleConfig(content="yaml-files: ['*.yaml', '*.conf']\n")
        assert conf.is_yaml_file("app.conf")
        assert conf.is_yaml_file("a.yaml")
        assert not conf.is_yaml_file("b.yml")

    def test_patterns_must_be_list(self) -> None:
        with pytest.raises(YamlStyleConfigError, match="yaml-files should be a list"):
            YamlStyleConfig(content="yaml-files: 3\n")


class TestLocale:
    def test_locale(self) -> None:
        assert YamlStyleConfig(content="locale: en_US.UTF-8\n").locale == "en_US.UTF-8"
        assert YamlStyleConfig(content="rules: {}\n").locale is None
