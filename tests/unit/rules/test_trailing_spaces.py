"""Tests for the trailing-spaces rule."""

from __future__ import annotations

from tests.conftest import check, default_config

RULE = "trailing-spaces"


class TestTrailingSpaces:
    def test_disabled_rule(self) -> None:
        conf = default_config("trailing-spaces: disable")
        check(RULE, conf, "")
        check(RULE, conf, "\n")
        check(RULE, conf, "    \n")
        check(RULE, conf, "---\nsome: text \n")

    def test_enabled_rule(self) -> None:
        conf = default_config("trailing-spaces: enable")
        check(RULE, conf, "")
        check(RULE, conf, "\n")
        check(RULE, conf, "    \n", (1, 1))
        check(RULE, conf, "\t\t\t\n", (1, 1))
        check(RULE, conf, "---\nsome: text \n", (2, 11))
        check(RULE, conf, "---\nsome: text\t\n", (2, 11))

    def test_dos_new_lines(self) -> None:
        conf = default_config("trailing-spaces: enable", "new-lines: {type: dos}")
        check(RULE, conf, "---\r\nsome: text\r\n")
        check(RULE, conf, "---\r\nsome: text \r\n", (2, 11))
