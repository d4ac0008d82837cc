"""Shared test helpers for yamlstyle."""

from __future__ import annotations

from pathlib import Path

import pytest

from yamlstyle import linter
from yamlstyle.config import YamlStyleConfig
from yamlstyle.models.problem import LintProblem

# (line, column) for a problem of the rule under test,
# (line, column, rule_id) for another rule, (line, column, None) for a syntax error
Expected = tuple[int, int] | tuple[int, int, str | None]


def build_config(*rules: str, extends: str | None = None) -> YamlStyleConfig:
    """Config from ``rules:`` entries, one YAML line each (``"colons: {max-spaces-before: 1}"``).

    Without ``extends`` only the listed rules are enabled.
    """
    content = f"extends: {extends}\n" if extends else ""
    if rules:
        content += "rules:\n" + "".join(f"  {entry}\n" for entry in rules)
    else:
        content += "rules: {}\n"
    return YamlStyleConfig(content=content)


def default_config(*rules: str) -> YamlStyleConfig:
    """The ``default`` preset with ``rules`` entries layered over it."""
    return build_config(*rules, extends="default")


def lint(source: str, conf: YamlStyleConfig, filepath: str | None = None) -> list[LintProblem]:
    return list(linter.run(source, conf, filepath))


def check(rule_id: str, conf: YamlStyleConfig, source: str, *expected: Expected) -> None:
    """Assert that linting ``source`` finds exactly the ``expected`` problems, in order."""
    wanted = sorted(
        (
            LintProblem(
                item[0], item[1], rule=item[2] if len(item) > 2 else rule_id  # type: ignore[misc]
            )
            for item in expected
        ),
        key=lambda problem: (problem.line, problem.column),
    )
    assert lint(source, conf) == wanted


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A temporary directory of YAML files, made the working directory."""
    files = {
        "a.yaml": "---\nkey: value\n",
        "warn.yaml": "key: value\n",
        "bad.yml": "---\nkey: value   \n",
        "sub/c.yaml": "---\n- item\n",
        "sub/ignored.txt": "not: [yaml\n",
        "empty.yaml": "",
    }
    for name, content in files.items():
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    return tmp_path
