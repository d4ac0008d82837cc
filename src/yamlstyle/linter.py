"""Lint driver: runs the enabled rules over one YAML buffer.

All rules share a single pass over the merged token/comment/line stream.
Problems are held back until the end of their line so that
``# yamllint disable-line`` comments can still suppress them, then the
whole result is deduplicated, merged with the syntax error (if any) and
sorted by position.
"""

from __future__ import annotations

import io
import logging
import re
from collections.abc import Iterable, Iterator
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import MarkedYAMLError
from ruamel.yaml.reader import ReaderError

from yamlstyle.config import RuleConfig, YamlStyleConfig
from yamlstyle.decoder import auto_decode
from yamlstyle.models.problem import Level, LintProblem
from yamlstyle.parser import Comment, Line, Token, line_generator, scanner_text
from yamlstyle.parser import token_or_comment_or_line_generator
from yamlstyle.rules import RuleType

logger = logging.getLogger("yamlstyle.linter")

DISABLE_RULE_PATTERN = re.compile(r"^# yamllint disable( rule:\S+)*\s*$")
ENABLE_RULE_PATTERN = re.compile(r"^# yamllint enable( rule:\S+)*\s*$")
DISABLE_LINE_PATTERN = re.compile(r"^# yamllint disable-line( rule:\S+)*\s*$")
DISABLE_FILE_PATTERN = re.compile(r"^#\s*yamllint disable-file\s*$")


def _directive_rules(comment: str, prefix: str) -> list[str]:
    """Rule ids listed after ``prefix`` as ``rule:<id>`` items."""
    items = comment[len(prefix) :].split()
    return [item[len("rule:") :] for item in items]


class DisableDirective:
    """Tracks ``# yamllint disable`` / ``# yamllint enable`` comments."""

    def __init__(self, all_rules: set[str]) -> None:
        self.all_rules = all_rules
        self.rules: set[str] = set()

    def process_comment(self, comment: Comment) -> None:
        text = str(comment)
        if DISABLE_RULE_PATTERN.match(text):
            rules = _directive_rules(text, "# yamllint disable")
            if not rules:
                self.rules = set(self.all_rules)
            else:
                self.rules.update(rule for rule in rules if rule in self.all_rules)
        elif ENABLE_RULE_PATTERN.match(text):
            rules = _directive_rules(text, "# yamllint enable")
            if not rules:
                self.rules.clear()
            else:
                self.rules.difference_update(rules)

    def is_disabled_by_directive(self, problem: LintProblem) -> bool:
        return problem.rule in self.rules


class DisableLineDirective(DisableDirective):
    """Tracks ``# yamllint disable-line`` comments for a single line."""

    def process_comment(self, comment: Comment) -> None:
        text = str(comment)
        if DISABLE_LINE_PATTERN.match(text):
            rules = _directive_rules(text, "# yamllint disable-line")
            if not rules:
                self.rules = set(self.all_rules)
            else:
                self.rules.update(rule for rule in rules if rule in self.all_rules)


def _check(rule_conf: RuleConfig, elem: Any, context: Any) -> list[LintProblem]:
    try:
        problems = rule_conf.rule.check(rule_conf.options, elem, context)
    except Exception:
        logger.error("rule %s failed on %r", rule_conf.id, elem)
        raise
    for problem in problems:
        problem.rule = rule_conf.id
        problem.level = rule_conf.level
    return problems


def get_cosmetic_problems(
    buffer: str, conf: YamlStyleConfig, filepath: str | None = None
) -> Iterator[LintProblem]:
    """Problems found by the enabled rules, minus those disabled by comments."""
    rules = conf.enabled_rules(filepath)
    by_type: dict[RuleType, list[RuleConfig]] = {rule_type: [] for rule_type in RuleType}
    for rule_conf in rules:
        by_type[rule_conf.rule.type].append(rule_conf)

    contexts = {
        rule_conf.id: rule_conf.rule.new_context(rule_conf.options, conf) for rule_conf in rules
    }
    all_rules = {rule_conf.id for rule_conf in rules}

    # Problems are cached and flushed only at the end of each line, so that
    # directives found later on the same line still apply to them
    cache: list[LintProblem] = []
    disabled = DisableDirective(all_rules)
    disabled_for_line = DisableLineDirective(all_rules)
    disabled_for_next_line = DisableLineDirective(all_rules)

    for elem in token_or_comment_or_line_generator(buffer):
        if isinstance(elem, Token):
            for rule_conf in by_type[RuleType.TOKEN]:
                cache.extend(_check(rule_conf, elem, contexts[rule_conf.id]))
        elif isinstance(elem, Comment):
            for rule_conf in by_type[RuleType.COMMENT]:
                cache.extend(_check(rule_conf, elem, contexts[rule_conf.id]))

            disabled.process_comment(elem)
            if elem.is_inline():
                disabled_for_line.process_comment(elem)
            else:
                disabled_for_next_line.process_comment(elem)
        elif isinstance(elem, Line):
            for rule_conf in by_type[RuleType.LINE]:
                cache.extend(_check(rule_conf, elem, contexts[rule_conf.id]))

            # last element of this line: flush its problems
            for problem in cache:
                if not (
                    disabled_for_line.is_disabled_by_directive(problem)
                    or disabled.is_disabled_by_directive(problem)
                ):
                    yield problem

            disabled_for_line = disabled_for_next_line
            disabled_for_next_line = DisableLineDirective(all_rules)
            cache = []


def _position(buffer: str, index: int) -> tuple[int, int]:
    """1-based line and column of a character offset."""
    line_start = max(buffer.rfind("\n", 0, index), buffer.rfind("\r", 0, index)) + 1
    line = len(re.findall(r"\r\n|\r|\n", buffer[:line_start])) + 1
    return line, index - line_start + 1


def get_syntax_error(buffer: str) -> LintProblem | None:
    """The first error the YAML parser stops on, as a problem without rule."""
    yaml = YAML(typ="safe", pure=True)
    try:
        for _ in yaml.parse(scanner_text(buffer)):
            pass
    except MarkedYAMLError as exc:
        mark = exc.problem_mark or exc.context_mark
        line, column = (mark.line + 1, mark.column + 1) if mark is not None else (1, 1)
        desc = exc.problem or exc.context or "unknown error"
        return LintProblem(line, column, f"syntax error: {desc} (syntax)", level=Level.ERROR)
    except ReaderError as exc:
        line, column = _position(buffer, exc.position)
        desc = f"unacceptable character #x{exc.character:04x}: {exc.reason}"
        return LintProblem(line, column, f"syntax error: {desc} (syntax)", level=Level.ERROR)
    return None


def _aggregate(
    problems: Iterable[LintProblem], syntax_error: LintProblem | None
) -> list[LintProblem]:
    seen: set[tuple[int, int, str | None, str]] = set()
    result: list[LintProblem] = []
    for problem in problems:
        # equal problems with different descriptions are all kept
        identity = (problem.line, problem.column, problem.rule, problem.desc)
        if identity in seen:
            continue
        # the syntax error supersedes cosmetic problems at its exact position
        if (
            syntax_error is not None
            and (problem.line, problem.column) == (syntax_error.line, syntax_error.column)
        ):
            continue
        seen.add(identity)
        result.append(problem)
    if syntax_error is not None:
        result.append(syntax_error)
    return sorted(result, key=lambda problem: (problem.line, problem.column))


def _run(buffer: str, conf: YamlStyleConfig, filepath: str | None) -> Iterator[LintProblem]:
    first_line = next(line_generator(buffer)).content
    if DISABLE_FILE_PATTERN.match(first_line):
        logger.debug("%s: linting disabled by directive", filepath or "<buffer>")
        return iter(())

    syntax_error = get_syntax_error(buffer)
    problems = _aggregate(get_cosmetic_problems(buffer, conf, filepath), syntax_error)
    return iter(problems)


def run(
    source: str | bytes | io.IOBase, conf: YamlStyleConfig, filepath: str | None = None
) -> Iterator[LintProblem]:
    """Lint ``source`` (text, bytes or an open file) with ``conf``.

    Problems are yielded sorted by line then column. Files ignored by the
    configuration produce no problems.
    """
    if filepath is not None and conf.is_file_ignored(filepath):
        return iter(())

    if isinstance(source, bytes):
        return _run(auto_decode(source), conf, filepath)
    if isinstance(source, str):
        return _run(source, conf, filepath)
    if isinstance(source, io.IOBase):
        content = source.read()
        if isinstance(content, bytes):
            content = auto_decode(content)
        return _run(content, conf, filepath)
    raise TypeError("input should be a string or a stream")
