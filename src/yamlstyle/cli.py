"""Command line interface: ``yamlstyle [options] FILE_OR_DIR ... | -``."""

from __future__ import annotations

import argparse
import locale
import logging
import os
import platform
import sys
from collections.abc import Iterable, Iterator
from pathlib import Path

from yamlstyle import __version__, linter
from yamlstyle.config import YamlStyleConfig, YamlStyleConfigError
from yamlstyle.models.problem import Level, LintProblem
from yamlstyle.settings import Settings

logger = logging.getLogger("yamlstyle.cli")

PROJECT_CONFIG_FILES = (".yamllint", ".yamllint.yaml", ".yamllint.yml")

PROBLEM_LEVELS = {Level.WARNING: 1, Level.ERROR: 2}


def find_files_recursively(items: Iterable[str], conf: YamlStyleConfig) -> Iterator[str]:
    """Expand directories into the YAML files they contain; files pass through."""
    for item in items:
        if os.path.isdir(item):
            for root, _dirnames, filenames in os.walk(item):
                for filename in filenames:
                    filepath = os.path.join(root, filename)
                    if conf.is_yaml_file(filepath) and not conf.is_file_ignored(filepath):
                        yield filepath
        else:
            yield item


def supports_color() -> bool:
    supported_platform = not (
        platform.system() == "Windows"
        and not ("ANSICON" in os.environ or os.environ.get("TERM") == "ANSI")
    )
    return supported_platform and hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


class Format:
    """Renderers of one problem as one output line."""

    @staticmethod
    def parsable(problem: LintProblem, filename: str) -> str:
        return f"{filename}:{problem.line}:{problem.column}: [{problem.level}] {problem.message}"

    @staticmethod
    def standard(problem: LintProblem, filename: str) -> str:
        line = f"  {problem.line}:{problem.column}"
        line += max(12 - len(line), 0) * " "
        line += problem.level
        line += max(21 - len(line), 0) * " "
        line += problem.desc
        if problem.rule:
            line += f"  ({problem.rule})"
        return line

    @staticmethod
    def standard_color(problem: LintProblem, filename: str) -> str:
        line = f"  \033[2m{problem.line}:{problem.column}\033[0m"
        line += max(20 - len(line), 0) * " "
        if problem.level == Level.WARNING:
            line += f"\033[33m{problem.level}\033[0m"
        else:
            line += f"\033[31m{problem.level}\033[0m"
        line += max(38 - len(line), 0) * " "
        line += problem.desc
        if problem.rule:
            line += f"  \033[2m({problem.rule})\033[0m"
        return line

    @staticmethod
    def github(problem: LintProblem, filename: str) -> str:
        line = (
            f"::{problem.level} file={filename},line={problem.line},col={problem.column}"
            f"::{problem.line}:{problem.column} "
        )
        if problem.rule:
            line += f"[{problem.rule}] "
        line += problem.desc
        return line


def show_problems(
    problems: Iterable[LintProblem], filename: str, output_format: str, no_warnings: bool
) -> int:
    """Print the problems of one file; return the highest level met."""
    max_level = 0
    first = True

    if output_format == "auto":
        if "GITHUB_ACTIONS" in os.environ and "GITHUB_WORKFLOW" in os.environ:
            output_format = "github"
        elif supports_color():
            output_format = "colored"
        else:
            output_format = "standard"

    for problem in problems:
        max_level = max(max_level, PROBLEM_LEVELS[problem.level])
        if no_warnings and problem.level != Level.ERROR:
            continue
        if output_format == "parsable":
            print(Format.parsable(problem, filename))
        elif output_format == "github":
            if first:
                print(f"::group::{filename}")
                first = False
            print(Format.github(problem, filename))
        elif output_format == "colored":
            if first:
                print(f"\033[4m{filename}\033[0m")
                first = False
            print(Format.standard_color(problem, filename))
        else:
            if first:
                print(filename)
                first = False
            print(Format.standard(problem, filename))

    if not first and output_format == "github":
        print("::endgroup::")
    if not first and output_format != "parsable":
        print("")

    return max_level


def user_global_config() -> Path:
    """``$XDG_CONFIG_HOME/yamlstyle/config``, defaulting to ``~/.config``."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(config_home) if config_home else Path.home() / ".config"
    return base / "yamlstyle" / "config"


def load_config(
    config_file: str | None, config_data: str | None, settings: Settings
) -> YamlStyleConfig:
    """Pick the configuration the way the command line documents it."""
    if config_data is not None:
        if config_data != "" and ":" not in config_data:
            config_data = f"extends: {config_data}"
        return YamlStyleConfig(content=config_data)
    if config_file is not None:
        return YamlStyleConfig(file=config_file)
    if settings.config_file:
        return YamlStyleConfig(file=os.path.expanduser(settings.config_file))
    for filename in PROJECT_CONFIG_FILES:
        if os.path.isfile(filename):
            return YamlStyleConfig(file=filename)
    global_config = user_global_config()
    if global_config.is_file():
        return YamlStyleConfig(file=global_config)
    return YamlStyleConfig(content="extends: default")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="yamlstyle",
        description="A linter for YAML files: checks syntax, key repetition "
        "and cosmetic problems such as line length, trailing spaces and indentation.",
    )
    files_group = parser.add_mutually_exclusive_group(required=True)
    files_group.add_argument(
        "files", metavar="FILE_OR_DIR", nargs="*", default=(), help="files to check"
    )
    files_group.add_argument(
        "-", action="store_true", dest="stdin", help="read from standard input"
    )
    config_group = parser.add_mutually_exclusive_group()
    config_group.add_argument(
        "-c", "--config-file", dest="config_file", help="path to a custom configuration"
    )
    config_group.add_argument(
        "-d", "--config-data", dest="config_data", help="custom configuration (as YAML source)"
    )
    parser.add_argument(
        "--list-files", action="store_true", dest="list_files",
        help="list files to lint and exit",
    )
    parser.add_argument(
        "-f", "--format",
        choices=("parsable", "standard", "colored", "github", "auto"),
        default="auto",
        help="format for parsing output",
    )
    parser.add_argument(
        "-s", "--strict", action="store_true",
        help="return non-zero exit code on warnings as well as errors",
    )
    parser.add_argument(
        "--no-warnings", action="store_true", dest="no_warnings",
        help="output only error level problems",
    )
    parser.add_argument(
        "-v", "--version", action="version", version=f"yamlstyle {__version__}"
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Lint the given files and exit with 0 (clean), 1 (errors) or 2 (strict warnings)."""
    settings = Settings()
    logging.basicConfig(level=settings.log_level.upper())

    args = build_parser().parse_args(argv)

    try:
        conf = load_config(args.config_file, args.config_data, settings)
    except YamlStyleConfigError as exc:
        print(exc, file=sys.stderr)
        sys.exit(-1)

    if conf.locale is not None:
        locale.setlocale(locale.LC_ALL, conf.locale)

    if args.list_files:
        for filename in find_files_recursively(args.files, conf):
            if not conf.is_file_ignored(filename):
                print(filename)
        sys.exit(0)

    max_level = 0
    for filename in find_files_recursively(args.files, conf):
        filepath = filename[2:] if filename.startswith("./") else filename
        try:
            with open(filename, mode="rb") as f:
                problems = linter.run(f, conf, filepath)
        except OSError as exc:
            print(exc, file=sys.stderr)
            sys.exit(-1)
        level = show_problems(problems, filename, args.format, args.no_warnings)
        max_level = max(max_level, level)

    if args.stdin:
        problems = linter.run(sys.stdin, conf)
        level = show_problems(problems, "stdin", args.format, args.no_warnings)
        max_level = max(max_level, level)

    logger.debug("highest problem level: %d", max_level)
    if max_level == PROBLEM_LEVELS[Level.ERROR]:
        sys.exit(1)
    if max_level == PROBLEM_LEVELS[Level.WARNING] and args.strict:
        sys.exit(2)
    sys.exit(0)


if __name__ == "__main__":
    main()
