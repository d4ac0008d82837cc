"""yamlstyle: a linter for YAML style and syntax."""

__version__ = "0.1.0"
