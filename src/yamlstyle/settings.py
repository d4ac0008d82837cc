"""Shared settings loaded from environment / .env file."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process-wide configuration of yamlstyle.

    Values are read from ``YAMLSTYLE_*`` environment variables and from a
    ``.env`` file in the working directory. Lint rules themselves are
    configured by the YAML configuration file, not here.
    """

    model_config = SettingsConfigDict(
        env_prefix="YAMLSTYLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "WARNING"

    # Configuration file used when none is given on the command line
    config_file: str | None = None

    # Forces the encoding of linted files instead of detecting it; meant for
    # temporary workarounds with non-standard encodings
    file_encoding: str | None = None
