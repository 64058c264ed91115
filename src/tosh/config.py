"""Shell variables, environment synchronisation and the config file."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import dotenv_values
from loguru import logger
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError

ENV_PREFIX = "TOSH_"


class Settings(BaseSettings):
    """Shell options, mirrored one-to-one by ``TOSH_*`` environment variables."""

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, case_sensitive=False, extra="ignore")

    verbose: bool = Field(default=False, description="Print launch and exit traces")
    debug: bool = Field(default=False, description="Print internal debug log lines")
    prompt: str = Field(default="%n@%h %p2r ⟡ ", description="Prompt template")
    hist_path: str = Field(default="~/.tosh_history", description="History file path")
    hist_len: int = Field(default=10000, ge=0, description="History length")
    config_path: str = Field(default="~/.toshrc", description="Config file path")

    def resolve_config_path(self) -> Path:
        from .core.expansion import expand_home

        return Path(expand_home(self.config_path, os.environ.get("HOME")))

    def resolve_hist_path(self) -> Path:
        from .core.expansion import expand_home

        return Path(expand_home(self.hist_path, os.environ.get("HOME")))


def tracked_variables() -> dict[str, str]:
    """Environment variable name to settings field, in field order."""

    return {f"{ENV_PREFIX}{name.upper()}": name for name in Settings.model_fields}


def render_value(value: object) -> str:
    if isinstance(value, bool):
        return "ON" if value else "OFF"
    return str(value)


def default_environment() -> dict[str, str]:
    """The tracked variables with their built-in default values."""

    fields = Settings.model_fields
    return {variable: render_value(fields[name].default) for variable, name in tracked_variables().items()}


def load_settings() -> Settings:
    """Read settings from the current environment."""

    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigurationError(f"invalid value for {_invalid_fields(exc)}") from exc


def _invalid_fields(exc: ValidationError) -> str:
    return ", ".join(f"{ENV_PREFIX}{str(error['loc'][0]).upper()}" for error in exc.errors())


def sync_environment() -> Settings:
    """Export defaults for unset variables, then read everything back.

    The environment is the source of truth: a variable that is already set
    overrides the built-in default.
    """

    for variable, value in default_environment().items():
        os.environ.setdefault(variable, value)
    return load_settings()


def load_config(path: Path) -> dict[str, str]:
    """Read ``TOSH_*`` assignments from a dotenv-style config file."""

    if not path.is_file():
        logger.debug("no config file at {}", path)
        return {}
    values: dict[str, str] = {}
    for key, value in dotenv_values(path).items():
        if value is None:
            continue
        name = key.upper()
        if not name.startswith(ENV_PREFIX):
            logger.warning("ignoring '{}' in {}", key, path)
            continue
        values[name] = value
    return values


def apply_config(path: Path) -> Settings:
    """Export the config file's values and rebuild the settings from them."""

    values = load_config(path)
    overrides = {name.removeprefix(ENV_PREFIX).lower(): value for name, value in values.items()}
    try:
        settings = Settings(**overrides)
    except ValidationError as exc:
        raise ConfigurationError(f"invalid value in {path}: {_invalid_fields(exc)}") from exc

    for name, value in values.items():
        logger.debug("config sets {}={}", name, value)
        os.environ[name] = value
    return settings
