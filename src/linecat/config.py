"""Configuration via pydantic-settings, backed by an optional TOML file.

Feature switches set here are on by default for every run; command-line
flags can add features but not remove them.

Resolution:
    1. ``$LINECAT_CONFIG_DIR/linecat_cfg.toml``, else ``~/.config/linecat/linecat_cfg.toml``
    2. ``LINECAT_*`` environment variables (override the file)
    3. built-in defaults (everything off)
"""
from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigReadError

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "LINECAT_CONFIG_DIR"
CONFIG_FILE_NAME = "linecat_cfg.toml"

DEFAULT_CONFIG = """\
number_feature = false
dollar_sign_feature = false
tabs_feature = false
compress_empty_line_feature = false
pagination_feature = false
"""


class Settings(BaseSettings):
    """Linecat feature defaults — loaded from the config file / env vars."""

    number_feature: bool = Field(default=False, description="Number output lines")
    dollar_sign_feature: bool = Field(default=False, description="Append $ to each line")
    tabs_feature: bool = Field(default=False, description="Show tabs as ^I")
    compress_empty_line_feature: bool = Field(default=False, description="Squeeze blank lines")
    pagination_feature: bool = Field(default=False, description="Page output")

    model_config = SettingsConfigDict(env_prefix="LINECAT_", extra="ignore")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: Any,
        env_settings: Any,
        dotenv_settings: Any,
        file_secret_settings: Any,
    ) -> tuple[Any, ...]:
        # Environment variables win over values read from the config file.
        return env_settings, init_settings


def config_dir() -> Path:
    """Directory holding the config file."""
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override)
    return Path.home() / ".config" / "linecat"


def config_path(directory: str | Path | None = None) -> Path:
    return Path(directory if directory is not None else config_dir()) / CONFIG_FILE_NAME


def load_settings(directory: str | Path | None = None) -> Settings:
    """Read the config file if there is one.

    A missing file means defaults. A file that exists but cannot be read,
    parsed or validated raises ConfigReadError.
    """
    path = config_path(directory)
    data: dict[str, Any] = {}
    if path.is_file():
        try:
            with path.open("rb") as fh:
                data = tomllib.load(fh)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            raise ConfigReadError(f"{path}: {exc}") from exc
        logger.debug("Loaded config from %s", path)
    else:
        logger.debug("No config file at %s, using defaults", path)
    try:
        return Settings(**data)
    except ValidationError as exc:
        raise ConfigReadError(f"{path}: {exc}") from exc


def write_default_config(directory: str | Path | None = None, overwrite: bool = False) -> Path:
    """Create the config directory and a config file with every feature off.

    An existing file is left untouched unless overwrite is set. Returns the
    file path.
    """
    path = config_path(directory)
    if path.exists() and not overwrite:
        logger.debug("Config file %s already exists", path)
        return path
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(DEFAULT_CONFIG, encoding="utf-8")
    except OSError as exc:
        raise ConfigReadError(f"cannot create {path}: {exc}") from exc
    return path
