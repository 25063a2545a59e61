"""
Settings: ``~/.magic-login/config.json`` overridden by ``MAGIC_LOGIN_*`` env vars.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from magic_login.auth import DEMO_DELAY_S
from magic_login.controller import DEFAULT_SETTLE_DELAY_S
from magic_login.persistence.file import DEFAULT_STATE_FILE

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".magic-login"
CONFIG_FILE = CONFIG_DIR / "config.json"
ENV_PREFIX = "MAGIC_LOGIN_"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """CLI settings.

    Config file values are passed in as init kwargs by ``load_settings``;
    environment variables (``MAGIC_LOGIN_BASE_URL``, ``MAGIC_LOGIN_STATE_FILE``, ...)
    take precedence over them.
    """

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, extra="ignore")

    base_url: Optional[str] = None  # None -> demo service
    state_file: Path = DEFAULT_STATE_FILE
    settle_delay: float = DEFAULT_SETTLE_DELAY_S
    home_url: str = "/"
    log_level: str = "WARNING"
    demo_delay: float = DEMO_DELAY_S

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return env_settings, init_settings

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("settle_delay", "demo_delay")
    @classmethod
    def _non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("delay cannot be negative")
        return v


def _load_config(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def load_settings(path: Path = CONFIG_FILE) -> Settings:
    """Build settings from the config file and the environment.

    Invalid values in the file are dropped one field at a time, so the rest of
    the file and every env override still apply. An invalid env value raises.
    """
    values = _load_config(path)
    while True:
        try:
            return Settings(**values)
        except ValidationError as e:
            bad = {err["loc"][0] for err in e.errors() if err["loc"] and err["loc"][0] in values}
            if not bad:
                raise
            logger.warning(f"Ignoring invalid settings in {path}: {', '.join(sorted(bad))}")
            values = {k: v for k, v in values.items() if k not in bad}


def save_settings(settings: Settings, path: Path = CONFIG_FILE) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(settings.model_dump(mode="json", exclude_defaults=True), indent=2))
