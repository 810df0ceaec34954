"""Configuration management for didi."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DIDI_HOME = Path(os.environ.get("DIDI_HOME", Path.home() / ".config" / "didi"))
CONFIG_FILE = DIDI_HOME / "didi.conf"
DEFAULT_DATABASE = Path.home() / "digital_diary.sqlite"

DATABASE_ENV_VAR = "DIDI_URL"


@dataclass
class Config:
    """didi configuration."""

    database_url: str = ""
    color: bool = True

    @property
    def database_path(self) -> Path:
        """Resolved location of the diary database."""
        if self.database_url:
            return Path(self.database_url).expanduser()
        return DEFAULT_DATABASE


def _parse_bool(key: str, value: str, default: bool) -> bool:
    match value.lower():
        case "true" | "yes" | "on" | "1":
            return True
        case "false" | "no" | "off" | "0":
            return False
    logger.warning(f"Invalid boolean for {key.upper()}: {value!r}, using {default}")
    return default


def _unquote(value: str) -> str:
    """Strip surrounding quotes, or an inline comment from an unquoted value."""
    if value.startswith('"') or value.startswith("'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        if end_quote != -1:
            return value[1:end_quote]
        return value[1:]
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def load_config(config_file: Path | None = None, environ: dict | None = None) -> Config:
    """
    Load configuration from didi.conf, then apply environment overrides.

    DIDI_URL in the environment takes precedence over DATABASE_URL in the file.
    """
    config = Config()
    config_file = config_file or CONFIG_FILE
    environ = os.environ if environ is None else environ

    if config_file.exists():
        for line in config_file.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip().lower()
            value = _unquote(value.strip())

            match key:
                case "database_url":
                    config.database_url = value
                case "color":
                    config.color = _parse_bool(key, value, config.color)
                case _:
                    logger.debug(f"Ignoring unknown config key {key!r}")

    if environ.get(DATABASE_ENV_VAR):
        config.database_url = environ[DATABASE_ENV_VAR]

    return config
