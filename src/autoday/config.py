"""Configuration management for AutoDay."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

AUTODAY_HOME = Path(os.environ.get("AUTODAY_HOME", Path.home() / "autoday"))
CONFIG_FILE = AUTODAY_HOME / "config" / "autoday.conf"
DATA_DIR = AUTODAY_HOME / "data"


@dataclass
class Config:
    """AutoDay configuration."""

    google_config_folder: str = str(AUTODAY_HOME / "config" / "google")
    google_client_secret_file: str = ""
    google_calendars: list[str] = field(default_factory=list)
    timezone: str = "Asia/Tokyo"
    data_dir: str = str(DATA_DIR)

    @property
    def data_path(self) -> Path:
        return Path(self.data_dir).expanduser()


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    if value.startswith('"') or value.startswith("'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from autoday.conf file."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "google_config_folder":
                config.google_config_folder = value
            case "google_client_secret_file":
                config.google_client_secret_file = value
            case "google_calendars":
                config.google_calendars = [c.strip() for c in value.split(",") if c.strip()]
            case "timezone":
                config.timezone = value
            case "data_dir":
                config.data_dir = value
            case _:
                logger.debug(f"Ignoring unknown config key: {key}")

    return config
