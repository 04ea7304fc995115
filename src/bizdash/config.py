"""Configuration management for bizdash."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

BIZDASH_HOME = Path(os.environ.get("BIZDASH_HOME", Path.home() / "bizdash"))
CONFIG_FILE = BIZDASH_HOME / "config" / "bizdash.conf"
DATA_DIR = BIZDASH_HOME / "data"


@dataclass
class Config:
    """bizdash configuration."""

    supabase_url: str = ""
    supabase_key: str = ""
    access_token: str = ""
    user_id: str = ""
    timezone: str = "America/Sao_Paulo"
    week_start: str = "sunday"
    due_soon_days: int = 2
    alert_window_days: int = 3
    alert_limit: int = 4
    backup_dir: str = ""
    backup_time: str = "03:00"
    # When set, records are read from JSON files instead of the backend
    offline_dir: str = ""

    @property
    def tz(self) -> ZoneInfo:
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(f"Unknown timezone {self.timezone!r}, using UTC")
            return ZoneInfo("UTC")

    @property
    def first_weekday(self) -> int:
        """Week start in `calendar` module numbering (MONDAY=0, SUNDAY=6)."""
        return 0 if self.week_start.lower() == "monday" else 6


def _parse_value(value: str) -> str:
    """Strip quotes, or inline comments from unquoted values."""
    if value.startswith('"') or value.startswith("'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def _parse_int(key: str, value: str, default: int) -> int:
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Invalid integer for {key.upper()}: {value!r}, keeping {default}")
        return default


def load_config(path: Path | None = None) -> Config:
    """Load configuration from bizdash.conf file."""
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
        value = _parse_value(value.strip())

        match key:
            case "supabase_url":
                config.supabase_url = value.rstrip("/")
            case "supabase_key":
                config.supabase_key = value
            case "access_token":
                config.access_token = value
            case "user_id":
                config.user_id = value
            case "timezone":
                config.timezone = value
            case "week_start":
                config.week_start = value.lower()
            case "due_soon_days":
                config.due_soon_days = _parse_int(key, value, config.due_soon_days)
            case "alert_window_days":
                config.alert_window_days = _parse_int(key, value, config.alert_window_days)
            case "alert_limit":
                config.alert_limit = _parse_int(key, value, config.alert_limit)
            case "backup_dir":
                config.backup_dir = value
            case "backup_time":
                config.backup_time = value
            case "offline_dir":
                config.offline_dir = value

    return config
