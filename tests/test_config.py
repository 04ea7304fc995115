"""Tests for configuration loading."""

from pathlib import Path
from zoneinfo import ZoneInfo

from bizdash.config import Config, load_config


def write_conf(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "bizdash.conf"
    path.write_text(text)
    return path


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "absent.conf")
        assert config == Config()

    def test_parses_keys(self, tmp_path):
        path = write_conf(
            tmp_path,
            """
# backend
SUPABASE_URL = "https://abc.supabase.co/"   # project url
SUPABASE_KEY = 'anon-key'
USER_ID = user-123
TIMEZONE = Europe/Lisbon
WEEK_START = Monday
DUE_SOON_DAYS = 4
ALERT_LIMIT = 10
BACKUP_TIME = 02:15
OFFLINE_DIR = ~/bizdash/offline # local copy
""",
        )
        config = load_config(path)
        assert config.supabase_url == "https://abc.supabase.co"
        assert config.supabase_key == "anon-key"
        assert config.user_id == "user-123"
        assert config.timezone == "Europe/Lisbon"
        assert config.week_start == "monday"
        assert config.due_soon_days == 4
        assert config.alert_limit == 10
        assert config.backup_time == "02:15"
        assert config.offline_dir == "~/bizdash/offline"

    def test_bad_integer_keeps_default(self, tmp_path):
        path = write_conf(tmp_path, "ALERT_WINDOW_DAYS = soon\n")
        assert load_config(path).alert_window_days == 3

    def test_ignores_unknown_and_malformed_lines(self, tmp_path):
        path = write_conf(tmp_path, "NOT_A_KEY = 1\njust text\n")
        assert load_config(path) == Config()


class TestConfigProperties:
    def test_first_weekday(self):
        assert Config(week_start="sunday").first_weekday == 6
        assert Config(week_start="monday").first_weekday == 0

    def test_tz(self):
        assert Config(timezone="Europe/Lisbon").tz == ZoneInfo("Europe/Lisbon")

    def test_unknown_tz_falls_back_to_utc(self):
        assert Config(timezone="Mars/Olympus").tz == ZoneInfo("UTC")
