"""
Tests for Settings.
Uses monkeypatch to control environment variables without polluting the real env.
"""

import pytest
from pydantic import ValidationError

from contacts2android.config import MAX_PHOTO_SIZE, Settings, get_settings

ENV_VARS = (
    "ADB_PATH",
    "ANDROID_SERIAL",
    "ADB_TIMEOUT",
    "CONTACTS_ACCOUNT_TYPE",
    "CONTACTS_ACCOUNT_NAME",
    "MAX_PHOTO_SIZE",
    "HTTP_TIMEOUT",
    "LOG_LEVEL",
    "HOST_PACKAGE",
    "ENTRY_ACTIVITY",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)


# ─────────────────────────────────────────────────────────────────────────────
# Defaults
# ─────────────────────────────────────────────────────────────────────────────


class TestDefaults:
    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.adb_path == "adb"
        assert settings.device_serial is None
        assert settings.adb_timeout == 30.0
        assert settings.max_photo_size == MAX_PHOTO_SIZE == 1048576
        assert settings.log_level == "INFO"
        assert settings.entry_activity == ".MainActivity"
        assert settings.account_type is None


# ─────────────────────────────────────────────────────────────────────────────
# Environment overrides
# ─────────────────────────────────────────────────────────────────────────────


class TestEnvironment:
    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("ANDROID_SERIAL", "emulator-5554")
        monkeypatch.setenv("ADB_TIMEOUT", "5")
        monkeypatch.setenv("CONTACTS_ACCOUNT_TYPE", "com.google")
        monkeypatch.setenv("max_photo_size", "2048")
        settings = Settings(_env_file=None)
        assert settings.device_serial == "emulator-5554"
        assert settings.adb_timeout == 5.0
        assert settings.account_type == "com.google"
        assert settings.max_photo_size == 2048

    def test_reads_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("HOST_PACKAGE=io.example.app\nLOG_LEVEL=DEBUG\n")
        settings = Settings(_env_file=env_file)
        assert settings.host_package == "io.example.app"
        assert settings.log_level == "DEBUG"

    def test_photo_size_must_be_positive(self, monkeypatch):
        monkeypatch.setenv("MAX_PHOTO_SIZE", "0")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)


class TestGetSettings:
    def test_is_cached(self):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()


class TestLogLevel:
    def test_level_is_normalized(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", " debug ")
        assert Settings(_env_file=None).log_level == "DEBUG"

    def test_unknown_level_is_rejected(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "LOUD")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)
