"""Tests for settings loading (config.load_settings)."""

from __future__ import annotations

import pytest

from return_claim_bot.config import Settings, load_settings

REQUIRED = {
    "SLACK_BOT_TOKEN": "xoxb-1",
    "GOOGLE_CLIENT_ID": "cid",
    "GOOGLE_CLIENT_SECRET": "secret",
    "GOOGLE_REFRESH_TOKEN": "rt",
    "SPREADSHEET_ID": "sheet",
    "DRIVE_FOLDER_ID": "folder",
}


@pytest.fixture
def env(monkeypatch):
    for name in list(REQUIRED) + ["SLACK_SIGNING_SECRET", "SLACK_APP_TOKEN"]:
        monkeypatch.delenv(name, raising=False)
    for name, value in REQUIRED.items():
        monkeypatch.setenv(name, value)
    return monkeypatch


class TestLoadSettings:
    def test_loads_required(self, env):
        settings = load_settings()
        assert isinstance(settings, Settings)
        assert settings.slack_bot_token == "xoxb-1"
        assert settings.drive_folder_id == "folder"
        assert settings.slack_signing_secret is None
        assert settings.slack_app_token is None

    def test_optional_tokens(self, env):
        env.setenv("SLACK_SIGNING_SECRET", "shh")
        env.setenv("SLACK_APP_TOKEN", "xapp-1")
        settings = load_settings()
        assert settings.slack_signing_secret == "shh"
        assert settings.slack_app_token == "xapp-1"

    def test_missing_names_every_variable(self, env):
        env.delenv("SPREADSHEET_ID")
        env.setenv("DRIVE_FOLDER_ID", "   ")
        with pytest.raises(ValueError) as exc_info:
            load_settings()
        assert "SPREADSHEET_ID" in str(exc_info.value)
        assert "DRIVE_FOLDER_ID" in str(exc_info.value)

    def test_settings_frozen(self, env):
        settings = load_settings()
        with pytest.raises(Exception):
            settings.sheet_name = "Other"
