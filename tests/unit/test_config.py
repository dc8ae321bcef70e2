"""Tests for the config module."""

import json

import pytest

from agentwait.config import (
    DEFAULT_CONFIG,
    INACTIVITY_TIMEOUT_MS,
    Config,
    default_config_path,
    is_paid_method,
    load_config,
    save_config,
    state_dir,
    update_config,
)
from agentwait.errors import ConfigError


class TestConfig:
    """Tests for Config dataclass."""

    def test_default_config_values(self):
        """Config should have sensible defaults."""
        config = Config()
        assert config.notification_method == "desktop"
        assert config.notifications_enabled is True
        assert config.suppress_stop_notifications is False
        assert config.notification_cooldown_ms == 0
        assert config.inactivity_timeout_ms == INACTIVITY_TIMEOUT_MS == 5000

    def test_config_is_frozen(self):
        """Config should be immutable."""
        config = Config()
        with pytest.raises(AttributeError):
            config.notification_method = "email"

    def test_validate_defaults(self):
        is_valid, error = DEFAULT_CONFIG.validate()
        assert is_valid
        assert error is None

    def test_validate_unknown_method(self):
        is_valid, error = Config(notification_method="pigeon").validate()
        assert not is_valid
        assert "notification_method" in error

    def test_validate_negative_cooldown(self):
        is_valid, error = Config(notification_cooldown_ms=-1).validate()
        assert not is_valid
        assert "non-negative" in error

    def test_validate_cooldown_must_be_int(self):
        is_valid, _ = Config(notification_cooldown_ms="60").validate()
        assert not is_valid

    def test_validate_timeout_positive(self):
        is_valid, error = Config(inactivity_timeout_ms=0).validate()
        assert not is_valid
        assert "positive" in error

    @pytest.mark.parametrize("field", ["email", "phone_number", "webhook_url", "license_key"])
    def test_validate_string_fields(self, field):
        is_valid, error = Config(**{field: 5}).validate()
        assert not is_valid
        assert field in error

    def test_load_rejects_non_string_email(self, config_file):
        path = config_file(notification_method="email", email=5)
        with pytest.raises(ConfigError, match="email must be a string"):
            load_config(path)

    def test_validate_enabled_must_be_bool(self):
        is_valid, _ = Config(notifications_enabled="yes").validate()
        assert not is_valid


class TestIsMethodConfigured:
    """Tests for per-method required settings."""

    def test_desktop_always_configured(self):
        assert Config().is_method_configured("desktop")

    @pytest.mark.parametrize(
        "method, fields",
        [
            ("email", {"email": "me@example.com"}),
            ("whatsapp", {"phone_number": "+15555550100"}),
            ("telegram", {"telegram_chat_id": "12345"}),
            ("slack", {"slack_webhook_url": "https://hooks.slack.com/services/x", "slack_username": "me"}),
            ("webhook", {"webhook_url": "https://example.com/hook"}),
        ],
    )
    def test_configured_with_required_fields(self, method, fields):
        assert Config(notification_method=method, **fields).is_method_configured()

    @pytest.mark.parametrize("method", ["email", "whatsapp", "telegram", "slack", "webhook"])
    def test_unconfigured_without_fields(self, method):
        assert not Config(notification_method=method).is_method_configured()

    def test_slack_needs_username_too(self):
        config = Config(slack_webhook_url="https://hooks.slack.com/services/x")
        assert not config.is_method_configured("slack")

    def test_disabled_notifications_count_as_configured(self):
        config = Config(notification_method="email", notifications_enabled=False)
        assert config.is_method_configured()


class TestPaths:
    """Tests for state and config locations."""

    def test_state_dir_under_home(self, tmp_home):
        assert state_dir() == tmp_home / ".agentwait"

    def test_state_dir_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("AGENTWAIT_HOME", str(tmp_path / "elsewhere"))
        assert state_dir() == tmp_path / "elsewhere"

    def test_config_path_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("AGENTWAIT_CONFIG", str(tmp_path / "custom.json"))
        assert default_config_path() == tmp_path / "custom.json"

    def test_paid_methods(self):
        assert is_paid_method("email")
        assert is_paid_method("slack")
        assert not is_paid_method("desktop")
        assert not is_paid_method("webhook")


class TestLoadConfig:
    """Tests for load_config function."""

    def test_missing_file_creates_defaults(self, tmp_home):
        config = load_config()

        assert config == DEFAULT_CONFIG
        path = tmp_home / ".agentwait" / "config.json"
        assert json.loads(path.read_text())["notification_method"] == "desktop"

    def test_loads_values(self, config_file):
        path = config_file(notification_method="webhook", webhook_url="https://x", notification_cooldown_ms=30000)

        config = load_config(path)

        assert config.notification_method == "webhook"
        assert config.webhook_url == "https://x"
        assert config.notification_cooldown_ms == 30000
        assert config.suppress_stop_notifications is False

    def test_unknown_keys_ignored(self, config_file):
        path = config_file(startup={"skipNews": True}, notification_method="desktop")
        assert load_config(path) == DEFAULT_CONFIG

    def test_invalid_json_raises(self, state_dir):
        path = state_dir / "config.json"
        path.write_text("{ invalid")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_non_object_raises(self, state_dir):
        path = state_dir / "config.json"
        path.write_text("[]")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_invalid_values_raise(self, config_file):
        path = config_file(notification_cooldown_ms=-5)
        with pytest.raises(ConfigError, match="non-negative"):
            load_config(path)


class TestSaveConfig:
    """Tests for save_config and update_config."""

    def test_round_trip(self, tmp_path):
        path = tmp_path / "config.json"
        config = Config(notification_method="telegram", telegram_chat_id="42")

        save_config(config, path)

        assert load_config(path) == config

    def test_save_invalid_raises(self, tmp_path):
        with pytest.raises(ConfigError):
            save_config(Config(notification_method="fax"), tmp_path / "config.json")

    def test_save_unwritable_raises(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("file")
        with pytest.raises(ConfigError):
            save_config(Config(), blocker / "config.json")

    def test_update_config_persists(self, tmp_path):
        path = tmp_path / "config.json"
        updated = update_config(Config(), path, notifications_enabled=False)

        assert updated.notifications_enabled is False
        assert load_config(path).notifications_enabled is False

    def test_update_config_unknown_key(self, tmp_path):
        with pytest.raises(ConfigError):
            update_config(Config(), tmp_path / "config.json", volume=50)
