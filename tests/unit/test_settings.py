"""Tests for the settings module."""

import json

import pytest

from agentwait.errors import SettingsError
from agentwait.settings import (
    HOOK_COMMAND,
    HOOK_EVENTS,
    claude_settings_path,
    is_installed,
    load_settings,
    merge_hooks_into_settings,
    remove_hooks_from_settings,
    save_settings,
)


def our_entry():
    return {"matcher": "", "hooks": [{"type": "command", "command": HOOK_COMMAND}]}


def foreign_entry(command="other-tool notify"):
    return {"matcher": "", "hooks": [{"type": "command", "command": command}]}


class TestLoadSettings:
    """Tests for load_settings function."""

    def test_load_missing_settings_returns_empty_dict(self, tmp_home):
        """Should return empty dict if settings file doesn't exist."""
        assert load_settings(tmp_home / ".claude" / "settings.json") == {}

    def test_load_existing_settings(self, tmp_settings):
        """Should load existing settings."""
        tmp_settings.write_text(json.dumps({"key": "value"}))
        assert load_settings(tmp_settings) == {"key": "value"}

    def test_load_invalid_json_raises_error(self, tmp_settings):
        """Should raise SettingsError on invalid JSON."""
        tmp_settings.write_text("{ invalid json }")
        with pytest.raises(SettingsError):
            load_settings(tmp_settings)

    def test_load_non_object_raises_error(self, tmp_settings):
        tmp_settings.write_text("[]")
        with pytest.raises(SettingsError):
            load_settings(tmp_settings)

    def test_default_path(self, tmp_home):
        """Should use ~/.claude/settings.json if no path provided."""
        assert claude_settings_path() == tmp_home / ".claude" / "settings.json"
        assert load_settings() == {}


class TestSaveSettings:
    """Tests for save_settings function."""

    def test_save_settings_creates_file(self, tmp_home):
        """Should create settings file and parent directory."""
        path = tmp_home / ".claude" / "settings.json"
        save_settings({"key": "value"}, path)
        assert json.loads(path.read_text()) == {"key": "value"}

    def test_save_failure_raises(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("file")
        with pytest.raises(SettingsError):
            save_settings({}, blocker / "settings.json")


class TestMergeHooks:
    """Tests for merge_hooks_into_settings."""

    def test_adds_hooks_to_empty_settings(self):
        settings = merge_hooks_into_settings({})

        for event in HOOK_EVENTS:
            assert settings["hooks"][event] == [our_entry()]

    def test_preserves_other_settings(self):
        settings = merge_hooks_into_settings({"model": "opus"})
        assert settings["model"] == "opus"

    def test_preserves_foreign_hooks(self):
        settings = merge_hooks_into_settings({"hooks": {"Stop": [foreign_entry()]}})

        assert settings["hooks"]["Stop"] == [foreign_entry(), our_entry()]

    def test_idempotent(self):
        settings = merge_hooks_into_settings({})
        settings = merge_hooks_into_settings(settings)

        for event in HOOK_EVENTS:
            assert len(settings["hooks"][event]) == 1


class TestRemoveHooks:
    """Tests for remove_hooks_from_settings."""

    def test_removes_our_hooks_and_empty_object(self):
        settings = remove_hooks_from_settings(merge_hooks_into_settings({"model": "opus"}))
        assert settings == {"model": "opus"}

    def test_keeps_foreign_hooks(self):
        settings = merge_hooks_into_settings({"hooks": {"Stop": [foreign_entry()]}})

        settings = remove_hooks_from_settings(settings)

        assert settings == {"hooks": {"Stop": [foreign_entry()]}}

    def test_keeps_unrelated_events(self):
        settings = {"hooks": {"PreToolUse": [foreign_entry()]}}
        settings = remove_hooks_from_settings(merge_hooks_into_settings(settings))
        assert settings == {"hooks": {"PreToolUse": [foreign_entry()]}}

    def test_no_hooks_key(self):
        assert remove_hooks_from_settings({"a": 1}) == {"a": 1}


class TestIsInstalled:
    """Tests for is_installed function."""

    def test_not_installed_when_missing(self, tmp_settings):
        assert is_installed(tmp_settings) is False

    def test_installed_after_merge(self, tmp_settings):
        save_settings(merge_hooks_into_settings({}), tmp_settings)
        assert is_installed(tmp_settings) is True

    def test_partial_install_is_not_installed(self, tmp_settings):
        save_settings({"hooks": {"Stop": [our_entry()]}}, tmp_settings)
        assert is_installed(tmp_settings) is False

    def test_corrupt_settings_is_not_installed(self, tmp_settings):
        tmp_settings.write_text("{ nope")
        assert is_installed(tmp_settings) is False
