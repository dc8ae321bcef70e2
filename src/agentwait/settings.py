"""Settings management for Claude Code hook registration."""

import json
from pathlib import Path

from .errors import SettingsError


HOOK_COMMAND = "agentwait hook"

# Claude Code events the hook listens to
HOOK_EVENTS = ("Stop", "Notification")


def claude_settings_path() -> Path:
    return Path.home() / ".claude" / "settings.json"


def load_settings(settings_path: Path | None = None) -> dict:
    """
    Load Claude Code settings from file.

    Args:
        settings_path: Path to settings.json. Defaults to ~/.claude/settings.json

    Returns:
        dict: Settings dictionary (empty dict if file doesn't exist)

    Raises:
        SettingsError: If file exists but is invalid JSON
    """
    if settings_path is None:
        settings_path = claude_settings_path()

    if not settings_path.exists():
        return {}

    try:
        with open(settings_path, "r") as f:
            settings = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        raise SettingsError(f"Failed to load settings from {settings_path}: {e}")

    if not isinstance(settings, dict):
        raise SettingsError(f"Failed to load settings from {settings_path}: not a JSON object")
    return settings


def save_settings(settings: dict, settings_path: Path | None = None) -> None:
    """
    Save Claude Code settings to file.

    Args:
        settings: Settings dictionary to save
        settings_path: Path to settings.json. Defaults to ~/.claude/settings.json

    Raises:
        SettingsError: If save fails
    """
    if settings_path is None:
        settings_path = claude_settings_path()

    try:
        settings_path.parent.mkdir(parents=True, exist_ok=True)
        with open(settings_path, "w") as f:
            json.dump(settings, f, indent=2)
    except OSError as e:
        raise SettingsError(f"Failed to save settings to {settings_path}: {e}")


def _is_our_entry(entry) -> bool:
    return isinstance(entry, dict) and any(
        isinstance(h, dict) and h.get("command") == HOOK_COMMAND
        for h in entry.get("hooks", [])
    )


def merge_hooks_into_settings(settings: dict) -> dict:
    """
    Add agentwait hooks to settings without overwriting existing hooks.

    Args:
        settings: Existing settings dictionary

    Returns:
        dict: Modified settings with agentwait hooks added
    """
    hooks = settings.setdefault("hooks", {})

    for event in HOOK_EVENTS:
        entries = hooks.setdefault(event, [])
        if not any(_is_our_entry(entry) for entry in entries):
            entries.append(
                {
                    "matcher": "",
                    "hooks": [{"type": "command", "command": HOOK_COMMAND}],
                }
            )

    return settings


def remove_hooks_from_settings(settings: dict) -> dict:
    """
    Remove agentwait hooks from settings.

    Args:
        settings: Settings dictionary

    Returns:
        dict: Modified settings with agentwait hooks removed
    """
    if "hooks" not in settings:
        return settings

    hooks = settings["hooks"]
    for event in HOOK_EVENTS:
        if event not in hooks:
            continue
        hooks[event] = [entry for entry in hooks[event] if not _is_our_entry(entry)]
        if not hooks[event]:
            del hooks[event]

    # Clean up empty hooks object
    if not hooks:
        del settings["hooks"]

    return settings


def is_installed(settings_path: Path | None = None) -> bool:
    """
    Check if agentwait hooks are registered for every hook event.

    Args:
        settings_path: Path to settings.json. Defaults to ~/.claude/settings.json

    Returns:
        bool: True if hooks are registered, False otherwise
    """
    try:
        settings = load_settings(settings_path)
    except SettingsError:
        return False

    hooks = settings.get("hooks", {})
    return all(
        any(_is_our_entry(entry) for entry in hooks.get(event, []))
        for event in HOOK_EVENTS
    )
