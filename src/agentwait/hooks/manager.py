"""Hook registration and removal for agentwait."""

from pathlib import Path

from ..errors import HookError
from ..logging import setup_logging
from ..settings import (
    claude_settings_path,
    is_installed,
    load_settings,
    merge_hooks_into_settings,
    remove_hooks_from_settings,
    save_settings,
)


class HookManager:
    """Registers the agentwait hook in Claude Code's settings.json."""

    def __init__(self, logger=None, settings_path: Path | None = None):
        """Initialize HookManager."""
        self.logger = logger or setup_logging("hooks")
        self.settings_path = settings_path or claude_settings_path()

    def install(self) -> None:
        """
        Register the hook for Stop and Notification events.

        Raises:
            HookError: If installation fails
        """
        try:
            self.logger.info("Installing agentwait hooks")

            settings = load_settings(self.settings_path)
            settings = merge_hooks_into_settings(settings)
            save_settings(settings, self.settings_path)

            self.logger.info(f"Hooks registered in {self.settings_path}")

        except Exception as e:
            self.logger.error(f"Hook installation failed: {e}")
            raise HookError(f"Failed to install hooks: {e}") from e

    def remove(self) -> None:
        """
        Unregister the hook from settings.json.

        Raises:
            HookError: If removal fails
        """
        try:
            self.logger.info("Removing agentwait hooks")

            settings = load_settings(self.settings_path)
            settings = remove_hooks_from_settings(settings)
            save_settings(settings, self.settings_path)

            self.logger.info(f"Hooks unregistered from {self.settings_path}")

        except Exception as e:
            self.logger.error(f"Hook removal failed: {e}")
            raise HookError(f"Failed to remove hooks: {e}") from e

    def is_installed(self) -> bool:
        """
        Check if hooks are currently registered.

        Returns:
            bool: True if hooks are registered, False otherwise
        """
        try:
            return is_installed(self.settings_path)
        except Exception as e:
            self.logger.warning(f"Error checking hook installation: {e}")
            return False
