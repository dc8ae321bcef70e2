"""Configuration management for agentwait."""

import json
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path

from .errors import ConfigError


NOTIFICATION_METHODS = ("desktop", "email", "whatsapp", "telegram", "slack", "webhook")

# Methods delivered through the hosted relay; these need a license key
PAID_METHODS = frozenset({"email", "whatsapp", "telegram", "slack"})

DEFAULT_RELAY_URL = "https://www.heyagent.dev/api/notification"

# Optional per-method settings, each a string or null
STRING_FIELDS = (
    "email",
    "phone_number",
    "telegram_chat_id",
    "webhook_url",
    "slack_webhook_url",
    "slack_username",
    "license_key",
)

# Output silence that marks the wrapped agent as waiting
INACTIVITY_TIMEOUT_MS = 5000


def state_dir() -> Path:
    """Directory holding config, cooldown ledger, event record and log."""
    override = os.environ.get("AGENTWAIT_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".agentwait"


def default_config_path() -> Path:
    override = os.environ.get("AGENTWAIT_CONFIG")
    if override:
        return Path(override).expanduser()
    return state_dir() / "config.json"


def is_paid_method(method: str) -> bool:
    return method in PAID_METHODS


@dataclass(frozen=True)
class Config:
    """Immutable configuration for agentwait."""

    notification_method: str = "desktop"
    notifications_enabled: bool = True
    email: str | None = None
    phone_number: str | None = None
    telegram_chat_id: str | None = None
    webhook_url: str | None = None
    slack_webhook_url: str | None = None
    slack_username: str | None = None
    license_key: str | None = None
    relay_url: str = DEFAULT_RELAY_URL
    suppress_stop_notifications: bool = False
    notification_cooldown_ms: int = 0
    inactivity_timeout_ms: int = INACTIVITY_TIMEOUT_MS

    def validate(self) -> tuple[bool, str | None]:
        """
        Validate configuration values.

        Returns:
            tuple[bool, str | None]: (is_valid, error_message)
        """
        if self.notification_method not in NOTIFICATION_METHODS:
            return False, (
                f"notification_method must be one of: {', '.join(NOTIFICATION_METHODS)}"
            )

        if not isinstance(self.notifications_enabled, bool):
            return False, "notifications_enabled must be true or false"

        if not isinstance(self.suppress_stop_notifications, bool):
            return False, "suppress_stop_notifications must be true or false"

        if (
            not isinstance(self.notification_cooldown_ms, int)
            or isinstance(self.notification_cooldown_ms, bool)
            or self.notification_cooldown_ms < 0
        ):
            return False, "notification_cooldown_ms must be a non-negative integer"

        if (
            not isinstance(self.inactivity_timeout_ms, int)
            or isinstance(self.inactivity_timeout_ms, bool)
            or self.inactivity_timeout_ms <= 0
        ):
            return False, "inactivity_timeout_ms must be a positive integer"

        for field_name in STRING_FIELDS:
            if not isinstance(getattr(self, field_name), (str, type(None))):
                return False, f"{field_name} must be a string"

        if not isinstance(self.relay_url, str) or not self.relay_url:
            return False, "relay_url must be a non-empty string"

        return True, None

    def is_method_configured(self, method: str | None = None) -> bool:
        """
        Check that the settings a notification method needs are present.

        Args:
            method: Method to check. Defaults to the configured method.

        Returns:
            bool: True if the method can be used as configured
        """
        method = method or self.notification_method
        if not self.notifications_enabled:
            return True

        if method == "email":
            return bool(self.email)
        if method == "whatsapp":
            return bool(self.phone_number)
        if method == "telegram":
            return bool(self.telegram_chat_id)
        if method == "slack":
            return bool(self.slack_webhook_url) and bool(self.slack_username)
        if method == "webhook":
            return bool(self.webhook_url)

        return True

    def to_dict(self) -> dict:
        return asdict(self)


DEFAULT_CONFIG = Config()


def load_config(config_path: Path | None = None) -> Config:
    """
    Load configuration from file or create defaults.

    Args:
        config_path: Path to config file. Defaults to ~/.agentwait/config.json

    Returns:
        Config: Loaded or default configuration

    Raises:
        ConfigError: If config file exists but is invalid
    """
    if config_path is None:
        config_path = default_config_path()

    # If config doesn't exist, create it with defaults
    if not config_path.exists():
        save_config(DEFAULT_CONFIG, config_path)
        return DEFAULT_CONFIG

    try:
        with open(config_path, "r") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        raise ConfigError(f"Failed to load config from {config_path}: {e}")

    if not isinstance(data, dict):
        raise ConfigError(f"Invalid configuration in {config_path}: expected a JSON object")

    # Unknown keys are ignored so older and newer files both load
    known = {f.name for f in fields(Config)}
    config = Config(**{key: value for key, value in data.items() if key in known})

    is_valid, error = config.validate()
    if not is_valid:
        raise ConfigError(f"Invalid configuration in {config_path}: {error}")

    return config


def save_config(config: Config, config_path: Path | None = None) -> None:
    """
    Save configuration to file.

    Args:
        config: Config object to save
        config_path: Path to config file. Defaults to ~/.agentwait/config.json

    Raises:
        ConfigError: If save fails
    """
    if config_path is None:
        config_path = default_config_path()

    is_valid, error = config.validate()
    if not is_valid:
        raise ConfigError(f"Cannot save invalid configuration: {error}")

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w") as f:
            json.dump(config.to_dict(), f, indent=2)
    except OSError as e:
        raise ConfigError(f"Failed to save config to {config_path}: {e}")


def update_config(config: Config, config_path: Path | None = None, **changes) -> Config:
    """
    Apply changes to a config and persist the result.

    Raises:
        ConfigError: If the resulting config is invalid or cannot be saved
    """
    try:
        updated = replace(config, **changes)
    except TypeError as e:
        raise ConfigError(f"Unknown configuration key: {e}")
    save_config(updated, config_path)
    return updated
