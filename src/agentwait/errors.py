"""Custom exception types for the agentwait notification system."""


class AgentWaitError(Exception):
    """Base exception for all agentwait errors."""

    pass


class ConfigError(AgentWaitError):
    """Raised when configuration loading, validation, or saving fails."""

    pass


class SettingsError(AgentWaitError):
    """Raised when the agent's settings.json cannot be loaded or saved."""

    pass


class HookError(AgentWaitError):
    """Raised when hook registration or removal fails."""

    pass


class HookInputError(AgentWaitError):
    """Raised when the JSON payload handed to the hook is malformed."""

    pass


class NotificationError(AgentWaitError):
    """Raised when a notification cannot be delivered."""

    pass


class NotConfiguredError(NotificationError):
    """Raised when the selected notification method is missing its settings."""

    pass


class LicenseError(NotificationError):
    """Raised when a paid notification method has no valid license."""

    pass


class TransportError(NotificationError):
    """Raised when an HTTP notification fails or returns a non-2xx status."""

    pass


class DesktopNotificationError(NotificationError):
    """Raised when the local OS notification tool fails or is missing."""

    pass
