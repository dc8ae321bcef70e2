"""Notification dispatch with method selection."""

import logging

from .config import Config, is_paid_method
from .errors import LicenseError, NotConfiguredError, NotificationError
from .notifiers.base import Notifier
from .notifiers.desktop import get_desktop_notifier
from .notifiers.webhook import RelayNotifier, WebhookNotifier


def get_notifier(config: Config) -> Notifier:
    """
    Return the transport for the configured notification method.

    Args:
        config: Current configuration

    Returns:
        Notifier: Transport for config.notification_method

    Raises:
        NotificationError: If the desktop transport is unavailable
    """
    method = config.notification_method or "desktop"

    if is_paid_method(method):
        return RelayNotifier(method, config)
    if method == "webhook":
        return WebhookNotifier(config.webhook_url)
    return get_desktop_notifier()


class NotificationService:
    """Sends notifications through whatever method the user configured."""

    def __init__(self, config: Config, logger: logging.Logger | None = None):
        self.config = config
        self.logger = logger or logging.getLogger("agentwait.notification")

    def send(self, title: str, message: str, subtitle: str | None = None) -> None:
        """
        Send a notification.

        Does nothing when notifications are switched off.

        Args:
            title: Notification title (required)
            message: Notification body (required)
            subtitle: Optional subtitle, e.g. the project name

        Raises:
            NotificationError: If the title or message is missing
            LicenseError: If a paid method is selected without a license key
            NotConfiguredError: If the method is missing its settings
            TransportError: If an HTTP transport fails
            DesktopNotificationError: If the OS notification tool fails
        """
        if not title:
            raise NotificationError("Notification title is required")
        if not message:
            raise NotificationError("Notification message is required")

        if not self.config.notifications_enabled:
            self.logger.debug("Notifications disabled, skipping")
            return

        method = self.config.notification_method or "desktop"

        if is_paid_method(method) and not self.config.license_key:
            raise LicenseError(
                "Pro notifications require a license. Run 'agentwait config --license-key KEY'."
            )

        if not self.config.is_method_configured(method):
            raise NotConfiguredError(
                f"Notification method '{method}' is not configured. Run 'agentwait config'."
            )

        notifier = get_notifier(self.config)
        notifier.send(title, message, subtitle)
        self.logger.info(f"{method} notification sent via {notifier.name()}")
