"""Base protocol for notification transports."""

from typing import Protocol


class Notifier(Protocol):
    """Interface for a single notification transport."""

    def send(self, title: str, message: str, subtitle: str | None = None) -> None:
        """
        Deliver a notification.

        Args:
            title: Notification title
            message: Notification body
            subtitle: Optional subtitle (used by desktop transports)

        Raises:
            NotificationError: If delivery fails
        """
        ...

    def name(self) -> str:
        """
        Get human-readable name of the transport.

        Returns:
            str: Transport name (e.g., "notify-send", "Webhook")
        """
        ...
