"""Notification transports."""

from .base import Notifier
from .desktop import (
    LinuxDesktopNotifier,
    MacDesktopNotifier,
    WindowsDesktopNotifier,
    get_desktop_notifier,
)
from .webhook import RelayNotifier, WebhookNotifier

__all__ = [
    "Notifier",
    "MacDesktopNotifier",
    "LinuxDesktopNotifier",
    "WindowsDesktopNotifier",
    "get_desktop_notifier",
    "WebhookNotifier",
    "RelayNotifier",
]
