"""HTTP notification transports: generic webhook and the hosted relay."""

from datetime import datetime, timezone

import requests

from .. import __version__
from ..errors import LicenseError, NotConfiguredError, TransportError


REQUEST_TIMEOUT = 10
USER_AGENT = f"agentwait/{__version__}"


def _post(url: str, payload: dict, headers: dict, label: str) -> requests.Response:
    try:
        return requests.post(url, json=payload, headers=headers, timeout=REQUEST_TIMEOUT)
    except requests.RequestException as e:
        raise TransportError(f"{label} notification failed: {e}") from e


class WebhookNotifier:
    """POSTs a JSON payload to a user-supplied URL."""

    def __init__(self, url: str | None):
        self.url = url

    def send(self, title: str, message: str, subtitle: str | None = None) -> None:
        if not self.url:
            raise NotConfiguredError("Webhook URL not configured")

        payload = {
            "title": title,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "source": "agentwait",
        }
        headers = {"User-Agent": USER_AGENT}

        response = _post(self.url, payload, headers, "Webhook")
        if not response.ok:
            raise TransportError(
                f"Webhook notification failed: {response.status_code} {response.reason}"
            )

    def name(self) -> str:
        return "Webhook"


class RelayNotifier:
    """Sends email, WhatsApp, Telegram and Slack messages through the relay.

    The relay authenticates with the user's license key.
    """

    def __init__(self, method: str, config):
        self.method = method
        self.config = config

    def send(self, title: str, message: str, subtitle: str | None = None) -> None:
        payload = {
            "title": title,
            "message": message,
            "method": self.method,
            "email": self.config.email,
            "phoneNumber": self.config.phone_number,
            "chatId": self.config.telegram_chat_id,
            "slackWebhookUrl": self.config.slack_webhook_url,
            "slackUsername": self.config.slack_username,
        }
        headers = {"User-Agent": USER_AGENT}
        if self.config.license_key:
            headers["Authorization"] = f"License {self.config.license_key}"

        response = _post(self.config.relay_url, payload, headers, self.method)

        if response.status_code in (401, 403):
            raise LicenseError(
                "Your license is invalid or revoked. Run 'agentwait config --license-key KEY'."
            )
        if not response.ok:
            raise TransportError(f"{self.method} notification failed: {response.status_code}")

    def name(self) -> str:
        return f"Relay ({self.method})"
