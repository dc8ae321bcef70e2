"""Last-notification record for external tooling.

Other tools read ~/.agentwait/last-notification.json to find out which
project triggered the most recent notification. The record is written
synchronously before the notification is sent, and is overwritten on
every attempt whether or not the send succeeds.
"""

import json
import time
from pathlib import Path

from .config import state_dir


EVENT_FILENAME = "last-notification.json"


def default_event_path() -> Path:
    return state_dir() / EVENT_FILENAME


def write_notification_event(
    project: str,
    message: str,
    session_id: str | None = None,
    tty: str | None = None,
    event_path: Path | None = None,
) -> None:
    """Write the notification event record. Failures are ignored."""
    if event_path is None:
        event_path = default_event_path()

    record = {
        "project": project,
        "sessionId": session_id or None,
        "message": message,
        "tty": tty or None,
        "timestamp": int(time.time() * 1000),
    }

    try:
        event_path.parent.mkdir(parents=True, exist_ok=True)
        event_path.write_text(json.dumps(record))
    except OSError:
        # Best effort - never block the notification itself
        pass


def read_notification_event(event_path: Path | None = None) -> dict | None:
    """Read the last notification record, or None if absent or unreadable."""
    if event_path is None:
        event_path = default_event_path()

    try:
        data = json.loads(event_path.read_text())
    except (OSError, json.JSONDecodeError):
        return None
    return data if isinstance(data, dict) else None
