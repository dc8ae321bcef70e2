"""Hook entry point invoked by the agent at lifecycle events.

The agent runs `agentwait hook` once per event and pipes a JSON object
to stdin. Each run makes one decision and exits:

    Stop          -> "Claude finished", unless stop notifications are suppressed
    Notification  -> the agent's own message (permission or idle prompt)
    anything else -> logged and ignored

Stop suppression is checked before the cooldown ledger, so a suppressed
event never uses up a cooldown slot.
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Any

from .config import DEFAULT_CONFIG, Config, load_config
from .errors import AgentWaitError, ConfigError, HookInputError
from .event_record import write_notification_event
from .ledger import JsonFileLedgerStore, LedgerStore, decide
from .notification import NotificationService


NOTIFY_TITLE = "Hey, Claude is waiting for you!"
NOTIFY_MSG_DONE = "Claude finished"

EVENT_STOP = "Stop"
EVENT_NOTIFICATION = "Notification"


@dataclass(frozen=True)
class HookEvent:
    """A parsed hook payload."""

    event_name: str | None
    message: str | None = None
    session_id: str = "unknown"
    cwd: str = ""
    notification_type: str | None = None
    stop_hook_active: Any = None

    @property
    def project(self) -> str:
        """Short project label derived from cwd, e.g. /home/me/src/app -> app."""
        if not self.cwd:
            return "unknown"
        return os.path.basename(os.path.normpath(self.cwd)) or "unknown"

    @property
    def short_session(self) -> str:
        return self.session_id[:8]


@dataclass(frozen=True)
class HookOutcome:
    """What the hook did with an event."""

    action: str  # "notified", "suppressed", "ignored", "failed"
    reason: str | None = None
    message: str | None = None


def parse_hook_input(raw: str) -> HookEvent:
    """
    Parse the JSON payload the agent writes to stdin.

    Args:
        raw: Raw stdin contents

    Returns:
        HookEvent: Parsed event

    Raises:
        HookInputError: If the payload is not a JSON object, or a
            Notification event carries no message
    """
    try:
        data = json.loads(raw.strip())
    except json.JSONDecodeError as e:
        raise HookInputError(f"Invalid hook input: {e}") from e

    if not isinstance(data, dict):
        raise HookInputError("Invalid hook input: expected a JSON object")

    event_name = data.get("hook_event_name")
    message = data.get("message")
    if event_name == EVENT_NOTIFICATION and (not isinstance(message, str) or not message):
        raise HookInputError("Notification event is missing its message")

    session_id = data.get("session_id")
    cwd = data.get("cwd")

    return HookEvent(
        event_name=event_name,
        message=message if isinstance(message, str) else None,
        session_id=session_id if isinstance(session_id, str) and session_id else "unknown",
        cwd=cwd if isinstance(cwd, str) else "",
        notification_type=data.get("notification_type"),
        stop_hook_active=data.get("stop_hook_active"),
    )


class HookHandler:
    """Classifies a hook event, applies suppression and cooldown, and notifies."""

    def __init__(
        self,
        config: Config | None = None,
        service: NotificationService | None = None,
        store: LedgerStore | None = None,
        logger: logging.Logger | None = None,
    ):
        self.logger = logger or logging.getLogger("agentwait.hook")
        self.config = config or self._load_config()
        self.service = service or NotificationService(self.config, self.logger)
        self.store = store or JsonFileLedgerStore()

    def _load_config(self) -> Config:
        try:
            return load_config()
        except ConfigError as e:
            self.logger.warning(f"{e}; using defaults")
            return DEFAULT_CONFIG

    def handle(self, event: HookEvent) -> HookOutcome:
        """
        Decide whether to notify for one event, and do so.

        Args:
            event: Parsed hook event

        Returns:
            HookOutcome: The action taken
        """
        prefix = f"[{event.project}] [{event.short_session}]"

        details = f"{prefix} event={event.event_name}"
        if event.notification_type:
            details += f" type={event.notification_type}"
        if event.stop_hook_active is not None:
            details += f" stop_active={event.stop_hook_active}"
        if event.message:
            details += f' msg="{event.message}"'
        self.logger.info(details)

        if event.event_name == EVENT_STOP:
            body = NOTIFY_MSG_DONE
            if self.config.suppress_stop_notifications:
                reason = "suppress_stop_notifications=true"
                self.logger.info(f'{prefix} SUPPRESSED: "{body}" reason={reason}')
                return HookOutcome("suppressed", reason, body)
        elif event.event_name == EVENT_NOTIFICATION:
            body = event.message
        else:
            self.logger.info(f"{prefix} unknown event type: {event.event_name}")
            return HookOutcome("ignored", f"unknown event type: {event.event_name}")

        cooldown_ms = self.config.notification_cooldown_ms
        if cooldown_ms > 0:
            decision = decide(event.session_id, event.event_name, cooldown_ms, store=self.store)
            if decision.throttled:
                self.logger.info(f'{prefix} SUPPRESSED: "{body}" reason={decision.reason}')
                return HookOutcome("suppressed", decision.reason, body)

        self.logger.info(f'{prefix} NOTIFY: "{body}"')
        write_notification_event(event.project, body, session_id=event.short_session)

        try:
            self.service.send(NOTIFY_TITLE, body, event.project)
        except AgentWaitError as e:
            self.logger.error(f"{prefix} Notification error: {e}")
            return HookOutcome("failed", str(e), body)

        return HookOutcome("notified", None, body)
