"""Cross-process cooldown ledger for hook notifications.

Each hook invocation is its own short-lived process, so the only way to
know that a session was notified a moment ago is a file shared between
invocations. The ledger maps session ids to the last notification
actually sent:

    {"<session_id>": {"lastNotifyTime": <epoch ms>, "lastEventType": "Stop"}}

The file is read, modified and rewritten once per invocation. There is
no locking: two hooks racing on the same file can lose an update, which
at worst lets a duplicate notification through.
"""

import json
import math
import logging
import os
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .config import state_dir


COOLDOWN_FILENAME = "cooldown.json"

# Entries older than this are dropped on the next read
RETENTION_MS = 10 * 60 * 1000

logger = logging.getLogger("agentwait.ledger")


def default_ledger_path() -> Path:
    return state_dir() / COOLDOWN_FILENAME


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class LedgerEntry:
    """Last notification sent for one session."""

    last_notify_time: int
    last_event_type: str

    def to_dict(self) -> dict:
        return {"lastNotifyTime": self.last_notify_time, "lastEventType": self.last_event_type}

    @classmethod
    def from_dict(cls, data) -> "LedgerEntry | None":
        """Build an entry from its JSON form; None if the shape is wrong."""
        if not isinstance(data, dict):
            return None
        last_notify_time = data.get("lastNotifyTime")
        if not isinstance(last_notify_time, (int, float)) or isinstance(last_notify_time, bool):
            return None
        # json accepts NaN and Infinity, and 1e400 overflows to inf
        if not math.isfinite(last_notify_time):
            return None
        event_type = data.get("lastEventType")
        return cls(
            last_notify_time=int(last_notify_time),
            last_event_type=event_type if isinstance(event_type, str) else "",
        )


Ledger = dict[str, LedgerEntry]


class LedgerStore(Protocol):
    """Storage for the cooldown ledger."""

    def load(self) -> Ledger:
        """
        Load the ledger.

        Returns:
            Ledger: Stored entries, empty if nothing usable is stored
        """
        ...

    def save(self, ledger: Ledger) -> bool:
        """
        Persist the ledger.

        Returns:
            bool: True if the ledger was written
        """
        ...


class JsonFileLedgerStore:
    """Ledger kept as a single JSON object on disk."""

    def __init__(self, path: Path | None = None):
        self.path = path or default_ledger_path()

    def load(self) -> Ledger:
        try:
            data = json.loads(self.path.read_text())
        except (OSError, json.JSONDecodeError, UnicodeDecodeError):
            # Missing or corrupted file, start fresh
            return {}

        if not isinstance(data, dict):
            return {}

        ledger: Ledger = {}
        for session_id, raw in data.items():
            entry = LedgerEntry.from_dict(raw)
            if entry is not None:
                ledger[session_id] = entry
        return ledger

    def save(self, ledger: Ledger) -> bool:
        payload = {session_id: entry.to_dict() for session_id, entry in ledger.items()}
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w") as f:
                json.dump(payload, f, indent=2)
            os.replace(tmp_name, self.path)
            return True
        except OSError as e:
            logger.debug(f"Could not save cooldown ledger to {self.path}: {e}")
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass
            return False


@dataclass(frozen=True)
class ThrottleDecision:
    """Outcome of a cooldown check."""

    throttled: bool
    reason: str
    elapsed_ms: int | None = None
    cooldown_ms: int = 0


def evict_expired(ledger: Ledger, now: int) -> Ledger:
    """Return the ledger without entries older than RETENTION_MS."""
    return {
        session_id: entry
        for session_id, entry in ledger.items()
        if now - entry.last_notify_time <= RETENTION_MS
    }


def decide(
    session_id: str,
    event_type: str,
    cooldown_ms: int,
    store: LedgerStore | None = None,
    now: int | None = None,
) -> ThrottleDecision:
    """
    Decide whether a notification for this session should be throttled.

    A notification that goes through is recorded in the ledger, so a
    later invocation within the cooldown window is suppressed.

    Args:
        session_id: Session id assigned by the agent
        event_type: Hook event name, stored for diagnostics
        cooldown_ms: Minimum gap between notifications; <= 0 disables throttling
        store: Ledger storage. Defaults to ~/.agentwait/cooldown.json
        now: Current time in epoch milliseconds (for tests)

    Returns:
        ThrottleDecision: Whether to suppress, with figures for logging
    """
    if not cooldown_ms or cooldown_ms <= 0:
        return ThrottleDecision(throttled=False, reason="throttling disabled")

    if store is None:
        store = JsonFileLedgerStore()
    if now is None:
        now = now_ms()

    ledger = evict_expired(store.load(), now)

    entry = ledger.get(session_id)
    if entry is not None:
        elapsed = now - entry.last_notify_time
        if elapsed < cooldown_ms:
            store.save(ledger)
            return ThrottleDecision(
                throttled=True,
                reason=(
                    f"throttled ({round(elapsed / 1000)}s since last, "
                    f"cooldown={round(cooldown_ms / 1000)}s)"
                ),
                elapsed_ms=elapsed,
                cooldown_ms=cooldown_ms,
            )

    ledger[session_id] = LedgerEntry(last_notify_time=now, last_event_type=event_type)
    store.save(ledger)
    return ThrottleDecision(
        throttled=False,
        reason="not throttled",
        elapsed_ms=None if entry is None else now - entry.last_notify_time,
        cooldown_ms=cooldown_ms,
    )
