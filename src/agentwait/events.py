"""Event types emitted by the session monitor."""

from dataclasses import dataclass
from enum import Enum


class Phase(Enum):
    """Activity phase of a wrapped agent session."""
    IDLE = "idle"
    WORKING = "working"
    NOTIFIED = "notified"


@dataclass
class PhaseChanged:
    """Emitted when the session moves from one phase to another."""
    timestamp: float
    previous: Phase
    current: Phase
    reason: str  # "submit", "typing", "inactivity"


@dataclass
class NotificationFired:
    """Emitted when the inactivity deadline produces a notification."""
    timestamp: float
    title: str
    message: str
