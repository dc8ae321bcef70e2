"""Activity state machine for a wrapped agent session.

The wrapper has no semantic view of what the agent is doing, so it
infers activity from I/O alone. Submitting a line puts the session in
WORKING; every chunk of agent output pushes a single inactivity deadline
forward. When the deadline passes while WORKING, the agent is presumed
to be waiting for the user and one notification fires. NOTIFIED makes
that notification one-shot per idle period; typing anything other than
Enter drops back to IDLE and cancels the deadline.
"""

import logging
import os
import time
from typing import Callable, Optional

from .config import INACTIVITY_TIMEOUT_MS
from .event_record import write_notification_event
from .events import NotificationFired, Phase, PhaseChanged


# Carriage return and line feed mark a submission
SUBMIT_BYTES = frozenset({0x0D, 0x0A})

INACTIVITY_TIMEOUT = INACTIVITY_TIMEOUT_MS / 1000.0


def notification_messages(agent_name: str) -> tuple[str, str]:
    """Return the (title, message) pair announcing that an agent is waiting."""
    name = os.path.basename(agent_name) or agent_name
    name = name[:1].upper() + name[1:]
    return f"Hey, {name} is waiting for you!", f"{name} stopped"


class InactivityTimer:
    """A single cancellable deadline.

    Arming replaces any earlier deadline, so at most one is ever pending.
    """

    def __init__(self, timeout: float, clock: Callable[[], float] = time.monotonic):
        self.timeout = timeout
        self.clock = clock
        self.deadline: Optional[float] = None

    @property
    def pending(self) -> bool:
        return self.deadline is not None

    def arm(self) -> None:
        self.deadline = self.clock() + self.timeout

    def cancel(self) -> None:
        self.deadline = None

    def remaining(self) -> Optional[float]:
        """Seconds until the deadline, or None if nothing is pending."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - self.clock())

    def expired(self) -> bool:
        return self.deadline is not None and self.clock() >= self.deadline


class SessionMonitor:
    """Idle/working/notified state machine for one wrapped agent."""

    def __init__(
        self,
        agent_name: str,
        notify: Callable[[str, str], None],
        timeout: float = INACTIVITY_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
        on_event: Optional[Callable] = None,
        project: Optional[str] = None,
        tty: Optional[str] = None,
        record: Callable[..., None] = write_notification_event,
        logger: Optional[logging.Logger] = None,
    ):
        self.agent_name = agent_name
        self.title, self.message = notification_messages(agent_name)
        self.phase = Phase.IDLE
        self.timer = InactivityTimer(timeout, clock)
        self.clock = clock
        self.on_event = on_event
        self.project = project or os.path.basename(os.getcwd())
        self.tty = tty
        self.closed = False
        self._notify = notify
        self._record = record
        self.logger = logger or logging.getLogger("agentwait.session")

    def on_child_output(self, data: bytes) -> None:
        """Record a chunk of agent output; re-arms the inactivity deadline."""
        if not data or self.closed:
            return
        self.timer.arm()

    def on_user_input(self, data: bytes) -> None:
        """Record a chunk of user input.

        Only the first byte is inspected: Enter means the prompt was
        submitted and output is expected, anything else means the user
        is still composing.
        """
        if not data or self.closed:
            return

        if data[0] in SUBMIT_BYTES:
            self.logger.debug("Submit detected, state -> working")
            self._set_phase(Phase.WORKING, "submit")
        else:
            self._set_phase(Phase.IDLE, "typing")
            self.timer.cancel()

    def seconds_until_deadline(self) -> Optional[float]:
        if self.closed:
            return None
        return self.timer.remaining()

    def poll(self) -> bool:
        """
        Fire the inactivity deadline if it has passed.

        Returns:
            bool: True if a notification was dispatched
        """
        if self.closed or not self.timer.expired():
            return False
        self.timer.cancel()
        return self._on_deadline()

    def close(self) -> None:
        """Cancel the pending deadline; later polls are inert."""
        self.timer.cancel()
        self.closed = True

    def _on_deadline(self) -> bool:
        self.logger.debug(f"Inactivity check triggered, state is: {self.phase.value}")
        if self.phase is not Phase.WORKING:
            return False

        self._set_phase(Phase.NOTIFIED, "inactivity")
        self._record(self.project, self.message, tty=self.tty)

        if self.on_event:
            self.on_event(
                NotificationFired(timestamp=self.clock(), title=self.title, message=self.message)
            )

        try:
            self._notify(self.title, self.message)
        except Exception as e:
            self.logger.error(f"Notification error: {e}")
        return True

    def _set_phase(self, phase: Phase, reason: str) -> None:
        previous = self.phase
        self.phase = phase
        if previous is not phase and self.on_event:
            self.on_event(
                PhaseChanged(
                    timestamp=self.clock(),
                    previous=previous,
                    current=phase,
                    reason=reason,
                )
            )
