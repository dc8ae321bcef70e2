"""PTY runner with transparent I/O passthrough."""

import atexit
import fcntl
import logging
import os
import pty
import select
import signal
import sys
import termios
import threading
import tty
from typing import Callable, List, Optional

from .session import INACTIVITY_TIMEOUT, SessionMonitor


# I/O buffer size
BUFFER_SIZE = 4096

# Upper bound on how long select() blocks (seconds)
POLL_INTERVAL = 0.1


class Runner:
    """PTY wrapper that runs an agent and notifies when it goes idle."""

    def __init__(
        self,
        send: Callable[[str, str], None],
        timeout: float = INACTIVITY_TIMEOUT,
        logger: Optional[logging.Logger] = None,
    ):
        self.send = send
        self.timeout = timeout
        self.logger = logger or logging.getLogger("agentwait.runner")
        self.session: Optional[SessionMonitor] = None
        self.child_pid: Optional[int] = None
        self.master_fd: Optional[int] = None
        self.original_termios: Optional[list] = None
        self.exit_code: Optional[int] = None
        self._shut_down = False

    def run(self, command: List[str]) -> int:
        """
        Run a command in a PTY and watch it for inactivity.

        Returns the exit code of the command.
        """
        if not command:
            print("agentwait: missing command", file=sys.stderr)
            return 1

        self.session = SessionMonitor(
            command[0],
            notify=self._notify_in_background,
            timeout=self.timeout,
            tty=self._stdin_tty_name(),
            logger=self.logger.getChild("session"),
        )

        # Save terminal state before we modify anything
        self._save_terminal_state()
        atexit.register(self._restore_terminal_state)

        try:
            self.child_pid, self.master_fd = pty.fork()

            if self.child_pid == 0:
                # Child process - exec the command
                self._exec_child(command)
                # exec_child doesn't return on success

            self.logger.info(f"Started {command[0]} (pid {self.child_pid})")
            return self._run_parent()

        except Exception as e:
            self.logger.error(f"Runner failed: {e}")
            print(f"agentwait: {e}", file=sys.stderr)
            return 1
        finally:
            self.shutdown()
            atexit.unregister(self._restore_terminal_state)

    def shutdown(self, signum: Optional[int] = None) -> None:
        """Tear down the session; runs at most once.

        Child exit, SIGINT and SIGTERM all end up here. When a signal is
        the trigger, the child is terminated as well.
        """
        if self._shut_down:
            return
        self._shut_down = True

        reason = f"signal {signum}" if signum else "exit"
        self.logger.info(f"Shutting down ({reason}), cleaning up...")

        if self.session is not None:
            self.session.close()
        self._restore_terminal_state()

        if signum is not None:
            self.exit_code = 128 + signum
            if self.child_pid:
                try:
                    os.kill(self.child_pid, signal.SIGTERM)
                except ProcessLookupError:
                    pass

    def _exec_child(self, command: List[str]) -> None:
        """Execute the command in the child process."""
        try:
            os.execvp(command[0], command)
        except FileNotFoundError:
            print(f"agentwait: command not found: {command[0]}", file=sys.stderr)
            os._exit(127)
        except PermissionError:
            print(f"agentwait: permission denied: {command[0]}", file=sys.stderr)
            os._exit(126)
        except OSError as e:
            print(f"agentwait: {e}", file=sys.stderr)
            os._exit(1)

    def _run_parent(self) -> int:
        """Run the parent process I/O loop."""
        self._setup_signals()

        # Propagate initial window size to child
        self._propagate_winsize()

        # Set stdin to raw mode for transparent passthrough
        if sys.stdin.isatty():
            tty.setraw(sys.stdin.fileno())

        # Make master_fd non-blocking
        flags = fcntl.fcntl(self.master_fd, fcntl.F_GETFL)
        fcntl.fcntl(self.master_fd, fcntl.F_SETFL, flags | os.O_NONBLOCK)

        return self._io_loop()

    def _io_loop(self) -> int:
        """Main I/O multiplexing loop."""
        stdin_fd = sys.stdin.fileno()
        stdout_fd = sys.stdout.fileno()
        session = self.session

        while True:
            if self._shut_down:
                return self._reap_child()

            # Check if child is still alive
            try:
                pid, status = os.waitpid(self.child_pid, os.WNOHANG)
                if pid != 0:
                    self._drain_output(stdout_fd)
                    return self._exit_status(status)
            except ChildProcessError:
                return 1

            read_fds = [self.master_fd]
            if sys.stdin.isatty():
                read_fds.append(stdin_fd)

            # Wake up in time for the inactivity deadline
            wait = POLL_INTERVAL
            remaining = session.seconds_until_deadline()
            if remaining is not None:
                wait = min(wait, remaining)

            try:
                readable, _, _ = select.select(read_fds, [], [], wait)
            except InterruptedError:
                continue

            for fd in readable:
                if fd == self.master_fd:
                    # Output from child
                    try:
                        data = os.read(self.master_fd, BUFFER_SIZE)
                    except OSError:
                        # EIO once the child side closes; waitpid reaps it
                        continue
                    if data:
                        os.write(stdout_fd, data)
                        session.on_child_output(data)

                elif fd == stdin_fd:
                    # Input from user
                    try:
                        data = os.read(stdin_fd, BUFFER_SIZE)
                    except OSError:
                        continue
                    if data:
                        os.write(self.master_fd, data)
                        session.on_user_input(data)

            session.poll()

    def _drain_output(self, stdout_fd: int) -> None:
        """Copy whatever the child wrote before exiting."""
        while True:
            try:
                data = os.read(self.master_fd, BUFFER_SIZE)
            except OSError:
                return
            if not data:
                return
            os.write(stdout_fd, data)

    def _reap_child(self) -> int:
        """Collect the child after a signal-driven shutdown, without blocking."""
        try:
            os.waitpid(self.child_pid, os.WNOHANG)
        except ChildProcessError:
            pass
        return self.exit_code if self.exit_code is not None else 1

    @staticmethod
    def _exit_status(status: int) -> int:
        if os.WIFEXITED(status):
            return os.WEXITSTATUS(status)
        elif os.WIFSIGNALED(status):
            return 128 + os.WTERMSIG(status)
        return 1

    def _notify_in_background(self, title: str, message: str) -> None:
        """Dispatch without blocking the I/O loop."""
        thread = threading.Thread(
            target=self._send_notification,
            args=(title, message),
            name="agentwait-notify",
            daemon=True,
        )
        thread.start()

    def _send_notification(self, title: str, message: str) -> None:
        try:
            self.send(title, message)
        except Exception as e:
            self.logger.error(f"Notification error: {e}")

    def _setup_signals(self) -> None:
        """Set up signal handlers."""
        def handle_exit_signal(signum, frame):
            self.shutdown(signum)

        # Handle window resize
        def handle_sigwinch(signum, frame):
            self._propagate_winsize()

        signal.signal(signal.SIGINT, handle_exit_signal)
        signal.signal(signal.SIGTERM, handle_exit_signal)
        signal.signal(signal.SIGWINCH, handle_sigwinch)

    def _propagate_winsize(self) -> None:
        """Propagate terminal window size to the child PTY."""
        if not sys.stdin.isatty() or self.master_fd is None:
            return

        try:
            winsize = fcntl.ioctl(sys.stdin.fileno(), termios.TIOCGWINSZ, b'\x00' * 8)
            fcntl.ioctl(self.master_fd, termios.TIOCSWINSZ, winsize)
        except (OSError, termios.error):
            pass

    @staticmethod
    def _stdin_tty_name() -> Optional[str]:
        try:
            if sys.stdin.isatty():
                return os.ttyname(sys.stdin.fileno())
        except (OSError, ValueError):
            pass
        return None

    def _save_terminal_state(self) -> None:
        """Save the current terminal state for later restoration."""
        if sys.stdin.isatty():
            try:
                self.original_termios = termios.tcgetattr(sys.stdin.fileno())
            except termios.error:
                pass

    def _restore_terminal_state(self) -> None:
        """Restore the terminal to its original state."""
        if self.original_termios and sys.stdin.isatty():
            try:
                termios.tcsetattr(sys.stdin.fileno(), termios.TCSAFLUSH,
                                  self.original_termios)
            except termios.error:
                pass
