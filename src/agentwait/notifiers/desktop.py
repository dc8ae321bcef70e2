"""Desktop notification transports."""

import platform
import subprocess
from shutil import which

from ..errors import DesktopNotificationError


APP_NAME = "agentwait"

# Seconds to wait for the OS notification tool
COMMAND_TIMEOUT = 10


def _escape_applescript(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def _escape_powershell(text: str) -> str:
    return text.replace("'", "''")


def _run(cmd: list[str], tool: str) -> None:
    try:
        result = subprocess.run(
            cmd,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            text=True,
            timeout=COMMAND_TIMEOUT,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as e:
        raise DesktopNotificationError(f"{tool} failed: {e}") from e

    if result.returncode != 0:
        detail = (result.stderr or "").strip() or f"exit code {result.returncode}"
        raise DesktopNotificationError(f"{tool} failed: {detail}")


class MacDesktopNotifier:
    """macOS notifications via terminal-notifier, falling back to osascript."""

    def send(self, title: str, message: str, subtitle: str | None = None) -> None:
        if which("terminal-notifier"):
            cmd = [
                "terminal-notifier",
                "-title", title,
                "-message", message,
                "-sound", "default",
                "-group", APP_NAME,
                "-sender", "com.apple.Terminal",
            ]
            if subtitle:
                cmd += ["-subtitle", subtitle]
            _run(cmd, "terminal-notifier")
            return

        script = (
            f'display notification "{_escape_applescript(message)}" '
            f'with title "{_escape_applescript(title)}"'
        )
        if subtitle:
            script += f' subtitle "{_escape_applescript(subtitle)}"'
        script += ' sound name "Glass"'
        _run(["osascript", "-e", script], "osascript")

    def available(self) -> bool:
        return which("terminal-notifier") is not None or which("osascript") is not None

    def name(self) -> str:
        return "macOS Notification Center"


class LinuxDesktopNotifier:
    """Linux notifications via notify-send (libnotify)."""

    def send(self, title: str, message: str, subtitle: str | None = None) -> None:
        body = f"{subtitle}\n{message}" if subtitle else message
        _run(
            ["notify-send", "--app-name", APP_NAME, "--expire-time", "5000", title, body],
            "notify-send",
        )

    def available(self) -> bool:
        return which("notify-send") is not None

    def name(self) -> str:
        return "notify-send"


class WindowsDesktopNotifier:
    """Windows balloon notification via PowerShell."""

    def send(self, title: str, message: str, subtitle: str | None = None) -> None:
        body = f"{subtitle}: {message}" if subtitle else message
        script = (
            "Add-Type -AssemblyName System.Windows.Forms; "
            "$n = New-Object System.Windows.Forms.NotifyIcon; "
            "$n.Icon = [System.Drawing.SystemIcons]::Information; "
            "$n.Visible = $true; "
            f"$n.ShowBalloonTip(5000, '{_escape_powershell(title)}', "
            f"'{_escape_powershell(body)}', 'Info'); "
            "Start-Sleep -Seconds 5; $n.Dispose()"
        )
        _run(["powershell", "-NoProfile", "-Command", script], "PowerShell")

    def available(self) -> bool:
        return which("powershell") is not None

    def name(self) -> str:
        return "PowerShell"


def get_desktop_notifier():
    """
    Return the desktop notifier for this platform.

    Raises:
        DesktopNotificationError: If the platform has no usable notifier
    """
    system = platform.system()

    if system == "Darwin":
        notifier = MacDesktopNotifier()
    elif system == "Linux":
        notifier = LinuxDesktopNotifier()
    elif system == "Windows":
        notifier = WindowsDesktopNotifier()
    else:
        raise DesktopNotificationError(f"Unsupported platform: {system}")

    if not notifier.available():
        raise DesktopNotificationError(f"{notifier.name()} not available on {system}")
    return notifier
