"""agentwait CLI - Notify when your coding agent is waiting for you."""

import json
import sys

import click

from . import __version__
from .config import (
    DEFAULT_CONFIG,
    NOTIFICATION_METHODS,
    Config,
    default_config_path,
    load_config,
    save_config,
    update_config,
)
from .errors import AgentWaitError, ConfigError, HookError, HookInputError
from .event_record import read_notification_event
from .hook import HookHandler, parse_hook_input
from .hooks.manager import HookManager
from .logging import setup_logging
from .notification import NotificationService
from .runner import Runner


PASSTHROUGH = {"ignore_unknown_options": True, "allow_interspersed_args": False}


def _load_config_or_defaults(logger) -> Config:
    """Load config for runtime commands; a broken file must not stop the agent."""
    try:
        return load_config()
    except ConfigError as e:
        logger.warning(f"{e}; using defaults")
        click.echo(f"agentwait: {e}; using defaults", err=True)
        return DEFAULT_CONFIG


def _run_agent(agent: str, args: tuple) -> None:
    logger = setup_logging("runner")
    logger.info(f"agentwait {agent} started")

    config = _load_config_or_defaults(logger)
    logger.info(f"Settings loaded: {json.dumps(config.to_dict())}")

    name = agent[:1].upper() + agent[1:]
    click.echo(f"You will be notified when {name} is waiting for you.\n")

    service = NotificationService(config, logger.getChild("notification"))
    runner = Runner(
        send=service.send,
        timeout=config.inactivity_timeout_ms / 1000.0,
        logger=logger,
    )
    sys.exit(runner.run([agent, *args]))


@click.group()
@click.version_option(__version__, prog_name="agentwait")
def cli():
    """Get notified when your coding agent is waiting for you."""


@cli.command(context_settings=PASSTHROUGH)
@click.argument("agent")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def run(agent, args):
    """Run AGENT in a wrapped terminal and notify when it goes idle."""
    _run_agent(agent, args)


@cli.command(context_settings=PASSTHROUGH)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def claude(args):
    """Run Claude Code wrapped."""
    _run_agent("claude", args)


@cli.command(context_settings=PASSTHROUGH)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def codex(args):
    """Run Codex CLI wrapped."""
    _run_agent("codex", args)


@cli.command()
def hook():
    """Handle a hook event from the agent (JSON on stdin)."""
    logger = setup_logging("hook")
    try:
        try:
            raw = click.get_text_stream("stdin").read()
        except UnicodeDecodeError as e:
            raise HookInputError(f"Hook input is not valid UTF-8: {e}") from e
        event = parse_hook_input(raw)
    except HookInputError as e:
        logger.error(str(e))
        click.echo(f"agentwait: {e}", err=True)
        sys.exit(1)

    HookHandler(logger=logger).handle(event)


@cli.command()
def on():
    """Turn notifications on."""
    _set_enabled(True)
    click.echo("Notifications enabled.")


@cli.command()
def off():
    """Turn notifications off."""
    _set_enabled(False)
    click.echo("Notifications disabled.")


def _set_enabled(enabled: bool) -> None:
    try:
        update_config(load_config(), notifications_enabled=enabled)
    except ConfigError as e:
        raise click.ClickException(str(e))


@cli.command()
def enable():
    """Register the agentwait hook with Claude Code."""
    try:
        HookManager().install()
    except HookError as e:
        raise click.ClickException(str(e))
    click.echo("Hooks installed. Restart Claude Code to apply.")


@cli.command()
def disable():
    """Remove the agentwait hook from Claude Code."""
    try:
        HookManager().remove()
    except HookError as e:
        raise click.ClickException(str(e))
    click.echo("Hooks removed.")


@cli.command()
@click.option("--show", is_flag=True, help="Show config without modifying")
@click.option("--reset", is_flag=True, help="Reset to defaults")
@click.option("--method", type=click.Choice(NOTIFICATION_METHODS), help="Notification method")
@click.option("--email", type=str, help="Email address (email method)")
@click.option("--phone-number", type=str, help="Phone number with country code (whatsapp method)")
@click.option("--telegram-chat-id", type=str, help="Telegram chat id (telegram method)")
@click.option("--webhook-url", type=str, help="Webhook URL (webhook method)")
@click.option("--slack-webhook-url", type=str, help="Slack incoming webhook URL (slack method)")
@click.option("--slack-username", type=str, help="Slack username to mention (slack method)")
@click.option("--license-key", type=str, help="License key for relay methods")
@click.option("--cooldown", type=click.IntRange(min=0), help="Seconds between hook notifications per session (0=off)")
@click.option("--suppress-stop/--no-suppress-stop", default=None, help="Suppress 'finished' hook notifications")
@click.option("--inactivity-timeout", type=click.FloatRange(min=0, min_open=True), help="Seconds of silence before notifying")
def config(show, reset, method, email, phone_number, telegram_chat_id, webhook_url,
           slack_webhook_url, slack_username, license_key, cooldown, suppress_stop,
           inactivity_timeout):
    """View or modify configuration."""
    try:
        if reset:
            save_config(DEFAULT_CONFIG)
            click.echo("Configuration reset to defaults.")
            return

        current = load_config()

        if show:
            click.echo(json.dumps(current.to_dict(), indent=2))
            return

        changes = {
            "notification_method": method,
            "email": email,
            "phone_number": phone_number,
            "telegram_chat_id": telegram_chat_id,
            "webhook_url": webhook_url,
            "slack_webhook_url": slack_webhook_url,
            "slack_username": slack_username,
            "license_key": license_key,
            "suppress_stop_notifications": suppress_stop,
        }
        changes = {key: value for key, value in changes.items() if value is not None}
        if cooldown is not None:
            changes["notification_cooldown_ms"] = cooldown * 1000
        if inactivity_timeout is not None:
            changes["inactivity_timeout_ms"] = int(inactivity_timeout * 1000)

        if not changes:
            click.echo(json.dumps(current.to_dict(), indent=2))
            return

        updated = update_config(current, **changes)
    except ConfigError as e:
        raise click.ClickException(str(e))

    click.echo("Configuration updated.")
    if not updated.is_method_configured():
        click.echo(
            f"Warning: '{updated.notification_method}' is missing required settings.",
            err=True,
        )


@cli.command()
def status():
    """Show configuration, hook registration and the last notification."""
    try:
        current = load_config()
    except ConfigError as e:
        raise click.ClickException(str(e))

    click.echo(f"Notifications: {'on' if current.notifications_enabled else 'off'}")
    configured = "configured" if current.is_method_configured() else "NOT CONFIGURED"
    click.echo(f"Method: {current.notification_method} ({configured})")
    click.echo(f"Hooks: {'installed' if HookManager().is_installed() else 'not installed'}")
    click.echo(f"Config file: {default_config_path()}")

    click.echo("\nConfiguration:")
    cooldown = current.notification_cooldown_ms // 1000
    click.echo(f"  Cooldown: {cooldown}s (0=off)")
    click.echo(f"  Suppress stop notifications: {current.suppress_stop_notifications}")
    click.echo(f"  Inactivity timeout: {current.inactivity_timeout_ms / 1000:g}s")

    event = read_notification_event()
    if event:
        click.echo(f"\nLast notification: [{event.get('project')}] {event.get('message')}")
    else:
        click.echo("\nLast notification: none")


@cli.command(name="test")
def test_notification():
    """Send a test notification with the current settings."""
    logger = setup_logging("notification")
    try:
        service = NotificationService(load_config(), logger)
        service.send("agentwait", "Test notification", "agentwait")
    except AgentWaitError as e:
        raise click.ClickException(str(e))
    click.echo("Test notification sent.")


if __name__ == "__main__":
    cli()
