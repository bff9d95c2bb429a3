from fncli import cli

from . import config
from .app import session
from .core.errors import ValidationError
from .lib.dates import parse_reminder_time
from .lib.errors import echo
from .render import render_reminders, render_settings


@cli("ritual", name="remind", flags={"at": ["--at"], "message": ["-m", "--message"]})
def remind(
    at: str | None = None, message: str | None = None, on: bool = False, off: bool = False
) -> None:
    """Show or change the daily reminder: --at 7:30, -m "text", --on / --off"""
    if on and off:
        raise ValidationError("pick one: --on or --off")
    reminder_time = None
    if at is not None:
        reminder_time = parse_reminder_time(at)
        if reminder_time is None:
            raise ValidationError(f"can't read time '{at}' (try 7:30, 19:05 or 8pm)")
    if message is not None and not message.strip():
        raise ValidationError("reminder message cannot be empty")

    with session() as store:
        current = store.settings
        if reminder_time is None and message is None and not on and not off:
            echo(render_settings(current))
            return
        enabled = current.enabled
        if on:
            enabled = True
        elif off:
            enabled = False
        settings = store.update_settings(
            reminder_time if reminder_time is not None else current.reminder_time,
            message.strip() if message is not None else current.message,
            enabled,
        )
        echo(render_settings(settings))


@cli("ritual", name="reminders")
def reminders() -> None:
    """List reminders currently registered with the notifier"""
    with session() as store:
        store.flush()
        echo(f"notifier: {config.get_notifier()}")
        echo(render_reminders(store.scheduler.notifier.scheduled()))


@cli("ritual", name="notifier", flags={"name": []})
def notifier(name: str | None = None) -> None:
    """Show or set the reminder backend (launchd, memory, none)"""
    if name is None:
        echo(config.get_notifier())
        return
    try:
        config.set_notifier(name.lower())
    except ValueError as e:
        raise ValidationError(str(e)) from e
    echo(f"notifier: {name.lower()}")
