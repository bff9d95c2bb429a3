from collections.abc import Callable
from datetime import date
from typing import TypeVar

from .core.errors import NotificationPermissionDenied, PlatformUnsupported
from .core.models import State
from .lib import clock
from .lib.log import log
from .notifiers import Content, Notifier, Trigger

__all__ = [
    "CHECK_IN_CONTENT",
    "CHECK_IN_ID",
    "CHECK_IN_TRIGGER",
    "DAILY_ID",
    "DAILY_TITLE",
    "NotificationScheduler",
]

DAILY_ID = "daily_reminder"
DAILY_TITLE = "Habit Reminder"

CHECK_IN_ID = "smart_reminder_8pm"
CHECK_IN_TRIGGER = Trigger(hour=20, minute=0)
CHECK_IN_CONTENT = Content(
    title="Check-in",
    body="Don't forget to complete your habits before the day ends!",
)

R = TypeVar("R")


class NotificationScheduler:
    """Keeps the notifier's reminders in line with the store's state.

    Every call into the notifier is guarded: a denied permission or an
    unsupported platform turns the call into a logged no-op, so scheduling can
    never fail a data mutation.
    """

    def __init__(self, notifier: Notifier):
        self.notifier = notifier

    def _guard(self, action: str, fn: Callable[[], R]) -> R | None:
        try:
            return fn()
        except (NotificationPermissionDenied, PlatformUnsupported) as e:
            log(f"[scheduler] {action} skipped: {e}")
        except Exception as e:
            log(f"[scheduler] {action} failed: {type(e).__name__}: {e}")
        return None

    def setup(self) -> None:
        self._guard("setup", self.notifier.setup)

    def reconcile(self, state: State, today: date | None = None) -> None:
        today = today if today is not None else clock.today()
        settings = state.settings

        self._guard("cancel all", self.notifier.cancel_all)
        if not settings.enabled or not state.habits:
            return

        daily = Content(title=DAILY_TITLE, body=settings.message)
        trigger = Trigger(hour=settings.reminder_time.hour, minute=settings.reminder_time.minute)
        self._guard(
            "daily reminder",
            lambda: self.notifier.schedule_repeating(daily, trigger, DAILY_ID),
        )

        if not state.all_completed(today):
            self._guard(
                "check-in reminder",
                lambda: self.notifier.schedule_repeating(
                    CHECK_IN_CONTENT, CHECK_IN_TRIGGER, CHECK_IN_ID
                ),
            )

    def cancel_check_in(self) -> None:
        self._guard("cancel check-in", lambda: self.notifier.cancel_by_id(CHECK_IN_ID))
