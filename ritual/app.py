from collections.abc import Iterator
from contextlib import contextmanager

from . import config
from .notifiers import make_notifier
from .persistence import PersistenceGateway
from .scheduler import NotificationScheduler
from .store import HabitStore

__all__ = ["open_store", "session"]


def open_store() -> HabitStore:
    scheduler = NotificationScheduler(make_notifier(config.get_notifier()))
    return HabitStore.open(PersistenceGateway(), scheduler)


@contextmanager
def session() -> Iterator[HabitStore]:
    """A store for one command: queued saves and reminders are flushed on exit."""
    store = open_store()
    try:
        yield store
    finally:
        store.close()
