import dataclasses
import threading
import uuid
from collections.abc import Callable, Iterable
from datetime import date, time

from .core.models import Frequency, Habit, HabitDraft, Settings, State
from .core.types import UNSET, Unset, is_set
from .effects import EffectQueue
from .lib import clock
from .lib.log import log
from .persistence import PersistenceGateway
from .scheduler import NotificationScheduler
from .streaks import current_streak

__all__ = ["HabitStore", "Observer"]

Observer = Callable[[State], None]


def _frequency(value: Frequency | str) -> Frequency | None:
    try:
        return Frequency(value)
    except ValueError:
        log(f"[store] unknown frequency {value!r}")
        return None


class HabitStore:
    """Single owner of the habit collection and settings.

    Mutations are serialized and commit a fresh immutable State before
    returning. Each commit runs observers inline, then queues a save and a
    reminder reconciliation on the effect queue. Unknown ids are no-ops.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        scheduler: NotificationScheduler,
        state: State | None = None,
        effects: EffectQueue | None = None,
    ):
        self.gateway = gateway
        self.scheduler = scheduler
        self._state = state if state is not None else State()
        self._effects = effects if effects is not None else EffectQueue(name="ritual-effects")
        self._lock = threading.RLock()
        self._observers: list[Observer] = []

    @classmethod
    def open(
        cls, gateway: PersistenceGateway, scheduler: NotificationScheduler
    ) -> "HabitStore":
        """Load persisted state, then bring reminders in line with it."""
        store = cls(gateway, scheduler, state=gateway.load())
        state = store.state
        today = clock.today()

        def reconcile() -> None:
            scheduler.reconcile(state, today)

        store._effects.submit(scheduler.setup)
        store._effects.submit(reconcile)
        return store

    # ── snapshots ───────────────────────────────────────────────────────────

    @property
    def state(self) -> State:
        return self._state

    @property
    def habits(self) -> tuple[Habit, ...]:
        return self._state.habits

    @property
    def settings(self) -> Settings:
        return self._state.settings

    def get_habit(self, habit_id: str) -> Habit | None:
        return next((h for h in self._state.habits if h.id == habit_id), None)

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    # ── commit ──────────────────────────────────────────────────────────────

    def _commit(self, state: State, today: date | None = None) -> None:
        """Publish state, notify observers, queue durable + reminder side effects.

        Reconciliation uses the calendar day of the commit, not of the worker.
        """
        today = today if today is not None else clock.today()
        self._state = state
        for observer in list(self._observers):
            try:
                observer(state)
            except Exception as e:
                log(f"[store] observer {getattr(observer, '__name__', observer)!r} failed: {e}")

        def save() -> None:
            self.gateway.save(state)

        def reconcile() -> None:
            self.scheduler.reconcile(state, today)

        self._effects.submit(save)
        self._effects.submit(reconcile)

    def _replace_habit(self, habit: Habit) -> State:
        habits = tuple(habit if h.id == habit.id else h for h in self._state.habits)
        return dataclasses.replace(self._state, habits=habits)

    # ── operations ──────────────────────────────────────────────────────────

    def add_habit(self, draft: HabitDraft, today: date | None = None) -> Habit:
        today = today if today is not None else clock.today()
        habit = Habit(
            id=str(uuid.uuid4()),
            title=draft.title,
            start_date=today,
            description=draft.description,
            icon=draft.icon,
            color=draft.color,
            frequency=_frequency(draft.frequency) or Frequency.DAILY,
            target_days=frozenset(draft.target_days),
        )
        with self._lock:
            self._commit(
                dataclasses.replace(self._state, habits=(*self._state.habits, habit)), today
            )
        return habit

    def update_habit(
        self,
        habit_id: str,
        *,
        title: str | Unset = UNSET,
        description: str | Unset = UNSET,
        icon: str | Unset = UNSET,
        color: str | Unset = UNSET,
        frequency: Frequency | str | Unset = UNSET,
        target_days: Iterable[str] | Unset = UNSET,
    ) -> Habit | None:
        changes: dict[str, object] = {}
        if is_set(title):
            changes["title"] = title
        if is_set(description):
            changes["description"] = description
        if is_set(icon):
            changes["icon"] = icon
        if is_set(color):
            changes["color"] = color
        if is_set(frequency) and (freq := _frequency(frequency)) is not None:
            changes["frequency"] = freq
        if is_set(target_days):
            changes["target_days"] = frozenset(target_days)

        with self._lock:
            habit = self.get_habit(habit_id)
            if habit is None:
                log(f"[store] update: no habit {habit_id}")
                return None
            if not changes:
                return habit
            updated = dataclasses.replace(habit, **changes)
            self._commit(self._replace_habit(updated))
        return updated

    def delete_habit(self, habit_id: str) -> bool:
        with self._lock:
            habits = tuple(h for h in self._state.habits if h.id != habit_id)
            if len(habits) == len(self._state.habits):
                log(f"[store] delete: no habit {habit_id}")
                return False
            self._commit(dataclasses.replace(self._state, habits=habits))
        return True

    def toggle_completion(self, habit_id: str, today: date | None = None) -> Habit | None:
        today = today if today is not None else clock.today()
        with self._lock:
            habit = self.get_habit(habit_id)
            if habit is None:
                log(f"[store] toggle: no habit {habit_id}")
                return None

            if habit.completed_on(today):
                dates = habit.completed_dates - {today}
            else:
                dates = habit.completed_dates | {today}
            streak = current_streak(dates, today)
            updated = dataclasses.replace(
                habit,
                completed_dates=dates,
                streak=streak,
                longest_streak=max(habit.longest_streak, streak),
            )
            state = self._replace_habit(updated)
            self._commit(state, today)
            if state.all_completed(today):
                self._effects.submit(self.scheduler.cancel_check_in)
        return updated

    def update_settings(self, reminder_time: time, message: str, enabled: bool) -> Settings:
        settings = Settings(reminder_time=reminder_time, message=message, enabled=enabled)
        with self._lock:
            self._commit(dataclasses.replace(self._state, settings=settings))
        return settings

    # ── lifecycle ───────────────────────────────────────────────────────────

    def flush(self) -> None:
        """Wait until queued saves and reconciliations have run."""
        self._effects.join()

    def close(self) -> None:
        self.flush()
        self._effects.close()
