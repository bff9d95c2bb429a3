from datetime import time

from ritual.core.models import HabitDraft
from ritual.scheduler import CHECK_IN_ID, DAILY_ID


def _ids(notifier) -> list[str]:
    return sorted(r.identifier for r in notifier.scheduled())


def test_empty_store_schedules_nothing(store, notifier):
    store.flush()
    assert notifier.scheduled() == []


def test_first_habit_schedules_daily_and_check_in(store, notifier):
    store.add_habit(HabitDraft(title="read"))
    store.flush()
    assert _ids(notifier) == [DAILY_ID, CHECK_IN_ID]


def test_completing_all_cancels_check_in_then_new_habit_restores_it(store, notifier):
    a = store.add_habit(HabitDraft(title="read"))
    b = store.add_habit(HabitDraft(title="walk"))
    store.toggle_completion(a.id)
    store.flush()
    assert CHECK_IN_ID in _ids(notifier)

    store.toggle_completion(b.id)
    store.flush()
    assert _ids(notifier) == [DAILY_ID]

    store.add_habit(HabitDraft(title="stretch"))
    store.flush()
    assert _ids(notifier) == [DAILY_ID, CHECK_IN_ID]


def test_unchecking_brings_check_in_back(store, notifier):
    a = store.add_habit(HabitDraft(title="read"))
    store.toggle_completion(a.id)
    store.flush()
    assert _ids(notifier) == [DAILY_ID]
    store.toggle_completion(a.id)
    store.flush()
    assert _ids(notifier) == [DAILY_ID, CHECK_IN_ID]


def test_disabling_reminders_cancels_all(store, notifier):
    store.add_habit(HabitDraft(title="read"))
    store.update_settings(time(7, 0), "go", False)
    store.flush()
    assert notifier.scheduled() == []


def test_settings_change_moves_daily_reminder(store, notifier):
    store.add_habit(HabitDraft(title="read"))
    store.update_settings(time(6, 15), "rise", True)
    store.flush()
    daily = notifier.get(DAILY_ID)
    assert (daily.trigger.hour, daily.trigger.minute) == (6, 15)
    assert daily.content.body == "rise"


def test_deleting_last_habit_clears_reminders(store, notifier):
    a = store.add_habit(HabitDraft(title="read"))
    store.delete_habit(a.id)
    store.flush()
    assert notifier.scheduled() == []


def test_denied_permission_does_not_block_mutations(store, notifier):
    notifier.granted = False
    habit = store.add_habit(HabitDraft(title="read"))
    store.toggle_completion(habit.id)
    store.flush()
    assert store.get_habit(habit.id).streak == 1
    assert notifier.scheduled() == []
