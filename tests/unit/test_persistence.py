import json
from datetime import date, time

from ritual import config, db
from ritual.core.models import Frequency, Habit, Settings, State
from ritual.persistence import HABITS_KEY, SETTINGS_KEY, PersistenceGateway

DAY = date(2026, 3, 18)


def _put(key: str, raw: str) -> None:
    with db.get_db() as conn:
        conn.execute("INSERT OR REPLACE INTO kv (key, value) VALUES (?, ?)", (key, raw))


def _get(key: str) -> object:
    with db.get_db() as conn:
        row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
    return json.loads(row[0]) if row else None


def _habit() -> Habit:
    return Habit(
        id="h1",
        title="read",
        start_date=date(2026, 3, 1),
        description="20 pages",
        icon="book",
        color="#5856D6",
        frequency=Frequency.CUSTOM,
        target_days=frozenset({"Mon", "Wed"}),
        completed_dates=frozenset({date(2026, 3, 17), date(2026, 3, 16)}),
        streak=2,
        longest_streak=4,
    )


def test_load_fresh_store_gives_defaults(tmp_ritual_dir):
    state = PersistenceGateway().load()
    assert state == State()
    assert state.settings == Settings(time(7, 0), "It's time to build your habits!", True)


def test_load_creates_missing_db(tmp_path):
    path = tmp_path / "nested" / "fresh.db"
    state = PersistenceGateway(path).load()
    assert state.habits == ()
    assert path.exists()


def test_save_writes_two_records(tmp_ritual_dir, frozen_today):
    PersistenceGateway().save(State(habits=(_habit(),), settings=Settings(time(19, 30), "now", False)))
    habits = _get(HABITS_KEY)
    settings = _get(SETTINGS_KEY)
    assert habits == [
        {
            "id": "h1",
            "title": "read",
            "description": "20 pages",
            "frequency": "custom",
            "targetDays": ["Mon", "Wed"],
            "icon": "book",
            "color": "#5856D6",
            "startDate": "2026-03-01",
            "completedDates": ["2026-03-16", "2026-03-17"],
            "streak": 2,
            "longestStreak": 4,
        }
    ]
    assert set(settings) == {"time", "message", "enabled"}
    assert isinstance(settings["time"], int)
    assert settings["message"] == "now"
    assert settings["enabled"] is False


def test_save_then_load(tmp_ritual_dir, frozen_today):
    gateway = PersistenceGateway()
    state = State(habits=(_habit(),), settings=Settings(time(19, 30), "now", False))
    gateway.save(state)
    assert gateway.load() == state


def test_corrupt_habits_fall_back_independently(tmp_ritual_dir, frozen_today):
    gateway = PersistenceGateway()
    gateway.save(State(settings=Settings(time(8, 0), "hi", True)))
    _put(HABITS_KEY, "{not json")
    state = gateway.load()
    assert state.habits == ()
    assert state.settings.message == "hi"
    assert "read failed" in config.LOG_FILE.read_text()


def test_corrupt_settings_fall_back_independently(tmp_ritual_dir, frozen_today):
    gateway = PersistenceGateway()
    gateway.save(State(habits=(_habit(),)))
    _put(SETTINGS_KEY, "[1, 2]")
    state = gateway.load()
    assert state.habits == (_habit(),)
    assert state.settings == Settings()


def test_bad_habit_entry_skipped(tmp_ritual_dir):
    good = {"id": "ok", "title": "walk", "startDate": "2026-03-01", "completedDates": ["2026-03-02"]}
    _put(HABITS_KEY, json.dumps([{"title": "no id"}, good, {"id": "x", "title": "t", "startDate": "soon"}]))
    state = PersistenceGateway().load()
    assert [h.id for h in state.habits] == ["ok"]
    assert state.habits[0].completed_dates == frozenset({date(2026, 3, 2)})


def test_duplicate_completed_dates_collapse(tmp_ritual_dir):
    record = {
        "id": "a",
        "title": "walk",
        "startDate": "2026-03-01",
        "completedDates": ["2026-03-02", "2026-03-02"],
        "streak": 1,
        "longestStreak": 0,
    }
    _put(HABITS_KEY, json.dumps([record]))
    habit = PersistenceGateway().load().habits[0]
    assert habit.completed_dates == frozenset({date(2026, 3, 2)})
    assert habit.longest_streak >= habit.streak


def test_partial_settings_use_defaults(tmp_ritual_dir):
    _put(SETTINGS_KEY, json.dumps({"message": "custom"}))
    settings = PersistenceGateway().load().settings
    assert settings.message == "custom"
    assert settings.reminder_time == time(7, 0)
    assert settings.enabled is True


def test_write_failure_is_logged_not_raised(tmp_ritual_dir):
    with db.get_db() as conn:
        conn.execute("DROP TABLE kv")
    PersistenceGateway().save(State(habits=(_habit(),)))
    assert "write failed" in config.LOG_FILE.read_text()


def test_malformed_habit_lists_skipped(tmp_ritual_dir):
    base = {"id": "a", "title": "walk", "startDate": "2026-03-01"}
    _put(
        HABITS_KEY,
        json.dumps(
            [
                {**base, "completedDates": 5},
                {**base, "id": "b", "targetDays": [["Mon"]]},
                {**base, "id": "c", "completedDates": [20260302]},
                {**base, "id": "ok", "targetDays": ["Mon"]},
            ]
        ),
    )
    state = PersistenceGateway().load()
    assert [h.id for h in state.habits] == ["ok"]
    assert "completedDates must be a list of strings" in config.LOG_FILE.read_text()


def test_out_of_range_settings_time_defaults(tmp_ritual_dir):
    for raw in ('{"time": 1e300, "message": "hi"}', '{"time": Infinity, "message": "hi"}'):
        _put(SETTINGS_KEY, raw)
        settings = PersistenceGateway().load().settings
        assert settings.reminder_time == time(7, 0)
        assert settings.message == "hi"
