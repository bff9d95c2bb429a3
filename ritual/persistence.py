import json
import sqlite3
from pathlib import Path

from . import config, db
from .core.errors import PersistenceReadError, PersistenceWriteError
from .core.models import Habit, Settings, State
from .lib.converters import (
    habit_to_record,
    record_to_habit,
    record_to_settings,
    settings_to_record,
)
from .lib.log import log

__all__ = ["HABITS_KEY", "SETTINGS_KEY", "PersistenceGateway"]

HABITS_KEY = "habits"
SETTINGS_KEY = "settings"


class PersistenceGateway:
    """Reads and writes the two durable records backing a HabitStore.

    Both records live in the sqlite `kv` table as JSON text. Writes are two
    independent statements; a crash between them can leave the records out of
    step, which load() tolerates by defaulting each record on its own.
    """

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path

    @property
    def path(self) -> Path:
        return self.db_path if self.db_path else config.DB_PATH

    def _read(self, key: str) -> object | None:
        try:
            with db.get_db(self.path) as conn:
                row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as e:
            raise PersistenceReadError(f"{key}: {e}") from e
        if row is None:
            return None
        try:
            return json.loads(row[0])
        except json.JSONDecodeError as e:
            raise PersistenceReadError(f"{key}: corrupt record ({e})") from e

    def _write(self, key: str, value: object) -> None:
        payload = json.dumps(value, ensure_ascii=False)
        try:
            with db.get_db(self.path) as conn:
                conn.execute(
                    "INSERT INTO kv (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP) "
                    "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at",
                    (key, payload),
                )
        except sqlite3.Error as e:
            raise PersistenceWriteError(f"{key}: {e}") from e

    def _load_habits(self) -> tuple[Habit, ...]:
        try:
            raw = self._read(HABITS_KEY)
        except PersistenceReadError as e:
            log(f"[persistence] read failed, starting with no habits: {e}")
            return ()
        if raw is None:
            return ()
        if not isinstance(raw, list):
            log(f"[persistence] {HABITS_KEY}: expected a list, got {type(raw).__name__}")
            return ()

        habits: list[Habit] = []
        seen: set[str] = set()
        for i, record in enumerate(raw):
            try:
                habit = record_to_habit(record)
            except ValueError as e:
                log(f"[persistence] skipping habit #{i}: {e}")
                continue
            if habit.id in seen:
                log(f"[persistence] skipping duplicate habit id {habit.id}")
                continue
            seen.add(habit.id)
            habits.append(habit)
        return tuple(habits)

    def _load_settings(self) -> Settings:
        try:
            raw = self._read(SETTINGS_KEY)
        except PersistenceReadError as e:
            log(f"[persistence] read failed, using default settings: {e}")
            return Settings()
        if raw is None:
            return Settings()
        try:
            return record_to_settings(raw)  # type: ignore[arg-type]
        except ValueError as e:
            log(f"[persistence] {SETTINGS_KEY}: {e}")
            return Settings()

    def load(self) -> State:
        """Read both records. Never raises; anything unreadable becomes a default."""
        try:
            db.init(self.path)
        except (OSError, sqlite3.Error) as e:
            log(f"[persistence] cannot open {self.path}: {e}")
            return State()
        return State(habits=self._load_habits(), settings=self._load_settings())

    def save(self, state: State) -> None:
        """Write both records. Failures are logged; the caller's state stays authoritative."""
        records: list[tuple[str, object]] = [
            (HABITS_KEY, [habit_to_record(h) for h in state.habits]),
            (SETTINGS_KEY, settings_to_record(state.settings)),
        ]
        for key, value in records:
            try:
                self._write(key, value)
            except PersistenceWriteError as e:
                log(f"[persistence] write failed: {e}")
