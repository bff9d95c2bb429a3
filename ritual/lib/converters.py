import math
from datetime import date
from typing import Any

from ..core.models import (
    DEFAULT_COLOR,
    DEFAULT_ICON,
    DEFAULT_MESSAGE,
    DEFAULT_REMINDER_TIME,
    Frequency,
    Habit,
    Settings,
)
from .dates import epoch_ms_to_time, parse_day, time_to_epoch_ms

HabitRecord = dict[str, Any]
SettingsRecord = dict[str, Any]


def _parse_date(val) -> date | None:
    """Parse a date value that may be an ISO string or already a date."""
    if isinstance(val, date):
        return val
    if isinstance(val, str) and val:
        return parse_day(val)
    return None


def _parse_int(val, default: int = 0) -> int:
    if isinstance(val, bool):
        return default
    if isinstance(val, int):
        return max(val, 0)
    if isinstance(val, float) and math.isfinite(val):
        return max(int(val), 0)
    return default


def _str_list(val, field: str) -> list[str]:
    if val is None:
        return []
    if not isinstance(val, list) or not all(isinstance(v, str) for v in val):
        raise ValueError(f"{field} must be a list of strings")
    return val


def _str_or(val, default: str) -> str:
    return val if isinstance(val, str) and val else default


def habit_to_record(habit: Habit) -> HabitRecord:
    return {
        "id": habit.id,
        "title": habit.title,
        "description": habit.description,
        "frequency": habit.frequency.value,
        "targetDays": sorted(habit.target_days),
        "icon": habit.icon,
        "color": habit.color,
        "startDate": habit.start_date.isoformat(),
        "completedDates": sorted(d.isoformat() for d in habit.completed_dates),
        "streak": habit.streak,
        "longestStreak": habit.longest_streak,
    }


def record_to_habit(record: HabitRecord) -> Habit:
    """
    Converts one stored habit object into a Habit.
    Raises ValueError when the record lacks an id or title, carries bad dates,
    or holds anything but a list of strings in completedDates or targetDays.
    """
    if not isinstance(record, dict):
        raise ValueError(f"habit record must be an object, got {type(record).__name__}")
    habit_id = record.get("id")
    title = record.get("title")
    if not isinstance(habit_id, str) or not habit_id:
        raise ValueError("habit record has no id")
    if not isinstance(title, str):
        raise ValueError(f"habit {habit_id} has no title")

    completed = frozenset(
        d
        for d in (_parse_date(v) for v in _str_list(record.get("completedDates"), "completedDates"))
        if d is not None
    )
    target_days = frozenset(_str_list(record.get("targetDays"), "targetDays"))
    start = _parse_date(record.get("startDate")) or min(completed, default=None)
    if start is None:
        raise ValueError(f"habit {habit_id} has no start date")

    raw_frequency = record.get("frequency")
    try:
        frequency = Frequency(raw_frequency) if isinstance(raw_frequency, str) else Frequency.DAILY
    except ValueError:
        frequency = Frequency.DAILY

    streak = _parse_int(record.get("streak"))
    longest = max(_parse_int(record.get("longestStreak")), streak)
    return Habit(
        id=habit_id,
        title=title,
        start_date=start,
        description=_str_or(record.get("description"), ""),
        icon=_str_or(record.get("icon"), DEFAULT_ICON),
        color=_str_or(record.get("color"), DEFAULT_COLOR),
        frequency=frequency,
        target_days=target_days,
        completed_dates=completed,
        streak=streak,
        longest_streak=longest,
    )


def settings_to_record(settings: Settings) -> SettingsRecord:
    return {
        "time": time_to_epoch_ms(settings.reminder_time),
        "message": settings.message,
        "enabled": settings.enabled,
    }


def record_to_settings(record: SettingsRecord) -> Settings:
    """Missing fields fall back to defaults individually."""
    if not isinstance(record, dict):
        raise ValueError(f"settings record must be an object, got {type(record).__name__}")
    raw_time = record.get("time")
    reminder_time = DEFAULT_REMINDER_TIME
    if isinstance(raw_time, (int, float)) and not isinstance(raw_time, bool):
        try:
            reminder_time = epoch_ms_to_time(raw_time)
        except ValueError:
            reminder_time = DEFAULT_REMINDER_TIME
    message = record.get("message")
    enabled = record.get("enabled")
    return Settings(
        reminder_time=reminder_time,
        message=message if isinstance(message, str) else DEFAULT_MESSAGE,
        enabled=enabled if isinstance(enabled, bool) else True,
    )
