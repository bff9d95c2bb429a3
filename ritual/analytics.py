from collections.abc import Sequence
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from .core.models import WEEKDAYS, Frequency, Habit
from .lib.dates import trailing_days

__all__ = [
    "completion_rate",
    "describe_frequency",
    "rank_by_streak",
    "trend_labels",
    "weekly_trend",
]


def weekly_trend(habits: Sequence[Habit], today: date, days: int = 7) -> list[int]:
    """Completions per day over the trailing window, oldest first."""
    return [sum(1 for h in habits if h.completed_on(d)) for d in trailing_days(today, days)]


def trend_labels(today: date, days: int = 7) -> list[str]:
    return [d.strftime("%a") for d in trailing_days(today, days)]


def completion_rate(habits: Sequence[Habit], today: date) -> int:
    """Percent of habits completed today, rounded half-up. 0 when there are no habits."""
    if not habits:
        return 0
    done = sum(1 for h in habits if h.completed_on(today))
    pct = Decimal(done * 100) / Decimal(len(habits))
    return int(pct.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def rank_by_streak(habits: Sequence[Habit], limit: int | None = None) -> list[Habit]:
    ranked = sorted(habits, key=lambda h: h.streak, reverse=True)
    return ranked if limit is None else ranked[:limit]


def describe_frequency(habit: Habit) -> str:
    if habit.frequency is Frequency.DAILY:
        return "Everyday"
    if habit.frequency is Frequency.WEEKLY:
        return "Weekly"
    if habit.target_days:
        return ", ".join(_weekday_order(habit.target_days))
    return "Custom"


def _weekday_order(days: frozenset[str]) -> list[str]:
    known = [d for d in WEEKDAYS if d in days]
    return known + sorted(d for d in days if d not in WEEKDAYS)
