from collections.abc import Collection
from datetime import date

from .lib.dates import shift_days

__all__ = ["current_streak"]


def current_streak(dates: Collection[date], today: date) -> int:
    """Consecutive completed days ending today, or yesterday if today is still open.

    An unchecked today never breaks a run that ended yesterday. Steps are whole
    local calendar days.
    """
    cursor = today if today in dates else shift_days(today, -1)
    streak = 0
    while cursor in dates:
        streak += 1
        cursor = shift_days(cursor, -1)
    return streak
