"""Wall-clock source for "today".

Every date in ritual is a local calendar date: the day as shown on the
device's clock in its local time zone, midnight to midnight. Nothing here
converts through UTC.
"""

from datetime import date, datetime


def now() -> datetime:
    return datetime.now()


def today() -> date:
    return now().date()
