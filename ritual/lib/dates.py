import re
from datetime import date, datetime, time, timedelta

from dateutil import parser as dateutil_parser
from dateutil.parser import ParserError

from . import clock

_TIME_RE = re.compile(r"^\d{1,2}(:\d{2}\s*(am|pm)?|\s*(am|pm))$")


def parse_day(val: str) -> date:
    """Parse an ISO calendar date, tolerating a trailing time component."""
    return date.fromisoformat(val.split("T")[0])


def shift_days(day: date, n: int) -> date:
    """Move n whole calendar days (negative for the past)."""
    return day + timedelta(days=n)


def trailing_days(today: date, n: int = 7) -> list[date]:
    """The n calendar days ending at today, oldest first."""
    return [shift_days(today, -i) for i in range(n - 1, -1, -1)]


def time_to_epoch_ms(t: time, on: date | None = None) -> int:
    """Encode a time-of-day as the local instant on a calendar day, in epoch ms."""
    day = on if on is not None else clock.today()
    return int(datetime.combine(day, t).timestamp() * 1000)


def epoch_ms_to_time(ms: int | float) -> time:
    """Local hour:minute of an epoch-ms instant. Raises ValueError when out of range."""
    try:
        local = datetime.fromtimestamp(ms / 1000)
    except (OverflowError, OSError, ValueError) as e:
        raise ValueError(f"timestamp {ms!r} out of range") from e
    return time(local.hour, local.minute)


def parse_reminder_time(val: str) -> time | None:
    """Parses a time-of-day string (e.g. '7:30', '19:05', '8pm', '7.30am')."""
    raw = val.strip().lower()
    raw = re.sub(r"^(\d{1,2})\.(\d{2})", r"\1:\2", raw)
    if not _TIME_RE.match(raw):
        return None
    try:
        parsed = dateutil_parser.parse(raw, default=datetime.combine(clock.today(), time(0, 0)))
    except (ParserError, ValueError, OverflowError):
        return None
    return time(parsed.hour, parsed.minute)


def format_time(t: time) -> str:
    return f"{t.hour:02d}:{t.minute:02d}"
