import calendar
from collections.abc import Sequence
from datetime import date

from .analytics import (
    completion_rate,
    describe_frequency,
    rank_by_streak,
    trend_labels,
    weekly_trend,
)
from .core.models import Habit, Settings
from .lib import ansi
from .lib.dates import format_time
from .notifiers import Reminder

__all__ = [
    "render_detail",
    "render_habit",
    "render_habits",
    "render_reminders",
    "render_settings",
    "render_stats",
]

TOP_STREAKS = 3


def render_habit(habit: Habit, today: date) -> str:
    status = ansi.green("✓") if habit.completed_on(today) else "□"
    title = ansi.tint(habit.title, habit.color)
    meta = ansi.muted(f"{describe_frequency(habit)} · streak {habit.streak}")
    id_str = ansi.dim(f"[{habit.id[:8]}]")
    return f"  {status} {title}  {meta}  {id_str}"


def render_habits(habits: Sequence[Habit], today: date) -> str:
    if not habits:
        return "no habits yet. start your journey: ritual add <title>"
    header = ansi.white(f"{today:%A, %B} {today.day}".upper())
    return "\n".join([header, *(render_habit(h, today) for h in habits)])


def _month_grid(habit: Habit, today: date) -> list[str]:
    """Calendar of today's month, Monday first; completed days carry a ✓."""
    first_weekday, ndays = calendar.monthrange(today.year, today.month)
    cells = ["    "] * first_weekday
    for day in range(1, ndays + 1):
        if habit.completed_on(date(today.year, today.month, day)):
            cells.append(ansi.tint(f"{day:>2}✓", habit.color) + " ")
        else:
            cells.append(ansi.muted(f"{day:>2} ") + " ")
    header = "".join(f"{name[:2]:<4}" for name in calendar.day_abbr)
    rows = ["".join(cells[i : i + 7]).rstrip() for i in range(0, len(cells), 7)]
    return [f"  {ansi.dim(header.rstrip())}", *(f"  {row}" for row in rows)]


def render_detail(habit: Habit, today: date) -> str:
    ndays = calendar.monthrange(today.year, today.month)[1]
    done = sum(1 for d in habit.completed_dates if (d.year, d.month) == (today.year, today.month))
    lines = [ansi.bold(ansi.tint(habit.title, habit.color))]
    if habit.description:
        lines.append(ansi.muted(habit.description))
    lines.append(f"{habit.icon} · {describe_frequency(habit)} · since {habit.start_date.isoformat()}")
    lines.append(ansi.dim(f"[{habit.id[:8]}]"))
    lines.append("")
    lines.append(f"{ansi.white('CURRENT STREAK:')} {ansi.orange(str(habit.streak))}")
    lines.append(f"{ansi.white('BEST STREAK:')} {habit.longest_streak}")
    lines.append("")
    lines.append(ansi.white(f"HISTORY ({today:%B} {today.year}):".upper()))
    lines.extend(_month_grid(habit, today))
    lines.append(ansi.muted(f"  {done}/{ndays} days"))
    return "\n".join(lines)


def _bar(count: int, peak: int, width: int = 12) -> str:
    if peak == 0:
        return ""
    return "█" * max(round(width * count / peak), 1 if count else 0)


def render_stats(habits: Sequence[Habit], today: date) -> str:
    trend = weekly_trend(habits, today)
    peak = max(trend, default=0)
    lines = [ansi.white("LAST 7 DAYS:")]
    for label, count in zip(trend_labels(today), trend, strict=True):
        lines.append(f"  {label.lower()}  {count:>2}  {ansi.blue(_bar(count, peak))}")

    done = sum(1 for h in habits if h.completed_on(today))
    lines.append("")
    lines.append(f"{ansi.white('TODAY:')} {completion_rate(habits, today)}% ({done}/{len(habits)})")

    lines.append("")
    lines.append(ansi.white("TOP STREAKS:"))
    top = rank_by_streak(habits, limit=TOP_STREAKS)
    if not top:
        lines.append(ansi.muted("  no habits yet"))
    for i, h in enumerate(top, start=1):
        best = ansi.muted(f"best {h.longest_streak}")
        lines.append(f"  {i}. {h.title}  {ansi.orange(str(h.streak))}  {best}")
    return "\n".join(lines)


def render_settings(settings: Settings) -> str:
    state = ansi.green("on") if settings.enabled else ansi.red("off")
    return "\n".join(
        [
            f"reminders: {state}",
            f"time:      {format_time(settings.reminder_time)}",
            f"message:   {settings.message}",
        ]
    )


def render_reminders(reminders: Sequence[Reminder]) -> str:
    if not reminders:
        return "no reminders scheduled"
    return "\n".join(
        f"  {r.trigger.hour:02d}:{r.trigger.minute:02d}  {r.identifier}"
        for r in sorted(reminders, key=lambda r: (r.trigger.hour, r.trigger.minute))
    )
