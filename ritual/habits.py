from fncli import cli

from .app import session
from .core.errors import ValidationError
from .core.models import (
    COLORS,
    DEFAULT_COLOR,
    DEFAULT_ICON,
    ICONS,
    WEEKDAYS,
    Frequency,
    HabitDraft,
)
from .core.types import UNSET
from .lib import clock
from .lib.errors import echo
from .lib.resolve import resolve_habit, resolve_habit_exact
from .render import render_detail, render_habit, render_habits

__all__ = ["normalize_days", "parse_color", "parse_frequency", "parse_icon", "parse_title"]


# ── validation ───────────────────────────────────────────────────────────────


def parse_title(words: list[str] | str | None) -> str:
    title = " ".join(words) if isinstance(words, list) else (words or "")
    title = title.strip()
    if not title:
        raise ValidationError("habit title cannot be empty")
    return title


def parse_icon(icon: str) -> str:
    if icon.lower() not in ICONS:
        raise ValidationError(f"unknown icon '{icon}' (choose: {', '.join(ICONS)})")
    return icon.lower()


def parse_color(color: str) -> str:
    token = color if color.startswith("#") else f"#{color}"
    match = next((c for c in COLORS if c.lower() == token.lower()), None)
    if match is None:
        raise ValidationError(f"unknown color '{color}' (choose: {', '.join(COLORS)})")
    return match


def parse_frequency(frequency: str) -> Frequency:
    try:
        return Frequency(frequency.lower())
    except ValueError:
        choices = ", ".join(f.value for f in Frequency)
        raise ValidationError(f"unknown frequency '{frequency}' (choose: {choices})") from None


def normalize_days(days: list[str]) -> frozenset[str]:
    """Map 'mon', 'Monday', 'MON' onto the Mon..Sun tags."""
    out = set()
    for day in days:
        match = next((w for w in WEEKDAYS if day.strip().lower().startswith(w.lower())), None)
        if match is None:
            raise ValidationError(f"unknown weekday '{day}' (choose: {', '.join(WEEKDAYS)})")
        out.add(match)
    return frozenset(out)


# ── cli ──────────────────────────────────────────────────────────────────────


@cli("ritual", name="ls")
def ls() -> None:
    """List habits and today's check-ins"""
    with session() as store:
        echo(render_habits(store.habits, clock.today()))


@cli(
    "ritual",
    name="add",
    flags={
        "description": ["-d", "--description"],
        "icon": ["-i", "--icon"],
        "color": ["-c", "--color"],
        "frequency": ["-f", "--frequency"],
        "day": ["--day"],
    },
)
def add(
    title: list[str],
    description: str | None = None,
    icon: str | None = None,
    color: str | None = None,
    frequency: str | None = None,
    day: list[str] | None = None,
) -> None:
    """Add a habit"""
    freq = parse_frequency(frequency) if frequency else Frequency.DAILY
    days = normalize_days(list(day)) if day else frozenset()
    if days and freq is not Frequency.CUSTOM:
        freq = Frequency.CUSTOM
    draft = HabitDraft(
        title=parse_title(title),
        description=(description or "").strip(),
        icon=parse_icon(icon) if icon else DEFAULT_ICON,
        color=parse_color(color) if color else DEFAULT_COLOR,
        frequency=freq,
        target_days=days,
    )
    with session() as store:
        habit = store.add_habit(draft)
        echo(render_habit(habit, clock.today()))


@cli("ritual", name="check")
def check(ref: list[str]) -> None:
    """Toggle today's check-in for a habit"""
    with session() as store:
        habit = resolve_habit(" ".join(ref), store.habits)
        today = clock.today()
        updated = store.toggle_completion(habit.id, today)
        if updated:
            echo(render_habit(updated, today))


@cli(
    "ritual",
    name="edit",
    flags={
        "title": ["-t", "--title"],
        "description": ["-d", "--description"],
        "icon": ["-i", "--icon"],
        "color": ["-c", "--color"],
        "frequency": ["-f", "--frequency"],
        "day": ["--day"],
    },
)
def edit(
    ref: str,
    title: str | None = None,
    description: str | None = None,
    icon: str | None = None,
    color: str | None = None,
    frequency: str | None = None,
    day: list[str] | None = None,
) -> None:
    """Edit a habit's title, description, icon, color or schedule"""
    if all(v is None for v in (title, description, icon, color, frequency, day)):
        raise ValidationError("nothing to update: use -t, -d, -i, -c, -f or --day")
    with session() as store:
        habit = resolve_habit(ref, store.habits)
        updated = store.update_habit(
            habit.id,
            title=parse_title(title) if title is not None else UNSET,
            description=description.strip() if description is not None else UNSET,
            icon=parse_icon(icon) if icon is not None else UNSET,
            color=parse_color(color) if color is not None else UNSET,
            frequency=parse_frequency(frequency) if frequency is not None else UNSET,
            target_days=normalize_days(list(day)) if day is not None else UNSET,
        )
        if updated:
            echo(render_habit(updated, clock.today()))


@cli("ritual", name="rm")
def rm(ref: list[str]) -> None:
    """Delete a habit and its history"""
    with session() as store:
        habit = resolve_habit_exact(" ".join(ref), store.habits)
        store.delete_habit(habit.id)
        echo(f"✗ {habit.title}")


@cli("ritual", name="show")
def show(ref: list[str]) -> None:
    """Show a habit's streaks and this month's history"""
    with session() as store:
        habit = resolve_habit(" ".join(ref), store.habits)
        echo(render_detail(habit, clock.today()))
