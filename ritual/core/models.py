import dataclasses
from datetime import date, time
from enum import Enum

ICONS: tuple[str, ...] = (
    "fitness",
    "walk",
    "bicycle",
    "barbell",
    "book",
    "school",
    "library",
    "language",
    "water",
    "cafe",
    "restaurant",
    "nutrition",
    "moon",
    "sunny",
    "alarm",
    "bed",
    "code",
    "laptop",
    "desktop",
    "game-controller",
    "brush",
    "color-palette",
    "musical-notes",
    "camera",
)

COLORS: tuple[str, ...] = ("#007AFF", "#FF9500", "#FF3B30", "#5856D6", "#34C759", "#FF2D55")

WEEKDAYS: tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

DEFAULT_ICON = "fitness"
DEFAULT_COLOR = COLORS[0]
DEFAULT_MESSAGE = "It's time to build your habits!"
DEFAULT_REMINDER_TIME = time(7, 0)


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    CUSTOM = "custom"


@dataclasses.dataclass(frozen=True)
class Habit:
    id: str
    title: str
    start_date: date
    description: str = ""
    icon: str = DEFAULT_ICON
    color: str = DEFAULT_COLOR
    frequency: Frequency = Frequency.DAILY
    target_days: frozenset[str] = frozenset()
    completed_dates: frozenset[date] = frozenset()
    streak: int = 0
    longest_streak: int = 0

    def completed_on(self, day: date) -> bool:
        return day in self.completed_dates


@dataclasses.dataclass(frozen=True)
class HabitDraft:
    """Caller-supplied fields for a new habit. Everything else is assigned by the store."""

    title: str
    description: str = ""
    icon: str = DEFAULT_ICON
    color: str = DEFAULT_COLOR
    frequency: Frequency = Frequency.DAILY
    target_days: frozenset[str] = frozenset()


@dataclasses.dataclass(frozen=True)
class Settings:
    reminder_time: time = DEFAULT_REMINDER_TIME
    message: str = DEFAULT_MESSAGE
    enabled: bool = True


@dataclasses.dataclass(frozen=True)
class State:
    habits: tuple[Habit, ...] = ()
    settings: Settings = dataclasses.field(default_factory=Settings)

    def all_completed(self, day: date) -> bool:
        return bool(self.habits) and all(h.completed_on(day) for h in self.habits)
