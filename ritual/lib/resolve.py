from collections.abc import Sequence

from ..core.errors import NotFoundError
from ..core.models import Habit
from .fuzzy import find_in_pool, find_in_pool_exact

__all__ = ["resolve_habit", "resolve_habit_exact"]


def resolve_habit(ref: str, pool: Sequence[Habit]) -> Habit:
    habit = find_in_pool(ref, pool)
    if not habit:
        raise NotFoundError(f"no habit found: '{ref}'")
    return habit


def resolve_habit_exact(ref: str, pool: Sequence[Habit]) -> Habit:
    """Like resolve_habit but no fuzzy matching, for destructive commands."""
    habit = find_in_pool_exact(ref, pool)
    if not habit:
        raise NotFoundError(f"no habit found: '{ref}'")
    return habit
