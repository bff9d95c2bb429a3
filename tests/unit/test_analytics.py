from datetime import date, timedelta

from ritual.analytics import (
    completion_rate,
    describe_frequency,
    rank_by_streak,
    trend_labels,
    weekly_trend,
)
from ritual.core.models import Frequency, Habit

TODAY = date(2026, 3, 18)


def _habit(hid: str, done: list[int] | None = None, streak: int = 0, **kw) -> Habit:
    dates = frozenset(TODAY - timedelta(days=n) for n in (done or []))
    return Habit(
        id=hid,
        title=hid,
        start_date=TODAY - timedelta(days=30),
        completed_dates=dates,
        streak=streak,
        longest_streak=streak,
        **kw,
    )


def test_completion_rate_no_habits():
    assert completion_rate([], TODAY) == 0


def test_completion_rate_half():
    habits = [_habit("a", [0]), _habit("b", [1])]
    assert completion_rate(habits, TODAY) == 50


def test_completion_rate_rounds_half_up():
    habits = [_habit("a", [0]), *(_habit(f"h{i}") for i in range(7))]
    assert completion_rate(habits, TODAY) == 13


def test_completion_rate_thirds():
    habits = [_habit("a", [0]), _habit("b", [0]), _habit("c")]
    assert completion_rate(habits, TODAY) == 67


def test_weekly_trend_is_oldest_first():
    habits = [_habit("a", [0, 1, 6]), _habit("b", [0, 7])]
    assert weekly_trend(habits, TODAY) == [1, 0, 0, 0, 0, 1, 2]


def test_weekly_trend_empty():
    assert weekly_trend([], TODAY) == [0] * 7


def test_trend_labels_end_today():
    labels = trend_labels(TODAY)
    assert len(labels) == 7
    assert labels[-1] == TODAY.strftime("%a")


def test_rank_by_streak_descending_and_stable():
    habits = [_habit("a", streak=2), _habit("b", streak=5), _habit("c", streak=2)]
    assert [h.id for h in rank_by_streak(habits)] == ["b", "a", "c"]


def test_rank_by_streak_truncates():
    habits = [_habit(str(i), streak=i) for i in range(5)]
    assert [h.id for h in rank_by_streak(habits, limit=3)] == ["4", "3", "2"]


def test_describe_frequency():
    assert describe_frequency(_habit("a")) == "Everyday"
    assert describe_frequency(_habit("b", frequency=Frequency.WEEKLY)) == "Weekly"
    assert describe_frequency(_habit("c", frequency=Frequency.CUSTOM)) == "Custom"
    custom = _habit("d", frequency=Frequency.CUSTOM, target_days=frozenset({"Fri", "Mon"}))
    assert describe_frequency(custom) == "Mon, Fri"
