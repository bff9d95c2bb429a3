from datetime import date

import pytest

from ritual.core.errors import AmbiguousError
from ritual.core.models import Habit
from ritual.lib.fuzzy import find_in_pool, find_in_pool_exact

POOL = [
    Habit(id="a1b2c3d4-0000", title="Read", start_date=date(2026, 1, 1)),
    Habit(id="a1ffffff-0000", title="Meditate", start_date=date(2026, 1, 1)),
    Habit(id="b9999999-0000", title="Drink water", start_date=date(2026, 1, 1)),
]


def test_id_prefix():
    assert find_in_pool("a1b", POOL).title == "Read"


def test_ambiguous_id_prefix():
    with pytest.raises(AmbiguousError):
        find_in_pool("a1", POOL)


def test_exact_title_case_insensitive():
    assert find_in_pool("read", POOL).title == "Read"


def test_substring():
    assert find_in_pool("water", POOL).title == "Drink water"


def test_fuzzy():
    assert find_in_pool("meditat", POOL).title == "Meditate"
    assert find_in_pool("medittae", POOL).title == "Meditate"


def test_exact_skips_fuzzy():
    assert find_in_pool_exact("medittae", POOL) is None


def test_empty_pool():
    assert find_in_pool("read", []) is None
