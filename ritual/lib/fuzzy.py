from collections.abc import Sequence
from difflib import get_close_matches

from ..core.errors import AmbiguousError
from ..core.models import Habit

__all__ = ["find_in_pool", "find_in_pool_exact"]

FUZZY_MATCH_CUTOFF = 0.8


def _match_id_prefix(ref: str, pool: Sequence[Habit]) -> Habit | None:
    ref_lower = ref.lower()
    matches = [h for h in pool if h.id.lower().startswith(ref_lower)]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        exact = next((h for h in matches if h.id == ref), None)
        if exact:
            return exact
        raise AmbiguousError(ref, count=len(matches), sample=[h.id[:8] for h in matches[:3]])
    return None


def _match_title(ref: str, pool: Sequence[Habit]) -> Habit | None:
    ref_lower = ref.lower()
    exact = next((h for h in pool if h.title.lower() == ref_lower), None)
    if exact:
        return exact
    matches = [h for h in pool if ref_lower in h.title.lower()]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        raise AmbiguousError(ref, count=len(matches), sample=[h.title for h in matches[:3]])
    return None


def _match_fuzzy(ref: str, pool: Sequence[Habit]) -> Habit | None:
    titles = [h.title.lower() for h in pool]
    matches = get_close_matches(ref.lower(), titles, n=1, cutoff=FUZZY_MATCH_CUTOFF)
    if matches:
        return next(h for h in pool if h.title.lower() == matches[0])
    return None


def find_in_pool(ref: str, pool: Sequence[Habit]) -> Habit | None:
    if not pool or not ref:
        return None
    return _match_id_prefix(ref, pool) or _match_title(ref, pool) or _match_fuzzy(ref, pool)


def find_in_pool_exact(ref: str, pool: Sequence[Habit]) -> Habit | None:
    if not pool or not ref:
        return None
    return _match_id_prefix(ref, pool) or _match_title(ref, pool)
