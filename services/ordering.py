# services/ordering.py
from typing import Callable, Iterable, List, TypeVar

T = TypeVar("T")


def rank_by_score(
    items: Iterable[T],
    score: Callable[[T], float] = lambda p: p.score,
    index: Callable[[T], int] = lambda p: p.index,
) -> List[T]:
    """Highest score first; equal scores keep the lower original index first."""
    return sorted(items, key=lambda p: (-score(p), index(p)))
