# services/selection.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from services.features import PhotoFeatures, PhotoRole
from services.ordering import rank_by_score

MAX_SELECTED = 6

DEFAULT_ROLE_PRIORITY: Tuple[PhotoRole, ...] = (
    PhotoRole.PRIMARY_HEADSHOT,
    PhotoRole.FULL_BODY,
    PhotoRole.HOBBY_ACTIVITY,
    PhotoRole.PET,
    PhotoRole.GROUP_SOCIAL,
)

# weight by position in the role-fill sequence; positions past the end reuse the last one
POSITION_WEIGHTS: Tuple[float, ...] = (1.3, 1.15, 1.1, 1.05, 1.0, 0.95)


@dataclass(frozen=True)
class ScoredPhoto:
    """
    One analysed photo. `score` is None when the oracle failed for it; such
    photos keep their index in responses but are never selected.
    """
    index: int
    raw_features: Optional[PhotoFeatures]
    role: PhotoRole
    score: Optional[int]


@dataclass(frozen=True)
class SelectionResult:
    order: List[int] = field(default_factory=list)


def fill_role_slots(
    photos: Sequence[ScoredPhoto],
    max_count: int = MAX_SELECTED,
    role_priority: Sequence[PhotoRole] = DEFAULT_ROLE_PRIORITY,
) -> List[ScoredPhoto]:
    """
    First pass: best photo for each priority role, in priority order, then
    backfill with the best remaining photos of any role.
    """
    ranked = rank_by_score(p for p in photos if p.score is not None)
    chosen: List[ScoredPhoto] = []
    taken = set()

    for role in role_priority:
        if len(chosen) >= max_count:
            break
        best = next((p for p in ranked if p.role == role and p.index not in taken), None)
        if best is not None:
            chosen.append(best)
            taken.add(best.index)

    for p in ranked:
        if len(chosen) >= max_count:
            break
        if p.index not in taken:
            chosen.append(p)
            taken.add(p.index)

    return chosen


def rerank_by_position(
    filled: Sequence[ScoredPhoto],
    position_weights: Sequence[float] = POSITION_WEIGHTS,
) -> List[ScoredPhoto]:
    """Second pass: display order by score times the weight of the fill position."""
    def weight(pos: int) -> float:
        return position_weights[min(pos, len(position_weights) - 1)]

    weighted = [(p.score * weight(pos), p) for pos, p in enumerate(filled)]
    return [p for _, p in rank_by_score(weighted, score=lambda t: t[0], index=lambda t: t[1].index)]


def select_and_order(
    photos: Iterable[ScoredPhoto],
    max_count: int = MAX_SELECTED,
    role_priority: Sequence[PhotoRole] = DEFAULT_ROLE_PRIORITY,
) -> SelectionResult:
    candidates = [p for p in photos if p.score is not None]
    if max_count <= 0 or not candidates:
        return SelectionResult(order=[])

    # capacity is not a constraint: plain score order, no role logic
    if len(candidates) <= max_count:
        return SelectionResult(order=[p.index for p in rank_by_score(candidates)])

    filled = fill_role_slots(candidates, max_count, role_priority)
    return SelectionResult(order=[p.index for p in rerank_by_position(filled)])
