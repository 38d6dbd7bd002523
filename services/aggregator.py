# services/aggregator.py
from itertools import zip_longest
from typing import Any, Dict, Optional, Sequence

from services.features import PhotoRole, resolve_role
from services.utils import round_half_up

ROLE_PROFILE_WEIGHTS: Dict[PhotoRole, float] = {
    PhotoRole.PRIMARY_HEADSHOT: 1.2,
    PhotoRole.FULL_BODY: 1.1,
    PhotoRole.HOBBY_ACTIVITY: 1.0,
    PhotoRole.PET: 0.9,
    PhotoRole.GROUP_SOCIAL: 0.9,
    PhotoRole.GENERIC: 0.8,
}
DEFAULT_PROFILE_WEIGHT = 0.8

COMPLETENESS_MIN_PHOTOS = 4
DIVERSITY_MIN_ROLES = 3
BONUS = 5


def aggregate_profile_score(
    scores: Sequence[Optional[float]],
    roles: Sequence[Any],
) -> int:
    """
    Weighted average of per-photo scores plus completeness/diversity bonuses.

    `scores` and `roles` are parallel; a None score (failed analysis) is left
    out of both numerator and denominator. Missing roles count as generic.
    """
    total = 0.0
    weight_sum = 0.0
    scored = 0
    seen_roles = set()

    for score, role in zip_longest(scores, roles[:len(scores)]):
        if score is None:
            continue
        resolved = resolve_role(role)
        w = ROLE_PROFILE_WEIGHTS.get(resolved, DEFAULT_PROFILE_WEIGHT)
        total += w * score
        weight_sum += w
        scored += 1
        seen_roles.add(resolved)

    base = round_half_up(total / weight_sum) if weight_sum else 0

    bonus = 0
    if scored >= COMPLETENESS_MIN_PHOTOS:
        bonus += BONUS
    if len(seen_roles) >= DIVERSITY_MIN_ROLES:
        bonus += BONUS

    return min(100, base + bonus)
