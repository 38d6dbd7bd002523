# services/weights.py
from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Union

from services.features import DEFAULT_RANGES, FeatureRanges, PhotoRole


class ConfigurationError(RuntimeError):
    pass


@dataclass(frozen=True)
class RoleWeights:
    quality: float
    aesthetics: float
    smile_prob: float
    gaze_bonus: float
    red_flag: float
    pet_flag: float
    filter_penalty: float
    group_penalty: float
    posture_bonus: float


R = PhotoRole

DEFAULT_ROLE_WEIGHTS: Mapping[PhotoRole, RoleWeights] = MappingProxyType({
    R.PRIMARY_HEADSHOT: RoleWeights(0.25, 0.20, 0.20, 0.15, 0.10, 0.00, 0.10, 0.05, 0.05),
    R.FULL_BODY:        RoleWeights(0.25, 0.20, 0.10, 0.10, 0.10, 0.00, 0.10, 0.10, 0.15),
    R.HOBBY_ACTIVITY:   RoleWeights(0.20, 0.20, 0.10, 0.05, 0.10, 0.05, 0.05, 0.05, 0.15),
    R.PET:              RoleWeights(0.20, 0.20, 0.15, 0.05, 0.10, 0.15, 0.05, 0.05, 0.05),
    R.GROUP_SOCIAL:     RoleWeights(0.20, 0.15, 0.20, 0.05, 0.10, 0.05, 0.05, 0.00, 0.10),
    R.GENERIC:          RoleWeights(0.25, 0.25, 0.15, 0.10, 0.05, 0.05, 0.10, 0.05, 0.05),
})


@dataclass(frozen=True)
class ScoringConfig:
    """
    Everything the composite scorer reads. Built once at process start and
    passed in explicitly; nothing here is mutated afterwards.
    """
    role_weights: Mapping[PhotoRole, RoleWeights] = field(default_factory=lambda: DEFAULT_ROLE_WEIGHTS)
    ranges: FeatureRanges = DEFAULT_RANGES

    # fixed, weight-independent penalties
    smile_penalty: float = 0.05
    strict_gaze_threshold: float = 30.0
    strict_gaze_penalty: float = 0.08
    relaxed_gaze_threshold: float = 45.0
    relaxed_gaze_penalty: float = 0.03
    disengaged_penalty: float = 0.05

    floor_offset: float = 0.2
    floor: float = 0.2
    cap: float = 1.0
    version: str = "role-aware-v1"

    relaxed_gaze_roles: frozenset = field(
        default=frozenset({PhotoRole.HOBBY_ACTIVITY, PhotoRole.PET})
    )

    def __post_init__(self):
        if PhotoRole.GENERIC not in self.role_weights:
            raise ConfigurationError("role weights table must define 'generic'")
        # freeze whatever mapping we were handed
        object.__setattr__(self, "role_weights", MappingProxyType(dict(self.role_weights)))

    def weights_for(self, role: PhotoRole) -> RoleWeights:
        return self.role_weights.get(role) or self.role_weights[PhotoRole.GENERIC]


DEFAULT_CONFIG = ScoringConfig()


def _weights_from_json(data: Dict[str, Any]) -> RoleWeights:
    names = [f.name for f in fields(RoleWeights)]
    missing = [n for n in names if n not in data]
    if missing:
        raise ConfigurationError(f"weights missing fields: {', '.join(missing)}")
    return RoleWeights(**{n: float(data[n]) for n in names})


def load_scoring_config(path: Union[str, Path]) -> ScoringConfig:
    """
    Load a role -> weights table from JSON, e.g.
    {"version": "...", "roles": {"generic": {"quality": 0.25, ...}, ...}}
    Unlisted roles keep their built-in weights.
    """
    with Path(path).open("r", encoding="utf-8") as f:
        doc = json.load(f)

    table = dict(DEFAULT_ROLE_WEIGHTS)
    for name, data in (doc.get("roles") or {}).items():
        try:
            role = PhotoRole(name)
        except ValueError:
            raise ConfigurationError(f"unknown role in weights file: {name}") from None
        table[role] = _weights_from_json(data)

    return ScoringConfig(role_weights=table, version=str(doc.get("version", "custom")))
