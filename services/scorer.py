# services/scorer.py
from __future__ import annotations

from typing import Dict

from services.features import PhotoFeatures, PhotoRole
from services.utils import round_half_up
from services.weights import DEFAULT_CONFIG, ScoringConfig


def gaze_score(gaze_deg: float) -> float:
    # stepped on purpose, not interpolated
    if gaze_deg <= 15:
        return 1.0
    if gaze_deg <= 45:
        return 0.6
    return 0.3


def _looking_away(features: PhotoFeatures, role: PhotoRole, config: ScoringConfig) -> bool:
    if role in config.relaxed_gaze_roles:
        return features.gaze_deg > config.relaxed_gaze_threshold
    return features.gaze_deg > config.strict_gaze_threshold


def score_breakdown(
    features: PhotoFeatures,
    role: PhotoRole,
    config: ScoringConfig = DEFAULT_CONFIG,
) -> Dict[str, Dict[str, float]]:
    """
    Named positive and penalty terms of the composite score.

    Returns {"positive": {...}, "penalty": {...}}; every value is already
    multiplied by its weight, so score_composite is just the clamped
    difference plus the floor offset.
    """
    w = config.weights_for(role)
    ranges = config.ranges

    positive = {
        "quality": w.quality * ranges.quality.normalize(features.quality),
        "aesthetics": w.aesthetics * ranges.aesthetics.normalize(features.aesthetics),
        "smile": w.smile_prob * ranges.smile_prob.normalize(features.smile_prob),
        "gaze": w.gaze_bonus * gaze_score(features.gaze_deg),
        "pet": w.pet_flag * (1 if features.pet_flag else 0),
        "posture": w.posture_bonus * features.posture_score,
    }

    not_smiling = features.smile_prob < 0
    looking_away = _looking_away(features, role, config)
    grouped = features.num_faces > 2 and role != PhotoRole.GROUP_SOCIAL

    if looking_away:
        gaze_penalty = (
            config.relaxed_gaze_penalty
            if role in config.relaxed_gaze_roles
            else config.strict_gaze_penalty
        )
    else:
        gaze_penalty = 0.0

    penalty = {
        "red_flag": w.red_flag * (1 if features.red_flag else 0),
        "filter": w.filter_penalty * features.filter_strength,
        "group": w.group_penalty * (1 if grouped else 0),
        "not_smiling": config.smile_penalty if not_smiling else 0.0,
        "gaze": gaze_penalty,
        "disengaged": config.disengaged_penalty if (not_smiling and looking_away) else 0.0,
    }
    return {"positive": positive, "penalty": penalty}


def score_composite(
    features: PhotoFeatures,
    role: PhotoRole,
    config: ScoringConfig = DEFAULT_CONFIG,
) -> float:
    terms = score_breakdown(features, role, config)
    raw = sum(terms["positive"].values()) - sum(terms["penalty"].values())
    adjusted = raw + config.floor_offset
    return min(config.cap, max(config.floor, adjusted))


def display_score(value: float) -> int:
    """0.2-1.0 composite -> 0-100 integer shown to users."""
    return round_half_up(value * 100)
