# services/features.py
from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union


class PhotoRole(str, Enum):
    PRIMARY_HEADSHOT = "primary_headshot"
    FULL_BODY = "full_body"
    HOBBY_ACTIVITY = "hobby_activity"
    PET = "pet"
    GROUP_SOCIAL = "group_social"
    GENERIC = "generic"


@dataclass(frozen=True)
class FeatureRange:
    min: float
    max: float

    def normalize(self, value: float) -> float:
        """Min-max normalise into [0, 1], saturating outside the range."""
        span = self.max - self.min
        if span <= 0:
            return 0.0
        return min(1.0, max(0.0, (value - self.min) / span))


@dataclass(frozen=True)
class FeatureRanges:
    quality: FeatureRange = FeatureRange(0, 100)
    aesthetics: FeatureRange = FeatureRange(0, 100)
    smile_prob: FeatureRange = FeatureRange(-50, 120)
    gaze_deg: FeatureRange = FeatureRange(0, 90)
    # "face not visible" marker, in smile units
    smile_neutral: float = 60.0


DEFAULT_RANGES = FeatureRanges()


@dataclass(frozen=True)
class PhotoFeatures:
    quality: float
    aesthetics: float
    smile_prob: float
    gaze_deg: float
    red_flag: bool = False
    pet_flag: bool = False
    filter_strength: float = 0.0
    num_faces: int = 1
    posture_score: float = 0.0

    def as_payload(self) -> Dict[str, Any]:
        """camelCase dict, the shape oracles and API clients speak."""
        return {
            "quality": self.quality,
            "aesthetics": self.aesthetics,
            "smileProb": self.smile_prob,
            "gazeDeg": self.gaze_deg,
            "redFlag": self.red_flag,
            "petFlag": self.pet_flag,
            "filterStrength": self.filter_strength,
            "numFaces": self.num_faces,
            "postureScore": self.posture_score,
        }


# field -> keys accepted from oracle payloads
_ALIASES = {
    "quality": ("quality",),
    "aesthetics": ("aesthetics",),
    "smile_prob": ("smileProb", "smile_prob", "smile"),
    "gaze_deg": ("gazeDeg", "gaze_deg", "gaze"),
    "red_flag": ("redFlag", "red_flag"),
    "pet_flag": ("petFlag", "pet_flag"),
    "filter_strength": ("filterStrength", "filter_strength"),
    "num_faces": ("numFaces", "num_faces", "faces"),
    "posture_score": ("postureScore", "posture_score", "posture"),
}

_TRUE = {"true", "yes", "y", "1", "on"}
_FALSE = {"false", "no", "n", "0", "off", ""}


def _pick(raw: Mapping[str, Any], field: str) -> Any:
    for key in _ALIASES[field]:
        if key in raw and raw[key] is not None:
            return raw[key]
    return None


def _as_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        out = float(value)
    except (TypeError, ValueError):
        return None
    return out if math.isfinite(out) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        v = value.strip().lower()
        if v in _TRUE:
            return True
        if v in _FALSE:
            return False
    return None


def normalize_features(
    raw: Union[Mapping[str, Any], PhotoFeatures, None],
    ranges: FeatureRanges = DEFAULT_RANGES,
) -> PhotoFeatures:
    """
    Fill every missing or unusable field of an oracle feature payload.

    Defaults lean towards not penalising the photo, except gaze which falls
    back to the worst angle of the configured range. Never raises.
    """
    if isinstance(raw, PhotoFeatures):
        raw = asdict(raw)
    if not isinstance(raw, Mapping):
        raw = {}

    def num(field: str, default: float) -> float:
        v = _as_float(_pick(raw, field))
        return default if v is None else v

    def flag(field: str) -> bool:
        v = _as_bool(_pick(raw, field))
        return False if v is None else v

    faces = _as_float(_pick(raw, "num_faces"))
    num_faces = 1 if faces is None else max(0, int(faces))

    return PhotoFeatures(
        quality=num("quality", 0.0),
        aesthetics=num("aesthetics", 0.0),
        smile_prob=num("smile_prob", ranges.smile_neutral),
        gaze_deg=num("gaze_deg", ranges.gaze_deg.max),
        red_flag=flag("red_flag"),
        pet_flag=flag("pet_flag"),
        filter_strength=num("filter_strength", 0.0),
        num_faces=num_faces,
        posture_score=num("posture_score", 0.0),
    )


def resolve_role(value: Any) -> PhotoRole:
    if isinstance(value, PhotoRole):
        return value
    if not isinstance(value, str):
        return PhotoRole.GENERIC
    key = value.strip().lower().replace("-", "_").replace(" ", "_")
    try:
        return PhotoRole(key)
    except ValueError:
        return PhotoRole.GENERIC
