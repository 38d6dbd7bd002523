# services/stub_features.py
# Offline provider: deterministic pseudo-features derived from the image bytes.
# Lets the whole pipeline run without any model credentials.
import hashlib
import math
from typing import Any, Dict, List

from services.images import PreparedImage
from services.oracle import OracleResult

_SOLO_ROLES = ("primary_headshot", "full_body", "hobby_activity", "generic")


def _rand(seed: float, span: float = 1.0) -> float:
    return ((math.sin(seed) + 1) / 2) * span


def _seed(data: bytes) -> int:
    return sum(hashlib.md5(data).digest())


def extract_features(image: PreparedImage) -> OracleResult:
    h = _seed(image.data)

    features = {
        "quality": 40 + _rand(h, 60),                # 40-100
        "aesthetics": 30 + _rand(h * 1.3, 70),       # 30-100
        "smileProb": -50 + _rand(h * 2.1, 170),      # -50-120
        "gazeDeg": _rand(h * 3.7, 90),               # 0-90
        "redFlag": _rand(h * 4.2) > 0.7,
        "petFlag": _rand(h * 5.4) > 0.8,
        "filterStrength": _rand(h * 6.0, 1),         # 0-1
        "numFaces": math.floor(_rand(h * 7.7, 4)),   # 0-3
        "postureScore": _rand(h * 8.3, 2) - 1,       # -1-1
    }

    if features["petFlag"]:
        photo_type = "pet"
    elif features["numFaces"] > 2:
        photo_type = "group_social"
    else:
        photo_type = _SOLO_ROLES[int(_rand(h * 9.1, len(_SOLO_ROLES) - 1e-9))]

    assessment = (
        f"Heuristic estimate: {features['numFaces']} face(s), "
        f"quality {features['quality']:.0f}/100, gaze {features['gazeDeg']:.0f}° off-camera."
    )
    return OracleResult(features=features, assessment=assessment, photo_type=photo_type)


def generate_feedback(features: Dict[str, Any], role: str, score: int) -> List[str]:
    tips = []
    if features.get("quality", 0) >= 75:
        tips.append("✅ Sharp, well-lit shot. Keep it.")
    else:
        tips.append("💡 Retake in daylight near a window for a sharper image.")
    if features.get("smileProb", 0) < 0:
        tips.append("❌ No smile here. A genuine smile reads as approachable.")
    if features.get("gazeDeg", 90) > 30 and role not in ("hobby_activity", "pet"):
        tips.append("💡 Look into the lens; eye contact builds trust.")
    if features.get("numFaces", 1) > 2 and role != "group_social":
        tips.append("❌ Too many people; make it obvious which one is you.")
    if features.get("filterStrength", 0) > 0.5:
        tips.append("❌ Heavy filtering looks inauthentic. Dial it back.")
    if features.get("petFlag"):
        tips.append("✅ Pets are a great conversation starter.")
    if score < 50 and len(tips) < 4:
        tips.append("💡 Consider replacing this photo with a stronger one.")
    return tips[:4]
