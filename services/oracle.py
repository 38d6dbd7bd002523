# services/oracle.py
"""
Typed boundary between the scoring core and the vision/LLM providers.

A provider is a module exposing:
    extract_features(image: PreparedImage) -> OracleResult
    generate_feedback(features: dict, role: str, score: int) -> List[str]
Every provider error surfaces as OracleFailure.
"""
from __future__ import annotations

import importlib
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from services.utils import extract_json

PROVIDERS = {
    "stub": "services.stub_features",
    "openai": "services.openai_review",
    "anthropic": "services.anthropic_review",
    "replicate": "services.replicate_client",
    "gemini": "services.gemini_review",
}


class OracleFailure(RuntimeError):
    pass


@dataclass(frozen=True)
class OracleResult:
    features: Dict[str, Any] = field(default_factory=dict)
    assessment: str = ""
    photo_type: Optional[str] = None


def get_provider(name: str):
    key = (name or "stub").strip().lower()
    if key not in PROVIDERS:
        raise ValueError(f"unknown review provider: {name!r} (expected one of {', '.join(PROVIDERS)})")
    return importlib.import_module(PROVIDERS[key])


def parse_oracle_payload(payload: Any) -> OracleResult:
    """
    Accept {"features": {...}, "assessment": "...", "photoType": "..."} or a
    flat dict of feature keys. Validation of individual values is left to
    the normalizer.
    """
    if not isinstance(payload, dict):
        raise OracleFailure("oracle payload is not a JSON object")

    features = payload.get("features")
    if not isinstance(features, dict):
        features = {k: v for k, v in payload.items()
                    if k not in ("assessment", "photoType", "photo_type")}

    photo_type = payload.get("photoType") or payload.get("photo_type")
    assessment = payload.get("assessment") or ""
    return OracleResult(
        features=features,
        assessment=str(assessment).strip(),
        photo_type=str(photo_type) if photo_type else None,
    )


def parse_oracle_text(txt: str) -> OracleResult:
    try:
        return parse_oracle_payload(extract_json(txt))
    except ValueError as e:
        raise OracleFailure(f"unparsable oracle response: {e}") from e


def feedback_lines(txt: str) -> List[str]:
    """
    Coaching tips as a list of lines. Structured replies of the form
    {"good_points": [...], "improvement_points": [...]} are flattened.
    """
    txt = (txt or "").strip()
    if txt.startswith("{"):
        try:
            data = json.loads(txt)
        except json.JSONDecodeError:
            data = None
        if isinstance(data, dict) and ("good_points" in data or "improvement_points" in data):
            good = [f"✅ {p}" for p in data.get("good_points") or []]
            better = [f"💡 {p}" for p in data.get("improvement_points") or []]
            return good + better
    return [line.strip() for line in txt.splitlines() if line.strip()]


def feedback_payload(features: Dict[str, Any], role: str, score: int) -> str:
    return json.dumps({"feature": features, "role": role, "score": score}, indent=2)
