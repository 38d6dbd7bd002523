# services/openai_review.py
import logging
import os
from typing import Any, Dict, List

from openai import OpenAI

from prompts import FEEDBACK_SYSTEM_PROMPT, SYSTEM_PROMPT, USER_PROMPT_TEMPLATE
from services.images import PreparedImage
from services.oracle import OracleFailure, OracleResult, feedback_lines, feedback_payload, parse_oracle_text

logger = logging.getLogger(__name__)

REVIEW_MODEL = os.getenv("REVIEW_MODEL", "gpt-4o")
FEEDBACK_MODEL = os.getenv("FEEDBACK_MODEL", "gpt-4o-mini")
ORACLE_TIMEOUT = float(os.getenv("ORACLE_TIMEOUT", "60"))


def _client() -> OpenAI:
    key = os.getenv("OPENAI_API_KEY", "")
    if not key:
        raise OracleFailure("OPENAI_API_KEY not set")
    return OpenAI(api_key=key, timeout=ORACLE_TIMEOUT)


def _call_openai(client: OpenAI, model: str, image: PreparedImage) -> str:
    sys = SYSTEM_PROMPT.strip()
    usr = USER_PROMPT_TEMPLATE.strip()
    resp = client.chat.completions.create(
        model=model,
        temperature=0,
        messages=[
            {"role": "system", "content": sys},
            {"role": "user", "content": [
                {"type": "text", "text": usr},
                {"type": "image_url", "image_url": {"url": image.data_uri}}
            ]}
        ],
    )
    return (resp.choices[0].message.content or "").strip()


def extract_features(image: PreparedImage) -> OracleResult:
    client = _client()
    last_err = None
    for model in dict.fromkeys((REVIEW_MODEL, "gpt-4o-mini")):
        try:
            return parse_oracle_text(_call_openai(client, model, image))
        except Exception as e:
            last_err = e
            logger.warning("OpenAI review with %s failed: %s", model, e)
            continue
    raise OracleFailure(f"OpenAI review failed: {last_err}")


def generate_feedback(features: Dict[str, Any], role: str, score: int) -> List[str]:
    client = _client()
    try:
        resp = client.chat.completions.create(
            model=FEEDBACK_MODEL,
            temperature=0.7,
            max_tokens=120,
            messages=[
                {"role": "system", "content": FEEDBACK_SYSTEM_PROMPT},
                {"role": "user", "content": feedback_payload(features, role, score)},
            ],
        )
    except Exception as e:
        raise OracleFailure(f"OpenAI feedback failed: {e}") from e
    return feedback_lines(resp.choices[0].message.content or "")
