# services/anthropic_review.py
import base64
import logging
import os
from typing import Any, Dict, List

from prompts import FEEDBACK_SYSTEM_PROMPT, SYSTEM_PROMPT, USER_PROMPT_TEMPLATE
from services.images import PreparedImage
from services.oracle import OracleFailure, OracleResult, feedback_lines, feedback_payload, parse_oracle_text

logger = logging.getLogger(__name__)

CLAUDE_MODEL = os.getenv("CLAUDE_MODEL", "claude-sonnet-4-5")
ORACLE_TIMEOUT = float(os.getenv("ORACLE_TIMEOUT", "60"))


def _client():
    import anthropic

    key = os.getenv("ANTHROPIC_API_KEY", "")
    if not key:
        raise OracleFailure("ANTHROPIC_API_KEY not set")
    return anthropic.Anthropic(api_key=key, timeout=ORACLE_TIMEOUT)


def _response_text(response) -> str:
    parts = [getattr(block, "text", "") for block in (response.content or [])]
    text = "".join(p for p in parts if p).strip()
    if not text:
        raise OracleFailure("Claude returned an empty response")
    return text


def _create(system: str, content, max_tokens: int, temperature: float) -> str:
    client = _client()
    try:
        response = client.messages.create(
            model=CLAUDE_MODEL,
            max_tokens=max_tokens,
            temperature=temperature,
            system=system,
            messages=[{"role": "user", "content": content}],
        )
    except Exception as e:
        logger.warning("Claude call failed: %s", e)
        raise OracleFailure(f"Claude call failed: {e}") from e
    return _response_text(response)


def extract_features(image: PreparedImage) -> OracleResult:
    image_data = base64.standard_b64encode(image.data).decode("utf-8")
    txt = _create(
        SYSTEM_PROMPT.strip(),
        [
            {"type": "image", "source": {"type": "base64", "media_type": image.mime, "data": image_data}},
            {"type": "text", "text": USER_PROMPT_TEMPLATE.strip()},
        ],
        max_tokens=600,
        temperature=0,
    )
    return parse_oracle_text(txt)


def generate_feedback(features: Dict[str, Any], role: str, score: int) -> List[str]:
    txt = _create(FEEDBACK_SYSTEM_PROMPT, feedback_payload(features, role, score), max_tokens=200, temperature=0.7)
    return feedback_lines(txt)
