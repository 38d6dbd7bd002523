# services/gemini_review.py
import logging
import os
from typing import Any, Dict, List

from prompts import FEEDBACK_SYSTEM_PROMPT, SYSTEM_PROMPT, USER_PROMPT_TEMPLATE
from services.images import PreparedImage
from services.oracle import OracleFailure, OracleResult, feedback_lines, feedback_payload, parse_oracle_text

logger = logging.getLogger(__name__)

GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
ORACLE_TIMEOUT = float(os.getenv("ORACLE_TIMEOUT", "60"))


def _model(system_instruction: str):
    import google.generativeai as genai

    key = os.getenv("GEMINI_API_KEY", "")
    if not key:
        raise OracleFailure("GEMINI_API_KEY not set")
    genai.configure(api_key=key)
    return genai, genai.GenerativeModel(model_name=GEMINI_MODEL, system_instruction=system_instruction)


def _response_text(response) -> str:
    text = getattr(response, "text", None)
    if not text and getattr(response, "candidates", None):
        parts = []
        for c in response.candidates:
            if hasattr(c, "content") and getattr(c.content, "parts", None):
                parts.extend(p.text for p in c.content.parts if getattr(p, "text", None))
        text = "\n".join(parts)
    if not text:
        raise OracleFailure("Gemini returned an empty response")
    return text.strip()


def _generate(system_instruction: str, contents: list, temperature: float) -> str:
    genai, model = _model(system_instruction)
    try:
        response = model.generate_content(
            contents,
            generation_config=genai.types.GenerationConfig(temperature=temperature),
            request_options={"timeout": ORACLE_TIMEOUT},
        )
    except Exception as e:
        logger.warning("Gemini call failed: %s", e)
        raise OracleFailure(f"Gemini call failed: {e}") from e
    return _response_text(response)


def extract_features(image: PreparedImage) -> OracleResult:
    txt = _generate(
        SYSTEM_PROMPT.strip(),
        [{"mime_type": image.mime, "data": image.data}, USER_PROMPT_TEMPLATE.strip()],
        temperature=0,
    )
    return parse_oracle_text(txt)


def generate_feedback(features: Dict[str, Any], role: str, score: int) -> List[str]:
    txt = _generate(FEEDBACK_SYSTEM_PROMPT, [feedback_payload(features, role, score)], temperature=0.7)
    return feedback_lines(txt)
