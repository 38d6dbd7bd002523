import logging, os, replicate
from typing import Any, Dict, List
from services.images import PreparedImage
from services.oracle import OracleFailure, OracleResult, feedback_lines, feedback_payload, parse_oracle_text
from prompts import FEEDBACK_SYSTEM_PROMPT, SYSTEM_PROMPT, USER_PROMPT_TEMPLATE

logger = logging.getLogger(__name__)

REPLICATE_TOKEN = os.getenv("REPLICATE_API_TOKEN")
REPLICATE_REVIEW_MODEL = os.getenv("REPLICATE_REVIEW_MODEL", "meta/meta-llama-3.2-11b-vision-instruct")
REPLICATE_FEEDBACK_MODEL = os.getenv("REPLICATE_FEEDBACK_MODEL", "meta/meta-llama-3-8b-instruct")

def _text(out) -> str:
    return "".join(map(str, out)) if isinstance(out, list) else str(out)

def _run(model: str, payload: Dict[str, Any]) -> str:
    if not REPLICATE_TOKEN:
        raise OracleFailure("REPLICATE_API_TOKEN not set")
    client = replicate.Client(api_token=REPLICATE_TOKEN)
    return _text(client.run(model, input=payload))

def extract_features(image: PreparedImage) -> OracleResult:
    if not REPLICATE_TOKEN:
        raise OracleFailure("REPLICATE_API_TOKEN not set")
    system_prompt = SYSTEM_PROMPT.strip()
    user_prompt = USER_PROMPT_TEMPLATE.strip()

    # Attempt 1: messages schema
    try:
        txt = _run(REPLICATE_REVIEW_MODEL, {
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": [
                    {"type": "input_text", "text": user_prompt},
                    {"type": "input_image", "image": image.data_uri}
                ]}
            ]
        })
        return parse_oracle_text(txt)
    except Exception as e:
        logger.info("messages schema failed on %s, retrying with prompt+image: %s", REPLICATE_REVIEW_MODEL, e)

    # Attempt 2: prompt + image fields
    try:
        txt = _run(REPLICATE_REVIEW_MODEL, {
            "prompt": f"{system_prompt}\n\n{user_prompt}\n\nReturn ONLY JSON.",
            "image": image.data_uri,
        })
    except Exception as e:
        raise OracleFailure(f"Replicate review failed: {e}") from e
    return parse_oracle_text(txt)

def generate_feedback(features: Dict[str, Any], role: str, score: int) -> List[str]:
    try:
        txt = _run(REPLICATE_FEEDBACK_MODEL, {
            "system_prompt": FEEDBACK_SYSTEM_PROMPT,
            "prompt": feedback_payload(features, role, score),
            "max_new_tokens": 160,
            "temperature": 0.7,
        })
    except OracleFailure:
        raise
    except Exception as e:
        raise OracleFailure(f"Replicate feedback failed: {e}") from e
    return feedback_lines(txt)
