# app.py
import os
import logging
from typing import List

from fastapi import FastAPI, File, UploadFile, HTTPException, Query

import config

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
    datefmt='%H:%M:%S'
)

from schemas import AnalyzeResponse, Base64AnalyzeRequest
from services.images import decode_base64_image
from services.pipeline import InvalidInput, PhotoUpload, analyze_photos

logger = logging.getLogger(__name__)

app = FastAPI(title="Dating photo coach API")


async def _run(uploads: List[PhotoUpload], feedback: bool) -> AnalyzeResponse:
    try:
        return await analyze_photos(uploads, with_feedback=feedback)
    except InvalidInput as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


# --- Analyze endpoint (multipart) ----------------------------------------
@app.post("/analyze", response_model=AnalyzeResponse)
async def analyze(
    files: List[UploadFile] = File(...),
    feedback: bool = Query(config.FEEDBACK_ENABLED),
):
    """
    Score every uploaded photo, pick and order up to six of them, and
    return coaching tips. A photo that fails analysis comes back with
    score=null and an error; the rest of the batch is unaffected.
    """
    uploads = []
    for i, f in enumerate(files):
        uploads.append(PhotoUpload(filename=f.filename or f"photo-{i}", data=await f.read()))
    return await _run(uploads, feedback)


# --- Analyze endpoint (base64 JSON) --------------------------------------
@app.post("/analyze/base64", response_model=AnalyzeResponse)
async def analyze_base64(body: Base64AnalyzeRequest, feedback: bool = Query(config.FEEDBACK_ENABLED)):
    """Same as /analyze for clients posting {"images": ["data:image/jpeg;base64,...", ...]}."""
    names = body.filenames or []
    uploads = []
    for i, b64 in enumerate(body.images):
        name = names[i] if i < len(names) else f"photo-{i}"
        try:
            data = decode_base64_image(b64)
        except ValueError as e:
            # undecodable payloads reach the pipeline as empty bytes and fail per photo
            logger.warning("image %d (%s) is not valid base64: %s", i, name, e)
            data = b""
        uploads.append(PhotoUpload(filename=name, data=data))
    return await _run(uploads, feedback)


@app.get("/health")
def health():
    return {"ok": True, "provider": config.REVIEW_PROVIDER, "scoring_version": config.SCORING_CONFIG.version}


# --- Debug endpoint (optional) -------------------------------------------
@app.get("/_debug_env")
def debug_env():
    # Do not expose secrets in production. This is for quick debug only.
    safe = {k: ("***" if k.lower().find("key") >= 0 or k.lower().find("token") >= 0 else v)
            for k, v in os.environ.items()
            if k.startswith(("REPLICATE", "OPENAI", "GEMINI", "REVIEW", "FEEDBACK", "SCORING", "MAX_"))}
    return {"provider": config.REVIEW_PROVIDER, "env": safe}


# If run directly for local dev
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app:app", host="0.0.0.0", port=config.PORT, reload=True)
