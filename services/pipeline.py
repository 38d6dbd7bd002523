# services/pipeline.py
"""
Per-request orchestration: prepare each photo, ask the provider for
features, score, select, aggregate, then ask for coaching tips.

Each photo is independent. Whatever goes wrong for one photo is recorded on
its item (score=None) and never aborts the batch.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from fastapi.concurrency import run_in_threadpool

import config
from schemas import AnalyzeResponse, AnalyzedItem, Features, Overall
from services.aggregator import aggregate_profile_score
from services.features import PhotoRole, normalize_features, resolve_role
from services.images import prepare_image
from services.oracle import OracleFailure, get_provider
from services.scorer import display_score, score_breakdown, score_composite
from services.selection import ScoredPhoto, select_and_order
from services.weights import ScoringConfig

logger = logging.getLogger(__name__)


class InvalidInput(ValueError):
    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class PhotoUpload:
    filename: str
    data: bytes


@dataclass
class PhotoAnalysis:
    scored: ScoredPhoto
    filename: str
    assessment: str = ""
    error: Optional[str] = None
    feedback: List[str] = field(default_factory=list)
    feedback_error: Optional[str] = None


def validate_batch(
    uploads: Sequence[PhotoUpload],
    max_photos: int = config.MAX_UPLOAD_PHOTOS,
    max_bytes: int = config.MAX_UPLOAD_BYTES,
) -> None:
    if not uploads:
        raise InvalidInput("images must be a non-empty array")
    if len(uploads) > max_photos:
        raise InvalidInput(f"too many photos: {len(uploads)} (max {max_photos})")
    for u in uploads:
        if len(u.data) > max_bytes:
            raise InvalidInput(
                f"{u.filename}: {len(u.data)} bytes exceeds limit of {max_bytes}",
                status_code=413,
            )


def _failed(index: int, upload: PhotoUpload, e: Exception) -> PhotoAnalysis:
    return PhotoAnalysis(
        scored=ScoredPhoto(index=index, raw_features=None, role=PhotoRole.GENERIC, score=None),
        filename=upload.filename,
        error=str(e) or e.__class__.__name__,
    )


def analyze_one(
    index: int,
    upload: PhotoUpload,
    provider,
    scoring: ScoringConfig,
    resize_width: int = config.RESIZE_WIDTH,
) -> PhotoAnalysis:
    try:
        image = prepare_image(upload.data, width=resize_width)
        result = provider.extract_features(image)
    except (OracleFailure, ValueError) as e:
        logger.warning("photo %d (%s) excluded: %s", index, upload.filename, e)
        return _failed(index, upload, e)
    except Exception as e:
        logger.exception("photo %d (%s) excluded after unexpected error", index, upload.filename)
        return _failed(index, upload, e)

    features = normalize_features(result.features, scoring.ranges)
    role = resolve_role(result.photo_type)
    score = display_score(score_composite(features, role, scoring))
    logger.info("photo %d (%s): role=%s score=%d", index, upload.filename, role.value, score)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("photo %d terms: %s", index, score_breakdown(features, role, scoring))

    return PhotoAnalysis(
        scored=ScoredPhoto(index=index, raw_features=features, role=role, score=score),
        filename=upload.filename,
        assessment=result.assessment,
    )


def add_feedback(analysis: PhotoAnalysis, provider) -> PhotoAnalysis:
    s = analysis.scored
    if s.score is None:
        return analysis
    try:
        analysis.feedback = provider.generate_feedback(s.raw_features.as_payload(), s.role.value, s.score)
    except Exception as e:
        # tips are presentational; the score stands
        logger.warning("feedback for photo %d (%s) failed: %s", s.index, analysis.filename, e)
        analysis.feedback_error = str(e) or e.__class__.__name__
    return analysis


def _item(a: PhotoAnalysis, selected: set) -> AnalyzedItem:
    s = a.scored
    return AnalyzedItem(
        index=s.index,
        filename=a.filename,
        score=s.score,
        role=s.role.value,
        features=Features(**s.raw_features.as_payload()) if s.raw_features else None,
        assessment=a.assessment,
        feedback=a.feedback,
        selected=s.index in selected,
        error=a.error,
        feedback_error=a.feedback_error,
    )


async def analyze_photos(
    uploads: Sequence[PhotoUpload],
    provider_name: str = config.REVIEW_PROVIDER,
    scoring: ScoringConfig = config.SCORING_CONFIG,
    with_feedback: bool = config.FEEDBACK_ENABLED,
    max_selected: int = config.MAX_SELECTED,
    provider=None,
) -> AnalyzeResponse:
    validate_batch(uploads)
    provider = provider or get_provider(provider_name)

    analyses = await asyncio.gather(*(
        run_in_threadpool(analyze_one, i, u, provider, scoring)
        for i, u in enumerate(uploads)
    ))

    if with_feedback:
        analyses = await asyncio.gather(*(run_in_threadpool(add_feedback, a, provider) for a in analyses))

    scored = [a.scored for a in analyses]
    selection = select_and_order(scored, max_count=max_selected)
    chosen = set(selection.order)
    by_index = {s.index: s for s in scored}

    scores = [s.score for s in scored]
    roles = [s.role for s in scored]
    overall = Overall(
        profile_score=aggregate_profile_score(scores, roles),
        selected_profile_score=aggregate_profile_score(
            [by_index[i].score for i in selection.order],
            [by_index[i].role for i in selection.order],
        ),
        items_count=len(analyses),
        scored_count=sum(1 for s in scores if s is not None),
        failed_count=sum(1 for s in scores if s is None),
        provider=provider_name,
        scoring_version=scoring.version,
    )
    logger.info(
        "analysed %d photos (%d failed), order=%s profile=%d",
        overall.items_count, overall.failed_count, selection.order, overall.profile_score,
    )

    return AnalyzeResponse(
        items=[_item(a, chosen) for a in analyses],
        scores=scores,
        feedback=[a.feedback for a in analyses],
        order=selection.order,
        overall=overall,
    )
