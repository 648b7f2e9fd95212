"""API route handlers for toneguard."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from toneguard import __version__
from toneguard.api.schemas import (
    AnalyzeToneRequest,
    BenchmarkCompareRequest,
    BenchmarkCompareResponse,
    HealthResponse,
    QuickScoreResponse,
    QuickToneRequest,
    TrendResponse,
)
from toneguard.exceptions import (
    InvalidResponseError,
    ResponseParseError,
    ServiceError,
    StoreError,
    ValidationError,
)
from toneguard.scoring.models import ToneScoreVector
from toneguard.scoring.quick import quick_scores
from toneguard.scoring.trends import rank_benchmarks
from toneguard.service.base import Action, ToneRequest
from toneguard.session import ToneSession

logger = logging.getLogger(__name__)

router = APIRouter()

_PASSTHROUGH_STATUSES = {402, 429}


def _get_session(request: Request) -> ToneSession:
    """Get the tone session from the app state."""
    return request.app.state.session


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


# --- Analyze / Rewrite ---


@router.post("/analyze-tone")
async def analyze_tone(request: Request, body: AnalyzeToneRequest):
    """Analyze or rewrite text, mirroring the hosted analyze-tone function."""
    session = _get_session(request)
    client = session.client
    try:
        action = ToneRequest.build(body.text, body.action).action
        if action is Action.REWRITE:
            adjustments = (
                ToneScoreVector.from_dict(body.toneAdjustments)
                if body.toneAdjustments
                else None
            )
            result = await client.rewrite(
                body.text,
                language=body.language,
                audience=body.audience,
                content_medium=body.contentMedium,
                tone_adjustments=adjustments,
            )
            return result.to_dict()

        record = await client.analyze(
            body.text,
            language=body.language,
            audience=body.audience,
            content_medium=body.contentMedium,
        )
        record = await session.save(record)
        return record.to_dict()
    except ValidationError as e:
        return _error(str(e), 400)
    except ServiceError as e:
        logger.warning("Tone service failed: %s", e)
        status = e.status if e.status in _PASSTHROUGH_STATUSES else 502
        return _error(e.message, status)
    except (ResponseParseError, InvalidResponseError) as e:
        logger.error("Tone service returned an unusable response: %s", e)
        return _error(str(e), 502)
    except ValueError as e:
        return _error(str(e), 400)


@router.post("/quick-tone", response_model=list[QuickScoreResponse])
async def quick_tone(body: QuickToneRequest):
    """Local heuristic scores; never calls the service."""
    return [score.to_dict() for score in quick_scores(body.text)]


# --- History ---


@router.get("/analyses")
async def list_analyses(request: Request, limit: int = Query(5, ge=1, le=100)):
    session = _get_session(request)
    try:
        records = await session.history(limit)
    except StoreError as e:
        return _error(str(e), 500)
    return [record.to_dict() for record in records]


@router.get("/analyses/trend", response_model=TrendResponse | None)
async def analyses_trend(request: Request, limit: int = Query(5, ge=1, le=100)):
    session = _get_session(request)
    try:
        summary = await session.trend(limit)
    except StoreError as e:
        return _error(str(e), 500)
    return summary.to_dict() if summary is not None else None


# --- Benchmarks ---


async def _benchmark_profiles(session: ToneSession):
    if session.store is None:
        return []
    return await session.store.list_benchmarks()


@router.get("/benchmarks")
async def list_benchmarks(request: Request):
    session = _get_session(request)
    try:
        profiles = await _benchmark_profiles(session)
    except StoreError as e:
        return _error(str(e), 500)
    return [profile.to_dict() for profile in profiles]


@router.post("/benchmarks/compare", response_model=BenchmarkCompareResponse)
async def compare_benchmarks(request: Request, body: BenchmarkCompareRequest):
    """Rank every benchmark against the given scores."""
    session = _get_session(request)
    try:
        scores = ToneScoreVector.from_dict(body.scores)
    except ValueError as e:
        return _error(str(e), 400)
    try:
        profiles = await _benchmark_profiles(session)
    except StoreError as e:
        return _error(str(e), 500)
    matches = [match.to_dict() for match in rank_benchmarks(scores, profiles)]
    return {"best_match": matches[0] if matches else None, "matches": matches}


# --- System ---


@router.get("/health", response_model=HealthResponse)
async def health(request: Request):
    session = _get_session(request)
    if session.store is None:
        return HealthResponse(status="ok", version=__version__)
    try:
        analyses = await session.store.count_analyses()
    except StoreError as e:
        return _error(str(e), 500)
    return HealthResponse(
        status="ok", version=__version__, store=session.store.path, analyses=analyses,
    )
