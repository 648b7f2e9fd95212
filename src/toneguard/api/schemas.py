"""Pydantic request/response schemas for the toneguard API."""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- Request Schemas ---


class AnalyzeToneRequest(BaseModel):
    text: str = ""
    language: str | None = None
    audience: str | None = None
    contentMedium: str | None = None
    action: str = "analyze"
    toneAdjustments: dict[str, float | None] | None = None


class QuickToneRequest(BaseModel):
    text: str = ""


class BenchmarkCompareRequest(BaseModel):
    scores: dict[str, float | None] = Field(default_factory=dict)


# --- Response Schemas ---


class QuickScoreResponse(BaseModel):
    label: str
    score: int
    band: str


class TrendResponse(BaseModel):
    avg_passive_agg: int
    avg_empathy: int
    trend: str
    total_analyses: int


class BenchmarkResponse(BaseModel):
    id: str | None = None
    communicator_name: str
    description: str = ""
    empathy_score: int
    formality_score: int
    directness_score: int
    warmth_score: int


class BenchmarkMatchResponse(BaseModel):
    benchmark: BenchmarkResponse
    empathy_match: int
    formality_match: int
    directness_match: int
    warmth_match: int
    overall: int


class BenchmarkCompareResponse(BaseModel):
    best_match: BenchmarkMatchResponse | None = None
    matches: list[BenchmarkMatchResponse] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str
    version: str
    store: str = ""
    analyses: int = 0
