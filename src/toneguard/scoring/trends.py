"""Trend and benchmark math over historical tone measurements."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum

from toneguard.scoring.models import (
    BenchmarkProfile,
    ToneAnalysisRecord,
    ToneScoreVector,
    round_half_up,
)

TREND_BAND = 10


class Trend(StrEnum):
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


@dataclass(frozen=True)
class TrendSummary:
    avg_passive_agg: int
    avg_empathy: int
    trend: Trend
    total_analyses: int

    def to_dict(self) -> dict:
        return {
            "avg_passive_agg": self.avg_passive_agg,
            "avg_empathy": self.avg_empathy,
            "trend": self.trend.value,
            "total_analyses": self.total_analyses,
        }


@dataclass(frozen=True)
class BenchmarkMatch:
    benchmark: BenchmarkProfile
    empathy_match: int
    formality_match: int
    directness_match: int
    warmth_match: int
    overall: int

    def to_dict(self) -> dict:
        return {
            "benchmark": self.benchmark.to_dict(),
            "empathy_match": self.empathy_match,
            "formality_match": self.formality_match,
            "directness_match": self.directness_match,
            "warmth_match": self.warmth_match,
            "overall": self.overall,
        }


def composite(scores: ToneScoreVector) -> float:
    """Mean of passive-aggression and aggression."""
    return (scores.value("passive_aggressive") + scores.value("aggression")) / 2


def classify_trend(recent: float, older: float) -> Trend:
    """Compare composites; differences of exactly TREND_BAND stay stable."""
    if recent < older - TREND_BAND:
        return Trend.IMPROVING
    if recent > older + TREND_BAND:
        return Trend.DECLINING
    return Trend.STABLE


def summarize_history(records: Sequence[ToneAnalysisRecord]) -> TrendSummary | None:
    """Summarize records ordered newest first; None when there are none."""
    total = len(records)
    if total == 0:
        return None

    avg_passive_agg = round_half_up(
        sum(r.scores.value("passive_aggressive") for r in records) / total
    )
    avg_empathy = round_half_up(sum(r.scores.value("empathy") for r in records) / total)

    trend = Trend.STABLE
    if total >= 2:
        trend = classify_trend(composite(records[0].scores), composite(records[-1].scores))

    return TrendSummary(
        avg_passive_agg=avg_passive_agg,
        avg_empathy=avg_empathy,
        trend=trend,
        total_analyses=total,
    )


def _match(user_value: int, benchmark_value: int) -> int:
    return 100 - abs(user_value - benchmark_value)


def compare_to_benchmark(
    scores: ToneScoreVector,
    benchmark: BenchmarkProfile,
) -> BenchmarkMatch:
    """Score how close a vector sits to a benchmark profile.

    Directness is implied as 100 minus passive-aggression, and empathy
    stands in for warmth.
    """
    empathy = scores.value("empathy")
    empathy_match = _match(empathy, benchmark.empathy)
    formality_match = _match(scores.value("formality"), benchmark.formality)
    directness_match = _match(100 - scores.value("passive_aggressive"), benchmark.directness)
    warmth_match = _match(empathy, benchmark.warmth)
    overall = round_half_up(
        (empathy_match + formality_match + directness_match + warmth_match) / 4
    )
    return BenchmarkMatch(
        benchmark=benchmark,
        empathy_match=empathy_match,
        formality_match=formality_match,
        directness_match=directness_match,
        warmth_match=warmth_match,
        overall=overall,
    )


def rank_benchmarks(
    scores: ToneScoreVector,
    benchmarks: Sequence[BenchmarkProfile],
) -> list[BenchmarkMatch]:
    """Matches sorted best first; ties keep catalog order."""
    matches = [compare_to_benchmark(scores, b) for b in benchmarks]
    return sorted(matches, key=lambda m: -m.overall)


def best_match(
    scores: ToneScoreVector,
    benchmarks: Sequence[BenchmarkProfile],
) -> BenchmarkMatch | None:
    ranked = rank_benchmarks(scores, benchmarks)
    return ranked[0] if ranked else None
