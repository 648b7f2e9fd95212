"""Tests for trend summaries and benchmark matching."""

from __future__ import annotations

from toneguard.scoring.models import (
    BenchmarkProfile,
    RewriteResult,
    ToneAnalysisRecord,
    ToneScoreVector,
)
from toneguard.scoring.trends import (
    Trend,
    best_match,
    classify_trend,
    compare_to_benchmark,
    rank_benchmarks,
    summarize_history,
)


def _record(**scores) -> ToneAnalysisRecord:
    return ToneAnalysisRecord(scores=ToneScoreVector(**scores), severity="low")


def _profile(name: str, empathy: int, formality: int, directness: int, warmth: int):
    return BenchmarkProfile(
        communicator_name=name, empathy=empathy, formality=formality,
        directness=directness, warmth=warmth, id=name.lower(),
    )


class TestSummarizeHistory:
    def test_empty_history(self):
        assert summarize_history([]) is None

    def test_single_record_is_stable(self):
        summary = summarize_history([
            _record(passive_aggressive=30, aggression=20, empathy=70),
        ])
        assert summary.to_dict() == {
            "avg_passive_agg": 30,
            "avg_empathy": 70,
            "trend": "stable",
            "total_analyses": 1,
        }

    def test_averages_round_half_up(self):
        summary = summarize_history([
            _record(passive_aggressive=30, empathy=61),
            _record(passive_aggressive=31, empathy=60),
        ])
        assert summary.avg_passive_agg == 31
        assert summary.avg_empathy == 61

    def test_missing_axes_count_as_zero(self):
        summary = summarize_history([_record(passive_aggressive=40), _record(empathy=80)])
        assert summary.avg_passive_agg == 20
        assert summary.avg_empathy == 40

    def test_improving(self):
        newest = _record(passive_aggressive=20, aggression=20)
        oldest = _record(passive_aggressive=60, aggression=40)
        assert summarize_history([newest, oldest]).trend is Trend.IMPROVING

    def test_declining(self):
        newest = _record(passive_aggressive=70, aggression=50)
        oldest = _record(passive_aggressive=20, aggression=20)
        assert summarize_history([newest, oldest]).trend is Trend.DECLINING

    def test_boundary_of_ten_is_stable(self):
        newest = _record(passive_aggressive=40, aggression=40)
        oldest = _record(passive_aggressive=50, aggression=50)
        assert summarize_history([newest, oldest]).trend is Trend.STABLE
        assert summarize_history([oldest, newest]).trend is Trend.STABLE

    def test_just_past_boundary(self):
        newest = _record(passive_aggressive=39, aggression=40)
        oldest = _record(passive_aggressive=50, aggression=50)
        assert summarize_history([newest, oldest]).trend is Trend.IMPROVING

    def test_compares_newest_with_oldest_only(self):
        records = [
            _record(passive_aggressive=10, aggression=10),
            _record(passive_aggressive=90, aggression=90),
            _record(passive_aggressive=15, aggression=15),
        ]
        assert summarize_history(records).trend is Trend.STABLE

    def test_rewrite_scores_feed_back_into_history(self):
        history = [
            _record(passive_aggressive=60, empathy=20),
            _record(passive_aggressive=30, empathy=50),
        ]
        result = RewriteResult(
            rewritten_text="Happy to help with this.",
            new_scores=ToneScoreVector(passive_aggressive=0, empathy=80),
        )
        summary = summarize_history([result.as_record(), *history])
        assert summary.total_analyses == 3
        assert summary.avg_passive_agg == 30
        assert summary.avg_empathy == 50


class TestClassifyTrend:
    def test_strict_comparisons(self):
        assert classify_trend(40, 50) is Trend.STABLE
        assert classify_trend(39.5, 50) is Trend.IMPROVING
        assert classify_trend(60, 50) is Trend.STABLE
        assert classify_trend(60.5, 50) is Trend.DECLINING


class TestBenchmarks:
    def test_identical_vector_matches_fully(self):
        profile = _profile("Mirror", empathy=80, formality=75, directness=60, warmth=80)
        scores = ToneScoreVector(empathy=80, formality=75, passive_aggressive=40)
        match = compare_to_benchmark(scores, profile)
        assert match.empathy_match == 100
        assert match.directness_match == 100
        assert match.warmth_match == 100
        assert match.overall == 100

    def test_match_components(self):
        profile = _profile("Coach", empathy=85, formality=45, directness=80, warmth=90)
        scores = ToneScoreVector(empathy=60, formality=50, passive_aggressive=30)
        match = compare_to_benchmark(scores, profile)
        assert match.empathy_match == 75
        assert match.formality_match == 95
        assert match.directness_match == 90
        assert match.warmth_match == 70
        assert match.overall == 83  # 82.5 rounds up

    def test_missing_axes_default_to_zero(self):
        profile = _profile("Cold", empathy=0, formality=0, directness=100, warmth=0)
        match = compare_to_benchmark(ToneScoreVector(), profile)
        assert match.overall == 100

    def test_rank_best_first(self):
        scores = ToneScoreVector(empathy=80, formality=75, passive_aggressive=40)
        profiles = [
            _profile("Far", empathy=10, formality=10, directness=10, warmth=10),
            _profile("Near", empathy=80, formality=75, directness=60, warmth=80),
        ]
        ranked = rank_benchmarks(scores, profiles)
        assert [m.benchmark.communicator_name for m in ranked] == ["Near", "Far"]
        assert best_match(scores, profiles).benchmark.communicator_name == "Near"

    def test_ties_keep_catalog_order(self):
        scores = ToneScoreVector(empathy=50, formality=50, passive_aggressive=50)
        profiles = [
            _profile("First", empathy=50, formality=50, directness=50, warmth=50),
            _profile("Second", empathy=50, formality=50, directness=50, warmth=50),
        ]
        ranked = rank_benchmarks(scores, profiles)
        assert [m.benchmark.communicator_name for m in ranked] == ["First", "Second"]

    def test_best_match_of_nothing(self):
        assert best_match(ToneScoreVector(), []) is None

    def test_overall_in_range(self):
        profile = _profile("Edge", empathy=100, formality=0, directness=0, warmth=100)
        scores = ToneScoreVector(empathy=0, formality=100, passive_aggressive=0)
        match = compare_to_benchmark(scores, profile)
        assert 0 <= match.overall <= 100
        assert match.overall == 0
