"""Tone score model, live heuristic and history analysis."""

from toneguard.scoring.debounce import (
    AsyncioScheduler,
    Debouncer,
    LiveToneMonitor,
    VirtualClock,
)
from toneguard.scoring.models import (
    AXES,
    NEGATIVE_AXES,
    POSITIVE_AXES,
    BenchmarkProfile,
    QuickBand,
    QuickScore,
    RewriteResult,
    Severity,
    ToneAnalysisRecord,
    ToneScoreVector,
    severity_for,
)
from toneguard.scoring.quick import quick_scores
from toneguard.scoring.trends import (
    BenchmarkMatch,
    Trend,
    TrendSummary,
    best_match,
    compare_to_benchmark,
    rank_benchmarks,
    summarize_history,
)

__all__ = [
    "AXES",
    "NEGATIVE_AXES",
    "POSITIVE_AXES",
    "AsyncioScheduler",
    "BenchmarkMatch",
    "BenchmarkProfile",
    "Debouncer",
    "LiveToneMonitor",
    "QuickBand",
    "QuickScore",
    "RewriteResult",
    "Severity",
    "ToneAnalysisRecord",
    "ToneScoreVector",
    "Trend",
    "TrendSummary",
    "VirtualClock",
    "best_match",
    "compare_to_benchmark",
    "quick_scores",
    "rank_benchmarks",
    "severity_for",
    "summarize_history",
]
