"""Markdown rendering for analyses, rewrites, trends and benchmarks."""

from __future__ import annotations

from collections.abc import Sequence

from toneguard.scoring.models import (
    AXES,
    RewriteResult,
    QuickScore,
    ToneAnalysisRecord,
    ToneScoreVector,
)
from toneguard.scoring.trends import BenchmarkMatch, TrendSummary

AXIS_LABELS = {
    "passive_aggressive": "Passive-aggression",
    "sarcasm": "Sarcasm",
    "empathy": "Empathy",
    "formality": "Formality",
    "aggression": "Aggression",
    "defensiveness": "Defensiveness",
    "condescension": "Condescension",
    "manipulation": "Manipulation",
    "dismissiveness": "Dismissiveness",
    "anxiety": "Anxiety",
}


def _score_lines(
    scores: ToneScoreVector,
    baseline: ToneScoreVector | None = None,
) -> list[str]:
    lines: list[str] = []
    for axis in AXES:
        raw = getattr(scores, axis)
        if raw is None:
            continue
        label = AXIS_LABELS[axis]
        if baseline is not None and getattr(baseline, axis) is not None:
            delta = raw - baseline.value(axis)
            lines.append(f"- {label}: `{raw}/100` (`{delta:+d}`)")
        else:
            lines.append(f"- {label}: `{raw}/100`")
    return lines


def render_analysis(record: ToneAnalysisRecord) -> str:
    """Render a markdown summary for one analysis."""
    lines: list[str] = [
        "# Tone Analysis",
        "",
        f"- Severity: `{record.severity.value}`",
        f"- Audience: `{record.audience}`",
        f"- Language: `{record.language}`",
        f"- Medium: `{record.content_medium}`",
    ]
    if record.id is not None:
        lines.append(f"- Record: `#{record.id}`")

    lines.extend(["", "## Scores", ""])
    lines.extend(_score_lines(record.scores))

    if record.emotion_flags:
        lines.extend(["", "## Emotion Flags", ""])
        lines.extend(f"- {flag}" for flag in record.emotion_flags)

    if record.key_phrases:
        lines.extend(["", "## Key Phrases", ""])
        lines.extend(f'- "{phrase}"' for phrase in record.key_phrases)

    if record.analysis_summary:
        lines.extend(["", "## Summary", "", record.analysis_summary])
    return "\n".join(lines).strip() + "\n"


def render_rewrite(
    result: RewriteResult,
    baseline: ToneScoreVector | None = None,
) -> str:
    """Render a rewrite, with score deltas when a baseline is known."""
    lines: list[str] = [
        "# Rewrite",
        "",
        f"- Intent preserved: `{result.intent_preserved_confidence}%`",
        "",
        "## Rewritten Text",
        "",
        result.rewritten_text,
    ]
    if result.new_scores is not None:
        lines.extend(["", "## New Scores", ""])
        lines.extend(_score_lines(result.new_scores, baseline))
    if result.changes_summary:
        lines.extend(["", "## Changes", "", result.changes_summary])
    return "\n".join(lines).strip() + "\n"


def render_quick_scores(scores: Sequence[QuickScore]) -> str:
    if not scores:
        return "No live signals (text too short or neutral).\n"
    return "".join(
        f"{score.label:<20} {score.score:>3}  [{score.band.value}]\n"
        for score in scores
    )


def render_history(records: Sequence[ToneAnalysisRecord]) -> str:
    if not records:
        return "No analyses recorded yet.\n"
    lines: list[str] = []
    for record in records:
        preview = record.input_text.replace("\n", " ")
        if len(preview) > 60:
            preview = preview[:57] + "..."
        lines.append(
            f"#{record.id}  {record.created_at[:19]}  {record.severity.value:<6}  "
            f"PA {record.scores.value('passive_aggressive'):>3}  "
            f"EMP {record.scores.value('empathy'):>3}  {preview}"
        )
    return "\n".join(lines) + "\n"


def render_trend(summary: TrendSummary | None) -> str:
    if summary is None:
        return "No analyses recorded yet.\n"
    return "\n".join([
        f"Analyses:            {summary.total_analyses}",
        f"Avg passive-agg:     {summary.avg_passive_agg}",
        f"Avg empathy:         {summary.avg_empathy}",
        f"Trend:               {summary.trend.value}",
    ]) + "\n"


def render_benchmarks(matches: Sequence[BenchmarkMatch]) -> str:
    """Render ranked benchmark matches, best first."""
    if not matches:
        return "No benchmark matches.\n"
    lines: list[str] = ["# Benchmark Comparison", ""]
    for rank, match in enumerate(matches, start=1):
        profile = match.benchmark
        lines.append(f"{rank}. **{profile.communicator_name}**: `{match.overall}%` overall")
        lines.append(
            f"   - empathy `{match.empathy_match}`, formality `{match.formality_match}`, "
            f"directness `{match.directness_match}`, warmth `{match.warmth_match}`"
        )
    return "\n".join(lines) + "\n"
