"""Structured models for tone measurements."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields, replace
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

AXES: tuple[str, ...] = (
    "passive_aggressive",
    "sarcasm",
    "empathy",
    "formality",
    "aggression",
    "defensiveness",
    "condescension",
    "manipulation",
    "dismissiveness",
    "anxiety",
)

POSITIVE_AXES = frozenset({"empathy", "formality"})
NEGATIVE_AXES = frozenset(AXES) - POSITIVE_AXES

WIRE_KEYS: dict[str, str] = {
    axis: ("passive_agg_score" if axis == "passive_aggressive" else f"{axis}_score")
    for axis in AXES
}
_AXIS_BY_KEY: dict[str, str] = {key: axis for axis, key in WIRE_KEYS.items()}

MAX_EMOTION_FLAGS = 4
MAX_KEY_PHRASES = 3


def round_half_up(value: float) -> int:
    """Round like JavaScript's Math.round (halves go up)."""
    return int(math.floor(value + 0.5))


def clamp_score(value: object) -> int:
    """Coerce a numeric score to an int in [0, 100]."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError(f"score must be numeric, got {value!r}")
    try:
        number = float(value)
    except ValueError as e:
        raise ValueError(f"score must be numeric, got {value!r}") from e
    if not math.isfinite(number):
        raise ValueError(f"score must be finite, got {value!r}")
    return max(0, min(100, round_half_up(number)))


def axis_for_key(key: str) -> str | None:
    """Map an axis name or wire key to the canonical axis name."""
    if key in WIRE_KEYS:
        return key
    return _AXIS_BY_KEY.get(key)


class Severity(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class ToneScoreVector:
    """Scores on the closed axis set; None marks an axis the source never had."""

    passive_aggressive: int | None = None
    sarcasm: int | None = None
    empathy: int | None = None
    formality: int | None = None
    aggression: int | None = None
    defensiveness: int | None = None
    condescension: int | None = None
    manipulation: int | None = None
    dismissiveness: int | None = None
    anxiety: int | None = None

    def __post_init__(self) -> None:
        for f in fields(self):
            raw = getattr(self, f.name)
            if raw is not None:
                object.__setattr__(self, f.name, clamp_score(raw))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ToneScoreVector:
        """Build from axis names or wire keys; unknown keys are ignored."""
        values: dict[str, int] = {}
        for key, raw in data.items():
            axis = axis_for_key(str(key))
            if axis is None or raw is None:
                continue
            values[axis] = clamp_score(raw)
        return cls(**values)

    def value(self, axis: str) -> int:
        """Score for an axis, with missing axes read as 0."""
        if axis not in WIRE_KEYS:
            raise KeyError(axis)
        raw = getattr(self, axis)
        return 0 if raw is None else raw

    def missing_axes(self) -> list[str]:
        return [axis for axis in AXES if getattr(self, axis) is None]

    def filled(self) -> ToneScoreVector:
        """Copy with every missing axis set to 0."""
        return replace(self, **{axis: 0 for axis in self.missing_axes()})

    def diff(self, other: ToneScoreVector) -> dict[str, int]:
        """Per-axis change from other to self."""
        return {axis: self.value(axis) - other.value(axis) for axis in AXES}

    def to_dict(self, *, include_missing: bool = False) -> dict[str, int]:
        out: dict[str, int] = {}
        for axis in AXES:
            raw = getattr(self, axis)
            if raw is None and not include_missing:
                continue
            out[WIRE_KEYS[axis]] = 0 if raw is None else raw
        return out


def severity_for(scores: ToneScoreVector) -> Severity:
    """High if any negative axis is above 70, medium above 40, else low."""
    worst = max(scores.value(axis) for axis in NEGATIVE_AXES)
    if worst > 70:
        return Severity.HIGH
    if worst > 40:
        return Severity.MEDIUM
    return Severity.LOW


def _utc_now() -> str:
    return datetime.now(UTC).isoformat()


@dataclass(frozen=True)
class ToneAnalysisRecord:
    """One analyze result plus its provenance. Immutable once created."""

    scores: ToneScoreVector
    severity: Severity
    emotion_flags: tuple[str, ...] = ()
    analysis_summary: str = ""
    key_phrases: tuple[str, ...] = ()
    input_text: str = ""
    language: str = "EN"
    audience: str = "general"
    content_medium: str = "email"
    created_at: str = field(default_factory=_utc_now)
    rewritten_text: str | None = None
    id: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "severity", Severity(self.severity))
        object.__setattr__(
            self, "emotion_flags", tuple(self.emotion_flags)[:MAX_EMOTION_FLAGS],
        )
        object.__setattr__(
            self, "key_phrases", tuple(self.key_phrases)[:MAX_KEY_PHRASES],
        )

    @property
    def derived_severity(self) -> Severity:
        return severity_for(self.scores)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = dict(self.scores.to_dict(include_missing=True))
        payload.update({
            "severity": self.severity.value,
            "emotion_flags": list(self.emotion_flags),
            "analysis_summary": self.analysis_summary,
            "key_phrases": list(self.key_phrases),
            "input_text": self.input_text,
            "language": self.language,
            "audience": self.audience,
            "content_medium": self.content_medium,
            "created_at": self.created_at,
            "rewritten_text": self.rewritten_text,
            "id": self.id,
        })
        return payload


@dataclass(frozen=True)
class RewriteResult:
    """A diplomatic rewrite and the scores the service gives it."""

    rewritten_text: str
    changes_summary: str = ""
    intent_preserved_confidence: int = 0
    new_scores: ToneScoreVector | None = None

    def as_record(
        self,
        *,
        language: str = "EN",
        audience: str = "general",
        content_medium: str = "email",
        created_at: str | None = None,
    ) -> ToneAnalysisRecord:
        """Treat the rewrite as a new historical measurement."""
        scores = self.new_scores or ToneScoreVector()
        return ToneAnalysisRecord(
            scores=scores,
            severity=severity_for(scores),
            analysis_summary=self.changes_summary,
            input_text=self.rewritten_text,
            language=language,
            audience=audience,
            content_medium=content_medium,
            created_at=created_at or _utc_now(),
        )

    def to_dict(self) -> dict:
        return {
            "rewritten_text": self.rewritten_text,
            "changes_summary": self.changes_summary,
            "intent_preserved_confidence": int(self.intent_preserved_confidence),
            "new_scores": (
                self.new_scores.to_dict(include_missing=True)
                if self.new_scores is not None
                else None
            ),
        }


@dataclass(frozen=True)
class BenchmarkProfile:
    """Reference tone signature of a named communicator."""

    communicator_name: str
    empathy: int
    formality: int
    directness: int
    warmth: int
    description: str = ""
    id: str | None = None

    def __post_init__(self) -> None:
        for name in ("empathy", "formality", "directness", "warmth"):
            object.__setattr__(self, name, clamp_score(getattr(self, name)))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "communicator_name": self.communicator_name,
            "description": self.description,
            "empathy_score": self.empathy,
            "formality_score": self.formality,
            "directness_score": self.directness,
            "warmth_score": self.warmth,
        }


class QuickBand(StrEnum):
    """Display band for a live score; carries no numeric meaning."""

    HIGH_CONCERN = "high_concern"
    CONCERN = "concern"
    POSITIVE = "positive"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class QuickScore:
    label: str
    score: int
    band: QuickBand

    def to_dict(self) -> dict:
        return {"label": self.label, "score": self.score, "band": self.band.value}
