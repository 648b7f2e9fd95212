"""Parsing and contract checks for tone service responses."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from toneguard.exceptions import InvalidResponseError, ResponseParseError
from toneguard.scoring.models import (
    WIRE_KEYS,
    RewriteResult,
    Severity,
    ToneAnalysisRecord,
    ToneScoreVector,
    clamp_score,
    severity_for,
)
from toneguard.service.base import ToneRequest

logger = logging.getLogger(__name__)

REQUIRED_SCORE_FIELDS: tuple[str, ...] = (
    "passive_agg_score",
    "sarcasm_score",
    "empathy_score",
    "formality_score",
)
REQUIRED_ANALYSIS_FIELDS: tuple[str, ...] = REQUIRED_SCORE_FIELDS + ("severity",)

_FENCE_OPEN_RE = re.compile(r"```json\s*", re.IGNORECASE)
_FENCE_RE = re.compile(r"```\s*")


def extract_json_object(content: str | dict) -> dict:
    """Locate and parse the JSON object inside model output."""
    if isinstance(content, dict):
        return content
    if not isinstance(content, str) or not content.strip():
        raise ResponseParseError("Empty response from tone service")

    cleaned = _FENCE_RE.sub("", _FENCE_OPEN_RE.sub("", content)).strip()
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start != -1 and end > start:
        cleaned = cleaned[start:end + 1]

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.warning("Failed to parse tone service response: %s", content[:200])
        raise ResponseParseError(f"Invalid response format: {e}") from e
    if not isinstance(parsed, dict):
        raise ResponseParseError("Invalid response format: expected a JSON object")
    return parsed


def _parse_scores(data: dict, required: tuple[str, ...], prefix: str = "") -> ToneScoreVector:
    for key in required:
        if data.get(key) is None:
            raise InvalidResponseError(prefix + key)
    values: dict[str, Any] = {}
    for axis, key in WIRE_KEYS.items():
        raw = data.get(key)
        if raw is None:
            continue
        try:
            values[axis] = clamp_score(raw)
        except ValueError as e:
            raise InvalidResponseError(prefix + key, "is not a number") from e
    return ToneScoreVector(**values)


def _string_list(value: object) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if str(item or "").strip()]


def validate_analysis(
    data: dict,
    request: ToneRequest,
    *,
    strict_severity: bool = False,
) -> ToneAnalysisRecord:
    """Build an analysis record, enforcing the required-field contract."""
    scores = _parse_scores(data, REQUIRED_SCORE_FIELDS)
    if data.get("severity") is None:
        raise InvalidResponseError("severity")
    try:
        severity = Severity(str(data["severity"]).strip().lower())
    except ValueError as e:
        raise InvalidResponseError("severity", "is not high, medium or low") from e

    derived = severity_for(scores)
    if severity is not derived:
        if strict_severity:
            logger.warning(
                "Service severity %s disagrees with scores (%s); using %s",
                severity.value, derived.value, derived.value,
            )
            severity = derived
        else:
            logger.debug(
                "Service severity %s differs from derived %s",
                severity.value, derived.value,
            )

    return ToneAnalysisRecord(
        scores=scores,
        severity=severity,
        emotion_flags=tuple(_string_list(data.get("emotion_flags"))),
        analysis_summary=str(data.get("analysis_summary") or ""),
        key_phrases=tuple(_string_list(data.get("key_phrases"))),
        input_text=request.text,
        language=request.language,
        audience=request.audience,
        content_medium=request.content_medium,
    )


def validate_rewrite(data: dict) -> RewriteResult:
    """Build a rewrite result; rewritten_text must be a non-empty string."""
    text = data.get("rewritten_text")
    if not isinstance(text, str) or not text.strip():
        raise InvalidResponseError("rewritten_text")

    new_scores = None
    raw_scores = data.get("new_scores")
    if raw_scores is not None:
        if not isinstance(raw_scores, dict):
            raise InvalidResponseError("new_scores", "is not an object")
        new_scores = _parse_scores(raw_scores, REQUIRED_SCORE_FIELDS, prefix="new_scores.")

    confidence = 0
    raw_confidence = data.get("intent_preserved_confidence")
    if raw_confidence is not None:
        try:
            confidence = clamp_score(raw_confidence)
        except ValueError:
            logger.debug("Ignoring non-numeric confidence %r", raw_confidence)

    return RewriteResult(
        rewritten_text=text,
        changes_summary=str(data.get("changes_summary") or ""),
        intent_preserved_confidence=confidence,
        new_scores=new_scores,
    )
