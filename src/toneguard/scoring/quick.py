"""Offline pattern-count tone estimate for live feedback while typing.

Same input always yields the same list; nothing here touches the network
or keeps state between calls.
"""

from __future__ import annotations

import re

from toneguard.scoring.models import QuickBand, QuickScore, round_half_up

MIN_TEXT_LENGTH = 10
MAX_RESULTS = 4

PASSIVE_AGG_THRESHOLD = 20
AGGRESSION_THRESHOLD = 15
EMPATHY_THRESHOLD = 10

_WHITESPACE_RE = re.compile(r"\s+")


def _compile(patterns: tuple[str, ...]) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(p, re.IGNORECASE | re.ASCII) for p in patterns)


_PASSIVE_AGG_PATTERNS = _compile((
    r"\bfine\b",
    r"\bwhatever\b",
    r"\bif you say so\b",
    r"\bI guess\b",
    r"\bno worries\b",
    r"\bsure\.\.\.",
    r"\bI'm not mad\b",
    r"\bdo what you want\b",
    r"\bas per my last\b",
    r"\bper our conversation\b",
    r"\bjust saying\b",
    r"\bI mean\.\.\.",
))

_AGGRESSION_PATTERNS = _compile((
    r"!",
    r"\bstop\b",
    r"\bdon't\b",
    r"\bnever\b",
    r"\balways\b",
    r"\byou\s+(never|always)\b",
    r"\bwrong\b",
    r"\bterrible\b",
    r"\bstupid\b",
    r"\bidiot\b",
    r"\bshut up\b",
))

_EMPATHY_PATTERNS = _compile((
    r"\bunderstand\b",
    r"\bsorry\b",
    r"\bthank you\b",
    r"\bappreciate\b",
    r"\bhelp\b",
    r"\bplease\b",
    r"\bhope\b",
    r"\bfeel\b",
    r"\bsupport\b",
    r"\bconsider\b",
))

_INFORMAL_PATTERNS = _compile((
    r"\blol\b",
    r"\bomg\b",
    r"\bbtw\b",
    r"\bgonna\b",
    r"\bwanna\b",
    r"\bcool\b",
    r"\bawesome\b",
    r"\bhey\b",
    r"\byeah\b",
    r"\bnope\b",
))

_FORMAL_PATTERNS = _compile((
    r"\bregards\b",
    r"\bsincerely\b",
    r"\brespectfully\b",
    r"\bkindly\b",
    r"\bfurthermore\b",
    r"\bhowever\b",
    r"\btherefore\b",
    r"\baccordingly\b",
))


def word_count(text: str) -> int:
    """Pieces of text between whitespace runs, never less than 1."""
    return max(1, len(_WHITESPACE_RE.split(text)))


def count_matches(text: str, patterns: tuple[re.Pattern[str], ...]) -> int:
    """Total occurrences of every pattern, overlaps across patterns included."""
    return sum(sum(1 for _ in pattern.finditer(text)) for pattern in patterns)


def _density_score(count: int, words: int, density_weight: int, hit_weight: int) -> int:
    return min(100, round_half_up(count / words * density_weight + count * hit_weight))


def passive_aggression_score(text: str) -> int:
    count = count_matches(text, _PASSIVE_AGG_PATTERNS)
    return _density_score(count, word_count(text), 500, 15)


def aggression_score(text: str) -> int:
    count = count_matches(text, _AGGRESSION_PATTERNS)
    return _density_score(count, word_count(text), 300, 10)


def empathy_score(text: str) -> int:
    count = count_matches(text, _EMPATHY_PATTERNS)
    return _density_score(count, word_count(text), 400, 12)


def formality_score(text: str) -> int:
    """Baseline-centred: 50, plus 15 per formal marker, minus 20 per informal one."""
    formal = count_matches(text, _FORMAL_PATTERNS)
    informal = count_matches(text, _INFORMAL_PATTERNS)
    return max(0, min(100, 50 + formal * 15 - informal * 20))


def quick_scores(text: str) -> list[QuickScore]:
    """Return the live tone indicator entries for text.

    Blank text or text shorter than ten characters yields an empty list,
    telling the caller to hide the indicator.
    """
    if not text.strip() or len(text) < MIN_TEXT_LENGTH:
        return []

    results: list[QuickScore] = []

    passive_agg = passive_aggression_score(text)
    if passive_agg > PASSIVE_AGG_THRESHOLD:
        band = QuickBand.HIGH_CONCERN if passive_agg > 50 else QuickBand.CONCERN
        results.append(QuickScore("Passive-Agg", passive_agg, band))

    aggression = aggression_score(text)
    if aggression > AGGRESSION_THRESHOLD:
        band = QuickBand.HIGH_CONCERN if aggression > 40 else QuickBand.CONCERN
        results.append(QuickScore("Aggression", aggression, band))

    empathy = empathy_score(text)
    if empathy > EMPATHY_THRESHOLD:
        results.append(QuickScore("Empathy", empathy, QuickBand.POSITIVE))

    results.append(QuickScore("Formality", formality_score(text), QuickBand.NEUTRAL))

    return results[:MAX_RESULTS]
