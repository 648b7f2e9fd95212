"""Prompt assembly for the chat-completions tone service."""

from __future__ import annotations

import time

from toneguard.scoring.models import ToneScoreVector
from toneguard.service.base import Action, ToneRequest

CULTURAL_CONTEXTS: dict[str, str] = {
    "EN": "Use direct communication. Be clear and concise. American/British "
          "professional standards.",
    "HI": "Indian English: Use respectful language, soften criticism, acknowledge "
          "hierarchy. Use 'ji' for respect where appropriate.",
    "ES": "Spanish: Warm and personal, maintain politeness, use formal 'usted' when "
          "appropriate. Latin warmth.",
    "FR": "French: Formal and elegant, maintain professional distance, use proper "
          "titles and vous form.",
    "DE": "German: Direct and precise, focus on facts, maintain professional tone. "
          "Sachlich approach.",
    "PT": "Portuguese: Warm and friendly, maintain personal connection. Brazilian or "
          "Portuguese style.",
    "ZH": "Chinese: Respectful and indirect, preserve face, use humble language. "
          "Relationship-focused.",
}

AUDIENCE_STYLES: dict[str, str] = {
    "boss": "Professional and respectful. Acknowledge authority while being "
            "confident. Solution-oriented.",
    "client": "Service-oriented and accommodating. Focus on value and partnership.",
    "peer": "Collaborative and friendly. Equal footing, supportive tone.",
    "HR": "Formal and policy-aware. Professional, documented approach.",
    "general": "Neutral professional tone suitable for any audience.",
    "investor": "Confident and data-driven. Focus on ROI, metrics, and strategic value.",
    "team": "Supportive and motivating. Clear direction with encouragement.",
    "vendor": "Professional and transactional. Clear expectations and terms.",
    "partner": "Collaborative and mutually beneficial. Win-win framing.",
    "customer": "Helpful and solution-focused. Empathetic to their needs.",
}

UNIQUENESS_TECHNIQUES: tuple[str, ...] = (
    "Use varied sentence structures - mix short punchy sentences with longer "
    "explanatory ones",
    "Employ active voice predominantly for clarity and directness",
    "Include transitional phrases that feel natural, not formulaic",
    "Vary paragraph lengths for visual and cognitive rhythm",
    "Use specific, concrete language instead of vague generalities",
    "Incorporate the writer's apparent intent with fresh phrasing",
    "Avoid clichés and overused business jargon",
    "Make the tone feel human and authentic, not robotic",
)

# Fallback targets for axes a slider payload may leave out.
ADJUSTMENT_DEFAULTS: dict[str, int] = {
    "defensiveness": 10,
    "condescension": 5,
    "manipulation": 0,
    "dismissiveness": 5,
    "anxiety": 15,
}

_ADJUSTMENT_LINES: tuple[tuple[str, str], ...] = (
    ("passive_aggressive", "Passive-aggressive: reduce to {}%"),
    ("sarcasm", "Sarcasm: reduce to {}%"),
    ("empathy", "Empathy: increase to {}%"),
    ("formality", "Formality: adjust to {}%"),
    ("aggression", "Aggression: reduce to {}%"),
    ("defensiveness", "Defensiveness: reduce to {}%"),
    ("condescension", "Condescension: reduce to {}%"),
    ("manipulation", "Manipulation: eliminate ({}%)"),
    ("dismissiveness", "Dismissiveness: reduce to {}%"),
    ("anxiety", "Anxiety: reduce to {}%"),
)

_SCORE_SCHEMA = """{
  "passive_agg_score": <0-100, where 0=none, 50=moderate, 100=severe>,
  "sarcasm_score": <0-100, detect irony, mockery, eye-roll tone>,
  "empathy_score": <0-100, understanding and compassion shown>,
  "formality_score": <0-100, 0=very casual, 100=highly formal>,
  "aggression_score": <0-100, direct hostility or anger>,
  "defensiveness_score": <0-100, self-protective justifications>,
  "condescension_score": <0-100, talking down, patronizing>,
  "manipulation_score": <0-100, guilt-tripping, emotional control>,
  "dismissiveness_score": <0-100, ignoring or belittling>,
  "anxiety_score": <0-100, nervous energy, over-explaining>,"""

_CALIBRATION = """SCORING CALIBRATION:
- 0-20: Minimal/absent
- 21-40: Slight presence
- 41-60: Moderate/noticeable
- 61-80: Strong presence
- 81-100: Dominant/severe"""


def _context_block(request: ToneRequest) -> str:
    cultural = CULTURAL_CONTEXTS.get(request.language, CULTURAL_CONTEXTS["EN"])
    style = AUDIENCE_STYLES.get(request.audience, AUDIENCE_STYLES["general"])
    return (
        f"Cultural Context: {cultural}\n"
        f"Target Audience: {request.audience} - {style}\n"
        f"Content Medium: {request.content_medium}"
    )


def adjustment_instructions(
    adjustments: ToneScoreVector | None,
    *,
    audience: str,
    content_medium: str,
) -> str:
    """Target-score lines for a manual rewrite, or default goals."""
    if adjustments is None:
        return "\n".join([
            "DEFAULT TRANSFORMATION GOALS:",
            "- Remove ALL passive-aggressive undertones",
            "- Eliminate sarcasm while keeping wit if appropriate",
            "- Maximize empathy and understanding",
            f"- Match formality to {content_medium} and {audience}",
            "- Remove any aggression or hostility",
            "- Reduce defensiveness, focus on solutions",
            "- Eliminate condescension completely",
            "- Remove any manipulation tactics",
            "- Replace dismissiveness with engagement",
            "- Reduce anxiety, project calm confidence",
        ])

    lines = ["TARGET TONE ADJUSTMENTS (adjust toward these percentages):"]
    for axis, template in _ADJUSTMENT_LINES:
        raw = getattr(adjustments, axis)
        # A zero target is treated as unset, except on the core axes.
        if not raw and axis in ADJUSTMENT_DEFAULTS:
            raw = ADJUSTMENT_DEFAULTS[axis]
        lines.append("- " + template.format(raw or 0))
    return "\n".join(lines)


def build_analyze_messages(request: ToneRequest) -> list[dict]:
    system = (
        "You are an expert emotional intelligence analyzer with deep expertise in "
        "communication psychology and cultural nuances. Your analysis must be "
        "precise, insightful, and actionable.\n\n"
        f"{_context_block(request)}\n\n"
        "CRITICAL RULES:\n"
        "1. Return ONLY valid JSON - no markdown, no code blocks, no explanations "
        "outside JSON\n"
        "2. Be nuanced - scores should rarely be 0 or 100 unless text is extreme\n"
        "3. Consider context and intent, not just words\n"
        "4. Identify subtle emotional undertones"
    )
    user = (
        f"Analyze this {request.language} text for emotional intelligence and tone:\n\n"
        f'TEXT TO ANALYZE:\n"{request.text}"\n\n'
        "Provide a comprehensive JSON analysis:\n"
        f"{_SCORE_SCHEMA}\n"
        '  "severity": "<high if any negative score >70, medium if >40, low otherwise>",\n'
        '  "emotion_flags": ["<list 2-4 primary emotions detected>"],\n'
        '  "analysis_summary": "<2-3 sentences explaining the overall emotional tone '
        f'and potential impact on {request.audience}>",\n'
        '  "key_phrases": ["<up to 3 specific phrases that contribute most to the tone>"]\n'
        "}\n\n"
        f"{_CALIBRATION}"
    )
    return [{"role": "system", "content": system}, {"role": "user", "content": user}]


def build_rewrite_messages(request: ToneRequest, *, seed: int | None = None) -> list[dict]:
    if seed is None:
        seed = time.time_ns() // 1_000_000 % 1000
    techniques = "\n".join(
        f"{i}. {technique}" for i, technique in enumerate(UNIQUENESS_TECHNIQUES, 1)
    )
    system = (
        "You are an expert diplomatic communication writer and emotional "
        "intelligence specialist. Your rewrites must be UNIQUE, NATURAL, and "
        "EFFECTIVE.\n\n"
        f"{_context_block(request)}\n\n"
        f"UNIQUENESS GUIDELINES (Seed: {seed}):\n{techniques}\n\n"
        "CRITICAL RULES:\n"
        "1. Return ONLY valid JSON - no markdown, no code blocks\n"
        "2. Preserve 100% of the original INTENT and key information\n"
        "3. Transform the TONE, not the message\n"
        "4. Make it sound like a skilled human wrote it, not AI\n"
        "5. The rewrite should feel fresh and natural, never templated"
    )
    new_scores = _SCORE_SCHEMA.replace("\n  ", "\n    ").rstrip(",")
    user = (
        "Transform this text into a diplomatic, professional message while "
        "preserving its complete intent:\n\n"
        f'ORIGINAL TEXT:\n"{request.text}"\n\n'
        + adjustment_instructions(
            request.tone_adjustments,
            audience=request.audience,
            content_medium=request.content_medium,
        )
        + "\n\nREWRITE REQUIREMENTS:\n"
        "1. Keep all factual content and requests intact\n"
        "2. Transform emotional tone to be constructive\n"
        f"3. Make it appropriate for {request.audience} via {request.content_medium}\n"
        "4. Sound authentic and human, not like a template\n"
        "5. Use varied sentence structure for natural flow\n\n"
        "Return JSON:\n"
        "{\n"
        '  "rewritten_text": "<your diplomatic rewrite - must be unique and natural '
        'sounding>",\n'
        '  "changes_summary": "<1-2 sentences on what was transformed and why>",\n'
        '  "intent_preserved_confidence": <85-100, how well intent was preserved>,\n'
        '  "new_scores": ' + new_scores + "\n  }\n}"
    )
    return [{"role": "system", "content": system}, {"role": "user", "content": user}]


def build_messages(request: ToneRequest, *, seed: int | None = None) -> list[dict]:
    if request.action is Action.REWRITE:
        return build_rewrite_messages(request, seed=seed)
    return build_analyze_messages(request)
