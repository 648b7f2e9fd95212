"""Tone service request shape and abstract transport.

A transport carries one request payload to the external scoring service
and hands back its raw content. Parsing and contract checks happen in the
client, so every transport fails the same way.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import StrEnum

import httpx

from toneguard.exceptions import ServiceError, ValidationError
from toneguard.scoring.models import ToneScoreVector

logger = logging.getLogger(__name__)

LANGUAGES: tuple[str, ...] = ("EN", "HI", "ES", "FR", "DE", "PT", "ZH")
AUDIENCES: tuple[str, ...] = (
    "boss",
    "client",
    "peer",
    "HR",
    "general",
    "investor",
    "team",
    "vendor",
    "partner",
    "customer",
)
CONTENT_MEDIUMS: tuple[str, ...] = ("email", "tweet", "formal_doc", "chat", "social")

DEFAULT_LANGUAGE = "EN"
DEFAULT_AUDIENCE = "general"
DEFAULT_CONTENT_MEDIUM = "email"

_AUDIENCE_BY_LOWER = {a.lower(): a for a in AUDIENCES}


class Action(StrEnum):
    ANALYZE = "analyze"
    REWRITE = "rewrite"


def normalize_language(language: str | None) -> str:
    """Return a supported language code, falling back to EN."""
    candidate = str(language or "").strip().upper()
    if candidate not in LANGUAGES:
        if candidate:
            logger.debug("Unknown language %r, using %s", language, DEFAULT_LANGUAGE)
        return DEFAULT_LANGUAGE
    return candidate


def normalize_audience(audience: str | None) -> str:
    """Return the canonical audience tag, falling back to general."""
    candidate = str(audience or "").strip().lower()
    return _AUDIENCE_BY_LOWER.get(candidate, DEFAULT_AUDIENCE)


def normalize_content_medium(content_medium: str | None) -> str:
    candidate = str(content_medium or "").strip().lower()
    if candidate not in CONTENT_MEDIUMS:
        return DEFAULT_CONTENT_MEDIUM
    return candidate


@dataclass(frozen=True)
class ToneRequest:
    """One analyze or rewrite request, already validated and normalized."""

    text: str
    action: Action
    language: str = DEFAULT_LANGUAGE
    audience: str = DEFAULT_AUDIENCE
    content_medium: str = DEFAULT_CONTENT_MEDIUM
    tone_adjustments: ToneScoreVector | None = None

    @classmethod
    def build(
        cls,
        text: object,
        action: str,
        *,
        language: str | None = None,
        audience: str | None = None,
        content_medium: str | None = None,
        tone_adjustments: ToneScoreVector | None = None,
    ) -> ToneRequest:
        if not isinstance(text, str) or not text.strip():
            raise ValidationError("Text is required for analysis")
        try:
            resolved_action = Action(str(action).strip().lower())
        except ValueError as e:
            raise ValidationError(f"Invalid action: {action}") from e
        if resolved_action is Action.ANALYZE:
            tone_adjustments = None
        return cls(
            text=text,
            action=resolved_action,
            language=normalize_language(language),
            audience=normalize_audience(audience),
            content_medium=normalize_content_medium(content_medium),
            tone_adjustments=tone_adjustments,
        )

    def to_payload(self) -> dict:
        payload: dict = {
            "text": self.text,
            "language": self.language,
            "audience": self.audience,
            "contentMedium": self.content_medium,
            "action": self.action.value,
        }
        if self.action is Action.REWRITE and self.tone_adjustments is not None:
            payload["toneAdjustments"] = self.tone_adjustments.to_dict()
        return payload


class ToneTransport(ABC):
    """Abstract base class for tone service transports."""

    @abstractmethod
    async def send(self, request: ToneRequest) -> str | dict:
        """Deliver a request and return the service's raw content."""
        ...

    async def close(self) -> None:
        """Release network resources. No-op by default."""


async def http_error_body(response: httpx.Response, limit: int = 200) -> str:
    """Safely extract an HTTP error body."""
    try:
        body = await response.aread()
        if body:
            return body.decode("utf-8", errors="replace")[:limit]
    except httpx.HTTPError:
        pass
    return "<response body unavailable>"


def transport_error(error: httpx.HTTPError, target: str) -> ServiceError:
    """Translate an httpx failure into a ServiceError."""
    if isinstance(error, httpx.TimeoutException):
        return ServiceError(f"Tone service timed out at {target}", original=error)
    if isinstance(error, httpx.ConnectError):
        return ServiceError(f"Cannot connect to tone service at {target}", original=error)
    return ServiceError(f"Tone service request failed: {error}", original=error)
