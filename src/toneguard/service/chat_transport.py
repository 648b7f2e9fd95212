"""OpenAI-compatible chat-completions transport.

Builds the analyze/rewrite prompts locally and asks any OpenAI-compatible
endpoint for the JSON answer. Returns the assistant message content
untouched; the client extracts and validates the object.
"""

from __future__ import annotations

import logging
import time

import httpx

from toneguard.config import ServiceConfig
from toneguard.exceptions import ResponseParseError, ServiceError
from toneguard.service.base import (
    ToneRequest,
    ToneTransport,
    http_error_body,
    transport_error,
)
from toneguard.service.prompts import build_messages

logger = logging.getLogger(__name__)

_STATUS_MESSAGES = {
    429: "Rate limit exceeded. Please try again in a moment.",
    402: "AI credits exhausted. Please add credits to continue.",
}


class ChatCompletionsTransport(ToneTransport):
    """Scores and rewrites text through a chat-completions model."""

    def __init__(self, config: ServiceConfig, client: httpx.AsyncClient | None = None):
        api_key = config.api_key.strip()
        if not api_key:
            raise ServiceError("AI service is not configured: api_key is empty")
        self._model = config.model
        self._temperature = config.temperature
        self._base_url = config.base_url
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=config.base_url,
            timeout=httpx.Timeout(config.timeout),
            headers={"Authorization": f"Bearer {api_key}"},
        )
        if client is not None:
            self._client.headers.setdefault("Authorization", f"Bearer {api_key}")

    @classmethod
    def _extract_text(cls, value: object) -> str:
        """Flatten string or content-part message content into text."""
        if value is None:
            return ""
        if isinstance(value, str):
            return value
        if isinstance(value, list):
            return "".join(cls._extract_text(item) for item in value)
        if isinstance(value, dict):
            if "text" in value:
                return cls._extract_text(value.get("text"))
            return cls._extract_text(value.get("content"))
        return ""

    async def send(self, request: ToneRequest) -> str | dict:
        payload = {
            "model": self._model,
            "messages": build_messages(request),
            "temperature": self._temperature,
        }
        logger.info(
            "Processing %s request for %s text (%d chars) for %s",
            request.action.value, request.language, len(request.text), request.audience,
        )

        start = time.monotonic()
        try:
            response = await self._client.post("/chat/completions", json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            body = await http_error_body(e.response)
            logger.error("AI gateway error: status=%d body=%s", status, body)
            message = _STATUS_MESSAGES.get(status, f"AI gateway error: {status}")
            raise ServiceError(message, status=status, original=e) from e
        except httpx.HTTPError as e:
            raise transport_error(e, self._base_url) from e
        latency = int((time.monotonic() - start) * 1000)

        try:
            data = response.json()
        except ValueError as e:
            raise ResponseParseError("AI gateway returned a non-JSON body") from e

        choices = data.get("choices") if isinstance(data, dict) else None
        message = {}
        if isinstance(choices, list) and choices and isinstance(choices[0], dict):
            message = choices[0].get("message") or {}
        if not isinstance(message, dict):
            message = {}
        content = self._extract_text(message.get("content")).strip()
        if not content:
            logger.error("No content in AI response: %s", str(data)[:200])
            raise ResponseParseError("No response from AI")

        logger.debug(
            "%s completed in %dms for %s", request.action.value, latency, request.audience,
        )
        return content

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
