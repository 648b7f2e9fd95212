"""Client for the analyze/rewrite tone service protocol."""

from __future__ import annotations

import logging

from toneguard.config import ServiceConfig
from toneguard.scoring.models import RewriteResult, ToneAnalysisRecord, ToneScoreVector
from toneguard.service.base import Action, ToneRequest, ToneTransport
from toneguard.service.parsing import (
    extract_json_object,
    validate_analysis,
    validate_rewrite,
)

logger = logging.getLogger(__name__)


class ToneServiceClient:
    """Sends one request per user action and validates what comes back.

    No retries are attempted; retry policy belongs to the caller.
    """

    def __init__(self, transport: ToneTransport, *, strict_severity: bool = False):
        self._transport = transport
        self._strict_severity = strict_severity

    async def _call(self, request: ToneRequest) -> dict:
        content = await self._transport.send(request)
        return extract_json_object(content)

    async def analyze(
        self,
        text: str,
        *,
        language: str | None = None,
        audience: str | None = None,
        content_medium: str | None = None,
    ) -> ToneAnalysisRecord:
        """Score text on every tone axis."""
        request = ToneRequest.build(
            text,
            Action.ANALYZE,
            language=language,
            audience=audience,
            content_medium=content_medium,
        )
        data = await self._call(request)
        record = validate_analysis(data, request, strict_severity=self._strict_severity)
        logger.info(
            "analyze completed for %s (severity=%s)",
            request.audience, record.severity.value,
        )
        return record

    async def rewrite(
        self,
        text: str,
        *,
        language: str | None = None,
        audience: str | None = None,
        content_medium: str | None = None,
        tone_adjustments: ToneScoreVector | None = None,
    ) -> RewriteResult:
        """Ask for a diplomatic rewrite, optionally steered toward target scores."""
        request = ToneRequest.build(
            text,
            Action.REWRITE,
            language=language,
            audience=audience,
            content_medium=content_medium,
            tone_adjustments=tone_adjustments,
        )
        data = await self._call(request)
        result = validate_rewrite(data)
        logger.info("rewrite completed for %s", request.audience)
        return result

    async def close(self) -> None:
        await self._transport.close()


def create_transport(config: ServiceConfig) -> ToneTransport:
    """Build the transport named by the service config."""
    if config.mode == "function":
        from toneguard.service.function_transport import FunctionTransport

        return FunctionTransport(config)

    from toneguard.service.chat_transport import ChatCompletionsTransport

    return ChatCompletionsTransport(config)


def create_client(config: ServiceConfig, *, strict_severity: bool = False) -> ToneServiceClient:
    return ToneServiceClient(create_transport(config), strict_severity=strict_severity)
