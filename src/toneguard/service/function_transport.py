"""Transport for a deployed tone-scoring function.

POSTs the request JSON as-is to a remote endpoint that runs the model
call itself and answers with the analysis or rewrite object.
"""

from __future__ import annotations

import logging

import httpx

from toneguard.config import ServiceConfig
from toneguard.exceptions import ServiceError
from toneguard.service.base import (
    ToneRequest,
    ToneTransport,
    http_error_body,
    transport_error,
)

logger = logging.getLogger(__name__)


class FunctionTransport(ToneTransport):
    """Calls a remote analyze-tone function over HTTP."""

    def __init__(self, config: ServiceConfig, client: httpx.AsyncClient | None = None):
        if not config.function_url:
            raise ServiceError("Tone service is not configured: function_url is empty")
        self._url = config.function_url
        headers: dict[str, str] = {"Content-Type": "application/json"}
        api_key = config.api_key.strip()
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self._headers = headers
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(config.timeout))

    async def send(self, request: ToneRequest) -> str | dict:
        try:
            response = await self._client.post(
                self._url, json=request.to_payload(), headers=self._headers,
            )
        except httpx.HTTPError as e:
            raise transport_error(e, self._url) from e

        if response.status_code >= 400:
            message = await self._error_message(response)
            logger.warning(
                "Tone function error: status=%d message=%s",
                response.status_code, message,
            )
            raise ServiceError(message, status=response.status_code)

        try:
            data = response.json()
        except ValueError:
            return response.text
        if isinstance(data, dict) and set(data) == {"error"}:
            raise ServiceError(str(data["error"]), status=response.status_code)
        return data

    @staticmethod
    async def _error_message(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            data = None
        if isinstance(data, dict) and data.get("error"):
            return str(data["error"])
        body = await http_error_body(response)
        return f"Tone service returned HTTP {response.status_code}: {body}"

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
