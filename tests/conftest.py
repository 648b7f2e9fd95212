"""Shared test fixtures for toneguard."""

from __future__ import annotations

import copy
from pathlib import Path

import pytest

from toneguard.config import Config, HistoryConfig, ServerConfig, ServiceConfig
from toneguard.service.base import ToneRequest, ToneTransport
from toneguard.service.client import ToneServiceClient
from toneguard.state.store import ToneStore

ANALYSIS_PAYLOAD = {
    "passive_agg_score": 72,
    "sarcasm_score": 30,
    "empathy_score": 20,
    "formality_score": 55,
    "aggression_score": 35,
    "defensiveness_score": 40,
    "condescension_score": 25,
    "manipulation_score": 10,
    "dismissiveness_score": 45,
    "anxiety_score": 15,
    "severity": "high",
    "emotion_flags": ["frustration", "resentment"],
    "analysis_summary": "Reads as resigned and quietly resentful.",
    "key_phrases": ["Fine, whatever you say"],
}

REWRITE_PAYLOAD = {
    "rewritten_text": "Understood. I'll take care of it today.",
    "changes_summary": "Replaced resignation with a clear commitment.",
    "intent_preserved_confidence": 92,
    "new_scores": {
        "passive_agg_score": 5,
        "sarcasm_score": 2,
        "empathy_score": 70,
        "formality_score": 60,
    },
}


class FakeTransport(ToneTransport):
    """Returns queued responses in order; queued exceptions are raised."""

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.requests: list[ToneRequest] = []
        self.closed = False

    async def send(self, request: ToneRequest):
        self.requests.append(request)
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def analysis_payload() -> dict:
    return copy.deepcopy(ANALYSIS_PAYLOAD)


@pytest.fixture
def rewrite_payload() -> dict:
    return copy.deepcopy(REWRITE_PAYLOAD)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def service_client(transport: FakeTransport) -> ToneServiceClient:
    return ToneServiceClient(transport)


@pytest.fixture
async def store(tmp_path: Path) -> ToneStore:
    s = ToneStore(tmp_path / "test.db")
    await s.initialize()
    return s


@pytest.fixture
def config(tmp_path: Path) -> Config:
    """Provide a test configuration with temp paths."""
    return Config(
        server=ServerConfig(host="127.0.0.1", port=9999),
        service=ServiceConfig(api_key="test-key", base_url="https://gateway.test/v1"),
        history=HistoryConfig(database_path=str(tmp_path / "toneguard.db")),
    )
