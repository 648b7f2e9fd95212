"""Caller-side orchestration of analyze, rewrite, history and benchmarks.

A session owns one service client and, optionally, a history store. It
remembers the last analysis so a rewrite can follow it, and keeps the
manual target scores the user steers a rewrite toward.
"""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path

from toneguard.config import Config, DefaultsConfig
from toneguard.exceptions import StoreError, ValidationError
from toneguard.scoring.models import (
    AXES,
    RewriteResult,
    ToneAnalysisRecord,
    ToneScoreVector,
    clamp_score,
)
from toneguard.scoring.trends import (
    BenchmarkMatch,
    TrendSummary,
    rank_benchmarks,
    summarize_history,
)
from toneguard.service.client import ToneServiceClient, create_client
from toneguard.state.store import ToneStore, load_benchmark_catalog

logger = logging.getLogger(__name__)


class ToneSession:
    """One user's analyze/rewrite flow.

    With ``discard_stale_responses`` enabled every call takes a new
    generation number, and a response that returns after a newer call
    was started is dropped (the call returns None). Disabled, the last
    response to arrive wins.
    """

    def __init__(
        self,
        client: ToneServiceClient,
        store: ToneStore | None = None,
        *,
        defaults: DefaultsConfig | None = None,
        recent_limit: int = 5,
        discard_stale_responses: bool = False,
        benchmark_catalog: str | Path | None = None,
    ):
        self._client = client
        self._store = store
        self._defaults = defaults or DefaultsConfig()
        self._recent_limit = recent_limit
        self._discard_stale = discard_stale_responses
        self._benchmark_catalog = benchmark_catalog or None
        self._generation = 0
        self.last_analysis: ToneAnalysisRecord | None = None
        self.last_rewrite: RewriteResult | None = None
        self.target_scores: ToneScoreVector | None = None

    @classmethod
    def from_config(cls, config: Config) -> ToneSession:
        client = create_client(
            config.service, strict_severity=config.session.strict_severity,
        )
        return cls(
            client,
            ToneStore(config.database_path),
            defaults=config.defaults,
            recent_limit=config.history.recent_limit,
            discard_stale_responses=config.session.discard_stale_responses,
            benchmark_catalog=config.history.benchmark_catalog,
        )

    @property
    def client(self) -> ToneServiceClient:
        return self._client

    @property
    def store(self) -> ToneStore | None:
        return self._store

    @property
    def generation(self) -> int:
        return self._generation

    async def initialize(self) -> None:
        """Prepare the store and seed benchmarks into an empty table."""
        if self._store is None:
            return
        await self._store.initialize()
        await self._store.seed_default_benchmarks(self._benchmark_catalog)

    async def close(self) -> None:
        await self._client.close()

    def _next_generation(self) -> int:
        self._generation += 1
        return self._generation

    def _is_stale(self, generation: int, action: str) -> bool:
        if self._discard_stale and generation != self._generation:
            logger.debug(
                "Discarding stale %s response (generation %d, current %d)",
                action, generation, self._generation,
            )
            return True
        return False

    def _context(
        self,
        language: str | None,
        audience: str | None,
        content_medium: str | None,
    ) -> dict:
        return {
            "language": language or self._defaults.language,
            "audience": audience or self._defaults.audience,
            "content_medium": content_medium or self._defaults.content_medium,
        }

    # --- Analyze ---

    async def analyze(
        self,
        text: str,
        *,
        language: str | None = None,
        audience: str | None = None,
        content_medium: str | None = None,
    ) -> ToneAnalysisRecord | None:
        """Analyze text, persist the record, and seed the manual targets."""
        generation = self._next_generation()
        record = await self._client.analyze(
            text, **self._context(language, audience, content_medium),
        )
        if self._is_stale(generation, "analyze"):
            return None

        record = await self.save(record)
        self.last_analysis = record
        self.last_rewrite = None
        self.target_scores = record.scores.filled()
        return record

    async def save(self, record: ToneAnalysisRecord) -> ToneAnalysisRecord:
        """Persist a record; a store failure is logged and the record kept."""
        if self._store is None:
            return record
        try:
            row_id = await self._store.insert_analysis(record)
        except StoreError as e:
            logger.warning("Failed to save analysis: %s", e)
            return record
        return dataclasses.replace(record, id=row_id)

    # --- Rewrite ---

    def adjust(self, axis: str, value: int) -> ToneScoreVector:
        """Move one manual target score, as a slider would."""
        if axis not in AXES:
            raise ValidationError(f"Unknown tone axis: {axis}")
        try:
            score = clamp_score(value)
        except ValueError as e:
            raise ValidationError(f"Invalid score for {axis}: {value!r}") from e
        base = self.target_scores or ToneScoreVector().filled()
        self.target_scores = dataclasses.replace(base, **{axis: score})
        return self.target_scores

    async def auto_rewrite(self) -> RewriteResult | None:
        """Rewrite the last analyzed text toward the default goals."""
        return await self._rewrite(None)

    async def manual_rewrite(
        self, adjustments: ToneScoreVector | None = None,
    ) -> RewriteResult | None:
        """Rewrite the last analyzed text toward explicit target scores."""
        targets = adjustments or self.target_scores
        if targets is None:
            raise ValidationError("No target scores set; analyze text first")
        return await self._rewrite(targets)

    async def _rewrite(self, adjustments: ToneScoreVector | None) -> RewriteResult | None:
        record = self.last_analysis
        if record is None:
            raise ValidationError("Analyze text before requesting a rewrite")

        generation = self._next_generation()
        result = await self._client.rewrite(
            record.input_text,
            language=record.language,
            audience=record.audience,
            content_medium=record.content_medium,
            tone_adjustments=adjustments,
        )
        if self._is_stale(generation, "rewrite"):
            return None
        self.last_rewrite = result
        return result

    # --- History and benchmarks ---

    async def history(self, limit: int | None = None) -> list[ToneAnalysisRecord]:
        if self._store is None:
            return []
        return await self._store.query_recent(limit or self._recent_limit)

    async def trend(self, limit: int | None = None) -> TrendSummary | None:
        return summarize_history(await self.history(limit))

    async def benchmarks(
        self, scores: ToneScoreVector | None = None,
    ) -> list[BenchmarkMatch]:
        """Rank benchmarks against the given scores or the last analysis."""
        if scores is None and self.last_analysis is not None:
            scores = self.last_analysis.scores
        if scores is None:
            return []
        if self._store is not None:
            profiles = await self._store.list_benchmarks()
        else:
            profiles = load_benchmark_catalog(self._benchmark_catalog)
        return rank_benchmarks(scores, profiles)
