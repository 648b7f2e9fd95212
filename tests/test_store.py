"""Tests for the SQLite tone store."""

from __future__ import annotations

import aiosqlite
import pytest

from toneguard.exceptions import StoreError
from toneguard.scoring.models import (
    BenchmarkProfile,
    Severity,
    ToneAnalysisRecord,
    ToneScoreVector,
)
from toneguard.state.store import ToneStore, load_benchmark_catalog


def _record(text: str, created_at: str, **scores) -> ToneAnalysisRecord:
    return ToneAnalysisRecord(
        scores=ToneScoreVector(**scores),
        severity="low",
        emotion_flags=("calm",),
        key_phrases=("thanks",),
        input_text=text,
        created_at=created_at,
    )


class TestAnalyses:
    @pytest.mark.asyncio
    async def test_insert_returns_id(self, store):
        row_id = await store.insert_analysis(
            _record("hello there", "2025-01-01T00:00:00+00:00", empathy=50),
        )
        assert row_id == 1

    @pytest.mark.asyncio
    async def test_round_trip(self, store):
        await store.insert_analysis(ToneAnalysisRecord(
            scores=ToneScoreVector(
                passive_aggressive=72, sarcasm=30, empathy=20, formality=55,
                aggression=35, anxiety=15,
            ),
            severity=Severity.HIGH,
            emotion_flags=("frustration", "resentment"),
            analysis_summary="Resentful.",
            key_phrases=("Fine, whatever",),
            input_text="Fine, whatever you say.",
            language="FR",
            audience="boss",
            content_medium="chat",
        ))
        [record] = await store.query_recent()
        assert record.id == 1
        assert record.scores.passive_aggressive == 72
        assert record.scores.anxiety == 15
        assert record.scores.manipulation is None
        assert record.severity is Severity.HIGH
        assert record.emotion_flags == ("frustration", "resentment")
        assert record.key_phrases == ("Fine, whatever",)
        assert record.language == "FR"
        assert record.audience == "boss"
        assert record.content_medium == "chat"

    @pytest.mark.asyncio
    async def test_newest_first_with_limit(self, store):
        await store.insert_analysis(_record("oldest", "2025-01-01T00:00:00+00:00"))
        await store.insert_analysis(_record("newest", "2025-01-03T00:00:00+00:00"))
        await store.insert_analysis(_record("middle", "2025-01-02T00:00:00+00:00"))
        records = await store.query_recent(limit=2)
        assert [r.input_text for r in records] == ["newest", "middle"]

    @pytest.mark.asyncio
    async def test_same_timestamp_orders_by_id(self, store):
        stamp = "2025-01-01T00:00:00+00:00"
        await store.insert_analysis(_record("first", stamp))
        await store.insert_analysis(_record("second", stamp))
        records = await store.query_recent()
        assert [r.input_text for r in records] == ["second", "first"]
        assert await store.count_analyses() == 2

    @pytest.mark.asyncio
    async def test_legacy_rows_leave_extended_axes_missing(self, store):
        async with aiosqlite.connect(store.path) as db:
            await db.execute(
                """INSERT INTO tone_analyses (input_text, passive_agg_score,
                   sarcasm_score, empathy_score, formality_score, aggression_score,
                   severity, created_at)
                   VALUES ('old row', 10, 20, 30, 40, 50, 'medium', '2024-06-01')"""
            )
            await db.commit()
        [record] = await store.query_recent()
        assert record.scores.aggression == 50
        assert record.scores.defensiveness is None
        assert record.scores.value("defensiveness") == 0
        assert record.emotion_flags == ()

    @pytest.mark.asyncio
    async def test_uninitialized_store_raises(self, tmp_path):
        store = ToneStore(tmp_path / "empty.db")
        with pytest.raises(StoreError):
            await store.query_recent()


class TestBenchmarks:
    def test_packaged_catalog(self):
        profiles = load_benchmark_catalog()
        assert len(profiles) == 5
        assert profiles[0].id == "diplomat"
        assert profiles[0].communicator_name == "The Diplomat"

    def test_custom_catalog_list(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text(
            "- id: solo\n"
            "  communicator_name: Solo\n"
            "  empathy_score: 10\n"
            "  formality_score: 20\n"
            "  directness_score: 30\n"
            "  warmth_score: 40\n"
        )
        [profile] = load_benchmark_catalog(path)
        assert profile.warmth == 40
        assert profile.description == ""

    def test_invalid_catalog_entry(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text("benchmarks:\n  - id: broken\n    communicator_name: Broken\n")
        with pytest.raises(StoreError):
            load_benchmark_catalog(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text("benchmarks: [unclosed\n")
        with pytest.raises(StoreError):
            load_benchmark_catalog(path)

    def test_missing_catalog(self, tmp_path):
        with pytest.raises(StoreError):
            load_benchmark_catalog(tmp_path / "nope.yaml")

    @pytest.mark.asyncio
    async def test_seed_only_when_empty(self, store):
        assert await store.seed_default_benchmarks() == 5
        assert await store.seed_default_benchmarks() == 0
        profiles = await store.list_benchmarks()
        assert [p.id for p in profiles][:2] == ["diplomat", "executive"]

    @pytest.mark.asyncio
    async def test_add_replaces_by_id(self, store):
        profile = BenchmarkProfile(
            communicator_name="Tester", empathy=10, formality=20,
            directness=30, warmth=40, id="tester",
        )
        await store.add_benchmarks([profile])
        await store.add_benchmarks([BenchmarkProfile(
            communicator_name="Tester", empathy=90, formality=20,
            directness=30, warmth=40, id="tester",
        )])
        [stored] = await store.list_benchmarks()
        assert stored.empathy == 90
