"""History and benchmark store backed by SQLite.

Analysis records are append-only: the store inserts and reads them but
offers no update or delete. Benchmarks are read-only reference data
loaded from a YAML catalog.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import aiosqlite
import yaml

from toneguard.exceptions import StoreError
from toneguard.scoring.models import (
    AXES,
    WIRE_KEYS,
    BenchmarkProfile,
    ToneAnalysisRecord,
    ToneScoreVector,
)

logger = logging.getLogger(__name__)

DEFAULT_CATALOG = Path(__file__).parent / "benchmarks.yaml"

_SCORE_COLUMNS = tuple(WIRE_KEYS[axis] for axis in AXES)
_INSERT_COLUMNS = (
    "input_text",
    "language",
    "audience",
    "content_medium",
    *_SCORE_COLUMNS,
    "severity",
    "emotion_flags",
    "analysis_summary",
    "key_phrases",
    "rewritten_text",
    "created_at",
)


def _load_json_list(value: str | None) -> tuple[str, ...]:
    if not value:
        return ()
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        logger.warning("Discarding malformed list column: %s", value[:80])
        return ()
    if not isinstance(parsed, list):
        return ()
    return tuple(str(item) for item in parsed)


def record_from_row(row: dict) -> ToneAnalysisRecord:
    """Rebuild a record; NULL score columns stay missing on the vector."""
    scores = ToneScoreVector.from_dict(
        {key: row.get(key) for key in _SCORE_COLUMNS if row.get(key) is not None}
    )
    return ToneAnalysisRecord(
        scores=scores,
        severity=row.get("severity") or "low",
        emotion_flags=_load_json_list(row.get("emotion_flags")),
        analysis_summary=row.get("analysis_summary") or "",
        key_phrases=_load_json_list(row.get("key_phrases")),
        input_text=row.get("input_text") or "",
        language=row.get("language") or "EN",
        audience=row.get("audience") or "general",
        content_medium=row.get("content_medium") or "email",
        created_at=row.get("created_at") or "",
        rewritten_text=row.get("rewritten_text"),
        id=row.get("id"),
    )


def benchmark_from_mapping(data: dict) -> BenchmarkProfile:
    """Build a profile from a catalog entry or table row."""
    try:
        return BenchmarkProfile(
            id=str(data["id"]) if data.get("id") is not None else None,
            communicator_name=str(data["communicator_name"]),
            description=str(data.get("description") or ""),
            empathy=data["empathy_score"],
            formality=data["formality_score"],
            directness=data["directness_score"],
            warmth=data["warmth_score"],
        )
    except (KeyError, ValueError) as e:
        raise StoreError(f"Invalid benchmark entry {data!r}: {e}") from e


def load_benchmark_catalog(path: str | Path | None = None) -> list[BenchmarkProfile]:
    """Read benchmark profiles from a YAML catalog file."""
    catalog_path = Path(path) if path else DEFAULT_CATALOG
    try:
        with open(catalog_path) as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise StoreError(f"Cannot read benchmark catalog {catalog_path}: {e}") from e
    except yaml.YAMLError as e:
        raise StoreError(f"Invalid YAML in {catalog_path}: {e}") from e

    entries = raw.get("benchmarks", []) if isinstance(raw, dict) else raw
    if not isinstance(entries, list):
        raise StoreError(f"Benchmark catalog {catalog_path} has no benchmark list")
    return [benchmark_from_mapping(entry) for entry in entries if isinstance(entry, dict)]


class ToneStore:
    """Async SQLite store for tone history and benchmarks.

    All access is non-blocking via aiosqlite.
    """

    def __init__(self, db_path: str | Path):
        self._db_path = str(db_path)

    @property
    def path(self) -> str:
        return self._db_path

    async def initialize(self) -> None:
        """Create tables from schema.sql if they don't exist."""
        Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
        schema = (Path(__file__).parent / "schema.sql").read_text()
        try:
            async with aiosqlite.connect(self._db_path) as db:
                await db.execute("PRAGMA journal_mode=WAL")
                await db.executescript(schema)
                await db.commit()
        except aiosqlite.Error as e:
            raise StoreError(f"Cannot initialize store at {self._db_path}: {e}") from e

    async def _execute_returning_id(self, sql: str, params: tuple = ()) -> int:
        try:
            async with aiosqlite.connect(self._db_path) as db:
                cursor = await db.execute(sql, params)
                await db.commit()
                return cursor.lastrowid
        except aiosqlite.Error as e:
            raise StoreError(f"Store write failed: {e}") from e

    async def _query(self, sql: str, params: tuple = ()) -> list[dict]:
        try:
            async with aiosqlite.connect(self._db_path) as db:
                db.row_factory = aiosqlite.Row
                cursor = await db.execute(sql, params)
                rows = await cursor.fetchall()
                return [dict(row) for row in rows]
        except aiosqlite.Error as e:
            raise StoreError(f"Store read failed: {e}") from e

    # --- Analysis history ---

    async def insert_analysis(self, record: ToneAnalysisRecord) -> int:
        """Append a record and return its row id."""
        scores = record.scores
        values = (
            record.input_text,
            record.language,
            record.audience,
            record.content_medium,
            *(getattr(scores, axis) for axis in AXES),
            record.severity.value,
            json.dumps(list(record.emotion_flags)),
            record.analysis_summary,
            json.dumps(list(record.key_phrases)),
            record.rewritten_text,
            record.created_at,
        )
        placeholders = ", ".join("?" for _ in _INSERT_COLUMNS)
        row_id = await self._execute_returning_id(
            f"INSERT INTO tone_analyses ({', '.join(_INSERT_COLUMNS)}) "
            f"VALUES ({placeholders})",
            values,
        )
        logger.debug("Stored tone analysis %d (%s)", row_id, record.severity.value)
        return row_id

    async def query_recent(self, limit: int = 5) -> list[ToneAnalysisRecord]:
        """Most recent records, newest first."""
        rows = await self._query(
            "SELECT * FROM tone_analyses ORDER BY created_at DESC, id DESC LIMIT ?",
            (max(0, int(limit)),),
        )
        return [record_from_row(row) for row in rows]

    async def count_analyses(self) -> int:
        rows = await self._query("SELECT COUNT(*) AS n FROM tone_analyses")
        return int(rows[0]["n"]) if rows else 0

    # --- Benchmarks ---

    async def list_benchmarks(self) -> list[BenchmarkProfile]:
        rows = await self._query("SELECT * FROM benchmarks ORDER BY rowid")
        return [benchmark_from_mapping(row) for row in rows]

    async def add_benchmarks(self, profiles: list[BenchmarkProfile]) -> int:
        """Insert or replace profiles; returns how many were written."""
        try:
            async with aiosqlite.connect(self._db_path) as db:
                for profile in profiles:
                    await db.execute(
                        """INSERT OR REPLACE INTO benchmarks (id, communicator_name,
                           description, empathy_score, formality_score,
                           directness_score, warmth_score)
                           VALUES (?, ?, ?, ?, ?, ?, ?)""",
                        (
                            profile.id or profile.communicator_name.lower(),
                            profile.communicator_name,
                            profile.description,
                            profile.empathy,
                            profile.formality,
                            profile.directness,
                            profile.warmth,
                        ),
                    )
                await db.commit()
        except aiosqlite.Error as e:
            raise StoreError(f"Store write failed: {e}") from e
        return len(profiles)

    async def seed_default_benchmarks(self, catalog: str | Path | None = None) -> int:
        """Load the catalog when the benchmark table is empty."""
        existing = await self._query("SELECT COUNT(*) AS n FROM benchmarks")
        if existing and existing[0]["n"]:
            return 0
        profiles = load_benchmark_catalog(catalog)
        written = await self.add_benchmarks(profiles)
        logger.info("Seeded %d benchmark profile(s)", written)
        return written
