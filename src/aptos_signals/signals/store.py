"""SQLite signal store (via aiosqlite)."""

from __future__ import annotations

import json
from pathlib import Path

import aiosqlite

from aptos_signals.config import get_settings
from aptos_signals.publishing.models import Signal
from aptos_signals.signals.models import StoredSignal

_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS signals (
    id TEXT PRIMARY KEY,
    event_id TEXT NOT NULL,
    market_title TEXT,
    venue TEXT,
    event_time INTEGER,
    market_snapshot_hash TEXT NOT NULL,
    weather_json TEXT,
    ai_digest TEXT,
    confidence TEXT,
    odds_efficiency TEXT,
    author_address TEXT,
    tx_hash TEXT,  -- NULL until published on-chain
    timestamp INTEGER NOT NULL
);
"""

_CREATE_INDEXES = (
    "CREATE INDEX IF NOT EXISTS idx_signals_event_id ON signals(event_id);",
    "CREATE INDEX IF NOT EXISTS idx_signals_timestamp ON signals(timestamp DESC);",
)

_COLUMNS = (
    "id, event_id, market_title, venue, event_time, market_snapshot_hash, "
    "weather_json, ai_digest, confidence, odds_efficiency, author_address, "
    "tx_hash, timestamp"
)


def _row_to_stored(row: aiosqlite.Row) -> StoredSignal:
    weather = json.loads(row["weather_json"]) if row["weather_json"] else {}
    signal = Signal.from_dict({
        "event_id": row["event_id"],
        "market_title": row["market_title"],
        "venue": row["venue"],
        "event_time": row["event_time"],
        "market_snapshot_hash": row["market_snapshot_hash"],
        "weather_json": weather,
        "ai_digest": row["ai_digest"],
        "confidence": row["confidence"],
        "odds_efficiency": row["odds_efficiency"],
    })
    return StoredSignal(
        id=row["id"],
        signal=signal,
        author_address=row["author_address"],
        tx_hash=row["tx_hash"],
        timestamp=row["timestamp"],
    )


class SignalStore:
    """Signal records awaiting (or done with) on-chain publication."""

    def __init__(self, db_path: Path | None = None) -> None:
        self._db_path = db_path or get_settings().db_path

    async def _ensure_db(self) -> None:
        """Create database and tables if they don't exist."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiosqlite.connect(str(self._db_path)) as db:
            await db.execute(_CREATE_TABLE)
            for stmt in _CREATE_INDEXES:
                await db.execute(stmt)
            await db.commit()

    async def save_signal(self, stored: StoredSignal) -> str:
        """Insert a signal record. Returns its id."""
        await self._ensure_db()
        s = stored.signal
        params = (
            stored.id,
            s.event_id,
            s.market_title,
            s.venue,
            s.event_time,
            s.market_snapshot_hash,
            json.dumps(dict(s.weather_json)),
            s.ai_digest,
            s.confidence.value,
            s.odds_efficiency.value,
            stored.author_address.lower() if stored.author_address else None,
            stored.tx_hash,
            stored.timestamp,
        )
        async with aiosqlite.connect(str(self._db_path)) as db:
            await db.execute(
                f"INSERT INTO signals ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                params,
            )
            await db.commit()
        return stored.id

    async def get_signal(self, signal_id: str) -> StoredSignal | None:
        await self._ensure_db()
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                f"SELECT {_COLUMNS} FROM signals WHERE id = ?", (signal_id,),
            )
            row = await cursor.fetchone()
        return _row_to_stored(row) if row else None

    async def latest_signals(self, limit: int = 20) -> list[StoredSignal]:
        """Most recent signals first."""
        await self._ensure_db()
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                f"SELECT {_COLUMNS} FROM signals ORDER BY timestamp DESC, rowid DESC LIMIT ?",
                (limit,),
            )
            rows = await cursor.fetchall()
        return [_row_to_stored(r) for r in rows]

    async def update_tx_hash(self, signal_id: str, tx_hash: str) -> bool:
        """Record the publish transaction for a signal. Returns False if the id is unknown."""
        await self._ensure_db()
        async with aiosqlite.connect(str(self._db_path)) as db:
            cursor = await db.execute(
                "UPDATE signals SET tx_hash = ? WHERE id = ?", (tx_hash, signal_id),
            )
            await db.commit()
            return cursor.rowcount > 0
