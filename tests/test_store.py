"""Tests for the SQLite signal store."""

from __future__ import annotations

import pytest

from aptos_signals.publishing.models import ConfidenceLabel
from aptos_signals.signals.models import StoredSignal
from aptos_signals.signals.store import SignalStore


@pytest.fixture
def store(tmp_path):
    return SignalStore(db_path=tmp_path / "signals.db")


def _stored(signal, sid: str, ts: int, author: str | None = None) -> StoredSignal:
    return StoredSignal(id=sid, signal=signal, timestamp=ts, author_address=author)


class TestSignalStore:
    @pytest.mark.asyncio
    async def test_save_and_get(self, store, full_signal):
        await store.save_signal(_stored(full_signal, "pm-5521-100", 100, "0xABCD"))

        loaded = await store.get_signal("pm-5521-100")

        assert loaded is not None
        assert loaded.signal == full_signal
        assert loaded.signal.confidence is ConfidenceLabel.HIGH
        assert loaded.author_address == "0xabcd"
        assert loaded.tx_hash is None

    @pytest.mark.asyncio
    async def test_get_missing(self, store):
        assert await store.get_signal("nope") is None

    @pytest.mark.asyncio
    async def test_latest_newest_first(self, store, minimal_signal, full_signal):
        await store.save_signal(_stored(minimal_signal, "a", 100))
        await store.save_signal(_stored(full_signal, "b", 300))
        await store.save_signal(_stored(minimal_signal, "c", 200))

        latest = await store.latest_signals(limit=2)

        assert [s.id for s in latest] == ["b", "c"]

    @pytest.mark.asyncio
    async def test_update_tx_hash(self, store, minimal_signal):
        await store.save_signal(_stored(minimal_signal, "evt-1-1", 1))

        assert await store.update_tx_hash("evt-1-1", "0xdead") is True
        assert (await store.get_signal("evt-1-1")).tx_hash == "0xdead"

    @pytest.mark.asyncio
    async def test_update_unknown_id(self, store):
        assert await store.update_tx_hash("missing", "0xdead") is False

    @pytest.mark.asyncio
    async def test_creates_parent_directory(self, tmp_path, minimal_signal):
        store = SignalStore(db_path=tmp_path / "nested" / "dir" / "signals.db")
        await store.save_signal(_stored(minimal_signal, "x", 1))
        assert (tmp_path / "nested" / "dir" / "signals.db").exists()
