"""Tests for building signals from market + analysis input."""

from __future__ import annotations

import hashlib

from aptos_signals.publishing.models import ConfidenceLabel, OddsEfficiency
from aptos_signals.signals.intake import (
    market_snapshot,
    parse_event_time,
    signal_from_market,
    snapshot_hash,
)


def _market(**overrides):
    market = {
        "id": "pm-77",
        "question": "Will NYC see 2 inches of rain on June 3?",
        "endDate": "2025-06-04T00:00:00Z",
        "ask": 0.42,
        "bid": 0.40,
        "volume24h": 12500,
        "liquidity": 3000,
        "tags": ["weather"],
        "location": "New York, NY",
    }
    market.update(overrides)
    return market


ANALYSIS = {
    "reasoning": "Models disagree on storm track.",
    "assessment": {"confidence": "MEDIUM", "odds_efficiency": "OVERPRICED"},
}


class TestSignalFromMarket:
    def test_fields(self):
        stored = signal_from_market(_market(), ANALYSIS, {"temp_f": 71}, "0xABC", now=1_700_000_000)
        s = stored.signal

        assert stored.id == "pm-77-1700000000"
        assert stored.author_address == "0xABC"
        assert stored.timestamp == 1_700_000_000
        assert stored.tx_hash is None
        assert s.event_id == "pm-77"
        assert s.market_title == "Will NYC see 2 inches of rain on June 3?"
        assert s.venue == "New York, NY"
        assert s.event_time == 1748995200
        assert dict(s.weather_json) == {"temp_f": 71}
        assert s.ai_digest == "Models disagree on storm track."
        assert s.confidence is ConfidenceLabel.MEDIUM
        assert s.odds_efficiency is OddsEfficiency.OVERPRICED

    def test_event_id_fallbacks(self):
        market = _market(id=None, marketID=None, tokenID="tok-9")
        assert signal_from_market(market, ANALYSIS, now=1).signal.event_id == "tok-9"

        market = {"question": "q"}
        assert signal_from_market(market, ANALYSIS, now=1).signal.event_id == "unknown"

    def test_missing_assessment_is_unknown(self):
        stored = signal_from_market(_market(), {"analysis": "short"}, now=1)
        assert stored.signal.confidence is ConfidenceLabel.UNKNOWN
        assert stored.signal.odds_efficiency is OddsEfficiency.UNKNOWN
        assert stored.signal.ai_digest == "short"

    def test_snapshot_hash_matches_snapshot_json(self):
        market = _market()
        text = (
            '{"title":"Will NYC see 2 inches of rain on June 3?","ask":0.42,"bid":0.4,'
            '"odds":null,"volume24h":12500,"liquidity":3000,"tags":["weather"]}'
        )
        expected = hashlib.sha256(text.encode()).hexdigest()
        stored = signal_from_market(market, ANALYSIS, now=1)
        assert stored.signal.market_snapshot_hash == expected
        assert len(expected) == 64

    def test_snapshot_hash_changes_with_price(self):
        a = snapshot_hash(market_snapshot(_market(ask=0.42)))
        b = snapshot_hash(market_snapshot(_market(ask=0.43)))
        assert a != b

    def test_snapshot_omits_absent_prices(self):
        market = _market()
        del market["ask"], market["bid"]
        snapshot = market_snapshot(market)

        assert "ask" not in snapshot
        assert "bid" not in snapshot
        assert market_snapshot(_market(ask=None))["ask"] is None

    def test_snapshot_hash_keeps_non_ascii(self):
        snapshot = {"title": "Zürich snow?"}
        expected = hashlib.sha256('{"title":"Zürich snow?"}'.encode("utf-8")).hexdigest()
        assert snapshot_hash(snapshot) == expected


class TestParseEventTime:
    def test_iso_z(self):
        assert parse_event_time("1970-01-01T00:01:00Z") == 60

    def test_naive_timestamp_is_utc(self):
        assert parse_event_time("2025-07-15") == 1752537600
        assert parse_event_time("2025-07-15T00:00:00") == 1752537600

    def test_numeric_passthrough(self):
        assert parse_event_time(1234) == 1234

    def test_missing_or_bad(self):
        assert parse_event_time(None) == 0
        assert parse_event_time("next tuesday") == 0
