"""Shared test fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from aptos_signals.chain.models import TransactionStatus
from aptos_signals.publishing.models import ConfidenceLabel, OddsEfficiency, Signal
from aptos_signals.publishing.publisher import SignalPublisher

MODULE_ADDRESS = "0xabc"


class FakeWallet:
    """Stand-in for a browser/hardware wallet."""

    def __init__(self, connected: bool = True, address: str | None = "0xuser", tx_hash: str = "0xdead"):
        self.connected = connected
        self.account_address = address
        self.sign_and_submit_transaction = AsyncMock(return_value=tx_hash)


@pytest.fixture
def minimal_signal():
    return Signal(
        event_id="evt-1",
        market_title="Team A vs Team B",
        market_snapshot_hash="abc123",
    )


@pytest.fixture
def full_signal():
    return Signal(
        event_id="pm-5521",
        market_title="Will Phoenix hit 120F on July 15?",
        market_snapshot_hash="f" * 64,
        venue="Phoenix, AZ",
        event_time=1752537600,
        weather_json={"temp_f": 117.2, "condition": {"text": "Sunny"}, "alerts": []},
        ai_digest="Ensemble spread favors YES.",
        confidence=ConfidenceLabel.HIGH,
        odds_efficiency=OddsEfficiency.UNDERPRICED,
    )


@pytest.fixture
def chain():
    """Chain client double with a successful confirmation and a count of 3."""
    client = AsyncMock()
    client.wait_for_transaction = AsyncMock(
        return_value=TransactionStatus(tx_hash="0xdead", success=True, vm_status="Executed successfully"),
    )
    client.view = AsyncMock(return_value=["3"])
    return client


@pytest.fixture
def publisher(chain):
    return SignalPublisher(chain, module_address=MODULE_ADDRESS)


@pytest.fixture
def wallet():
    return FakeWallet()


@pytest.fixture
def current_weather():
    """WeatherAPI-style current conditions, all fields sane."""
    return {
        "location": {"name": "Phoenix", "region": "Arizona", "country": "USA", "lat": 33.45, "lon": -112.07},
        "current": {
            "temp_f": 95.0,
            "temp_c": 35.0,
            "condition": {"text": "Sunny"},
            "humidity": 12,
            "wind_mph": 8.1,
            "wind_kph": 13.0,
            "wind_dir": "SW",
            "precip_chance": 0,
            "precip_in": 0.0,
            "pressure_mb": 1009,
            "vis_miles": 10,
            "uv": 9,
        },
    }


@pytest.fixture
def make_wallet():
    return FakeWallet
