"""Turn a raw market + analysis into a Signal ready for storage and publishing."""

from __future__ import annotations

import hashlib
import json
import logging
import time
from datetime import datetime, timezone

from aptos_signals.publishing.models import ConfidenceLabel, OddsEfficiency, Signal
from aptos_signals.signals.models import StoredSignal

logger = logging.getLogger(__name__)

_EVENT_ID_KEYS = ("id", "marketID", "tokenID", "event_id")
_EVENT_TIME_KEYS = ("resolutionDate", "endDate", "expiresAt")


def _first(raw: dict, keys: tuple[str, ...]) -> object | None:
    for key in keys:
        value = raw.get(key)
        if value:
            return value
    return None


def parse_event_time(value: object | None) -> int:
    """ISO timestamp (or unix seconds) to unix seconds; 0 if missing or unparseable.

    Timestamps without an offset are read as UTC.
    """
    if value is None:
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Unparseable event time %r", value)
        return 0
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp())


def market_snapshot(market: dict) -> dict[str, object]:
    """The subset of market state that the snapshot hash commits to.

    ``ask`` and ``bid`` are left out entirely when the market has no such key.
    """
    snapshot: dict[str, object] = {"title": market.get("title") or market.get("question") or None}
    for key in ("ask", "bid"):
        if key in market:
            snapshot[key] = market[key]
    snapshot.update({
        "odds": market.get("currentOdds") or None,
        "volume24h": market.get("volume24h") or market.get("volume") or None,
        "liquidity": market.get("liquidity") or None,
        "tags": market.get("tags") or None,
    })
    return snapshot


def snapshot_hash(snapshot: dict[str, object]) -> str:
    """SHA-256 hex digest of the snapshot's compact JSON text, keys in insertion order."""
    text = json.dumps(snapshot, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def signal_from_market(
    market: dict,
    analysis: dict,
    weather: dict | None = None,
    author_address: str | None = None,
    now: int | None = None,
) -> StoredSignal:
    """Build a storable signal record from a market and its AI analysis."""
    if now is None:
        now = int(time.time())

    event_id = str(_first(market, _EVENT_ID_KEYS) or "unknown")
    snapshot = market_snapshot(market)
    assessment = analysis.get("assessment") or {}

    signal = Signal(
        event_id=event_id,
        market_title=str(snapshot["title"] or ""),
        market_snapshot_hash=snapshot_hash(snapshot),
        venue=str(market.get("location") or market.get("venue") or ""),
        event_time=parse_event_time(_first(market, _EVENT_TIME_KEYS)),
        weather_json=weather or {},
        ai_digest=str(analysis.get("reasoning") or analysis.get("analysis") or ""),
        confidence=ConfidenceLabel.parse(assessment.get("confidence")),
        odds_efficiency=OddsEfficiency.parse(assessment.get("odds_efficiency")),
    )
    return StoredSignal(
        id=f"{event_id}-{now}",
        signal=signal,
        author_address=author_address,
        timestamp=now,
    )
