"""Publishing data models: signals, call descriptors and outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class ConfidenceLabel(Enum):
    """Analyst confidence attached to a signal."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: object) -> ConfidenceLabel:
        """Map free-form input onto a label; anything unrecognised is UNKNOWN."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return cls.UNKNOWN


class OddsEfficiency(Enum):
    """How well the market odds reflect the underlying probability."""

    FAIR = "FAIR"
    OVERPRICED = "OVERPRICED"
    UNDERPRICED = "UNDERPRICED"
    INEFFICIENT = "INEFFICIENT"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: object) -> OddsEfficiency:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class Signal:
    """A market/event observation to be published on-chain.

    Attributes:
        event_id: Market or event identifier
        market_title: Human-readable market title
        venue: Location or venue of the event
        event_time: Event/resolution time, unix seconds (0 if unknown)
        market_snapshot_hash: SHA-256 hex of the market snapshot at signal time
        weather_json: Weather context; serialized to JSON text for the chain
        ai_digest: AI-generated reasoning summary
        confidence: Confidence label
        odds_efficiency: Odds-efficiency label
    """

    event_id: str
    market_title: str
    market_snapshot_hash: str
    venue: str = ""
    event_time: int = 0
    weather_json: Mapping[str, object] = field(default_factory=dict)
    ai_digest: str = ""
    confidence: ConfidenceLabel = ConfidenceLabel.UNKNOWN
    odds_efficiency: OddsEfficiency = OddsEfficiency.UNKNOWN

    def __post_init__(self) -> None:
        # Read-only view so callers cannot change the weather context after the fact
        object.__setattr__(self, "weather_json", MappingProxyType(dict(self.weather_json)))

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Signal:
        """Build a Signal from loose input, filling defaults for missing or null fields."""
        event_time = data.get("event_time")
        return cls(
            event_id=str(data.get("event_id") or ""),
            market_title=str(data.get("market_title") or ""),
            market_snapshot_hash=str(data.get("market_snapshot_hash") or ""),
            venue=str(data.get("venue") or ""),
            event_time=int(event_time) if event_time is not None else 0,
            weather_json=data.get("weather_json") or {},  # type: ignore[arg-type]
            ai_digest=str(data.get("ai_digest") or ""),
            confidence=ConfidenceLabel.parse(data.get("confidence")),
            odds_efficiency=OddsEfficiency.parse(data.get("odds_efficiency")),
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "event_id": self.event_id,
            "market_title": self.market_title,
            "venue": self.venue,
            "event_time": self.event_time,
            "market_snapshot_hash": self.market_snapshot_hash,
            "weather_json": dict(self.weather_json),
            "ai_digest": self.ai_digest,
            "confidence": self.confidence.value,
            "odds_efficiency": self.odds_efficiency.value,
        }


@dataclass(frozen=True)
class EntryFunctionPayload:
    """Call descriptor for a Move entry function, as handed to a wallet."""

    function: str
    type_arguments: list[str]
    function_arguments: list[str]

    def to_dict(self) -> dict[str, object]:
        """Aptos REST/wallet JSON shape."""
        return {
            "function": self.function,
            "type_arguments": list(self.type_arguments),
            "arguments": list(self.function_arguments),
        }


class OutcomeError(Enum):
    """Why a transaction outcome is not a success."""

    ON_CHAIN_FAILURE = "on_chain_failure"  # committed, but the VM aborted it
    STATUS_UNKNOWN = "status_unknown"  # could not determine the final state


@dataclass(frozen=True)
class TransactionOutcome:
    """Result of waiting on a submitted transaction."""

    success: bool
    tx_hash: str | None = None
    failure_reason: str | None = None
    vm_status: str | None = None
    error_kind: OutcomeError | None = None


@dataclass(frozen=True)
class CountResult:
    """Signal count query result that keeps a failed query apart from zero."""

    count: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class PublishErrorKind(Enum):
    NOT_CONNECTED = "not_connected"
    ALREADY_PUBLISHING = "already_publishing"
    SIGNING_FAILED = "signing_failed"
    ON_CHAIN_FAILURE = "on_chain_failure"
    STATUS_UNKNOWN = "status_unknown"


@dataclass(frozen=True)
class PublishError:
    kind: PublishErrorKind
    message: str
