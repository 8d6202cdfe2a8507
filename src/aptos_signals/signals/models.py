"""Locally stored signal records."""

from __future__ import annotations

from dataclasses import dataclass

from aptos_signals.publishing.models import Signal


@dataclass
class StoredSignal:
    """A signal plus local bookkeeping.

    Attributes:
        id: Record id, ``<event_id>-<unix seconds>``
        signal: The signal as it will be (or was) published
        author_address: Wallet address of the author, if known
        tx_hash: Publish transaction hash, filled in once published
        timestamp: When the record was created, unix seconds
    """

    id: str
    signal: Signal
    timestamp: int
    author_address: str | None = None
    tx_hash: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            **self.signal.to_dict(),
            "author_address": self.author_address,
            "tx_hash": self.tx_hash,
            "timestamp": self.timestamp,
        }
