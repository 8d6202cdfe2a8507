"""Chain-level data models and errors."""

from __future__ import annotations

from dataclasses import dataclass


class ChainError(Exception):
    """A fullnode request failed or returned something unusable."""


class TransactionTimeoutError(ChainError):
    """A transaction was still pending when the confirmation wait ran out."""

    def __init__(self, tx_hash: str, timeout: float) -> None:
        super().__init__(f"Transaction {tx_hash} not confirmed after {timeout:g}s")
        self.tx_hash = tx_hash
        self.timeout = timeout


@dataclass(frozen=True)
class TransactionStatus:
    """Terminal state of a committed transaction as reported by the fullnode."""

    tx_hash: str
    success: bool
    vm_status: str = ""
    version: int | None = None

    @classmethod
    def from_api(cls, tx_hash: str, txn: dict) -> TransactionStatus:
        version = txn.get("version")
        return cls(
            tx_hash=str(txn.get("hash") or tx_hash),
            success=bool(txn.get("success", False)),
            vm_status=str(txn.get("vm_status") or ""),
            version=int(version) if version is not None else None,
        )
