"""Per-wallet publishing session.

Guards publish attempts behind a connected wallet, hands the call to the
wallet for signing and broadcast, then waits for confirmation. Tracks the
"is publishing" flag and the last error for the caller.
"""

from __future__ import annotations

import logging
from typing import Protocol

from aptos_signals.publishing.models import (
    EntryFunctionPayload,
    OutcomeError,
    PublishError,
    PublishErrorKind,
    Signal,
)
from aptos_signals.publishing.publisher import SignalPublisher

logger = logging.getLogger(__name__)

NOT_CONNECTED_MESSAGE = "Please connect your Aptos wallet first"
ALREADY_PUBLISHING_MESSAGE = "A signal is already being published from this wallet"
SIGNING_FAILED_MESSAGE = "Failed to publish to Aptos"


class WalletSigner(Protocol):
    """User-controlled wallet that signs and broadcasts transactions."""

    @property
    def connected(self) -> bool: ...

    @property
    def account_address(self) -> str | None: ...

    async def sign_and_submit_transaction(self, payload: EntryFunctionPayload) -> str:
        """Sign and broadcast ``payload``; return the transaction hash."""
        ...


class PublishSession:
    """Publishes signals for one wallet.

    At most one publish runs at a time; a second call made while one is in
    flight is rejected rather than double-submitted.
    """

    def __init__(self, publisher: SignalPublisher, wallet: WalletSigner) -> None:
        self._publisher = publisher
        self._wallet = wallet
        self.is_publishing = False
        self.last_error: PublishError | None = None

    @property
    def connected(self) -> bool:
        return bool(self._wallet.connected)

    @property
    def wallet_address(self) -> str | None:
        return self._wallet.account_address

    @property
    def publish_error(self) -> str | None:
        """User-facing message for the last failed attempt."""
        return self.last_error.message if self.last_error else None

    def _fail(self, kind: PublishErrorKind, message: str) -> None:
        self.last_error = PublishError(kind=kind, message=message)

    async def publish(self, signal: Signal) -> str | None:
        """Publish ``signal`` on-chain.

        Returns the transaction hash once the chain reports success, else None
        with ``last_error`` describing what went wrong.
        """
        if not self.connected or not self.wallet_address:
            self._fail(PublishErrorKind.NOT_CONNECTED, NOT_CONNECTED_MESSAGE)
            return None

        if self.is_publishing:
            self._fail(PublishErrorKind.ALREADY_PUBLISHING, ALREADY_PUBLISHING_MESSAGE)
            return None

        self.is_publishing = True
        self.last_error = None
        try:
            try:
                payload = self._publisher.prepare_publish_payload(signal)
                tx_hash = await self._wallet.sign_and_submit_transaction(payload)
            except Exception as exc:
                logger.error("Aptos publish failed for %s: %s", signal.event_id, exc)
                self._fail(PublishErrorKind.SIGNING_FAILED, str(exc) or SIGNING_FAILED_MESSAGE)
                return None

            outcome = await self._publisher.wait_for_transaction(tx_hash)
            if outcome.success:
                logger.info("Published signal %s in %s", signal.event_id, tx_hash)
                return tx_hash

            kind = (
                PublishErrorKind.STATUS_UNKNOWN
                if outcome.error_kind is OutcomeError.STATUS_UNKNOWN
                else PublishErrorKind.ON_CHAIN_FAILURE
            )
            self._fail(kind, outcome.failure_reason or "Transaction failed")
            return None
        finally:
            self.is_publishing = False

    async def get_my_signal_count(self) -> int:
        """Signals published by the connected wallet; 0 when no wallet is connected."""
        address = self.wallet_address
        if not address:
            return 0
        return await self._publisher.get_signal_count(address)
