"""Signal publishing against the on-chain signal registry.

Payload preparation, confirmation and count queries. The chain client is
passed in explicitly; nothing here holds process-wide state.
"""

from __future__ import annotations

import logging

from aptos_signals.chain.client import AptosClient
from aptos_signals.common.types import normalize_address
from aptos_signals.config import get_settings
from aptos_signals.publishing.models import (
    CountResult,
    EntryFunctionPayload,
    OutcomeError,
    Signal,
    TransactionOutcome,
)
from aptos_signals.publishing.payload import (
    COUNT_FUNCTION,
    build_publish_payload,
    registry_function,
)

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Transaction failed"


class SignalPublisher:
    """Prepares publish_signal calls and checks their results on-chain.

    Query faults never raise: confirmation problems become failed outcomes
    and count problems become an errored CountResult (or 0).
    """

    def __init__(self, chain: AptosClient, module_address: str | None = None) -> None:
        self._chain = chain
        self.module_address = normalize_address(
            module_address or get_settings().aptos_module_address
        )

    def prepare_publish_payload(self, signal: Signal) -> EntryFunctionPayload:
        return build_publish_payload(signal, self.module_address)

    async def wait_for_transaction(self, tx_hash: str) -> TransactionOutcome:
        """Wait for ``tx_hash`` to reach a terminal state and report the outcome."""
        try:
            status = await self._chain.wait_for_transaction(tx_hash)
        except Exception as exc:
            logger.error("Could not confirm transaction %s: %s", tx_hash, exc)
            return TransactionOutcome(
                success=False,
                tx_hash=tx_hash,
                failure_reason=str(exc) or "Could not determine transaction status",
                error_kind=OutcomeError.STATUS_UNKNOWN,
            )

        if status.success:
            return TransactionOutcome(success=True, tx_hash=tx_hash, vm_status=status.vm_status)

        logger.warning("Transaction %s failed on-chain: %s", tx_hash, status.vm_status)
        return TransactionOutcome(
            success=False,
            tx_hash=tx_hash,
            failure_reason=status.vm_status or GENERIC_FAILURE,
            vm_status=status.vm_status or None,
            error_kind=OutcomeError.ON_CHAIN_FAILURE,
        )

    async def query_signal_count(self, account_address: str) -> CountResult:
        """Number of signals published by ``account_address``, or the reason it is unknown."""
        function = registry_function(self.module_address, COUNT_FUNCTION)
        try:
            result = await self._chain.view(function, [], [normalize_address(account_address)])
            count = int(result[0])
        except (IndexError, TypeError, ValueError) as exc:
            return CountResult(error=f"Unexpected view result: {exc}")
        except Exception as exc:
            return CountResult(error=str(exc) or type(exc).__name__)
        return CountResult(count=max(count, 0))

    async def get_signal_count(self, account_address: str) -> int:
        """Signal count with query faults degraded to 0."""
        result = await self.query_signal_count(account_address)
        if not result.ok:
            logger.error("Failed to get signal count for %s: %s", account_address, result.error)
        return result.count
