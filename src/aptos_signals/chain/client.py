"""Aptos fullnode REST client (view calls and transaction lookups)."""

from __future__ import annotations

import asyncio
import logging

import httpx

from aptos_signals.chain.models import ChainError, TransactionStatus, TransactionTimeoutError
from aptos_signals.common.http import HttpClient
from aptos_signals.config import get_settings

logger = logging.getLogger(__name__)


class AptosClient:
    """Thin async wrapper over the Aptos fullnode REST API.

    Only the read side lives here: view functions and transaction status.
    Submitting transactions is the wallet's job.
    """

    def __init__(
        self,
        node_url: str | None = None,
        confirm_timeout: float | None = None,
        poll_interval: float | None = None,
        http: HttpClient | None = None,
    ) -> None:
        settings = get_settings()
        self.node_url = (node_url or settings.node_url).rstrip("/")
        self.confirm_timeout = confirm_timeout or settings.confirm_timeout
        self.poll_interval = poll_interval or settings.poll_interval
        self._http = http or HttpClient(base_url=self.node_url)

    async def view(
        self,
        function: str,
        type_arguments: list[str] | None = None,
        arguments: list[object] | None = None,
    ) -> list:
        """Call a Move view function and return its result list."""
        body = {
            "function": function,
            "type_arguments": type_arguments or [],
            "arguments": arguments or [],
        }
        try:
            resp = await self._http.post("/view", json=body)
            result = resp.json()
        except httpx.HTTPError as exc:
            raise ChainError(f"View call {function} failed: {exc}") from exc
        except ValueError as exc:
            raise ChainError(f"View call {function} returned invalid JSON") from exc

        if not isinstance(result, list):
            raise ChainError(f"View call {function} returned {type(result).__name__}, expected list")
        return result

    async def get_transaction_by_hash(self, tx_hash: str) -> dict | None:
        """Fetch a transaction by hash. Returns None if the node has not seen it yet."""
        try:
            resp = await self._http.get(f"/transactions/by_hash/{tx_hash}")
            return resp.json()
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 404:
                return None
            raise ChainError(
                f"Transaction lookup for {tx_hash} failed: HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ChainError(f"Transaction lookup for {tx_hash} failed: {exc}") from exc
        except ValueError as exc:
            raise ChainError(f"Transaction lookup for {tx_hash} returned invalid JSON") from exc

    async def wait_for_transaction(
        self,
        tx_hash: str,
        timeout: float | None = None,
        poll_interval: float | None = None,
    ) -> TransactionStatus:
        """Poll until the transaction is committed, then return its status.

        Raises:
            TransactionTimeoutError: still pending (or unknown) after ``timeout`` seconds
            ChainError: the node could not be queried
        """
        timeout = timeout if timeout is not None else self.confirm_timeout
        poll_interval = poll_interval if poll_interval is not None else self.poll_interval

        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout

        while True:
            txn = await self.get_transaction_by_hash(tx_hash)
            if txn is not None and txn.get("type") != "pending_transaction":
                status = TransactionStatus.from_api(tx_hash, txn)
                logger.debug(
                    "Transaction %s committed: success=%s vm_status=%s",
                    tx_hash, status.success, status.vm_status,
                )
                return status
            if loop.time() >= deadline:
                raise TransactionTimeoutError(tx_hash, timeout)
            await asyncio.sleep(poll_interval)

    async def close(self) -> None:
        await self._http.close()

    async def __aenter__(self) -> AptosClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
