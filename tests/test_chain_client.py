"""Tests for the Aptos fullnode REST client."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from aptos_signals.chain.client import AptosClient
from aptos_signals.chain.models import ChainError, TransactionTimeoutError

NODE = "https://fullnode.devnet.aptoslabs.com/v1"


def _resp(payload):
    resp = MagicMock()
    resp.json.return_value = payload
    return resp


def _status_error(code: int) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", f"{NODE}/transactions/by_hash/0x1")
    response = httpx.Response(code, request=request)
    return httpx.HTTPStatusError(f"HTTP {code}", request=request, response=response)


def _client(http) -> AptosClient:
    return AptosClient(node_url=NODE, confirm_timeout=5, poll_interval=0.001, http=http)


class TestView:
    @pytest.mark.asyncio
    async def test_view_posts_body(self):
        http = AsyncMock()
        http.post = AsyncMock(return_value=_resp(["7"]))

        result = await _client(http).view("0x1::signal_registry::get_signal_count", [], ["0xa"])

        assert result == ["7"]
        http.post.assert_awaited_once_with(
            "/view",
            json={
                "function": "0x1::signal_registry::get_signal_count",
                "type_arguments": [],
                "arguments": ["0xa"],
            },
        )

    @pytest.mark.asyncio
    async def test_view_http_error(self):
        http = AsyncMock()
        http.post = AsyncMock(side_effect=_status_error(400))

        with pytest.raises(ChainError):
            await _client(http).view("0x1::m::f")

    @pytest.mark.asyncio
    async def test_view_non_list(self):
        http = AsyncMock()
        http.post = AsyncMock(return_value=_resp({"message": "oops"}))

        with pytest.raises(ChainError, match="expected list"):
            await _client(http).view("0x1::m::f")


class TestTransactions:
    @pytest.mark.asyncio
    async def test_unknown_hash_returns_none(self):
        http = AsyncMock()
        http.get = AsyncMock(side_effect=_status_error(404))

        assert await _client(http).get_transaction_by_hash("0x1") is None

    @pytest.mark.asyncio
    async def test_server_error_raises(self):
        http = AsyncMock()
        http.get = AsyncMock(side_effect=_status_error(503))

        with pytest.raises(ChainError, match="HTTP 503"):
            await _client(http).get_transaction_by_hash("0x1")

    @pytest.mark.asyncio
    async def test_wait_polls_until_committed(self):
        http = AsyncMock()
        http.get = AsyncMock(side_effect=[
            _status_error(404),
            _resp({"type": "pending_transaction", "hash": "0x1"}),
            _resp({
                "type": "user_transaction",
                "hash": "0x1",
                "version": "12345",
                "success": True,
                "vm_status": "Executed successfully",
            }),
        ])

        status = await _client(http).wait_for_transaction("0x1")

        assert status.success is True
        assert status.vm_status == "Executed successfully"
        assert status.version == 12345
        assert http.get.await_count == 3

    @pytest.mark.asyncio
    async def test_wait_reports_abort(self):
        http = AsyncMock()
        http.get = AsyncMock(return_value=_resp({
            "type": "user_transaction",
            "hash": "0x1",
            "success": False,
            "vm_status": "Move abort in 0x1::coin: EINSUFFICIENT_BALANCE(0x10006)",
        }))

        status = await _client(http).wait_for_transaction("0x1")

        assert status.success is False
        assert "EINSUFFICIENT_BALANCE" in status.vm_status

    @pytest.mark.asyncio
    async def test_wait_times_out(self):
        http = AsyncMock()
        http.get = AsyncMock(return_value=_resp({"type": "pending_transaction", "hash": "0x1"}))

        with pytest.raises(TransactionTimeoutError) as exc_info:
            await _client(http).wait_for_transaction("0x1", timeout=0)

        assert exc_info.value.tx_hash == "0x1"

    @pytest.mark.asyncio
    async def test_timeout_is_a_chain_error(self):
        assert issubclass(TransactionTimeoutError, ChainError)


@pytest.mark.asyncio
async def test_context_manager_closes_http():
    http = AsyncMock()
    async with _client(http):
        pass
    http.close.assert_awaited_once()


def test_node_url_from_network(monkeypatch):
    monkeypatch.setenv("APTOS_NETWORK", "testnet")
    monkeypatch.delenv("APTOS_NODE_URL", raising=False)
    client = AptosClient(http=AsyncMock())
    assert client.node_url == "https://fullnode.testnet.aptoslabs.com/v1"
