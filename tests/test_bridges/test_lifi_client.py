"""Tests for the Li.Fi client."""

from decimal import Decimal
from unittest.mock import AsyncMock

import httpx
import pytest

from src.bridges.exceptions import NetworkError, UpstreamDataError
from src.bridges.lifi.client import LiFiClient

ROUTE = {
    "id": "route-1",
    "fromAmount": "100000000",
    "toAmount": "99850000",
    "gasCostUSD": "0.42",
    "steps": [
        {
            "type": "lifi",
            "tool": "stargateV2",
            "toolDetails": {"key": "stargateV2", "name": "StargateV2"},
            "estimate": {
                "executionDuration": 64,
                "feeCosts": [
                    {"name": "LIFI Fixed Fee", "amount": "250000", "amountUSD": "0.25", "token": {"symbol": "USDT"}},
                    {"name": "LP Fee", "amount": "60000", "amountUSD": "0.06", "token": {"symbol": "USDT"}},
                ],
            },
        }
    ],
}


class TestLiFiClient:
    @pytest.mark.asyncio
    async def test_get_routes(self, make_response) -> None:
        client = LiFiClient(base_url="https://lifi.test/v1", api_key="")
        client._client = AsyncMock()
        client._client.post = AsyncMock(return_value=make_response(200, {"routes": [ROUTE]}))

        routes = await client.get_routes(42161, 10, "0xfrom", "0xto", "100000000", limit=3)

        assert len(routes) == 1
        assert routes[0].gasCostUSD == Decimal("0.42")
        assert routes[0].steps[0].tool_key == "stargateV2"
        call = client._client.post.await_args
        assert call.args[0] == "https://lifi.test/v1/advanced/routes"
        assert call.kwargs["json"]["fromAmount"] == "100000000"
        assert call.kwargs["json"]["options"] == {"order": "RECOMMENDED", "limit": 3}

    @pytest.mark.asyncio
    async def test_get_routes_missing_list(self, make_response) -> None:
        client = LiFiClient()
        client._client = AsyncMock()
        client._client.post = AsyncMock(return_value=make_response(200, {"unavailableRoutes": {}}))

        with pytest.raises(UpstreamDataError):
            await client.get_routes(1, 10, "0xa", "0xb", "1")

    @pytest.mark.asyncio
    async def test_upstream_message_is_kept(self, make_response) -> None:
        client = LiFiClient()
        client._client = AsyncMock()
        client._client.post = AsyncMock(return_value=make_response(
            400, {"message": "Invalid fromAmount", "code": 1011}
        ))

        with pytest.raises(NetworkError, match="Invalid fromAmount"):
            await client.get_routes(1, 10, "0xa", "0xb", "abc")

    @pytest.mark.asyncio
    async def test_get_token(self, make_response) -> None:
        client = LiFiClient()
        client._client = AsyncMock()
        client._client.get = AsyncMock(return_value=make_response(200, {
            "address": "0x94b008aA00579c1307B0EF2c499a98a359659952",
            "symbol": "USDT",
            "decimals": 6,
            "chainId": 10,
            "priceUSD": "1.0001",
        }))

        token = await client.get_token(10, "USDT")

        assert token.decimals == 6
        assert token.priceUSD == Decimal("1.0001")
        assert client._client.get.await_args.kwargs["params"] == {"chain": 10, "token": "USDT"}

    @pytest.mark.asyncio
    async def test_get_token_bad_payload(self, make_response) -> None:
        client = LiFiClient()
        client._client = AsyncMock()
        client._client.get = AsyncMock(return_value=make_response(200, {"symbol": "USDT"}))

        with pytest.raises(UpstreamDataError):
            await client.get_token(10, "USDT")

    @pytest.mark.asyncio
    async def test_connect_error(self) -> None:
        client = LiFiClient()
        client._client = AsyncMock()
        client._client.get = AsyncMock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(NetworkError):
            await client.get_bridges()

    @pytest.mark.asyncio
    async def test_get_bridges(self, make_response) -> None:
        client = LiFiClient()
        client._client = AsyncMock()
        client._client.get = AsyncMock(return_value=make_response(200, {
            "bridges": [{"key": "across", "name": "AcrossV3"}, {"key": "hop", "name": "Hop"}],
            "exchanges": [],
        }))

        bridges = await client.get_bridges()

        assert [b.name for b in bridges] == ["AcrossV3", "Hop"]

    def test_api_key_header(self) -> None:
        client = LiFiClient(api_key="secret")
        assert client._client.headers["x-lifi-api-key"] == "secret"
