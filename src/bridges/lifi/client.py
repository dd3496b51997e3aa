"""Li.Fi API client — token lookup, quotes, multi-route comparison, tool list.

Public API, optional key via x-lifi-api-key header. Every call is a single
attempt with a bounded timeout.
"""

import httpx
from loguru import logger
from pydantic import ValidationError

from config.settings import settings
from src.bridges.exceptions import UpstreamDataError
from src.bridges.http import fetch_json
from src.bridges.lifi.models import LiFiBridgeTool, LiFiRoute, LiFiStep, LiFiToken

TOKEN_PATH = "/token"
QUOTE_PATH = "/quote"
ROUTES_PATH = "/advanced/routes"
TOOLS_PATH = "/tools"


class LiFiClient:
    """Async HTTP client for the Li.Fi aggregator."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        routes_timeout: float | None = None,
    ) -> None:
        self._base_url = (base_url or settings.lifi_base_url).rstrip("/")
        self._timeout = timeout or settings.lifi_timeout_sec
        self._routes_timeout = routes_timeout or settings.lifi_routes_timeout_sec
        headers = {"Accept": "application/json"}
        key = settings.lifi_api_key if api_key is None else api_key
        if key:
            headers["x-lifi-api-key"] = key
        self._client = httpx.AsyncClient(timeout=self._timeout, headers=headers)

    async def close(self) -> None:
        await self._client.aclose()

    async def get_token(self, chain: int | str, symbol: str) -> LiFiToken:
        """Look up a token by symbol (or address) on a chain."""
        data = await fetch_json(
            self._client,
            "get",
            f"{self._base_url}{TOKEN_PATH}",
            tag="LIFI",
            params={"chain": chain, "token": symbol},
            timeout=self._timeout,
        )
        try:
            return LiFiToken.model_validate(data)
        except ValidationError as e:
            raise UpstreamDataError(f"Unexpected token payload for {symbol} on {chain}") from e

    async def get_quote(
        self,
        from_chain: int | str,
        to_chain: int | str,
        from_token: str,
        to_token: str,
        from_amount: str,
        from_address: str | None = None,
    ) -> LiFiStep:
        """Fetch the single best quote for a transfer."""
        params = {
            "fromChain": from_chain,
            "toChain": to_chain,
            "fromToken": from_token,
            "toToken": to_token,
            "fromAmount": from_amount,
            "fromAddress": from_address or settings.quote_from_address,
        }
        data = await fetch_json(
            self._client,
            "get",
            f"{self._base_url}{QUOTE_PATH}",
            tag="LIFI",
            params=params,
            timeout=self._timeout,
        )
        try:
            return LiFiStep.model_validate(data)
        except ValidationError as e:
            raise UpstreamDataError("Unexpected quote payload") from e

    async def get_routes(
        self,
        from_chain: int | str,
        to_chain: int | str,
        from_token: str,
        to_token: str,
        from_amount: str,
        *,
        limit: int | None = None,
        order: str | None = None,
    ) -> list[LiFiRoute]:
        """Fetch a ranked list of candidate routes, provider order preserved."""
        body = {
            "fromChainId": from_chain,
            "toChainId": to_chain,
            "fromTokenAddress": from_token,
            "toTokenAddress": to_token,
            "fromAmount": from_amount,
            "options": {
                "order": order or settings.route_order,
                "limit": limit or settings.route_limit,
            },
        }
        data = await fetch_json(
            self._client,
            "post",
            f"{self._base_url}{ROUTES_PATH}",
            tag="LIFI",
            json=body,
            timeout=self._routes_timeout,
        )
        if not isinstance(data, dict) or not isinstance(data.get("routes"), list):
            raise UpstreamDataError("Routes response missing 'routes' list")
        try:
            routes = [LiFiRoute.model_validate(r) for r in data["routes"]]
        except ValidationError as e:
            raise UpstreamDataError("Unexpected route payload") from e
        logger.debug(f"[LIFI] {len(routes)} routes {from_chain} -> {to_chain}")
        return routes

    async def get_bridges(self) -> list[LiFiBridgeTool]:
        """List bridge tools the aggregator currently supports."""
        data = await fetch_json(
            self._client,
            "get",
            f"{self._base_url}{TOOLS_PATH}",
            tag="LIFI",
            timeout=self._timeout,
        )
        if not isinstance(data, dict) or not isinstance(data.get("bridges"), list):
            raise UpstreamDataError("Tools response missing 'bridges' list")
        try:
            return [LiFiBridgeTool.model_validate(b) for b in data["bridges"]]
        except ValidationError as e:
            raise UpstreamDataError("Unexpected bridge tool payload") from e
