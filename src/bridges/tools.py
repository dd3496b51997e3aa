"""Named operations for the consumer layer (LLM tool calls, CLI, scripts).

Every operation returns a JSON-ready dict with "success". Failures carry
the upstream message under "error"; tracebacks never leave this module.
"""

from loguru import logger

from src.bridges.aggregator import RouteAggregator
from src.bridges.exceptions import BridgeError
from src.bridges.lifi.client import LiFiClient
from src.bridges.llama.client import DefiLlamaClient
from src.bridges.protocol_directory import ProtocolDirectory
from src.bridges.risk_scoring import RiskAssessment, score_security
from src.bridges.security import SecurityStatsFetcher
from src.bridges.slug_resolver import SlugResolver
from src.bridges.token_resolver import TokenResolver


def _failure(e: BridgeError) -> dict:
    return {"success": False, "error": str(e)}


class BridgeToolkit:
    """Wires the clients, caches and resolvers for one process."""

    def __init__(
        self,
        lifi: LiFiClient | None = None,
        llama: DefiLlamaClient | None = None,
        directory: ProtocolDirectory | None = None,
    ) -> None:
        self.lifi = lifi or LiFiClient()
        self.llama = llama or DefiLlamaClient()
        self.directory = directory or ProtocolDirectory(self.llama)
        self.tokens = TokenResolver(self.lifi)
        self.security = SecurityStatsFetcher(self.llama, SlugResolver(self.directory))
        self.aggregator = RouteAggregator(self.lifi, self.tokens, self.security)

    async def close(self) -> None:
        await self.lifi.close()
        await self.llama.close()

    async def get_bridge_options(
        self,
        from_chain: str,
        to_chain: str,
        from_token: str,
        to_token: str | None,
        amount: str,
    ) -> dict:
        """Compare the top routes with their risk scores."""
        try:
            options = await self.aggregator.compare(
                from_chain, to_chain, from_token, to_token, amount
            )
        except BridgeError as e:
            return _failure(e)
        return {"success": True, "options": [o.to_dict() for o in options]}

    async def get_bridge_route(
        self,
        from_chain: str,
        to_chain: str,
        from_token: str,
        to_token: str | None,
        amount: str,
    ) -> dict:
        try:
            quote = await self.aggregator.get_route(
                from_chain, to_chain, from_token, to_token, amount
            )
        except BridgeError as e:
            return _failure(e)
        return {"success": True, **quote.to_dict()}

    async def get_security_stats(self, bridge: str) -> dict:
        """Security stats for a bridge plus the risk analysis derived from them."""
        stats = await self.security.fetch_stats(bridge)
        if not stats.available:
            risk = RiskAssessment.unavailable(stats.error or "Security data unavailable")
            return {"success": False, **stats.to_dict(), "riskAnalysis": risk.to_dict()}
        risk = score_security(stats)
        return {"success": True, **stats.to_dict(), "riskAnalysis": risk.to_dict()}

    async def get_token_details(self, chain: str, symbol: str) -> dict:
        try:
            token = await self.tokens.resolve(chain, symbol)
        except BridgeError as e:
            logger.debug(f"[TOKEN] {symbol} on {chain} unresolved: {e}")
            return _failure(e)
        return {"success": True, **token.to_dict()}

    async def get_supported_bridges(self) -> dict:
        try:
            bridges = await self.aggregator.supported_bridges()
        except BridgeError as e:
            return _failure(e)
        return {"success": True, "total": len(bridges), "bridges": bridges}
