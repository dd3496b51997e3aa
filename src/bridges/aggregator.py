"""Route comparison: resolve tokens, fetch ranked routes, join fees with risk.

Flow for compare():
1. normalize both chains
2. resolve symbol-shaped tokens to addresses (concurrently, independently)
3. fetch top-N routes from Li.Fi, amount passed verbatim in atomic units
4. per route, concurrently: security stats -> risk score, fee split
5. return options in Li.Fi's ranking order

Steps 1-3 are fatal and raise AggregationError. A failure in step 4 only
degrades that route's risk to UNAVAILABLE.
"""

import asyncio
from dataclasses import dataclass, field
from decimal import Decimal

from loguru import logger

from src.bridges.chains import is_address, normalize_chain
from src.bridges.exceptions import AggregationError, BridgeError
from src.bridges.fees import fee_details, gas_details, split_fees, total_gas_usd
from src.bridges.lifi.client import LiFiClient
from src.bridges.lifi.models import LiFiFeeCost, LiFiRoute
from src.bridges.risk_scoring import RiskAssessment, score_security
from src.bridges.security import SecurityStats, SecurityStatsFetcher
from src.bridges.token_resolver import TokenResolver


def _usd(value: Decimal | None) -> str | None:
    return f"{value:.4f}" if value is not None else None


@dataclass
class RouteOption:
    bridge_key: str
    amount_out: str | None
    gas_cost_usd: Decimal | None
    protocol_fee_usd: Decimal
    aggregator_fee_usd: Decimal
    estimated_duration_seconds: int | None
    risk: RiskAssessment
    security: SecurityStats | None = None
    fees: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        tvl = None
        if self.security is not None:
            tvl = str(self.security.tvl_usd) if self.security.tvl_usd is not None else "unknown"
        return {
            "bridge": self.bridge_key,
            "amountOut": self.amount_out,
            "gasCostUSD": _usd(self.gas_cost_usd),
            "protocolFeeUSD": _usd(self.protocol_fee_usd),
            "aggregatorFeeUSD": _usd(self.aggregator_fee_usd),
            "executionDurationSeconds": self.estimated_duration_seconds,
            "riskScore": self.risk.score,
            "securityVerdict": self.risk.verdict.value,
            "securityReason": list(self.risk.explanation),
            "tvlUSD": tvl,
            "feeDetails": self.fees,
        }


@dataclass
class RouteQuote:
    """Single best route from the quote endpoint."""

    bridge_key: str
    amount_in: str
    amount_out: str | None
    token_address: str | None
    gas_cost_usd: Decimal
    protocol_fee_usd: Decimal
    aggregator_fee_usd: Decimal
    estimated_duration_seconds: int | None
    fees: list[dict] = field(default_factory=list)
    gas: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "bridgeName": self.bridge_key,
            "amountIn": self.amount_in,
            "amountOut": self.amount_out,
            "tokenAddress": self.token_address,
            "gasCostUSD": _usd(self.gas_cost_usd),
            "protocolFeeUSD": _usd(self.protocol_fee_usd),
            "aggregatorFeeUSD": _usd(self.aggregator_fee_usd),
            "executionDurationSeconds": self.estimated_duration_seconds,
            "feeDetails": self.fees,
            "gasDetails": self.gas,
        }


def validate_amount(amount: str | int) -> str:
    """Atomic amounts must be positive integers; returned as a string, unchanged."""
    text = str(amount).strip()
    if not text.isdecimal() or int(text) <= 0:
        raise AggregationError(
            f"Amount must be a positive integer in atomic units, got '{amount}'"
        )
    return text


def route_bridge_key(route: LiFiRoute) -> str | None:
    """The bridge is the tool of the route's first step."""
    if not route.steps:
        return None
    return route.steps[0].tool_key


def route_fees(route: LiFiRoute) -> list[LiFiFeeCost]:
    fees: list[LiFiFeeCost] = []
    for step in route.steps:
        if step.estimate and step.estimate.feeCosts:
            fees.extend(step.estimate.feeCosts)
    return fees


def route_duration(route: LiFiRoute) -> int | None:
    durations = [
        s.estimate.executionDuration
        for s in route.steps
        if s.estimate and s.estimate.executionDuration is not None
    ]
    if not durations:
        return None
    return int(sum(durations))


class RouteAggregator:
    """Compares bridge routes and attaches a risk verdict to each."""

    def __init__(
        self,
        lifi: LiFiClient,
        tokens: TokenResolver,
        security: SecurityStatsFetcher,
    ) -> None:
        self._lifi = lifi
        self._tokens = tokens
        self._security = security

    async def _resolve_address(self, chain: int | str, token: str) -> str:
        if is_address(token):
            return token
        resolved = await self._tokens.resolve(chain, token)
        return resolved.address

    async def _resolve_pair(
        self,
        from_chain: int | str,
        to_chain: int | str,
        from_token: str,
        to_token: str,
    ) -> tuple[str, str]:
        results = await asyncio.gather(
            self._resolve_address(from_chain, from_token),
            self._resolve_address(to_chain, to_token),
            return_exceptions=True,
        )
        addresses = []
        for raw, chain, res in zip((from_token, to_token), (from_chain, to_chain), results):
            if isinstance(res, BridgeError):
                # Li.Fi accepts symbols too; let the route request decide
                logger.info(f"[ROUTES] Could not resolve {raw} on {chain}, sending symbol: {res}")
                addresses.append(raw)
            elif isinstance(res, Exception):
                raise AggregationError(str(res)) from res
            else:
                addresses.append(res)
        return addresses[0], addresses[1]

    async def assess(self, bridge_key: str) -> tuple[SecurityStats, RiskAssessment]:
        """Security stats and risk verdict for a single bridge."""
        stats = await self._security.fetch_stats(bridge_key)
        if not stats.available:
            return stats, RiskAssessment.unavailable(stats.error or "Security data unavailable")
        return stats, score_security(stats)

    async def _build_option(self, route: LiFiRoute) -> RouteOption:
        bridge_key = route_bridge_key(route)
        fees = route_fees(route)
        breakdown = split_fees(fees)
        option = RouteOption(
            bridge_key=bridge_key or "unknown",
            amount_out=route.toAmount,
            gas_cost_usd=route.gasCostUSD,
            protocol_fee_usd=breakdown.protocol_fee_usd,
            aggregator_fee_usd=breakdown.aggregator_fee_usd,
            estimated_duration_seconds=route_duration(route),
            risk=RiskAssessment.unavailable("Route has no bridge step"),
            fees=fee_details(fees),
        )
        if bridge_key is None:
            return option

        try:
            option.security, option.risk = await self.assess(bridge_key)
        except Exception as e:
            logger.warning(f"[ROUTES] Risk assessment failed for {bridge_key}: {e}")
            option.risk = RiskAssessment.unavailable(f"Security data unavailable: {e}")
        return option

    async def compare(
        self,
        from_chain: str | int | None,
        to_chain: str | int | None,
        from_token: str,
        to_token: str | None,
        amount: str | int,
    ) -> list[RouteOption]:
        """Top routes with fees and risk, in the provider's ranking order."""
        src_chain = normalize_chain(from_chain)
        dst_chain = normalize_chain(to_chain)
        atomic = validate_amount(amount)
        to_token = to_token or from_token

        from_addr, to_addr = await self._resolve_pair(src_chain, dst_chain, from_token, to_token)

        try:
            routes = await self._lifi.get_routes(src_chain, dst_chain, from_addr, to_addr, atomic)
        except BridgeError as e:
            logger.warning(f"[ROUTES] Route fetch failed {src_chain} -> {dst_chain}: {e}")
            raise AggregationError(str(e)) from e

        options = await asyncio.gather(*(self._build_option(r) for r in routes))
        logger.info(
            f"[ROUTES] {src_chain} -> {dst_chain} {from_token}: "
            f"{', '.join(f'{o.bridge_key}={o.risk.verdict.value}' for o in options) or 'no routes'}"
        )
        return list(options)

    async def get_route(
        self,
        from_chain: str | int | None,
        to_chain: str | int | None,
        from_token: str,
        to_token: str | None,
        amount: str | int,
    ) -> RouteQuote:
        """Single best quote, with fee and gas breakdown. No risk scoring."""
        src_chain = normalize_chain(from_chain)
        dst_chain = normalize_chain(to_chain)
        atomic = validate_amount(amount)

        try:
            quote = await self._lifi.get_quote(
                src_chain, dst_chain, from_token, to_token or from_token, atomic
            )
        except BridgeError as e:
            raise AggregationError(str(e)) from e

        estimate = quote.estimate
        fees = (estimate.feeCosts if estimate else None) or []
        gas = (estimate.gasCosts if estimate else None) or []
        breakdown = split_fees(fees)
        duration = estimate.executionDuration if estimate else None

        return RouteQuote(
            bridge_key=quote.tool_key or "unknown",
            amount_in=atomic,
            amount_out=estimate.toAmount if estimate else None,
            token_address=quote.action.fromToken.address if quote.action and quote.action.fromToken else None,
            gas_cost_usd=total_gas_usd(gas),
            protocol_fee_usd=breakdown.protocol_fee_usd,
            aggregator_fee_usd=breakdown.aggregator_fee_usd,
            estimated_duration_seconds=int(duration) if duration is not None else None,
            fees=fee_details(fees),
            gas=gas_details(gas),
        )

    async def supported_bridges(self) -> list[str]:
        try:
            bridges = await self._lifi.get_bridges()
        except BridgeError as e:
            raise AggregationError(str(e)) from e
        return [b.name for b in bridges]
