"""Split a route's fee line items into aggregator and protocol subtotals.

Aggregator fees are the route provider's own charge, recognised by name.
Everything else (LP fee, relayer, destination gas) belongs to the bridge.
Amounts are summed in USD regardless of the token they are paid in.
"""

from dataclasses import dataclass
from decimal import Decimal

from config.settings import settings
from src.bridges.lifi.models import LiFiFeeCost, LiFiGasCost


@dataclass(frozen=True)
class FeeBreakdown:
    protocol_fee_usd: Decimal
    aggregator_fee_usd: Decimal

    @property
    def total_usd(self) -> Decimal:
        return self.protocol_fee_usd + self.aggregator_fee_usd


def is_aggregator_fee(fee: LiFiFeeCost, marker: str) -> bool:
    return marker.lower() in fee.name.lower()


def split_fees(fees: list[LiFiFeeCost], *, marker: str | None = None) -> FeeBreakdown:
    marker = marker or settings.aggregator_fee_marker
    protocol = Decimal(0)
    aggregator = Decimal(0)
    for fee in fees:
        amount = fee.amountUSD or Decimal(0)
        if is_aggregator_fee(fee, marker):
            aggregator += amount
        else:
            protocol += amount
    return FeeBreakdown(protocol_fee_usd=protocol, aggregator_fee_usd=aggregator)


def total_gas_usd(gas_costs: list[LiFiGasCost]) -> Decimal:
    return sum((g.amountUSD or Decimal(0) for g in gas_costs), Decimal(0))


def fee_details(fees: list[LiFiFeeCost]) -> list[dict]:
    """Fee line items as plain dicts, for consumers explaining a fee."""
    return [
        {
            "name": f.name,
            "amount": f.amount,
            "symbol": f.token.symbol if f.token else None,
            "amountUSD": str(f.amountUSD) if f.amountUSD is not None else None,
        }
        for f in fees
    ]


def gas_details(gas_costs: list[LiFiGasCost]) -> list[dict]:
    return [
        {
            "type": g.type,
            "amountUSD": str(g.amountUSD) if g.amountUSD is not None else None,
            "symbol": g.token.symbol if g.token else None,
            "limit": g.limit,
        }
        for g in gas_costs
    ]
