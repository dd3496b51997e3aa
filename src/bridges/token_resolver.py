"""Token symbol -> address/decimals resolution via Li.Fi, with static fallback.

Li.Fi's symbol lookup is occasionally unreliable for bridged variants
("USDT" on Arbitrum may need "USDT0" or "bridged-usdt"). A small table of
known-good addresses keeps the common cases working when the lookup fails.
"""

from dataclasses import dataclass
from decimal import Decimal

from loguru import logger

from src.bridges.chains import normalize_chain
from src.bridges.exceptions import BridgeError, ResolutionError
from src.bridges.lifi.client import LiFiClient

FALLBACK_PRICE = "unknown (fallback)"

# (chain_id, SYMBOL) -> (address, decimals)
FALLBACK_TOKENS: dict[tuple[int | str, str], tuple[str, int]] = {
    (42161, "USDT"): ("0xFd086bC7CD5C481DCC9C85ebE478A1C0b69FCbb9", 6),
    (42161, "USDC"): ("0xaf88d065e77c8cC2239327C5EDb3A432268e5831", 6),
    (10, "USDT"): ("0x94b008aA00579c1307B0EF2c499a98a359659952", 6),
}


@dataclass
class ResolvedToken:
    symbol: str
    address: str
    decimals: int
    chain_id: int | str
    price_usd: Decimal | str  # str only for the "unknown" markers

    def to_dict(self) -> dict:
        price = self.price_usd if isinstance(self.price_usd, str) else str(self.price_usd)
        return {
            "symbol": self.symbol,
            "address": self.address,
            "decimals": self.decimals,
            "chainId": self.chain_id,
            "priceUSD": price,
        }


def lookup_fallback(chain_id: int | str, symbol: str) -> ResolvedToken | None:
    entry = FALLBACK_TOKENS.get((chain_id, symbol.upper()))
    if entry is None:
        return None
    address, decimals = entry
    return ResolvedToken(
        symbol=symbol.upper(),
        address=address,
        decimals=decimals,
        chain_id=chain_id,
        price_usd=FALLBACK_PRICE,
    )


class TokenResolver:
    """Resolves a symbol on a chain. Not cached: one lookup per request."""

    def __init__(self, lifi: LiFiClient) -> None:
        self._lifi = lifi

    async def resolve(self, chain: str | int | None, symbol: str) -> ResolvedToken:
        """Resolve symbol on chain, falling back to the static table.

        Raises ResolutionError carrying the upstream message when neither
        the lookup nor the table knows the token.
        """
        chain_id = normalize_chain(chain)
        try:
            token = await self._lifi.get_token(chain_id, symbol)
        except BridgeError as e:
            fallback = lookup_fallback(chain_id, symbol)
            if fallback:
                logger.info(f"[TOKEN] Lookup failed for {symbol} on {chain_id}, using fallback address")
                return fallback
            raise ResolutionError(str(e)) from e

        return ResolvedToken(
            symbol=token.symbol or symbol.upper(),
            address=token.address,
            decimals=token.decimals,
            chain_id=token.chainId if token.chainId is not None else chain_id,
            price_usd=token.priceUSD if token.priceUSD is not None else "unknown",
        )
