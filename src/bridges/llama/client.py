"""DefiLlama API client — protocol directory, per-protocol TVL, hack history.

Free, no key. /protocols is several MB and should be fetched through
ProtocolDirectory, not per request.
"""

from decimal import Decimal, InvalidOperation
from typing import Any

import httpx
from loguru import logger
from pydantic import ValidationError

from config.settings import settings
from src.bridges.exceptions import UpstreamDataError
from src.bridges.http import fetch_json
from src.bridges.llama.models import LlamaHack, LlamaProtocol, LlamaTvlPoint

PROTOCOLS_PATH = "/protocols"
PROTOCOL_PATH = "/protocol/{slug}"
HACKS_PATH = "/hacks"


class DefiLlamaClient:
    """Async HTTP client for the DefiLlama public API."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        directory_timeout: float | None = None,
    ) -> None:
        self._base_url = (base_url or settings.llama_base_url).rstrip("/")
        self._timeout = timeout or settings.llama_timeout_sec
        self._directory_timeout = directory_timeout or settings.llama_directory_timeout_sec
        self._client = httpx.AsyncClient(
            timeout=self._timeout,
            headers={"Accept": "application/json"},
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def get_protocols(self) -> list[LlamaProtocol]:
        """Fetch the full protocol directory (slug + display name)."""
        data = await fetch_json(
            self._client,
            "get",
            f"{self._base_url}{PROTOCOLS_PATH}",
            tag="LLAMA",
            timeout=self._directory_timeout,
        )
        if not isinstance(data, list):
            raise UpstreamDataError("Protocol directory is not a list")

        protocols = []
        skipped = 0
        for item in data:
            try:
                protocols.append(LlamaProtocol.model_validate(item))
            except ValidationError:
                skipped += 1
        if skipped:
            logger.debug(f"[LLAMA] Skipped {skipped} directory entries without slug")
        return protocols

    async def get_protocol_tvl(self, slug: str) -> Decimal | None:
        """Fetch TVL in USD for a protocol slug. None when the payload has no TVL."""
        data = await fetch_json(
            self._client,
            "get",
            f"{self._base_url}{PROTOCOL_PATH.format(slug=slug)}",
            tag="LLAMA",
            timeout=self._timeout,
        )
        if not isinstance(data, dict):
            raise UpstreamDataError(f"Protocol payload for {slug} is not an object")
        return extract_tvl(data)

    async def get_hacks(self) -> list[LlamaHack]:
        """Fetch the global incident history."""
        data = await fetch_json(
            self._client,
            "get",
            f"{self._base_url}{HACKS_PATH}",
            tag="LLAMA",
            timeout=self._timeout,
        )
        if not isinstance(data, list):
            raise UpstreamDataError("Hacks payload is not a list")

        hacks = []
        for item in data:
            try:
                hacks.append(LlamaHack.model_validate(item))
            except ValidationError:
                continue
        return hacks


def _to_decimal(val: Any) -> Decimal | None:
    if val is None or isinstance(val, bool):
        return None
    try:
        d = Decimal(str(val))
    except (InvalidOperation, ValueError):
        return None
    if not d.is_finite():
        return None
    return d


def extract_tvl(data: dict) -> Decimal | None:
    """Pull a USD TVL figure out of a /protocol payload.

    Two shapes exist in the wild: a time series under "tvl"
    ([{date, totalLiquidityUSD}, ...]) and a per-chain mapping under
    "currentChainTvls". Both are summed. Neither present means unknown,
    which is not the same as zero.
    """
    tvl = data.get("tvl")
    if isinstance(tvl, list) and tvl:
        try:
            points = [LlamaTvlPoint.model_validate(p) for p in tvl]
        except ValidationError as e:
            raise UpstreamDataError("Malformed TVL series") from e
        return sum((p.totalLiquidityUSD for p in points), Decimal(0))

    # Some adapters report a bare number
    scalar = _to_decimal(tvl) if not isinstance(tvl, (list, dict)) else None
    if scalar is not None:
        return scalar

    chain_tvls = data.get("currentChainTvls")
    if isinstance(chain_tvls, dict) and chain_tvls:
        values = [_to_decimal(v) for v in chain_tvls.values()]
        numeric = [v for v in values if v is not None]
        if numeric:
            return sum(numeric, Decimal(0))

    return None
