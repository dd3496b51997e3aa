"""Security stats for a bridge: TVL and recent incidents from DefiLlama.

The TVL lookup and the incident lookup run concurrently and fail
independently. Only when both fail is the result marked unavailable.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal

from loguru import logger

from config.settings import settings
from src.bridges.llama.client import DefiLlamaClient
from src.bridges.llama.models import LlamaHack
from src.bridges.slug_resolver import SlugResolver

UNAVAILABLE_MESSAGE = "Security data unavailable"


@dataclass(frozen=True)
class Incident:
    date: datetime
    classification: str | None
    amount_lost_usd: Decimal | None

    def to_dict(self) -> dict:
        return {
            "date": self.date.date().isoformat(),
            "classification": self.classification,
            "amountLostUSD": str(self.amount_lost_usd) if self.amount_lost_usd is not None else None,
        }


@dataclass
class SecurityStats:
    bridge: str
    protocol_slug: str
    tvl_usd: Decimal | None = None  # None = unknown, never zero
    recent_incidents: list[Incident] = field(default_factory=list)
    available: bool = True
    error: str | None = None

    def to_dict(self) -> dict:
        data = {
            "bridge": self.bridge,
            "protocolSlug": self.protocol_slug,
            "tvlUSD": str(self.tvl_usd) if self.tvl_usd is not None else "unknown",
            "recentIncidentCount": len(self.recent_incidents),
            "recentIncidents": [i.to_dict() for i in self.recent_incidents],
            "available": self.available,
        }
        if self.error:
            data["error"] = self.error
        return data


def years_before(now: datetime, years: int) -> datetime:
    """Same calendar day `years` earlier; Feb 29 maps to Feb 28."""
    try:
        return now.replace(year=now.year - years)
    except ValueError:
        return now.replace(year=now.year - years, day=28)


def filter_recent_incidents(
    hacks: list[LlamaHack],
    slug: str,
    *,
    now: datetime,
    years: int,
) -> list[Incident]:
    """Incidents whose name mentions the slug and that fall inside the window, newest first."""
    needle = slug.lower()
    cutoff = years_before(now, years).timestamp()
    recent = [
        Incident(
            date=datetime.fromtimestamp(h.date, UTC),
            classification=h.classification,
            amount_lost_usd=h.amount,
        )
        for h in hacks
        if needle in h.name.lower() and h.date >= cutoff
    ]
    recent.sort(key=lambda i: i.date, reverse=True)
    return recent


class SecurityStatsFetcher:
    """Resolves a bridge key to a slug and gathers its security data."""

    def __init__(
        self,
        llama: DefiLlamaClient,
        resolver: SlugResolver,
        *,
        lookback_years: int | None = None,
    ) -> None:
        self._llama = llama
        self._resolver = resolver
        self._lookback_years = (
            settings.incident_lookback_years if lookback_years is None else lookback_years
        )

    async def fetch_stats(self, bridge_key: str, *, now: datetime | None = None) -> SecurityStats:
        slug = await self._resolver.resolve_slug(bridge_key)
        now = now or datetime.now(UTC)

        tvl_res, hacks_res = await asyncio.gather(
            self._llama.get_protocol_tvl(slug),
            self._llama.get_hacks(),
            return_exceptions=True,
        )
        tvl_failed = isinstance(tvl_res, Exception)
        hacks_failed = isinstance(hacks_res, Exception)

        if tvl_failed and hacks_failed:
            logger.warning(
                f"[SECURITY] Both lookups failed for {bridge_key} ({slug}): "
                f"tvl={tvl_res}, hacks={hacks_res}"
            )
            return SecurityStats(
                bridge=bridge_key,
                protocol_slug=slug,
                available=False,
                error=UNAVAILABLE_MESSAGE,
            )

        error = None
        if tvl_failed:
            logger.debug(f"[SECURITY] TVL lookup failed for {slug}: {tvl_res}")
            tvl = None
        else:
            tvl = tvl_res

        if hacks_failed:
            logger.debug(f"[SECURITY] Hacks lookup failed for {slug}: {hacks_res}")
            incidents = []
            error = "Incident history unavailable"
        else:
            incidents = filter_recent_incidents(
                hacks_res, slug, now=now, years=self._lookback_years
            )

        return SecurityStats(
            bridge=bridge_key,
            protocol_slug=slug,
            tvl_usd=tvl,
            recent_incidents=incidents,
            error=error,
        )
